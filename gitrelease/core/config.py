"""Typed release manifest loading.

The manifest is a `release.toml` file at the project root. It describes the
project (coordinates and build command), the artifacts the build produces,
the dependency scopes to check, and the release settings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_list, get_str, get_str_list, get_table

__all__ = [
    "ArtifactEntry",
    "ConfigError",
    "DEFAULT_CHECKSUM_GROUPS",
    "DEFAULT_DEPENDENCY_SCOPES",
    "DEFAULT_REPO_PATH",
    "MANIFEST_NAME",
    "Manifest",
    "ProjectConfig",
    "ReleaseConfig",
    "load_manifest",
]

MANIFEST_NAME = "release.toml"

DEFAULT_REPO_PATH = "~/.gitrelease/artifact-repo"
DEFAULT_REMOTE_BRANCH = "master"
DEFAULT_DIGEST_DIR = "build/digest"
DEFAULT_CHECKSUM_GROUPS: tuple[str, ...] = ("archives", "sources")
DEFAULT_DEPENDENCY_SCOPES: tuple[str, ...] = ("compile", "runtime")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the manifest cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Release settings, built once and passed to every step.

    Attributes:
        repo_path: Local clone of the artifact repository.
        artifact_remote: Git URL cloned when `repo_path` does not exist yet.
        public_repo: Publish under `repository/public` (else `private`).
        release_dirty: Allow releasing from a working copy with local changes.
        test_release: Dry run; skip the publish and tag side effects.
        add_checksums: Generate sha1/md5 digests for each artifact.
    """

    repo_path: Path = field(default_factory=lambda: Path(DEFAULT_REPO_PATH).expanduser())
    artifact_remote: str | None = None
    public_repo: bool = True
    release_dirty: bool = False
    test_release: bool = False
    add_checksums: bool = True
    remote_branch: str = DEFAULT_REMOTE_BRANCH
    digest_dir: Path = Path(DEFAULT_DIGEST_DIR)
    checksum_groups: tuple[str, ...] = DEFAULT_CHECKSUM_GROUPS
    dependency_scopes: tuple[str, ...] = DEFAULT_DEPENDENCY_SCOPES

    @property
    def visibility(self) -> str:
        """Path segment of the artifact repository layout."""
        return "public" if self.public_repo else "private"

    @property
    def lock_path(self) -> Path:
        """Lock file guarding the shared artifact repository clone."""
        return self.repo_path.with_name(self.repo_path.name + ".lock")


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Project coordinates and build command."""

    organisation: str
    name: str
    version: str
    build: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ArtifactEntry:
    """A file the build is expected to produce."""

    file: Path
    type: str
    extension: str
    name: str | None = None


@dataclass(frozen=True, slots=True)
class Manifest:
    """Parsed `release.toml`."""

    root: Path
    project: ProjectConfig
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    artifacts: Mapping[str, tuple[ArtifactEntry, ...]] = field(default_factory=dict)
    dependencies: Mapping[str, tuple[str, ...]] = field(default_factory=dict)


class _Invalid(Exception):
    """Raised while walking the manifest; converted to ConfigError."""


def _opt_bool(table: StrDict, key: str, default: bool) -> bool:
    if key not in table:
        return default
    value = table[key]
    if not isinstance(value, bool):
        raise _Invalid(f"[release] {key} must be a boolean")
    return value


def _opt_str_tuple(table: StrDict, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    if key not in table:
        return default
    items = get_str_list(table, key)
    if items is None:
        raise _Invalid(f"[release] {key} must be a list of strings")
    return tuple(items)


def _resolve(root: Path, raw: str) -> Path:
    p = Path(raw).expanduser()
    return p if p.is_absolute() else root / p


def _parse_project(data: StrDict) -> ProjectConfig:
    table = get_table(data, "project")
    if table is None:
        raise _Invalid("missing [project] table")

    version = get_str(table, "version")
    name = get_str(table, "name")
    if version is None:
        raise _Invalid("[project] version is required")
    if name is None:
        raise _Invalid("[project] name is required")

    build: tuple[str, ...] = ()
    if "build" in table:
        cmd = get_str_list(table, "build")
        if not cmd:
            raise _Invalid("[project] build must be a non-empty list of strings")
        build = tuple(cmd)

    return ProjectConfig(
        organisation=get_str(table, "organisation") or name,
        name=name,
        version=version,
        build=build,
    )


def _parse_release(data: StrDict, root: Path) -> ReleaseConfig:
    table = get_table(data, "release") or {}
    defaults = ReleaseConfig()

    repo_path = get_str(table, "repo_path")
    digest_dir = get_str(table, "digest_dir")

    return ReleaseConfig(
        repo_path=_resolve(root, repo_path) if repo_path else defaults.repo_path,
        artifact_remote=get_str(table, "artifact_remote"),
        public_repo=_opt_bool(table, "public_repo", defaults.public_repo),
        release_dirty=_opt_bool(table, "release_dirty", defaults.release_dirty),
        test_release=_opt_bool(table, "test_release", defaults.test_release),
        add_checksums=_opt_bool(table, "add_checksums", defaults.add_checksums),
        remote_branch=get_str(table, "remote_branch") or DEFAULT_REMOTE_BRANCH,
        digest_dir=_resolve(root, digest_dir or DEFAULT_DIGEST_DIR),
        checksum_groups=_opt_str_tuple(table, "checksum_groups", defaults.checksum_groups),
        dependency_scopes=_opt_str_tuple(table, "dependency_scopes", defaults.dependency_scopes),
    )


def _parse_artifacts(data: StrDict, root: Path) -> dict[str, tuple[ArtifactEntry, ...]]:
    table = get_table(data, "artifacts") or {}
    out: dict[str, tuple[ArtifactEntry, ...]] = {}
    for group in table:
        items = get_list(table, group)
        if items is None:
            raise _Invalid(f"[artifacts] {group} must be a list")
        entries: list[ArtifactEntry] = []
        for item in items:
            entry = as_str_dict(item)
            file = get_str(entry, "file") if entry is not None else None
            if entry is None or file is None:
                raise _Invalid(f"[artifacts] {group}: each entry needs a 'file'")
            extension = get_str(entry, "extension") or Path(file).suffix.lstrip(".")
            entries.append(
                ArtifactEntry(
                    file=_resolve(root, file),
                    type=get_str(entry, "type") or extension,
                    extension=extension,
                    name=get_str(entry, "name"),
                )
            )
        out[group] = tuple(entries)
    return out


def _parse_dependencies(data: StrDict) -> dict[str, tuple[str, ...]]:
    table = get_table(data, "dependencies") or {}
    out: dict[str, tuple[str, ...]] = {}
    for scope in table:
        items = get_str_list(table, scope)
        if items is None:
            raise _Invalid(f"[dependencies] {scope} must be a list of strings")
        out[scope] = tuple(items)
    return out


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Manifest not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading manifest: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Manifest root must be a TOML table", path=path))
    return Ok(data)


def load_manifest(path: Path) -> Result[Manifest, ConfigError]:
    """Load and validate a release manifest.

    Relative paths in the manifest are resolved against its directory.

    Args:
        path: Path to release.toml

    Returns:
        Ok(Manifest) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    data = result.value
    root = path.parent.resolve()
    try:
        return Ok(
            Manifest(
                root=root,
                project=_parse_project(data),
                release=_parse_release(data, root),
                artifacts=_parse_artifacts(data, root),
                dependencies=_parse_dependencies(data),
            )
        )
    except _Invalid as e:
        return Err(ConfigError(str(e), path=path))
