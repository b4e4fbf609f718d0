from __future__ import annotations

from ._utils import matches_prefix, package_root, parse_imports, source_files


def test_rich_is_only_imported_by_the_console() -> None:
    root = package_root()
    offenders: list[str] = []

    for file_path in source_files(root):
        rel = file_path.relative_to(root)
        if rel.as_posix() == "output/console.py":
            continue
        for item in parse_imports(file_path):
            if matches_prefix(item.module, "rich"):
                offenders.append(f"{rel}:{item.line}: direct rich import '{item.module}'")

    assert not offenders, "Direct rich usage violations:\n" + "\n".join(offenders)
