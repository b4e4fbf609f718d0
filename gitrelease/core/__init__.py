"""Core types: results, exit codes and the release manifest."""

from .config import ConfigError, Manifest, ProjectConfig, ReleaseConfig, load_manifest
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "Manifest",
    "ProjectConfig",
    "ReleaseConfig",
    "load_manifest",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
