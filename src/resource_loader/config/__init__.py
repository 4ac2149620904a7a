"""Configuration for resource loading.

Settings are resolved once with the precedence
Programmatic > Environment (``RESOURCE_LOADER_*``) > ``[tool.resource_loader]``
in pyproject.toml > Defaults.

Example:
    settings = resolve_settings()
    settings = resolve_settings({"marker": "EGG-INFO/"})
    print(settings.audit())
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .file_loader import FileConfigLoader
from .resolver import ConfigOrigin, ConfigResolver, ResolvedSettings
from .schema import ENV_PREFIX, LoaderSettings

_resolver = ConfigResolver()


def resolve_settings(
    programmatic: Mapping[str, Any] | None = None,
    *,
    project_root: Path | None = None,
) -> ResolvedSettings:
    """Resolve settings from all sources with proper precedence.

    Raises:
        ValueError: If a value fails validation.
        ConfigFileError: If pyproject.toml exists but is malformed.
    """
    return _resolver.resolve(programmatic, project_root=project_root)


__all__ = [
    "ENV_PREFIX",
    "ConfigOrigin",
    "ConfigResolver",
    "FileConfigLoader",
    "LoaderSettings",
    "ResolvedSettings",
    "resolve_settings",
]
