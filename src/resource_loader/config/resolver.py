"""Configuration resolution with precedence handling.

Configuration from multiple sources is merged in this order:
Programmatic > Environment > Project file > Defaults
"""

from collections.abc import Mapping
import logging
import os
from pathlib import Path
from typing import Any, Literal, NamedTuple

from .file_loader import FileConfigLoader
from .schema import ENV_PREFIX, LoaderSettings

log = logging.getLogger(__name__)

ConfigOrigin = Literal["programmatic", "env", "file", "default"]


class ResolvedSettings(NamedTuple):
    """Validated settings plus the origin of every field."""

    charset: str
    marker: str
    archive_suffixes: tuple[str, ...]

    origin: Mapping[str, ConfigOrigin]

    def with_overrides(self, **overrides: object) -> "ResolvedSettings":
        """Return a copy with programmatic overrides applied and validated.

        Unknown fields are ignored.
        """
        values = self._asdict()
        origin = dict(self.origin)
        values.pop("origin")
        for field, value in overrides.items():
            if field in values:
                values[field] = value
                origin[field] = "programmatic"
        settings = LoaderSettings(**values)
        return ResolvedSettings(**settings.to_dict(), origin=origin)

    def audit(self) -> str:
        """Human-readable report of where each value came from."""
        lines = []
        for field in ("charset", "marker", "archive_suffixes"):
            origin = self.origin.get(field, "default")
            value = getattr(self, field)
            if origin == "env":
                lines.append(f"{field}: env:{ENV_PREFIX}{field.upper()}={value}")
            else:
                lines.append(f"{field}: {origin}:{value}")
        return "\n".join(lines)


class ConfigResolver:
    """Resolves settings from multiple sources with proper precedence."""

    def __init__(self) -> None:
        """Initialize the configuration resolver."""
        self.file_loader = FileConfigLoader()

    def resolve(
        self,
        programmatic: Mapping[str, Any] | None = None,
        *,
        project_root: Path | None = None,
    ) -> ResolvedSettings:
        """Resolve settings from all sources with proper precedence.

        Args:
            programmatic: Programmatic overrides (highest precedence)
            project_root: Directory to search for pyproject.toml

        Returns:
            ResolvedSettings with merged values and source tracking.

        Raises:
            ValueError: If validation fails.
            ConfigFileError: If the project file is malformed.
        """
        origins: dict[str, ConfigOrigin] = {}
        merged: dict[str, Any] = {}

        # Step 1: Start with schema defaults
        for field, info in LoaderSettings.model_fields.items():
            merged[field] = info.get_default(call_default_factory=True)
            origins[field] = "default"

        # Step 2: Apply project file configuration
        project_config = self.file_loader.load_project_config(project_root=project_root)
        self._apply(merged, origins, project_config, "file")

        # Step 3: Apply environment variables
        self._apply(merged, origins, self._load_env(), "env")

        # Step 4: Apply programmatic overrides
        if programmatic:
            self._apply(merged, origins, programmatic, "programmatic")

        # Step 5: Validate the final configuration using Pydantic
        try:
            settings = LoaderSettings(**merged)
        except Exception as e:
            raise ValueError(f"Configuration validation failed: {e}") from e

        log.debug("Resolved settings: %s", dict(origins))
        return ResolvedSettings(**settings.to_dict(), origin=origins)

    @staticmethod
    def _apply(
        merged: dict[str, Any],
        origins: dict[str, ConfigOrigin],
        values: Mapping[str, Any],
        origin: ConfigOrigin,
    ) -> None:
        for field, value in values.items():
            if field in merged:  # Only override known fields
                merged[field] = value
                origins[field] = origin

    @staticmethod
    def _load_env() -> dict[str, str]:
        """Read RESOURCE_LOADER_* variables for known fields (raw strings)."""
        values = {}
        for field in LoaderSettings.model_fields:
            env_var = f"{ENV_PREFIX}{field.upper()}"
            if env_var in os.environ:
                values[field] = os.environ[env_var]
        return values
