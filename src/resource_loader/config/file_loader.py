"""Project file configuration loading.

Settings may be kept in the ``[tool.resource_loader]`` table of the nearest
``pyproject.toml``.
"""

from pathlib import Path
import tomllib
from typing import Any

from ..exceptions import ConfigFileError

CONFIG_TOOL_NAME = "resource_loader"


class FileConfigLoader:
    """Loads configuration from the project's pyproject.toml."""

    def load_project_config(self, project_root: Path | None = None) -> dict[str, Any]:
        """Load configuration from pyproject.toml in the project root.

        Args:
            project_root: Directory to search for pyproject.toml. If None,
                         searches current directory and parents.

        Returns:
            Dictionary of configuration values from the file.
            Empty dict if file doesn't exist or has no resource_loader section.

        Raises:
            ConfigFileError: If file exists but cannot be parsed or the section
                is not a table.
        """
        pyproject_path = self._find_pyproject_toml(project_root)
        if not pyproject_path:
            return {}

        try:
            with Path(pyproject_path).open(mode="rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(
                pyproject_path, f"Failed to parse TOML: {e}", cause=e
            ) from e

        section = data.get("tool", {}).get(CONFIG_TOOL_NAME, {})
        if not isinstance(section, dict):
            raise ConfigFileError(
                pyproject_path, f"[tool.{CONFIG_TOOL_NAME}] must be a table"
            )
        return dict(section)

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        """Find pyproject.toml by searching up the directory tree.

        Args:
            start_dir: Directory to start searching from. If None, uses current directory.

        Returns:
            Path to pyproject.toml if found, None otherwise.
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        while True:
            pyproject_path = current / "pyproject.toml"
            if pyproject_path.is_file():
                return pyproject_path
            if current == current.parent:
                return None
            current = current.parent
