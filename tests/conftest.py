"""
Global test configuration and shared fixtures.
"""

from collections.abc import Callable, Mapping
import logging
import os
from pathlib import Path
import zipfile

import pytest


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_loader_env(request, monkeypatch):
    """Ensure a clean RESOURCE_LOADER_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("RESOURCE_LOADER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def neutral_project_dir(monkeypatch, tmp_path):
    """Run each test from an empty directory.

    Prevents the settings resolver from picking up a real pyproject.toml.
    """
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


# --- Backing Store Builders ---
@pytest.fixture
def make_tree(tmp_path) -> Callable[..., Path]:
    """Create a directory tree from ``{relative name: content}``.

    Names ending in ``/`` create empty directories.
    """

    def _make(files: Mapping[str, str | bytes], root: str = "tree") -> Path:
        base = tmp_path / root
        base.mkdir(parents=True, exist_ok=True)
        for name, content in files.items():
            target = base / name
            if name.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return base

    return _make


@pytest.fixture
def make_zip(tmp_path) -> Callable[..., Path]:
    """Create a zip archive from ``{entry name: content}`` in insertion order.

    Names ending in ``/`` become directory entries.
    """

    def _make(entries: Mapping[str, str | bytes], name: str = "archive.zip") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w") as zf:
            for entry, content in entries.items():
                zf.writestr(entry, content)
        return path

    return _make


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def verbose_library_logging():
    """Let caplog see the library's debug records."""
    logging.getLogger("resource_loader").setLevel(logging.DEBUG)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Loaders combined over real directories and archives",
        "allow_env_pollution: Keep RESOURCE_LOADER_* variables from the real environment",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)
