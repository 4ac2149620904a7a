"""Settings resolution: precedence, validation and origin tracking."""

import pydantic
import pytest

from resource_loader.config import ConfigResolver, LoaderSettings, resolve_settings
from resource_loader.config.schema import DEFAULT_ARCHIVE_SUFFIXES
from resource_loader.exceptions import ConfigFileError


@pytest.fixture
def project(tmp_path):
    """A project directory whose pyproject.toml content is set per test."""
    root = tmp_path / "project"
    root.mkdir()

    def _write(text):
        (root / "pyproject.toml").write_text(text, encoding="utf-8")
        return root

    return _write


@pytest.mark.unit
class TestPrecedence:
    def test_defaults(self):
        settings = resolve_settings()
        assert settings.charset == "utf-8"
        assert settings.marker == "META-INF/"
        assert settings.archive_suffixes == DEFAULT_ARCHIVE_SUFFIXES
        assert set(settings.origin.values()) == {"default"}

    def test_project_file(self, project):
        root = project('[tool.resource_loader]\nmarker = "EGG-INFO/"\n')
        settings = resolve_settings(project_root=root)
        assert settings.marker == "EGG-INFO/"
        assert settings.origin["marker"] == "file"

    def test_project_file_found_from_subdirectory(self, project):
        root = project('[tool.resource_loader]\ncharset = "latin-1"\n')
        nested = root / "src" / "pkg"
        nested.mkdir(parents=True)
        assert resolve_settings(project_root=nested).charset == "iso8859-1"

    def test_env_beats_project_file(self, project, monkeypatch):
        root = project('[tool.resource_loader]\nmarker = "EGG-INFO/"\n')
        monkeypatch.setenv("RESOURCE_LOADER_MARKER", "dist-info/")
        settings = resolve_settings(project_root=root)
        assert settings.marker == "dist-info/"
        assert settings.origin["marker"] == "env"

    def test_programmatic_beats_env(self, monkeypatch):
        monkeypatch.setenv("RESOURCE_LOADER_MARKER", "dist-info/")
        settings = resolve_settings({"marker": "x/"})
        assert settings.marker == "x/"
        assert settings.origin["marker"] == "programmatic"

    def test_unknown_keys_are_ignored(self, project):
        root = project('[tool.resource_loader]\ncolor = "blue"\n')
        settings = resolve_settings({"size": 3}, project_root=root)
        assert "color" not in settings.origin
        assert "size" not in settings.origin

    def test_missing_section_means_defaults(self, project):
        root = project('[project]\nname = "demo"\n')
        assert resolve_settings(project_root=root).origin["marker"] == "default"


@pytest.mark.unit
class TestValidation:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("zip, .JAR", (".zip", ".jar")),
            ("whl,,pyz", (".whl", ".pyz")),
            ([".Egg"], (".egg",)),
        ],
    )
    def test_archive_suffixes_are_normalized(self, raw, expected):
        assert resolve_settings({"archive_suffixes": raw}).archive_suffixes == expected

    def test_suffixes_from_env_are_comma_separated(self, monkeypatch):
        monkeypatch.setenv("RESOURCE_LOADER_ARCHIVE_SUFFIXES", "zip,whl")
        assert resolve_settings().archive_suffixes == (".zip", ".whl")

    def test_charset_is_canonicalized(self):
        assert resolve_settings({"charset": "UTF8"}).charset == "utf-8"

    def test_unknown_charset(self):
        with pytest.raises(ValueError, match="Configuration validation failed"):
            resolve_settings({"charset": "no-such-codec"})

    def test_empty_marker(self):
        with pytest.raises(ValueError):
            resolve_settings({"marker": ""})

    def test_malformed_project_file(self, project):
        root = project("[tool.resource_loader\nmarker = ")
        with pytest.raises(ConfigFileError) as excinfo:
            resolve_settings(project_root=root)
        assert excinfo.value.file_path.name == "pyproject.toml"

    def test_section_must_be_a_table(self, project):
        root = project('[tool]\nresource_loader = "yes"\n')
        with pytest.raises(ConfigFileError, match="must be a table"):
            resolve_settings(project_root=root)

    def test_settings_model_is_frozen(self):
        settings = LoaderSettings()
        with pytest.raises(pydantic.ValidationError):
            settings.marker = "other/"


@pytest.mark.unit
class TestResolvedSettings:
    def test_with_overrides(self):
        base = resolve_settings()
        changed = base.with_overrides(marker="EGG-INFO/", unknown=1)
        assert changed.marker == "EGG-INFO/"
        assert changed.origin["marker"] == "programmatic"
        assert base.marker == "META-INF/"

    def test_with_overrides_validates(self):
        with pytest.raises(ValueError):
            resolve_settings().with_overrides(charset="no-such-codec")

    def test_audit_names_every_source(self, project, monkeypatch):
        root = project('[tool.resource_loader]\ncharset = "ascii"\n')
        monkeypatch.setenv("RESOURCE_LOADER_MARKER", "EGG-INFO/")
        report = ConfigResolver().resolve(
            {"archive_suffixes": ".zip"}, project_root=root
        ).audit()
        assert report.splitlines() == [
            "charset: file:ascii",
            "marker: env:RESOURCE_LOADER_MARKER=EGG-INFO/",
            "archive_suffixes: programmatic:('.zip',)",
        ]
