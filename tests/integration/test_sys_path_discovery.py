"""End-to-end discovery over a patched interpreter search path."""

import sys

import pytest

from resource_loader import (
    AntLoader,
    PackageLoader,
    RegexFilter,
    RegexLoader,
    SearchPathLoader,
    resolve_settings,
)


def names(enumerator):
    return [r.name for r in enumerator]


@pytest.fixture
def search_path(make_tree, make_zip, monkeypatch):
    """sys.path holding a plugin directory and a wheel."""
    directory = make_tree(
        {"plugins/alpha.cfg": "alpha", "plugins/nested/beta.cfg": "beta", "plugins/notes.md": ""},
        root="site",
    )
    wheel = make_zip(
        {
            "demo-1.0.dist-info/METADATA": "Name: demo",
            "plugins/gamma.cfg": "gamma",
        },
        name="demo-1.0-py3-none-any.whl",
    )
    monkeypatch.setattr(sys, "path", [str(directory), str(wheel)])
    return directory, wheel


@pytest.mark.integration
def test_glob_across_directory_and_wheel(search_path):
    resources = list(AntLoader().load("plugins/**/*.cfg"))
    assert [r.name for r in resources] == [
        "plugins/alpha.cfg",
        "plugins/nested/beta.cfg",
        "plugins/gamma.cfg",
    ]
    assert [r.read_bytes() for r in resources] == [b"alpha", b"beta", b"gamma"]
    assert resources[2].location.startswith("zip:file:///")


@pytest.mark.integration
def test_package_lookup(search_path):
    assert names(PackageLoader().load("plugins.nested")) == ["plugins/nested/beta.cfg"]


@pytest.mark.integration
def test_regex_over_every_root_uses_marker(search_path):
    assert names(RegexLoader().load(r".*\.cfg")) == ["plugins/alpha.cfg", "plugins/nested/beta.cfg"]

    settings = resolve_settings({"marker": "demo-1.0.dist-info/"})
    loader = RegexLoader(SearchPathLoader(settings=settings))
    assert names(loader.load(r".*\.cfg")) == [
        "plugins/alpha.cfg",
        "plugins/nested/beta.cfg",
        "plugins/gamma.cfg",
    ]


@pytest.mark.integration
def test_marker_from_environment(search_path, monkeypatch):
    monkeypatch.setenv("RESOURCE_LOADER_MARKER", "demo-1.0.dist-info/METADATA")
    found = names(SearchPathLoader().load("", RegexFilter(r".*METADATA")))
    assert found == ["demo-1.0.dist-info/METADATA"]


@pytest.mark.integration
def test_first_match_only(search_path):
    resource = AntLoader().load_one("plugins/*.cfg")
    assert resource.name == "plugins/alpha.cfg"
    assert AntLoader().load_one("plugins/*.yaml") is None
