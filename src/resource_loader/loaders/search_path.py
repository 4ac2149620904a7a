"""Loader over a search path of directories and zip archives.

A search path is an ordered list of roots, ``sys.path`` by default. Loading
a path asks every root whether it holds that path, then walks the matching
roots one after another as a single lazy sequence.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import dataclasses
import logging
from pathlib import Path
import sys
from typing import TYPE_CHECKING, NamedTuple
import zipfile

from .. import uris
from ..config import resolve_settings
from ..config.schema import DEFAULT_ARCHIVE_SUFFIXES
from ..exceptions import EnumerationStateError, ResourceIOError
from ..filters import ALWAYS
from .archive import ArchiveEnumerator, open_archive
from .base import Loader, ResourceEnumerator, strip_slashes
from .file import FileLoader

if TYPE_CHECKING:
    from ..config import ResolvedSettings
    from ..filters import Filter
    from ..resource import Resource

log = logging.getLogger(__name__)


class LocatedRoot(NamedTuple):
    """A location at which a search-path root holds the requested path."""

    scheme: str
    location: str


# --- Root kinds ---


@dataclasses.dataclass(frozen=True, slots=True)
class DirectoryRoot:
    """A directory on the search path; ``context`` is its ``file:`` location."""

    base: Path
    context: str


@dataclasses.dataclass(frozen=True, slots=True)
class ArchiveRoot:
    """A zip archive on the search path; ``context`` is its ``zip:`` root location."""

    archive: Path
    context: str


@dataclasses.dataclass(frozen=True, slots=True)
class UnsupportedRoot:
    """A location whose scheme no loader handles."""

    location: str


RootKind = DirectoryRoot | ArchiveRoot | UnsupportedRoot


def classify_root(root: LocatedRoot, path: str, charset: str = uris.DEFAULT_CHARSET) -> RootKind:
    """Work out the root that ``root.location`` belongs to.

    The location addresses ``path`` inside some root; the root itself is the
    location with the trailing ``path`` removed.

    Raises:
        ValueError: If the location cannot be decoded or does not contain ``path``.
    """
    scheme = root.scheme.lower()
    if scheme == uris.FILE_SCHEME:
        resolved = uris.location_to_path(root.location, charset).as_posix()
        if root.location.endswith("/") and not resolved.endswith("/"):
            resolved += "/"
        base = _strip_suffix(resolved, path)
        return DirectoryRoot(
            Path(base), uris.file_location(base, directory=True, charset=charset)
        )
    if scheme == uris.ARCHIVE_SCHEME:
        archive, entry = uris.split_archive_location(root.location, charset)
        prefix = _strip_suffix(entry, path)
        return ArchiveRoot(archive, uris.archive_location(archive, prefix, charset=charset))
    return UnsupportedRoot(root.location)


def _strip_suffix(resolved: str, path: str) -> str:
    index = resolved.rfind(path)
    if index < 0:
        raise ValueError(f"{resolved!r} does not contain {path!r}")
    return resolved[:index]


# --- Search path resolution ---


class SearchPath:
    """Resolves store-relative paths against an ordered list of roots.

    Directory entries and files whose suffix is in ``archive_suffixes`` are
    roots; other entries (missing paths, plain files) are ignored. Without
    ``entries`` the live ``sys.path`` is used at each resolution.
    """

    def __init__(
        self,
        entries: Iterable[str | Path] | None = None,
        *,
        archive_suffixes: Iterable[str] = DEFAULT_ARCHIVE_SUFFIXES,
        charset: str = uris.DEFAULT_CHARSET,
    ) -> None:
        self._entries = None if entries is None else [Path(e) for e in entries]
        self.archive_suffixes = tuple(s.lower() for s in archive_suffixes)
        self.charset = charset

    @property
    def entries(self) -> list[Path]:
        if self._entries is not None:
            return list(self._entries)
        # "" on sys.path is the current directory
        return [Path(e or ".") for e in sys.path]

    def _is_archive(self, entry: Path) -> bool:
        return entry.suffix.lower() in self.archive_suffixes and entry.is_file()

    def _archive_names(self, entry: Path) -> list[str]:
        with open_archive(entry) as zf:
            return zf.namelist()

    def resolve_roots(self, path: str) -> list[LocatedRoot]:
        """Return the locations of ``path`` in every root that holds it.

        For the empty path only directory roots are returned: archives have
        no entry for their own root.

        Raises:
            ResourceIOError: If an archive on the search path cannot be read.
        """
        path = strip_slashes(path)
        roots = []
        for entry in self.entries:
            if entry.is_dir():
                target = entry / path if path else entry
                if target.exists():
                    location = uris.file_location(
                        target.absolute(), directory=target.is_dir(), charset=self.charset
                    )
                    roots.append(LocatedRoot(uris.FILE_SCHEME, location))
            elif path and self._is_archive(entry):
                names = self._archive_names(entry)
                folder = path + "/"
                if path in names:
                    name = path
                elif any(n.startswith(folder) for n in names):
                    name = folder
                else:
                    continue
                location = uris.archive_location(entry.absolute(), name, charset=self.charset)
                roots.append(LocatedRoot(uris.ARCHIVE_SCHEME, location))
        return roots

    def resolve_marker_roots(self, marker: str) -> list[LocatedRoot]:
        """Return the root location of every archive holding ``marker``.

        A marker ending in ``/`` matches any entry below that folder.

        Raises:
            ResourceIOError: If an archive on the search path cannot be read.
        """
        roots = []
        for entry in self.entries:
            if not self._is_archive(entry):
                continue
            names = self._archive_names(entry)
            if marker in names or (
                marker.endswith("/") and any(n.startswith(marker) for n in names)
            ):
                location = uris.archive_location(entry.absolute(), charset=self.charset)
                roots.append(LocatedRoot(uris.ARCHIVE_SCHEME, location))
        return roots

    def __repr__(self) -> str:
        source = "sys.path" if self._entries is None else [str(e) for e in self._entries]
        return f"SearchPath({source})"


# --- Loader ---


class SearchPathLoader(Loader):
    """Loads resources from every directory and archive on a search path.

    Loading the empty path enumerates every root: the directory roots, plus
    the archives that contain ``marker``.
    """

    def __init__(
        self,
        search_path: SearchPath | None = None,
        *,
        marker: str | None = None,
        charset: str | None = None,
        settings: ResolvedSettings | None = None,
    ) -> None:
        if search_path is None or marker is None or charset is None:
            settings = settings or resolve_settings()
        self.charset = charset if charset is not None else settings.charset
        self.marker = marker if marker is not None else settings.marker
        if search_path is None:
            search_path = SearchPath(
                archive_suffixes=settings.archive_suffixes, charset=self.charset
            )
        self.search_path = search_path

    def _resolve(self, path: str) -> list[LocatedRoot]:
        try:
            if path:
                return self.search_path.resolve_roots(path)
            roots = dict.fromkeys(self.search_path.resolve_roots(path))
            roots.update(dict.fromkeys(self.search_path.resolve_marker_roots(self.marker)))
            return list(roots)
        except ResourceIOError:
            raise
        except (OSError, zipfile.BadZipFile) as e:
            raise ResourceIOError(f"Cannot resolve search path roots for {path!r}: {e}") from e

    def _load(
        self, path: str, recursive: bool, filter: Filter | None  # noqa: A002
    ) -> SearchPathEnumerator:
        path = strip_slashes(path)
        roots = self._resolve(path)
        log.debug("Resolved %d root(s) for %r", len(roots), path)
        return SearchPathEnumerator(
            iter(roots),
            path,
            recursive,
            filter if filter is not None else ALWAYS,
            charset=self.charset,
        )

    def __repr__(self) -> str:
        return f"SearchPathLoader({self.search_path!r}, marker={self.marker!r})"


class SearchPathEnumerator(ResourceEnumerator):
    """Flattens the per-root enumerators into one lazy sequence.

    The enumerator of a root is only built once the previous root is
    exhausted; roots that yield nothing are skipped.
    """

    def __init__(  # noqa: PLR0913
        self,
        roots: Iterator[LocatedRoot],
        path: str,
        recursive: bool,  # noqa: FBT001
        filter: Filter,  # noqa: A002
        *,
        charset: str = uris.DEFAULT_CHARSET,
    ) -> None:
        super().__init__()
        self.path = path
        self.recursive = recursive
        self.filter = filter
        self.charset = charset
        self._roots = roots
        self._inner: ResourceEnumerator | None = None

    def _advance(self) -> Resource | None:
        while True:
            if self._inner is not None:
                if self._inner.has_more():
                    return self._inner.take_next()
                self._inner = None
            root = next(self._roots, None)
            if root is None:
                return None
            self._inner = self._open(root)

    def _open(self, root: LocatedRoot) -> ResourceEnumerator | None:
        try:
            kind = classify_root(root, self.path, self.charset)
        except ValueError as e:
            raise EnumerationStateError(f"Cannot derive root of {root.location}: {e}") from e

        match kind:
            case DirectoryRoot(base=base, context=context):
                log.debug("Scanning directory root %s", base)
                loader = FileLoader(base, context, charset=self.charset)
                return loader.load(self.path, self.recursive, self.filter)
            case ArchiveRoot(archive=archive, context=context):
                log.debug("Scanning archive root %s", archive)
                zf = open_archive(archive)
                return ArchiveEnumerator(
                    iter(zf.infolist()),
                    context,
                    self.path,
                    self.recursive,
                    self.filter,
                    charset=self.charset,
                    on_close=zf.close,
                )
            case UnsupportedRoot(location=location):
                log.debug("Skipping unsupported root %s", location)
                return None

    def _release(self) -> None:
        if self._inner is not None:
            self._inner.close()
            self._inner = None
        self._roots = iter(())
