"""Zip archive backed loader."""

from __future__ import annotations

from collections.abc import Callable, Iterator
import logging
from pathlib import Path
from typing import TYPE_CHECKING
import zipfile

from .. import uris
from ..exceptions import EnumerationStateError, ResourceIOError, ValidationError
from ..filters import ALWAYS
from ..resource import Resource
from .base import Loader, ResourceEnumerator, strip_slashes

if TYPE_CHECKING:
    from types import TracebackType

    from ..filters import Filter

log = logging.getLogger(__name__)


def open_archive(archive: str | Path) -> zipfile.ZipFile:
    """Open ``archive`` for reading.

    Raises:
        ResourceIOError: If the file is missing, unreadable or not a zip archive.
    """
    try:
        zf = zipfile.ZipFile(archive)
    except (OSError, zipfile.BadZipFile) as e:
        raise ResourceIOError(f"Cannot open archive {archive}: {e}") from e
    log.debug("Opened archive %s", archive)
    return zf


class ArchiveLoader(Loader):
    """Loads the file entries of a zip archive.

    Entry names are used as resource names as they are. Locations append
    the percent-encoded entry name to ``context``, which defaults to the
    archive root location (``zip:file:///...!/``).

    An archive opened by the loader itself is closed by `close()`; an open
    `zipfile.ZipFile` passed in stays owned by the caller.
    """

    def __init__(
        self,
        archive: str | Path | zipfile.ZipFile,
        context: str | None = None,
        *,
        charset: str = uris.DEFAULT_CHARSET,
    ) -> None:
        if archive is None:
            raise ValidationError("archive must not be None")
        self.charset = charset
        if isinstance(archive, zipfile.ZipFile):
            self.zip_file = archive
            self._owned = False
        else:
            self.zip_file = open_archive(archive)
            self._owned = True
        if context is None:
            if self.zip_file.filename is None:
                raise ValidationError("context is required for an archive without a file name")
            context = uris.archive_location(self.zip_file.filename, charset=charset)
        self.context = context

    def _load(
        self, path: str, recursive: bool, filter: Filter | None  # noqa: A002
    ) -> ArchiveEnumerator:
        return ArchiveEnumerator(
            iter(self.zip_file.infolist()),
            self.context,
            strip_slashes(path),
            recursive,
            filter if filter is not None else ALWAYS,
            charset=self.charset,
        )

    def close(self) -> None:
        if self._owned:
            self.zip_file.close()

    def __enter__(self) -> ArchiveLoader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ArchiveLoader(context={self.context!r})"


class ArchiveEnumerator(ResourceEnumerator):
    """Single pass over the archive entries, matching them against a folder.

    An entry is a candidate when its name equals ``path`` exactly, or when it
    lies under ``path + "/"`` (any depth if recursive, direct children
    otherwise). Directory entries are never candidates.
    """

    def __init__(  # noqa: PLR0913
        self,
        entries: Iterator[zipfile.ZipInfo],
        context: str,
        path: str,
        recursive: bool,  # noqa: FBT001
        filter: Filter,  # noqa: A002
        *,
        charset: str = uris.DEFAULT_CHARSET,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        super().__init__()
        self.context = context
        self.path = path
        self.folder = path if not path or path.endswith("/") else path + "/"
        self.recursive = recursive
        self.filter = filter
        self.charset = charset
        self._entries = entries
        self._on_close = on_close

    def _includes(self, name: str) -> bool:
        if name == self.path:
            return True
        if not name.startswith(self.folder):
            return False
        return self.recursive or "/" not in name[len(self.folder) :]

    def _advance(self) -> Resource | None:
        for entry in self._entries:
            if entry.is_dir():
                continue
            name = entry.filename
            if not self._includes(name):
                continue
            resource = self._candidate(name)
            if self.filter.filtrate(resource.name, resource.location):
                return resource
        return None

    def _candidate(self, name: str) -> Resource:
        try:
            location = self.context + uris.encode_path(name, self.charset)
            return Resource(name, location, self.charset)
        except (ValueError, UnicodeError) as e:
            raise EnumerationStateError(f"Cannot address entry {name!r}: {e}") from e

    def _release(self) -> None:
        self._entries = iter(())
        if self._on_close is not None:
            on_close, self._on_close = self._on_close, None
            on_close()
