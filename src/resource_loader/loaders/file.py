"""Directory-backed loader."""

from __future__ import annotations

from collections import deque
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .. import uris
from ..exceptions import EnumerationStateError, ResourceIOError, ValidationError
from ..filters import ALWAYS
from ..resource import Resource
from .base import Loader, ResourceEnumerator, strip_slashes

if TYPE_CHECKING:
    from ..filters import Filter

log = logging.getLogger(__name__)


def _list_dir(directory: Path) -> list[Path]:
    """List the direct children of ``directory`` in a stable order."""
    return sorted(directory.iterdir())


class FileLoader(Loader):
    """Loads the files found under a root directory.

    Names are relative to ``root``. Locations are built by appending the
    percent-encoded name to ``context``, which defaults to the root's own
    ``file:`` location.
    """

    def __init__(
        self,
        root: str | Path,
        context: str | None = None,
        *,
        charset: str = uris.DEFAULT_CHARSET,
    ) -> None:
        if root is None:
            raise ValidationError("root must not be None")
        self.root = Path(root)
        self.charset = charset
        if context is None:
            context = uris.file_location(self.root, directory=True, charset=charset)
        elif not context.endswith("/"):
            context += "/"
        self.context = context

    def _load(
        self, path: str, recursive: bool, filter: Filter | None  # noqa: A002
    ) -> FileEnumerator:
        return FileEnumerator(
            self.root,
            self.context,
            strip_slashes(path),
            recursive,
            filter if filter is not None else ALWAYS,
            charset=self.charset,
        )

    def __repr__(self) -> str:
        return f"FileLoader(root={str(self.root)!r}, context={self.context!r})"


class FileEnumerator(ResourceEnumerator):
    """Breadth-first walk over a work queue of filesystem entries.

    The queue is seeded with the children of ``root / path`` (or with that
    entry alone when it is not a directory). Directories met later are only
    expanded when ``recursive`` is set, and each real directory at most once.
    """

    def __init__(  # noqa: PLR0913
        self,
        root: Path,
        context: str,
        path: str,
        recursive: bool,  # noqa: FBT001
        filter: Filter,  # noqa: A002
        *,
        charset: str = uris.DEFAULT_CHARSET,
    ) -> None:
        super().__init__()
        self.root = root
        self.context = context
        self.recursive = recursive
        self.filter = filter
        self.charset = charset
        self._queue: deque[Path] = deque()
        # real paths of expanded directories; a symlink cycle is walked once
        self._visited: set[Path] = set()

        start = root / path if path else root
        try:
            if start.is_dir():
                self._visited.add(start.resolve())
                self._queue.extend(_list_dir(start))
            else:
                self._queue.append(start)
        except OSError as e:
            raise ResourceIOError(f"Cannot list directory {start}: {e}") from e

    def _advance(self) -> Resource | None:
        while self._queue:
            entry = self._queue.popleft()
            if entry.is_file():
                resource = self._candidate(entry)
                if self.filter.filtrate(resource.name, resource.location):
                    return resource
            elif entry.is_dir() and self.recursive:
                self._expand(entry)
            # vanished entries and non-recursive subdirectories are dropped
        return None

    def _expand(self, directory: Path) -> None:
        try:
            real = directory.resolve()
            if real in self._visited:
                log.debug("Skipping already scanned directory %s", directory)
                return
            self._visited.add(real)
            self._queue.extend(_list_dir(directory))
        except FileNotFoundError:
            log.debug("Directory vanished during scan: %s", directory)
        except OSError as e:
            raise ResourceIOError(f"Cannot list directory {directory}: {e}") from e

    def _candidate(self, file: Path) -> Resource:
        try:
            name = uris.relative_name(file, self.root)
            location = self.context + uris.encode_path(name, self.charset)
            return Resource(name, location, self.charset)
        except (ValueError, UnicodeError) as e:
            raise EnumerationStateError(f"Cannot address {file} under {self.root}: {e}") from e

    def _release(self) -> None:
        self._queue.clear()
        self._visited.clear()
