"""Base loader contract and the lazy enumeration protocol.

Every loader returns a `ResourceEnumerator`: a pull-based iterator that
finds its next resource only when asked. Finding a resource may list
directories or read archive indexes, so nothing is done until the caller
calls `has_more()` (or iterates).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import enum
import logging
from typing import TYPE_CHECKING

from ..exceptions import NoSuchResourceError, ValidationError
from ..filters import Filter

if TYPE_CHECKING:
    from types import TracebackType

    from ..resource import Resource

log = logging.getLogger(__name__)


class EnumeratorState(enum.Enum):
    """Lifecycle of a `ResourceEnumerator`."""

    IDLE = "idle"  # nothing buffered, more may exist
    PEEKED = "peeked"  # exactly one resource buffered
    EXHAUSTED = "exhausted"


class ResourceEnumerator(ABC):
    """Lazy sequence of resources with an explicit one-element buffer.

    Subclasses implement `_advance`, which does whatever I/O is needed to
    find the next matching resource and returns None when there is none.

    An enumerator belongs to a single consumer. Start a new `load` call for
    each parallel scan.
    """

    def __init__(self) -> None:
        self._state = EnumeratorState.IDLE
        self._next: Resource | None = None

    @abstractmethod
    def _advance(self) -> Resource | None:
        """Find the next matching resource, or None when exhausted."""

    def _release(self) -> None:  # noqa: B027
        """Release handles held by the enumerator. Default: nothing to do."""

    @property
    def state(self) -> EnumeratorState:
        return self._state

    def has_more(self) -> bool:
        """Return True if another resource is available.

        Idempotent once a resource is buffered or the enumerator is exhausted.
        """
        if self._state is EnumeratorState.PEEKED:
            return True
        if self._state is EnumeratorState.EXHAUSTED:
            return False
        resource = self._advance()
        if resource is None:
            self.close()
            return False
        self._next = resource
        self._state = EnumeratorState.PEEKED
        return True

    def take_next(self) -> Resource:
        """Consume and return the next resource.

        Raises:
            NoSuchResourceError: If the enumerator is exhausted.
        """
        if not self.has_more():
            raise NoSuchResourceError("No more resources")
        resource = self._next
        self._next = None
        self._state = EnumeratorState.IDLE
        return resource

    def close(self) -> None:
        """Stop the enumeration and release any open handles."""
        self._next = None
        self._state = EnumeratorState.EXHAUSTED
        self._release()

    def __iter__(self) -> ResourceEnumerator:
        return self

    def __next__(self) -> Resource:
        if not self.has_more():
            raise StopIteration
        return self.take_next()

    def __enter__(self) -> ResourceEnumerator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class EmptyEnumerator(ResourceEnumerator):
    """An enumerator with nothing in it."""

    def _advance(self) -> Resource | None:
        return None


class Loader(ABC):
    """Loads resources below a path, lazily.

    `load` accepts the call shapes::

        load(path)                     # non-recursive, every resource
        load(path, recursive)          # every resource
        load(path, filter)             # recursive, filtered
        load(path, recursive, filter)  # full control; filter=None means all
    """

    def load(
        self,
        path: str,
        recursive: bool | Filter | None = None,
        filter: Filter | None = None,  # noqa: A002
    ) -> ResourceEnumerator:
        """Return a lazy enumerator over the resources matching ``path``.

        Raises:
            ValidationError: If ``path`` is None.
            ResourceIOError: If the backing store cannot be resolved or listed.
        """
        if path is None:
            raise ValidationError("path must not be None")
        if isinstance(recursive, Filter):
            if filter is not None:
                raise ValidationError("filter given twice")
            recursive, filter = True, recursive
        if recursive is None:
            recursive = filter is not None
        return self._load(path, bool(recursive), filter)

    @abstractmethod
    def _load(
        self, path: str, recursive: bool, filter: Filter | None  # noqa: A002
    ) -> ResourceEnumerator:
        """Build the enumerator; ``filter`` None means every resource."""

    def load_one(self, path: str) -> Resource | None:
        """Return the first resource at ``path``, or None if there is none."""
        with self.load(path) as resources:
            return next(resources, None)


def strip_slashes(path: str) -> str:
    """Remove leading and trailing ``/`` from a store-relative path."""
    return path.strip("/")
