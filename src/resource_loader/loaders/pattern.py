"""Loaders that translate an expression into a narrowed search.

They do no scanning of their own: each one rewrites the request and passes
it to a delegate loader (a `SearchPathLoader` unless told otherwise).
"""

from __future__ import annotations

from abc import abstractmethod
import logging
from typing import TYPE_CHECKING

from ..exceptions import ValidationError
from ..filters import AllFilter, AntFilter, RegexFilter
from .base import Loader, ResourceEnumerator

if TYPE_CHECKING:
    from ..filters import Filter

log = logging.getLogger(__name__)


_DEFAULT = object()


def _default_delegate() -> Loader:
    from .search_path import SearchPathLoader

    return SearchPathLoader()


class DelegateLoader(Loader):
    """A loader that hands the actual scan to another loader."""

    def __init__(self, delegate: Loader = _DEFAULT) -> None:  # type: ignore[assignment]
        """Wrap ``delegate``; without one, scan the interpreter search path."""
        if delegate is _DEFAULT:
            delegate = _default_delegate()
        if not isinstance(delegate, Loader):
            raise ValidationError(f"delegate must be a Loader, got {type(delegate).__name__}")
        self.delegate = delegate

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.delegate!r})"


class PatternLoader(DelegateLoader):
    """Loads the resources matching a pattern expression.

    A pattern is compiled into a base path to scan, a recursion flag and a
    filter. The derived filter is ANDed with the caller's filter.

    The caller's ``recursive`` argument is ignored: the pattern alone decides
    how deep the scan goes. Subclasses whose patterns cannot express depth
    should override `load`.
    """

    def _load(
        self, pattern: str, recursive: bool, filter: Filter | None  # noqa: A002, ARG002
    ) -> ResourceEnumerator:
        matcher = self.filter(pattern)
        merged = AllFilter()
        if matcher is not None:
            merged.add(matcher)
        if filter is not None:
            merged.add(filter)
        base_path = self.path(pattern)
        log.debug("Pattern %r -> base path %r", pattern, base_path)
        return self.delegate.load(base_path, self.recursive(pattern), merged.freeze())

    @abstractmethod
    def path(self, pattern: str) -> str:
        """Return the narrowest path known to contain every match."""

    @abstractmethod
    def recursive(self, pattern: str) -> bool:
        """Return whether the base path must be scanned recursively."""

    @abstractmethod
    def filter(self, pattern: str) -> Filter | None:
        """Return the filter selecting the matches."""


class AntLoader(PatternLoader):
    """Loads resources by Ant-style glob, e.g. ``com/example/**/*.class``.

    A pattern without ``*`` or ``?`` is a plain path and is passed to the
    delegate unchanged.
    """

    def _load(
        self, pattern: str, recursive: bool, filter: Filter | None  # noqa: A002
    ) -> ResourceEnumerator:
        if "*" not in pattern and "?" not in pattern:
            return self.delegate.load(pattern, recursive, filter)
        return super()._load(pattern, recursive, filter)

    def path(self, pattern: str) -> str:
        index = min(i for i in (pattern.find("*"), pattern.find("?")) if i >= 0)
        return pattern[: pattern.rfind("/", 0, index) + 1]

    def recursive(self, pattern: str) -> bool:  # noqa: ARG002
        return True

    def filter(self, pattern: str) -> Filter:
        return AntFilter(pattern)


class RegexLoader(PatternLoader):
    """Loads resources whose whole name matches a regular expression.

    Every root is scanned from the top.
    """

    def path(self, pattern: str) -> str:  # noqa: ARG002
        return ""

    def recursive(self, pattern: str) -> bool:  # noqa: ARG002
        return True

    def filter(self, pattern: str) -> Filter:
        return RegexFilter(pattern)


class PackageLoader(DelegateLoader):
    """Loads resources by dotted package name, e.g. ``json.tests``."""

    def _load(
        self, pkg: str, recursive: bool, filter: Filter | None  # noqa: A002
    ) -> ResourceEnumerator:
        return self.delegate.load(pkg.replace(".", "/"), recursive, filter)
