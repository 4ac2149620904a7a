"""Resource filters and their AND/OR composition.

A filter decides whether a candidate found by a loader is yielded. It sees
the candidate's store-relative name and its location, and must not have
side effects.

Composite filters come in two states:

- `AllFilter` / `AnyFilter` are mutable builders (`add`, `remove`, `mix`)
  over an insertion-ordered set of children, deduplicated by equality.
- `FrozenFilter` is a read-only snapshot produced by `freeze()`. Loaders
  hand frozen filters to active enumerations so that later changes to a
  builder never affect a scan in progress.

Mutating a builder while another thread evaluates it is not supported.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
import dataclasses
import re
from typing import Final, Protocol, runtime_checkable

from .exceptions import PatternError, ValidationError


@runtime_checkable
class Filter(Protocol):
    """Predicate over a candidate resource."""

    def filtrate(self, name: str, location: str) -> bool:
        """Return True to include the candidate."""
        ...


class _Always:
    def filtrate(self, name: str, location: str) -> bool:  # noqa: ARG002
        return True

    def __repr__(self) -> str:
        return "ALWAYS"


class _Never:
    def filtrate(self, name: str, location: str) -> bool:  # noqa: ARG002
        return False

    def __repr__(self) -> str:
        return "NEVER"


ALWAYS: Final[Filter] = _Always()
NEVER: Final[Filter] = _Never()


class RegexFilter:
    """Include candidates whose whole name matches a regular expression."""

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        """Compile ``pattern``.

        Raises:
            ValidationError: If ``pattern`` is None.
            PatternError: If ``pattern`` is not a valid regular expression.
        """
        if pattern is None:
            raise ValidationError("pattern must not be None")
        if isinstance(pattern, re.Pattern):
            self.pattern = pattern
        else:
            try:
                self.pattern = re.compile(pattern)
            except re.error as e:
                raise PatternError(f"Invalid regular expression {pattern!r}: {e}") from e

    def filtrate(self, name: str, location: str) -> bool:  # noqa: ARG002
        return self.pattern.fullmatch(name) is not None

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self.pattern.pattern, self.pattern.flags) == (
            other.pattern.pattern,
            other.pattern.flags,
        )

    def __hash__(self) -> int:
        return hash((type(self), self.pattern.pattern, self.pattern.flags))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pattern.pattern!r})"


class AntFilter(RegexFilter):
    """Include candidates whose name matches an Ant-style path glob.

    ``?`` matches one character, ``*`` any characters within a segment and
    ``**`` any number of segments.
    """

    # Order matters: the backslash must be escaped first.
    SYMBOLS: Final = ("\\", "$", "(", ")", "+", ".", "[", "]", "^", "{", "}", "|")

    def __init__(self, ant: str) -> None:
        if ant is None:
            raise ValidationError("ant pattern must not be None")
        self.ant = ant
        super().__init__(self.to_regex(ant))

    @classmethod
    def to_regex(cls, ant: str) -> str:
        """Translate an Ant glob into a regular expression."""
        regex = ant
        for symbol in cls.SYMBOLS:
            regex = regex.replace(symbol, "\\" + symbol)
        regex = regex.replace("?", ".{1}")
        regex = regex.replace("**/", "(.{0,}?/){0,}?")
        regex = regex.replace("**", ".{0,}?")
        regex = regex.replace("*", "[^/]{0,}?")
        return regex.strip("/")

    def __repr__(self) -> str:
        return f"AntFilter({self.ant!r})"


# --- Composition ---


def _all(filters: tuple[Filter, ...], name: str, location: str) -> bool:
    for f in filters:
        if not f.filtrate(name, location):
            return False
    return True


def _any(filters: tuple[Filter, ...], name: str, location: str) -> bool:
    for f in filters:
        if f.filtrate(name, location):
            return True
    return False


def _flatten(filters: tuple) -> list[Filter]:
    """Accept ``f1, f2, ...`` or a single iterable of filters; drop Nones."""
    if len(filters) == 1 and not isinstance(filters[0], Filter) and isinstance(filters[0], Iterable):
        filters = tuple(filters[0])
    return [f for f in filters if f is not None]


@dataclasses.dataclass(frozen=True, slots=True)
class FrozenFilter:
    """Read-only AND/OR composite over a fixed tuple of children."""

    filters: tuple[Filter, ...]
    conjunctive: bool = True

    def filtrate(self, name: str, location: str) -> bool:
        if self.conjunctive:
            return _all(self.filters, name, location)
        return _any(self.filters, name, location)


class MixFilter(ABC):
    """Mutable composite filter over an insertion-ordered set of children.

    Children are deduplicated with ``==``, so they need not be hashable.
    """

    conjunctive: bool

    def __init__(self, *filters: Filter | Iterable[Filter] | None) -> None:
        self._filters: list[Filter] = []
        for f in _flatten(filters):
            self.add(f)

    def add(self, filter: Filter) -> bool:  # noqa: A002
        """Add a child; return False if it was already present."""
        if filter is None:
            raise ValidationError("filter must not be None")
        if filter in self._filters:
            return False
        self._filters.append(filter)
        return True

    def remove(self, filter: Filter) -> bool:  # noqa: A002
        """Remove a child; return False if it was not present."""
        if filter not in self._filters:
            return False
        self._filters.remove(filter)
        return True

    def mix(self, filter: Filter) -> MixFilter:  # noqa: A002
        """Add a child and return this composite for chaining."""
        self.add(filter)
        return self

    @property
    def filters(self) -> tuple[Filter, ...]:
        """Snapshot of the children in insertion order."""
        return tuple(self._filters)

    def freeze(self) -> FrozenFilter:
        """Return a read-only snapshot with the same semantics."""
        return FrozenFilter(self.filters, conjunctive=self.conjunctive)

    @abstractmethod
    def filtrate(self, name: str, location: str) -> bool: ...

    def __contains__(self, filter: object) -> bool:  # noqa: A002
        return filter in self._filters

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(map(repr, self._filters))})"


class AllFilter(MixFilter):
    """AND composite: true when every child is true (and when empty)."""

    conjunctive = True

    def filtrate(self, name: str, location: str) -> bool:
        return _all(self.filters, name, location)


class AnyFilter(MixFilter):
    """OR composite: true when some child is true; false when empty."""

    conjunctive = False

    def filtrate(self, name: str, location: str) -> bool:
        return _any(self.filters, name, location)


def all_of(*filters: Filter | Iterable[Filter] | None) -> AllFilter:
    """Build an AND composite of ``filters``."""
    return AllFilter(*filters)


def any_of(*filters: Filter | Iterable[Filter] | None) -> AnyFilter:
    """Build an OR composite of ``filters``."""
    return AnyFilter(*filters)


and_ = all_of
or_ = any_of
