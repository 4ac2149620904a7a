"""The pull-based enumeration protocol and the load() call shapes."""

import pytest

from resource_loader.exceptions import NoSuchResourceError, ValidationError
from resource_loader.filters import ALWAYS, NEVER
from resource_loader.loaders import EmptyEnumerator, EnumeratorState, Loader, ResourceEnumerator
from resource_loader.resource import Resource


def resource(name):
    return Resource(name, f"file:///root/{name}")


class ListEnumerator(ResourceEnumerator):
    """Serves a fixed list, counting how often it is asked to advance."""

    def __init__(self, names):
        super().__init__()
        self._items = [resource(n) for n in names]
        self.advances = 0
        self.released = 0

    def _advance(self):
        self.advances += 1
        return self._items.pop(0) if self._items else None

    def _release(self):
        self.released += 1


class RecordingLoader(Loader):
    def __init__(self):
        self.calls = []

    def _load(self, path, recursive, filter):
        self.calls.append((path, recursive, filter))
        return ListEnumerator(["a.txt", "b.txt"])


@pytest.mark.unit
class TestEnumeratorStates:
    def test_starts_idle(self):
        assert ListEnumerator(["a"]).state is EnumeratorState.IDLE

    def test_has_more_is_idempotent_when_peeked(self):
        e = ListEnumerator(["a", "b"])
        assert e.has_more() and e.has_more() and e.has_more()
        assert e.advances == 1
        assert e.state is EnumeratorState.PEEKED

    def test_take_next_consumes_buffer(self):
        e = ListEnumerator(["a", "b"])
        assert e.take_next().name == "a"
        assert e.state is EnumeratorState.IDLE
        assert e.take_next().name == "b"

    def test_exhaustion_is_sticky(self):
        e = ListEnumerator([])
        assert e.has_more() is False
        assert e.has_more() is False
        assert e.advances == 1
        assert e.state is EnumeratorState.EXHAUSTED
        assert e.released == 1

    def test_take_next_on_exhausted_raises(self):
        e = ListEnumerator([])
        with pytest.raises(NoSuchResourceError):
            e.take_next()

    def test_iteration(self):
        assert [r.name for r in ListEnumerator(["a", "b", "c"])] == ["a", "b", "c"]

    def test_next_with_default(self):
        e = ListEnumerator([])
        assert next(e, None) is None

    def test_close_drops_buffer_and_releases(self):
        e = ListEnumerator(["a", "b"])
        assert e.has_more()
        e.close()
        assert e.has_more() is False
        assert e.released == 1

    def test_context_manager_closes(self):
        with ListEnumerator(["a", "b"]) as e:
            next(e)
        assert e.state is EnumeratorState.EXHAUSTED

    def test_empty_enumerator(self):
        assert list(EmptyEnumerator()) == []


@pytest.mark.unit
class TestLoadCallShapes:
    def test_path_only_is_non_recursive_and_unfiltered(self):
        loader = RecordingLoader()
        loader.load("p")
        assert loader.calls == [("p", False, None)]

    def test_path_and_flag(self):
        loader = RecordingLoader()
        loader.load("p", True)
        assert loader.calls == [("p", True, None)]

    def test_path_and_filter_is_recursive(self):
        loader = RecordingLoader()
        loader.load("p", NEVER)
        loader.load("p", filter=ALWAYS)
        assert loader.calls == [("p", True, NEVER), ("p", True, ALWAYS)]

    def test_full_control(self):
        loader = RecordingLoader()
        loader.load("p", False, NEVER)
        assert loader.calls == [("p", False, NEVER)]

    def test_none_path_is_rejected(self):
        with pytest.raises(ValidationError):
            RecordingLoader().load(None)

    def test_filter_given_twice_is_rejected(self):
        with pytest.raises(ValidationError):
            RecordingLoader().load("p", NEVER, ALWAYS)

    def test_load_one_returns_first(self):
        loader = RecordingLoader()
        assert loader.load_one("p").name == "a.txt"
        assert loader.calls == [("p", False, None)]
