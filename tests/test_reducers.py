"""Tests for combine_reducers and create_reducer."""

from types import MappingProxyType

import pytest

from textual_redux import (
    Action,
    ReducerError,
    combine_reducers,
    create_action,
    create_reducer,
    create_store,
    on,
)


def counter(state: int | None, action) -> int:
    state = 0 if state is None else state
    if action["type"] == "INC":
        return state + 1
    return state


def items(state: tuple[str, ...] | None, action) -> tuple[str, ...]:
    state = () if state is None else state
    if action["type"] == "ADD":
        return (*state, action["text"])
    return state


class TestCombineReducers:
    """Tests for combine_reducers."""

    def test_initial_state_from_slices(self):
        store = create_store(combine_reducers({"counter": counter, "list": items}))

        assert store.get_state() == {"counter": 0, "list": ()}

    def test_state_is_read_only_mapping(self):
        root = combine_reducers({"counter": counter})

        state = root(None, {"type": "INC"})

        assert isinstance(state, MappingProxyType)
        with pytest.raises(TypeError):
            state["counter"] = 5  # type: ignore[index]

    def test_unmatched_action_keeps_slice_references(self):
        store = create_store(combine_reducers({"counter": counter, "list": items}))
        store.dispatch({"type": "ADD", "text": "a"})
        before = store.get_state()

        store.dispatch({"type": "UNKNOWN"})
        after = store.get_state()

        assert after is not before
        assert after["counter"] is before["counter"]
        assert after["list"] is before["list"]

    def test_only_touched_slice_changes(self):
        root = combine_reducers({"counter": counter, "list": items})
        before = root(None, {"type": "@@init"})

        after = root(before, {"type": "INC"})

        assert after["counter"] == 1
        assert after["list"] is before["list"]

    def test_every_slice_sees_the_same_action(self):
        seen = []

        def recorder(name):
            def reducer(state, action):
                seen.append((name, action))
                return state or name
            return reducer

        root = combine_reducers({"a": recorder("a"), "b": recorder("b")})
        action = {"type": "PING"}

        root({"a": "a", "b": "b"}, action)

        assert seen == [("a", action), ("b", action)]
        assert seen[0][1] is seen[1][1]

    def test_missing_slice_gets_none(self):
        received = []

        def reducer(state, action):
            received.append(state)
            return 1

        root = combine_reducers({"new": reducer})

        root({"old": 1}, {"type": "PING"})

        assert received == [None]

    def test_undeclared_keys_are_dropped(self):
        root = combine_reducers({"counter": counter})

        state = root({"counter": 2, "stale": True}, {"type": "NOOP"})

        assert dict(state) == {"counter": 2}

    def test_slice_returning_none_raises(self):
        root = combine_reducers({"broken": lambda state, action: None})

        with pytest.raises(ReducerError, match="broken") as exc_info:
            root(None, {"type": "PING"})

        assert exc_info.value.reducer_name == "broken"
        assert exc_info.value.action_type == "PING"

    def test_reducer_exceptions_propagate_unmodified(self):
        def failing(state, action):
            raise KeyError("missing")

        root = combine_reducers({"failing": failing})

        with pytest.raises(KeyError, match="missing"):
            root(None, {"type": "PING"})

    def test_requires_slices(self):
        with pytest.raises(ValueError, match="at least one"):
            combine_reducers({})

    def test_requires_callables(self):
        with pytest.raises(TypeError, match="'counter' must be callable"):
            combine_reducers({"counter": 0})

    def test_exposes_slice_names(self):
        root = combine_reducers({"counter": counter, "list": items})

        assert root.slice_names == ("counter", "list")


class TestCreateReducer:
    """Tests for create_reducer and on."""

    def test_handles_registered_types(self):
        reducer = create_reducer(
            0,
            on("INC", lambda state, action: state + 1),
            ("ADD", lambda state, action: state + action["amount"]),
        )

        assert reducer(None, {"type": "INC"}) == 1
        assert reducer(5, {"type": "ADD", "amount": 3}) == 8

    def test_unmatched_type_returns_same_state(self):
        initial = {"count": 0}
        reducer = create_reducer(initial, on("INC", lambda state, action: state))
        state = {"count": 4}

        assert reducer(state, {"type": "OTHER"}) is state
        assert reducer(None, {"type": "OTHER"}) is initial

    def test_on_accepts_action_creators(self):
        increment = create_action("counter/increment")
        reducer = create_reducer(0, on(increment, lambda state, action: state + action.amount))

        assert reducer(1, increment(amount=2)) == 3

    def test_works_with_action_models(self):
        reducer = create_reducer(0, on("INC", lambda state, action: state + 1))

        assert reducer(0, Action(type="INC")) == 1

    def test_exposes_initial_state_and_handlers(self):
        handler = lambda state, action: state  # noqa: E731
        reducer = create_reducer(10, on("X", handler))

        assert reducer.initial_state == 10
        assert reducer.handlers == {"X": handler}
