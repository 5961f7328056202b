"""Tests for the middleware pipeline."""

import asyncio
import logging

import pytest

from textual_redux import (
    AwaitableMiddleware,
    BaseMiddleware,
    InvalidAction,
    LoggerMiddleware,
    MiddlewareAPI,
    MiddlewarePipeline,
    ThunkMiddleware,
    apply_middleware,
    compose,
    create_action,
    create_store,
)


def counter(state: int | None, action) -> int:
    state = 0 if state is None else state
    match action["type"]:
        case "INC":
            return state + action.get("amount", 1)
        case "BOOM":
            raise ValueError("boom")
    return state


def history(state: tuple | None, action) -> tuple:
    state = () if state is None else state
    if action["type"] in ("A", "B", "C"):
        return (*state, action["type"])
    return state


def recorder(name: str, log: list[str]):
    def middleware(api):
        def wrapper(next_dispatch):
            def dispatch(action):
                log.append(f"{name}:before")
                result = next_dispatch(action)
                log.append(f"{name}:after")
                return result
            return dispatch
        return wrapper
    return middleware


class TestCompose:
    """Tests for compose."""

    def test_right_to_left(self):
        add_one = lambda x: x + 1  # noqa: E731
        double = lambda x: x * 2  # noqa: E731

        assert compose(add_one, double)(5) == 11
        assert compose(double, add_one)(5) == 12

    def test_identity(self):
        value = object()

        assert compose()(value) is value


class TestApplyMiddleware:
    """Tests for apply_middleware and ordering."""

    def test_returns_pipeline(self):
        pipeline = apply_middleware(ThunkMiddleware, LoggerMiddleware())

        assert isinstance(pipeline, MiddlewarePipeline)
        assert len(pipeline) == 2
        assert isinstance(pipeline.middlewares[0], ThunkMiddleware)

    def test_rejects_non_callables(self):
        with pytest.raises(TypeError, match="Middleware must be callable"):
            apply_middleware(42)

    def test_entry_and_return_order(self):
        log: list[str] = []

        def reducer(state, action):
            if action["type"] == "PING":
                log.append("reducer")
            return state

        store = create_store(
            reducer,
            middleware=apply_middleware(
                recorder("A", log), recorder("B", log), recorder("C", log)
            ),
        )

        store.dispatch({"type": "PING"})

        assert log == [
            "A:before",
            "B:before",
            "C:before",
            "reducer",
            "C:after",
            "B:after",
            "A:after",
        ]

    def test_accepts_plain_sequence(self):
        log: list[str] = []
        store = create_store(counter, middleware=[recorder("A", log)])

        store.dispatch({"type": "INC"})

        assert log == ["A:before", "A:after"]

    def test_middleware_receives_facade(self):
        facades = []

        def capture(api):
            facades.append(api)
            return lambda next_dispatch: next_dispatch

        store = create_store(counter, middleware=[capture])

        (api,) = facades
        assert isinstance(api, MiddlewareAPI)
        assert api.get_state() == 0
        api.dispatch({"type": "INC"})
        assert store.get_state() == 1

    def test_facade_dispatch_reenters_whole_chain(self):
        log: list[str] = []

        def follow_up(api):
            def wrapper(next_dispatch):
                def dispatch(action):
                    result = next_dispatch(action)
                    if action["type"] == "INC":
                        api.dispatch({"type": "FOLLOW"})
                    return result
                return dispatch
            return wrapper

        store = create_store(
            counter, middleware=apply_middleware(recorder("outer", log), follow_up)
        )

        store.dispatch({"type": "INC"})

        assert log == ["outer:before", "outer:before", "outer:after", "outer:after"]

    def test_middleware_can_replace_action(self):
        def doubler(api):
            def wrapper(next_dispatch):
                def dispatch(action):
                    if action["type"] == "INC":
                        action = {**action, "amount": 2}
                    return next_dispatch(action)
                return dispatch
            return wrapper

        store = create_store(counter, middleware=[doubler])

        store.dispatch({"type": "INC"})

        assert store.get_state() == 2

    def test_middleware_can_short_circuit(self):
        calls = []

        def blocker(api):
            def wrapper(next_dispatch):
                def dispatch(action):
                    if action["type"] == "INC":
                        return "blocked"
                    return next_dispatch(action)
                return dispatch
            return wrapper

        store = create_store(counter, middleware=[blocker])
        store.subscribe(lambda: calls.append(1))

        assert store.dispatch({"type": "INC"}) == "blocked"
        assert store.get_state() == 0
        assert calls == []

    def test_middleware_exception_aborts_dispatch(self):
        calls = []

        def failing(api):
            def wrapper(next_dispatch):
                def dispatch(action):
                    raise RuntimeError("middleware failed")
                return dispatch
            return wrapper

        store = create_store(counter, middleware=[failing])
        store.subscribe(lambda: calls.append(1))

        with pytest.raises(RuntimeError, match="middleware failed"):
            store.dispatch({"type": "INC"})

        assert store.get_state() == 0
        assert calls == []

    def test_invalid_action_after_middleware(self):
        store = create_store(counter, middleware=[recorder("A", [])])

        with pytest.raises(InvalidAction):
            store.dispatch({"payload": 1})

        assert store.get_state() == 0


class TestThunkMiddleware:
    """Tests for ThunkMiddleware."""

    def test_deferred_action_dispatches_in_order(self):
        store = create_store(history, middleware=apply_middleware(ThunkMiddleware))

        def thunk(dispatch, get_state):
            dispatch({"type": "A"})
            dispatch({"type": "B"})

        store.dispatch(thunk)

        assert store.get_state() == ("A", "B")

    def test_dispatch_only_thunk(self):
        store = create_store(history, middleware=apply_middleware(ThunkMiddleware))

        store.dispatch(lambda dispatch: (dispatch({"type": "A"}), dispatch({"type": "B"})))

        assert store.get_state() == ("A", "B")

    def test_thunk_with_varargs_gets_everything(self):
        received = []
        store = create_store(counter, middleware=[ThunkMiddleware(extra_argument="extra")])

        store.dispatch(lambda *args: received.extend(args))

        assert len(received) == 3
        assert received[2] == "extra"

    def test_extra_argument_skipped_for_two_argument_thunk(self):
        store = create_store(counter, middleware=[ThunkMiddleware(extra_argument="extra")])

        def thunk(dispatch, get_state):
            dispatch({"type": "INC"})

        store.dispatch(thunk)

        assert store.get_state() == 1

    def test_thunk_reads_state_and_returns_result(self):
        store = create_store(counter, middleware=apply_middleware(ThunkMiddleware))

        def thunk(dispatch, get_state):
            dispatch({"type": "INC"})
            return get_state() * 10

        assert store.dispatch(thunk) == 10

    def test_thunk_dispatch_reaches_outer_middleware(self):
        log: list[str] = []
        store = create_store(
            counter,
            middleware=apply_middleware(ThunkMiddleware, recorder("after-thunk", log)),
        )

        store.dispatch(lambda dispatch, get_state: dispatch({"type": "INC"}))

        assert log == ["after-thunk:before", "after-thunk:after"]
        assert store.get_state() == 1

    def test_nested_thunks(self):
        store = create_store(history, middleware=apply_middleware(ThunkMiddleware))

        def inner(dispatch, get_state):
            dispatch({"type": "B"})

        def outer(dispatch, get_state):
            dispatch({"type": "A"})
            dispatch(inner)
            dispatch({"type": "C"})

        store.dispatch(outer)

        assert store.get_state() == ("A", "B", "C")

    def test_extra_argument(self):
        store = create_store(counter, middleware=[ThunkMiddleware(extra_argument={"step": 3})])

        def thunk(dispatch, get_state, extra):
            dispatch({"type": "INC", "amount": extra["step"]})

        store.dispatch(thunk)

        assert store.get_state() == 3

    def test_plain_actions_pass_through(self):
        store = create_store(counter, middleware=apply_middleware(ThunkMiddleware))

        store.dispatch({"type": "INC"})

        assert store.get_state() == 1

    def test_action_creator_is_not_a_thunk(self):
        increment = create_action("INC")
        store = create_store(counter, middleware=apply_middleware(ThunkMiddleware))

        with pytest.raises(InvalidAction):
            store.dispatch(increment)


class TestBaseMiddleware:
    """Tests for BaseMiddleware hooks."""

    class Recording(BaseMiddleware):
        def __init__(self):
            self.events = []

        def on_next(self, action, prev_state):
            self.events.append(("next", action["type"], prev_state))

        def on_complete(self, next_state, action):
            self.events.append(("complete", action["type"], next_state))

        def on_error(self, error, action):
            self.events.append(("error", action["type"], str(error)))

    def test_hooks_around_dispatch(self):
        middleware = self.Recording()
        store = create_store(counter, middleware=[middleware])

        assert store.dispatch({"type": "INC"}) == {"type": "INC"}

        assert middleware.events == [("next", "INC", 0), ("complete", "INC", 1)]

    def test_error_hook_and_reraise(self):
        middleware = self.Recording()
        store = create_store(counter, middleware=[middleware])

        with pytest.raises(ValueError, match="boom"):
            store.dispatch({"type": "BOOM"})

        assert middleware.events == [("next", "BOOM", 0), ("error", "BOOM", "boom")]

    def test_class_is_instantiated(self):
        store = create_store(counter, middleware=apply_middleware(BaseMiddleware))

        store.dispatch({"type": "INC"})

        assert store.get_state() == 1


class TestLoggerMiddleware:
    """Tests for LoggerMiddleware."""

    def test_logs_before_and_after(self, caplog):
        store = create_store(counter, middleware=[LoggerMiddleware(level=logging.INFO)])

        with caplog.at_level(logging.INFO, logger="textual_redux.middleware"):
            store.dispatch({"type": "INC"})

        messages = [record.getMessage() for record in caplog.records]
        assert messages[0] == "dispatching 'INC', state before: 0"
        assert messages[1].startswith("dispatched 'INC' in ")
        assert messages[1].endswith("state after: 1")

    def test_logs_failures(self, caplog):
        store = create_store(counter, middleware=[LoggerMiddleware(level=logging.INFO)])

        with caplog.at_level(logging.INFO, logger="textual_redux.middleware"):
            with pytest.raises(ValueError):
                store.dispatch({"type": "BOOM"})

        assert "dispatch of 'BOOM' failed" in caplog.records[-1].getMessage()


class TestAwaitableMiddleware:
    """Tests for AwaitableMiddleware."""

    async def test_dispatches_resolved_action(self):
        store = create_store(counter, middleware=apply_middleware(AwaitableMiddleware))

        async def load():
            await asyncio.sleep(0)
            return {"type": "INC", "amount": 5}

        task = store.dispatch(load())
        assert store.get_state() == 0

        await task
        await asyncio.sleep(0)

        assert store.get_state() == 5

    async def test_none_result_dispatches_nothing(self):
        store = create_store(counter, middleware=apply_middleware(AwaitableMiddleware))
        calls = []
        store.subscribe(lambda: calls.append(1))

        async def fire_and_forget():
            return None

        await store.dispatch(fire_and_forget())
        await asyncio.sleep(0)

        assert calls == []

    async def test_failure_surfaces_on_task(self):
        store = create_store(counter, middleware=apply_middleware(AwaitableMiddleware))

        async def failing():
            raise RuntimeError("request failed")

        task = store.dispatch(failing())

        with pytest.raises(RuntimeError, match="request failed"):
            await task
        assert store.get_state() == 0

    async def test_thunk_can_return_awaitable(self):
        store = create_store(
            counter,
            middleware=apply_middleware(ThunkMiddleware, AwaitableMiddleware),
        )

        async def fetch():
            return {"type": "INC"}

        def thunk(dispatch, get_state):
            return dispatch(fetch())

        await store.dispatch(thunk)
        await asyncio.sleep(0)

        assert store.get_state() == 1
