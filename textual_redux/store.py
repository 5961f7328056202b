"""Store - owns the state, the listeners and the composed dispatch."""

from __future__ import annotations

import logging
import weakref
from collections import deque
from typing import Any, Generic, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .actions import get_action_type, init_action, is_action, replace_action
from .errors import DispatchLoopError, InvalidAction, MiddlewareError, ReentrantDispatchError
from .middleware import MiddlewareAPI, MiddlewarePipeline
from .types import DispatchFunc, Listener, Middleware, Reducer, Unsubscribe

logger = logging.getLogger(__name__)

S = TypeVar("S")


class StoreOptions(BaseModel):
    """
    Store configuration.

    Attributes:
        name: Name used in reprs, log records and error messages.
        max_queued_dispatches: Upper bound on dispatches queued by listeners
            and drained after one outer dispatch.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    max_queued_dispatches: int = Field(default=1000, ge=1)


class Store(Generic[S]):
    """
    A predictable state container.

    State only changes through ``dispatch``; the reducer computes the next
    state, which replaces the current one by reference, and listeners are
    notified in subscription order.

    Usage:
        ```python
        def counter(state: int | None, action) -> int:
            state = state or 0
            match action["type"]:
                case "INC":
                    return state + 1
            return state

        store = create_store(counter)
        unsubscribe = store.subscribe(lambda: print(store.get_state()))
        store.dispatch({"type": "INC"})  # prints 1
        unsubscribe()
        ```
    """

    __slots__ = (
        "_reducer",
        "_state",
        "_options",
        "_listeners",
        "_dispatch",
        "_queued",
        "_is_reducing",
        "_is_notifying",
        "_is_draining",
        "__weakref__",
    )

    def __init__(
        self,
        reducer: Reducer[S, Any],
        initial_state: S | None = None,
        *,
        middleware: MiddlewarePipeline | Sequence[Middleware] | None = None,
        options: StoreOptions | None = None,
    ) -> None:
        """
        Create a store and initialize its state.

        Args:
            reducer: Root reducer (state, action) -> new_state.
            initial_state: Prior state handed to the reducer with the init
                action; ``None`` lets the reducer choose its defaults.
            middleware: A pipeline from apply_middleware, or a sequence of
                middleware, outermost first.
            options: Store configuration.
        """
        if not callable(reducer):
            raise TypeError(f"Reducer must be callable, got {type(reducer).__name__}")

        self._reducer = reducer
        self._options = options or StoreOptions()
        self._listeners: dict[object, Listener] = {}
        self._queued: deque[Any] = deque()
        self._is_reducing = False
        self._is_notifying = False
        self._is_draining = False
        self._dispatch: DispatchFunc = self._dispatch_while_constructing

        self._state: S = self._reduce(initial_state, init_action())
        self._dispatch = self._build_dispatch(middleware)

    @property
    def name(self) -> str | None:
        """Get store name."""
        return self._options.name

    @property
    def options(self) -> StoreOptions:
        """Get store options."""
        return self._options

    @property
    def state(self) -> S:
        """Get the current state."""
        return self._state

    def get_state(self) -> S:
        """Return the state produced by the most recently committed dispatch."""
        return self._state

    def dispatch(self, action: Any) -> Any:
        """
        Dispatch an action through the middleware chain to the reducer.

        Args:
            action: A plain action, or anything an installed middleware handles.

        Returns:
            Whatever the chain returns, ordinarily the action itself. Actions
            dispatched from a listener are queued and returned unchanged.

        Raises:
            ReentrantDispatchError: If called while a reducer is executing.
            InvalidAction: If a non-action reaches the reducer.
        """
        if self._is_reducing:
            raise ReentrantDispatchError(action, self.name)

        if self._is_notifying:
            self._queued.append(action)
            return action

        try:
            result = self._dispatch(action)
        except Exception:
            if not self._is_draining:
                self._queued.clear()
            raise

        self._drain_queue()
        return result

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        Register a listener called after every committed dispatch.

        Args:
            listener: Zero-argument callable.

        Returns:
            A function removing the listener. Calling it again, or after the
            store has been garbage collected, does nothing.
        """
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")

        token = object()
        self._listeners[token] = listener
        store_ref = weakref.ref(self)
        logger.debug("Store %r subscribed %r", self.name, listener)

        def unsubscribe() -> None:
            store = store_ref()
            if store is None:
                return
            if store._listeners.pop(token, None) is not None:
                logger.debug("Store %r unsubscribed %r", store.name, listener)

        return unsubscribe

    def replace_reducer(self, next_reducer: Reducer[S, Any]) -> None:
        """
        Replace the root reducer.

        The replace action is dispatched through the full chain so slices
        added by the new reducer initialize.
        """
        if not callable(next_reducer):
            raise TypeError(f"Reducer must be callable, got {type(next_reducer).__name__}")
        self._reducer = next_reducer
        self.dispatch(replace_action())

    def _build_dispatch(
        self, middleware: MiddlewarePipeline | Sequence[Middleware] | None
    ) -> DispatchFunc:
        if middleware is None:
            return self._base_dispatch
        if not isinstance(middleware, MiddlewarePipeline):
            middleware = MiddlewarePipeline(*middleware)
        if not len(middleware):
            return self._base_dispatch

        api = MiddlewareAPI(get_state=self.get_state, dispatch=self.dispatch)
        return middleware.build(api, self._base_dispatch)

    def _dispatch_while_constructing(self, action: Any) -> Any:
        raise MiddlewareError(
            f"Store '{self.name or 'unnamed'}' cannot dispatch {action!r} while "
            f"its middleware is being constructed."
        )

    def _base_dispatch(self, action: Any) -> Any:
        if not is_action(action):
            raise InvalidAction(action)

        next_state = self._reduce(self._state, action)
        self._state = next_state
        self._notify()
        return action

    def _reduce(self, state: S | None, action: Any) -> S:
        self._is_reducing = True
        try:
            return self._reducer(state, action)
        except Exception:
            logger.debug(
                "Reducer of store %r failed on %r", self.name, get_action_type(action)
            )
            raise
        finally:
            self._is_reducing = False

    def _notify(self) -> None:
        listeners = tuple(self._listeners.values())
        errors: list[Exception] = []

        self._is_notifying = True
        try:
            for listener in listeners:
                try:
                    listener()
                except Exception as err:
                    errors.append(err)
        finally:
            self._is_notifying = False

        if errors:
            for extra in errors[1:]:
                logger.error("Listener of store %r failed", self.name, exc_info=extra)
            raise errors[0]

    def _drain_queue(self) -> None:
        if self._is_draining or not self._queued:
            return

        limit = self._options.max_queued_dispatches
        drained = 0
        self._is_draining = True
        try:
            while self._queued:
                if drained >= limit:
                    raise DispatchLoopError(limit, self.name)
                drained += 1
                self._dispatch(self._queued.popleft())
        finally:
            self._is_draining = False
            self._queued.clear()

    def __repr__(self) -> str:
        name = f" name={self.name!r}" if self.name else ""
        return f"Store({self._state!r}{name})"


def create_store(
    reducer: Reducer[S, Any],
    initial_state: S | None = None,
    *,
    middleware: MiddlewarePipeline | Sequence[Middleware] | None = None,
    options: StoreOptions | None = None,
) -> Store[S]:
    """
    Create a new store.

    Args:
        reducer: Root reducer, often built with combine_reducers.
        initial_state: Optional prior state for initialization.
        middleware: Optional pipeline from apply_middleware.
        options: Optional StoreOptions.

    Returns:
        A Store instance.

    Example:
        ```python
        store = create_store(
            combine_reducers({"counter": counter, "todos": todos}),
            middleware=apply_middleware(ThunkMiddleware, LoggerMiddleware),
            options=StoreOptions(name="app"),
        )
        ```
    """
    return Store(reducer, initial_state, middleware=middleware, options=options)
