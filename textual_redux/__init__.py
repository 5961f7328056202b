"""
Textual Redux - a predictable state container for Textual TUI applications.

This module provides a Redux-style store: a single state tree changed only
by dispatching actions through pure reducers, an ordered middleware
pipeline, and a binding layer that keeps Textual widgets in sync with the
store.

Key Features:
- create_store: Store with get_state / dispatch / subscribe
- combine_reducers: One root reducer from named slice reducers
- apply_middleware: Ordered interceptors (thunks, awaitables, logging)
- connect: Class decorator binding a widget's props to store state
- create_selector: Memoized projections for props

Example:
    ```python
    from textual.app import App, ComposeResult
    from textual.widgets import Button, Static
    from textual_redux import PropsChanged, combine_reducers, connect, create_store

    def counter(state: int | None, action) -> int:
        state = state or 0
        match action["type"]:
            case "counter/increment":
                return state + 1
        return state

    store = create_store(combine_reducers({"counter": counter}))

    @connect(lambda state: {"count": state["counter"]})
    class CounterLabel(Static):
        def on_mount(self) -> None:
            self.update(f"Count: {self.props['count']}")

        def on_props_changed(self, event: PropsChanged) -> None:
            self.update(f"Count: {event.new_props['count']}")

    class Counter(App):
        def compose(self) -> ComposeResult:
            yield CounterLabel(store=store)
            yield Button("Increment")

        def on_button_pressed(self, event: Button.Pressed) -> None:
            store.dispatch({"type": "counter/increment"})
    ```
"""

# Actions
from .actions import (
    Action,
    ActionCreator,
    ActionTypes,
    create_action,
    get_action_type,
    is_action,
)

# Errors
from .errors import (
    DispatchLoopError,
    InvalidAction,
    MiddlewareError,
    ReducerError,
    ReentrantDispatchError,
    StoreError,
)

# Store
from .store import (
    Store,
    StoreOptions,
    create_store,
)

# Reducers
from .reducers import (
    combine_reducers,
    create_reducer,
    on,
)

# Middleware
from .middleware import (
    AwaitableMiddleware,
    BaseMiddleware,
    LoggerMiddleware,
    MiddlewareAPI,
    MiddlewarePipeline,
    ThunkMiddleware,
    apply_middleware,
    compose,
)

# Selectors
from .selectors import (
    Selector,
    create_selector,
)

# Binding
from .binding import (
    BindingState,
    StoreBinding,
    bind,
)

# Textual adapter
from .connect import (
    Connector,
    PropsChanged,
    connect,
)

# Types
from .types import (
    DispatchFunc,
    Listener,
    Middleware,
    Props,
    Reducer,
    Unsubscribe,
)

__version__ = "0.1.0a1"

__all__ = [
    # Actions
    "Action",
    "ActionCreator",
    "ActionTypes",
    "create_action",
    "get_action_type",
    "is_action",
    # Errors
    "DispatchLoopError",
    "InvalidAction",
    "MiddlewareError",
    "ReducerError",
    "ReentrantDispatchError",
    "StoreError",
    # Store
    "Store",
    "StoreOptions",
    "create_store",
    # Reducers
    "combine_reducers",
    "create_reducer",
    "on",
    # Middleware
    "AwaitableMiddleware",
    "BaseMiddleware",
    "LoggerMiddleware",
    "MiddlewareAPI",
    "MiddlewarePipeline",
    "ThunkMiddleware",
    "apply_middleware",
    "compose",
    # Selectors
    "Selector",
    "create_selector",
    # Binding
    "BindingState",
    "StoreBinding",
    "bind",
    # Textual adapter
    "Connector",
    "PropsChanged",
    "connect",
    # Types
    "DispatchFunc",
    "Listener",
    "Middleware",
    "Props",
    "Reducer",
    "Unsubscribe",
]
