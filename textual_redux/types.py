"""Type definitions for textual-redux."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, TypeVar

# Type variables
T = TypeVar("T")
S = TypeVar("S")  # State type
A = TypeVar("A")  # Action type
A_contra = TypeVar("A_contra", contravariant=True)

Props = Mapping[str, Any]
Listener = Callable[[], None]
Unsubscribe = Callable[[], None]


class Reducer(Protocol[S, A_contra]):
    """Protocol for reducer functions."""

    def __call__(self, state: S | None, action: A_contra) -> S:
        """Process an action and return the next state."""
        ...


class DispatchFunc(Protocol):
    """Protocol for dispatch functions."""

    def __call__(self, action: Any) -> Any:
        """Submit an action and return the chain's result."""
        ...


class GetState(Protocol[S]):
    """Protocol for state readers."""

    def __call__(self) -> S:
        """Return the current state."""
        ...


class StoreAPI(Protocol[S]):
    """The read/dispatch facade middleware is constructed with."""

    @property
    def get_state(self) -> GetState[S]: ...

    @property
    def dispatch(self) -> DispatchFunc: ...


DispatchWrapper = Callable[[DispatchFunc], DispatchFunc]


class Middleware(Protocol):
    """Protocol for middleware: facade -> (next dispatch -> dispatch)."""

    def __call__(self, api: StoreAPI[Any]) -> DispatchWrapper:
        """Bind to a store facade and return the dispatch wrapper."""
        ...


class StateToProps(Protocol[S]):
    """Protocol for state projections used by the binding layer."""

    def __call__(self, state: S) -> Props:
        """Derive view props from the store state."""
        ...


class DispatchToProps(Protocol):
    """Protocol for dispatch projections used by the binding layer."""

    def __call__(self, dispatch: DispatchFunc) -> Props:
        """Derive callback props from the store's dispatch."""
        ...


class ScheduleUpdate(Protocol):
    """Protocol for the view framework's re-render request."""

    def __call__(self, old_props: Props, new_props: Props) -> None:
        """Called when derived props have been recomputed."""
        ...
