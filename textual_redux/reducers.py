"""Reducer composition and builders."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, TypeVar

from .actions import ActionCreator, get_action_type, is_action
from .errors import ReducerError
from .types import Reducer

logger = logging.getLogger(__name__)

S = TypeVar("S")

Handler = Callable[[Any, Any], Any]


def combine_reducers(slice_reducers: Mapping[str, Reducer[Any, Any]]) -> Reducer[Mapping[str, Any], Any]:
    """
    Build one root reducer from a mapping of slice name to slice reducer.

    Every slice reducer receives its own substate (``None`` on the first
    call) and the unchanged action. The result is always a new read-only
    mapping, even when no slice changed; the slice values themselves keep
    their identity when a reducer returns its input.

    Args:
        slice_reducers: Slice name to reducer, in the order they should run.

    Returns:
        The root reducer.

    Raises:
        ValueError: If no slices are given.
        TypeError: If a slice reducer is not callable.

    Example:
        ```python
        root = combine_reducers({"counter": counter, "todos": todos})
        store = create_store(root)
        store.get_state()["counter"]
        ```
    """
    if not slice_reducers:
        raise ValueError("combine_reducers requires at least one slice reducer")

    reducers = dict(slice_reducers)
    for name, slice_reducer in reducers.items():
        if not callable(slice_reducer):
            raise TypeError(
                f"Reducer for slice '{name}' must be callable, "
                f"got {type(slice_reducer).__name__}"
            )

    warned_keys: set[str] = set()

    def combination(state: Mapping[str, Any] | None, action: Any) -> Mapping[str, Any]:
        if state is None:
            state = {}
        else:
            unexpected = [k for k in state if k not in reducers and k not in warned_keys]
            if unexpected:
                warned_keys.update(unexpected)
                logger.debug("Dropping state keys without a reducer: %s", unexpected)

        next_state: dict[str, Any] = {}
        for name, slice_reducer in reducers.items():
            next_substate = slice_reducer(state.get(name), action)
            if next_substate is None:
                action_type = get_action_type(action) if is_action(action) else None
                raise ReducerError(
                    f"Reducer for slice '{name}' returned None for action "
                    f"{action_type!r}. Return the previous state to ignore an action.",
                    reducer_name=name,
                    action_type=action_type,
                )
            next_state[name] = next_substate
        return MappingProxyType(next_state)

    combination.slice_names = tuple(reducers)  # type: ignore[attr-defined]
    return combination


def on(action_type_or_creator: Any, handler: Handler) -> dict[Any, Handler]:
    """
    Map an action type (or an ActionCreator) to a handler.

    Args:
        action_type_or_creator: The action type, or a creator from create_action.
        handler: Function (state, action) -> new_state.

    Returns:
        A ``{action_type: handler}`` mapping for create_reducer.
    """
    if isinstance(action_type_or_creator, ActionCreator):
        return {action_type_or_creator.type: handler}
    return {action_type_or_creator: handler}


def create_reducer(initial_state: S, *handlers: Mapping[Any, Handler] | tuple[Any, Handler]) -> Reducer[S, Any]:
    """
    Create a total reducer from per-type handlers.

    Unmatched action types return the state unchanged, and a ``None`` state
    is replaced by ``initial_state`` before dispatching to a handler.

    Args:
        initial_state: State used when the reducer is called with ``None``.
        *handlers: Results of ``on(...)`` or ``(action_type, handler)`` tuples.

    Example:
        ```python
        counter = create_reducer(
            0,
            on("counter/increment", lambda state, action: state + 1),
            on(reset, lambda state, action: 0),
        )
        ```
    """
    action_handlers: dict[Any, Handler] = {}

    for handler in handlers:
        if isinstance(handler, tuple) and len(handler) == 2:
            action_type, handler_fn = handler
            action_handlers[action_type] = handler_fn
        else:
            action_handlers.update(handler)

    def reducer(state: S | None, action: Any) -> S:
        if state is None:
            state = initial_state
        handler_fn = action_handlers.get(get_action_type(action))
        if handler_fn is None:
            return state
        return handler_fn(state, action)

    reducer.initial_state = initial_state  # type: ignore[attr-defined]
    reducer.handlers = MappingProxyType(action_handlers)  # type: ignore[attr-defined]
    return reducer
