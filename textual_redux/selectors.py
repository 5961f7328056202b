"""Memoized selectors for deriving props from store state."""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")

_UNSET: Any = object()


class Selector(Generic[T]):
    """
    A selector that recomputes only when one of its inputs changes.

    Inputs are compared by identity, which is cheap because reducers return
    the same reference for slices an action did not touch.
    """

    __slots__ = ("_inputs", "_result_fn", "_last_inputs", "_last_result", "_recomputations")

    def __init__(self, inputs: tuple[Callable[[Any], Any], ...], result_fn: Callable[..., T]) -> None:
        self._inputs = inputs
        self._result_fn = result_fn
        self._last_inputs: tuple[Any, ...] | Any = _UNSET
        self._last_result: T | Any = _UNSET
        self._recomputations = 0

    @property
    def recomputations(self) -> int:
        """How many times the result function has run."""
        return self._recomputations

    def __call__(self, state: Any) -> T:
        values = tuple(select(state) for select in self._inputs)
        last = self._last_inputs
        if last is not _UNSET and len(last) == len(values) and all(
            a is b for a, b in zip(values, last)
        ):
            return self._last_result

        result = self._result_fn(*values)
        self._last_inputs = values
        self._last_result = result
        self._recomputations += 1
        return result

    def reset(self) -> None:
        """Forget the memoized result."""
        self._last_inputs = _UNSET
        self._last_result = _UNSET


def create_selector(*selectors: Callable[[Any], Any], result_fn: Callable[..., T] | None = None) -> Selector[Any]:
    """
    Create a memoized selector.

    Args:
        *selectors: Input selectors, each state -> value.
        result_fn: Combines the input values; defaults to returning them
            as a tuple (or the single value when there is one input).

    Returns:
        A Selector to call with the store state.

    Example:
        ```python
        select_todos = lambda state: state["todos"]
        select_done = create_selector(
            select_todos,
            result_fn=lambda todos: [t for t in todos if t.done],
        )

        @connect(lambda state: {"done": select_done(state)})
        class DoneList(Static): ...
        ```
    """
    if not selectors:
        raise ValueError("create_selector requires at least one input selector")

    if result_fn is None:
        if len(selectors) == 1:
            result_fn = lambda value: value  # noqa: E731
        else:
            result_fn = lambda *values: values  # noqa: E731

    return Selector(tuple(selectors), result_fn)
