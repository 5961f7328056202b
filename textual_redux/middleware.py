"""Middleware pipeline - interceptors between dispatch callers and the reducer."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
import time
from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Generator, Iterator, TypedDict

from .actions import ActionCreator, get_action_type, is_action
from .types import DispatchFunc, DispatchWrapper, GetState, Middleware

logger = logging.getLogger(__name__)

_MISSING: Any = object()


@dataclass(frozen=True, slots=True)
class MiddlewareAPI:
    """
    The store facade every middleware is constructed with.

    Attributes:
        get_state: Reads the store's current state.
        dispatch: Re-enters the top of the fully composed dispatch chain.
    """

    get_state: GetState[Any]
    dispatch: DispatchFunc


class ActionContext(TypedDict):
    """Data shared between the before and after hooks of one dispatch."""

    action: Any
    prev_state: Any
    next_state: Any
    result: Any
    error: BaseException | None


def compose(*funcs: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """
    Compose single-argument functions from right to left.

    ``compose(f, g, h)(x)`` is ``f(g(h(x)))``; ``compose()`` is the identity.
    """
    if not funcs:
        return lambda arg: arg
    if len(funcs) == 1:
        return funcs[0]
    return reduce(lambda f, g: lambda arg: f(g(arg)), funcs)


class MiddlewarePipeline:
    """
    An ordered list of middleware, composed into one dispatch per store.

    The first middleware is outermost: it sees each action first and the
    return value last. Built by ``apply_middleware``.
    """

    __slots__ = ("_middlewares",)

    def __init__(self, *middlewares: Middleware | type[Middleware]) -> None:
        self._middlewares: tuple[Middleware, ...] = tuple(
            middleware() if inspect.isclass(middleware) else middleware
            for middleware in middlewares
        )
        for middleware in self._middlewares:
            if not callable(middleware):
                raise TypeError(
                    f"Middleware must be callable, got {type(middleware).__name__}"
                )

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        """The middleware, outermost first."""
        return self._middlewares

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._middlewares)

    def __len__(self) -> int:
        return len(self._middlewares)

    def build(self, api: MiddlewareAPI, base_dispatch: DispatchFunc) -> DispatchFunc:
        """
        Compose the pipeline around ``base_dispatch``.

        Args:
            api: The facade handed to every middleware.
            base_dispatch: The reducer-invoking terminal dispatch.

        Returns:
            The outermost dispatch function.
        """
        wrappers: list[DispatchWrapper] = [middleware(api) for middleware in self._middlewares]
        return compose(*wrappers)(base_dispatch)

    def __repr__(self) -> str:
        names = ", ".join(_middleware_name(m) for m in self._middlewares)
        return f"MiddlewarePipeline({names})"


def apply_middleware(*middlewares: Middleware | type[Middleware]) -> MiddlewarePipeline:
    """
    Build a middleware pipeline for a store.

    Args:
        *middlewares: Middleware instances, classes (instantiated with no
            arguments) or plain functions ``api -> next -> dispatch``.

    Returns:
        A MiddlewarePipeline to pass as ``create_store(..., middleware=...)``.

    Example:
        ```python
        def trace(api):
            def wrapper(next_dispatch):
                def dispatch(action):
                    print("before", action)
                    result = next_dispatch(action)
                    print("after", api.get_state())
                    return result
                return dispatch
            return wrapper

        store = create_store(reducer, middleware=apply_middleware(ThunkMiddleware, trace))
        ```
    """
    return MiddlewarePipeline(*middlewares)


def _middleware_name(middleware: Any) -> str:
    return getattr(middleware, "__name__", type(middleware).__name__)


def _positional_arity(func: Callable[..., Any], limit: int) -> int:
    """How many of ``limit`` leading positional arguments ``func`` accepts."""
    try:
        parameters = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return limit

    count = 0
    for parameter in parameters:
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return limit
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return min(count, limit)


def _describe(action: Any) -> str:
    if is_action(action):
        return repr(get_action_type(action))
    return type(action).__name__


class BaseMiddleware:
    """
    Class-based middleware with hooks around the rest of the chain.

    Subclasses override ``on_next``, ``on_complete`` and ``on_error``; the
    default ``__call__`` runs them through ``action_context`` around
    ``next_dispatch``. Exceptions are re-raised after ``on_error``.
    """

    def __call__(self, api: MiddlewareAPI) -> DispatchWrapper:
        def wrapper(next_dispatch: DispatchFunc) -> DispatchFunc:
            def dispatch(action: Any) -> Any:
                with self.action_context(action, api.get_state()) as context:
                    context["result"] = next_dispatch(action)
                    context["next_state"] = api.get_state()
                return context["result"]

            return dispatch

        return wrapper

    def on_next(self, action: Any, prev_state: Any) -> None:
        """Called before the action is forwarded."""

    def on_complete(self, next_state: Any, action: Any) -> None:
        """Called after the rest of the chain returned."""

    def on_error(self, error: Exception, action: Any) -> None:
        """Called when the rest of the chain raised."""

    @contextlib.contextmanager
    def action_context(self, action: Any, prev_state: Any) -> Generator[ActionContext, None, None]:
        """
        Run the hooks around one pass through the chain.

        Yields:
            An ActionContext the caller fills with ``result`` and ``next_state``.
        """
        context: ActionContext = {
            "action": action,
            "prev_state": prev_state,
            "next_state": prev_state,
            "result": None,
            "error": None,
        }
        self.on_next(action, prev_state)
        try:
            yield context
        except Exception as err:
            context["error"] = err
            self.on_error(err, action)
            raise
        self.on_complete(context["next_state"], action)


class ThunkMiddleware(BaseMiddleware):
    """
    Run deferred actions: callables receiving ``(dispatch, get_state)``.

    A callable declaring fewer positional parameters gets only the leading
    ones, so ``lambda dispatch: ...`` works; ``extra_argument``, when set,
    is passed third. The callable's return value is returned from ``dispatch``, so a thunk
    may return a coroutine or task for the caller to await.

    Example:
        ```python
        def load_user(user_id):
            def thunk(dispatch, get_state):
                dispatch({"type": "user/requested", "id": user_id})
                dispatch({"type": "user/loaded", "user": api.fetch(user_id)})
            return thunk

        store.dispatch(load_user("u1"))
        ```
    """

    def __init__(self, extra_argument: Any = _MISSING) -> None:
        self.extra_argument = extra_argument

    def __call__(self, api: MiddlewareAPI) -> DispatchWrapper:
        def wrapper(next_dispatch: DispatchFunc) -> DispatchFunc:
            def dispatch(action: Any) -> Any:
                if callable(action) and not isinstance(action, ActionCreator):
                    args: tuple[Any, ...] = (api.dispatch, api.get_state)
                    if self.extra_argument is not _MISSING:
                        args += (self.extra_argument,)
                    return action(*args[: _positional_arity(action, len(args))])
                return next_dispatch(action)

            return dispatch

        return wrapper


class AwaitableMiddleware(BaseMiddleware):
    """
    Schedule coroutines and futures, then dispatch the action they resolve to.

    Must be used from inside a running asyncio loop (a Textual app's loop).
    ``dispatch`` returns the task; awaiting it re-raises the awaitable's error.
    A result of ``None`` dispatches nothing.
    """

    def __call__(self, api: MiddlewareAPI) -> DispatchWrapper:
        def on_done(task: asyncio.Future[Any]) -> None:
            if task.cancelled():
                return
            error = task.exception()
            if error is not None:
                logger.error("Awaitable action failed", exc_info=error)
                return
            result = task.result()
            if result is not None:
                api.dispatch(result)

        def wrapper(next_dispatch: DispatchFunc) -> DispatchFunc:
            def dispatch(action: Any) -> Any:
                if asyncio.iscoroutine(action):
                    task = asyncio.get_running_loop().create_task(action)
                elif asyncio.isfuture(action):
                    task = action
                else:
                    return next_dispatch(action)
                task.add_done_callback(on_done)
                return task

            return dispatch

        return wrapper


class LoggerMiddleware(BaseMiddleware):
    """
    Log every action with the state before and after it.

    Args:
        log: Logger to write to; defaults to this module's logger.
        level: Level for the before/after records.
    """

    def __init__(self, log: logging.Logger | None = None, level: int = logging.DEBUG) -> None:
        self.log = log or logger
        self.level = level
        self._started: list[float] = []

    def on_next(self, action: Any, prev_state: Any) -> None:
        self._started.append(time.perf_counter())
        self.log.log(self.level, "dispatching %s, state before: %r", _describe(action), prev_state)

    def on_complete(self, next_state: Any, action: Any) -> None:
        elapsed_ms = (time.perf_counter() - self._started.pop()) * 1000
        self.log.log(
            self.level,
            "dispatched %s in %.2fms, state after: %r",
            _describe(action),
            elapsed_ms,
            next_state,
        )

    def on_error(self, error: Exception, action: Any) -> None:
        self._started.pop()
        self.log.log(self.level, "dispatch of %s failed: %r", _describe(action), error)
