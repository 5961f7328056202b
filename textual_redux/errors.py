"""Exceptions raised by textual-redux."""

from __future__ import annotations

from typing import Any


class StoreError(Exception):
    """Base class for every error raised by the store and its pipeline."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Return a serializable description of the error."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": dict(self.details),
        }


class InvalidAction(StoreError, TypeError):
    """Raised when a value without a ``type`` discriminant reaches the reducer."""

    def __init__(self, action: Any) -> None:
        self.action = action
        super().__init__(
            f"Actions must be mappings or Action models with a 'type' field, "
            f"got {type(action).__name__}: {action!r}. "
            f"Callables and awaitables need ThunkMiddleware or AwaitableMiddleware.",
            action=action,
        )


class ReentrantDispatchError(StoreError, RuntimeError):
    """Raised when dispatch is called while a reducer is executing."""

    def __init__(self, action: Any, store_name: str | None = None) -> None:
        self.action = action
        super().__init__(
            f"Store '{store_name or 'unnamed'}' cannot dispatch {action!r} "
            f"while a reducer is executing. Reducers must not dispatch actions.",
            action=action,
            store=store_name,
        )


class ReducerError(StoreError):
    """Raised when a reducer breaks the reducer contract."""

    def __init__(self, message: str, reducer_name: str, action_type: Any = None) -> None:
        self.reducer_name = reducer_name
        self.action_type = action_type
        super().__init__(message, reducer_name=reducer_name, action_type=action_type)


class MiddlewareError(StoreError):
    """Raised when the middleware pipeline is misused."""

    def __init__(self, message: str, middleware_name: str | None = None) -> None:
        self.middleware_name = middleware_name
        super().__init__(message, middleware_name=middleware_name)


class DispatchLoopError(StoreError, RuntimeError):
    """Raised when listeners keep queueing dispatches past the configured limit."""

    def __init__(self, limit: int, store_name: str | None = None) -> None:
        self.limit = limit
        super().__init__(
            f"Store '{store_name or 'unnamed'}' drained more than {limit} "
            f"dispatches queued by listeners. A listener is probably "
            f"dispatching on every notification.",
            limit=limit,
            store=store_name,
        )
