"""Actions - tagged values describing a requested state change."""

from __future__ import annotations

from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict

from .errors import InvalidAction

M = TypeVar("M", bound="Action")


class ActionTypes:
    """Action types reserved by the store. Reducers must not handle them."""

    INIT = "@@textual_redux/INIT"
    REPLACE = "@@textual_redux/REPLACE"


class Action(BaseModel):
    """
    An immutable action with a ``type`` discriminant and free-form payload.

    Subclass it to register a payload shape for one action type:

    Example:
        ```python
        class AddTodo(Action):
            type: Literal["todos/add"] = "todos/add"
            text: str

        def todos(state: tuple[str, ...] | None, action) -> tuple[str, ...]:
            state = state or ()
            match action:
                case AddTodo(text=text):
                    return (*state, text)
            return state
        ```

    Plain ``Action(type="INC", amount=2)`` keeps extra fields as payload.
    Actions also answer ``action["type"]`` so reducers written against
    plain mappings work unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: Any

    def __getitem__(self, key: str) -> Any:
        if key in self.__class__.model_fields or key in (self.model_extra or {}):
            return getattr(self, key)
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return key in self.__class__.model_fields or key in (self.model_extra or {})

    def get(self, key: str, default: Any = None) -> Any:
        """Mapping-style access with a default."""
        try:
            return self[key]
        except KeyError:
            return default

    @property
    def payload(self) -> dict[str, Any]:
        """Every field except the discriminant."""
        return self.model_dump(exclude={"type"})


class ActionCreator(Generic[M]):
    """Callable producing actions of one type. Returned by ``create_action``."""

    __slots__ = ("_type", "_model")

    def __init__(self, action_type: Any, model: type[M]) -> None:
        self._type = action_type
        self._model = model

    @property
    def type(self) -> Any:
        """The action type this creator produces."""
        return self._type

    @property
    def model(self) -> type[M]:
        """The action model this creator instantiates."""
        return self._model

    def __call__(self, **payload: Any) -> M:
        return self._model(type=self._type, **payload)

    def match(self, action: Any) -> bool:
        """Return True when ``action`` was produced for this creator's type."""
        return is_action(action) and get_action_type(action) == self._type

    def __repr__(self) -> str:
        return f"ActionCreator({self._type!r}, model={self._model.__name__})"


def create_action(action_type: Any, model: type[M] = Action) -> ActionCreator[M]:  # type: ignore[assignment]
    """
    Create an action creator for one action type.

    Args:
        action_type: The discriminant value, compared by equality.
        model: The Action subclass describing the payload shape.

    Returns:
        An ActionCreator; calling it with keyword payload fields builds the action.

    Example:
        ```python
        increment = create_action("counter/increment")
        increment(amount=2)  # Action(type='counter/increment', amount=2)
        ```
    """
    return ActionCreator(action_type, model)


def is_action(value: Any) -> bool:
    """Return True when ``value`` is a plain action the reducer can receive."""
    if isinstance(value, Action):
        return True
    return isinstance(value, Mapping) and "type" in value


def get_action_type(action: Any) -> Any:
    """
    Return the discriminant of a plain action.

    Raises:
        InvalidAction: If ``action`` is not a plain action.
    """
    if isinstance(action, Action):
        return action.type
    if isinstance(action, Mapping) and "type" in action:
        return action["type"]
    raise InvalidAction(action)


def init_action() -> Action:
    """The synthetic action used to initialize a store's state."""
    return Action(type=ActionTypes.INIT)


def replace_action() -> Action:
    """The synthetic action dispatched after a reducer is replaced."""
    return Action(type=ActionTypes.REPLACE)
