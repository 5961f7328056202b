"""Tests for actions."""

from typing import Literal

import pytest
from pydantic import ValidationError

from textual_redux import (
    Action,
    ActionCreator,
    InvalidAction,
    create_action,
    create_reducer,
    get_action_type,
    is_action,
    on,
)


class AddTodo(Action):
    type: Literal["todos/add"] = "todos/add"
    text: str


class RemoveTodo(Action):
    type: Literal["todos/remove"] = "todos/remove"
    index: int


def todos(state: tuple[str, ...] | None, action) -> tuple[str, ...]:
    state = () if state is None else state
    match action:
        case AddTodo(text=text):
            return (*state, text)
        case RemoveTodo(index=index):
            return state[:index] + state[index + 1 :]
    return state


class TestAction:
    """Tests for the Action model."""

    def test_extra_fields_are_payload(self):
        action = Action(type="INC", amount=2)

        assert action.type == "INC"
        assert action.amount == 2
        assert action.payload == {"amount": 2}

    def test_mapping_access(self):
        action = Action(type="INC", amount=2)

        assert action["type"] == "INC"
        assert action["amount"] == 2
        assert action.get("missing", "default") == "default"
        assert "amount" in action
        assert "missing" not in action
        with pytest.raises(KeyError):
            action["missing"]

    def test_is_immutable(self):
        action = Action(type="INC")

        with pytest.raises(ValidationError):
            action.type = "DEC"

    def test_equality_by_value(self):
        assert Action(type="INC", amount=1) == Action(type="INC", amount=1)
        assert Action(type="INC") != Action(type="DEC")

    def test_non_string_types(self):
        action = Action(type=("counter", 1))

        assert get_action_type(action) == ("counter", 1)


class TestTaggedVariants:
    """Tests for Action subclasses with per-type payloads."""

    def test_discriminant_default(self):
        action = AddTodo(text="write docs")

        assert action.type == "todos/add"
        assert action["text"] == "write docs"

    def test_payload_shape_is_checked_on_construction(self):
        with pytest.raises(ValidationError):
            RemoveTodo(index="first")

    def test_reducer_matches_variants(self):
        state = todos(None, AddTodo(text="a"))
        state = todos(state, AddTodo(text="b"))
        state = todos(state, RemoveTodo(index=0))

        assert state == ("b",)

    def test_unmatched_variant_keeps_state(self):
        state = ("a",)

        assert todos(state, Action(type="other")) is state


class TestCreateAction:
    """Tests for create_action."""

    def test_creates_plain_actions(self):
        increment = create_action("counter/increment")

        action = increment(amount=3)

        assert isinstance(increment, ActionCreator)
        assert increment.type == "counter/increment"
        assert action == Action(type="counter/increment", amount=3)

    def test_creates_model_actions(self):
        add = create_action("todos/add", AddTodo)

        action = add(text="hello")

        assert isinstance(action, AddTodo)
        assert add.model is AddTodo

    def test_match(self):
        increment = create_action("counter/increment")

        assert increment.match(increment())
        assert increment.match({"type": "counter/increment"})
        assert not increment.match({"type": "other"})
        assert not increment.match(object())

    def test_usable_with_create_reducer(self):
        add = create_action("counter/add")
        reducer = create_reducer(0, on(add, lambda state, action: state + action.amount))

        assert reducer(None, add(amount=4)) == 4


class TestActionHelpers:
    """Tests for is_action and get_action_type."""

    def test_is_action(self):
        assert is_action({"type": "INC"})
        assert is_action(Action(type="INC"))
        assert not is_action({"kind": "INC"})
        assert not is_action("INC")
        assert not is_action(lambda dispatch, get_state: None)

    def test_get_action_type(self):
        assert get_action_type({"type": "INC", "amount": 1}) == "INC"
        assert get_action_type(AddTodo(text="x")) == "todos/add"

    def test_get_action_type_rejects_non_actions(self):
        with pytest.raises(InvalidAction) as exc_info:
            get_action_type(["INC"])

        assert exc_info.value.action == ["INC"]
        assert exc_info.value.to_dict()["error_type"] == "InvalidAction"
