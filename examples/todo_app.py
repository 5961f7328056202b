"""
Todo App Example - Demonstrates all features of textual-redux.

This example shows:
- combine_reducers: Separate slices for todos, filter and interactions
- Action subclasses: Typed payloads matched in reducers
- Middleware: Thunks for multi-step updates, logging for every dispatch
- create_selector: Memoized filtered view of the todo list
- connect: Widgets that re-render when their props change
"""

import logging
from typing import Literal

from pydantic import BaseModel
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, VerticalScroll
from textual.widgets import Button, Checkbox, Footer, Header, Input, Label, Static

from textual_redux import (
    Action,
    LoggerMiddleware,
    PropsChanged,
    Store,
    StoreOptions,
    ThunkMiddleware,
    apply_middleware,
    combine_reducers,
    connect,
    create_reducer,
    create_selector,
    create_store,
    on,
)

Filter = Literal["all", "active", "completed"]


# --- Pydantic Models ---


class TodoItem(BaseModel, frozen=True):
    """A single todo item."""

    id: int
    text: str
    completed: bool = False


# --- Actions ---


class AddTodo(Action):
    """Action to add a new todo."""

    type: Literal["todos/add"] = "todos/add"
    text: str


class ToggleTodo(Action):
    """Action to toggle a todo's completed state."""

    type: Literal["todos/toggle"] = "todos/toggle"
    id: int


class DeleteTodo(Action):
    """Action to delete a todo."""

    type: Literal["todos/delete"] = "todos/delete"
    id: int


class ClearCompleted(Action):
    """Action to clear all completed todos."""

    type: Literal["todos/clear_completed"] = "todos/clear_completed"


class SetFilter(Action):
    """Action to change the filter."""

    type: Literal["filter/set"] = "filter/set"
    filter: Filter


# --- Reducers ---


def todos(state: tuple[TodoItem, ...] | None, action) -> tuple[TodoItem, ...]:
    """Reducer for the todo list."""
    state = () if state is None else state
    match action:
        case AddTodo(text=text):
            next_id = max((item.id for item in state), default=0) + 1
            return (*state, TodoItem(id=next_id, text=text))

        case ToggleTodo(id=todo_id):
            return tuple(
                item.model_copy(update={"completed": not item.completed})
                if item.id == todo_id
                else item
                for item in state
            )

        case DeleteTodo(id=todo_id):
            return tuple(item for item in state if item.id != todo_id)

        case ClearCompleted():
            return tuple(item for item in state if not item.completed)

    return state


visibility = create_reducer("all", on("filter/set", lambda state, action: action.filter))


def interactions(state: int | None, action) -> int:
    """Counts every user action that reached the store."""
    state = 0 if state is None else state
    if isinstance(action, Action) and not str(action.type).startswith("@@"):
        return state + 1
    return state


root_reducer = combine_reducers(
    {
        "todos": todos,
        "filter": visibility,
        "interactions": interactions,
    }
)


# --- Thunks ---


def add_todo(text: str):
    """Add a todo, ignoring blank input."""

    def thunk(dispatch, get_state):
        text_ = text.strip()
        if not text_:
            return None
        return dispatch(AddTodo(text=text_))

    return thunk


def complete_all(dispatch, get_state):
    """Mark every open todo as completed, one action per item."""
    for item in get_state()["todos"]:
        if not item.completed:
            dispatch(ToggleTodo(id=item.id))


# --- Selectors ---


select_todos = lambda state: state["todos"]  # noqa: E731
select_filter = lambda state: state["filter"]  # noqa: E731


def _filter_items(items: tuple[TodoItem, ...], current: Filter) -> tuple[TodoItem, ...]:
    match current:
        case "active":
            return tuple(item for item in items if not item.completed)
        case "completed":
            return tuple(item for item in items if item.completed)
    return items


select_visible = create_selector(select_todos, select_filter, result_fn=_filter_items)

select_stats = create_selector(
    select_todos,
    result_fn=lambda items: {
        "total": len(items),
        "completed": sum(1 for item in items if item.completed),
    },
)


# --- Widgets ---


@connect(lambda state: {})
class TodoInput(Static):
    """Input widget for adding new todos."""

    DEFAULT_CSS = """
    TodoInput {
        height: 3;
        margin: 1;
    }
    TodoInput Horizontal {
        width: 100%;
    }
    TodoInput Input {
        width: 1fr;
    }
    TodoInput Button {
        width: 12;
    }
    """

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Input(placeholder="What needs to be done?", id="todo-input")
            yield Button("Add", id="add-btn", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "add-btn":
            self._add_todo()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._add_todo()

    def _add_todo(self) -> None:
        input_widget = self.query_one("#todo-input", Input)
        self.props["dispatch"](add_todo(input_widget.value))
        input_widget.value = ""


class TodoItemWidget(Static):
    """Widget representing a single todo item."""

    DEFAULT_CSS = """
    TodoItemWidget {
        height: 3;
        padding: 0 1;
    }
    TodoItemWidget Horizontal {
        width: 100%;
        height: 100%;
    }
    TodoItemWidget .completed {
        text-style: strike;
        color: $text-muted;
    }
    TodoItemWidget Label {
        width: 1fr;
        height: 100%;
        content-align: left middle;
    }
    TodoItemWidget Button {
        width: 8;
    }
    """

    def __init__(self, item: TodoItem, dispatch) -> None:
        super().__init__()
        self._item = item
        self._dispatch = dispatch

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Checkbox(value=self._item.completed)
            label = Label(self._item.text)
            if self._item.completed:
                label.add_class("completed")
            yield label
            yield Button("x", variant="error")

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        event.stop()
        self._dispatch(ToggleTodo(id=self._item.id))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self._dispatch(DeleteTodo(id=self._item.id))


@connect(lambda state: {"items": select_visible(state)})
class TodoList(VerticalScroll):
    """Widget displaying the visible todos."""

    DEFAULT_CSS = """
    TodoList {
        height: auto;
        max-height: 20;
        margin: 1;
        border: solid $primary;
    }
    """

    async def on_mount(self) -> None:
        await self._render_items(self.props.get("items", ()))

    async def on_props_changed(self, event: PropsChanged) -> None:
        # Selector output is memoized, so an unchanged list keeps its identity.
        if event.new_props["items"] is not event.old_props.get("items"):
            await self._render_items(event.new_props["items"])

    async def _render_items(self, items: tuple[TodoItem, ...]) -> None:
        await self.remove_children()
        if not items:
            await self.mount(Label("No items to show"))
            return
        await self.mount_all(TodoItemWidget(item, self.props["dispatch"]) for item in items)


@connect(
    lambda state: {"filter": state["filter"]},
    lambda dispatch: {
        "set_filter": lambda value: dispatch(SetFilter(filter=value)),
        "clear_completed": lambda: dispatch(ClearCompleted()),
        "complete_all": lambda: dispatch(complete_all),
    },
)
class FilterBar(Static):
    """Widget for filtering todos."""

    DEFAULT_CSS = """
    FilterBar {
        height: 3;
        margin: 1;
    }
    FilterBar Horizontal {
        width: 100%;
        align: center middle;
    }
    FilterBar Button {
        margin: 0 1;
    }
    FilterBar .active-filter {
        background: $primary;
    }
    """

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield Button("All", id="filter-all")
            yield Button("Active", id="filter-active")
            yield Button("Completed", id="filter-completed")
            yield Button("Complete All", id="complete-all", variant="success")
            yield Button("Clear Completed", id="clear-completed", variant="warning")

    def on_mount(self) -> None:
        self._highlight()

    def on_props_changed(self, event: PropsChanged) -> None:
        self._highlight()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        match event.button.id:
            case "filter-all":
                self.props["set_filter"]("all")
            case "filter-active":
                self.props["set_filter"]("active")
            case "filter-completed":
                self.props["set_filter"]("completed")
            case "complete-all":
                self.props["complete_all"]()
            case "clear-completed":
                self.props["clear_completed"]()

    def _highlight(self) -> None:
        current = self.props.get("filter")
        for button in self.query(Button):
            button.set_class(button.id == f"filter-{current}", "active-filter")


@connect(lambda state: {**select_stats(state), "interactions": state["interactions"]})
class StatsDisplay(Static):
    """Widget showing todo statistics."""

    DEFAULT_CSS = """
    StatsDisplay {
        height: 3;
        margin: 1;
        padding: 0 1;
        background: $surface;
        border: solid $secondary;
    }
    """

    def on_mount(self) -> None:
        self._show()

    def on_props_changed(self, event: PropsChanged) -> None:
        self._show()

    def _show(self) -> None:
        props = self.props
        total = props.get("total", 0)
        completed = props.get("completed", 0)
        self.update(
            f"Total: {total}  Active: {total - completed}  "
            f"Completed: {completed}  Interactions: {props.get('interactions', 0)}"
        )


def make_store() -> Store:
    """Build the app store with thunk and logging middleware."""
    return create_store(
        root_reducer,
        middleware=apply_middleware(ThunkMiddleware, LoggerMiddleware()),
        options=StoreOptions(name="todos"),
    )


class TodoApp(App):
    """Main todo application."""

    CSS = """
    Screen {
        background: $surface;
    }

    #main-container {
        width: 100%;
        height: 100%;
        padding: 1;
    }

    #title {
        text-align: center;
        text-style: bold;
        color: $primary;
        height: 3;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("c", "complete_all", "Complete All"),
    ]

    def __init__(self, store: Store | None = None) -> None:
        super().__init__()
        self.todo_store = store if store is not None else make_store()

    def compose(self) -> ComposeResult:
        store = self.todo_store
        yield Header()
        yield Container(
            Static("Todo App", id="title"),
            TodoInput(store=store),
            TodoList(store=store),
            FilterBar(store=store),
            StatsDisplay(store=store),
            id="main-container",
        )
        yield Footer()

    def on_mount(self) -> None:
        dispatch = self.todo_store.dispatch
        dispatch(AddTodo(text="Learn Textual"))
        dispatch(AddTodo(text="Build awesome TUI apps"))
        dispatch(AddTodo(text="Master textual-redux"))

    def action_complete_all(self) -> None:
        """Complete all action for keybinding."""
        self.todo_store.dispatch(complete_all)


if __name__ == "__main__":
    logging.basicConfig(filename="todo_app.log", level=logging.DEBUG)
    TodoApp().run()
