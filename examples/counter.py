"""
Simple Counter Example - Demonstrates a store with one connected widget.

This is the simplest example of using textual-redux.
"""

from textual.app import App, ComposeResult
from textual.widgets import Button, Static

from textual_redux import PropsChanged, Store, connect, create_reducer, create_store, on


counter = create_reducer(
    0,
    on("counter/increment", lambda state, action: state + 1),
    on("counter/decrement", lambda state, action: state - 1),
    on("counter/reset", lambda state, action: 0),
)


@connect(
    lambda state: {"count": state},
    lambda dispatch: {
        "increment": lambda: dispatch({"type": "counter/increment"}),
        "decrement": lambda: dispatch({"type": "counter/decrement"}),
        "reset": lambda: dispatch({"type": "counter/reset"}),
    },
)
class CounterPanel(Static):
    """Displays the count and the buttons that change it."""

    DEFAULT_CSS = """
    CounterPanel {
        height: auto;
    }

    #counter {
        width: 100%;
        height: 3;
        text-align: center;
        text-style: bold;
        background: $primary;
        color: $text;
    }

    CounterPanel Button {
        margin: 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static(id="counter")
        yield Button("Increment (+1)", id="inc")
        yield Button("Decrement (-1)", id="dec")
        yield Button("Reset", id="reset")

    def on_mount(self) -> None:
        self._update_display()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        match event.button.id:
            case "inc":
                self.props["increment"]()
            case "dec":
                self.props["decrement"]()
            case "reset":
                self.props["reset"]()

    def on_props_changed(self, event: PropsChanged) -> None:
        """Called whenever the store notifies."""
        self._update_display()

    def _update_display(self) -> None:
        self.query_one("#counter", Static).update(f"Count: {self.props['count']}")


class Counter(App):
    """A simple counter application backed by a store."""

    CSS = """
    Screen {
        align: center middle;
    }
    """

    def __init__(self, store: Store[int] | None = None) -> None:
        super().__init__()
        self.counter_store = store if store is not None else create_store(counter)

    def compose(self) -> ComposeResult:
        yield CounterPanel(store=self.counter_store)


if __name__ == "__main__":
    Counter().run()
