"""Counter whose increments arrive from a coroutine via AwaitableMiddleware."""

import asyncio

from pydantic import BaseModel
from textual.app import App, ComposeResult
from textual.widgets import Button, Label, Static

from textual_redux import (
    AwaitableMiddleware,
    PropsChanged,
    ThunkMiddleware,
    apply_middleware,
    connect,
    create_action,
    create_reducer,
    create_store,
    on,
)


class CounterState(BaseModel, frozen=True):
    count: int = 0
    pending: int = 0


started = create_action("counter/started")
finished = create_action("counter/finished")

reducer = create_reducer(
    CounterState(),
    on(started, lambda state, action: state.model_copy(update={"pending": state.pending + 1})),
    on(
        finished,
        lambda state, action: state.model_copy(
            update={"count": state.count + action.amount, "pending": state.pending - 1}
        ),
    ),
)


async def slow_increment(amount: int):
    await asyncio.sleep(0.5)
    return finished(amount=amount)


def increment_later(amount: int = 1):
    def thunk(dispatch, get_state):
        dispatch(started())
        return dispatch(slow_increment(amount))

    return thunk


@connect(lambda state: {"count": state.count, "pending": state.pending})
class Display(Static):
    def on_mount(self) -> None:
        self._show()

    def on_props_changed(self, event: PropsChanged) -> None:
        self._show()

    def _show(self) -> None:
        self.update(f"Count: {self.props['count']}  (pending: {self.props['pending']})")


class AsyncCounter(App):
    CSS = """
    Screen {
        align: center middle;
    }
    #display {
        text-align: center;
        width: 100%;
        height: 3;
        background: blue;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self.counter_store = create_store(
            reducer,
            middleware=apply_middleware(ThunkMiddleware, AwaitableMiddleware),
        )

    def compose(self) -> ComposeResult:
        yield Label("Async Counter", id="title")
        yield Display(store=self.counter_store, id="display")
        yield Button("Increment later", id="inc")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.counter_store.dispatch(increment_later())


if __name__ == "__main__":
    AsyncCounter().run()
