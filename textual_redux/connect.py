"""Connect Textual widgets to a store."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from textual import events
from textual.message import Message
from textual.widget import Widget

from .binding import StoreBinding
from .store import Store
from .types import DispatchToProps, Props, StateToProps

S = TypeVar("S")
W = TypeVar("W", bound=Widget)


class PropsChanged(Message, bubble=False):
    """Message posted to a connected widget when its props are recomputed."""

    def __init__(self, widget: Widget, old_props: Props, new_props: Props) -> None:
        super().__init__()
        self.widget = widget
        self.old_props = old_props
        self.new_props = new_props

    @property
    def control(self) -> Widget:
        """The connected widget whose props changed."""
        return self.widget


class Connector(Generic[S]):
    """
    Decorator turning a presentational widget class into a connected one.

    Built once per consumer definition by ``connect``. The connected class
    accepts a ``store=`` keyword, subscribes on mount, unsubscribes on
    unmount, exposes ``props``, and on every store notification posts
    ``PropsChanged`` and calls ``refresh()``.
    """

    __slots__ = ("_map_state_to_props", "_map_dispatch_to_props")

    def __init__(
        self,
        map_state_to_props: StateToProps[S],
        map_dispatch_to_props: DispatchToProps | None = None,
    ) -> None:
        self._map_state_to_props = map_state_to_props
        self._map_dispatch_to_props = map_dispatch_to_props

    @property
    def map_state_to_props(self) -> StateToProps[S]:
        """The state projection."""
        return self._map_state_to_props

    @property
    def map_dispatch_to_props(self) -> DispatchToProps | None:
        """The dispatch projection, if any."""
        return self._map_dispatch_to_props

    def __call__(self, widget_cls: type[W]) -> type[W]:
        if not (isinstance(widget_cls, type) and issubclass(widget_cls, Widget)):
            raise TypeError(f"connect() can only decorate Widget subclasses, got {widget_cls!r}")

        connector = self

        class Connected(widget_cls):  # type: ignore[valid-type, misc]
            def __init__(self, *args: Any, store: Store[S] | None = None, **kwargs: Any) -> None:
                super().__init__(*args, **kwargs)
                self._bound_store = store
                self._connected_mounted = False
                self._store_binding: StoreBinding[S] = StoreBinding(
                    connector.map_state_to_props,
                    self._schedule_props_update,
                    map_dispatch_to_props=connector.map_dispatch_to_props,
                )

            @property
            def store(self) -> Store[S] | None:
                """The store this widget is bound to."""
                return self._bound_store

            @property
            def props(self) -> Props:
                """Props derived from the store (empty until mounted)."""
                return self._store_binding.props

            def bind_store(self, store: Store[S]) -> None:
                """
                Bind to another store.

                While mounted this unsubscribes from the old store (if any)
                and subscribes to the new one, then schedules an update.
                Before mount the store is only remembered.
                """
                self._bound_store = store
                if not self._connected_mounted:
                    return
                old_props = self._store_binding.props
                new_props = self._store_binding.attach(store)
                self._schedule_props_update(old_props, new_props)

            def _on_mount(self, event: events.Mount) -> None:
                self._connected_mounted = True
                if self._bound_store is not None:
                    self._store_binding.attach(self._bound_store)

            def _on_unmount(self, event: events.Unmount) -> None:
                self._connected_mounted = False
                self._store_binding.detach()

            def _schedule_props_update(self, old_props: Props, new_props: Props) -> None:
                self.post_message(PropsChanged(self, old_props, new_props))
                self.refresh()

        Connected.__name__ = widget_cls.__name__
        Connected.__qualname__ = widget_cls.__qualname__
        Connected.__module__ = widget_cls.__module__
        Connected.__doc__ = widget_cls.__doc__
        Connected.__wrapped__ = widget_cls  # type: ignore[attr-defined]
        return Connected


def connect(
    map_state_to_props: StateToProps[S],
    map_dispatch_to_props: DispatchToProps | None = None,
) -> Connector[S]:
    """
    Connect a widget class to a store.

    Args:
        map_state_to_props: Function state -> props mapping.
        map_dispatch_to_props: Optional function dispatch -> props mapping.
            When omitted, props carry ``dispatch`` itself.

    Returns:
        A Connector to use as a class decorator.

    Example:
        ```python
        @connect(lambda state: {"count": state["counter"]})
        class CounterLabel(Static):
            def on_mount(self) -> None:
                self.update(f"Count: {self.props['count']}")

            def on_props_changed(self, event: PropsChanged) -> None:
                self.update(f"Count: {event.new_props['count']}")

        class CounterApp(App):
            def compose(self) -> ComposeResult:
                yield CounterLabel(store=store)
        ```
    """
    return Connector(map_state_to_props, map_dispatch_to_props)
