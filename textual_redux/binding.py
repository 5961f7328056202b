"""Framework-neutral binding between a store and one view consumer."""

from __future__ import annotations

import enum
import logging
from types import MappingProxyType
from typing import Generic, TypeVar

from .store import Store
from .types import DispatchToProps, Props, ScheduleUpdate, StateToProps, Unsubscribe

logger = logging.getLogger(__name__)

S = TypeVar("S")

EMPTY_PROPS: Props = MappingProxyType({})


class BindingState(str, enum.Enum):
    """Lifecycle state of a StoreBinding."""

    UNMOUNTED = "unmounted"
    MOUNTED = "mounted-subscribed"


class StoreBinding(Generic[S]):
    """
    Keeps a consumer's props in sync with a store while it is mounted.

    On ``attach`` the binding subscribes to the store and derives props from
    its state plus a ``dispatch`` callback. Every later notification
    recomputes the props and calls ``schedule_update(old, new)``; whether to
    re-render is left to the view framework. ``detach`` unsubscribes once.

    Example:
        ```python
        binding = StoreBinding(
            lambda state: {"count": state["counter"]},
            lambda old, new: view.refresh(),
        )
        props = binding.attach(store)
        props["dispatch"]({"type": "INC"})
        binding.detach()
        ```
    """

    __slots__ = (
        "_map_state_to_props",
        "_map_dispatch_to_props",
        "_schedule_update",
        "_store",
        "_unsubscribe",
        "_props",
        "_generation",
    )

    def __init__(
        self,
        map_state_to_props: StateToProps[S],
        schedule_update: ScheduleUpdate,
        *,
        map_dispatch_to_props: DispatchToProps | None = None,
    ) -> None:
        self._map_state_to_props = map_state_to_props
        self._map_dispatch_to_props = map_dispatch_to_props
        self._schedule_update = schedule_update
        self._store: Store[S] | None = None
        self._unsubscribe: Unsubscribe | None = None
        self._props: Props = EMPTY_PROPS
        self._generation = 0

    @property
    def state(self) -> BindingState:
        """Current lifecycle state."""
        if self._unsubscribe is None:
            return BindingState.UNMOUNTED
        return BindingState.MOUNTED

    @property
    def is_mounted(self) -> bool:
        """True while subscribed to a store."""
        return self._unsubscribe is not None

    @property
    def store(self) -> Store[S] | None:
        """The store this binding is attached to, if any."""
        return self._store

    @property
    def props(self) -> Props:
        """The most recently derived props (empty while unmounted)."""
        return self._props

    def attach(self, store: Store[S]) -> Props:
        """
        Subscribe to ``store`` and compute the initial props.

        Attaching to the store already bound is a no-op; attaching to a
        different store detaches from the old one first.

        Returns:
            The initial props.
        """
        if self._unsubscribe is not None:
            if store is self._store:
                return self._props
            self.detach()

        props = self.derive_props(store)
        self._generation += 1
        generation = self._generation

        def listener() -> None:
            self._on_store_change(generation)

        self._store = store
        self._props = props
        self._unsubscribe = store.subscribe(listener)
        logger.debug("Binding attached to store %r", store.name)
        return props

    def detach(self) -> None:
        """Unsubscribe from the store. Does nothing when already unmounted."""
        unsubscribe = self._unsubscribe
        if unsubscribe is None:
            return

        self._unsubscribe = None
        self._generation += 1
        store = self._store
        self._store = None
        self._props = EMPTY_PROPS
        unsubscribe()
        logger.debug("Binding detached from store %r", store.name if store else None)

    def rebind(self, store: Store[S]) -> Props:
        """Detach, then attach to ``store``."""
        self.detach()
        return self.attach(store)

    def derive_props(self, store: Store[S]) -> Props:
        """Compute props for the store's current state."""
        props = dict(self._map_state_to_props(store.get_state()))
        if self._map_dispatch_to_props is not None:
            props.update(self._map_dispatch_to_props(store.dispatch))
        else:
            props["dispatch"] = store.dispatch
        return MappingProxyType(props)

    def _on_store_change(self, generation: int) -> None:
        # Notifications from a snapshot taken before detach, or from a
        # previous store after a rebind, are stale.
        store = self._store
        if generation != self._generation or store is None:
            return

        old_props = self._props
        new_props = self.derive_props(store)
        self._props = new_props
        self._schedule_update(old_props, new_props)

    def __repr__(self) -> str:
        return f"StoreBinding(state={self.state.value!r}, props={dict(self._props)!r})"


def bind(
    store: Store[S],
    map_state_to_props: StateToProps[S],
    schedule_update: ScheduleUpdate,
    *,
    map_dispatch_to_props: DispatchToProps | None = None,
) -> StoreBinding[S]:
    """Create a StoreBinding and attach it to ``store``."""
    binding = StoreBinding(
        map_state_to_props,
        schedule_update,
        map_dispatch_to_props=map_dispatch_to_props,
    )
    binding.attach(store)
    return binding
