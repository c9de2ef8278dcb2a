"""
Observable state container with partial persistence.

A store owns an immutable pydantic state snapshot. Every `_set` replaces
the snapshot, writes the persisted subset of fields to storage and notifies
subscribers. On construction the persisted subset is rehydrated.
"""

from typing import Any, Callable, ClassVar, Generic, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from .storage import StateStorage

logger = structlog.get_logger(__name__)

S = TypeVar('S', bound=BaseModel)

Listener = Callable[[Any], None]


class PersistedStore(Generic[S]):
    """Base class for the auth and team stores."""

    storage_key: ClassVar[str]
    persisted_fields: ClassVar[frozenset[str]]

    def __init__(self, initial: S, storage: StateStorage | None = None):
        self._state = initial
        self._storage = storage
        self._listeners: list[Listener] = []
        self._hydrate()

    @property
    def state(self) -> S:
        """Current snapshot. Treat as read-only; mutate through actions."""
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call `listener(state)` after every change.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes: Any) -> None:
        self._state = self._state.model_copy(update=changes)
        if self._storage is not None and self.persisted_fields & changes.keys():
            self._storage.save(self.storage_key, self.snapshot())
        for listener in list(self._listeners):
            listener(self._state)

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready dict of the persisted fields."""
        return self._state.model_dump(mode='json', include=set(self.persisted_fields))

    def _hydrate(self) -> None:
        if self._storage is None:
            return
        saved = self._storage.load(self.storage_key)
        if not saved:
            return
        restored = {k: v for k, v in saved.items() if k in self.persisted_fields}
        try:
            self._state = type(self._state).model_validate(
                {**self._state.model_dump(), **restored}
            )
        except ValidationError as e:
            logger.warning(
                'store.rehydrate_failed',
                storage_key=self.storage_key,
                error_count=e.error_count(),
            )
