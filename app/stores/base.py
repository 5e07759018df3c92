# app/stores/base.py
import json
import logging
from typing import Any, Generic, NamedTuple, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from app.core.notifications import Notification, Notifier, log_notifier
from app.core.storage import KeyValueStorage

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=BaseModel)

# Version of the persisted {"state": ..., "version": ...} document
STATE_VERSION = 0


class ActionResult(BaseModel):
    """
    Outcome of a store action. Constraint violations (stock, list full,
    not found) are reported here, never raised.
    """

    success: bool
    message: str | None = None


class Transition(NamedTuple):
    """
    Result of a pure state transition: the new collection, the outcome,
    and the notification to dispatch (if any).
    """

    items: list[Any]
    result: ActionResult
    notification: Notification | None = None


class PersistedStore(Generic[ItemT]):
    """
    In-memory collection mirrored to a KeyValueStorage entry.

    - `hydrate()` reads the persisted document once; until then
      `has_hydrated` is False and `items` may be empty or stale.
    - `_commit()` applies a Transition: swap the collection, write it
      through to storage, then dispatch the notification.
    """

    storage_key: str
    item_type: type[ItemT]

    def __init__(self, storage: KeyValueStorage, notifier: Notifier | None = None):
        self.storage = storage
        self.notifier: Notifier = notifier or log_notifier
        self.items: list[ItemT] = []
        self.has_hydrated = False
        self._adapter = TypeAdapter(list[self.item_type])

    # ---- persistence ----

    def hydrate(self) -> None:
        self.items = self._load()
        self.has_hydrated = True

    def _load(self) -> list[ItemT]:
        raw = self.storage.get_item(self.storage_key)
        if raw is None:
            return []
        try:
            document = json.loads(raw)
            return self._adapter.validate_python(document["state"]["items"])
        except (ValueError, TypeError, KeyError, ValidationError) as exc:
            logger.warning(
                "Discarding unreadable %s state (%s); starting empty",
                self.storage_key,
                type(exc).__name__,
            )
            return []

    def _persist(self) -> None:
        document = {
            "state": {"items": self._adapter.dump_python(self.items, mode="json")},
            "version": STATE_VERSION,
        }
        self.storage.set_item(self.storage_key, json.dumps(document))

    # ---- transitions ----

    def _commit(self, transition: Transition) -> ActionResult:
        if transition.items is not self.items:
            self.items = transition.items
            self._persist()
        if transition.notification is not None:
            n = transition.notification
            self.notifier(n.title, n.description, n.variant)
        return transition.result
