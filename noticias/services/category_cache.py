# noticias/services/category_cache.py

import logging
import time
from typing import Any, Callable, Optional

from sqlalchemy import event
from sqlalchemy.orm import Session, object_session

from noticias.models import Category

logger = logging.getLogger(__name__)

# ORM events that count as "category.updated"
_CATEGORY_EVENTS = ("after_insert", "after_update", "after_delete")
_CHANGED_FLAG = "category_changed"


class CategoryCache:
    """
    Single cached value with an expiry time.

    Last writer wins; concurrent requests may both miss and both refill.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Optional[Any] = None
        self._expires_at: Optional[float] = None
        self._listening = False

    def get(self) -> Optional[Any]:
        if self._expires_at is None or self._clock() >= self._expires_at:
            return None
        return self._value

    def set(self, value: Any) -> None:
        self._value = value
        self._expires_at = self._clock() + self.ttl_seconds

    def invalidate(self) -> None:
        logger.info("Invalidating category cache")
        self._value = None
        self._expires_at = None

    def _on_category_changed(self, mapper, connection, target):
        session = object_session(target)
        if session is not None:
            session.info[_CHANGED_FLAG] = True

    def _on_commit(self, session):
        if session.info.pop(_CHANGED_FLAG, False):
            logger.info("Category changes committed")
            self.invalidate()

    def _on_rollback(self, session):
        session.info.pop(_CHANGED_FLAG, None)

    def _listeners(self):
        listeners = [(Category, name, self._on_category_changed) for name in _CATEGORY_EVENTS]
        listeners.append((Session, "after_commit", self._on_commit))
        listeners.append((Session, "after_rollback", self._on_rollback))
        return listeners

    def listen(self) -> None:
        """Invalidate once a transaction that inserted, updated or deleted a Category commits."""
        if self._listening:
            return
        for target, name, fn in self._listeners():
            event.listen(target, name, fn)
        self._listening = True

    def unlisten(self) -> None:
        if not self._listening:
            return
        for target, name, fn in self._listeners():
            event.remove(target, name, fn)
        self._listening = False
