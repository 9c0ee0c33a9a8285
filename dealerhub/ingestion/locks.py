"""
Per-actor serialization of catalog replacement.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List

from sqlalchemy import text
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

# Namespaces the advisory lock key space so other lock users cannot collide
ADVISORY_LOCK_NAMESPACE = 0x494E56  # "INV"


class ActorLockRegistry:
    """
    One lock per actor id, created on demand.

    Serializes ingestion runs inside this process. Across processes the
    PostgreSQL advisory lock taken in `acquire_catalog_lock` does the same job.
    An actor's entry is dropped once no run holds or waits on it.
    """

    def __init__(self):
        # actor id -> [lock, number of runs holding or waiting]
        self._locks: Dict[int, List] = {}
        self._guard = threading.Lock()

    def _checkout(self, actor_id: int) -> threading.Lock:
        with self._guard:
            entry = self._locks.get(actor_id)
            if entry is None:
                entry = self._locks[actor_id] = [threading.Lock(), 0]
            entry[1] += 1
            return entry[0]

    def _release(self, actor_id: int) -> None:
        with self._guard:
            entry = self._locks[actor_id]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[actor_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, actor_id: int) -> Iterator[None]:
        lock = self._checkout(actor_id)
        try:
            with lock:
                yield
        finally:
            self._release(actor_id)


_registry = ActorLockRegistry()


def get_actor_lock_registry() -> ActorLockRegistry:
    return _registry


def acquire_catalog_lock(session: Session, actor_id: int) -> None:
    """
    Take a transaction-scoped advisory lock for the actor's catalog.

    Released automatically on commit or rollback. No-op on databases without
    advisory locks (SQLite serializes writers anyway).
    """
    if session.get_bind().dialect.name != "postgresql":
        return
    session.execute(
        text("SELECT pg_advisory_xact_lock(:namespace, :actor_id)"),
        {"namespace": ADVISORY_LOCK_NAMESPACE, "actor_id": actor_id},
    )
