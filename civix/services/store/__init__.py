"""
Dispatch store - issues and technician roster persistence.

Firestore in production; an in-memory store when USE_MOCK_DB is set.
"""

from typing import Optional
import logging

from civix.core.settings import settings
from civix.services.store.base import DispatchStore, specialization_matches
from civix.services.store.memory_store import MemoryDispatchStore

logger = logging.getLogger(__name__)

_store: Optional[DispatchStore] = None


def get_dispatch_store() -> DispatchStore:
    """
    Get or create the DispatchStore singleton.

    Returns:
        DispatchStore: the in-memory store in mock mode, otherwise Firestore
    """
    global _store
    if _store is None:
        if settings.USE_MOCK_DB:
            logger.info("[STORE] USING IN-MEMORY DISPATCH STORE")
            _store = MemoryDispatchStore()
        else:
            from civix.services.store.firestore_store import FirestoreDispatchStore
            _store = FirestoreDispatchStore()
    return _store


def set_dispatch_store(store: Optional[DispatchStore]) -> None:
    """Replace the singleton (tests, seed script)."""
    global _store
    _store = store


__all__ = [
    "DispatchStore",
    "MemoryDispatchStore",
    "get_dispatch_store",
    "set_dispatch_store",
    "specialization_matches",
]
