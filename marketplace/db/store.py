"""Process-wide store selection.

``get_store()`` is the FastAPI dependency every router uses; tests override
it with a fresh ``InMemoryStore``.  FastAPI resolves sync dependencies in
threadpool workers, so the first construction is serialised by a lock.
"""

from __future__ import annotations

import logging
import threading

from marketplace.core.config import settings
from marketplace.db.base import MarketplaceStore
from marketplace.db.memory import InMemoryStore
from marketplace.db.supabase import SupabaseStore

logger = logging.getLogger(__name__)

_store: MarketplaceStore | None = None
_store_lock = threading.Lock()


def get_store() -> MarketplaceStore:
    """Return the singleton store chosen by ``settings.STORE_BACKEND``."""
    global _store
    if _store is not None:
        return _store

    with _store_lock:
        if _store is None:
            backend = settings.STORE_BACKEND.lower()
            if backend == "supabase":
                _store = SupabaseStore()
            elif backend == "memory":
                _store = InMemoryStore()
            else:
                raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")
            logger.info("store_initialized", extra={"backend": backend})
    return _store
