"""
In-process listener registry shared by the gateway implementations.

Document listeners are keyed by (collection, id). Each registration gets
its own token so unsubscribing one listener never affects another that
was registered with the same callback.
"""

import itertools
import logging
from typing import Callable, Optional

from shared.models import Identity

from .models import Document, Unsubscribe

logger = logging.getLogger(__name__)

DocumentCallback = Callable[[Optional[Document]], None]
AuthCallback = Callable[[Optional[Identity]], None]


class ListenerRegistry:
    """Holds auth-state and document listeners and fans out notifications."""

    def __init__(self) -> None:
        self._ids = itertools.count()
        self._documents: dict[tuple[str, str], dict[int, DocumentCallback]] = {}
        self._auth: dict[int, AuthCallback] = {}

    def add_document_listener(
        self,
        collection: str,
        document_id: str,
        callback: DocumentCallback,
    ) -> Unsubscribe:
        key = (collection, document_id)
        token = next(self._ids)
        self._documents.setdefault(key, {})[token] = callback

        def unsubscribe() -> None:
            listeners = self._documents.get(key)
            if listeners is None:
                return
            listeners.pop(token, None)
            if not listeners:
                del self._documents[key]

        return unsubscribe

    def add_auth_listener(self, callback: AuthCallback) -> Unsubscribe:
        token = next(self._ids)
        self._auth[token] = callback

        def unsubscribe() -> None:
            self._auth.pop(token, None)

        return unsubscribe

    def listener_count(self, collection: str, document_id: str) -> int:
        return len(self._documents.get((collection, document_id), {}))

    @property
    def auth_listener_count(self) -> int:
        return len(self._auth)

    def notify_document(
        self,
        collection: str,
        document_id: str,
        snapshot: Optional[Document],
    ) -> None:
        # Copy: callbacks may unsubscribe while we iterate
        for callback in list(self._documents.get((collection, document_id), {}).values()):
            try:
                callback(dict(snapshot) if snapshot is not None else None)
            except Exception:
                logger.exception(
                    "Document listener failed for %s/%s", collection, document_id
                )

    def notify_auth(self, identity: Optional[Identity]) -> None:
        for callback in list(self._auth.values()):
            try:
                callback(identity)
            except Exception:
                logger.exception("Auth state listener failed")
