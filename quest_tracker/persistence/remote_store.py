"""
Remote per-user document store interface

A remote store keeps one game state document per user id and pushes
changes to subscribers (e.g. another device of the same user).
"""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
SnapshotCallback = Callable[[Optional[Document]], None]
ErrorCallback = Callable[[Exception], None]


class RemoteSubscription(ABC):
    """Handle for a live subscription; close() tears it down"""

    @abstractmethod
    async def close(self) -> None:
        ...


class RemoteStateStore(ABC):
    """load / save / subscribe keyed by user id"""

    name = "remote"

    @abstractmethod
    async def load(self, user_id: str) -> Optional[Document]:
        """Return the user's document, or None if there is none"""

    @abstractmethod
    async def save(self, user_id: str, document: Document) -> None:
        """Replace the user's document and notify subscribers"""

    @abstractmethod
    async def subscribe(
        self,
        user_id: str,
        callback: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> RemoteSubscription:
        """Call callback with every document saved for user_id from now on"""


class _InMemorySubscription(RemoteSubscription):
    def __init__(self, store: "InMemoryRemoteStore", user_id: str, callback: SnapshotCallback):
        self._store = store
        self._user_id = user_id
        self._callback = callback
        self.closed = False

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        listeners = self._store._listeners.get(self._user_id, [])
        if self._callback in listeners:
            listeners.remove(self._callback)


class InMemoryRemoteStore(RemoteStateStore):
    """Process-local remote store; subscribers are called synchronously on save"""

    name = "memory"

    def __init__(self):
        self._documents: Dict[str, Document] = {}
        self._listeners: Dict[str, List[SnapshotCallback]] = {}

    async def load(self, user_id: str) -> Optional[Document]:
        document = self._documents.get(user_id)
        return copy.deepcopy(document) if document is not None else None

    async def save(self, user_id: str, document: Document) -> None:
        self._documents[user_id] = copy.deepcopy(document)
        for callback in list(self._listeners.get(user_id, [])):
            callback(copy.deepcopy(document))

    async def subscribe(
        self,
        user_id: str,
        callback: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> RemoteSubscription:
        self._listeners.setdefault(user_id, []).append(callback)
        logger.debug(f"Subscribed to in-memory updates for {user_id}")
        return _InMemorySubscription(self, user_id, callback)
