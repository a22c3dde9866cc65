"""
Game state persistence

- LocalStateStore: JSON file, written synchronously on every change
- RemoteStateStore: per-user document store (in-memory or Redis)
- PersistenceGateway: local-first saves with a debounced remote write
"""

from quest_tracker.persistence.local_store import LocalStateStore
from quest_tracker.persistence.remote_store import InMemoryRemoteStore, RemoteStateStore, RemoteSubscription
from quest_tracker.persistence.gateway import PersistenceGateway

__all__ = [
    "LocalStateStore",
    "RemoteStateStore",
    "RemoteSubscription",
    "InMemoryRemoteStore",
    "PersistenceGateway",
]
