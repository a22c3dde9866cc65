"""
Persistence Gateway

Local-first persistence with optional remote sync:
- save(): synchronous local write, then a debounced remote write of the
  latest snapshot while a user is signed in
- load(): remote first when signed in, falling back to local; local data
  is migrated when the remote has nothing yet
- sign_in()/sign_out(): live subscription to remote snapshots, which
  replace the in-memory state wholesale (last write wins)
"""

import logging
from datetime import datetime, timezone
from functools import partial
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from quest_tracker.config import REMOTE_SAVE_DEBOUNCE_SECONDS
from quest_tracker.exceptions import QuestTrackerError
from quest_tracker.models.game_state import GameState
from quest_tracker.observability.metrics import persistence_loads_total, persistence_writes_total
from quest_tracker.persistence.debounce import Debouncer
from quest_tracker.persistence.local_store import LocalStateStore
from quest_tracker.persistence.remote_store import RemoteStateStore, RemoteSubscription

logger = logging.getLogger(__name__)

NoticeCallback = Callable[[str], None]
RemoteUpdateCallback = Callable[[GameState], None]

LOAD_FAILED_NOTICE = "Couldn't load your cloud data. Using your local progress for now."
SYNC_FAILED_NOTICE = "Live sync is unavailable. Changes are still saved on this device."


def parse_state(document: Optional[Dict[str, Any]], source: str) -> Optional[GameState]:
    """Validate a stored document; malformed data is treated as absent"""
    if document is None:
        return None
    try:
        return GameState.model_validate(document)
    except PydanticValidationError as e:
        logger.warning(f"Discarding malformed {source} state: {e.error_count()} validation error(s)")
        persistence_loads_total.labels(source=source, status="malformed").inc()
        return None


class PersistenceGateway:
    def __init__(
        self,
        local_store: Optional[LocalStateStore] = None,
        remote_store: Optional[RemoteStateStore] = None,
        debounce_seconds: float = REMOTE_SAVE_DEBOUNCE_SECONDS,
        on_notice: Optional[NoticeCallback] = None,
    ):
        self.local_store = local_store or LocalStateStore()
        self.remote_store = remote_store
        self.on_notice = on_notice
        self._debouncer = Debouncer(debounce_seconds)
        self._user_id: Optional[str] = None
        self._subscription: Optional[RemoteSubscription] = None
        self._last_written_stamp: Optional[str] = None
        self._local_writes = 0

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def remote_enabled(self) -> bool:
        return self._user_id is not None and self.remote_store is not None

    @property
    def remote_write_pending(self) -> bool:
        return self._debouncer.pending

    def _notify(self, message: str) -> None:
        logger.warning(message)
        if self.on_notice is not None:
            self.on_notice(message)

    # ==========================================
    # Save
    # ==========================================

    def save(self, state: GameState) -> Dict[str, Any]:
        """
        Persist a snapshot

        Returns:
            The stamped document that was written
        """
        document = state.to_document()
        document["updatedAt"] = datetime.now(timezone.utc).isoformat()

        self._write_local(document)

        if self.remote_enabled:
            try:
                self._debouncer.schedule(
                    partial(self._write_remote, self._user_id, document, self._local_writes)
                )
            except RuntimeError:
                logger.debug("No running event loop; skipping remote write")

        return document

    def _write_local(self, document: Dict[str, Any]) -> bool:
        self._local_writes += 1
        try:
            self.local_store.save(document)
        except QuestTrackerError as e:
            logger.error(f"Local save failed: {e.message}")
            persistence_writes_total.labels(target="local", status="error").inc()
            return False
        persistence_writes_total.labels(target="local", status="success").inc()
        return True

    async def _write_remote(self, user_id: str, document: Dict[str, Any], local_generation: int) -> None:
        # Set before the write: the store may echo the update back before save() returns
        self._last_written_stamp = document.get("updatedAt")
        try:
            await self.remote_store.save(user_id, document)
        except Exception as e:
            logger.error(f"Remote save failed for {user_id}, keeping local copy: {e}")
            persistence_writes_total.labels(target="remote", status="error").inc()
            # A newer local write supersedes this document
            if self._local_writes == local_generation:
                self._write_local(document)
            return
        persistence_writes_total.labels(target="remote", status="success").inc()

    async def flush(self) -> None:
        """Perform a pending remote write immediately"""
        await self._debouncer.flush()

    # ==========================================
    # Load
    # ==========================================

    def load_local(self) -> Optional[GameState]:
        state = parse_state(self.local_store.load(), "local")
        if state is not None:
            persistence_loads_total.labels(source="local", status="success").inc()
        return state

    async def load(self, user_id: Optional[str] = None) -> Optional[GameState]:
        """
        Load the stored game state

        Args:
            user_id: Signed-in user, if any (kept for later saves)

        Returns:
            The stored state, or None when nothing usable is stored
        """
        if user_id is not None:
            self._user_id = user_id

        if not self.remote_enabled:
            return self.load_local()

        try:
            document = await self.remote_store.load(self._user_id)
        except Exception as e:
            logger.error(f"Remote load failed for {self._user_id}: {e}")
            persistence_loads_total.labels(source="remote", status="error").inc()
            self._notify(LOAD_FAILED_NOTICE)
            return self.load_local()

        if document is None:
            local = self.load_local()
            if local is not None:
                await self._migrate(local)
            return local

        state = parse_state(document, "remote")
        if state is None:
            return self.load_local()

        persistence_loads_total.labels(source="remote", status="success").inc()
        self._write_local(document)
        return state

    async def _migrate(self, state: GameState) -> None:
        document = state.to_document()
        document["updatedAt"] = datetime.now(timezone.utc).isoformat()
        try:
            await self.remote_store.save(self._user_id, document)
        except Exception as e:
            logger.error(f"Error migrating local data for {self._user_id}: {e}")
            return
        logger.info(f"Successfully migrated local data to remote store for {self._user_id}")

    # ==========================================
    # Session
    # ==========================================

    async def sign_in(self, user_id: str, on_remote_update: RemoteUpdateCallback) -> None:
        """Start following remote snapshots for user_id"""
        if self._subscription is not None:
            await self._subscription.close()
            self._subscription = None
        self._user_id = user_id

        if self.remote_store is None:
            return

        def handle_snapshot(document: Optional[Dict[str, Any]]) -> None:
            if document is None:
                return
            if self._last_written_stamp and document.get("updatedAt") == self._last_written_stamp:
                logger.debug("Ignoring echo of our own remote write")
                return
            state = parse_state(document, "remote")
            if state is None:
                return
            logger.info(f"Applying remote snapshot for {user_id}")
            # The pending write holds state older than this snapshot
            self._debouncer.cancel()
            self._write_local(document)
            on_remote_update(state)

        def handle_error(error: Exception) -> None:
            self._notify(SYNC_FAILED_NOTICE)

        try:
            self._subscription = await self.remote_store.subscribe(user_id, handle_snapshot, handle_error)
        except Exception as e:
            logger.error(f"Could not subscribe to remote updates for {user_id}: {e}")
            self._notify(SYNC_FAILED_NOTICE)

    async def sign_out(self) -> None:
        """Stop remote sync; a pending remote write is dropped"""
        self._debouncer.cancel()
        if self._subscription is not None:
            await self._subscription.close()
            self._subscription = None
        self._user_id = None
