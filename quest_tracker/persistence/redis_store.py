"""
Redis-backed remote store

- Document per user at quest:users:{user_id}:game_state
- Every save is published on quest:users:{user_id}:updates together with
  the writer's client id, so a client can ignore its own echoes
"""

import asyncio
import json
import logging
import uuid
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from quest_tracker.config import REDIS_URL
from quest_tracker.exceptions import RemoteStoreError, wrap_external_exception
from quest_tracker.persistence.remote_store import (
    Document,
    ErrorCallback,
    RemoteStateStore,
    RemoteSubscription,
    SnapshotCallback,
)

logger = logging.getLogger(__name__)

KEY_PREFIX = "quest:users"


def state_key(user_id: str) -> str:
    return f"{KEY_PREFIX}:{user_id}:game_state"


def updates_channel(user_id: str) -> str:
    return f"{KEY_PREFIX}:{user_id}:updates"


class RedisSubscription(RemoteSubscription):
    def __init__(self, pubsub: Any, task: "asyncio.Task[None]", channel: str):
        self._pubsub = pubsub
        self._task = task
        self._channel = channel

    async def close(self) -> None:
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass

        try:
            await self._pubsub.unsubscribe(self._channel)
            await self._pubsub.aclose()
        except RedisError as e:
            logger.warning(f"Error closing subscription to {self._channel}: {e}")

        logger.info(f"Unsubscribed from {self._channel}")


class RedisRemoteStore(RemoteStateStore):
    """
    Async Redis remote store

    Call connect() before use (or pass an existing redis.asyncio client).
    Failures surface as RemoteStoreError; the gateway decides the fallback.
    """

    name = "redis"

    def __init__(self, redis_url: str = REDIS_URL, client: Optional[Any] = None):
        self.redis_url = redis_url
        self.client_id = uuid.uuid4().hex
        self._client = client

    async def connect(self) -> None:
        """Establish Redis connection"""
        if self._client is not None:
            return

        try:
            self._client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                max_connections=10,
            )
            await self._client.ping()
            logger.info(f"✅ Redis connected: {self.redis_url}")
        except RedisError as e:
            self._client = None
            raise wrap_external_exception(e, operation="connect_remote_store", context={"url": self.redis_url})

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis connection closed")

    @property
    def client(self) -> Any:
        if self._client is None:
            raise RemoteStoreError(
                message="Redis store used before connect()",
                backend=self.name,
                operation="redis_client",
            )
        return self._client

    async def load(self, user_id: str) -> Optional[Document]:
        try:
            raw = await self.client.get(state_key(user_id))
        except RedisError as e:
            raise wrap_external_exception(e, operation="load_remote_state", user_id=user_id)

        if raw is None:
            logger.debug(f"No remote state for {user_id}")
            return None

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring malformed remote state for {user_id}: {e}")
            return None

        return document if isinstance(document, dict) else None

    async def save(self, user_id: str, document: Document) -> None:
        payload = json.dumps(document, ensure_ascii=False)
        message = json.dumps({"origin": self.client_id, "document": document}, ensure_ascii=False)

        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.set(state_key(user_id), payload)
                pipe.publish(updates_channel(user_id), message)
                await pipe.execute()
        except RedisError as e:
            raise wrap_external_exception(e, operation="save_remote_state", user_id=user_id)

        logger.debug(f"Remote state saved for {user_id}")

    async def subscribe(
        self,
        user_id: str,
        callback: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> RemoteSubscription:
        channel = updates_channel(user_id)
        pubsub = self.client.pubsub()
        try:
            await pubsub.subscribe(channel)
        except RedisError as e:
            raise wrap_external_exception(e, operation="subscribe_remote_state", user_id=user_id)

        task = asyncio.create_task(self._listen(pubsub, channel, callback, on_error))
        logger.info(f"Subscribed to {channel}")
        return RedisSubscription(pubsub, task, channel)

    async def _listen(
        self,
        pubsub: Any,
        channel: str,
        callback: SnapshotCallback,
        on_error: Optional[ErrorCallback],
    ) -> None:
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue

                try:
                    envelope = json.loads(message["data"])
                except (TypeError, json.JSONDecodeError) as e:
                    logger.warning(f"Dropping malformed update on {channel}: {e}")
                    continue

                if not isinstance(envelope, dict) or envelope.get("origin") == self.client_id:
                    continue

                callback(envelope.get("document"))
        except RedisError as e:
            logger.error(f"Subscription to {channel} failed: {e}")
            if on_error is not None:
                on_error(wrap_external_exception(e, operation="listen_remote_state", context={"channel": channel}))
