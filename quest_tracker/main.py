"""Main entry point for the quest tracker"""
import asyncio
import logging
from typing import Optional

from quest_tracker.config import (
    ENABLE_REMOTE_SYNC,
    LOG_LEVEL,
    QUEST_TIMEZONE,
    QUEST_USER_ID,
    REDIS_URL,
    validate_config,
)
from quest_tracker.exceptions import QuestTrackerError
from quest_tracker.persistence import LocalStateStore, PersistenceGateway
from quest_tracker.persistence.redis_store import RedisRemoteStore
from quest_tracker.services import QuestEngine
from quest_tracker.utils.datetime_helpers import SystemClock

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO)
)

logger = logging.getLogger(__name__)


async def main() -> None:
    """Main application entry point"""
    remote: Optional[RedisRemoteStore] = None
    gateway: Optional[PersistenceGateway] = None
    try:
        logger.info("Validating configuration...")
        validate_config()

        if ENABLE_REMOTE_SYNC:
            logger.info("Connecting to remote store...")
            remote = RedisRemoteStore(REDIS_URL)
            await remote.connect()

        gateway = PersistenceGateway(LocalStateStore(), remote)
        user_id = QUEST_USER_ID if remote is not None else None

        engine = await QuestEngine.load(gateway, user_id=user_id, clock=SystemClock(QUEST_TIMEZONE))
        print(engine.daily_snapshot())

        if user_id:
            await gateway.sign_in(user_id, engine.apply_remote_snapshot)
            logger.info(f"Following remote updates for {user_id}. Press Ctrl+C to stop.")
            await asyncio.Event().wait()

    except QuestTrackerError as e:
        logger.error(f"Startup failed: {e.message}")
        raise
    finally:
        if gateway is not None:
            await gateway.flush()
            await gateway.sign_out()
        if remote is not None:
            await remote.close()


def run() -> None:
    """Console script entry point"""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    run()
