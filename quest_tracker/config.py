"""Configuration management"""
import os
from pathlib import Path
from dotenv import load_dotenv

from quest_tracker.exceptions import ConfigurationError

load_dotenv()

# Storage
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))
LOCAL_STATE_FILENAME: str = os.getenv("LOCAL_STATE_FILENAME", "game_state.json")

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Calendar
# IANA timezone used to decide "today", the weekday index and the week start
QUEST_TIMEZONE: str = os.getenv("QUEST_TIMEZONE", "UTC")

# Remote sync
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
ENABLE_REMOTE_SYNC: bool = os.getenv("ENABLE_REMOTE_SYNC", "false").lower() == "true"
REMOTE_SAVE_DEBOUNCE_SECONDS: float = float(os.getenv("REMOTE_SAVE_DEBOUNCE_SECONDS", "1.0"))
QUEST_USER_ID: str = os.getenv("QUEST_USER_ID", "")

# Celebrations
SOUND_ENABLED: bool = os.getenv("SOUND_ENABLED", "true").lower() == "true"
CONFETTI_ENABLED: bool = os.getenv("CONFETTI_ENABLED", "true").lower() == "true"

# Assistant
AGENT_MODEL: str = os.getenv("AGENT_MODEL", "google-gla:gemini-2.5-flash")


# Validation
def validate_config() -> None:
    """Validate configuration"""
    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(f"Unknown LOG_LEVEL: {LOG_LEVEL}", config_key="LOG_LEVEL")
    if REMOTE_SAVE_DEBOUNCE_SECONDS < 0:
        raise ConfigurationError(
            "REMOTE_SAVE_DEBOUNCE_SECONDS must not be negative",
            config_key="REMOTE_SAVE_DEBOUNCE_SECONDS",
        )
    if ENABLE_REMOTE_SYNC and not REDIS_URL:
        raise ConfigurationError("REDIS_URL is required when remote sync is enabled", config_key="REDIS_URL")
    if ENABLE_REMOTE_SYNC and not QUEST_USER_ID:
        raise ConfigurationError("QUEST_USER_ID is required when remote sync is enabled", config_key="QUEST_USER_ID")
