"""
Standardized exception hierarchy for quest-tracker
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

import redis.exceptions

logger = logging.getLogger(__name__)


class QuestTrackerError(Exception):
    """
    Base exception for all quest-tracker errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise QuestTrackerError(
            message="Failed to save game state",
            user_id="user-42",
            operation="save_state",
            context={"target": "remote"}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "Something went wrong. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (Caller Input)
# ==========================================

class ValidationError(QuestTrackerError):
    """
    Raised when caller input fails validation

    Examples:
    - Day index outside Monday..Sunday
    - Unknown task priority

    Example:
        raise ValidationError(
            message="Day index must be between 0 and 6",
            field="day_index",
            value=9
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Persistence Errors
# ==========================================

class PersistenceError(QuestTrackerError):
    """
    Base class for game state storage errors
    """
    pass


class LocalStoreError(PersistenceError):
    """Reading or writing the local state file failed"""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        self.path = path
        extra = kwargs.pop("context", None) or {}
        super().__init__(
            message=message,
            user_message="We couldn't save your progress on this device.",
            context={"path": path, **extra},
            **kwargs
        )


class RemoteStoreError(PersistenceError):
    """The remote per-user document store failed"""

    def __init__(self, message: str, backend: Optional[str] = None, **kwargs):
        self.backend = backend
        extra = kwargs.pop("context", None) or {}
        super().__init__(
            message=message,
            user_message="Cloud sync is unavailable right now. Your progress is saved on this device.",
            context={"backend": backend, **extra},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(QuestTrackerError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The app is not properly configured.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Agent/Assistant Errors
# ==========================================

class AgentError(QuestTrackerError):
    """Assistant tool processing error"""
    pass


class ToolCallError(AgentError):
    """An assistant tool call could not be applied"""

    def __init__(
        self,
        message: str,
        tool_name: Optional[str] = None,
        **kwargs
    ):
        self.tool_name = tool_name
        super().__init__(
            message=message,
            user_message="The assistant asked for something I couldn't do.",
            context={"tool_name": tool_name},
            **kwargs
        )


class SuggestionStateError(AgentError):
    """A suggestion was accepted or dismissed after it was already resolved"""

    def __init__(
        self,
        message: str,
        suggestion_id: Optional[str] = None,
        status: Optional[str] = None,
        **kwargs
    ):
        self.suggestion_id = suggestion_id
        self.status = status
        super().__init__(
            message=message,
            user_message="That suggestion was already handled.",
            context={"suggestion_id": suggestion_id, "status": status},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> QuestTrackerError:
    """
    Wrap external exceptions (redis, filesystem) into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        user_id: User ID if applicable
        context: Additional context

    Returns:
        Appropriate QuestTrackerError subclass

    Example:
        try:
            await client.set(key, payload)
        except redis.exceptions.RedisError as e:
            raise wrap_external_exception(e, operation="save_remote_state", user_id=user_id)
    """
    if isinstance(error, redis.exceptions.RedisError):
        return RemoteStoreError(
            message=f"Redis operation failed: {str(error)}",
            backend="redis",
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )
    elif isinstance(error, OSError):
        return LocalStoreError(
            message=f"File operation failed: {str(error)}",
            path=getattr(error, "filename", None),
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )

    # Generic fallback
    else:
        return QuestTrackerError(
            message=f"{operation} failed: {str(error)}",
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )
