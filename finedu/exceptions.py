"""
Standardized exception hierarchy for finedu
Provides rich context, consistent logging, and user-friendly error messages

Only caller contract violations are raised as exceptions. Domain outcomes
(not enough potions, achievement already unlocked, no streak to break) are
reported through return values by the progression engine.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class FinEduError(Exception):
    """
    Base exception for all finedu errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise FinEduError(
            message="Failed to persist avatar",
            user_id="student-42",
            operation="save_avatar",
            context={"path": "data/avatars/student-42.json"}
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
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
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
# Validation Errors (caller contract)
# ==========================================

class ValidationError(FinEduError):
    """
    Raised when an engine operation receives malformed input

    Examples:
    - Non-integer or non-finite XP amount
    - Empty XP source tag
    - Non-positive inventory quantity

    Example:
        raise ValidationError(
            message="XP amount must be an integer",
            field="amount",
            value="ten"
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


class UnknownAchievementError(ValidationError):
    """Achievement identifier is not part of the catalog"""

    def __init__(self, achievement_id: Any, **kwargs):
        self.achievement_id = achievement_id
        super().__init__(
            message=f"Unknown achievement '{achievement_id}'",
            field="achievement_id",
            value=achievement_id,
            **kwargs
        )


class UnknownEventError(ValidationError):
    """Event object has no handler in the progression engine"""

    def __init__(self, event: Any, **kwargs):
        super().__init__(
            message=f"No handler for event {type(event).__name__}",
            field="event",
            value=repr(event),
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(FinEduError):
    """
    Base class for avatar persistence errors
    """

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault(
            "user_message",
            "We encountered an issue saving your progress. Please try again."
        )
        super().__init__(message=message, **kwargs)


class RecordNotFoundError(StorageError):
    """Requested avatar record does not exist"""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(FinEduError):
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
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )
