"""
Standardized exception hierarchy for the progression engine
Provides rich context, consistent logging, and caller-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class ProgressionError(Exception):
    """
    Base exception for all progression engine errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise ProgressionError(
            message="Failed to complete drill",
            user_id="player-1",
            operation="complete_drill",
            context={"drill_id": "shoot-1"}
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
        self.user_message = user_message or "Something went wrong while updating your progress."
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
        """Serialize exception for mutation results"""
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

class InvalidInputError(ProgressionError):
    """
    Raised when a mutation argument is out of range

    Example:
        raise InvalidInputError(
            message="Duration cannot be negative",
            field="duration_minutes",
            value=-5,
            user_id="player-1"
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
# Content Catalog Errors
# ==========================================

class CatalogError(ProgressionError):
    """
    Base class for content catalog lookups and loading
    """
    pass


class DrillNotFoundError(CatalogError):
    """Requested drill does not exist in the catalog"""

    def __init__(self, drill_id: str, **kwargs):
        self.drill_id = drill_id
        super().__init__(
            message=f"Drill '{drill_id}' not found in catalog",
            user_message="That drill is no longer available.",
            context={"drill_id": drill_id},
            **kwargs
        )


class ProgramNotFoundError(CatalogError):
    """Requested training program does not exist in the catalog"""

    def __init__(self, program_id: str, **kwargs):
        self.program_id = program_id
        super().__init__(
            message=f"Program '{program_id}' not found in catalog",
            user_message="That training program is no longer available.",
            context={"program_id": program_id},
            **kwargs
        )


class SkillPathNotFoundError(CatalogError):
    """Requested skill mastery path does not exist in the catalog"""

    def __init__(self, skill_id: str, **kwargs):
        self.skill_id = skill_id
        super().__init__(
            message=f"Skill path '{skill_id}' not found in catalog",
            user_message="That skill path is not available.",
            context={"skill_id": skill_id},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(ProgressionError):
    """
    Base class for snapshot persistence errors
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs
    ):
        self.key = key
        kwargs.setdefault("context", {"key": key})
        super().__init__(message=message, **kwargs)


class MalformedPersistedStateError(StorageError):
    """Stored snapshot could not be parsed; callers recover with defaults"""

    def __init__(self, message: str = "Stored progress could not be parsed", **kwargs):
        super().__init__(
            message=message,
            user_message="Your saved progress was unreadable and has been reset.",
            **kwargs
        )


class PersistenceWriteError(StorageError):
    """Writing the snapshot to storage failed"""

    def __init__(self, message: str = "Failed to persist progress", **kwargs):
        super().__init__(
            message=message,
            user_message="Your progress is saved for this session but could not be written to disk.",
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(ProgressionError):
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
            user_message="The progression engine is not properly configured.",
            context={"config_key": config_key},
            **kwargs
        )
