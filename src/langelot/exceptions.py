"""Exception hierarchy with structured context for logging"""

from typing import Any
from datetime import datetime


class LangelotError(Exception):
    """Base exception with enhanced context and metadata"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = False,
        user_message: str | None = None,
    ):
        """
        Initialize exception with context.

        Args:
            message: Technical error message for logs
            details: Additional context (dict for structured logging)
            recoverable: Whether the caller can degrade instead of aborting
            user_message: User-friendly error message
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.user_message = user_message or message
        self.timestamp = datetime.now()

    def __str__(self) -> str:
        parts = [self.message]

        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({details_str})")

        if self.recoverable:
            parts.append("[recoverable]")

        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
            "user_message": self.user_message,
            "timestamp": self.timestamp.isoformat(),
        }


# ============================================================================
# Run-level errors
# ============================================================================


class OrchestrationError(LangelotError):
    """Failure of an orchestration run"""

    def __init__(
        self,
        message: str,
        phase: str | None = None,
        details: dict[str, Any] | None = None,
        recoverable: bool = False,
        user_message: str | None = None,
    ):
        details = details or {}
        if phase:
            details["phase"] = phase

        super().__init__(
            message=message,
            details=details,
            recoverable=recoverable,
            user_message=user_message,
        )
        self.phase = phase


class ConfigurationError(OrchestrationError):
    """Invalid option combination"""

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value

        super().__init__(
            message=message,
            details=details,
            recoverable=False,  # Config errors require fix
            user_message=f"Configuration error: {message}",
        )
        self.field = field
        self.value = value


class DecompositionError(OrchestrationError):
    """Decomposition produced no usable strategies"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            phase="decomposing",
            details=details,
            user_message="The task could not be broken down into approaches.",
        )


class InitializationError(OrchestrationError):
    """A worker could not prepare its prerequisite resources"""

    def __init__(
        self,
        message: str,
        capability: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if capability:
            details["capability"] = capability

        super().__init__(
            message=message,
            phase="dispatching",
            details=details,
            recoverable=True,  # Router can downgrade to reasoning
            user_message="A worker could not be initialized.",
        )
        self.capability = capability


class NotInitializedError(OrchestrationError):
    """Worker used before its initialize phase succeeded"""

    def __init__(self, message: str, capability: str | None = None):
        details = {"capability": capability} if capability else {}
        super().__init__(message=message, phase="dispatching", details=details)
        self.capability = capability


class WorkerExecutionError(OrchestrationError):
    """A worker failed to produce a result"""

    def __init__(
        self,
        message: str,
        approach: str,
        capability: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        details["approach"] = approach
        if capability:
            details["capability"] = capability

        super().__init__(
            message=message,
            phase="dispatching",
            details=details,
            user_message=f"Approach '{approach}' failed.",
        )
        self.approach = approach
        self.capability = capability


class SynthesisError(OrchestrationError):
    """The final merge call failed"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            phase="synthesizing",
            details=details,
            user_message="Worker results could not be synthesized.",
        )


# ============================================================================
# Collaborator errors
# ============================================================================


class CollaboratorError(LangelotError):
    """Raised by the text-generation connector"""

    pass


class GenerationError(CollaboratorError):
    """Text generation call failed"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        # Rate limits (429) are usually recoverable
        recoverable = status_code == 429

        if status_code == 429:
            user_message = "API rate limit exceeded. Please try again in a moment."
        elif status_code == 401:
            user_message = "API authentication failed. Please check your API key."
        elif status_code == 503:
            user_message = "Service temporarily unavailable. Please try again."
        else:
            user_message = "An error occurred while calling the text generation service."

        super().__init__(
            message=message,
            details=details or {},
            recoverable=recoverable,
            user_message=user_message,
        )
        self.status_code = status_code


class RetrievalError(GenerationError):
    """Retrieval-augmented generation call failed"""

    pass


class UploadError(CollaboratorError):
    """Document upload failed"""

    def __init__(self, message: str, path: str, details: dict[str, Any] | None = None):
        details = details or {}
        details["path"] = path

        super().__init__(
            message=message,
            details=details,
            recoverable=True,  # Other documents may still upload
            user_message=f"Failed to upload '{path}'.",
        )
        self.path = path
