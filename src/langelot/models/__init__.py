"""
Pydantic models and enums for Langelot orchestration runs.
"""

from .contracts import (
    GenerationResponse,
    OrchestrationOptions,
    OrchestrationResult,
    RetrievalResponse,
    SourceCitation,
    Strategy,
    TokenUsage,
    UploadedDocument,
    UploadResponse,
    WorkerResult,
)
from .enums import (
    Capability,
    LogLevel,
    OrchestrationState,
    WorkerMode,
)

__all__ = [
    "Strategy",
    "SourceCitation",
    "WorkerResult",
    "UploadedDocument",
    "OrchestrationResult",
    "OrchestrationOptions",
    "TokenUsage",
    "GenerationResponse",
    "RetrievalResponse",
    "UploadResponse",
    "Capability",
    "WorkerMode",
    "OrchestrationState",
    "LogLevel",
]
