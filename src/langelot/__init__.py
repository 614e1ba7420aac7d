"""
Langelot - Task orchestration over capability-specialised LLM workers.

Decomposes a task into approaches, runs each through a reasoning, retrieval
or document-analysis worker in parallel, and synthesizes one answer.
"""

# Setup rich tracebacks globally
from .utils.rich_logging import setup_rich_logging
setup_rich_logging()

from .core.config import LangelotConfig
from .core.orchestrator import Orchestrator, orchestrate
from .exceptions import LangelotError, OrchestrationError
from .llm import LLMClient, TextGenerator
from .models import (
    Capability,
    OrchestrationOptions,
    OrchestrationResult,
    Strategy,
    WorkerMode,
    WorkerResult,
)
from .observability import CallLog

__version__ = "0.1.0"

__all__ = [
    "Orchestrator",
    "orchestrate",
    "LangelotConfig",
    "LLMClient",
    "TextGenerator",
    "CallLog",
    "Capability",
    "WorkerMode",
    "Strategy",
    "WorkerResult",
    "OrchestrationOptions",
    "OrchestrationResult",
    "LangelotError",
    "OrchestrationError",
]
