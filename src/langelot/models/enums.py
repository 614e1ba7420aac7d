"""Enums for capabilities, worker selection modes and run states.

Every capability-dependent decision in Langelot dispatches on these enums
rather than on raw strings.
"""

from enum import Enum


class Capability(str, Enum):
    """Kind of worker an approach needs.

    Attributes:
        REASONING: Fast model working from its own knowledge
        RETRIEVAL: Generation augmented with live information retrieval
        DOCUMENT_ANALYSIS: Generation grounded in uploaded documents
    """
    REASONING = "reasoning"
    RETRIEVAL = "retrieval"
    DOCUMENT_ANALYSIS = "document_analysis"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value

    @classmethod
    def parse(cls, literal: str) -> "Capability | None":
        """Map a capability literal emitted by the model to a member.

        Accepts member values and names in any case, with or without
        separators (``DocumentAnalysis``, ``document-analysis``), plus the
        legacy agent names ``simple``, ``search`` and ``librarian``.
        Returns None for anything else.
        """
        key = literal.strip().lower().replace("-", "_").replace(" ", "_")
        if key in _ALIASES:
            return _ALIASES[key]

        compact = key.replace("_", "")
        for member in cls:
            if member.value.replace("_", "") == compact:
                return member
        return None


_ALIASES = {
    "simple": Capability.REASONING,
    "search": Capability.RETRIEVAL,
    "web_search": Capability.RETRIEVAL,
    "librarian": Capability.DOCUMENT_ANALYSIS,
    "document": Capability.DOCUMENT_ANALYSIS,
    "documents": Capability.DOCUMENT_ANALYSIS,
}


class WorkerMode(str, Enum):
    """Global worker-type selection for a run.

    Attributes:
        AUTO: Use decomposition hints, falling back to the task heuristic
        REASONING: Force every approach onto the reasoning worker
        RETRIEVAL: Force every approach onto the retrieval worker
        DOCUMENT_ANALYSIS: Force every approach onto the document worker
    """
    AUTO = "auto"
    REASONING = "reasoning"
    RETRIEVAL = "retrieval"
    DOCUMENT_ANALYSIS = "document_analysis"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value

    @property
    def fixed_capability(self) -> Capability | None:
        """Capability forced for the whole run, or None in auto mode."""
        if self is WorkerMode.AUTO:
            return None
        return Capability(self.value)


class OrchestrationState(str, Enum):
    """Pipeline states of a single orchestration run."""
    DECOMPOSING = "decomposing"
    DISPATCHING = "dispatching"
    SYNTHESIZING = "synthesizing"
    DONE = "done"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


class LogLevel(str, Enum):
    """Standard logging levels.

    Attributes:
        DEBUG: Detailed diagnostic information, including prompts
        INFO: General informational messages
        WARNING: Warning messages for degraded paths
        ERROR: Error messages for serious problems
        CRITICAL: Critical messages for severe errors
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value


# Export all enums
__all__ = [
    "Capability",
    "WorkerMode",
    "OrchestrationState",
    "LogLevel",
]
