"""
Pydantic models defining the data contracts of an orchestration run.
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import Capability, WorkerMode

# ============================================================================
# Orchestration Contracts
# ============================================================================


class Strategy(BaseModel):
    """One approach produced by the decomposition step."""

    model_config = ConfigDict(frozen=True)

    approach: str = Field(..., description="Brief name of the approach")
    description: str = Field(..., description="What the approach should accomplish")
    capability: Capability | None = Field(
        None, description="Capability hint; None when the decomposer emitted no hint"
    )


class SourceCitation(BaseModel):
    """A source consulted during live retrieval."""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    snippet: str | None = None


class WorkerResult(BaseModel):
    """Output of one worker for one strategy."""

    model_config = ConfigDict(frozen=True)

    approach: str
    result: str
    capability: Capability = Capability.REASONING

    # Worker-specific metadata
    source_citations: list[SourceCitation] | None = None
    documents_used: list[str] | None = None
    retrieval_performed: bool | None = Field(
        None, description="False when the retrieval worker fell back to background knowledge"
    )
    model_id: str | None = None
    duration_ms: float | None = None


class UploadedDocument(BaseModel):
    """A local document uploaded to the collaborator's storage."""

    model_config = ConfigDict(frozen=True)

    remote_id: str
    local_path: Path
    display_name: str


class OrchestrationResult(BaseModel):
    """Terminal output of one orchestration run."""

    model_config = ConfigDict(frozen=True)

    task: str
    strategies: list[Strategy]
    results: list[WorkerResult]
    synthesis: str


class OrchestrationOptions(BaseModel):
    """Per-run options accepted by ``orchestrate``."""

    model_config = ConfigDict(frozen=True)

    model_id: str = Field(default="openai/gpt-4.1", description="Model for decomposition and synthesis")
    max_tokens: int = Field(default=1500, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    context: dict[str, Any] = Field(default_factory=dict)
    worker_mode: WorkerMode = WorkerMode.AUTO
    document_paths: list[Path] = Field(default_factory=list)


# ============================================================================
# Collaborator Contracts
# ============================================================================


class TokenUsage(BaseModel):
    """Token accounting reported by the text generation service."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class GenerationResponse(BaseModel):
    """Response from a plain or document-grounded generation call."""

    text: str = Field(..., description="Generated text")
    model: str = Field(..., description="Model that generated the response")
    usage: TokenUsage | None = None
    latency_ms: float | None = None


class RetrievalResponse(GenerationResponse):
    """Response from a retrieval-augmented generation call."""

    citations: list[SourceCitation] = Field(default_factory=list)


class UploadResponse(BaseModel):
    """Result of uploading a document."""

    remote_id: str
    byte_size: int
    display_name: str
