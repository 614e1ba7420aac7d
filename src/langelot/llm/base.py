"""
Collaborator protocol for the text generation service.

The orchestrator and workers depend only on this protocol; ``LLMClient``
is the LiteLLM-backed implementation and tests substitute in-memory fakes.
Implementations must be safe to call concurrently.
"""

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from ..models.contracts import GenerationResponse, RetrievalResponse, UploadResponse


@runtime_checkable
class TextGenerator(Protocol):
    """Async text generation capability."""

    async def generate(
        self,
        prompt: str,
        model_id: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationResponse:
        """Plain generation. Raises GenerationError."""
        ...

    async def generate_with_retrieval(
        self,
        prompt: str,
        model_id: str,
    ) -> RetrievalResponse:
        """Generation with live information retrieval. Raises RetrievalError."""
        ...

    async def upload_document(
        self,
        local_path: Path,
        purpose: str,
    ) -> UploadResponse:
        """Upload a local file to the service's storage. Raises UploadError."""
        ...

    async def generate_with_documents(
        self,
        prompt: str,
        document_ids: Sequence[str],
        model_id: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationResponse:
        """Generation grounded in previously uploaded documents. Raises GenerationError."""
        ...
