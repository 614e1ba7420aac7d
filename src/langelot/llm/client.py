"""
LLM Client Wrapper - LiteLLM implementation of the TextGenerator protocol.

Provides plain, retrieval-augmented and document-grounded generation plus
document upload through LiteLLM, normalising every provider failure into
the collaborator error types.
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import litellm
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..exceptions import GenerationError, RetrievalError, UploadError
from ..models.contracts import (
    GenerationResponse,
    RetrievalResponse,
    SourceCitation,
    TokenUsage,
    UploadResponse,
)
from ..utils.logging import get_logger

logger = get_logger(__name__)


class LLMClient:
    """
    Async LLM client using LiteLLM for multi-provider support.

    Example:
        client = LLMClient(api_key=os.environ["OPENAI_API_KEY"])

        response = await client.generate(
            "Hello",
            model_id="openai/gpt-4.1-mini",
            max_tokens=200,
            temperature=0.7,
        )
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        file_provider: str = "openai",
        max_retries: int = 3,
        timeout: int = 120,
        search_context_size: str = "medium",
    ):
        """
        Initialize LLM client.

        Args:
            api_key: Optional API key (LiteLLM also reads provider env vars)
            file_provider: Provider that stores uploaded documents
            max_retries: Attempts for transient timeout/connection failures
            timeout: Request timeout in seconds
            search_context_size: Retrieval depth hint ("low", "medium", "high")
        """
        self.api_key = api_key
        self.file_provider = file_provider
        self.max_retries = max_retries
        self.timeout = timeout
        self.search_context_size = search_context_size

    @classmethod
    def from_config(cls, config) -> "LLMClient":
        """Build a client from a LangelotConfig."""
        return cls(
            api_key=config.openai_api_key,
            max_retries=config.llm_max_retries,
            timeout=config.llm_timeout,
        )

    async def _acompletion(self, **kwargs) -> Any:
        """Call litellm.acompletion, retrying transport-level failures."""
        if self.api_key:
            kwargs.setdefault("api_key", self.api_key)
        kwargs.setdefault("timeout", self.timeout)

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type((TimeoutError, ConnectionError)),
            reraise=True,
        ):
            with attempt:
                return await litellm.acompletion(**kwargs)

    async def generate(
        self,
        prompt: str,
        model_id: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationResponse:
        """
        Plain text generation.

        Args:
            prompt: Prompt text
            model_id: Model in LiteLLM format ("provider/model")
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            GenerationResponse with text, model and usage

        Raises:
            GenerationError: If the call fails or returns no content
        """
        start_time = time.perf_counter()
        logger.debug("llm_call_started", model=model_id, prompt_chars=len(prompt))

        try:
            response = await self._acompletion(
                model=model_id,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=temperature,
            )
            text = response.choices[0].message.content
        except Exception as e:
            raise GenerationError(
                f"LLM completion failed: {str(e)}",
                details={"model": model_id, "error_type": type(e).__name__},
                status_code=_status_code(e),
            ) from e

        if not text:
            raise GenerationError(
                "No content received from LLM",
                details={"model": model_id},
            )

        return GenerationResponse(
            text=text,
            model=model_id,
            usage=_usage(response),
            latency_ms=(time.perf_counter() - start_time) * 1000,
        )

    async def generate_with_retrieval(
        self,
        prompt: str,
        model_id: str,
    ) -> RetrievalResponse:
        """
        Generation with live web retrieval.

        Uses LiteLLM's ``web_search_options`` and reads URL citations from the
        message annotations.

        Raises:
            RetrievalError: If the retrieval-augmented call fails
        """
        start_time = time.perf_counter()
        logger.debug("retrieval_call_started", model=model_id, prompt_chars=len(prompt))

        try:
            response = await self._acompletion(
                model=model_id,
                messages=[{"role": "user", "content": prompt}],
                web_search_options={"search_context_size": self.search_context_size},
            )
            message = response.choices[0].message
        except Exception as e:
            raise RetrievalError(
                f"Retrieval-augmented completion failed: {str(e)}",
                details={"model": model_id, "error_type": type(e).__name__},
                status_code=_status_code(e),
            ) from e

        if not message.content:
            raise RetrievalError(
                "No content received from retrieval call",
                details={"model": model_id},
            )

        citations = _citations(message)
        logger.debug("retrieval_call_completed", model=model_id, citations=len(citations))

        return RetrievalResponse(
            text=message.content,
            model=model_id,
            citations=citations,
            usage=_usage(response),
            latency_ms=(time.perf_counter() - start_time) * 1000,
        )

    async def upload_document(
        self,
        local_path: Path,
        purpose: str,
    ) -> UploadResponse:
        """
        Upload a file to the provider's file storage.

        Raises:
            UploadError: If the file cannot be read or the upload fails
        """
        local_path = Path(local_path)
        try:
            with local_path.open("rb") as fh:
                created = await litellm.acreate_file(
                    file=fh,
                    purpose=purpose,
                    custom_llm_provider=self.file_provider,
                )
        except Exception as e:
            raise UploadError(
                f"Upload failed: {str(e)}",
                path=str(local_path),
                details={"error_type": type(e).__name__},
            ) from e

        return UploadResponse(
            remote_id=created.id,
            byte_size=getattr(created, "bytes", None) or local_path.stat().st_size,
            display_name=getattr(created, "filename", None) or local_path.name,
        )

    async def generate_with_documents(
        self,
        prompt: str,
        document_ids: Sequence[str],
        model_id: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationResponse:
        """
        Generation grounded in uploaded files.

        Each document id is attached as a ``file`` content part next to the
        prompt text.

        Raises:
            GenerationError: If the call fails or returns no content
        """
        start_time = time.perf_counter()
        content: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]
        content.extend({"type": "file", "file": {"file_id": doc_id}} for doc_id in document_ids)

        try:
            response = await self._acompletion(
                model=model_id,
                messages=[{"role": "user", "content": content}],
                max_tokens=max_tokens,
                temperature=temperature,
            )
            text = response.choices[0].message.content
        except Exception as e:
            raise GenerationError(
                f"Document-grounded completion failed: {str(e)}",
                details={
                    "model": model_id,
                    "documents": len(document_ids),
                    "error_type": type(e).__name__,
                },
                status_code=_status_code(e),
            ) from e

        if not text:
            raise GenerationError(
                "No content received from LLM",
                details={"model": model_id},
            )

        return GenerationResponse(
            text=text,
            model=model_id,
            usage=_usage(response),
            latency_ms=(time.perf_counter() - start_time) * 1000,
        )


def _status_code(error: Exception) -> Optional[int]:
    status = getattr(error, "status_code", None)
    return status if isinstance(status, int) else None


def _usage(response: Any) -> Optional[TokenUsage]:
    usage = getattr(response, "usage", None)
    if usage is None:
        return None
    prompt_tokens = getattr(usage, "prompt_tokens", 0) or 0
    completion_tokens = getattr(usage, "completion_tokens", 0) or 0
    return TokenUsage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=getattr(usage, "total_tokens", None) or prompt_tokens + completion_tokens,
    )


def _citations(message: Any) -> List[SourceCitation]:
    """Collect url_citation annotations, first occurrence of each URL wins."""
    annotations = getattr(message, "annotations", None)
    if not isinstance(annotations, list):
        return []

    citations = []
    seen = set()
    for annotation in annotations:
        if isinstance(annotation, dict):
            kind = annotation.get("type")
            data = annotation.get("url_citation") or {}
        else:
            kind = getattr(annotation, "type", None)
            data = getattr(annotation, "url_citation", None) or {}
            if not isinstance(data, dict):
                data = {"url": getattr(data, "url", None), "title": getattr(data, "title", None)}

        url = data.get("url")
        if kind != "url_citation" or not url or url in seen:
            continue
        seen.add(url)
        citations.append(SourceCitation(title=data.get("title") or url, url=url))

    return citations
