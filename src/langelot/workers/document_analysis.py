"""
Document analysis worker: generation grounded in uploaded local documents.

Lifecycle:
1. ``initialize()`` uploads every usable document once per run
2. ``execute()`` references all uploaded documents in one generation call
3. ``cleanup()`` forgets the uploads (remote copies expire on their own)
"""

import time
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from ..core.prompts import build_document_prompt
from ..exceptions import (
    ConfigurationError,
    GenerationError,
    InitializationError,
    NotInitializedError,
    UploadError,
    WorkerExecutionError,
)
from ..llm.base import TextGenerator
from ..models.contracts import UploadedDocument, WorkerResult
from ..models.enums import Capability
from ..observability.call_log import CallLog
from ..serializers.tagged_text import RESULT_TAG, extract_first
from .base import BaseWorker

DEFAULT_EXTENSIONS = (".pdf", ".txt", ".md", ".doc", ".docx")


class DocumentAnalysisWorker(BaseWorker):
    """
    Answers an approach from a fixed set of uploaded documents.

    Example:
        worker = DocumentAnalysisWorker(client, model="openai/gpt-4.1",
                                        document_paths=["report.pdf"])
        await worker.initialize()
        result = await worker.execute(task, "Report review", "Summarize findings")
    """

    capability = Capability.DOCUMENT_ANALYSIS

    def __init__(
        self,
        client: TextGenerator,
        model: str,
        document_paths: Sequence[Path | str],
        max_tokens: int = 2000,
        temperature: float = 0.3,
        supported_extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        upload_purpose: str = "user_data",
        call_log: Optional[CallLog] = None,
    ):
        """
        Args:
            client: Text generation collaborator
            model: Model able to read uploaded files
            document_paths: Local documents to upload (must not be empty)
            max_tokens: Output token limit per call
            temperature: Sampling temperature
            supported_extensions: Accepted file extensions (lower-case, with dot)
            upload_purpose: Purpose tag passed to the upload call
            call_log: Sink for collaborator calls

        Raises:
            ConfigurationError: If no document paths are given
        """
        if not document_paths:
            raise ConfigurationError(
                "Document analysis requires at least one document path",
                field="document_paths",
            )

        super().__init__(
            client,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            call_log=call_log,
        )
        self.document_paths = [Path(p) for p in document_paths]
        self.supported_extensions = tuple(ext.lower() for ext in supported_extensions)
        self.upload_purpose = upload_purpose
        self._uploaded: List[UploadedDocument] = []

    @property
    def uploaded_documents(self) -> List[UploadedDocument]:
        """Copy of the documents uploaded so far."""
        return list(self._uploaded)

    @property
    def is_initialized(self) -> bool:
        return bool(self._uploaded)

    async def initialize(self) -> None:
        """
        Upload every valid document.

        A single file's failure is logged and skipped.

        Raises:
            InitializationError: If no document could be uploaded
        """
        failures = {}
        for path in self.document_paths:
            try:
                self._uploaded.append(await self._upload(path))
            except UploadError as e:
                self.logger.warning("document_upload_failed", path=str(path), error=e.message)
                failures[str(path)] = e.message

        if not self._uploaded:
            raise InitializationError(
                "Document analysis worker failed to upload any documents",
                capability=self.capability.value,
                details={"failures": failures},
            )

        self.logger.info(
            "document_worker_initialized",
            uploaded=len(self._uploaded),
            skipped=len(failures),
        )

    async def _upload(self, path: Path) -> UploadedDocument:
        if not path.is_file():
            raise UploadError(f"File not found: {path}", path=str(path))

        extension = path.suffix.lower()
        if extension not in self.supported_extensions:
            raise UploadError(
                f"Unsupported file type: {extension or '(none)'}. "
                f"Supported types: {', '.join(self.supported_extensions)}",
                path=str(path),
            )

        response = await self.client.upload_document(path, self.upload_purpose)
        self.logger.info(
            "document_uploaded",
            name=path.name,
            remote_id=response.remote_id,
            byte_size=response.byte_size,
        )
        return UploadedDocument(
            remote_id=response.remote_id,
            local_path=path,
            display_name=path.name,
        )

    async def execute(
        self,
        task: str,
        approach: str,
        description: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> WorkerResult:
        if not self._uploaded:
            raise NotInitializedError(
                "Document analysis worker not initialized. Call initialize() first.",
                capability=self.capability.value,
            )

        start_time = time.perf_counter()
        documents = list(self._uploaded)
        names = [doc.display_name for doc in documents]
        prompt = build_document_prompt(task, approach, description, names, context)

        try:
            response = await self.call_log.track(
                role=self._role(approach),
                model=self.model,
                prompt=prompt,
                call=self.client.generate_with_documents(
                    prompt,
                    [doc.remote_id for doc in documents],
                    self.model,
                    self.max_tokens,
                    self.temperature,
                ),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except GenerationError as e:
            raise WorkerExecutionError(
                f"Document analysis worker execution failed: {e.message}",
                approach=approach,
                capability=self.capability.value,
            ) from e

        result = extract_first(response.text, RESULT_TAG) or response.text.strip()

        return WorkerResult(
            approach=approach,
            result=result,
            capability=self.capability,
            documents_used=names,
            model_id=response.model,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )

    async def cleanup(self) -> None:
        """Forget uploaded documents. Remote files are left to expire."""
        self._uploaded = []
