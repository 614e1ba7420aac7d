"""
Pytest configuration and shared fixtures.
"""

import asyncio
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest
from langelot.core.config import LangelotConfig, reset_config
from langelot.exceptions import GenerationError, UploadError
from langelot.models.contracts import (
    GenerationResponse,
    RetrievalResponse,
    SourceCitation,
    TokenUsage,
    UploadResponse,
)
from langelot.observability.call_log import CallLog

_APPROACH_LINE = re.compile(r"^(?:Your )?Approach: (.+)$", re.MULTILINE)

TWO_STRATEGIES = (
    "<approach>Literature scan</approach>\n"
    "<description>Survey the latest published results</description>\n\n"
    "<approach>Industry outlook</approach>\n"
    "<description>Assess commercial adoption and trends</description>"
)


def approach_of(prompt: str) -> str:
    match = _APPROACH_LINE.search(prompt)
    return match.group(1).strip() if match else ""


class FakeGenerator:
    """
    In-memory TextGenerator with scripted replies.

    Prompts are recognised by their opening line: decomposition and synthesis
    get the scripted text, worker calls answer with their approach name.
    """

    def __init__(
        self,
        decomposition: str | Exception = TWO_STRATEGIES,
        synthesis: str | Exception = "Final synthesized answer",
        citations: Optional[List[SourceCitation]] = None,
    ):
        self.decomposition = decomposition
        self.synthesis = synthesis
        self.citations = citations or []
        self.retrieval_error: Optional[Exception] = None
        self.failing_approaches: set[str] = set()
        self.upload_failures: set[str] = set()
        self.delays: Dict[str, float] = {}
        self.calls: List[Dict[str, Any]] = []

    def methods_called(self) -> List[str]:
        return [call["method"] for call in self.calls]

    async def _settle(self, approach: str) -> None:
        await asyncio.sleep(self.delays.get(approach, 0))

    def _response(self, text: str | Exception, model_id: str) -> GenerationResponse:
        if isinstance(text, Exception):
            raise text
        return GenerationResponse(
            text=text,
            model=model_id,
            usage=TokenUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15),
            latency_ms=1.0,
        )

    async def generate(
        self, prompt: str, model_id: str, max_tokens: int, temperature: float
    ) -> GenerationResponse:
        self.calls.append({"method": "generate", "prompt": prompt, "model": model_id})

        if prompt.startswith("You are a task orchestrator"):
            return self._response(self.decomposition, model_id)
        if prompt.startswith("You are a synthesis specialist"):
            return self._response(self.synthesis, model_id)

        approach = approach_of(prompt)
        await self._settle(approach)
        if approach in self.failing_approaches:
            raise GenerationError(f"scripted failure for {approach}", status_code=500)
        return self._response(f"<result>{approach} answer</result>", model_id)

    async def generate_with_retrieval(self, prompt: str, model_id: str) -> RetrievalResponse:
        self.calls.append({"method": "generate_with_retrieval", "prompt": prompt, "model": model_id})

        approach = approach_of(prompt)
        await self._settle(approach)
        if self.retrieval_error is not None:
            raise self.retrieval_error
        return RetrievalResponse(
            text=f"{approach} findings",
            model=model_id,
            citations=list(self.citations),
        )

    async def upload_document(self, local_path: Path, purpose: str) -> UploadResponse:
        self.calls.append({"method": "upload_document", "path": Path(local_path), "purpose": purpose})

        if Path(local_path).name in self.upload_failures:
            raise UploadError("scripted upload failure", path=str(local_path))
        return UploadResponse(
            remote_id=f"file-{Path(local_path).stem}",
            byte_size=Path(local_path).stat().st_size,
            display_name=Path(local_path).name,
        )

    async def generate_with_documents(
        self,
        prompt: str,
        document_ids: Sequence[str],
        model_id: str,
        max_tokens: int,
        temperature: float,
    ) -> GenerationResponse:
        self.calls.append(
            {
                "method": "generate_with_documents",
                "prompt": prompt,
                "model": model_id,
                "document_ids": list(document_ids),
            }
        )

        approach = approach_of(prompt)
        await self._settle(approach)
        if approach in self.failing_approaches:
            raise GenerationError(f"scripted failure for {approach}", status_code=500)
        return self._response(f"<result>{approach} from documents</result>", model_id)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate every test from LANGELOT_* variables and the global config."""
    import os

    for key in list(os.environ):
        if key.startswith("LANGELOT_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_generator():
    """Generator answering the two-strategy battery scenario."""
    return FakeGenerator()


@pytest.fixture
def make_generator():
    """Factory for generators with a custom script."""
    return FakeGenerator


@pytest.fixture
def config():
    """Default configuration"""
    return LangelotConfig()


@pytest.fixture
def call_log():
    return CallLog()


@pytest.fixture
def documents(tmp_path):
    """Two small supported documents on disk."""
    report = tmp_path / "report.pdf"
    report.write_bytes(b"%PDF-1.4 quarterly report")
    notes = tmp_path / "notes.txt"
    notes.write_text("meeting notes")
    return [report, notes]


@pytest.fixture
def mock_litellm_response(mocker):
    """Mock LiteLLM completion response"""
    mock_response = mocker.Mock()
    mock_response.choices = [mocker.Mock()]
    mock_response.choices[0].message.content = "Mocked response"
    mock_response.choices[0].message.annotations = None
    mock_response.choices[0].finish_reason = "stop"
    mock_response.model = "openai/gpt-4.1"
    mock_response.usage.prompt_tokens = 100
    mock_response.usage.completion_tokens = 20
    mock_response.usage.total_tokens = 120
    return mock_response
