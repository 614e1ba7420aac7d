"""
Retrieval worker: generation augmented with live information retrieval.

When the retrieval-augmented call fails, the worker degrades once to a
plain generation call and marks the answer as background-knowledge only.
"""

import time
from typing import Any, List, Mapping, Optional

from ..core.prompts import RETRIEVAL_DISCLAIMER, build_fallback_prompt, build_retrieval_prompt
from ..exceptions import GenerationError, RetrievalError, WorkerExecutionError
from ..llm.base import TextGenerator
from ..models.contracts import RetrievalResponse, SourceCitation, WorkerResult
from ..models.enums import Capability
from ..observability.call_log import CallLog
from ..serializers.tagged_text import RESULT_TAG, extract_first
from .base import BaseWorker


class RetrievalWorker(BaseWorker):
    """
    Answers an approach with current information from live retrieval.

    Example:
        worker = RetrievalWorker(client, model="openai/gpt-4o-search-preview",
                                 fallback_model="openai/gpt-4.1")
        result = await worker.execute(task, "Market scan", "Find recent launches")
    """

    capability = Capability.RETRIEVAL

    def __init__(
        self,
        client: TextGenerator,
        model: str,
        fallback_model: Optional[str] = None,
        fallback_max_tokens: int = 1500,
        fallback_temperature: float = 0.7,
        call_log: Optional[CallLog] = None,
    ):
        """
        Args:
            client: Text generation collaborator
            model: Retrieval-capable model
            fallback_model: Model for the degraded plain call (defaults to ``model``)
            fallback_max_tokens: Output token limit of the degraded call
            fallback_temperature: Sampling temperature of the degraded call
            call_log: Sink for collaborator calls
        """
        super().__init__(
            client,
            model=model,
            max_tokens=fallback_max_tokens,
            temperature=fallback_temperature,
            call_log=call_log,
        )
        self.fallback_model = fallback_model or model

    async def execute(
        self,
        task: str,
        approach: str,
        description: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> WorkerResult:
        start_time = time.perf_counter()
        prompt = build_retrieval_prompt(task, approach, description, context)

        try:
            response: RetrievalResponse = await self.call_log.track(
                role=self._role(approach),
                model=self.model,
                prompt=prompt,
                call=self.client.generate_with_retrieval(prompt, self.model),
            )
        except RetrievalError as e:
            self.logger.warning(
                "retrieval_failed_falling_back",
                approach=approach,
                error=str(e),
            )
            return await self._execute_fallback(task, approach, description, context, start_time)

        citations = response.citations or None
        return WorkerResult(
            approach=approach,
            result=self.format_result(approach, response.text, citations),
            capability=self.capability,
            source_citations=citations,
            retrieval_performed=True,
            model_id=response.model,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )

    @staticmethod
    def format_result(
        approach: str,
        text: str,
        citations: Optional[List[SourceCitation]] = None,
    ) -> str:
        """Result body followed by an enumerated list of sources."""
        result = f'Using the "{approach}" approach with live retrieval:\n\n{text.strip()}'

        if citations:
            lines = ["", "", "Sources consulted:"]
            for index, source in enumerate(citations, start=1):
                lines.append(f"{index}. {source.title} - {source.url}")
                if source.snippet:
                    lines.append(f"   {source.snippet}")
            result += "\n".join(lines)

        return result

    async def _execute_fallback(
        self,
        task: str,
        approach: str,
        description: str,
        context: Optional[Mapping[str, Any]],
        start_time: float,
    ) -> WorkerResult:
        prompt = build_fallback_prompt(task, approach, description, context)

        try:
            response = await self._generate(
                prompt,
                approach,
                model=self.fallback_model,
                role=f"fallback-worker ({approach})",
            )
        except GenerationError as e:
            raise WorkerExecutionError(
                f"Fallback worker execution failed: {e.message}",
                approach=approach,
                capability=self.capability.value,
            ) from e

        result = extract_first(response.text, RESULT_TAG) or response.text.strip()

        return WorkerResult(
            approach=approach,
            result=f"{result}\n\n{RETRIEVAL_DISCLAIMER}",
            capability=self.capability,
            source_citations=None,
            retrieval_performed=False,
            model_id=response.model,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
