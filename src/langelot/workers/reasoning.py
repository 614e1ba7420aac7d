"""
Reasoning worker: one low-latency generation call, no external side effects.
"""

import time
from typing import Any, Mapping, Optional

from ..core.prompts import build_reasoning_prompt
from ..exceptions import GenerationError, WorkerExecutionError
from ..models.contracts import WorkerResult
from ..models.enums import Capability
from ..serializers.tagged_text import RESULT_TAG, extract_first
from .base import BaseWorker


class ReasoningWorker(BaseWorker):
    """Answers an approach from the model's own knowledge."""

    capability = Capability.REASONING

    async def execute(
        self,
        task: str,
        approach: str,
        description: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> WorkerResult:
        start_time = time.perf_counter()
        prompt = build_reasoning_prompt(task, approach, description, context)

        try:
            response = await self._generate(prompt, approach)
        except GenerationError as e:
            raise WorkerExecutionError(
                f"Reasoning worker execution failed: {e.message}",
                approach=approach,
                capability=self.capability.value,
            ) from e

        result = extract_first(response.text, RESULT_TAG) or response.text.strip()

        return WorkerResult(
            approach=approach,
            result=result,
            capability=self.capability,
            model_id=response.model,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
