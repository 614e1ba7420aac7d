"""
Base class shared by the capability workers.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from ..llm.base import TextGenerator
from ..models.contracts import GenerationResponse, WorkerResult
from ..models.enums import Capability
from ..observability.call_log import CallLog
from ..utils.logging import get_logger


class BaseWorker(ABC):
    """
    Executes one approach of a task with a particular capability.

    Subclasses set ``capability`` and implement ``execute``. Workers that
    need prerequisite resources override ``initialize`` and ``cleanup``.
    """

    capability: Capability

    def __init__(
        self,
        client: TextGenerator,
        model: str,
        max_tokens: int,
        temperature: float,
        call_log: Optional[CallLog] = None,
    ):
        """
        Args:
            client: Text generation collaborator
            model: Model used by this worker
            max_tokens: Output token limit per call
            temperature: Sampling temperature
            call_log: Sink for collaborator calls (a private one if omitted)
        """
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.call_log = call_log if call_log is not None else CallLog()
        self.logger = get_logger(self.__class__.__module__)

    @property
    def is_initialized(self) -> bool:
        """True once prerequisite resources are ready."""
        return True

    async def initialize(self) -> None:
        """Prepare prerequisite resources. No-op unless overridden."""
        return None

    async def cleanup(self) -> None:
        """Release per-run resources. No-op unless overridden."""
        return None

    @abstractmethod
    async def execute(
        self,
        task: str,
        approach: str,
        description: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> WorkerResult:
        """
        Execute one approach.

        Raises:
            WorkerExecutionError: If generation fails after any fallback
        """

    def _role(self, approach: str) -> str:
        return f"{self.capability.value}-worker ({approach})"

    async def _generate(
        self,
        prompt: str,
        approach: str,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        role: Optional[str] = None,
    ) -> GenerationResponse:
        """Plain generation call, recorded to the call log."""
        model = model or self.model
        max_tokens = max_tokens or self.max_tokens
        temperature = self.temperature if temperature is None else temperature

        return await self.call_log.track(
            role=role or self._role(approach),
            model=model,
            prompt=prompt,
            call=self.client.generate(prompt, model, max_tokens, temperature),
            max_tokens=max_tokens,
            temperature=temperature,
        )
