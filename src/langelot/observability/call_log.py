"""
Per-run record of every call made to the text generation service.

A CallLog is created by the caller (or by the orchestrator when none is
given), passed to the orchestrator and its workers, and read, exported or
discarded by the caller once the run returns.
"""

import json
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.contracts import GenerationResponse, TokenUsage
from ..utils.logging import get_logger


class CallRecord(BaseModel):
    """One call to the text generation service."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    role: str = Field(..., description="Who made the call, e.g. 'orchestrator' or 'retrieval-worker (Market scan)'")
    model: str
    prompt: str
    response: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    usage: Optional[TokenUsage] = None
    duration_ms: float
    success: bool = True
    error: Optional[str] = None


class CallLog:
    """
    Accumulates CallRecords for one orchestration run.

    Example:
        call_log = CallLog()
        result = await orchestrate(task, client=client, call_log=call_log)
        print(call_log.summary())
        call_log.export_jsonl("./logs/run.jsonl")
    """

    def __init__(self):
        self._records: List[CallRecord] = []
        self.logger = get_logger(__name__)

    def record(
        self,
        role: str,
        model: str,
        prompt: str,
        started: float,
        response: Optional[str] = None,
        usage: Optional[TokenUsage] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        error: Optional[BaseException] = None,
    ) -> CallRecord:
        """
        Record a finished call.

        Args:
            role: Caller label
            model: Model the call was made against
            prompt: Prompt text sent
            started: ``time.perf_counter()`` value taken before the call
            response: Generated text, if the call succeeded
            usage: Token usage reported by the service
            max_tokens: Output token limit of the call
            temperature: Sampling temperature of the call
            error: Exception raised by the call, if any

        Returns:
            The stored CallRecord
        """
        record = CallRecord(
            timestamp=datetime.now(),
            role=role,
            model=model,
            prompt=prompt,
            response=response,
            max_tokens=max_tokens,
            temperature=temperature,
            usage=usage,
            duration_ms=(time.perf_counter() - started) * 1000,
            success=error is None,
            error=str(error) if error is not None else None,
        )
        self._records.append(record)

        self.logger.debug(
            "llm_call_recorded",
            role=role,
            model=model,
            duration_ms=round(record.duration_ms, 1),
            success=record.success,
            total_tokens=usage.total_tokens if usage else None,
        )
        return record

    async def track(
        self,
        role: str,
        model: str,
        prompt: str,
        call: Awaitable[GenerationResponse],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> GenerationResponse:
        """
        Await a collaborator call and record its outcome.

        Failures are recorded and re-raised unchanged.
        """
        started = time.perf_counter()
        try:
            response = await call
        except Exception as e:
            self.record(
                role=role,
                model=model,
                prompt=prompt,
                started=started,
                max_tokens=max_tokens,
                temperature=temperature,
                error=e,
            )
            raise

        self.record(
            role=role,
            model=response.model or model,
            prompt=prompt,
            started=started,
            response=response.text,
            usage=response.usage,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return response

    @property
    def records(self) -> List[CallRecord]:
        """Copy of the recorded calls in call order."""
        return list(self._records)

    def clear(self) -> None:
        """Discard all records."""
        self._records = []

    def __len__(self) -> int:
        return len(self._records)

    def summary(self) -> Dict[str, Any]:
        """
        Aggregate the recorded calls.

        Returns:
            Dictionary with call counts, token totals and total duration
        """
        return {
            "calls": len(self._records),
            "failures": sum(1 for r in self._records if not r.success),
            "prompt_tokens": sum(r.usage.prompt_tokens for r in self._records if r.usage),
            "completion_tokens": sum(r.usage.completion_tokens for r in self._records if r.usage),
            "total_tokens": sum(r.usage.total_tokens for r in self._records if r.usage),
            "total_duration_ms": sum(r.duration_ms for r in self._records),
        }

    def export_jsonl(self, output_file: str | Path) -> Path:
        """
        Write every record as one JSON line.

        Args:
            output_file: Destination path (parent directories are created)

        Returns:
            Path written to
        """
        path = Path(output_file)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            for record in self._records:
                f.write(json.dumps(record.model_dump(mode="json")) + "\n")

        self.logger.info("call_log_exported", output_file=str(path), calls=len(self._records))
        return path
