"""Unit tests for the per-run call log"""

import json
import time

import pytest

from langelot.exceptions import GenerationError
from langelot.models.contracts import GenerationResponse, TokenUsage
from langelot.observability import CallLog


async def _succeed():
    return GenerationResponse(
        text="hello",
        model="openai/gpt-4.1",
        usage=TokenUsage(prompt_tokens=7, completion_tokens=3, total_tokens=10),
    )


async def _fail():
    raise GenerationError("provider down", status_code=503)


class TestCallLog:
    """Test recording and aggregation of collaborator calls"""

    @pytest.mark.asyncio
    async def test_track_success(self, call_log):
        response = await call_log.track(
            role="orchestrator",
            model="openai/gpt-4.1",
            prompt="Break this down",
            call=_succeed(),
            max_tokens=100,
            temperature=0.5,
        )

        assert response.text == "hello"
        assert len(call_log) == 1
        record = call_log.records[0]
        assert record.role == "orchestrator"
        assert record.prompt == "Break this down"
        assert record.response == "hello"
        assert record.max_tokens == 100
        assert record.temperature == 0.5
        assert record.success is True
        assert record.usage.total_tokens == 10

    @pytest.mark.asyncio
    async def test_track_failure_records_and_reraises(self, call_log):
        with pytest.raises(GenerationError):
            await call_log.track(role="synthesizer", model="m", prompt="p", call=_fail())

        record = call_log.records[0]
        assert record.success is False
        assert "provider down" in record.error
        assert record.response is None

    def test_record_directly(self, call_log):
        call_log.record(role="reasoning-worker (A)", model="m", prompt="p", started=time.perf_counter(), response="r")

        assert call_log.records[0].duration_ms >= 0

    def test_records_is_copy(self, call_log):
        call_log.record(role="r", model="m", prompt="p", started=time.perf_counter())
        call_log.records.clear()

        assert len(call_log) == 1

    @pytest.mark.asyncio
    async def test_summary(self, call_log):
        await call_log.track(role="a", model="m", prompt="p", call=_succeed())
        await call_log.track(role="b", model="m", prompt="p", call=_succeed())
        with pytest.raises(GenerationError):
            await call_log.track(role="c", model="m", prompt="p", call=_fail())

        summary = call_log.summary()
        assert summary["calls"] == 3
        assert summary["failures"] == 1
        assert summary["prompt_tokens"] == 14
        assert summary["completion_tokens"] == 6
        assert summary["total_tokens"] == 20

    def test_clear(self, call_log):
        call_log.record(role="r", model="m", prompt="p", started=time.perf_counter())
        call_log.clear()

        assert len(call_log) == 0
        assert call_log.summary()["calls"] == 0

    @pytest.mark.asyncio
    async def test_export_jsonl(self, call_log, tmp_path):
        await call_log.track(role="orchestrator", model="m", prompt="p", call=_succeed())
        await call_log.track(role="synthesizer", model="m", prompt="q", call=_succeed())

        path = call_log.export_jsonl(tmp_path / "logs" / "run.jsonl")

        lines = path.read_text().splitlines()
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["role"] == "orchestrator"
        assert first["usage"]["total_tokens"] == 10
