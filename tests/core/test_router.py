"""
Tests for capability routing and the per-run worker pool.
"""

import pytest

from langelot.core.router import WorkerRouter
from langelot.exceptions import ConfigurationError, InitializationError
from langelot.models.contracts import OrchestrationOptions, Strategy
from langelot.models.enums import Capability, WorkerMode
from langelot.workers import DocumentAnalysisWorker, ReasoningWorker, RetrievalWorker


def _strategies(*capabilities):
    return [
        Strategy(approach=f"Approach {i}", description=f"Do part {i}", capability=capability)
        for i, capability in enumerate(capabilities, start=1)
    ]


@pytest.fixture
def make_router(fake_generator, config, call_log):
    def _make(**option_fields):
        return WorkerRouter(fake_generator, config, OrchestrationOptions(**option_fields), call_log)

    return _make


class TestSelectForTask:
    """Tests for the keyword heuristic."""

    def test_documents_win(self, make_router, documents):
        router = make_router(document_paths=documents)
        assert router.select_for_task("What is 2 + 2?") is Capability.DOCUMENT_ANALYSIS

    @pytest.mark.parametrize(
        "task",
        [
            "Summarize recent advances in battery chemistry",
            "What is the latest news on fusion?",
            "Top AI trends in 2025",
        ],
    )
    def test_recency_selects_retrieval(self, make_router, task):
        assert make_router().select_for_task(task) is Capability.RETRIEVAL

    def test_short_simple_task_selects_reasoning(self, make_router):
        assert make_router().select_for_task("Write a haiku about autumn") is Capability.REASONING

    def test_short_complex_task_selects_retrieval(self, make_router):
        assert make_router().select_for_task("Compare Rust and Go") is Capability.RETRIEVAL

    def test_long_task_selects_retrieval(self, make_router):
        task = "Explain how a bill becomes law in the United States from introduction through signature"
        assert make_router().select_for_task(task) is Capability.RETRIEVAL


class TestRoute:
    """Tests for routing strategies to capabilities."""

    @pytest.mark.asyncio
    async def test_hints_are_honoured(self, make_router):
        router = make_router()

        capabilities = await router.route(
            _strategies(Capability.RETRIEVAL, Capability.REASONING), "Write a haiku"
        )

        assert capabilities == [Capability.RETRIEVAL, Capability.REASONING]

    @pytest.mark.asyncio
    async def test_unhinted_strategies_use_heuristic(self, make_router):
        router = make_router()

        capabilities = await router.route(
            _strategies(None, Capability.REASONING),
            "Summarize recent advances in battery chemistry",
        )

        assert capabilities == [Capability.RETRIEVAL, Capability.REASONING]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode", [WorkerMode.REASONING, WorkerMode.RETRIEVAL])
    async def test_fixed_mode_overrides_hints(self, make_router, mode):
        router = make_router(worker_mode=mode)

        capabilities = await router.route(
            _strategies(Capability.DOCUMENT_ANALYSIS, None, Capability.RETRIEVAL), "task"
        )

        assert capabilities == [mode.fixed_capability] * 3

    @pytest.mark.asyncio
    async def test_document_hint_without_documents_downgrades(self, make_router, fake_generator):
        router = make_router()

        capabilities = await router.route(
            _strategies(Capability.DOCUMENT_ANALYSIS, Capability.RETRIEVAL), "task"
        )

        assert capabilities == [Capability.REASONING, Capability.RETRIEVAL]
        assert fake_generator.calls == []

    @pytest.mark.asyncio
    async def test_document_hint_with_documents_uploads_once(self, make_router, fake_generator, documents):
        router = make_router(document_paths=documents)

        capabilities = await router.route(
            _strategies(Capability.DOCUMENT_ANALYSIS, Capability.DOCUMENT_ANALYSIS), "task"
        )

        assert capabilities == [Capability.DOCUMENT_ANALYSIS] * 2
        assert fake_generator.methods_called() == ["upload_document", "upload_document"]
        assert router.get_worker(Capability.DOCUMENT_ANALYSIS).is_initialized

    @pytest.mark.asyncio
    async def test_failed_uploads_downgrade_in_auto_mode(self, make_router, fake_generator, documents):
        fake_generator.upload_failures.update(d.name for d in documents)
        router = make_router(document_paths=documents)

        capabilities = await router.route(_strategies(Capability.DOCUMENT_ANALYSIS, None), "task")

        # Heuristic also picked documents for the unhinted strategy
        assert capabilities == [Capability.REASONING, Capability.REASONING]

    @pytest.mark.asyncio
    async def test_document_mode_without_documents(self, make_router, fake_generator):
        router = make_router(worker_mode=WorkerMode.DOCUMENT_ANALYSIS)

        with pytest.raises(ConfigurationError):
            await router.route(_strategies(None), "task")

        assert fake_generator.calls == []

    @pytest.mark.asyncio
    async def test_document_mode_with_failed_uploads_is_fatal(self, make_router, fake_generator, documents):
        fake_generator.upload_failures.update(d.name for d in documents)
        router = make_router(worker_mode=WorkerMode.DOCUMENT_ANALYSIS, document_paths=documents)

        with pytest.raises(InitializationError):
            await router.route(_strategies(None, None), "task")


class TestWorkerPool:
    """Tests for lazy worker construction."""

    def test_validate(self, make_router, documents):
        make_router(worker_mode=WorkerMode.DOCUMENT_ANALYSIS, document_paths=documents).validate()
        with pytest.raises(ConfigurationError):
            make_router(worker_mode=WorkerMode.DOCUMENT_ANALYSIS).validate()

    def test_workers_are_built_once(self, make_router):
        router = make_router()

        first = router.get_worker(Capability.REASONING)

        assert isinstance(first, ReasoningWorker)
        assert router.get_worker(Capability.REASONING) is first

    def test_workers_use_configured_models(self, fake_generator, config, call_log, documents):
        options = OrchestrationOptions(model_id="orchestrator-model", document_paths=documents)
        router = WorkerRouter(fake_generator, config, options, call_log)

        reasoning = router.get_worker(Capability.REASONING)
        retrieval = router.get_worker(Capability.RETRIEVAL)
        document = router.get_worker(Capability.DOCUMENT_ANALYSIS)

        assert reasoning.model == config.reasoning_model
        assert isinstance(retrieval, RetrievalWorker)
        assert retrieval.model == config.retrieval_model
        assert retrieval.fallback_model == "orchestrator-model"
        assert isinstance(document, DocumentAnalysisWorker)
        assert document.model == config.document_model
        assert reasoning.call_log is call_log

    def test_document_worker_without_documents(self, make_router):
        with pytest.raises(ConfigurationError):
            make_router().get_worker(Capability.DOCUMENT_ANALYSIS)

    @pytest.mark.asyncio
    async def test_close_cleans_up(self, make_router, documents):
        router = make_router(document_paths=documents)
        await router.route(_strategies(Capability.DOCUMENT_ANALYSIS), "task")
        document = router.get_worker(Capability.DOCUMENT_ANALYSIS)

        await router.close()

        assert document.uploaded_documents == []
