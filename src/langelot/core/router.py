"""
Worker Router - capability selection and per-run worker pool.

Decides which capability services each strategy based on:
- An explicit run-wide worker mode
- Capability hints emitted by the decomposer
- Availability of prerequisite resources (documents)
- A keyword heuristic on the task when no hint exists
"""

import re
from typing import Callable, Dict, List, Optional, Sequence

from ..exceptions import ConfigurationError, InitializationError
from ..llm.base import TextGenerator
from ..models.contracts import OrchestrationOptions, Strategy
from ..models.enums import Capability, WorkerMode
from ..observability.call_log import CallLog
from ..utils.logging import get_logger
from ..workers import BaseWorker, DocumentAnalysisWorker, ReasoningWorker, RetrievalWorker
from .config import LangelotConfig

RECENCY_PATTERN = re.compile(
    r"\b("
    r"recent(ly)?|latest|newest|current(ly)?|today|yesterday|tonight|now|"
    r"this (week|month|quarter|year)|news|breaking|headlines?|trend(s|ing)?|"
    r"upcoming|live|real[- ]time|up[- ]to[- ]date|20[2-9]\d"
    r")\b",
    re.IGNORECASE,
)

COMPLEXITY_PATTERN = re.compile(
    r"\b("
    r"analy[sz]e|analysis|compare|comparison|evaluate|assess(ment)?|design|architect|"
    r"strateg(y|ic)|plan|comprehensive|detailed|in[- ]depth|research|investigate|"
    r"trade[- ]?offs?|pros and cons|implications|roadmap"
    r")\b",
    re.IGNORECASE,
)

# Tasks at or under this many words without complexity keywords go to reasoning
SHORT_TASK_MAX_WORDS = 12


class WorkerRouter:
    """
    Routes strategies to capability workers for one orchestration run.

    Each capability's worker is built at most once and reused by every
    strategy routed to it, so document uploads happen once per run.

    Example:
        router = WorkerRouter(client, config, options, call_log)
        capabilities = await router.route(strategies, task)
        worker = router.get_worker(capabilities[0])
        ...
        await router.close()
    """

    def __init__(
        self,
        client: TextGenerator,
        config: LangelotConfig,
        options: OrchestrationOptions,
        call_log: Optional[CallLog] = None,
    ):
        self.client = client
        self.config = config
        self.options = options
        self.call_log = call_log if call_log is not None else CallLog()
        self.logger = get_logger(__name__)

        self._workers: Dict[Capability, BaseWorker] = {}
        self._document_worker_failed = False
        self._factories: Dict[Capability, Callable[[], BaseWorker]] = {
            Capability.REASONING: self._build_reasoning_worker,
            Capability.RETRIEVAL: self._build_retrieval_worker,
            Capability.DOCUMENT_ANALYSIS: self._build_document_worker,
        }

    @property
    def has_documents(self) -> bool:
        return bool(self.options.document_paths)

    def validate(self) -> None:
        """
        Check the run options before any generation call.

        Raises:
            ConfigurationError: If document analysis is forced without documents
        """
        if self.options.worker_mode == WorkerMode.DOCUMENT_ANALYSIS and not self.has_documents:
            raise ConfigurationError(
                "Document analysis worker mode requires at least one document",
                field="document_paths",
            )

    async def route(self, strategies: Sequence[Strategy], task: str) -> List[Capability]:
        """
        Decide the capability of every strategy.

        Args:
            strategies: Strategies from decomposition
            task: The overall task text (used by the heuristic)

        Returns:
            One capability per strategy, same order

        Raises:
            ConfigurationError: Document mode forced without documents
            InitializationError: Document mode forced and no document uploaded
        """
        self.validate()

        fixed = self.options.worker_mode.fixed_capability
        if fixed is not None:
            if fixed is Capability.DOCUMENT_ANALYSIS:
                # Every strategy needs the documents, so no downgrade target exists
                await self._initialize_document_worker()
            self.logger.info("worker_mode_fixed", capability=fixed.value, strategies=len(strategies))
            return [fixed] * len(strategies)

        capabilities = []
        for strategy in strategies:
            if strategy.capability is not None:
                capabilities.append(strategy.capability)
            else:
                capabilities.append(self.select_for_task(task))

        if Capability.DOCUMENT_ANALYSIS in capabilities and not await self._document_worker_available():
            for index, strategy in enumerate(strategies):
                if capabilities[index] is Capability.DOCUMENT_ANALYSIS:
                    self.logger.warning(
                        "capability_downgraded",
                        approach=strategy.approach,
                        requested=Capability.DOCUMENT_ANALYSIS.value,
                        selected=Capability.REASONING.value,
                        reason="documents unavailable" if not self.has_documents else "initialization failed",
                    )
                    capabilities[index] = Capability.REASONING

        for strategy, capability in zip(strategies, capabilities):
            self.logger.debug(
                "strategy_routed",
                approach=strategy.approach,
                hinted=strategy.capability.value if strategy.capability else None,
                capability=capability.value,
            )

        return capabilities

    def select_for_task(self, task: str) -> Capability:
        """
        Heuristic capability for strategies without a hint.

        Order: documents configured -> document analysis; recency keywords ->
        retrieval; short task without complexity keywords -> reasoning;
        otherwise retrieval.
        """
        if self.has_documents:
            return Capability.DOCUMENT_ANALYSIS
        if RECENCY_PATTERN.search(task):
            return Capability.RETRIEVAL
        if len(task.split()) <= SHORT_TASK_MAX_WORDS and not COMPLEXITY_PATTERN.search(task):
            return Capability.REASONING
        return Capability.RETRIEVAL

    def get_worker(self, capability: Capability) -> BaseWorker:
        """Return the pooled worker for ``capability``, building it on first use."""
        worker = self._workers.get(capability)
        if worker is None:
            factory = self._factories.get(capability)
            if factory is None:
                raise ValueError(f"No worker registered for capability: {capability}")
            worker = factory()
            self._workers[capability] = worker
        return worker

    async def close(self) -> None:
        """Run cleanup on every pooled worker."""
        for worker in self._workers.values():
            await worker.cleanup()
        self._workers = {}

    async def _document_worker_available(self) -> bool:
        if not self.has_documents or self._document_worker_failed:
            return False
        try:
            await self._initialize_document_worker()
        except InitializationError as e:
            self.logger.warning("document_worker_unavailable", error=e.message)
            return False
        return True

    async def _initialize_document_worker(self) -> None:
        worker = self.get_worker(Capability.DOCUMENT_ANALYSIS)
        if worker.is_initialized:
            return
        try:
            await worker.initialize()
        except InitializationError:
            self._document_worker_failed = True
            raise

    def _build_reasoning_worker(self) -> BaseWorker:
        return ReasoningWorker(
            self.client,
            model=self.config.reasoning_model,
            max_tokens=self.config.reasoning_max_tokens,
            temperature=self.config.reasoning_temperature,
            call_log=self.call_log,
        )

    def _build_retrieval_worker(self) -> BaseWorker:
        return RetrievalWorker(
            self.client,
            model=self.config.retrieval_model,
            fallback_model=self.config.fallback_model or self.options.model_id,
            fallback_max_tokens=self.config.fallback_max_tokens,
            fallback_temperature=self.config.fallback_temperature,
            call_log=self.call_log,
        )

    def _build_document_worker(self) -> BaseWorker:
        if not self.has_documents:
            raise ConfigurationError(
                "Document analysis requires at least one document path",
                field="document_paths",
            )
        return DocumentAnalysisWorker(
            self.client,
            model=self.config.document_model,
            document_paths=self.options.document_paths,
            max_tokens=self.config.document_max_tokens,
            temperature=self.config.document_temperature,
            supported_extensions=self.config.supported_document_extensions,
            upload_purpose=self.config.upload_purpose,
            call_log=self.call_log,
        )
