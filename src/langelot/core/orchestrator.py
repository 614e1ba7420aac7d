"""
Orchestration Engine - decompose, route, dispatch in parallel, synthesize.

State machine per run:

    DECOMPOSING -> DISPATCHING -> SYNTHESIZING -> DONE
         \\              \\                \\
          +-------------+----------------+--> FAILED

Runs share no state: every call to ``orchestrate`` builds its own router,
worker pool and, unless one was injected, call log. Concurrent runs on one
instance that need separate logs pass separate ``call_log`` sinks.
"""

import asyncio
import time
from typing import Any, List, Optional, Sequence

from ..exceptions import (
    DecompositionError,
    GenerationError,
    LangelotError,
    OrchestrationError,
    SynthesisError,
    WorkerExecutionError,
)
from ..llm.base import TextGenerator
from ..llm.client import LLMClient
from ..models.contracts import (
    OrchestrationOptions,
    OrchestrationResult,
    Strategy,
    WorkerResult,
)
from ..models.enums import Capability, OrchestrationState
from ..observability.call_log import CallLog
from ..serializers.tagged_text import parse_strategies
from ..utils.logging import get_logger
from .config import LangelotConfig, get_config
from .prompts import build_decomposition_prompt, build_synthesis_prompt
from .router import WorkerRouter


class Orchestrator:
    """
    Top-level orchestration pipeline.

    Example:
        client = LLMClient.from_config(config)
        orchestrator = Orchestrator(client, config)

        result = await orchestrator.orchestrate(
            "Summarize recent advances in battery chemistry",
            OrchestrationOptions(context={"audience": "investors"}),
        )
        print(result.synthesis)
    """

    def __init__(
        self,
        client: TextGenerator,
        config: Optional[LangelotConfig] = None,
        call_log: Optional[CallLog] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            client: Text generation collaborator
            config: Configuration (defaults to the global config)
            call_log: Sink for every collaborator call; when omitted each run
                records into a private log
        """
        self.client = client
        self.config = config or get_config()
        self.call_log = call_log
        self.logger = get_logger(__name__)

    async def orchestrate(
        self,
        task: str,
        options: Optional[OrchestrationOptions] = None,
    ) -> OrchestrationResult:
        """
        Run the full pipeline for one task.

        Args:
            task: Natural-language task
            options: Run options (defaults built from config)

        Returns:
            OrchestrationResult with strategies, per-approach results and synthesis

        Raises:
            OrchestrationError: Any fatal failure; no partial result is returned
        """
        options = options or self.config.to_options()
        call_log = self.call_log if self.call_log is not None else CallLog()

        router = WorkerRouter(self.client, self.config, options, call_log)
        state = OrchestrationState.DECOMPOSING
        start_time = time.perf_counter()

        self.logger.info(
            "orchestration_started",
            task_chars=len(task),
            model=options.model_id,
            worker_mode=options.worker_mode.value,
            documents=len(options.document_paths),
        )

        try:
            # Fails before any generation call when options are inconsistent
            router.validate()

            strategies = await self._decompose(task, options, call_log)

            state = self._transition(state, OrchestrationState.DISPATCHING)
            results = await self._dispatch(router, strategies, task, options)

            state = self._transition(state, OrchestrationState.SYNTHESIZING)
            synthesis = await self._synthesize(task, results, options, call_log)

            state = self._transition(state, OrchestrationState.DONE)
        except OrchestrationError as e:
            self._fail(state, e)
            raise
        except LangelotError as e:
            self._fail(state, e)
            raise OrchestrationError(
                f"Orchestration failed: {e.message}",
                phase=state.value,
                details={"error_type": type(e).__name__},
            ) from e
        except Exception as e:
            self._fail(state, e)
            raise OrchestrationError(
                f"Orchestration failed: {type(e).__name__}: {e}",
                phase=state.value,
                details={"error_type": type(e).__name__},
            ) from e
        finally:
            await router.close()

        self.logger.info(
            "orchestration_completed",
            strategies=len(strategies),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
            **call_log.summary(),
        )

        return OrchestrationResult(
            task=task,
            strategies=strategies,
            results=results,
            synthesis=synthesis,
        )

    async def _decompose(
        self,
        task: str,
        options: OrchestrationOptions,
        call_log: CallLog,
    ) -> List[Strategy]:
        prompt = build_decomposition_prompt(
            task,
            context=options.context,
            document_names=[p.name for p in options.document_paths],
            capability_hints=self.config.capability_hints,
        )

        try:
            response = await call_log.track(
                role="orchestrator",
                model=options.model_id,
                prompt=prompt,
                call=self.client.generate(prompt, options.model_id, options.max_tokens, options.temperature),
                max_tokens=options.max_tokens,
                temperature=options.temperature,
            )
        except GenerationError as e:
            raise DecompositionError(
                f"Decomposition call failed: {e.message}",
                details={"error_type": type(e).__name__},
            ) from e

        strategies = parse_strategies(response.text)
        if not strategies:
            raise DecompositionError(
                "Failed to generate subtask strategies",
                details={"response_chars": len(response.text)},
            )

        self.logger.info(
            "decomposition_completed",
            strategies=[s.approach for s in strategies],
            hinted=sum(1 for s in strategies if s.capability is not None),
        )
        return strategies

    async def _dispatch(
        self,
        router: WorkerRouter,
        strategies: Sequence[Strategy],
        task: str,
        options: OrchestrationOptions,
    ) -> List[WorkerResult]:
        capabilities = await router.route(strategies, task)

        tasks = [
            self._run_worker(router, strategy, capability, task, options)
            for strategy, capability in zip(strategies, capabilities)
        ]
        # Join barrier: every dispatch settles before any failure is surfaced
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        failures = [o for o in outcomes if isinstance(o, BaseException)]
        for failure in failures:
            if not isinstance(failure, Exception):
                raise failure
        if failures:
            self.logger.error(
                "dispatch_failed",
                failed=len(failures),
                total=len(outcomes),
            )
            raise failures[0]

        return list(outcomes)

    async def _run_worker(
        self,
        router: WorkerRouter,
        strategy: Strategy,
        capability: Capability,
        task: str,
        options: OrchestrationOptions,
    ) -> WorkerResult:
        worker = router.get_worker(capability)
        try:
            result = await worker.execute(task, strategy.approach, strategy.description, options.context)
        except OrchestrationError:
            raise
        except Exception as e:
            raise WorkerExecutionError(
                f"Worker raised {type(e).__name__}: {e}",
                approach=strategy.approach,
                capability=capability.value,
            ) from e

        self.logger.info(
            "worker_completed",
            approach=strategy.approach,
            capability=capability.value,
            duration_ms=round(result.duration_ms or 0.0, 1),
        )
        return result

    async def _synthesize(
        self,
        task: str,
        results: Sequence[WorkerResult],
        options: OrchestrationOptions,
        call_log: CallLog,
    ) -> str:
        prompt = build_synthesis_prompt(task, results)

        try:
            response = await call_log.track(
                role="synthesizer",
                model=options.model_id,
                prompt=prompt,
                call=self.client.generate(prompt, options.model_id, options.max_tokens, options.temperature),
                max_tokens=options.max_tokens,
                temperature=options.temperature,
            )
        except GenerationError as e:
            raise SynthesisError(
                f"Synthesis call failed: {e.message}",
                details={"error_type": type(e).__name__},
            ) from e

        return response.text

    def _transition(
        self, current: OrchestrationState, target: OrchestrationState
    ) -> OrchestrationState:
        self.logger.debug("orchestration_state", previous=current.value, state=target.value)
        return target

    def _fail(self, state: OrchestrationState, error: Exception) -> None:
        self._transition(state, OrchestrationState.FAILED)
        if isinstance(error, LangelotError):
            self.logger.error("orchestration_failed", phase=state.value, **error.to_dict())
        else:
            self.logger.error(
                "orchestration_failed",
                phase=state.value,
                error_type=type(error).__name__,
                message=str(error),
            )


async def orchestrate(
    task: str,
    options: Optional[OrchestrationOptions] = None,
    *,
    client: Optional[TextGenerator] = None,
    config: Optional[LangelotConfig] = None,
    call_log: Optional[CallLog] = None,
    **option_overrides: Any,
) -> OrchestrationResult:
    """
    Convenience entry point.

    Args:
        task: Natural-language task
        options: Run options; when omitted they are built from config plus
            ``option_overrides`` (model_id, max_tokens, temperature, context,
            worker_mode, document_paths)
        client: Text generation collaborator (LiteLLM client from config if omitted)
        config: Configuration (global config if omitted)
        call_log: Sink for collaborator calls

    Returns:
        OrchestrationResult
    """
    config = config or get_config()
    if client is None:
        client = LLMClient.from_config(config)
    if options is None:
        options = config.to_options(**option_overrides)

    return await Orchestrator(client, config, call_log).orchestrate(task, options)
