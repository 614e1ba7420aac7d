"""
Command-line interface for langelot.

Provides commands for running an orchestration and showing version information.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import typer

from . import __version__
from .core.config import get_config
from .core.orchestrator import Orchestrator
from .exceptions import OrchestrationError
from .llm.client import LLMClient
from .models.enums import LogLevel, WorkerMode
from .observability.call_log import CallLog
from .utils.logging import setup_logging
from .utils.rich_logging import console as langelot_console

app = typer.Typer(
    name="langelot",
    help="Decompose a task, run each approach with a specialised LLM worker, synthesize the answer",
    add_completion=False,
)

console = langelot_console.console


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold cyan]langelot[/bold cyan] version {__version__}")
    console.print("LLM Task Orchestration")


@app.command()
def orchestrate(
    task: str = typer.Argument(..., help="Task to orchestrate"),
    model: Optional[str] = typer.Option(None, "--model", help="Override the orchestrator model"),
    temperature: Optional[float] = typer.Option(None, "--temperature", help="Orchestrator sampling temperature"),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", help="Orchestrator output token limit"),
    context: Optional[str] = typer.Option(None, "--context", help="Additional context as a JSON object"),
    worker: Optional[WorkerMode] = typer.Option(None, "--worker", help="Force one worker for every approach"),
    document: Optional[List[Path]] = typer.Option(None, "--document", "-d", help="Document for the analysis worker (repeatable)"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
    show_calls: bool = typer.Option(False, "--show-calls", help="Print every collaborator call"),
    export_calls: Optional[Path] = typer.Option(None, "--export-calls", help="Write the call log as JSON lines"),
):
    """
    Run one task through decomposition, parallel workers and synthesis.

    Examples:
        langelot orchestrate "Summarize recent advances in battery chemistry"
        langelot orchestrate "Review the report" --worker document_analysis -d report.pdf
        langelot orchestrate "Plan a launch" --context '{"budget": "small"}' --show-calls
    """
    config = get_config()
    if verbose:
        config = config.model_copy(update={"log_level": LogLevel.DEBUG})
    setup_logging(config)

    run_context = {}
    if context:
        try:
            run_context = json.loads(context)
        except json.JSONDecodeError as e:
            langelot_console.print_error(f"Invalid --context JSON: {e}")
            sys.exit(1)
        if not isinstance(run_context, dict):
            langelot_console.print_error("--context must be a JSON object")
            sys.exit(1)

    try:
        options = config.to_options(
            model_id=model,
            temperature=temperature,
            max_tokens=max_tokens,
            context=run_context,
            worker_mode=worker,
            document_paths=document or None,
        )
    except ValueError as e:
        langelot_console.print_error(f"Invalid options: {e}")
        sys.exit(1)

    call_log = CallLog()
    orchestrator = Orchestrator(LLMClient.from_config(config), config, call_log)

    langelot_console.print_banner()
    if verbose:
        langelot_console.print_config_summary(config)

    try:
        result = asyncio.run(orchestrator.orchestrate(task, options))
    except OrchestrationError as e:
        langelot_console.print_error(e.user_message or str(e))
        if show_calls and len(call_log):
            langelot_console.print_call_log(call_log)
        sys.exit(1)
    finally:
        if export_calls is not None:
            path = call_log.export_jsonl(export_calls)
            langelot_console.print_info(f"Call log written to {path}")

    langelot_console.print_strategies(result)
    langelot_console.print_results(result)
    langelot_console.print_synthesis(result)

    if show_calls:
        langelot_console.print_call_log(call_log)


if __name__ == "__main__":
    app()
