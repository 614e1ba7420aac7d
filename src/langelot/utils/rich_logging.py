"""Enhanced terminal output with Rich library"""

from typing import TYPE_CHECKING, Optional

import structlog
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme
from rich.traceback import install as install_rich_traceback
from rich.tree import Tree

if TYPE_CHECKING:
    from ..core.config import LangelotConfig
    from ..models.contracts import OrchestrationResult
    from ..observability.call_log import CallLog

# Custom Langelot theme
LANGELOT_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "approach": "bold magenta",
        "capability": "blue",
        "citation": "green",
        "document": "bright_blue",
        "token": "blue",
        "latency": "cyan",
    }
)

_CAPABILITY_ICONS = {
    "reasoning": "🧠",
    "retrieval": "🔎",
    "document_analysis": "📄",
}


class LangelotConsole:
    """Singleton console with Langelot branding and theme"""

    _instance: Optional["LangelotConsole"] = None

    def __new__(cls) -> "LangelotConsole":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, "initialized"):
            self.console = Console(theme=LANGELOT_THEME)
            self.initialized = True

    def print_banner(self):
        """Print Langelot startup banner"""
        self.console.print(
            Panel.fit(
                "[bold cyan]Langelot[/bold cyan] - LLM Task Orchestration\n"
                "[dim]Decompose • Dispatch • Synthesize[/dim]",
                border_style="cyan",
            )
        )

    def print_config_summary(self, config: "LangelotConfig"):
        """Print configuration summary table"""
        table = Table(title="Configuration", show_header=False, border_style="cyan")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="yellow")

        table.add_row("Orchestrator Model", config.model)
        table.add_row("Reasoning Model", config.reasoning_model)
        table.add_row("Retrieval Model", config.retrieval_model)
        table.add_row("Document Model", config.document_model)
        table.add_row("Max Tokens", f"{config.max_tokens:,}")
        table.add_row("Temperature", f"{config.temperature}")
        table.add_row("Worker Mode", config.worker_mode.value)

        self.console.print(table)

    def print_strategies(self, result: "OrchestrationResult"):
        """Print the decomposition as a tree of approaches and their workers"""
        tree = Tree(f"[bold cyan]Task[/bold cyan] {escape(result.task)}")

        for strategy, worker_result in zip(result.strategies, result.results):
            capability = worker_result.capability.value
            icon = _CAPABILITY_ICONS.get(capability, "•")
            branch = tree.add(
                f"{icon} [approach]{escape(strategy.approach)}[/approach] "
                f"[dim]→[/dim] [capability]{capability}[/capability]"
            )
            branch.add(f"[dim]{escape(strategy.description)}[/dim]")
            if worker_result.retrieval_performed is False:
                branch.add("[warning]live retrieval unavailable, background knowledge only[/warning]")

        self.console.print(tree)

    def print_results(self, result: "OrchestrationResult"):
        """Print every worker result with its sources or documents"""
        for worker_result in result.results:
            body = Text(worker_result.result)

            footer = []
            if worker_result.source_citations:
                footer.append(f"[citation]{len(worker_result.source_citations)} sources cited[/citation]")
            if worker_result.documents_used:
                footer.append(f"[document]documents: {', '.join(worker_result.documents_used)}[/document]")
            if worker_result.duration_ms is not None:
                footer.append(f"[latency]{worker_result.duration_ms:.0f}ms[/latency]")

            self.console.print(
                Panel(
                    body,
                    title=f"[approach]{escape(worker_result.approach)}[/approach] "
                    f"([capability]{worker_result.capability.value}[/capability])",
                    subtitle=" | ".join(footer) if footer else None,
                    border_style="magenta",
                )
            )

    def print_synthesis(self, result: "OrchestrationResult"):
        """Print the final synthesized answer"""
        self.console.print(
            Panel(Text(result.synthesis), title="[bold green]Synthesis[/bold green]", border_style="green")
        )

    def print_call_log(self, call_log: "CallLog"):
        """Print every collaborator call of a run in a table"""
        table = Table(title="Collaborator Calls", show_header=True, border_style="cyan")
        table.add_column("Role", style="cyan", no_wrap=True)
        table.add_column("Model", style="yellow")
        table.add_column("Tokens", style="token", justify="right")
        table.add_column("Latency", style="latency", justify="right")
        table.add_column("Status")

        for record in call_log.records:
            tokens = f"{record.usage.total_tokens:,}" if record.usage else "-"
            status = "[success]✓[/success]" if record.success else f"[error]✗ {escape(record.error or '')}[/error]"
            table.add_row(escape(record.role), record.model, tokens, f"{record.duration_ms:.0f}ms", status)

        summary = call_log.summary()
        table.add_row(
            "[bold]Total[/bold]",
            f"{summary['calls']} calls",
            f"[bold]{summary['total_tokens']:,}[/bold]",
            f"{summary['total_duration_ms']:.0f}ms",
            f"[dim]{summary['failures']} failed[/dim]",
        )

        self.console.print(table)

    def print_error(self, message: str):
        """Print error message"""
        self.console.print(f"[error]✗[/error] {escape(message)}")

    def print_info(self, message: str):
        """Print info message"""
        self.console.print(f"[info]ℹ[/info] {escape(message)}")


# Global console instance
console = LangelotConsole()


def setup_rich_logging() -> None:
    """
    Setup Rich traceback formatting for better error messages.

    Note: structlog configuration is handled separately in utils/logging.py.
    This function only handles rich traceback installation, not log formatting.
    """
    install_rich_traceback(
        show_locals=True,
        width=120,
        extra_lines=3,
        theme="monokai",
        word_wrap=False,
        suppress=[structlog],
    )
