"""
Prompt builders for decomposition, worker execution and synthesis.
"""

import json
from typing import Any, Iterable, Mapping, Sequence

from ..models.contracts import WorkerResult
from ..models.enums import Capability
from ..serializers.tagged_text import (
    APPROACH_TAG,
    CAPABILITY_TAG,
    DESCRIPTION_TAG,
    RESULT_TAG,
    build_tag,
)

CAPABILITY_GUIDE = {
    Capability.REASONING: (
        "Fast, cost-effective agent for straightforward tasks that need neither "
        "real-time data nor documents"
    ),
    Capability.RETRIEVAL: (
        "Live retrieval agent that can access current information, news, trends "
        "and real-time data"
    ),
    Capability.DOCUMENT_ANALYSIS: "Document analysis agent that can read uploaded documents",
}

RETRIEVAL_DISCLAIMER = (
    "[Note: This response used background knowledge only as live retrieval was unavailable]"
)


def format_context(context: Mapping[str, Any] | None) -> str:
    """Render the run context block, or an empty string when there is none."""
    if not context:
        return ""
    return f"\n\nAdditional context: {json.dumps(context, indent=2, default=str)}"


def _result_format() -> str:
    return "Format your response as:\n" + build_tag(RESULT_TAG, "\nYour detailed result here\n")


def _assignment(task: str, approach: str, description: str, context: Mapping[str, Any] | None) -> str:
    return (
        f"Original Task: {task}\n"
        f"Your Approach: {approach}\n"
        f"Approach Description: {description}{format_context(context)}"
    )


def build_decomposition_prompt(
    task: str,
    context: Mapping[str, Any] | None = None,
    document_names: Sequence[str] = (),
    capability_hints: bool = True,
) -> str:
    """
    Prompt asking for 2-3 complementary approaches.

    Args:
        task: The overall task
        context: Run context merged into the prompt
        document_names: Display names of documents available to the run
        capability_hints: Ask for an ``agent`` tag per approach

    Returns:
        Prompt text
    """
    documents_info = ""
    if document_names:
        documents_info = f"\n\nAvailable documents for analysis: {', '.join(document_names)}"

    sections = [
        "You are a task orchestrator. Your job is to analyze a complex task and break it "
        "down into 2-3 distinct subtask approaches that can be handled by specialized AI agents.",
        f"Task: {task}{format_context(context)}{documents_info}",
    ]

    if capability_hints:
        guide = []
        for capability, blurb in CAPABILITY_GUIDE.items():
            if capability is Capability.DOCUMENT_ANALYSIS:
                blurb += " (documents are available)" if document_names else " (no documents provided)"
            guide.append(f"- {capability.value}: {blurb}")
        sections.append("Available agent types:\n" + "\n".join(guide))
        sections.append(
            "Please analyze this task and generate 2-3 different approaches. For each approach, "
            "choose the most appropriate agent type based on the requirements."
        )
    else:
        sections.append("Please analyze this task and generate 2-3 different approaches.")

    choices = "|".join(c.value for c in Capability)
    blocks = []
    for n in range(1, 4):
        lines = [build_tag(APPROACH_TAG, f"Brief name for approach {n}")]
        if capability_hints:
            lines.append(build_tag(CAPABILITY_TAG, choices))
        lines.append(
            build_tag(DESCRIPTION_TAG, "Detailed description of what this approach should accomplish")
        )
        blocks.append("\n".join(lines))
    sections.append("Format your response as follows:\n" + "\n\n".join(blocks))

    closing = "Focus on creating complementary approaches that together will provide a comprehensive solution."
    if capability_hints:
        closing += (
            f" Use {Capability.RETRIEVAL.value} for current information, "
            f"{Capability.DOCUMENT_ANALYSIS.value} for document analysis, and "
            f"{Capability.REASONING.value} for reasoning tasks."
        )
    sections.append(closing)

    return "\n\n".join(sections)


def build_reasoning_prompt(
    task: str, approach: str, description: str, context: Mapping[str, Any] | None = None
) -> str:
    """Prompt for the reasoning worker."""
    return (
        "You are a specialized worker tasked with executing a specific approach to solve "
        "part of a larger task.\n\n"
        f"{_assignment(task, approach, description, context)}\n\n"
        "Execute this approach efficiently and provide your result. Focus on delivering "
        "high-quality output that addresses the specific approach you've been assigned "
        "using your training data and reasoning capabilities.\n\n"
        f"{_result_format()}"
    )


def build_retrieval_prompt(
    task: str, approach: str, description: str, context: Mapping[str, Any] | None = None
) -> str:
    """Prompt for the retrieval-augmented call."""
    return (
        f"Task: {task}\n"
        f"Approach: {approach}\n"
        f"Description: {description}{format_context(context)}\n\n"
        "Based on the above task and approach, search for current, relevant information "
        "that would help complete this task effectively. Focus on finding recent data, "
        f'facts, or insights that would be valuable for the "{approach}" approach.'
    )


def build_fallback_prompt(
    task: str, approach: str, description: str, context: Mapping[str, Any] | None = None
) -> str:
    """Prompt for the retrieval worker when live retrieval failed."""
    return (
        "You are a specialized worker tasked with executing a specific approach to solve "
        "part of a larger task.\n\n"
        f"{_assignment(task, approach, description, context)}\n\n"
        "Note: Live retrieval is not available. Please use your training data to provide "
        "the best possible answer, but clearly indicate when information might be outdated "
        "or when real-time data would be more valuable.\n\n"
        "Execute this approach thoroughly and provide your result.\n\n"
        f"{_result_format()}"
    )


def build_document_prompt(
    task: str,
    approach: str,
    description: str,
    document_names: Iterable[str],
    context: Mapping[str, Any] | None = None,
) -> str:
    """Prompt for the document analysis worker."""
    return (
        "You are a specialized librarian worker with access to uploaded documents. Your task "
        "is to analyze the provided files and use the information to complete the assigned "
        "approach.\n\n"
        f"{_assignment(task, approach, description, context)}\n\n"
        f"Available documents: {', '.join(document_names)}\n\n"
        "Please analyze the uploaded documents to find relevant information for this task "
        "and approach.\n\n"
        "Focus on:\n"
        "1. Finding relevant information in the uploaded documents\n"
        "2. Synthesizing information from multiple documents if applicable\n"
        "3. Providing specific citations or references to the source documents\n"
        "4. Clearly distinguishing between information from the documents vs. your general knowledge\n\n"
        f"{_result_format()}"
    )


def build_synthesis_prompt(task: str, results: Sequence[WorkerResult]) -> str:
    """
    Prompt merging every worker result into one answer.

    Args:
        task: The overall task
        results: Worker results in strategy order

    Returns:
        Prompt text
    """
    results_text = "\n\n---\n\n".join(
        f"Approach: {r.approach}\nResult:\n{r.result}" for r in results
    )

    return (
        "You are a synthesis specialist. Your job is to combine multiple approaches to a task "
        "into a comprehensive, cohesive final result.\n\n"
        f"Original Task: {task}\n\n"
        f"Worker Results:\n{results_text}\n\n"
        "Please synthesize these results into a single, comprehensive response that:\n"
        "1. Incorporates the best elements from each approach\n"
        "2. Resolves any conflicts or contradictions\n"
        "3. Provides a cohesive, well-structured final answer\n"
        "4. Maintains the strengths of each individual approach\n\n"
        "Provide your synthesis:"
    )
