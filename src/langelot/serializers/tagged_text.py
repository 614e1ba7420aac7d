"""
Tagged-text protocol codec.

Generated text carries typed fields inside ``<tag>...</tag>`` spans. This
module extracts those spans and assembles equivalent spans for the format
instructions embedded in prompts.

Example:
    >>> extract_all("<t>a</t><t> b </t>", "t")
    ['a', 'b']
"""

import re
from functools import lru_cache
from typing import Optional, Sequence

from ..models.contracts import Strategy, WorkerResult
from ..models.enums import Capability
from ..utils.logging import get_logger

logger = get_logger(__name__)

APPROACH_TAG = "approach"
DESCRIPTION_TAG = "description"
CAPABILITY_TAG = "agent"
RESULT_TAG = "result"


@lru_cache(maxsize=64)
def _tag_pattern(tag: str) -> re.Pattern:
    # Non-greedy so each span ends at the next closing tag; DOTALL for multi-line values
    escaped = re.escape(tag)
    return re.compile(f"<{escaped}>(.*?)</{escaped}>", re.DOTALL)


def extract_all(text: str, tag: str) -> list[str]:
    """
    Extract every value enclosed in ``<tag>...</tag>``.

    Args:
        text: Generated text to scan
        tag: Exact, case-sensitive tag name

    Returns:
        Trimmed values in document order (empty if the tag never appears)
    """
    return [match.group(1).strip() for match in _tag_pattern(tag).finditer(text)]


def extract_first(text: str, tag: str) -> Optional[str]:
    """Return the first value of ``tag`` in ``text``, or None."""
    match = _tag_pattern(tag).search(text)
    return match.group(1).strip() if match else None


def build_tag(tag: str, value: str) -> str:
    """Wrap ``value`` in an opening and closing ``tag``."""
    return f"<{tag}>{value}</{tag}>"


def parse_strategies(text: str) -> list[Strategy]:
    """
    Parse decomposition output into strategies.

    Reads parallel ``approach``/``description`` sequences and, when the
    decomposer emitted any, ``agent`` capability hints. Only complete tuples
    are kept; trailing unmatched tags are dropped.

    Args:
        text: Raw decomposition response

    Returns:
        List of Strategy in document order
    """
    approaches = extract_all(text, APPROACH_TAG)
    descriptions = extract_all(text, DESCRIPTION_TAG)
    hints = extract_all(text, CAPABILITY_TAG)

    if hints:
        count = min(len(approaches), len(descriptions), len(hints))
    else:
        count = min(len(approaches), len(descriptions))

    strategies = []
    for i in range(count):
        capability = None
        if hints:
            capability = Capability.parse(hints[i])
            if capability is None:
                logger.warning(
                    "unrecognized_capability",
                    literal=hints[i],
                    approach=approaches[i],
                    defaulted_to=Capability.REASONING.value,
                )
                capability = Capability.REASONING

        strategies.append(
            Strategy(
                approach=approaches[i],
                description=descriptions[i],
                capability=capability,
            )
        )

    return strategies


def parse_result_batch(
    responses: Sequence[str],
    approaches: Sequence[str],
) -> list[WorkerResult]:
    """
    Pair raw worker responses with their approaches by position.

    Args:
        responses: Raw response texts
        approaches: Approach names, same order as responses

    Returns:
        One WorkerResult per pair, truncated to the shorter input
    """
    results = []
    for response, approach in zip(responses, approaches):
        result = extract_first(response, RESULT_TAG)
        if result is None:
            result = response.strip()
        results.append(WorkerResult(approach=approach, result=result))
    return results
