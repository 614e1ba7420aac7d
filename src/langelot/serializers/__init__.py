"""
Codecs for the tag-delimited text exchanged with the generation service.
"""

from .tagged_text import (
    build_tag,
    extract_all,
    extract_first,
    parse_result_batch,
    parse_strategies,
)

__all__ = [
    "extract_all",
    "extract_first",
    "build_tag",
    "parse_strategies",
    "parse_result_batch",
]
