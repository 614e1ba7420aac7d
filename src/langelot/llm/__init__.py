"""
LLM module - text generation collaborator protocol and LiteLLM client.
"""

from .base import TextGenerator
from .client import LLMClient

__all__ = [
    "TextGenerator",
    "LLMClient",
]
