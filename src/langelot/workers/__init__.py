"""
Capability workers: reasoning, retrieval and document analysis.
"""

from .base import BaseWorker
from .document_analysis import DocumentAnalysisWorker
from .reasoning import ReasoningWorker
from .retrieval import RetrievalWorker

__all__ = [
    "BaseWorker",
    "ReasoningWorker",
    "RetrievalWorker",
    "DocumentAnalysisWorker",
]
