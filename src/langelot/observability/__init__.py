"""
Observability infrastructure for Langelot.

Provides the per-run call log sink.
"""

from .call_log import CallLog, CallRecord

__all__ = [
    "CallLog",
    "CallRecord",
]
