"""
Core components of Langelot: configuration, prompts, routing and the
orchestration engine.

Only configuration is re-exported here; import the engine from
``langelot.core.orchestrator`` (or ``langelot``) directly.
"""

from .config import LangelotConfig, get_config, reset_config

__all__ = [
    "LangelotConfig",
    "get_config",
    "reset_config",
]
