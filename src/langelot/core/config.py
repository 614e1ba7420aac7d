"""
Configuration management for Langelot.

Loads settings from environment variables and provides a centralized
configuration object for the orchestrator, workers and connector.

Configuration precedence (highest to lowest):
1. Explicit kwargs passed to LangelotConfig (CLI options end up here)
2. Environment variables (LANGELOT_* prefix)
3. .env file
4. pyproject.toml [tool.langelot] section
5. Hardcoded defaults
"""

import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

# Import tomllib for Python 3.11+, tomli for Python 3.10
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from ..models.contracts import OrchestrationOptions
from ..models.enums import LogLevel, WorkerMode

logger = logging.getLogger(__name__)


def load_pyproject_defaults(pyproject_path: Path = Path("pyproject.toml")) -> dict[str, Any]:
    """
    Load defaults from [tool.langelot] section in pyproject.toml.

    Args:
        pyproject_path: Location of the pyproject file

    Returns:
        Dictionary of configuration overrides from pyproject.toml
    """
    if not pyproject_path.exists():
        return {}

    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        logger.warning(f"Could not load pyproject.toml: {e}")
        return {}
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Could not parse pyproject.toml: {e}")
        return {}

    tool_config = data.get("tool", {}).get("langelot", {})
    if tool_config:
        logger.debug(f"Loaded {len(tool_config)} settings from pyproject.toml")

    return tool_config


class PyProjectTomlSettingsSource(PydanticBaseSettingsSource):
    """
    A pydantic-settings source that loads configuration from pyproject.toml.
    """

    def get_field_value(self, field_name: str, field_info: Any) -> tuple[Any, str, bool]:
        """Not used in this implementation."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        """Load and return configuration from pyproject.toml."""
        return load_pyproject_defaults()


class LangelotConfig(BaseSettings):
    """
    Main configuration class for Langelot.

    Holds run defaults for the orchestrator and the tuning of each
    capability worker.
    """

    model_config = SettingsConfigDict(
        env_prefix="LANGELOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Orchestrator (decomposition + synthesis)
    model: str = Field(
        default="openai/gpt-4.1", description="Model for decomposition and synthesis (LiteLLM format)"
    )
    max_tokens: int = Field(default=1500, description="Maximum output tokens per orchestrator call")
    temperature: float = Field(default=0.7, description="Sampling temperature for orchestrator calls")
    capability_hints: bool = Field(
        default=True,
        description="Ask the decomposer to assign a capability to each approach",
    )

    # Reasoning worker
    reasoning_model: str = Field(
        default="openai/gpt-4.1-mini", description="Low-latency model for reasoning workers"
    )
    reasoning_max_tokens: int = Field(default=1000)
    reasoning_temperature: float = Field(default=0.7)

    # Retrieval worker
    retrieval_model: str = Field(
        default="openai/gpt-4o-search-preview",
        description="Model that supports live retrieval",
    )
    fallback_model: str | None = Field(
        default=None,
        description="Model for the no-retrieval fallback (defaults to the orchestrator model)",
    )
    fallback_max_tokens: int = Field(default=1500)
    fallback_temperature: float = Field(default=0.7)

    # Document analysis worker
    document_model: str = Field(default="openai/gpt-4.1")
    document_max_tokens: int = Field(default=2000)
    document_temperature: float = Field(default=0.3)
    upload_purpose: str = Field(default="user_data", description="Purpose tag for uploaded files")
    supported_document_extensions: list[str] = Field(
        default=[".pdf", ".txt", ".md", ".doc", ".docx"],
        description="File extensions accepted for document analysis",
    )

    # Run defaults
    worker_mode: WorkerMode = Field(default=WorkerMode.AUTO)
    document_paths: list[Path] = Field(default_factory=list)

    # Connector
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    llm_timeout: int = Field(default=120, description="Request timeout in seconds")
    llm_max_retries: int = Field(
        default=3, description="Attempts for transient connection/timeout failures"
    )

    # Logging
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_file: Path | None = Field(
        default=None,
        description="Path to application log file (None disables file logging)",
    )
    log_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Maximum log file size before rotation"  # 10MB
    )
    log_backup_count: int = Field(default=5, description="Number of backup log files to keep")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize the sources and their priority for loading configuration.

        Returns:
            Tuple of settings sources in priority order
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            PyProjectTomlSettingsSource(settings_cls),
            file_secret_settings,
        )

    @field_validator("temperature", "reasoning_temperature", "fallback_temperature", "document_temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        """Temperatures must fall in the range providers accept"""
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"temperature must be 0.0-2.0, got {v}")
        return v

    @field_validator("max_tokens", "reasoning_max_tokens", "fallback_max_tokens", "document_max_tokens")
    @classmethod
    def validate_token_limits(cls, v: int) -> int:
        """Ensure token limits are positive and reasonable"""
        if v <= 0:
            raise ValueError(f"Token limit must be positive, got {v}")
        if v > 200_000:
            logger.warning(
                f"Very high token limit ({v:,}). Ensure this matches your model's capabilities."
            )
        return v

    @field_validator("llm_max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"llm_max_retries must be >= 1, got {v}")
        return v

    @field_validator("supported_document_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lower-case extensions and make sure they start with a dot"""
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        if not normalized:
            raise ValueError("supported_document_extensions must not be empty")
        return normalized

    @model_validator(mode="after")
    def validate_worker_mode(self) -> "LangelotConfig":
        """Warn early about a document override that cannot be satisfied"""
        if self.worker_mode == WorkerMode.DOCUMENT_ANALYSIS and not self.document_paths:
            logger.warning(
                "worker_mode is document_analysis but no document_paths are configured. "
                "Runs will fail unless documents are passed per run."
            )
        return self

    def to_options(self, **overrides: Any) -> OrchestrationOptions:
        """
        Build run options from configured defaults.

        Args:
            **overrides: Fields of OrchestrationOptions to replace

        Returns:
            OrchestrationOptions instance
        """
        values: dict[str, Any] = {
            "model_id": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "worker_mode": self.worker_mode,
            "document_paths": list(self.document_paths),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return OrchestrationOptions(**values)

    def ensure_log_directory(self) -> None:
        """Ensure the log directory exists."""
        if self.log_file and self.log_file.parent:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)


# Global configuration instance
_config: LangelotConfig | None = None


def get_config() -> LangelotConfig:
    """
    Get the global configuration instance.

    Returns:
        LangelotConfig instance
    """
    global _config
    if _config is None:
        _config = LangelotConfig()
        _config.ensure_log_directory()
    return _config


def reset_config() -> None:
    """Reset the global configuration (mainly for testing)."""
    global _config
    _config = None
