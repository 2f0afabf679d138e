"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="helpdesk-core", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Staleness Monitor ==========
    monitor_enabled: bool = Field(
        default=True,
        description="Start the staleness monitor when the app starts"
    )
    monitor_period_seconds: float = Field(
        default=60.0,
        description="Seconds between staleness scans",
        gt=0
    )
    staleness_threshold_days: float = Field(
        default=15.0,
        description="Age after which a non-terminal ticket is overdue",
        gt=0
    )

    # ========== Seed Data ==========
    seed_data_path: Optional[Path] = Field(
        default=None,
        description="Optional YAML file with users, tickets and comments"
    )

    # ========== LLM Assistant ==========
    openai_api_key: Optional[str] = Field(
        default=None,
        description="API key for the OpenAI-compatible assistant backend"
    )
    openai_base_url: Optional[str] = Field(
        default=None,
        description="Override base URL for OpenAI-compatible providers"
    )
    llm_model: str = Field(
        default="gpt-4o-mini",
        description="Model used for classification, summaries and suggestions"
    )
    llm_temperature: float = Field(
        default=0.3,
        description="Default temperature for LLM",
        ge=0.0,
        le=1.0
    )
    llm_max_tokens: int = Field(
        default=500,
        description="Default max tokens for LLM generation",
        ge=1,
        le=8000
    )
    llm_timeout_seconds: float = Field(
        default=15.0,
        description="Upper bound for a single assistant call",
        gt=0
    )
    mock_llm: bool = Field(
        default=False,
        description="Use mock LLM responses (no API calls)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class UserRole(str, Enum):
    """Roles determine the capability set of a user."""
    ADMIN = "ADMIN"
    PIC = "PIC"         # Person in charge
    CLIENT = "CLIENT"


class TicketStatus(str, Enum):
    """Ticket lifecycle statuses."""
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class TicketPriority(str, Enum):
    """Ticket priority levels."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class NotificationKind(str, Enum):
    """Notification severity kinds."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    URGENT = "urgent"


# ========== Lists for validation ==========

VALID_ROLES = [UserRole.ADMIN, UserRole.PIC, UserRole.CLIENT]
VALID_STATUSES = [
    TicketStatus.OPEN, TicketStatus.IN_PROGRESS,
    TicketStatus.RESOLVED, TicketStatus.CLOSED
]
VALID_PRIORITIES = [
    TicketPriority.LOW, TicketPriority.MEDIUM,
    TicketPriority.HIGH, TicketPriority.URGENT
]
TERMINAL_STATUSES = frozenset({TicketStatus.RESOLVED, TicketStatus.CLOSED})

TICKET_CATEGORIES = ["Hardware", "Software", "Bug", "Access", "Network", "Other"]

# Classification fallback
DEFAULT_CATEGORY = "Other"
DEFAULT_PRIORITY = TicketPriority.MEDIUM
