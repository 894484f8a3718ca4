"""Configuration models for dynamic context and tool resolution."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AgentConfig(BaseModel):
    """Configures the static tool list and default retrieval sample counts."""

    static_tools: list[str] = Field(default_factory=list)
    context_samples: int = Field(default=3, ge=1)
    tool_samples: int = Field(default=2, ge=1)
    preamble: str | None = None


class LoggingConfig(BaseModel):
    """Configures the service log output."""

    level: str = Field(default="INFO")
    format: str = Field(default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
