"""Dynamic context and tool resolution for retrieval-augmented agents."""

from .agent.agent import Agent
from .agent.registry import ToolRegistry, ToolSpec
from .config import AgentConfig
from .errors import InvalidPromptError, ResolutionError, RetrievalError, VectorStoreError
from .types import ContextDocument, ToolDefinition

__all__ = [
    "Agent",
    "AgentConfig",
    "ContextDocument",
    "InvalidPromptError",
    "ResolutionError",
    "RetrievalError",
    "ToolDefinition",
    "ToolRegistry",
    "ToolSpec",
    "VectorStoreError",
]
