"""Tool registry built on Pydantic v2 models."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from dynamic_agent.types import ToolDefinition


@runtime_checkable
class Tool(Protocol):
    """A tool implementation that can describe itself for a given prompt."""

    name: str

    async def definition(self, prompt: str) -> ToolDefinition:
        """Build the definition exposed to the model for this prompt."""

    def embedding_documents(self) -> list[str]:
        """Texts used to index the tool for dynamic retrieval."""


class ToolSpec(BaseModel):
    """Declarative tool specification for registration and indexing."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    description: str
    args_schema: type[BaseModel]
    tags: list[str] = Field(default_factory=list)
    embedding_docs: list[str] = Field(default_factory=list)

    async def definition(self, prompt: str) -> ToolDefinition:
        del prompt  # static specs describe themselves the same way for every prompt.
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=self.args_schema.model_json_schema(),
        )

    def embedding_documents(self) -> list[str]:
        docs = [self.description, *self.embedding_docs]
        if self.tags:
            docs.append(" ".join(self.tags))
        return docs


class ToolRegistry:
    """Stores tool implementations by name."""

    def __init__(self, tools: list[Tool] | None = None) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> list[str]:
        return list(self._tools)

    def tools(self) -> list[Tool]:
        return list(self._tools.values())
