"""Agent owning the retrieval sources, tool registry and static material."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from dynamic_agent.agent.registry import ToolRegistry
from dynamic_agent.agent.resolver import DynamicResolver
from dynamic_agent.config import AgentConfig
from dynamic_agent.obs.tracing import TraceStore
from dynamic_agent.retrieval.fanout import RetrievalSource
from dynamic_agent.retrieval.index import VectorIndex
from dynamic_agent.types import ContextDocument, DynamicInfo, ToolDefinition

SourceLike = RetrievalSource | tuple[int, VectorIndex]


class Agent:
    """Holds everything a prompt is resolved against.

    Retrieval sources and static tool names are fixed at construction; the
    order of each source list is the order their results are concatenated in.
    """

    def __init__(
        self,
        *,
        tools: ToolRegistry | None = None,
        static_tools: Sequence[str] = (),
        static_context: Sequence[ContextDocument] = (),
        dynamic_context: Sequence[SourceLike] = (),
        dynamic_tools: Sequence[SourceLike] = (),
        preamble: str | None = None,
        trace_store: TraceStore | None = None,
    ) -> None:
        self.tools = tools if tools is not None else ToolRegistry()
        self.static_tools = tuple(static_tools)
        self.static_context = tuple(static_context)
        self.dynamic_context = tuple(RetrievalSource.coerce(source) for source in dynamic_context)
        self.dynamic_tools = tuple(RetrievalSource.coerce(source) for source in dynamic_tools)
        self.preamble = preamble
        self._resolver = DynamicResolver(
            tools=self.tools,
            static_tools=self.static_tools,
            context_sources=self.dynamic_context,
            tool_sources=self.dynamic_tools,
            trace_store=trace_store,
        )

    @classmethod
    def from_config(
        cls,
        config: AgentConfig,
        *,
        tools: ToolRegistry,
        context_indices: Sequence[VectorIndex] = (),
        tool_indices: Sequence[VectorIndex] = (),
        static_context: Sequence[ContextDocument] = (),
        trace_store: TraceStore | None = None,
    ) -> "Agent":
        """Build an agent drawing the configured sample counts from each index."""
        return cls(
            tools=tools,
            static_tools=config.static_tools,
            static_context=static_context,
            dynamic_context=[(config.context_samples, index) for index in context_indices],
            dynamic_tools=[(config.tool_samples, index) for index in tool_indices],
            preamble=config.preamble,
            trace_store=trace_store,
        )

    async def resolve_context(self, prompt: Any) -> list[ContextDocument]:
        return await self._resolver.resolve_context(prompt)

    async def resolve_tools(self, prompt: Any) -> list[ToolDefinition]:
        return await self._resolver.resolve_tools(prompt)

    async def resolve(self, prompt: Any) -> DynamicInfo:
        """Resolve context then tools; static context documents come first.

        The agent preamble is carried along so a prompt builder gets all
        per-turn material from one object.
        """
        documents = await self.resolve_context(prompt)
        tools = await self.resolve_tools(prompt)
        return DynamicInfo(
            documents=[*self.static_context, *documents],
            tools=tools,
            preamble=self.preamble,
        )
