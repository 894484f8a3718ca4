"""Per-prompt resolution of dynamic context documents and tool definitions."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from dynamic_agent.agent.registry import ToolRegistry
from dynamic_agent.errors import InvalidPromptError
from dynamic_agent.message import to_message
from dynamic_agent.obs.tracing import ResolutionKind, Timer, TraceCollector, TraceStore
from dynamic_agent.retrieval.fanout import RetrievalSource, fan_out, fan_out_ids
from dynamic_agent.types import ContextDocument, ToolDefinition

logger = logging.getLogger(__name__)


class DynamicResolver:
    """Resolves the retrieval-driven material that accompanies a prompt.

    Sources, registry and static tool names are read-only inputs. Every query
    and definition request is awaited in order, so for unchanged inputs the
    output order is reproducible: sources in configured order, items in the
    order each index ranked them, static tools before dynamic tools.
    """

    def __init__(
        self,
        *,
        tools: ToolRegistry,
        static_tools: Sequence[str] = (),
        context_sources: Sequence[RetrievalSource] = (),
        tool_sources: Sequence[RetrievalSource] = (),
        trace_store: TraceStore | None = None,
    ) -> None:
        self.tools = tools
        self.static_tools = tuple(static_tools)
        self.context_sources = tuple(context_sources)
        self.tool_sources = tuple(tool_sources)
        self.trace_store = trace_store

    async def resolve_context(self, prompt: Any) -> list[ContextDocument]:
        """Retrieve context documents for `prompt` from every context source.

        Raises:
            InvalidPromptError: the prompt has no searchable text.
            RetrievalError: a context source failed; no documents are returned.
        """
        collector = TraceCollector()
        with self._traced("context", collector):
            text = _search_text(prompt)
            collector.query = text

            items = await fan_out(self.context_sources, text)
            documents = [
                ContextDocument(id=item_id, text=render_payload(payload))
                for _, item_id, payload in items
            ]
            collector.item_ids = [document.id for document in documents]
        return documents

    async def resolve_tools(self, prompt: Any) -> list[ToolDefinition]:
        """Build definitions for the static tools, then the retrieved ones.

        Names without a registered implementation are logged and skipped.

        Raises:
            InvalidPromptError: the prompt has no searchable text.
            RetrievalError: a dynamic tool source failed.
        """
        collector = TraceCollector()
        with self._traced("tools", collector):
            text = _search_text(prompt)
            collector.query = text

            static_definitions = await self._definitions(self.static_tools, text, collector)
            tool_ids = await fan_out_ids(self.tool_sources, text)
            dynamic_definitions = await self._definitions(tool_ids, text, collector)

            definitions = static_definitions + dynamic_definitions
            collector.item_ids = [definition.name for definition in definitions]
        return definitions

    async def _definitions(
        self,
        names: Sequence[str],
        text: str,
        collector: TraceCollector,
    ) -> list[ToolDefinition]:
        definitions: list[ToolDefinition] = []
        for name in names:
            tool = self.tools.get(name)
            if tool is None:
                logger.warning("Tool implementation not found in toolset: %s", name)
                collector.missing_tools.append(name)
                continue
            definitions.append(await tool.definition(text))
        return definitions

    @contextmanager
    def _traced(self, kind: ResolutionKind, collector: TraceCollector) -> Iterator[None]:
        if self.trace_store is None:
            yield
            return

        timer = Timer()
        error: BaseException | None = None
        try:
            with timer:
                yield
        except BaseException as exc:
            error = exc
            raise
        finally:
            self.trace_store.record(
                kind=kind,
                collector=collector,
                latency_ms=timer.elapsed_ms,
                error=error,
            )


def render_payload(payload: Any) -> str:
    """Pretty-print a retrieved payload, falling back to its string form."""
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(payload)


def _search_text(prompt: Any) -> str:
    try:
        message = to_message(prompt)
    except ValueError as exc:
        raise InvalidPromptError(f"Invalid prompt: {exc}") from exc

    text = message.rag_text()
    if text is None:
        raise InvalidPromptError()
    return text
