import asyncio
from typing import Any

from pydantic import BaseModel

from dynamic_agent.agent.agent import Agent
from dynamic_agent.agent.registry import ToolRegistry, ToolSpec
from dynamic_agent.types import ToolDefinition


class EmptyInput(BaseModel):
    pass


class _DelayedIndex:
    """Index that answers after a delay, to show ordering does not follow speed."""

    def __init__(self, items: list[str], delay: float) -> None:
        self.items = items
        self.delay = delay

    async def top_n(self, query: str, n: int) -> list[tuple[float, str, Any]]:
        await asyncio.sleep(self.delay)
        return [(1.0, item_id, {"id": item_id}) for item_id in self.items[:n]]

    async def top_n_ids(self, query: str, n: int) -> list[tuple[float, str]]:
        return [(score, item_id) for score, item_id, _ in await self.top_n(query, n)]


class _SlowTool:
    def __init__(self, name: str, delay: float) -> None:
        self.name = name
        self.delay = delay

    async def definition(self, prompt: str) -> ToolDefinition:
        await asyncio.sleep(self.delay)
        return ToolDefinition(name=self.name, description=self.name)

    def embedding_documents(self) -> list[str]:
        return [self.name]


def _agent() -> Agent:
    registry = ToolRegistry(
        [
            _SlowTool("slow_static", 0.02),
            ToolSpec(name="fast_dynamic", description="fast", args_schema=EmptyInput),
            ToolSpec(name="second_dynamic", description="second", args_schema=EmptyInput),
        ]
    )
    return Agent(
        tools=registry,
        static_tools=["slow_static"],
        dynamic_context=[(2, _DelayedIndex(["a1", "a2", "a3"], 0.02)), (1, _DelayedIndex(["b1"], 0.0))],
        dynamic_tools=[(1, _DelayedIndex(["fast_dynamic"], 0.0)), (1, _DelayedIndex(["second_dynamic"], 0.0))],
    )


def test_context_order_is_source_order_regardless_of_latency() -> None:
    documents = asyncio.run(_agent().resolve_context("q"))

    assert [document.id for document in documents] == ["a1", "a2", "b1"]


def test_static_tools_always_come_before_dynamic_tools() -> None:
    tools = asyncio.run(_agent().resolve_tools("q"))

    assert [tool.name for tool in tools] == ["slow_static", "fast_dynamic", "second_dynamic"]


def test_repeated_resolution_is_identical() -> None:
    agent = _agent()

    async def run() -> tuple[list[Any], list[Any]]:
        first = (await agent.resolve_context("same prompt"), await agent.resolve_tools("same prompt"))
        second = (await agent.resolve_context("same prompt"), await agent.resolve_tools("same prompt"))
        return list(first), list(second)

    first, second = asyncio.run(run())
    assert first == second


def test_concurrent_calls_do_not_interfere() -> None:
    agent = _agent()

    async def run() -> list[Any]:
        return await asyncio.gather(
            agent.resolve_context("q"),
            agent.resolve_tools("q"),
            agent.resolve_context("q"),
        )

    context_a, tools, context_b = asyncio.run(run())
    assert context_a == context_b
    assert [tool.name for tool in tools] == ["slow_static", "fast_dynamic", "second_dynamic"]
