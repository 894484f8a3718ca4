import asyncio

import pytest
from pydantic import BaseModel

from dynamic_agent.agent.registry import ToolRegistry, ToolSpec
from dynamic_agent.errors import VectorStoreError
from dynamic_agent.retrieval.embedder import HashingEmbedder
from dynamic_agent.retrieval.index import InMemoryVectorIndex


class EmptyInput(BaseModel):
    pass


def _index() -> InMemoryVectorIndex:
    index = InMemoryVectorIndex(HashingEmbedder())
    index.upsert("refunds", {"title": "Refunds", "body": "customers may request refunds within 30 days"},
                 texts=["customers may request refunds within 30 days"])
    index.upsert("holidays", "employees receive twenty holiday days per year")
    index.upsert("security", "all laptops must use full disk encryption")
    return index


def test_top_n_ranks_most_similar_item_first() -> None:
    results = asyncio.run(_index().top_n("how many days to request refunds", 2))

    assert len(results) == 2
    assert results[0][1] == "refunds"
    assert results[0][2]["title"] == "Refunds"
    assert results[0][0] >= results[1][0]


def test_top_n_ids_matches_top_n_order() -> None:
    index = _index()
    full = asyncio.run(index.top_n("disk encryption for laptops", 3))
    ids = asyncio.run(index.top_n_ids("disk encryption for laptops", 3))

    assert [item_id for _, item_id in ids] == [item_id for _, item_id, _ in full]
    assert ids[0][1] == "security"


def test_non_positive_sample_count_is_a_store_error() -> None:
    with pytest.raises(VectorStoreError):
        asyncio.run(_index().top_n("anything", 0))


def test_from_tools_indexes_tool_names() -> None:
    registry = ToolRegistry(
        [
            ToolSpec(name="calculator", description="evaluate arithmetic expressions", args_schema=EmptyInput),
            ToolSpec(
                name="weather",
                description="look up the forecast",
                args_schema=EmptyInput,
                embedding_docs=["rain sun temperature forecast for a city"],
            ),
        ]
    )
    index = InMemoryVectorIndex.from_tools(registry, HashingEmbedder())

    assert len(index) == 2
    top = asyncio.run(index.top_n_ids("temperature forecast for a city", 1))
    assert top[0][1] == "weather"


def test_hashing_embedder_ignores_case_and_punctuation() -> None:
    embedder = HashingEmbedder(dimension=64)

    assert embedder.embed_query("Refund, policy!") == embedder.embed_query("refund policy")
    assert embedder.embed_query("") == [0.0] * 64


def test_tool_tags_make_a_tool_retrievable() -> None:
    registry = ToolRegistry(
        [
            ToolSpec(name="calculator", description="evaluate arithmetic expressions", args_schema=EmptyInput),
            ToolSpec(name="ledger", description="read entries", args_schema=EmptyInput, tags=["invoices", "billing"]),
        ]
    )
    index = InMemoryVectorIndex.from_tools(registry, HashingEmbedder())

    assert asyncio.run(index.top_n_ids("billing invoices", 1))[0][1] == "ledger"
