"""Retrieval index contract and the in-memory backing."""

from __future__ import annotations

import json
from dataclasses import dataclass
from math import sqrt
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from dynamic_agent.errors import VectorStoreError
from dynamic_agent.retrieval.embedder import Embedder
from dynamic_agent.types import RetrievedId, RetrievedItem

if TYPE_CHECKING:
    from dynamic_agent.agent.registry import ToolRegistry


@runtime_checkable
class VectorIndex(Protocol):
    """Similarity search capability queried during resolution.

    Implementations return results in descending relevance and raise
    `VectorStoreError` when the backing store fails.
    """

    async def top_n(self, query: str, n: int) -> list[RetrievedItem]:
        """Return the `n` most relevant `(score, id, payload)` triples."""

    async def top_n_ids(self, query: str, n: int) -> list[RetrievedId]:
        """Return the `n` most relevant `(score, id)` pairs."""


@dataclass(slots=True)
class _StoredItem:
    payload: Any
    embeddings: list[list[float]]


class InMemoryVectorIndex:
    """Deterministic index used for tests and local prototyping.

    An item may be embedded from several texts; it scores as its best match.
    Equal scores keep insertion order.
    """

    def __init__(self, embedder: Embedder) -> None:
        self._embedder = embedder
        self._store: dict[str, _StoredItem] = {}

    def __len__(self) -> int:
        return len(self._store)

    def upsert(self, item_id: str, payload: Any, texts: list[str] | None = None) -> None:
        if texts is None:
            texts = [payload if isinstance(payload, str) else json.dumps(payload, sort_keys=True)]
        if not texts:
            raise ValueError(f"At least one embedding text is required for {item_id}")
        self._store[item_id] = _StoredItem(
            payload=payload,
            embeddings=self._embedder.embed_documents(texts),
        )

    async def top_n(self, query: str, n: int) -> list[RetrievedItem]:
        return [
            (score, item_id, self._store[item_id].payload)
            for score, item_id in self._rank(query, n)
        ]

    async def top_n_ids(self, query: str, n: int) -> list[RetrievedId]:
        return self._rank(query, n)

    def _rank(self, query: str, n: int) -> list[RetrievedId]:
        if n < 1:
            raise VectorStoreError(f"Sample count must be positive, got {n}")
        query_embedding = self._embedder.embed_query(query)
        scored = [
            (
                max(_cosine_similarity(query_embedding, embedding) for embedding in item.embeddings),
                item_id,
            )
            for item_id, item in self._store.items()
        ]
        ranked = sorted(scored, key=lambda pair: pair[0], reverse=True)
        return ranked[:n]

    @classmethod
    def from_tools(cls, registry: ToolRegistry, embedder: Embedder) -> "InMemoryVectorIndex":
        """Index every registered tool so its name can be retrieved by prompt."""
        index = cls(embedder)
        for tool in registry.tools():
            index.upsert(tool.name, {"name": tool.name}, texts=tool.embedding_documents())
        return index


def _cosine_similarity(a: list[float], b: list[float]) -> float:
    if not a or not b or len(a) != len(b):
        return 0.0
    numerator = sum(x * y for x, y in zip(a, b, strict=True))
    norm_a = sqrt(sum(x * x for x in a))
    norm_b = sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return numerator / (norm_a * norm_b)
