"""Sequential fan-out over an ordered list of retrieval sources."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from dynamic_agent.errors import RetrievalError
from dynamic_agent.retrieval.index import VectorIndex
from dynamic_agent.types import RetrievedItem

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetrievalSource(BaseModel):
    """A retrieval index paired with the number of samples drawn from it."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    sample_count: int = Field(ge=1)
    index: VectorIndex

    @classmethod
    def coerce(cls, value: "RetrievalSource | tuple[int, Any]") -> "RetrievalSource":
        if isinstance(value, RetrievalSource):
            return value
        sample_count, index = value
        return cls(sample_count=sample_count, index=index)


async def fan_out(sources: Sequence[RetrievalSource], query: str) -> list[RetrievedItem]:
    """Query every source in order and concatenate their `(score, id, payload)` batches."""

    async def _fetch(source: RetrievalSource) -> list[RetrievedItem]:
        return list(await source.index.top_n(query, source.sample_count))

    return await _collect(sources, _fetch)


async def fan_out_ids(sources: Sequence[RetrievalSource], query: str) -> list[str]:
    """Query every source in order and concatenate the returned identifiers."""

    async def _fetch(source: RetrievalSource) -> list[str]:
        return [item_id for _, item_id in await source.index.top_n_ids(query, source.sample_count)]

    return await _collect(sources, _fetch)


async def _collect(
    sources: Sequence[RetrievalSource],
    fetch: Callable[[RetrievalSource], Awaitable[list[T]]],
) -> list[T]:
    # Each query completes before the next is issued; the first failure
    # abandons the remaining sources and everything gathered so far.
    results: list[T] = []
    for position, source in enumerate(sources):
        try:
            batch = await fetch(source)
        except Exception as exc:
            logger.error("Retrieval source #%d failed: %s", position, exc)
            raise RetrievalError(position, exc) from exc
        results.extend(batch)
    return results
