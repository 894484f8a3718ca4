"""Per-call tracing for resolution requests."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

ResolutionKind = Literal["context", "tools"]


@dataclass(slots=True)
class ResolutionTrace:
    trace_id: str
    timestamp_utc: str
    kind: ResolutionKind
    query: str | None
    item_ids: list[str]
    missing_tools: list[str]
    latency_ms: float
    error: str | None = None


@dataclass(slots=True)
class TraceCollector:
    """Mutable scratch record filled in while one resolution call runs."""

    query: str | None = None
    item_ids: list[str] = field(default_factory=list)
    missing_tools: list[str] = field(default_factory=list)


class TraceStore:
    """In-memory trace storage for API-level observability."""

    def __init__(self, max_records: int = 1000) -> None:
        self._records: dict[str, ResolutionTrace] = {}
        self._max_records = max_records

    def record(
        self,
        *,
        kind: ResolutionKind,
        collector: TraceCollector,
        latency_ms: float,
        error: BaseException | None = None,
    ) -> ResolutionTrace:
        trace = ResolutionTrace(
            trace_id=str(uuid.uuid4()),
            timestamp_utc=datetime.now(timezone.utc).isoformat(),
            kind=kind,
            query=collector.query,
            item_ids=list(collector.item_ids),
            missing_tools=list(collector.missing_tools),
            latency_ms=latency_ms,
            error=None if error is None else f"{type(error).__name__}: {error}",
        )
        self._records[trace.trace_id] = trace
        while len(self._records) > self._max_records:
            del self._records[next(iter(self._records))]
        return trace

    def get(self, trace_id: str) -> ResolutionTrace:
        trace = self._records.get(trace_id)
        if trace is None:
            raise KeyError(f"Trace not found: {trace_id}")
        return trace

    def list_recent(self, limit: int = 20) -> list[ResolutionTrace]:
        if limit <= 0:
            return []
        return list(self._records.values())[-limit:]

    def summary(self) -> dict[str, float | int]:
        """Aggregate resolution metrics for dashboard display."""
        records = list(self._records.values())
        total = len(records)
        if total == 0:
            return {
                "total_requests": 0,
                "context_requests": 0,
                "tool_requests": 0,
                "failed_requests": 0,
                "missing_tool_count": 0,
                "avg_latency_ms": 0.0,
                "p95_latency_ms": 0.0,
            }

        latencies = sorted(record.latency_ms for record in records)
        p95_index = max(0, int((len(latencies) * 0.95) - 1))
        return {
            "total_requests": total,
            "context_requests": sum(1 for record in records if record.kind == "context"),
            "tool_requests": sum(1 for record in records if record.kind == "tools"),
            "failed_requests": sum(1 for record in records if record.error is not None),
            "missing_tool_count": sum(len(record.missing_tools) for record in records),
            "avg_latency_ms": sum(latencies) / total,
            "p95_latency_ms": latencies[p95_index],
        }


class Timer:
    """Simple context timer used by the resolver."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
