import pytest

from dynamic_agent.obs.tracing import Timer, TraceCollector, TraceStore


def test_trace_store_keeps_most_recent_records() -> None:
    store = TraceStore(max_records=2)
    for query in ("one", "two", "three"):
        store.record(kind="context", collector=TraceCollector(query=query), latency_ms=1.0)

    assert [trace.query for trace in store.list_recent()] == ["two", "three"]
    assert store.list_recent(limit=0) == []


def test_unknown_trace_id_raises_key_error() -> None:
    with pytest.raises(KeyError):
        TraceStore().get("missing")


def test_empty_summary_is_zeroed() -> None:
    summary = TraceStore().summary()

    assert summary["total_requests"] == 0
    assert summary["p95_latency_ms"] == 0.0


def test_timer_measures_elapsed_time() -> None:
    with Timer() as timer:
        sum(range(1000))

    assert timer.elapsed_ms >= 0.0
