"""Property-based checks of delivery order and level filtering."""

from __future__ import annotations

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from fanlog.core.concurrency import ClosableQueue
from fanlog.core.dispatch import DispatchQueue
from fanlog.core.entry import LogEntry
from fanlog.core.levels import LogLevel
from fanlog.testing import RecordingSink

pytestmark = pytest.mark.property

levels = st.sampled_from(list(LogLevel))
entries = st.lists(
    st.tuples(levels, st.text(max_size=20)),
    max_size=60,
)


@settings(
    max_examples=40,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
@given(batch=entries, minimums=st.lists(levels, min_size=1, max_size=4))
def test_each_sink_sees_filtered_subsequence_in_order(
    batch: list[tuple[LogLevel, str]], minimums: list[LogLevel]
) -> None:
    sinks = [RecordingSink(m, name=f"s{i}") for i, m in enumerate(minimums)]
    dq = DispatchQueue(sinks, capacity=max(1, len(batch)))

    for level, message in batch:
        dq.enqueue(LogEntry(level, message))
    dq.dispose()

    for sink, minimum in zip(sinks, minimums):
        expected = [(lvl, msg) for lvl, msg in batch if lvl >= minimum]
        assert [(w.level, w.message) for w in sink.writes] == expected
        assert sink.dispose_calls == 1


@settings(max_examples=60, deadline=None)
@given(
    capacity=st.integers(min_value=1, max_value=8),
    items=st.lists(st.integers(), max_size=30),
)
def test_closable_queue_never_exceeds_capacity(capacity: int, items: list[int]) -> None:
    q: ClosableQueue[int] = ClosableQueue(capacity)
    accepted = [item for item in items if q.try_put(item)]

    assert q.qsize() == min(capacity, len(items))
    q.close()
    drained = []
    while q.qsize():
        drained.append(q.get())
    assert drained == accepted
