"""
Unit tests for serving.batch module.
"""
import asyncio

import pytest

from serving.batch import TaskOutcome, run_all, stream_tasks


def make_task(value, delay=0.0, fail=False):
    async def task():
        await asyncio.sleep(delay)
        if fail:
            raise ValueError(f"task {value} failed")
        return value
    return task


async def collect(generator):
    return [event async for event in generator]


class TestRunAll:
    """Tests for the wait-for-all discipline."""

    def test_failure_is_isolated(self):
        """Three tasks, the second fails: three outcomes, two successes."""
        tasks = [make_task("a", 0.02), make_task("b", fail=True), make_task("c", 0.01)]

        outcomes = asyncio.run(run_all(tasks))

        assert [o.index for o in outcomes] == [0, 1, 2]
        assert [o.ok for o in outcomes] == [True, False, True]
        assert outcomes[0].result == "a"
        assert outcomes[2].result == "c"
        assert isinstance(outcomes[1].error, ValueError)
        assert outcomes[1].error_message == "task b failed"

    def test_runs_concurrently(self):
        """Tasks overlap instead of running one after another."""
        running = []
        peak = []

        def tracked(i):
            async def task():
                running.append(i)
                peak.append(len(running))
                await asyncio.sleep(0.01)
                running.remove(i)
                return i
            return task

        asyncio.run(run_all([tracked(i) for i in range(3)]))

        assert max(peak) == 3

    def test_empty_batch(self):
        assert asyncio.run(run_all([])) == []

    def test_error_message_falls_back_to_type(self):
        outcome = TaskOutcome(index=0, ok=False, error=KeyError())

        assert outcome.error_message == "KeyError"


class TestStreamTasks:
    """Tests for the incremental streaming discipline."""

    def test_event_sequence(self):
        tasks = [make_task("a", 0.03), make_task("b", fail=True), make_task("c", 0.01)]

        events = asyncio.run(collect(stream_tasks(tasks)))

        assert events[0] == {"type": "start", "total": 3}
        assert events[-1] == {"type": "complete", "total": 3, "failed": 1}
        per_task = events[1:-1]
        assert [e["task_index"] for e in per_task] == [1, 2, 0]
        assert [e["type"] for e in per_task] == ["error", "result", "result"]
        assert [e["progress"] for e in per_task] == pytest.approx([1 / 3, 2 / 3, 1.0])
        assert per_task[0]["error"] == "task b failed"
        assert per_task[1]["result"] == "c"

    def test_error_without_message_uses_type_name(self):
        async def silent_failure():
            raise KeyError()

        events = asyncio.run(collect(stream_tasks([silent_failure])))

        assert events[1]["type"] == "error"
        assert events[1]["error"] == "KeyError"

    def test_empty_batch(self):
        events = asyncio.run(collect(stream_tasks([])))

        assert events == [
            {"type": "start", "total": 0},
            {"type": "complete", "total": 0, "failed": 0},
        ]

    def test_closing_cancels_outstanding_tasks(self):
        cancelled = []

        def slow(i):
            async def task():
                try:
                    await asyncio.sleep(10)
                except asyncio.CancelledError:
                    cancelled.append(i)
                    raise
            return task

        async def consume_first_result():
            stream = stream_tasks([make_task("fast"), slow(1), slow(2)])
            received = []
            async for event in stream:
                received.append(event)
                if event["type"] == "result":
                    break
            await stream.aclose()
            return received

        received = asyncio.run(consume_first_result())

        assert [e["type"] for e in received] == ["start", "result"]
        assert sorted(cancelled) == [1, 2]
