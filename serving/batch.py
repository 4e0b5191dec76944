"""
Batch execution disciplines.

Both disciplines start every task at once and isolate failures: one failing
task never cancels its siblings.

- run_all: wait for all tasks, return one outcome per task in task order
- stream_tasks: async generator of progress events in completion order
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

TaskFactory = Callable[[], Awaitable[Any]]


def describe_error(error: BaseException) -> str:
    """Exception message, or the exception type name when the message is empty."""
    return str(error) or type(error).__name__


@dataclass
class TaskOutcome:
    """Result slot for one task of a batch."""
    index: int
    ok: bool
    result: Any = None
    error: Optional[BaseException] = None

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return describe_error(self.error)


async def run_all(task_factories: Sequence[TaskFactory]) -> List[TaskOutcome]:
    """
    Run all tasks concurrently and wait for every one of them.

    Args:
        task_factories: Zero-argument callables returning awaitables

    Returns:
        One TaskOutcome per factory, in the same order
    """
    results = await asyncio.gather(
        *(factory() for factory in task_factories),
        return_exceptions=True
    )

    outcomes = []
    for index, result in enumerate(results):
        if isinstance(result, BaseException):
            logger.warning("Task %d failed: %s", index, result)
            outcomes.append(TaskOutcome(index=index, ok=False, error=result))
        else:
            outcomes.append(TaskOutcome(index=index, ok=True, result=result))
    return outcomes


async def stream_tasks(task_factories: Sequence[TaskFactory]) -> AsyncGenerator[Dict, None]:
    """
    Run all tasks concurrently, yielding an event as each one finishes.

    Events:
        {"type": "start", "total"}
        {"type": "result", "task_index", "progress", "result"}
        {"type": "error", "task_index", "progress", "error"}
        {"type": "complete", "total", "failed"}

    `progress` is completed/total in [0, 1]. Closing the generator early
    cancels the tasks that are still running.
    """
    total = len(task_factories)
    yield {"type": "start", "total": total}

    pending = {}
    for index, factory in enumerate(task_factories):
        pending[asyncio.ensure_future(factory())] = index

    completed = 0
    failed = 0
    try:
        while pending:
            done, _ = await asyncio.wait(pending.keys(), return_when=asyncio.FIRST_COMPLETED)
            # Deterministic order when several finish in the same tick
            for task in sorted(done, key=pending.get):
                index = pending.pop(task)
                completed += 1
                progress = completed / total

                if task.cancelled():
                    failed += 1
                    yield {"type": "error", "task_index": index, "progress": progress, "error": "cancelled"}
                elif task.exception() is not None:
                    failed += 1
                    logger.warning("Task %d failed: %s", index, task.exception())
                    yield {
                        "type": "error",
                        "task_index": index,
                        "progress": progress,
                        "error": describe_error(task.exception()),
                    }
                else:
                    yield {"type": "result", "task_index": index, "progress": progress, "result": task.result()}

        yield {"type": "complete", "total": total, "failed": failed}
    finally:
        if pending:
            logger.info("Stream closed, cancelling %d outstanding tasks", len(pending))
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
