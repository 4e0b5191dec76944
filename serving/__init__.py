"""Serving package - Batch execution disciplines."""

from .batch import TaskOutcome, run_all, stream_tasks

__all__ = [
    'TaskOutcome',
    'run_all',
    'stream_tasks',
]
