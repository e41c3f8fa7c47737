"""Project-planning errors."""

from __future__ import annotations


class SchedulingError(Exception):
    """Task dependencies form a cycle, so no critical path exists.

    Attributes:
        task_id: A task on the cycle.
    """

    def __init__(self, task_id: str, message: str = "dependency cycle") -> None:
        self.task_id = task_id
        super().__init__(f"{message}: {task_id}")
