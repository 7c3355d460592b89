"""
In-memory task store and the derived board orderings.

Both orderings are recomputed from scratch on every call. Tasks whose status
is not a known TaskStatus are left out of every view instead of failing.
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from taskboard.board.task import BoardTask
from taskboard.models.task import TaskStatus, STATUS_ORDER, STATUS_RANK


def column_key(task: BoardTask) -> Tuple[int, int]:
    return (task.position, task.id)


def group_by_status(tasks: Iterable[BoardTask]) -> Dict[TaskStatus, List[BoardTask]]:
    """Partition tasks into columns, each sorted by (position, id)."""
    columns: Dict[TaskStatus, List[BoardTask]] = {status: [] for status in STATUS_ORDER}
    for task in tasks:
        status = task.known_status
        if status is None:
            continue
        columns[status].append(task)
    for column in columns.values():
        column.sort(key=column_key)
    return columns


def flatten_ordered(tasks: Iterable[BoardTask]) -> List[BoardTask]:
    """Single checklist ordering by (status rank, position, id)."""
    known = [task for task in tasks if task.known_status is not None]
    return sorted(known, key=lambda t: (STATUS_RANK[t.known_status], t.position, t.id))


class TaskStore:
    """Authoritative in-memory list of the board's tasks."""

    def __init__(self, tasks: Optional[Iterable[BoardTask]] = None):
        self._tasks: List[BoardTask] = [replace(t) for t in tasks or []]

    @property
    def tasks(self) -> List[BoardTask]:
        return list(self._tasks)

    def load(self, tasks: Iterable[BoardTask]):
        self._tasks = [replace(t) for t in tasks]

    def get(self, task_id: int) -> Optional[BoardTask]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def group_by_status(self) -> Dict[TaskStatus, List[BoardTask]]:
        return group_by_status(self._tasks)

    def flatten_ordered(self) -> List[BoardTask]:
        return flatten_ordered(self._tasks)

    def column_length(self, status: TaskStatus) -> int:
        return len(self.group_by_status()[status])

    def snapshot(self) -> Tuple[BoardTask, ...]:
        return tuple(replace(t) for t in self._tasks)

    def restore(self, snapshot: Tuple[BoardTask, ...]):
        self.load(snapshot)

    def apply_batch(self, batch):
        """Apply (id, status, position) updates; unknown ids are ignored."""
        updates = {update.id: update for update in batch}
        self._tasks = [
            replace(t, status=updates[t.id].status, position=updates[t.id].position)
            if t.id in updates else t
            for t in self._tasks
        ]

    def __len__(self):
        return len(self._tasks)
