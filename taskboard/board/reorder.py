"""
Reorder protocol: turns a column drop into a full position batch and persists it.

The local store is updated optimistically before the batch is sent. Whatever
the outcome, the board is then refreshed from the API; on failure the
pre-batch snapshot is restored first so a failed refresh never leaves the
rejected state on screen.
"""

import enum
import logging
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Tuple

from taskboard.board.notifications import Notifier
from taskboard.board.store import TaskStore, group_by_status
from taskboard.board.task import BoardTask
from taskboard.core.errors import PartialBatchError, WriteError
from taskboard.models.task import TaskStatus, STATUS_ORDER, parse_status
from taskboard.services.task_api import TaskApi

logger = logging.getLogger(__name__)


class PositionUpdate(NamedTuple):
    id: int
    status: TaskStatus
    position: int

    def to_payload(self) -> Dict[str, Any]:
        return {"id": self.id, "status": self.status.value, "position": self.position}


class ReorderResult(enum.Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"


def compute_reindex(
    tasks: Iterable[BoardTask],
    changed_task_id: int,
    target_status: TaskStatus
) -> List[PositionUpdate]:
    """Move one task to the end of target_status and renumber every column.

    Returns an empty batch when the task is unknown or already sits in
    target_status.
    """
    tasks = list(tasks)
    target_status = parse_status(target_status)
    moved = next((t for t in tasks if t.id == changed_task_id), None)
    if moved is None or target_status is None or moved.known_status == target_status:
        return []

    columns = group_by_status(t for t in tasks if t.id != changed_task_id)
    columns[target_status].append(moved)

    batch = []
    for status in STATUS_ORDER:
        for position, task in enumerate(columns[status]):
            batch.append(PositionUpdate(task.id, status, position))
    return batch


class ReorderProtocol:
    def __init__(self, store: TaskStore, api: TaskApi, notifier: Notifier, refresh: Callable[[], Any]):
        self.store = store
        self.api = api
        self.notifier = notifier
        self.refresh = refresh

    def submit_reorder(self, batch: List[PositionUpdate]):
        self.api.reorder_tasks(batch)

    def apply_optimistic(self, batch: List[PositionUpdate]) -> Tuple[BoardTask, ...]:
        snapshot = self.store.snapshot()
        self.store.apply_batch(batch)
        return snapshot

    def reconcile(self, result: ReorderResult, snapshot: Tuple[BoardTask, ...]):
        if result is ReorderResult.FAILED:
            self.store.restore(snapshot)
            self.notifier.error("Failed to move action item")
        # last-fetch-wins
        self.refresh()

    def move(self, task_id: int, target_status: TaskStatus) -> List[PositionUpdate]:
        batch = compute_reindex(self.store.tasks, task_id, target_status)
        if not batch:
            logger.debug(f"Move of task {task_id} to {target_status} is a no-op")
            return []

        snapshot = self.apply_optimistic(batch)
        result = ReorderResult.FAILED
        try:
            self.submit_reorder(batch)
            result = ReorderResult.CONFIRMED
        except PartialBatchError as e:
            logger.warning(f"Reorder partially applied, resyncing: {e}")
        except WriteError as e:
            logger.error(f"Reorder failed: {e}")
        finally:
            # toujours: rollback si échec, puis refetch
            self.reconcile(result, snapshot)
        return batch
