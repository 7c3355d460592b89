"""Kanban and checklist projections of the task store, plus drag tracking."""

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional

from taskboard.board.edit_workflow import EditWorkflow
from taskboard.board.notifications import Notifier
from taskboard.board.reorder import PositionUpdate, ReorderProtocol
from taskboard.board.store import TaskStore
from taskboard.board.task import BoardTask
from taskboard.core.errors import FetchError, WriteError
from taskboard.models.task import TaskStatus, TaskPriority, STATUS_ORDER
from taskboard.services.task_api import TaskApi

logger = logging.getLogger(__name__)


STATUS_LABELS = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}

STATUS_COLORS = {
    TaskStatus.TODO: "default",
    TaskStatus.IN_PROGRESS: "processing",
    TaskStatus.DONE: "success",
}

PRIORITY_COLORS = {
    TaskPriority.LOW: "green",
    TaskPriority.MEDIUM: "gold",
    TaskPriority.HIGH: "red",
}


class ViewMode(str, enum.Enum):
    KANBAN = "kanban"
    CHECKLIST = "checklist"


@dataclass
class BoardColumn:
    status: TaskStatus
    label: str
    color: str
    tasks: List[BoardTask]

    @property
    def count(self) -> int:
        return len(self.tasks)


@dataclass
class ChecklistItem:
    task: BoardTask
    checked: bool
    status_label: str
    priority_color: Optional[str]


class BoardViewModel:
    """Owns the task store of the board page and every gesture on it."""

    def __init__(self, api: TaskApi, notifier: Optional[Notifier] = None, store: Optional[TaskStore] = None):
        self.api = api
        self.notifier = notifier or Notifier()
        self.store = store or TaskStore()
        self.dragging_task_id: Optional[int] = None
        self.view_mode = ViewMode.KANBAN
        self.loading = False
        self.fetch_failed = False
        self.reorder = ReorderProtocol(self.store, api, self.notifier, self.refresh)
        self.editor = EditWorkflow(api, self.store, self.notifier, on_saved=self.refresh)

    def refresh(self) -> bool:
        """Replace local state with the API's task list."""
        self.loading = True
        try:
            tasks = self.api.list_tasks()
        except FetchError as e:
            logger.error(f"Loading tasks failed: {e}")
            self.fetch_failed = True
            self.notifier.error("Failed to load action items")
            return False
        finally:
            self.loading = False
        self.store.load(tasks)
        self.fetch_failed = False
        return True

    def set_view_mode(self, mode: ViewMode):
        self.view_mode = ViewMode(mode)

    # Drag and drop

    def start_drag(self, task_id: int):
        self.dragging_task_id = task_id

    def end_drag(self):
        self.dragging_task_id = None

    def on_drop(self, target_status: TaskStatus) -> List[PositionUpdate]:
        if self.dragging_task_id is None:
            return []
        task_id = self.dragging_task_id
        self.end_drag()
        return self.reorder.move(task_id, target_status)

    # Checklist and row actions

    def toggle_checklist(self, task_id: int, checked: bool) -> bool:
        target = TaskStatus.DONE if checked else TaskStatus.TODO
        return self.editor.update_status(task_id, target)

    def delete_task(self, task_id: int) -> bool:
        try:
            self.api.delete_task(task_id)
        except WriteError as e:
            logger.error(f"Deleting task {task_id} failed: {e}")
            self.notifier.error("Failed to delete action item")
            self.refresh()
            return False
        self.notifier.success("Action item deleted")
        self.refresh()
        return True

    # Projections

    def kanban_columns(self) -> List[BoardColumn]:
        columns = self.store.group_by_status()
        return [
            BoardColumn(status, STATUS_LABELS[status], STATUS_COLORS[status], columns[status])
            for status in STATUS_ORDER
        ]

    def checklist_items(self) -> List[ChecklistItem]:
        return [
            ChecklistItem(
                task=task,
                checked=task.known_status is TaskStatus.DONE,
                status_label=STATUS_LABELS[task.known_status],
                priority_color=PRIORITY_COLORS.get(task.priority),
            )
            for task in self.store.flatten_ordered()
        ]
