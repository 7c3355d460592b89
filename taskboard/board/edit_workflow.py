"""
Create/edit form lifecycle for action items.

    CLOSED -> OPEN(create | edit) -> SUBMITTING -> CLOSED

Validation errors keep the form open with per-field messages and never reach
the API. API errors also keep the form open so the user can resubmit.
"""

import enum
import logging
from datetime import date
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ValidationError, field_validator

from taskboard.board.notifications import Notifier
from taskboard.board.store import TaskStore
from taskboard.board.task import BoardTask
from taskboard.core.errors import TaskValidationError, WriteError
from taskboard.models.task import TaskStatus, TaskPriority
from taskboard.services.task_api import TaskApi

logger = logging.getLogger(__name__)


class FormState(str, enum.Enum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"


class FormMode(str, enum.Enum):
    CREATE = "create"
    EDIT = "edit"


class TaskForm(BaseModel):
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        value = value.strip()
        if not value:
            raise ValueError("Please enter a title")
        return value

    @field_validator("due_date", mode="before")
    @classmethod
    def empty_date_is_none(cls, value):
        if value == "":
            return None
        return value


def validate_form(values: Dict[str, Any]) -> TaskForm:
    try:
        return TaskForm(**values)
    except ValidationError as e:
        field_errors = {}
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "__all__"
            field_errors.setdefault(field, error["msg"])
        raise TaskValidationError(field_errors) from e


class EditWorkflow:
    def __init__(
        self,
        api: TaskApi,
        store: TaskStore,
        notifier: Notifier,
        on_saved: Optional[Callable[[], Any]] = None
    ):
        self.api = api
        self.store = store
        self.notifier = notifier
        self.on_saved = on_saved
        self._reset()

    def _reset(self):
        self.state = FormState.CLOSED
        self.mode: Optional[FormMode] = None
        self.editing_task_id: Optional[int] = None
        self.values: Dict[str, Any] = {}
        self.field_errors: Dict[str, str] = {}
        self.last_error: Optional[str] = None

    def _refresh(self):
        if self.on_saved is not None:
            self.on_saved()

    @property
    def is_open(self) -> bool:
        return self.state is not FormState.CLOSED

    def open_create(self):
        self._reset()
        self.state = FormState.OPEN
        self.mode = FormMode.CREATE
        self.values = {"status": TaskStatus.TODO, "priority": TaskPriority.MEDIUM}

    def open_edit(self, task_id: int) -> bool:
        task = self.store.get(task_id)
        if task is None:
            logger.warning(f"Cannot edit unknown task {task_id}")
            return False
        self._reset()
        self.state = FormState.OPEN
        self.mode = FormMode.EDIT
        self.editing_task_id = task_id
        self.values = {
            "title": task.title,
            "description": task.description,
            "status": task.status,
            "priority": task.priority,
            "due_date": task.due_date,
        }
        return True

    def set_values(self, **values):
        self.values.update(values)

    def cancel(self):
        self._reset()

    def submit(self) -> Optional[BoardTask]:
        """Validate and save the form. Returns the saved task, or None if it stays open."""
        if self.state is not FormState.OPEN:
            raise RuntimeError("Form is not open")

        try:
            form = validate_form(self.values)
        except TaskValidationError as e:
            self.field_errors = e.field_errors
            return None

        self.field_errors = {}
        self.last_error = None
        self.state = FormState.SUBMITTING
        payload = form.model_dump()

        saved = None
        try:
            if self.mode is FormMode.EDIT:
                saved = self.api.update_task(self.editing_task_id, payload)
                message = "Action item updated"
            else:
                # ajout en fin de colonne
                payload["position"] = self.store.column_length(form.status)
                saved = self.api.create_task(payload)
                message = "Action item added"
        except WriteError as e:
            logger.error(f"Saving action item failed: {e}")
            self.state = FormState.OPEN
            self.last_error = str(e)
            self.notifier.error("Failed to save action item")
            return None
        finally:
            # jamais bloqué en SUBMITTING
            if saved is None:
                self.state = FormState.OPEN

        self.notifier.success(message)
        self._reset()
        self._refresh()
        return saved

    def update_status(self, task_id: int, status: TaskStatus) -> bool:
        """Single-field status change, positions are not renumbered."""
        try:
            self.api.update_task(task_id, {"status": status})
        except WriteError as e:
            logger.error(f"Status update of task {task_id} failed: {e}")
            self.notifier.error("Failed to update action item")
            self._refresh()
            return False
        self._refresh()
        return True
