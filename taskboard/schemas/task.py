"""Pydantic schemas for task request/response validation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime
from typing import Optional

from taskboard.models.task import TaskStatus, TaskPriority


def _require_title(value):
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Title is required")
    return value


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None
    # absent -> ajout en fin de colonne
    position: Optional[int] = Field(default=None, ge=0)

    check_title = field_validator("title")(_require_title)


class TaskUpdate(BaseModel):
    """Schema for updating an existing task. Only the fields sent are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    position: Optional[int] = Field(default=None, ge=0)

    check_title = field_validator("title")(_require_title)


class TaskReorderItem(BaseModel):
    """One entry of a reorder batch."""

    id: int
    status: TaskStatus
    position: int = Field(ge=0)


class TaskReorderResult(BaseModel):
    status: str = "ok"
    updated: int


class TaskResponse(BaseModel):
    """Schema for task responses from API."""

    id: int
    title: str
    description: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date]
    position: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
