"""Task model"""

import enum
from sqlalchemy import Column, Integer, String, Date, DateTime
from datetime import datetime, timezone
from taskboard.core.database import Base


class TaskStatus(str, enum.Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Ordre d'affichage des colonnes
STATUS_ORDER = (TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.DONE)
STATUS_RANK = {status: rank for rank, status in enumerate(STATUS_ORDER)}


def utcnow():
    return datetime.now(timezone.utc)


def parse_status(value):
    """Return the TaskStatus for value, or None when it is not a known status."""
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(value)
    except ValueError:
        return None


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    status = Column(String, default=TaskStatus.TODO.value, nullable=False, index=True)
    priority = Column(String, default=TaskPriority.MEDIUM.value, nullable=False)
    due_date = Column(Date, nullable=True)
    position = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
