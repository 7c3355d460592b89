"""Task service"""

import enum
import logging
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from taskboard.models.task import Task, TaskStatus, STATUS_RANK
from taskboard.schemas.task import TaskReorderItem

logger = logging.getLogger(__name__)


def to_column_values(data: Dict[str, Any]) -> Dict[str, Any]:
    # les colonnes status/priority stockent la valeur brute de l'enum
    return {
        field: value.value if isinstance(value, enum.Enum) else value
        for field, value in data.items()
    }


def list_ordered_tasks(
    db: Session,
    status: Optional[TaskStatus] = None,
    priority: Optional[str] = None
) -> List[Task]:
    query = db.query(Task)
    if status is not None:
        query = query.filter(Task.status == status.value)
    if priority is not None:
        query = query.filter(Task.priority == priority)

    tasks = query.all()
    tasks.sort(key=lambda t: (STATUS_RANK.get(_status_of(t), len(STATUS_RANK)), t.position, t.id))
    return tasks


def _status_of(task: Task) -> Optional[TaskStatus]:
    try:
        return TaskStatus(task.status)
    except ValueError:
        return None


def next_position(db: Session, status: TaskStatus) -> int:
    """Position that appends a task at the end of the given column."""
    return db.query(func.count(Task.id)).filter(Task.status == status.value).scalar() or 0


def apply_reorder(db: Session, items: List[TaskReorderItem]) -> int:
    """Apply a full reorder batch in one transaction.

    Raises ValueError for duplicated ids and LookupError for unknown ids; in
    both cases nothing is written.
    """
    ids = [item.id for item in items]
    if len(set(ids)) != len(ids):
        raise ValueError("Duplicate task ids in reorder batch")

    tasks = {task.id: task for task in db.query(Task).filter(Task.id.in_(ids)).all()} if ids else {}
    missing = [task_id for task_id in ids if task_id not in tasks]
    if missing:
        raise LookupError(f"Unknown task ids: {missing}")

    try:
        for item in items:
            task = tasks[item.id]
            task.status = item.status.value
            task.position = item.position
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Reordered {len(items)} tasks")
    return len(items)
