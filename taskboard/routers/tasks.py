import logging
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from taskboard.core.database import get_db
from taskboard.models.task import Task, TaskStatus, TaskPriority
from taskboard.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskReorderItem,
    TaskReorderResult
)
from taskboard.services.task_service import (
    apply_reorder,
    list_ordered_tasks,
    next_position,
    to_column_values
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_task_or_404(task_id: int, db: Session) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(task_data: TaskCreate, db: Session = Depends(get_db)):
    position = task_data.position
    if position is None:
        position = next_position(db, task_data.status)

    new_task = Task(
        title=task_data.title,
        description=task_data.description,
        status=task_data.status.value,
        priority=task_data.priority.value,
        due_date=task_data.due_date,
        position=position
    )
    db.add(new_task)
    db.commit()
    db.refresh(new_task)
    logger.info(f"Created task {new_task.id} in {new_task.status} at position {position}")
    return new_task


@router.get("", response_model=List[TaskResponse])
def list_tasks(
    db: Session = Depends(get_db),
    status_filter: Optional[str] = Query(None),
    priority_filter: Optional[str] = Query(None)
):
    # Les filtres inconnus sont ignorés
    status_value = None
    if status_filter in [s.value for s in TaskStatus]:
        status_value = TaskStatus(status_filter)

    priority_value = None
    if priority_filter in [p.value for p in TaskPriority]:
        priority_value = priority_filter

    return list_ordered_tasks(db, status=status_value, priority=priority_value)


@router.post("/reorder", response_model=TaskReorderResult)
def reorder_tasks(items: List[TaskReorderItem], db: Session = Depends(get_db)):
    """Apply a whole position batch: either every update lands or none does."""
    try:
        updated = apply_reorder(db, items)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return TaskReorderResult(updated=updated)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, db: Session = Depends(get_db)):
    return get_task_or_404(task_id, db)


@router.patch("/{task_id}", response_model=TaskResponse)
@router.put("/{task_id}", response_model=TaskResponse)
def update_task(task_id: int, task_data: TaskUpdate, db: Session = Depends(get_db)):
    task = get_task_or_404(task_id, db)

    update_data = task_data.model_dump(exclude_unset=True)
    for field in ("title", "status", "priority", "position"):
        # colonnes non-nullables
        if field in update_data and update_data[field] is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"{field} cannot be null"
            )

    for field, value in to_column_values(update_data).items():
        setattr(task, field, value)

    db.commit()
    db.refresh(task)
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, db: Session = Depends(get_db)):
    task = get_task_or_404(task_id, db)
    db.delete(task)
    db.commit()
    logger.info(f"Deleted task {task_id}")
