"""Client-side view of a task, as returned by the Task API."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional, Union

from taskboard.models.task import TaskStatus, TaskPriority, parse_status


@dataclass
class BoardTask:
    id: int
    title: str
    # un statut inconnu du backend reste une chaîne brute
    status: Union[TaskStatus, str]
    priority: Union[TaskPriority, str] = TaskPriority.MEDIUM
    position: int = 0
    description: Optional[str] = None
    due_date: Optional[date] = None

    @property
    def known_status(self) -> Optional[TaskStatus]:
        return parse_status(self.status)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "BoardTask":
        status = data.get("status")
        priority = data.get("priority")
        due_date = data.get("due_date")
        if isinstance(due_date, str):
            due_date = date.fromisoformat(due_date)
        try:
            priority = TaskPriority(priority)
        except ValueError:
            pass
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            status=parse_status(status) or status,
            priority=priority,
            position=int(data.get("position") or 0),
            description=data.get("description"),
            due_date=due_date,
        )
