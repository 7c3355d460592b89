"""
Service Task API - HTTP client used by the board
"""

import enum
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Protocol

import requests

from taskboard.board.task import BoardTask
from taskboard.core.config import settings
from taskboard.core.errors import FetchError, PartialBatchError, WriteError

logger = logging.getLogger(__name__)


class TaskApi(Protocol):
    def list_tasks(self) -> List[BoardTask]: ...

    def create_task(self, fields: Dict[str, Any]) -> BoardTask: ...

    def update_task(self, task_id: int, fields: Dict[str, Any]) -> BoardTask: ...

    def delete_task(self, task_id: int) -> None: ...

    def reorder_tasks(self, batch) -> None: ...


def serialize_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    payload = {}
    for field, value in fields.items():
        if isinstance(value, enum.Enum):
            value = value.value
        elif isinstance(value, date):
            value = value.isoformat()
        payload[field] = value
    return payload


def _error_detail(response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text
    if isinstance(data, dict) and "detail" in data:
        return str(data["detail"])
    return str(data)


class HttpTaskApi:
    """TaskApi over the REST endpoints of the Task API service.

    Any requests-compatible session can be injected (a FastAPI TestClient
    works too, with base_url="").
    """

    def __init__(self, base_url: Optional[str] = None, session=None, timeout: Optional[int] = None):
        if base_url is None:
            base_url = settings.TASK_API_URL
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout or settings.TASK_API_TIMEOUT

    def _request(self, method: str, path: str, error_cls=WriteError, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise error_cls(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.error(f"{method} {url} returned {response.status_code}: {detail}")
            if error_cls is WriteError:
                raise WriteError(detail, status_code=response.status_code)
            raise error_cls(f"{response.status_code}: {detail}")
        return response

    def _parse_task(self, response) -> BoardTask:
        try:
            data = response.json()
            if not isinstance(data, dict):
                raise TypeError(f"expected an object, got {type(data).__name__}")
            return BoardTask.from_payload(data)
        except (ValueError, KeyError, TypeError) as e:
            raise WriteError(f"Malformed task payload: {e}", status_code=response.status_code) from e

    def list_tasks(self) -> List[BoardTask]:
        response = self._request("GET", "/tasks", error_cls=FetchError)
        try:
            data = response.json()
            if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
                raise TypeError("expected a list of objects")
            return [BoardTask.from_payload(item) for item in data]
        except (ValueError, KeyError, TypeError) as e:
            raise FetchError(f"Malformed task list: {e}") from e

    def create_task(self, fields: Dict[str, Any]) -> BoardTask:
        response = self._request("POST", "/tasks", json=serialize_fields(fields))
        return self._parse_task(response)

    def update_task(self, task_id: int, fields: Dict[str, Any]) -> BoardTask:
        response = self._request("PATCH", f"/tasks/{task_id}", json=serialize_fields(fields))
        return self._parse_task(response)

    def delete_task(self, task_id: int) -> None:
        self._request("DELETE", f"/tasks/{task_id}")

    def reorder_tasks(self, batch) -> None:
        payload = [update.to_payload() for update in batch]
        response = self._request("POST", "/tasks/reorder", json=payload)
        try:
            data = response.json()
        except ValueError as e:
            raise WriteError(f"Malformed reorder response: {e}", status_code=response.status_code) from e
        # le lot a pu être appliqué en partie: seul un refetch complet resynchronise
        if not isinstance(data, dict) or not isinstance(data.get("updated"), int):
            raise WriteError(f"Malformed reorder response: {data!r}", status_code=response.status_code)
        if data["updated"] != len(payload):
            raise PartialBatchError(len(payload), data["updated"])
