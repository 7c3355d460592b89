import sys
from dataclasses import replace
from pathlib import Path
from unittest.mock import MagicMock

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Créer engine SQLite pour tests AVANT d'importer app
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"
test_engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# PATCH: remplacer le engine et SessionLocal du core.database AVANT d'importer app
import taskboard.core.database
taskboard.core.database.engine = test_engine
taskboard.core.database.SessionLocal = TestingSessionLocal

# Maintenant importer app (qui utilisera notre engine SQLite)
from taskboard.core.database import Base, get_db
from taskboard.main import app
from taskboard.board.task import BoardTask
from taskboard.board.view_model import BoardViewModel
from taskboard.core.errors import FetchError, PartialBatchError, WriteError
from taskboard.models.task import TaskStatus, TaskPriority
from taskboard.services.task_api import HttpTaskApi


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)

# Override la dépendance
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def client():
    """Client de test FastAPI"""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture
def http_api(client):
    """TaskApi HTTP branché directement sur l'app de test"""
    return HttpTaskApi(base_url="", session=client)


def make_task(id, status=TaskStatus.TODO, position=0, title=None, **kwargs):
    return BoardTask(
        id=id,
        title=title or f"Task {id}",
        status=status,
        position=position,
        **kwargs
    )


class FakeTaskApi:
    """TaskApi en mémoire avec injection de pannes."""

    def __init__(self, tasks=()):
        self.tasks = {t.id: replace(t) for t in tasks}
        self.calls = []
        self.fail_on = set()
        self.partial_reorder = False
        self._next_id = max(self.tasks, default=0) + 1

    def _record(self, name, error_cls=WriteError):
        self.calls.append(name)
        if name in self.fail_on:
            raise error_cls(f"{name} failed")

    def list_tasks(self):
        self._record("list_tasks", FetchError)
        return [replace(t) for t in self.tasks.values()]

    def create_task(self, fields):
        self._record("create_task")
        task = BoardTask(
            id=self._next_id,
            title=fields["title"],
            status=fields["status"],
            priority=fields.get("priority", TaskPriority.MEDIUM),
            position=fields.get("position", 0),
            description=fields.get("description"),
            due_date=fields.get("due_date"),
        )
        self._next_id += 1
        self.tasks[task.id] = task
        return replace(task)

    def update_task(self, task_id, fields):
        self._record("update_task")
        if task_id not in self.tasks:
            raise WriteError("Task not found", status_code=404)
        self.tasks[task_id] = replace(self.tasks[task_id], **fields)
        return replace(self.tasks[task_id])

    def delete_task(self, task_id):
        self._record("delete_task")
        if task_id not in self.tasks:
            raise WriteError("Task not found", status_code=404)
        del self.tasks[task_id]

    def reorder_tasks(self, batch):
        self._record("reorder_tasks")
        applied = batch[:len(batch) // 2] if self.partial_reorder else batch
        for update in applied:
            self.tasks[update.id] = replace(
                self.tasks[update.id], status=update.status, position=update.position
            )
        if self.partial_reorder:
            raise PartialBatchError(len(batch), len(applied))

    def count(self, name):
        return self.calls.count(name)


@pytest.fixture
def fake_api():
    return FakeTaskApi()


@pytest.fixture
def board(fake_api):
    return BoardViewModel(fake_api)


def fake_response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = str(payload)
    return response


def routed_session(routes):
    """Session requests simulée: (méthode, chemin) -> (code, corps JSON)."""
    session = MagicMock()

    def request(method, url, **kwargs):
        path = url.split("://", 1)[-1]
        path = path[path.index("/"):]
        status_code, payload = routes[(method, path)]
        return fake_response(status_code, payload)

    session.request.side_effect = request
    return session


TASK_PAYLOADS = [
    {"id": 1, "title": "A", "description": None, "status": "TODO",
     "priority": "MEDIUM", "due_date": None, "position": 0},
    {"id": 2, "title": "B", "description": None, "status": "TODO",
     "priority": "LOW", "due_date": None, "position": 1},
]
