from conftest import make_task
from taskboard.board.reorder import PositionUpdate
from taskboard.board.store import TaskStore, flatten_ordered, group_by_status
from taskboard.board.task import BoardTask
from taskboard.models.task import TaskStatus, TaskPriority

TODO, IN_PROGRESS, DONE = TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.DONE


def ids(tasks):
    return [t.id for t in tasks]

# ========== group_by_status ==========
def test_group_by_status_all_columns_present():
    """Chaque colonne existe, même vide"""
    columns = group_by_status([])
    assert list(columns) == [TODO, IN_PROGRESS, DONE]
    assert all(column == [] for column in columns.values())

def test_group_by_status_sorts_by_position_then_id():
    tasks = [
        make_task(5, TODO, 1),
        make_task(3, TODO, 1),
        make_task(9, TODO, 0),
        make_task(2, DONE, 0),
    ]
    columns = group_by_status(tasks)
    assert ids(columns[TODO]) == [9, 3, 5]
    assert ids(columns[DONE]) == [2]
    assert columns[IN_PROGRESS] == []

def test_group_by_status_skips_unknown_status():
    """Un statut inconnu n'apparaît dans aucune colonne"""
    tasks = [make_task(1, TODO, 0), make_task(2, "ARCHIVED", 0)]
    columns = group_by_status(tasks)
    assert sum(len(c) for c in columns.values()) == 1

# ========== flatten_ordered ==========
def test_flatten_ordered_example():
    """Exemple: DONE(1), TODO(2, pos 0), TODO(3, pos 1) -> [2, 3, 1]"""
    tasks = [make_task(1, DONE, 0), make_task(2, TODO, 0), make_task(3, TODO, 1)]
    assert ids(flatten_ordered(tasks)) == [2, 3, 1]

def test_flatten_ordered_status_rank_wins_over_position():
    tasks = [
        make_task(1, IN_PROGRESS, 0),
        make_task(2, TODO, 7),
        make_task(3, DONE, 0),
        make_task(4, IN_PROGRESS, 0),
    ]
    assert ids(flatten_ordered(tasks)) == [2, 1, 4, 3]

# ========== TaskStore ==========
def test_store_load_copies_tasks():
    task = make_task(1)
    store = TaskStore()
    store.load([task])
    task.title = "modifié dehors"
    assert store.get(1).title == "Task 1"

def test_store_column_length():
    store = TaskStore([make_task(1), make_task(2, position=1), make_task(3, DONE)])
    assert store.column_length(TODO) == 2
    assert store.column_length(IN_PROGRESS) == 0
    assert len(store) == 3

def test_store_snapshot_restore():
    """restore() revient exactement à l'état capturé"""
    store = TaskStore([make_task(1), make_task(2, position=1)])
    snapshot = store.snapshot()
    store.apply_batch([PositionUpdate(1, DONE, 0), PositionUpdate(2, TODO, 0)])
    assert store.get(1).status == DONE

    store.restore(snapshot)
    assert store.get(1).status == TODO
    assert store.get(2).position == 1

def test_store_apply_batch_ignores_unknown_ids():
    store = TaskStore([make_task(1)])
    store.apply_batch([PositionUpdate(42, DONE, 0)])
    assert ids(store.tasks) == [1]

def test_store_get_missing():
    assert TaskStore().get(1) is None

# ========== BoardTask ==========
def test_board_task_from_payload():
    task = BoardTask.from_payload({
        "id": 4, "title": "Appeler", "description": None, "status": "IN_PROGRESS",
        "priority": "HIGH", "due_date": "2026-11-03", "position": 2,
    })
    assert task.status is IN_PROGRESS
    assert task.priority is TaskPriority.HIGH
    assert task.due_date.isoformat() == "2026-11-03"
    assert task.position == 2

def test_board_task_from_payload_unknown_status():
    task = BoardTask.from_payload({"id": 4, "title": "X", "status": "ARCHIVED", "priority": "LOW"})
    assert task.status == "ARCHIVED"
    assert task.known_status is None
