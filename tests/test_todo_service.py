import pytest
from sqlalchemy.exc import SQLAlchemyError

from todoserver.core import auth, todos
from todoserver.core.errors import NotFoundError, StoreError, ValidationError
from todoserver.core.todos import TodoPatch


@pytest.fixture()
def alice(db):
    return auth.register(db, "alice", "pw1", "r1")["id"]


@pytest.fixture()
def bob(db):
    return auth.register(db, "bob", "pw2", "r2")["id"]


def test_create_returns_persisted_record(db, alice):
    todo = todos.create_todo(db, alice, "buy milk")
    assert todo.id is not None
    assert todo.user_id == alice
    assert todo.completed is False
    assert todo.is_priority is False
    assert todo.created_at is not None


@pytest.mark.parametrize("text", ["", "   ", None])
def test_create_requires_text(db, alice, text):
    with pytest.raises(ValidationError):
        todos.create_todo(db, alice, text)


def test_list_orders_priority_then_newest(db, alice):
    todos.create_todo(db, alice, "first")
    todos.create_todo(db, alice, "urgent", is_priority=True)
    todos.create_todo(db, alice, "second")

    assert [t.text for t in todos.list_todos(db, alice)] == ["urgent", "second", "first"]


def test_list_is_scoped_to_owner(db, alice, bob):
    todos.create_todo(db, alice, "mine")
    todos.create_todo(db, bob, "theirs")

    assert [t.text for t in todos.list_todos(db, alice)] == ["mine"]
    assert [t.text for t in todos.list_todos(db, bob)] == ["theirs"]


def test_update_requires_a_field(db, alice):
    todo = todos.create_todo(db, alice, "buy milk")
    with pytest.raises(ValidationError):
        todos.update_todo(db, alice, todo.id, TodoPatch())


def test_update_completed_leaves_priority(db, alice):
    todo = todos.create_todo(db, alice, "buy milk", is_priority=True)
    todos.update_todo(db, alice, todo.id, TodoPatch(completed=True))

    db.expire_all()
    [stored] = todos.list_todos(db, alice)
    assert stored.completed is True
    assert stored.is_priority is True


def test_update_priority_leaves_completed(db, alice):
    todo = todos.create_todo(db, alice, "buy milk")
    todos.update_todo(db, alice, todo.id, TodoPatch(completed=True))
    todos.update_todo(db, alice, todo.id, TodoPatch(is_priority=True))

    db.expire_all()
    [stored] = todos.list_todos(db, alice)
    assert stored.completed is True
    assert stored.is_priority is True


def test_update_foreign_todo_is_not_found(db, alice, bob):
    todo = todos.create_todo(db, alice, "buy milk")
    with pytest.raises(NotFoundError) as exc:
        todos.update_todo(db, bob, todo.id, TodoPatch(completed=True))
    assert exc.value.status_code == 404

    db.expire_all()
    assert todos.list_todos(db, alice)[0].completed is False


def test_delete_is_scoped_and_idempotent(db, alice, bob):
    todo_id = todos.create_todo(db, alice, "buy milk").id

    assert todos.delete_todo(db, bob, todo_id) == 0
    assert todos.delete_todo(db, alice, 9999) == 0
    assert todos.delete_todo(db, alice, todo_id) == 1
    assert todos.delete_todo(db, alice, todo_id) == 0
    assert todos.list_todos(db, alice) == []


def test_store_failure_rolls_back(db, alice, monkeypatch):
    rolled_back = []

    def failing_commit():
        raise SQLAlchemyError("database is locked")

    monkeypatch.setattr(db, "commit", failing_commit)
    monkeypatch.setattr(db, "rollback", lambda: rolled_back.append(True))

    with pytest.raises(StoreError) as exc:
        todos.create_todo(db, alice, "buy milk")

    assert exc.value.status_code == 500
    assert exc.value.message == "database is locked"
    assert rolled_back == [True]
