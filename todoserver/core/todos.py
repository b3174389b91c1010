# todoserver/core/todos.py

import logging
from dataclasses import dataclass
from sqlalchemy import update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from todoserver.core.errors import NotFoundError, StoreError, ValidationError
from todoserver.models.todo import Todo


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TodoPatch:
    """
    Partial update of a todo. A field left as None is not touched.
    """
    completed: bool | None = None
    is_priority: bool | None = None

    def values(self) -> dict:
        present = {}
        if self.completed is not None:
            present["completed"] = self.completed
        if self.is_priority is not None:
            present["is_priority"] = self.is_priority
        return present


def list_todos(db: Session, user_id: int) -> list[Todo]:
    """
    Returns every todo owned by the user, priority first, newest first.
    """
    try:
        return (
            db.query(Todo)
            .filter(Todo.user_id == user_id)
            .order_by(Todo.is_priority.desc(), Todo.created_at.desc(), Todo.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.error("Failed to list todos for user %s: %s", user_id, e)
        raise StoreError(str(e))


def create_todo(db: Session, user_id: int, text: str | None, is_priority: bool = False) -> Todo:
    if not text or not text.strip():
        raise ValidationError("Text is required")

    todo = Todo(user_id=user_id, text=text, completed=False, is_priority=bool(is_priority))
    db.add(todo)
    try:
        db.commit()
        db.refresh(todo)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to create todo for user %s: %s", user_id, e)
        raise StoreError(str(e))

    logger.info("User %s created todo %s (priority=%s)", user_id, todo.id, todo.is_priority)
    return todo


def update_todo(db: Session, user_id: int, todo_id: int, patch: TodoPatch) -> int:
    """
    Applies the fields present in the patch to the user's todo.
    A todo owned by someone else is treated as missing.
    """
    values = patch.values()
    if not values:
        raise ValidationError("No fields to update")

    stmt = (
        update(Todo)
        .where(Todo.id == todo_id, Todo.user_id == user_id)
        .values(values)
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to update todo %s for user %s: %s", todo_id, user_id, e)
        raise StoreError(str(e))

    if result.rowcount == 0:
        raise NotFoundError("Todo not found", status_code=404)

    logger.info("User %s updated todo %s", user_id, todo_id)
    return result.rowcount


def delete_todo(db: Session, user_id: int, todo_id: int) -> int:
    stmt = (
        delete(Todo)
        .where(Todo.id == todo_id, Todo.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to delete todo %s for user %s: %s", todo_id, user_id, e)
        raise StoreError(str(e))

    if result.rowcount:
        logger.info("User %s deleted todo %s", user_id, todo_id)
    return result.rowcount
