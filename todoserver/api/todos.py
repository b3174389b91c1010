# todoserver/api/todos.py

from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from todoserver.api.auth import get_current_user
from todoserver.core import todos as todo_service
from todoserver.core.todos import TodoPatch
from todoserver.database import get_db


router = APIRouter(prefix="/api/todos", tags=["todos"])


class TodoCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    is_priority: bool = Field(default=False, alias="isPriority")


class TodoUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    completed: bool | None = None
    is_priority: bool | None = Field(default=None, alias="isPriority")


class TodoOut(BaseModel):
    """
    Wire shape of a todo record: {id, userId, text, completed, isPriority, createdAt}.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int = Field(serialization_alias="userId")
    text: str
    completed: bool
    is_priority: bool = Field(serialization_alias="isPriority")
    created_at: datetime = Field(serialization_alias="createdAt")

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        # SQLite drops the offset on read; stored values are always UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()


# -------------------------------
# Endpoints
# -------------------------------
# The acting user always comes from the verified token, never from the request.

@router.get("", response_model=list[TodoOut])
def list_todos(current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    todos = todo_service.list_todos(db, current_user["id"])
    return [TodoOut.model_validate(t) for t in todos]


@router.post("", response_model=TodoOut)
def create_todo(req: TodoCreateRequest, current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    todo = todo_service.create_todo(db, current_user["id"], req.text, req.is_priority)
    return TodoOut.model_validate(todo)


@router.put("/{todo_id}")
def update_todo(
    todo_id: int,
    req: TodoUpdateRequest,
    current_user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    patch = TodoPatch(completed=req.completed, is_priority=req.is_priority)
    changes = todo_service.update_todo(db, current_user["id"], todo_id, patch)
    return {"message": "Todo updated", "changes": changes}


@router.delete("/{todo_id}")
def delete_todo(todo_id: int, current_user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    changes = todo_service.delete_todo(db, current_user["id"], todo_id)
    return {"changes": changes}
