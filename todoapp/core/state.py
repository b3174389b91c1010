# todoapp/core/state.py

"""
Client-side application state.

AppState is immutable; every transition returns a new state so the Streamlit
pages only ever swap one value in st.session_state.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone, tzinfo
from todoapp.services.api import is_auth_failure, is_error


FILTERS = ("all", "active", "completed")


def parse_timestamp(value: str) -> datetime:
    """Server timestamps are UTC; an offset-less value is read as UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Todo:
    id: int
    user_id: int
    text: str
    completed: bool
    is_priority: bool
    created_at: datetime

    @classmethod
    def from_json(cls, data: dict) -> "Todo":
        return cls(
            id=data["id"],
            user_id=data["userId"],
            text=data["text"],
            completed=bool(data.get("completed", False)),
            is_priority=bool(data.get("isPriority", False)),
            created_at=parse_timestamp(data["createdAt"]),
        )


@dataclass(frozen=True)
class AppState:
    token: str | None = None
    user: dict | None = None
    todos: tuple[Todo, ...] = field(default_factory=tuple)
    current_filter: str = "all"
    is_priority_input: bool = False
    error: str = ""
    notice: str = ""

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None


# -------------------------------
# Ordering & Queries
# -------------------------------

def sort_todos(todos) -> tuple[Todo, ...]:
    """Priority first, then newest first; matches the server's list order."""
    return tuple(sorted(todos, key=lambda t: (t.is_priority, t.created_at, t.id), reverse=True))


def visible_todos(state: AppState) -> tuple[Todo, ...]:
    if state.current_filter == "active":
        return tuple(t for t in state.todos if not t.completed)
    if state.current_filter == "completed":
        return tuple(t for t in state.todos if t.completed)
    return state.todos


def local_created_at(todo: Todo, tz: tzinfo | None = None) -> datetime:
    """Creation time in the viewer's timezone (system local when tz is None)."""
    created = todo.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.astimezone(tz)


def is_carried_over(todo: Todo, today: date | None = None, tz: tzinfo | None = None) -> bool:
    created = local_created_at(todo, tz)
    today = today or datetime.now(tz).date()
    return not todo.completed and created.date() < today


# -------------------------------
# Transitions
# -------------------------------

def sign_in(state: AppState, token: str, user: dict) -> AppState:
    return replace(state, token=token, user=user, todos=(), error="")


def sign_out(state: AppState) -> AppState:
    return AppState(current_filter=state.current_filter)


def load_todos(state: AppState, todos) -> AppState:
    return replace(state, todos=tuple(todos), error="")


def set_filter(state: AppState, current_filter: str) -> AppState:
    if current_filter not in FILTERS:
        raise ValueError(f"Unknown filter: {current_filter}")
    return replace(state, current_filter=current_filter)


def toggle_priority_input(state: AppState) -> AppState:
    return replace(state, is_priority_input=not state.is_priority_input)


def add_todo(state: AppState, todo: Todo) -> AppState:
    todos = sort_todos((todo,) + state.todos)
    return replace(state, todos=todos, is_priority_input=False, error="")


def set_completed(state: AppState, todo_id: int, completed: bool) -> AppState:
    todos = tuple(replace(t, completed=completed) if t.id == todo_id else t for t in state.todos)
    return replace(state, todos=todos)


def remove_todo(state: AppState, todo_id: int) -> AppState:
    return replace(state, todos=tuple(t for t in state.todos if t.id != todo_id))


def set_error(state: AppState, message: str) -> AppState:
    return replace(state, error=message)


def set_notice(state: AppState, message: str) -> AppState:
    return replace(state, notice=message, error="")


def resolve_mutation(state: AppState, result, apply) -> AppState:
    """
    Folds a server response into the state. A rejected token signs the user
    out, any other failure is shown as an error, and success runs apply.
    """
    if is_auth_failure(result):
        return set_error(sign_out(state), result["error"])
    if is_error(result):
        return set_error(state, result["error"])
    return apply(state)
