# todoapp/ui/todos.py

import streamlit as st
from todoapp.core.state import (
    FILTERS,
    Todo,
    add_todo,
    is_carried_over,
    local_created_at,
    load_todos,
    remove_todo,
    resolve_mutation,
    set_completed,
    set_error,
    set_filter,
    toggle_priority_input,
    visible_todos,
)
from todoapp.services.api import (
    create_todo,
    delete_todo,
    fetch_todos,
    is_auth_failure,
    is_error,
    update_todo,
)
from todoapp.ui.login import get_state, logout, set_state


def refresh_todos():
    """
    Re-fetches the list from the server. A rejected token signs the user out.
    """
    state = get_state()
    result = fetch_todos(state.token)
    if is_auth_failure(result):
        logout()
        st.rerun()
    elif is_error(result):
        set_state(set_error(state, result["error"]))
    else:
        set_state(load_todos(state, [Todo.from_json(t) for t in result]))
        st.session_state["todos_loaded_for"] = state.token


def todos_page():
    state = get_state()
    if st.session_state.get("todos_loaded_for") != state.token:
        refresh_todos()
        state = get_state()

    st.title("✅ My Tasks")

    handle_add_todo()

    labels = {"all": "All", "active": "Active", "completed": "Completed"}
    selected = st.radio(
        "Filter",
        options=FILTERS,
        index=FILTERS.index(state.current_filter),
        format_func=lambda f: labels[f],
        horizontal=True,
    )
    if selected != state.current_filter:
        set_state(set_filter(state, selected))
        st.rerun()

    state = get_state()
    if state.error:
        st.error(state.error)

    shown = visible_todos(state)
    if not shown:
        st.info("No tasks here yet.")
        return

    for todo in shown:
        render_todo(todo, state.user["username"])


def handle_add_todo():
    state = get_state()
    cols = st.columns([6, 1, 1])
    with cols[0]:
        text = st.text_input("New task", key="todo_input", label_visibility="collapsed", placeholder="What needs to be done?")
    with cols[1]:
        star = "★" if state.is_priority_input else "☆"
        if st.button(star, key="priority_toggle", help="Mark as priority"):
            set_state(toggle_priority_input(state))
            st.rerun()
    with cols[2]:
        add_clicked = st.button("Add", key="add_btn")

    if add_clicked:
        text = text.strip()
        if not text:
            return
        result = create_todo(state.token, text, state.is_priority_input)
        if is_auth_failure(result):
            logout()
            st.rerun()
        elif is_error(result):
            set_state(set_error(state, result["error"]))
        else:
            set_state(add_todo(state, Todo.from_json(result)))
            st.session_state.pop("todo_input", None)
            st.rerun()


def render_todo(todo: Todo, username: str):
    col1, col2, col3 = st.columns([0.6, 6, 0.6])
    with col1:
        checked = st.checkbox("done", value=todo.completed, key=f"check-{todo.id}", label_visibility="collapsed")
        if checked != todo.completed:
            handle_toggle(todo)
    with col2:
        title = f"~~{todo.text}~~" if todo.completed else todo.text
        badges = []
        if todo.is_priority:
            badges.append("★")
        if is_carried_over(todo):
            badges.append(":orange[Carried Over]")
        st.markdown(f"{title} {' '.join(badges)}")
        st.caption(f"Created by {username} at {local_created_at(todo):%Y-%m-%d %H:%M}")
    with col3:
        if st.button("🗑️", key=f"delete-{todo.id}"):
            handle_delete(todo)


def _commit(new_state):
    if not new_state.is_authenticated:
        logout()
    set_state(new_state)


def handle_toggle(todo: Todo):
    state = get_state()
    result = update_todo(state.token, todo.id, completed=not todo.completed)
    _commit(resolve_mutation(state, result, lambda s: set_completed(s, todo.id, not todo.completed)))
    if is_error(result):
        st.session_state.pop(f"check-{todo.id}", None)
    st.rerun()


def handle_delete(todo: Todo):
    state = get_state()
    result = delete_todo(state.token, todo.id)
    _commit(resolve_mutation(state, result, lambda s: remove_todo(s, todo.id)))
    st.rerun()
