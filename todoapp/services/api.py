# todoapp/services/api.py

import os
import logging
import requests
from dotenv import load_dotenv


load_dotenv()

logger = logging.getLogger(__name__)

# Base URL of the FastAPI backend
FASTAPI_URL = os.getenv("TODO_API_URL", "http://localhost:8000")

CONNECTION_ERROR = "Failed to connect to server"


def _auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def _handle(res):
    """
    Returns the decoded JSON body on success, otherwise
    {"error": <server message>, "status": <http status>}.
    """
    try:
        data = res.json()
    except ValueError:
        data = None

    if res.ok:
        return data

    message = data.get("error") if isinstance(data, dict) else None
    return {"error": message or f"Request failed ({res.status_code})", "status": res.status_code}


def _request(method, path, **kwargs):
    try:
        res = requests.request(method, f"{FASTAPI_URL}{path}", **kwargs)
    except requests.RequestException as e:
        logger.warning("%s %s failed: %s", method, path, e)
        return {"error": CONNECTION_ERROR, "status": None}
    return _handle(res)


def is_error(result):
    return isinstance(result, dict) and "error" in result


def is_auth_failure(result):
    return is_error(result) and result.get("status") in (401, 403)


# -------------------------------
# Authentication-related functions
# -------------------------------

def register_user(username, password, recovery_phrase):
    """
    Registers a new account. Returns {"id", "username"}.
    """
    return _request(
        "POST",
        "/api/auth/register",
        json={"username": username, "password": password, "recoveryPhrase": recovery_phrase},
    )


def login_user(username, password):
    """
    Logs in a user and returns {"token", "user": {"id", "username"}}.
    """
    return _request("POST", "/api/auth/login", json={"username": username, "password": password})


def reset_password(username, recovery_phrase, new_password):
    return _request(
        "POST",
        "/api/auth/reset-password",
        json={"username": username, "recoveryPhrase": recovery_phrase, "newPassword": new_password},
    )


# -------------------------
# Todo Management
# -------------------------

def fetch_todos(token):
    """
    Lists the signed-in user's todos, priority first then newest first.
    """
    return _request("GET", "/api/todos", headers=_auth_headers(token))


def create_todo(token, text, is_priority=False):
    return _request(
        "POST",
        "/api/todos",
        json={"text": text, "isPriority": is_priority},
        headers=_auth_headers(token),
    )


def update_todo(token, todo_id, completed=None, is_priority=None):
    """
    Sends only the fields that are given.
    """
    payload = {}
    if completed is not None:
        payload["completed"] = completed
    if is_priority is not None:
        payload["isPriority"] = is_priority
    return _request("PUT", f"/api/todos/{todo_id}", json=payload, headers=_auth_headers(token))


def delete_todo(token, todo_id):
    return _request("DELETE", f"/api/todos/{todo_id}", headers=_auth_headers(token))
