from datetime import timedelta

import pytest
from jose import jwt

from todoserver.core import auth
from todoserver.core.errors import (
    ConflictError,
    Forbidden,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from todoserver.core.security import create_access_token, decode_access_token
from todoserver.models.user import User


def test_register_returns_public_identity_only(db):
    user = auth.register(db, "alice", "pw1", "r1")
    assert set(user) == {"id", "username"}
    assert user["username"] == "alice"

    stored = db.query(User).filter_by(username="alice").one()
    assert stored.password_hash != "pw1"
    assert stored.recovery_phrase_hash != "r1"


@pytest.mark.parametrize("username,password,phrase", [
    ("", "pw1", "r1"),
    ("alice", "", "r1"),
    ("alice", "pw1", ""),
    (None, "pw1", "r1"),
])
def test_register_requires_all_fields(db, username, password, phrase):
    with pytest.raises(ValidationError):
        auth.register(db, username, password, phrase)


def test_register_duplicate_username(db):
    auth.register(db, "alice", "pw1", "r1")
    with pytest.raises(ConflictError):
        auth.register(db, "alice", "other", "r2")


def test_usernames_are_case_sensitive(db):
    auth.register(db, "alice", "pw1", "r1")
    assert auth.register(db, "Alice", "pw1", "r1")["username"] == "Alice"


def test_login_token_carries_identity(db):
    user = auth.register(db, "alice", "pw1", "r1")
    result = auth.login(db, "alice", "pw1")

    assert result["user"] == user
    assert decode_access_token(result["token"]) == user


def test_login_unknown_user(db):
    with pytest.raises(NotFoundError):
        auth.login(db, "nobody", "pw1")


def test_login_wrong_password(db):
    auth.register(db, "alice", "pw1", "r1")
    with pytest.raises(InvalidCredentialsError):
        auth.login(db, "alice", "wrong")


def test_reset_password_swaps_credentials(db):
    auth.register(db, "alice", "pw1", "r1")
    assert auth.reset_password(db, "alice", "r1", "pw2") == {"message": "Password reset successful"}

    with pytest.raises(InvalidCredentialsError):
        auth.login(db, "alice", "pw1")
    assert auth.login(db, "alice", "pw2")["user"]["username"] == "alice"


def test_reset_password_wrong_phrase_keeps_password(db):
    auth.register(db, "alice", "pw1", "r1")
    with pytest.raises(InvalidCredentialsError):
        auth.reset_password(db, "alice", "nope", "pw2")
    assert auth.login(db, "alice", "pw1")["token"]


def test_reset_password_unknown_user(db):
    with pytest.raises(NotFoundError):
        auth.reset_password(db, "nobody", "r1", "pw2")


def test_reset_password_without_recovery_phrase_on_record(db):
    db.add(User(username="legacy", password_hash=auth.get_password_hash("pw1")))
    db.commit()
    with pytest.raises(ValidationError):
        auth.reset_password(db, "legacy", "r1", "pw2")


def test_reset_password_requires_all_fields(db):
    with pytest.raises(ValidationError):
        auth.reset_password(db, "alice", "r1", "")


def test_expired_token_is_forbidden():
    token = create_access_token({"id": 1, "username": "alice"}, expires_delta=timedelta(minutes=-1))
    with pytest.raises(Forbidden):
        decode_access_token(token)


def test_token_signed_with_another_key_is_forbidden():
    token = jwt.encode({"id": 1, "username": "alice"}, "some-other-key", algorithm="HS256")
    with pytest.raises(Forbidden):
        decode_access_token(token)


def test_token_without_identity_is_forbidden():
    token = create_access_token({"username": "alice"})
    with pytest.raises(Forbidden):
        decode_access_token(token)
