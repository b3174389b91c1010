# todoserver/core/auth.py

import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from todoserver.core.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from todoserver.core.security import (
    burn_verify,
    create_access_token,
    get_password_hash,
    verify_password,
)
from todoserver.models.user import User


logger = logging.getLogger(__name__)


def public_identity(user: User) -> dict:
    return {"id": user.id, "username": user.username}


def find_user(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


# -------------------------------
# Registration
# -------------------------------

def register(db: Session, username: str | None, password: str | None, recovery_phrase: str | None) -> dict:
    """
    Creates a user with bcrypt hashes of the password and recovery phrase.
    Returns the public identity; hashes never leave this module.
    """
    if not username or not password or not recovery_phrase:
        raise ValidationError("Username, password, and recovery phrase required")

    if find_user(db, username):
        raise ConflictError("Username already exists")

    new_user = User(
        username=username,
        password_hash=get_password_hash(password),
        recovery_phrase_hash=get_password_hash(recovery_phrase),
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Username already exists")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to register %s: %s", username, e)
        raise StoreError(str(e))

    db.refresh(new_user)
    logger.info("Registered user %s (id=%s)", new_user.username, new_user.id)
    return public_identity(new_user)


# -------------------------------
# Login
# -------------------------------

def login(db: Session, username: str | None, password: str | None) -> dict:
    """
    Checks the credentials and issues a signed token carrying {id, username}.
    Unknown usernames and wrong passwords are reported differently.
    """
    password = password or ""
    user = find_user(db, username) if username else None
    if user is None:
        burn_verify(password)
        logger.info("Login failed for unknown user %s", username)
        raise NotFoundError("User not found")

    if not verify_password(password, user.password_hash):
        logger.info("Login failed for %s: invalid password", username)
        raise InvalidCredentialsError("Invalid password")

    identity = public_identity(user)
    token = create_access_token(data=identity)
    logger.info("User %s logged in", username)
    return {"token": token, "user": identity}


# -------------------------------
# Password Reset
# -------------------------------

def reset_password(db: Session, username: str | None, recovery_phrase: str | None, new_password: str | None) -> dict:
    if not username or not recovery_phrase or not new_password:
        raise ValidationError("All fields are required")

    user = find_user(db, username)
    if user is None:
        raise NotFoundError("User not found")

    if not user.recovery_phrase_hash:
        raise ValidationError("No recovery phrase set for this user")

    if not verify_password(recovery_phrase, user.recovery_phrase_hash):
        logger.info("Password reset refused for %s: invalid recovery phrase", username)
        raise InvalidCredentialsError("Invalid recovery phrase")

    user.password_hash = get_password_hash(new_password)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to reset password for %s: %s", username, e)
        raise StoreError(str(e))

    logger.info("Password reset for %s", username)
    return {"message": "Password reset successful"}
