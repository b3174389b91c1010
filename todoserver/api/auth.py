# todoserver/api/auth.py

from pydantic import BaseModel, ConfigDict, Field
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from todoserver.core import auth as auth_service
from todoserver.core.errors import Unauthorized
from todoserver.core.security import decode_access_token
from todoserver.database import get_db


router = APIRouter(prefix="/api/auth", tags=["auth"])
bearer_scheme = HTTPBearer(auto_error=False)


# -------------------------------
# Request / Response Schemas
# -------------------------------

class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str | None = None
    password: str | None = None
    recovery_phrase: str | None = Field(default=None, alias="recoveryPhrase")


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str | None = None
    recovery_phrase: str | None = Field(default=None, alias="recoveryPhrase")
    new_password: str | None = Field(default=None, alias="newPassword")


class User(BaseModel):
    id: int
    username: str


class LoginResponse(BaseModel):
    token: str
    user: User


# -------------------------------
# Bearer Token Dependency
# -------------------------------

def get_current_user(credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme)) -> dict:
    """
    Resolves the acting user from the Authorization header.
    Missing token -> 401, invalid or expired token -> 403.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Access token required")
    return decode_access_token(credentials.credentials)


# -------------------------------
# Endpoints
# -------------------------------

@router.post("/register", response_model=User)
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    return auth_service.register(db, req.username, req.password, req.recovery_phrase)


@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    return auth_service.login(db, req.username, req.password)


@router.post("/reset-password")
def reset_password(req: ResetPasswordRequest, db: Session = Depends(get_db)):
    return auth_service.reset_password(db, req.username, req.recovery_phrase, req.new_password)


@router.get("/me", response_model=User)
def read_users_me(current_user: dict = Depends(get_current_user)):
    return current_user
