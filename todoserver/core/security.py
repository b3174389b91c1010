# todoserver/core/security.py

from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from todoserver.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from todoserver.core.errors import Forbidden


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Compared against when the username is unknown so login takes the same time
_DUMMY_HASH = pwd_context.hash("not-a-real-password")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def burn_verify(plain_password: str) -> None:
    pwd_context.verify(plain_password, _DUMMY_HASH)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Verifies the signature and expiry of a bearer token and returns the
    embedded identity as {"id": int, "username": str}.
    Raises Forbidden for anything that does not check out.
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise Forbidden("Invalid or expired token")

    user_id = payload.get("id")
    username = payload.get("username")
    if not isinstance(user_id, int) or not username:
        raise Forbidden("Invalid or expired token")
    return {"id": user_id, "username": username}
