# todoserver/models/user.py

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from . import Base


def _utcnow():
    return datetime.now(timezone.utc)


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Database model for application users.
    Stores the username with bcrypt hashes of the password and, for accounts
    that set one, the recovery phrase used to reset a forgotten password.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    recovery_phrase_hash = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    todos = relationship("Todo", back_populates="owner", cascade="all, delete-orphan")
