# todoserver/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from todoserver.config import DATABASE_URL
from todoserver.models import Base


def _connect_args(url: str) -> dict:
    # SQLite connections are shared with FastAPI's threadpool workers
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    DATABASE_URL,
    connect_args=_connect_args(DATABASE_URL)
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
