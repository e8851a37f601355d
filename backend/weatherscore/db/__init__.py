from .base import Base
from .session import ENGINE, SessionLocal, get_sessionmaker, init_db

__all__ = [
    "Base",
    "ENGINE",
    "SessionLocal",
    "get_sessionmaker",
    "init_db",
]
