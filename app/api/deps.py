from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from app.services.student.memory import InMemoryStudentStore, memory_store


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency, one session per request.
    Sessions come from the app's own factory (built from its DATABASE_URL).
    The session is closed after the response even if the handler raised.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_memory_store() -> InMemoryStudentStore:
    """Process-wide in-memory store"""
    return memory_store
