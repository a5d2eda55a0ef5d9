from fastapi import APIRouter
from app.api.v1.endpoints import memory_students, students


def build_api_router(storage_backend: str = "database") -> APIRouter:
    """Mount the student endpoints for the selected storage backend."""
    api_router = APIRouter()

    if storage_backend == "memory":
        students_router = memory_students.router
    else:
        students_router = students.router

    api_router.include_router(
        students_router,
        prefix="/students",
        tags=["students"]
    )
    return api_router
