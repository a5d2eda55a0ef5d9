"""
Student endpoints backed by the in-memory store.
Mounted instead of the database router when STORAGE_BACKEND=memory.
The store raises the not-found and duplicate-email errors itself.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from app.api.deps import get_memory_store
from app.core.exceptions import StudentNotFoundException
from app.services.student.memory import InMemoryStudentStore
from app.schemas.student import Student, StudentCreate, StudentDeleted, StudentUpdate

router = APIRouter()


@router.get("", response_model=List[Student])
def get_students(
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    store: InMemoryStudentStore = Depends(get_memory_store)
):
    return store.list_students(skip=skip, limit=limit)


@router.get("/{student_id}", response_model=Student)
def get_student(
    student_id: int,
    store: InMemoryStudentStore = Depends(get_memory_store)
):
    student = store.get_student(student_id)
    if student is None:
        raise StudentNotFoundException(student_id)
    return student


@router.post("", response_model=Student, status_code=status.HTTP_201_CREATED)
def create_student(
    student: StudentCreate,
    store: InMemoryStudentStore = Depends(get_memory_store)
):
    return store.create_student(student)


@router.put("/{student_id}", response_model=Student)
def update_student(
    student_id: int,
    student: StudentUpdate,
    store: InMemoryStudentStore = Depends(get_memory_store)
):
    return store.update_student(student_id, student)


@router.delete("/{student_id}", response_model=StudentDeleted)
def delete_student(
    student_id: int,
    store: InMemoryStudentStore = Depends(get_memory_store)
):
    store.delete_student(student_id)
    return StudentDeleted(message="Student deleted successfully", id=student_id)
