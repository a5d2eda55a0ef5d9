from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.api.deps import get_db
from app.core.exceptions import DuplicateEmailException, StudentNotFoundException
from app.services.student import student as crud_student
from app.schemas.student import Student, StudentCreate, StudentDeleted, StudentUpdate

router = APIRouter()


def _get_or_404(db: Session, student_id: int):
    student = crud_student.get_student(db, student_id=student_id)
    if not student:
        raise StudentNotFoundException(student_id)
    return student


@router.get("", response_model=List[Student])
def get_students(
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db)
):
    """
    List every student

    - **skip**: number of leading records to skip (default: 0)
    - **limit**: maximum number of records (default: no limit)
    """
    return crud_student.get_students(db, skip=skip, limit=limit)


@router.get("/{student_id}", response_model=Student)
def get_student(
    student_id: int,
    db: Session = Depends(get_db)
):
    """Fetch one student by ID"""
    return _get_or_404(db, student_id)


@router.post("", response_model=Student, status_code=status.HTTP_201_CREATED)
def create_student(
    student: StudentCreate,
    db: Session = Depends(get_db)
):
    """
    Create a student

    - **name**: required
    - **age**: required, 1-150
    - **email**: required, unique
    """
    if crud_student.get_student_by_email(db, email=student.email):
        raise DuplicateEmailException(student.email)

    return crud_student.create_student(db=db, student=student)


@router.put("/{student_id}", response_model=Student)
def update_student(
    student_id: int,
    student: StudentUpdate,
    db: Session = Depends(get_db)
):
    """Replace every field of a student"""
    _get_or_404(db, student_id)

    student_with_email = crud_student.get_student_by_email(db, email=student.email)
    if student_with_email and student_with_email.id != student_id:
        raise DuplicateEmailException(student.email)

    return crud_student.update_student(db=db, student_id=student_id, student=student)


@router.delete("/{student_id}", response_model=StudentDeleted)
def delete_student(
    student_id: int,
    db: Session = Depends(get_db)
):
    """Delete a student"""
    _get_or_404(db, student_id)

    crud_student.delete_student(db=db, student_id=student_id)
    return StudentDeleted(message="Student deleted successfully", id=student_id)
