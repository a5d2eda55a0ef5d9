import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException
from app.models.student import Student
from app.schemas.student import StudentCreate, StudentUpdate

logger = logging.getLogger(__name__)


def get_student(db: Session, student_id: int) -> Optional[Student]:
    """Fetch one student by ID"""
    return db.get(Student, student_id)


def get_student_by_email(db: Session, email: str) -> Optional[Student]:
    """Fetch one student by email"""
    return db.query(Student).filter(Student.email == email).first()


def get_students(db: Session, skip: int = 0, limit: Optional[int] = None) -> List[Student]:
    """List students in ID order. No limit returns every row."""
    query = db.query(Student).order_by(Student.id).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def count_students(db: Session) -> int:
    return db.query(Student).count()


def _commit(db: Session, db_student: Student) -> Student:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error while saving student: {e.orig}")
        raise ConflictException("Student violates a database constraint") from e
    db.refresh(db_student)
    return db_student


def create_student(db: Session, student: StudentCreate) -> Student:
    """Insert a new student and return it with its assigned ID"""
    db_student = Student(
        name=student.name,
        age=student.age,
        email=student.email
    )
    db.add(db_student)
    db_student = _commit(db, db_student)
    logger.info(f"Created student id={db_student.id}")
    return db_student


def update_student(db: Session, student_id: int, student: StudentUpdate) -> Optional[Student]:
    """Overwrite every mutable field of a student"""
    db_student = get_student(db, student_id)
    if db_student:
        db_student.name = student.name
        db_student.age = student.age
        db_student.email = student.email
        db_student = _commit(db, db_student)
        logger.info(f"Updated student id={student_id}")
    return db_student


def delete_student(db: Session, student_id: int) -> Optional[Student]:
    """Delete a student, returning the removed row"""
    db_student = get_student(db, student_id)
    if db_student:
        db.delete(db_student)
        db.commit()
        logger.info(f"Deleted student id={student_id}")
    return db_student
