"""
In-memory student store.

Records live in a plain list owned by the process and are gone after a
restart. Same operations as the database-backed service, so the two
routers read alike. Existence and email uniqueness are checked while the
lock is held, since there is no database constraint to fall back on.
"""

import logging
import threading
from typing import Iterable, List, Optional

from app.core.exceptions import DuplicateEmailException, StudentNotFoundException
from app.schemas.student import Student, StudentCreate, StudentUpdate

logger = logging.getLogger(__name__)


class InMemoryStudentStore:
    def __init__(self, students: Optional[Iterable[StudentCreate]] = None):
        self._students: List[Student] = []
        self._next_id = 1
        # FastAPI runs sync endpoints in a thread pool
        self._lock = threading.Lock()
        for student in students or []:
            self.create_student(student)

    # Callers must hold self._lock
    def _index_of(self, student_id: int) -> Optional[int]:
        for index, student in enumerate(self._students):
            if student.id == student_id:
                return index
        return None

    def _find_by_email(self, email: str) -> Optional[Student]:
        for student in self._students:
            if student.email == email:
                return student
        return None

    def list_students(self, skip: int = 0, limit: Optional[int] = None) -> List[Student]:
        with self._lock:
            end = None if limit is None else skip + limit
            return list(self._students[skip:end])

    def count(self) -> int:
        with self._lock:
            return len(self._students)

    def get_student(self, student_id: int) -> Optional[Student]:
        with self._lock:
            index = self._index_of(student_id)
            return None if index is None else self._students[index]

    def get_student_by_email(self, email: str) -> Optional[Student]:
        with self._lock:
            return self._find_by_email(email)

    def create_student(self, student: StudentCreate) -> Student:
        with self._lock:
            if self._find_by_email(student.email) is not None:
                raise DuplicateEmailException(student.email)
            # IDs are never reused, even after deletes
            record = Student(id=self._next_id, **student.model_dump())
            self._next_id += 1
            self._students.append(record)
        logger.info(f"Created student id={record.id} (memory)")
        return record

    def update_student(self, student_id: int, student: StudentUpdate) -> Student:
        with self._lock:
            index = self._index_of(student_id)
            if index is None:
                raise StudentNotFoundException(student_id)
            holder = self._find_by_email(student.email)
            if holder is not None and holder.id != student_id:
                raise DuplicateEmailException(student.email)
            record = Student(id=student_id, **student.model_dump())
            self._students[index] = record
        logger.info(f"Updated student id={student_id} (memory)")
        return record

    def delete_student(self, student_id: int) -> Student:
        with self._lock:
            index = self._index_of(student_id)
            if index is None:
                raise StudentNotFoundException(student_id)
            removed = self._students.pop(index)
        logger.info(f"Deleted student id={student_id} (memory)")
        return removed

    def clear(self) -> None:
        with self._lock:
            self._students.clear()
            self._next_id = 1


memory_store = InMemoryStudentStore()
