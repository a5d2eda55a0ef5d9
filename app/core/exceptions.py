from typing import Any, Dict, Optional
from fastapi import status


class BaseAPIException(Exception):
    """
    Base class for every error the API raises on purpose.
    Keeps the error payload format identical across endpoints.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class BadRequestException(BaseAPIException):
    """400: the request is well-formed but breaks a business rule"""
    def __init__(self, message: str = "Bad Request", details: dict = None):
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class NotFoundException(BaseAPIException):
    """404: resource does not exist"""
    def __init__(self, message: str = "Resource not found", details: dict = None):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details=details
        )


class ConflictException(BaseAPIException):
    """409: the database rejected a write because of a constraint"""
    def __init__(self, message: str = "Conflict", details: dict = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=status.HTTP_409_CONFLICT,
            details=details
        )


# =========================================================
# STUDENT DOMAIN ERRORS
# =========================================================

class StudentNotFoundException(NotFoundException):
    def __init__(self, student_id: int):
        super().__init__(
            message="Student not found",
            details={"student_id": student_id}
        )


class DuplicateEmailException(BadRequestException):
    def __init__(self, email: str):
        super().__init__(
            message="Email is already registered to another student",
            details={"email": email}
        )
