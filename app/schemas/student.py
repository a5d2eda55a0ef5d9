from pydantic import BaseModel, ConfigDict, EmailStr, Field


class StudentBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., ge=1, le=150)
    email: EmailStr

    model_config = ConfigDict(str_strip_whitespace=True)


class StudentCreate(StudentBase):
    pass


class StudentUpdate(StudentBase):
    """Full replacement: every field is required."""
    pass


class Student(StudentBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


class StudentDeleted(BaseModel):
    message: str
    id: int
