from enum import Enum
from pydantic import BaseModel


class Role(str, Enum):
    teacher = "teacher"
    student = "student"


class UserContext(BaseModel):
    user_id: str
    role: Role
