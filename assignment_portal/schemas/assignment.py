from enum import Enum
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from typing import Annotated, Optional
from datetime import datetime, timezone


class AssignmentStatus(str, Enum):
    draft = "draft"
    published = "published"
    completed = "completed"


def _as_utc(value: datetime) -> datetime:
    # le date senza timezone sono interpretate come UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class AssignmentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    dueDate: UtcDatetime


class AssignmentUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    dueDate: Optional[UtcDatetime] = None


class StatusUpdate(BaseModel):
    status: AssignmentStatus


class Assignment(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    assignmentId: str
    title: str
    description: str
    dueDate: UtcDatetime
    createdBy: str
    status: AssignmentStatus = AssignmentStatus.draft
    createdAt: UtcDatetime
    updatedAt: Optional[UtcDatetime] = None


class AssignmentWithCount(Assignment):
    submissionCount: int = 0
