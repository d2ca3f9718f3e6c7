from pydantic import BaseModel, ConfigDict, Field

from assignment_portal.schemas.assignment import UtcDatetime


class SubmissionCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    assignmentId: str = Field(min_length=1)
    answer: str = Field(min_length=1, max_length=5000)


class Submission(BaseModel):
    submissionId: str
    assignmentId: str
    studentId: str
    answer: str
    submittedAt: UtcDatetime
    reviewed: bool = False
