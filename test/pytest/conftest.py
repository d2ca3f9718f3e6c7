import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

import pytest

from assignment_portal.database.assignment_repo import AssignmentRepo
from assignment_portal.database.submission_repo import SubmissionRepo
from assignment_portal.schemas.assignment import Assignment, AssignmentCreate
from assignment_portal.schemas.context import UserContext
from assignment_portal.schemas.submission import Submission
from assignment_portal.services.assignment_service import AssignmentService
from assignment_portal.services.submission_service import SubmissionService


# ------------------------- Fake repositories -------------------------
class FakeAssignmentRepo(AssignmentRepo):
    def __init__(self):
        self.items: dict[str, Assignment] = {}

    async def insert(self, assignment: Assignment) -> Assignment:
        # NON genera ID: si aspetta assignment.assignmentId già valorizzato
        if not getattr(assignment, "assignmentId", None):
            raise ValueError("assignmentId must be set by the service")
        self.items[assignment.assignmentId] = assignment
        return assignment

    async def find_one(self, assignment_id: str) -> Optional[Assignment]:
        return self.items.get(assignment_id)

    async def find(self, created_by=None, status=None):
        items = [
            a for a in self.items.values()
            if (created_by is None or a.createdBy == created_by)
            and (status is None or a.status == status)
        ]
        return sorted(items, key=lambda a: a.createdAt, reverse=True)

    async def update_fields(self, assignment_id: str, fields: Mapping[str, Any], expected_status: str):
        await asyncio.sleep(0)
        current = self.items.get(assignment_id)
        if current is None or current.status != expected_status:
            return None
        self.items[assignment_id] = current.model_copy(update=dict(fields))
        return self.items[assignment_id]

    async def update_status(self, assignment_id: str, expected_status: str, new_status: str, updated_at: datetime):
        await asyncio.sleep(0)
        current = self.items.get(assignment_id)
        if current is None or current.status != expected_status:
            return None
        self.items[assignment_id] = current.model_copy(
            update={"status": new_status, "updatedAt": updated_at}
        )
        return self.items[assignment_id]

    async def delete(self, assignment_id: str, expected_status: str) -> bool:
        current = self.items.get(assignment_id)
        if current is None or current.status != expected_status:
            return False
        del self.items[assignment_id]
        return True


class FakeSubmissionRepo(SubmissionRepo):
    def __init__(self):
        self.items: dict[str, Submission] = {}

    async def insert_if_absent(self, submission: Submission) -> Optional[Submission]:
        # cede il controllo prima della sezione atomica per far interlacciare i task concorrenti
        await asyncio.sleep(0)
        for s in self.items.values():
            if s.assignmentId == submission.assignmentId and s.studentId == submission.studentId:
                return None
        self.items[submission.submissionId] = submission
        return submission

    async def find_one(self, submission_id: str) -> Optional[Submission]:
        return self.items.get(submission_id)

    async def find_by_assignment(self, assignment_id: str):
        items = [s for s in self.items.values() if s.assignmentId == assignment_id]
        return sorted(items, key=lambda s: s.submittedAt, reverse=True)

    async def find_by_student(self, student_id: str):
        items = [s for s in self.items.values() if s.studentId == student_id]
        return sorted(items, key=lambda s: s.submittedAt, reverse=True)

    async def count_for_assignment(self, assignment_id: str) -> int:
        return sum(1 for s in self.items.values() if s.assignmentId == assignment_id)

    async def mark_reviewed(self, submission_id: str) -> Optional[Submission]:
        current = self.items.get(submission_id)
        if current is None:
            return None
        self.items[submission_id] = current.model_copy(update={"reviewed": True})
        return self.items[submission_id]


# ------------------------------- Fixtures -------------------------------------
@pytest.fixture
def assignment_repo():
    return FakeAssignmentRepo()

@pytest.fixture
def submission_repo():
    return FakeSubmissionRepo()

@pytest.fixture
def assignments(assignment_repo, submission_repo):
    return AssignmentService(assignment_repo, submission_repo)

@pytest.fixture
def submissions(assignment_repo, submission_repo):
    return SubmissionService(assignment_repo, submission_repo)

@pytest.fixture
def teacher():
    return UserContext(user_id="t1", role="teacher")

@pytest.fixture
def other_teacher():
    return UserContext(user_id="t2", role="teacher")

@pytest.fixture
def student():
    return UserContext(user_id="s1", role="student")

@pytest.fixture
def student2():
    return UserContext(user_id="s2", role="student")


def make_create(**overrides) -> AssignmentCreate:
    future = datetime.now(timezone.utc) + timedelta(days=7)
    base = dict(
        title="Compito",
        description="Desc",
        dueDate=future,
    )
    base.update(overrides)
    return AssignmentCreate(**base)


@pytest.fixture
def create_payload():
    return make_create
