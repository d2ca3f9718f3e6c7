import logging
import uuid
from datetime import datetime
from typing import Optional, Sequence

from assignment_portal.core.errors import (
    AlreadySubmitted,
    DeadlinePassed,
    NotAvailable,
    NotFound,
    NotOwner,
)
from assignment_portal.database.assignment_repo import AssignmentRepo
from assignment_portal.database.submission_repo import SubmissionRepo
from assignment_portal.schemas.assignment import Assignment, AssignmentStatus
from assignment_portal.schemas.context import Role, UserContext
from assignment_portal.schemas.submission import Submission, SubmissionCreate
from assignment_portal.services.assignment_service import utcnow
from assignment_portal.services.authorization import (
    ANY_ROLE,
    STUDENT_ONLY,
    TEACHER_ONLY,
    AuthorizationGate,
    OwnershipRequirement,
)

logger = logging.getLogger("submissions.service")


def create_submission_id() -> str:
    return f"sub-{uuid.uuid4().hex}"


class SubmissionService:
    """
    Ammissione delle submission e revisione.

    Una sola submission per coppia (assignment, studente): il vincolo è
    delegato all'inserimento condizionato del repository, mai a un
    controllo preventivo in applicazione.
    """

    def __init__(
        self,
        assignments: AssignmentRepo,
        submissions: SubmissionRepo,
        gate: Optional[AuthorizationGate] = None,
    ):
        self.assignments = assignments
        self.submissions = submissions
        self.gate = gate or AuthorizationGate()

    async def _assignment(self, assignment_id: str) -> Assignment:
        assignment = await self.assignments.find_one(assignment_id)
        if assignment is None:
            raise NotFound("Assignment not found")
        return assignment

    async def _submission(self, submission_id: str) -> Submission:
        submission = await self.submissions.find_one(submission_id)
        if submission is None:
            raise NotFound("Submission not found")
        return submission

    async def create_submission(
        self, data: SubmissionCreate, user: UserContext, now: Optional[datetime] = None
    ) -> Submission:
        self.gate.require(user, STUDENT_ONLY)
        assignment = await self._assignment(data.assignmentId)

        now = now or utcnow()
        # la scadenza vale qualunque sia lo stato dell'assignment
        if now > assignment.dueDate:
            raise DeadlinePassed()
        if assignment.status != AssignmentStatus.published.value:
            raise NotAvailable()

        submission = Submission(
            submissionId=create_submission_id(),
            assignmentId=assignment.assignmentId,
            studentId=str(user.user_id),
            answer=data.answer,
            submittedAt=now,
            reviewed=False,
        )
        created = await self.submissions.insert_if_absent(submission)
        if created is None:
            raise AlreadySubmitted()
        logger.info(
            "Submission %s creata da %s per %s",
            created.submissionId, user.user_id, assignment.assignmentId,
        )
        return created

    async def list_for_assignment(self, assignment_id: str, user: UserContext) -> Sequence[Submission]:
        self.gate.require(user, TEACHER_ONLY)
        assignment = await self._assignment(assignment_id)
        self.gate.require(user, OwnershipRequirement(assignment.createdBy))
        return await self.submissions.find_by_assignment(assignment.assignmentId)

    async def list_mine(self, user: UserContext) -> Sequence[Submission]:
        self.gate.require(user, STUDENT_ONLY)
        return await self.submissions.find_by_student(str(user.user_id))

    async def get_submission(self, submission_id: str, user: UserContext) -> Submission:
        self.gate.require(user, ANY_ROLE)
        submission = await self._submission(submission_id)
        if user.role == Role.student:
            self.gate.require(user, OwnershipRequirement(submission.studentId))
            return submission

        assignment = await self.assignments.find_one(submission.assignmentId)
        if assignment is None:
            raise NotOwner()
        self.gate.require(user, OwnershipRequirement(assignment.createdBy))
        return submission

    async def mark_reviewed(self, submission_id: str, user: UserContext) -> Submission:
        """Idempotente: una submission già revisionata resta tale, senza errore."""
        self.gate.require(user, TEACHER_ONLY)
        submission = await self._submission(submission_id)
        assignment = await self.assignments.find_one(submission.assignmentId)
        if assignment is None:
            raise NotOwner()
        self.gate.require(user, OwnershipRequirement(assignment.createdBy))

        if submission.reviewed:
            return submission
        updated = await self.submissions.mark_reviewed(submission.submissionId)
        if updated is None:
            raise NotFound("Submission not found")
        logger.info("Submission %s revisionata da %s", submission_id, user.user_id)
        return updated
