import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from assignment_portal.core.errors import (
    InvalidDueDate,
    InvalidState,
    InvalidTransition,
    HasSubmissions,
    NotFound,
)
from assignment_portal.database.assignment_repo import AssignmentRepo
from assignment_portal.database.submission_repo import SubmissionRepo
from assignment_portal.schemas.assignment import (
    Assignment,
    AssignmentCreate,
    AssignmentStatus,
    AssignmentUpdate,
    AssignmentWithCount,
)
from assignment_portal.schemas.context import Role, UserContext
from assignment_portal.services.authorization import (
    ANY_ROLE,
    TEACHER_ONLY,
    AuthorizationGate,
    OwnershipRequirement,
)

logger = logging.getLogger("assignments.service")

# solo archi in avanti, uno stato alla volta
TRANSITIONS: Dict[str, frozenset] = {
    AssignmentStatus.draft.value: frozenset({AssignmentStatus.published.value}),
    AssignmentStatus.published.value: frozenset({AssignmentStatus.completed.value}),
    AssignmentStatus.completed.value: frozenset(),
}


def create_assignment_id() -> str:
    return f"as-{uuid.uuid4().hex}"


def utcnow() -> datetime:
    ts = datetime.now(timezone.utc)
    # normalizzazione: tronca ai millisecondi (precisione di MongoDB)
    return ts.replace(microsecond=(ts.microsecond // 1000) * 1000)


def can_transition(from_status: str, to_status: str) -> bool:
    return to_status in TRANSITIONS.get(from_status, frozenset())


def _status_value(status) -> str:
    return status.value if isinstance(status, AssignmentStatus) else str(status)


class AssignmentService:
    """
    Ciclo di vita degli assignment: draft -> published -> completed.

    Ogni mutazione richiede il teacher proprietario; contenuto e
    cancellazione sono consentiti solo in draft. Le scritture sullo stato
    sono condizionate allo stato letto, così una transizione concorrente
    non viene sovrascritta in silenzio.
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

    async def _load(self, assignment_id: str) -> Assignment:
        assignment = await self.assignments.find_one(assignment_id)
        if assignment is None:
            raise NotFound("Assignment not found")
        return assignment

    async def _load_owned(self, assignment_id: str, user: UserContext) -> Assignment:
        self.gate.require(user, TEACHER_ONLY)
        assignment = await self._load(assignment_id)
        self.gate.require(user, OwnershipRequirement(assignment.createdBy))
        return assignment

    async def create_assignment(
        self, data: AssignmentCreate, user: UserContext, now: Optional[datetime] = None
    ) -> Assignment:
        self.gate.require(user, TEACHER_ONLY)
        now = now or utcnow()
        if data.dueDate <= now:
            raise InvalidDueDate()

        assignment = Assignment(
            assignmentId=create_assignment_id(),
            createdBy=str(user.user_id),
            status=AssignmentStatus.draft,
            createdAt=now,
            updatedAt=now,
            **data.model_dump(),
        )
        created = await self.assignments.insert(assignment)
        logger.info("Assignment %s creato da %s", created.assignmentId, user.user_id)
        return created

    async def list_assignments(
        self, user: UserContext, status: Optional[AssignmentStatus] = None
    ) -> Sequence[Assignment]:
        """
        Teacher: solo i propri, con il conteggio delle submission e filtro
        opzionale sullo stato. Student: solo i pubblicati, il filtro è ignorato.
        """
        self.gate.require(user, ANY_ROLE)
        if user.role == Role.teacher:
            items = await self.assignments.find(
                created_by=str(user.user_id),
                status=_status_value(status) if status is not None else None,
            )
            result: List[AssignmentWithCount] = []
            for a in items:
                count = await self.submissions.count_for_assignment(a.assignmentId)
                result.append(AssignmentWithCount(**a.model_dump(), submissionCount=count))
            return result
        return await self.assignments.find(status=AssignmentStatus.published.value)

    async def get_assignment(self, assignment_id: str, user: UserContext) -> Assignment:
        self.gate.require(user, ANY_ROLE)
        assignment = await self.assignments.find_one(assignment_id)
        if user.role == Role.student:
            # uno studente non deve sapere che esistono assignment non pubblicati
            if assignment is None or assignment.status != AssignmentStatus.published.value:
                raise NotFound("Assignment not found")
            return assignment
        if assignment is None:
            raise NotFound("Assignment not found")
        self.gate.require(user, OwnershipRequirement(assignment.createdBy))
        return assignment

    async def update_assignment(
        self,
        assignment_id: str,
        data: AssignmentUpdate,
        user: UserContext,
        now: Optional[datetime] = None,
    ) -> Assignment:
        assignment = await self._load_owned(assignment_id, user)
        if assignment.status != AssignmentStatus.draft.value:
            raise InvalidState("Can only edit draft assignments")

        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            return assignment

        now = now or utcnow()
        if "dueDate" in fields and fields["dueDate"] <= now:
            raise InvalidDueDate()
        fields["updatedAt"] = now

        updated = await self.assignments.update_fields(
            assignment.assignmentId, fields, expected_status=AssignmentStatus.draft.value
        )
        if updated is None:
            # pubblicato (o cancellato) tra la lettura e la scrittura
            raise InvalidState("Can only edit draft assignments")
        logger.info("Assignment %s aggiornato (%s)", assignment_id, ", ".join(sorted(fields)))
        return updated

    async def transition_assignment(
        self,
        assignment_id: str,
        target: AssignmentStatus,
        user: UserContext,
        now: Optional[datetime] = None,
    ) -> Assignment:
        assignment = await self._load_owned(assignment_id, user)
        current = assignment.status
        target_value = _status_value(target)
        if not can_transition(current, target_value):
            raise InvalidTransition(current, target_value)

        updated = await self.assignments.update_status(
            assignment.assignmentId,
            expected_status=current,
            new_status=target_value,
            updated_at=now or utcnow(),
        )
        if updated is None:
            raise InvalidTransition(current, target_value)
        logger.info("Assignment %s: %s -> %s", assignment_id, current, target_value)
        return updated

    async def delete_assignment(self, assignment_id: str, user: UserContext) -> None:
        assignment = await self._load_owned(assignment_id, user)
        if assignment.status != AssignmentStatus.draft.value:
            raise InvalidState("Can only delete draft assignments")

        count = await self.submissions.count_for_assignment(assignment.assignmentId)
        if count > 0:
            raise HasSubmissions()

        deleted = await self.assignments.delete(
            assignment.assignmentId, expected_status=AssignmentStatus.draft.value
        )
        if not deleted:
            raise InvalidState("Can only delete draft assignments")
        logger.info("Assignment %s cancellato da %s", assignment_id, user.user_id)
