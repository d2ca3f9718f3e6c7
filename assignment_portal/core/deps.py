from fastapi import HTTPException, Request
from assignment_portal.core.errors import DomainError
from assignment_portal.database.assignment_repo import AssignmentRepo
from assignment_portal.database.submission_repo import SubmissionRepo
from assignment_portal.services.assignment_service import AssignmentService
from assignment_portal.services.submission_service import SubmissionService


def get_assignment_repo(request: Request) -> AssignmentRepo:
    repo = getattr(request.app.state, "assignment_repo", None)
    if repo is None:
        raise RuntimeError("Repository assignment non inizializzato")
    return repo


def get_submission_repo(request: Request) -> SubmissionRepo:
    repo = getattr(request.app.state, "submission_repo", None)
    if repo is None:
        raise RuntimeError("Repository submission non inizializzato")
    return repo


def get_assignment_service(request: Request) -> AssignmentService:
    return AssignmentService(get_assignment_repo(request), get_submission_repo(request))


def get_submission_service(request: Request) -> SubmissionService:
    return SubmissionService(get_assignment_repo(request), get_submission_repo(request))


def to_http(e: DomainError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.to_dict())
