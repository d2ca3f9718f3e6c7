from typing import Annotated
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from assignment_portal.core.deps import get_submission_service, to_http
from assignment_portal.core.errors import DomainError
from assignment_portal.schemas.context import UserContext
from assignment_portal.schemas.submission import Submission, SubmissionCreate
from assignment_portal.services.auth_service import AuthService
from assignment_portal.services.submission_service import SubmissionService


router = APIRouter()

ServiceDep = Annotated[SubmissionService, Depends(get_submission_service)]
UserDep = Annotated[UserContext, Depends(AuthService.get_current_user)]


@router.post("/submissions", status_code=status.HTTP_201_CREATED, response_model=Submission)
async def create_submission_endpoint(
    submission: SubmissionCreate,
    user: UserDep,
    service: ServiceDep,
):
    try:
        created = await service.create_submission(submission, user)
    except DomainError as e:
        raise to_http(e)

    location = f"/api/v1/submissions/{created.submissionId}"
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=jsonable_encoder(created),
        headers={"Location": location},
    )


# le route statiche vanno registrate prima di /submissions/{submission_id}
@router.get("/submissions/my", response_model=list[Submission])
async def list_my_submissions_endpoint(user: UserDep, service: ServiceDep):
    try:
        return await service.list_mine(user)
    except DomainError as e:
        raise to_http(e)


@router.get("/submissions/assignment/{assignment_id}", response_model=list[Submission])
async def list_submissions_for_assignment_endpoint(
    assignment_id: str,
    user: UserDep,
    service: ServiceDep,
):
    try:
        return await service.list_for_assignment(assignment_id, user)
    except DomainError as e:
        raise to_http(e)


@router.get("/submissions/{submission_id}", response_model=Submission)
async def get_submission_endpoint(
    submission_id: str,
    user: UserDep,
    service: ServiceDep,
):
    try:
        return await service.get_submission(submission_id, user)
    except DomainError as e:
        raise to_http(e)


@router.put("/submissions/{submission_id}/review", response_model=Submission)
async def mark_submission_reviewed_endpoint(
    submission_id: str,
    user: UserDep,
    service: ServiceDep,
):
    try:
        return await service.mark_reviewed(submission_id, user)
    except DomainError as e:
        raise to_http(e)
