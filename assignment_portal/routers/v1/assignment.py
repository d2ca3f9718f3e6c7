from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from assignment_portal.core.deps import get_assignment_service, to_http
from assignment_portal.core.errors import DomainError
from assignment_portal.schemas.assignment import (
    Assignment,
    AssignmentCreate,
    AssignmentStatus,
    AssignmentUpdate,
    StatusUpdate,
)
from assignment_portal.schemas.context import UserContext
from assignment_portal.services.assignment_service import AssignmentService
from assignment_portal.services.auth_service import AuthService


router = APIRouter()

ServiceDep = Annotated[AssignmentService, Depends(get_assignment_service)]
UserDep = Annotated[UserContext, Depends(AuthService.get_current_user)]


@router.get("/assignments")
async def list_assignments_endpoint(
    user: UserDep,
    service: ServiceDep,
    status_filter: Annotated[Optional[AssignmentStatus], Query(alias="status")] = None,
):
    try:
        return await service.list_assignments(user, status_filter)
    except DomainError as e:
        raise to_http(e)


@router.get("/assignments/{assignment_id}", response_model=Assignment)
async def get_assignment_endpoint(
    assignment_id: str,
    user: UserDep,
    service: ServiceDep,
):
    try:
        return await service.get_assignment(assignment_id, user)
    except DomainError as e:
        raise to_http(e)


@router.post("/assignments", status_code=status.HTTP_201_CREATED, response_model=Assignment)
async def create_assignment_endpoint(
    assignment: AssignmentCreate,
    user: UserDep,
    service: ServiceDep,
):
    try:
        created = await service.create_assignment(assignment, user)
    except DomainError as e:
        raise to_http(e)

    location = f"/api/v1/assignments/{created.assignmentId}"
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=jsonable_encoder(created),
        headers={"Location": location},
    )


@router.put("/assignments/{assignment_id}", response_model=Assignment)
async def update_assignment_endpoint(
    assignment_id: str,
    data: AssignmentUpdate,
    user: UserDep,
    service: ServiceDep,
):
    try:
        return await service.update_assignment(assignment_id, data, user)
    except DomainError as e:
        raise to_http(e)


@router.put("/assignments/{assignment_id}/status", response_model=Assignment)
async def update_assignment_status_endpoint(
    assignment_id: str,
    data: StatusUpdate,
    user: UserDep,
    service: ServiceDep,
):
    try:
        return await service.transition_assignment(assignment_id, data.status, user)
    except DomainError as e:
        raise to_http(e)


@router.delete("/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assignment_endpoint(
    assignment_id: str,
    user: UserDep,
    service: ServiceDep,
):
    try:
        await service.delete_assignment(assignment_id, user)
    except DomainError as e:
        raise to_http(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
