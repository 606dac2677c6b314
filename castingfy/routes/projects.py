"""
projects.py
-----------
Purpose:
    A producer's own projects (castings), as edited by the project wizard.

Architecture:
    - The wizard sends the whole aggregate on every save
    - Roles with temporary ids come back with server ids
    - Sending `version` turns the update into a compare-and-set (409 on mismatch)
"""

from fastapi import APIRouter, Depends

from castingfy.auth.verify import AuthContext, get_auth_context
from castingfy.models.api.network_models import SuccessResponse
from castingfy.models.api.project_request import ProjectPayload
from castingfy.models.api.project_response import ProjectListResponse, ProjectResponse
from castingfy.services import project_service

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=ProjectListResponse)
async def list_projects(ctx: AuthContext = Depends(get_auth_context)):
    projects = await project_service.list_my_projects(ctx)
    return ProjectListResponse(projects=projects)


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(payload: ProjectPayload, ctx: AuthContext = Depends(get_auth_context)):
    """
    Create a draft.

    Raises:
        400: missing title
    """
    project = await project_service.create_project(ctx, payload)
    return ProjectResponse(project=project)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str, ctx: AuthContext = Depends(get_auth_context)):
    project = await project_service.get_project(ctx, project_id)
    return ProjectResponse(project=project)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str, payload: ProjectPayload, ctx: AuthContext = Depends(get_auth_context)
):
    """
    Partial update; only fields present in the body are written.

    Raises:
        404: not the caller's project
        409: stale `version`
    """
    project = await project_service.update_project(ctx, project_id, payload)
    return ProjectResponse(project=project)


@router.delete("/{project_id}", response_model=SuccessResponse)
async def delete_project(project_id: str, ctx: AuthContext = Depends(get_auth_context)):
    await project_service.delete_project(ctx, project_id)
    return SuccessResponse()


@router.post("/{project_id}/publish", response_model=ProjectResponse)
async def publish_project(project_id: str, ctx: AuthContext = Depends(get_auth_context)):
    project = await project_service.publish_project(ctx, project_id)
    return ProjectResponse(project=project)
