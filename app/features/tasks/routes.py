"""
Task feature routes.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.schemas import ApiResponse
from app.features.audit.dependencies import get_audit_service
from app.features.audit.services import AuditService
from app.features.permissions.dependencies import get_access_context, get_access_engine, get_client_info
from app.features.permissions.engine import AccessContext, AccessDecisionEngine
from app.features.tasks.schemas import TaskCreate, TaskReplace, TaskResponse
from app.features.tasks.services import TaskService


router = APIRouter(tags=["tasks"])


def get_task_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    engine: Annotated[AccessDecisionEngine, Depends(get_access_engine)],
    audit: Annotated[AuditService, Depends(get_audit_service)],
) -> TaskService:
    return TaskService(db, engine, audit)


@router.post("/", response_model=ApiResponse[TaskResponse], status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    request: Request,
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Create a task in the caller's organization (Admin and above)."""
    task = await service.create(ctx, task_data, get_client_info(request))
    return ApiResponse(data=TaskResponse.model_validate(task), message="Task created successfully")


@router.get("/", response_model=ApiResponse[list[TaskResponse]])
async def list_tasks(
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """List tasks visible to the caller."""
    tasks = await service.list_tasks(ctx)
    return ApiResponse(data=[TaskResponse.model_validate(task) for task in tasks])


@router.get("/{task_id}", response_model=ApiResponse[TaskResponse])
async def get_task(
    task_id: int,
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Get a task by ID."""
    task = await service.get(ctx, task_id)
    return ApiResponse(data=TaskResponse.model_validate(task))


@router.put("/{task_id}", response_model=ApiResponse[TaskResponse])
async def replace_task(
    task_id: int,
    task_data: TaskReplace,
    request: Request,
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Replace a task's fields."""
    task = await service.replace(ctx, task_id, task_data, get_client_info(request))
    return ApiResponse(data=TaskResponse.model_validate(task), message="Task replaced successfully")


@router.delete("/{task_id}", response_model=ApiResponse[None])
async def delete_task(
    task_id: int,
    request: Request,
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    service: Annotated[TaskService, Depends(get_task_service)],
):
    """Delete a task."""
    await service.delete(ctx, task_id, get_client_info(request))
    return ApiResponse(message="Task deleted successfully")
