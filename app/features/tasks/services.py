"""
Task service: authorizes every operation through the access decision
engine before touching the tasks table.
"""
from typing import Any, Dict, Optional, Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ForbiddenError, NotFoundError
from app.features.audit.services import AuditService
from app.features.permissions.engine import AccessContext, AccessDecisionEngine
from app.features.tasks.models import Task, TaskStatus, TaskPriority
from app.features.tasks.schemas import TaskCreate, TaskReplace
from app.utils import get_logger


log = get_logger(__name__)

CREATE_DENIED = "Only Admins and Owners can create tasks"
READ_DENIED = "Access denied to this task"
MODIFY_DENIED = "You can only modify tasks you created or manage"


class TaskService:
    def __init__(self, db: AsyncSession, engine: AccessDecisionEngine, audit: AuditService):
        self.db = db
        self.engine = engine
        self.audit = audit

    async def create(
        self,
        ctx: AccessContext,
        data: TaskCreate,
        client: Optional[Dict[str, Any]] = None,
    ) -> Task:
        """Create a task in the caller's own organization."""
        if not self.engine.can_create_task(ctx):
            log.info(f"User {ctx.user_id} ({ctx.role}) denied task creation")
            raise ForbiddenError(CREATE_DENIED)

        task = Task(
            title=data.title,
            description=data.description,
            status=data.status or TaskStatus.PENDING,
            priority=data.priority or TaskPriority.MEDIUM,
            category=data.category,
            due_date=data.due_date,
            created_by=ctx.user_id,
            organization_id=ctx.organization_id,
        )
        self.db.add(task)
        await self.db.flush()
        await self.db.refresh(task)

        await self.audit.record(
            ctx,
            action="task:created",
            resource_type="task",
            resource_id=task.id,
            details={"title": task.title},
            **(client or {}),
        )
        return task

    async def list_tasks(self, ctx: AccessContext) -> Sequence[Task]:
        """Tasks across the caller's reachable organizations, Viewers limited to their own."""
        predicate = await self.engine.task_list_predicate(ctx)

        stmt = select(Task).where(Task.organization_id.in_(predicate.org_ids))
        if predicate.restrict_to_creator:
            stmt = stmt.where(Task.created_by == predicate.creator_id)
        stmt = stmt.order_by(Task.created_at.desc(), Task.id.desc())

        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get(self, ctx: AccessContext, task_id: int) -> Task:
        """
        Load a task the caller may read.

        Raises:
            NotFoundError: If the task does not exist (checked first)
            ForbiddenError: If the caller may not read it
        """
        task = await self.db.get(Task, task_id)
        if task is None:
            raise NotFoundError("Task not found")

        if not await self.engine.can_read_task(ctx, task):
            log.info(f"User {ctx.user_id} denied read on task {task_id}")
            raise ForbiddenError(READ_DENIED)
        return task

    async def replace(
        self,
        ctx: AccessContext,
        task_id: int,
        data: TaskReplace,
        client: Optional[Dict[str, Any]] = None,
    ) -> Task:
        """Replace every editable field. Organization and creator never change."""
        task = await self._get_for_mutation(ctx, task_id)

        task.title = data.title
        task.description = data.description
        task.status = data.status
        task.priority = data.priority
        task.category = data.category
        task.due_date = data.due_date
        await self.db.flush()
        await self.db.refresh(task)

        await self.audit.record(
            ctx,
            action="task:replaced",
            resource_type="task",
            resource_id=task.id,
            details=data.model_dump(mode="json"),
            **(client or {}),
        )
        return task

    async def delete(
        self,
        ctx: AccessContext,
        task_id: int,
        client: Optional[Dict[str, Any]] = None,
    ) -> None:
        task = await self._get_for_mutation(ctx, task_id)
        title = task.title

        await self.db.delete(task)
        await self.db.flush()

        await self.audit.record(
            ctx,
            action="task:deleted",
            resource_type="task",
            resource_id=task_id,
            details={"title": title},
            **(client or {}),
        )

    async def _get_for_mutation(self, ctx: AccessContext, task_id: int) -> Task:
        task = await self.get(ctx, task_id)
        if not await self.engine.can_mutate_task(ctx, task):
            log.info(f"User {ctx.user_id} denied modification of task {task_id}")
            raise ForbiddenError(MODIFY_DENIED)
        return task
