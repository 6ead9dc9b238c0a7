"""
Pydantic schemas for task-related requests and responses.
"""
from datetime import datetime
from pydantic import BaseModel, Field

from app.features.tasks.models import TaskStatus, TaskPriority, TaskCategory


class TaskCreate(BaseModel):
    """Schema for creating a task. Status and priority fall back to pending/medium."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    due_date: datetime | None = None


class TaskReplace(BaseModel):
    """Schema for full replacement of a task's editable fields."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    status: TaskStatus
    priority: TaskPriority
    category: TaskCategory | None = None
    due_date: datetime | None = None


class TaskResponse(BaseModel):
    """Schema for task responses."""
    id: int
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    category: TaskCategory | None = None
    due_date: datetime | None = None
    created_by: int
    organization_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
