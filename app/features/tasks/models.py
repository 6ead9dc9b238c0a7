"""
Task model.
"""
from datetime import datetime
from sqlalchemy import String, Text, ForeignKey, DateTime, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
import enum

from app.core.database.base import Base, TimestampMixin


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskCategory(str, enum.Enum):
    WORK = "work"
    PERSONAL = "personal"
    OTHER = "other"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    # Store "in-progress", not "IN_PROGRESS"
    return [member.value for member in enum_cls]


class Task(Base, TimestampMixin):
    """
    Task owned by the organization it was created in.

    `organization_id` and `created_by` are written once at creation.
    """
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(TaskStatus, values_callable=_enum_values, native_enum=False, length=20),
        default=TaskStatus.PENDING,
        nullable=False,
        index=True
    )
    priority: Mapped[TaskPriority] = mapped_column(
        SQLEnum(TaskPriority, values_callable=_enum_values, native_enum=False, length=20),
        default=TaskPriority.MEDIUM,
        nullable=False
    )
    category: Mapped[TaskCategory | None] = mapped_column(
        SQLEnum(TaskCategory, values_callable=_enum_values, native_enum=False, length=20),
        nullable=True
    )
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_by: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    organization_id: Mapped[int] = mapped_column(
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title!r}, org_id={self.organization_id})>"
