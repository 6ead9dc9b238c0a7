"""
Organization model.

Organizations form a two-level hierarchy: a root organization may have
child organizations, a child organization never has children of its own.
"""
from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin


class Organization(Base, TimestampMixin):
    """
    Organization (tenant) owning users and tasks.

    `parent_id` is null for root organizations.
    """
    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=True,
        index=True
    )

    # Relationships
    parent: Mapped["Organization | None"] = relationship(
        "Organization",
        remote_side="Organization.id",
        back_populates="children",
        lazy="selectin",
        join_depth=1
    )

    children: Mapped[list["Organization"]] = relationship(
        "Organization",
        back_populates="parent",
        lazy="selectin",
        join_depth=1
    )

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, name={self.name!r}, parent_id={self.parent_id})>"
