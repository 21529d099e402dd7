"""SQLAlchemy table definitions."""

from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskgate.db.base import Base
from taskgate.models.enums import Role, TaskCategory, TaskStatus


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class OrganizationTable(Base):
    """Organizations table - tenant forest via parent_id."""

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("organizations.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    parent: Mapped["OrganizationTable | None"] = relationship(
        "OrganizationTable", remote_side="OrganizationTable.id", back_populates="children"
    )
    children: Mapped[list["OrganizationTable"]] = relationship(
        "OrganizationTable", back_populates="parent"
    )

    __table_args__ = (
        Index("idx_organizations_parent", "parent_id"),
    )


class UserTable(Base):
    """Users table. Credentials are managed outside TaskGate."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="userrole", values_callable=_enum_values),
        nullable=False,
        default=Role.VIEWER,
    )
    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organizations.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_users_organization", "organization_id"),
    )


class TaskTable(Base):
    """Tasks table."""

    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    # Content
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, name="taskstatus", values_callable=_enum_values),
        nullable=False,
        default=TaskStatus.TODO,
    )
    category: Mapped[TaskCategory] = mapped_column(
        Enum(TaskCategory, name="taskcategory", values_callable=_enum_values),
        nullable=False,
    )

    # Ownership
    owner_user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organizations.id"), nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        # Admin / Owner listing
        Index("idx_tasks_organization", "organization_id", "created_at"),
        # Viewer listing
        Index("idx_tasks_owner", "owner_user_id", "created_at"),
    )
