"""Initial TaskGate schema."""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create organizations, users and tasks."""
    bind = op.get_bind()

    userrole = postgresql.ENUM("owner", "admin", "viewer", name="userrole", create_type=False)
    taskstatus = postgresql.ENUM("todo", "in_progress", "done", name="taskstatus", create_type=False)
    taskcategory = postgresql.ENUM("Work", "Personal", name="taskcategory", create_type=False)

    userrole.create(bind, checkfirst=True)
    taskstatus.create(bind, checkfirst=True)
    taskcategory.create(bind, checkfirst=True)

    op.create_table(
        "organizations",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("parent_id", sa.String(length=36), sa.ForeignKey("organizations.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_organizations_parent", "organizations", ["parent_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("role", userrole, nullable=False),
        sa.Column("organization_id", sa.String(length=36), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_users_organization", "users", ["organization_id"])

    op.create_table(
        "tasks",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", taskstatus, nullable=False),
        sa.Column("category", taskcategory, nullable=False),
        sa.Column("owner_user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("organization_id", sa.String(length=36), sa.ForeignKey("organizations.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_tasks_organization", "tasks", ["organization_id", "created_at"])
    op.create_index("idx_tasks_owner", "tasks", ["owner_user_id", "created_at"])


def downgrade() -> None:
    """Drop all TaskGate tables and enums."""
    op.drop_index("idx_tasks_owner", table_name="tasks")
    op.drop_index("idx_tasks_organization", table_name="tasks")
    op.drop_table("tasks")
    op.drop_index("idx_users_organization", table_name="users")
    op.drop_table("users")
    op.drop_index("idx_organizations_parent", table_name="organizations")
    op.drop_table("organizations")

    bind = op.get_bind()
    postgresql.ENUM(name="taskcategory").drop(bind, checkfirst=True)
    postgresql.ENUM(name="taskstatus").drop(bind, checkfirst=True)
    postgresql.ENUM(name="userrole").drop(bind, checkfirst=True)
