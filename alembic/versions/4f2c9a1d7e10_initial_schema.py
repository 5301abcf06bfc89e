"""initial schema

Revision ID: 4f2c9a1d7e10
Revises:
Create Date: 2026-10-19 09:12:41.530218

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '4f2c9a1d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("hashed_password", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("role", sa.Enum("ADMIN", "USER", name="role"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=False), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=False)

    op.create_table(
        "project",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_project_name", "project", ["name"], unique=False)

    op.create_table(
        "collaborator",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column("daily_rate", sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    # project_id has no foreign key: project deletion does not cascade
    op.create_table(
        "collaborator_project",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("collaborator_id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("static_days_worked", sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(["collaborator_id"], ["collaborator.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_collaborator_project_collaborator_id", "collaborator_project", ["collaborator_id"], unique=False)
    op.create_index("ix_collaborator_project_project_id", "collaborator_project", ["project_id"], unique=False)

    op.create_table(
        "workload",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("collaborator_id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("days_worked", sa.Float(), nullable=False),
        sa.Column("month", sqlmodel.sql.sqltypes.AutoString(length=2), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("comment", sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.ForeignKeyConstraint(["collaborator_id"], ["collaborator.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("collaborator_id", "project_id", "month", "year", name="uq_workload_period"),
    )
    op.create_index("ix_workload_collaborator_id", "workload", ["collaborator_id"], unique=False)
    op.create_index("ix_workload_project_id", "workload", ["project_id"], unique=False)
    op.create_index("ix_workload_year", "workload", ["year"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_workload_year", table_name="workload")
    op.drop_index("ix_workload_project_id", table_name="workload")
    op.drop_index("ix_workload_collaborator_id", table_name="workload")
    op.drop_table("workload")
    op.drop_index("ix_collaborator_project_project_id", table_name="collaborator_project")
    op.drop_index("ix_collaborator_project_collaborator_id", table_name="collaborator_project")
    op.drop_table("collaborator_project")
    op.drop_table("collaborator")
    op.drop_index("ix_project_name", table_name="project")
    op.drop_table("project")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
    sa.Enum(name="role").drop(op.get_bind(), checkfirst=True)
