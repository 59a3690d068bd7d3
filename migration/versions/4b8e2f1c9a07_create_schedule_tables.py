"""create schedule tables

Revision ID: 4b8e2f1c9a07
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4b8e2f1c9a07"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "schedules",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("DRAFT", "BASELINE", name="schedulestatus"),
            nullable=False,
        ),
        sa.Column("project_start_date", sa.Date(), nullable=False),
        sa.Column("project_end_date", sa.Date(), nullable=True),
        sa.Column("working_days_per_week", sa.Integer(), nullable=False),
        sa.Column("hours_per_day", sa.Float(), nullable=False),
        sa.Column("is_baseline", sa.Boolean(), nullable=False),
        sa.Column("baseline_date", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("idx_schedules_project_id", "schedules", ["project_id"])
    op.create_index("uq_schedules_project_name", "schedules", ["project_id", "name"], unique=True)

    op.create_table(
        "schedule_tasks",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "schedule_id",
            sa.String(),
            sa.ForeignKey("schedules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("parent_id", sa.String(), nullable=True),
        sa.Column("wbs_node_id", sa.String(), nullable=True),
        sa.Column("wbs_code", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column(
            "task_type",
            sa.Enum("TASK", "MILESTONE", "SUMMARY", name="tasktype"),
            nullable=False,
        ),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("planned_start", sa.Date(), nullable=True),
        sa.Column("planned_end", sa.Date(), nullable=True),
        sa.Column("planned_duration", sa.Integer(), nullable=False),
        sa.Column("progress_percent", sa.Float(), nullable=True),
        sa.Column("actual_start", sa.Date(), nullable=True),
        sa.Column("actual_end", sa.Date(), nullable=True),
        sa.Column("actual_duration", sa.Integer(), nullable=True),
        sa.Column("early_start", sa.Date(), nullable=True),
        sa.Column("early_finish", sa.Date(), nullable=True),
        sa.Column("late_start", sa.Date(), nullable=True),
        sa.Column("late_finish", sa.Date(), nullable=True),
        sa.Column("total_float", sa.Integer(), nullable=True),
        sa.Column("free_float", sa.Integer(), nullable=True),
        sa.Column("is_critical", sa.Boolean(), nullable=False),
    )
    op.create_index("idx_schedule_tasks_schedule_id", "schedule_tasks", ["schedule_id"])
    op.create_index("idx_schedule_tasks_parent_id", "schedule_tasks", ["parent_id"])

    op.create_table(
        "schedule_dependencies",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "schedule_id",
            sa.String(),
            sa.ForeignKey("schedules.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "predecessor_task_id",
            sa.String(),
            sa.ForeignKey("schedule_tasks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "successor_task_id",
            sa.String(),
            sa.ForeignKey("schedule_tasks.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "dependency_type",
            sa.Enum("FINISH_TO_START", "FINISH_TO_FINISH", "START_TO_START", "START_TO_FINISH", name="dependencytype"),
            nullable=False,
        ),
        sa.Column("lag_days", sa.Integer(), nullable=False),
    )
    op.create_index("idx_schedule_dependencies_schedule_id", "schedule_dependencies", ["schedule_id"])
    op.create_index(
        "uq_schedule_dependencies_pair",
        "schedule_dependencies",
        ["predecessor_task_id", "successor_task_id"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("uq_schedule_dependencies_pair", table_name="schedule_dependencies")
    op.drop_index("idx_schedule_dependencies_schedule_id", table_name="schedule_dependencies")
    op.drop_table("schedule_dependencies")
    op.drop_index("idx_schedule_tasks_parent_id", table_name="schedule_tasks")
    op.drop_index("idx_schedule_tasks_schedule_id", table_name="schedule_tasks")
    op.drop_table("schedule_tasks")
    op.drop_index("uq_schedules_project_name", table_name="schedules")
    op.drop_index("idx_schedules_project_id", table_name="schedules")
    op.drop_table("schedules")
