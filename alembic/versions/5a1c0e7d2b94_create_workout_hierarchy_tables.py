"""create workout hierarchy tables

Revision ID: 5a1c0e7d2b94
Revises:
Create Date: 2026-10-19 09:12:04.118532

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa



# revision identifiers, used by Alembic.
revision: str = '5a1c0e7d2b94'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), sa.Identity(always=True), nullable=False),
        sa.Column("clerkId", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("createdAt", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updatedAt", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("clerkId", name="users_clerkId_unique"),
        sa.UniqueConstraint("email", name="users_email_unique"),
    )

    op.create_table(
        "workouts",
        sa.Column("id", sa.Integer(), sa.Identity(always=True), nullable=False),
        sa.Column("userId", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("startedAt", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("completedAt", sa.DateTime(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("createdAt", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updatedAt", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["userId"], ["users.id"], name="workouts_userId_users_id_fk", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("workouts_user_started", "workouts", ["userId", "startedAt"], unique=False)

    op.create_table(
        "exercises",
        sa.Column("id", sa.Integer(), sa.Identity(always=True), nullable=False),
        sa.Column("workoutId", sa.Integer(), nullable=False),
        sa.Column("exerciseName", sa.String(length=255), nullable=False),
        sa.Column("exerciseOrder", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("createdAt", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updatedAt", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(
            ["workoutId"], ["workouts.id"], name="exercises_workoutId_workouts_id_fk", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("exercises_workout_order", "exercises", ["workoutId", "exerciseOrder"], unique=False)

    op.create_table(
        "sets",
        sa.Column("id", sa.Integer(), sa.Identity(always=True), nullable=False),
        sa.Column("exerciseId", sa.Integer(), nullable=False),
        sa.Column("setNumber", sa.Integer(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("weight", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("weightUnit", sa.String(length=10), server_default=sa.text("'lbs'"), nullable=False),
        sa.Column("rpe", sa.Integer(), nullable=True),
        sa.Column("rir", sa.Integer(), nullable=True),
        sa.Column("isWarmup", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("createdAt", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(
            ["exerciseId"], ["exercises.id"], name="sets_exerciseId_exercises_id_fk", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("sets_exercise_order", "sets", ["exerciseId", "setNumber"], unique=False)


def downgrade() -> None:
    op.drop_index("sets_exercise_order", table_name="sets")
    op.drop_table("sets")
    op.drop_index("exercises_workout_order", table_name="exercises")
    op.drop_table("exercises")
    op.drop_index("workouts_user_started", table_name="workouts")
    op.drop_table("workouts")
    op.drop_table("users")
