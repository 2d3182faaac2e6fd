"""Initial schema: users, containers, tasks, task_assignees, tracked_sessions.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

tracked_sessions carries a partial unique index on user_id WHERE is_active:
one active time-tracking session per user across all tasks.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False, server_default=''),
        sa.Column('email', sa.String(320), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        'containers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('title', sa.String(50), nullable=False),
        sa.Column('color', sa.String(7), nullable=False, server_default='#3B82F6'),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_containers_owner_default', 'containers', ['owner_id', 'is_default'])
    op.create_index(
        'ux_containers_default_title', 'containers', ['title'],
        unique=True, postgresql_where=sa.text('is_default'),
    )
    op.create_table(
        'tasks',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('container_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('containers.id'), nullable=False),
        sa.Column('priority', sa.String(10), nullable=False, server_default='Normal'),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('labels', sa.JSON(), nullable=False),
        sa.Column('sort_index', sa.Float(), nullable=False),
        sa.Column('creator_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('time_tracked', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('attachments', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_tasks_container_sort', 'tasks', ['container_id', 'sort_index'])
    op.create_index('ix_tasks_creator', 'tasks', ['creator_id'])
    op.create_index('ix_tasks_due_date', 'tasks', ['due_date'])
    op.create_table(
        'task_assignees',
        sa.Column(
            'task_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('tasks.id', ondelete='CASCADE'), primary_key=True,
        ),
        sa.Column(
            'user_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id'), primary_key=True,
        ),
    )
    op.create_index('ix_task_assignees_user_id', 'task_assignees', ['user_id'])
    op.create_table(
        'tracked_sessions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'task_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index(
        'ux_tracked_sessions_one_active_per_user', 'tracked_sessions', ['user_id'],
        unique=True, postgresql_where=sa.text('is_active'),
    )
    op.create_index('ix_tracked_sessions_task_user', 'tracked_sessions', ['task_id', 'user_id'])


def downgrade() -> None:
    op.drop_table('tracked_sessions')
    op.drop_table('task_assignees')
    op.drop_table('tasks')
    op.drop_table('containers')
    op.drop_table('users')
