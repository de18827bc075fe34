"""create users, session_requests and notifications tables

Revision ID: 3c1d9a7e5b20
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c1d9a7e5b20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users (learners and tutors)
    op.create_table('users',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('username', sa.String(length=100), nullable=False),
    sa.Column('username_normalized', sa.String(length=100), nullable=False),
    sa.Column('password', sa.String(length=255), nullable=False),
    sa.Column('date_created', sa.DateTime(timezone=True), nullable=False),
    sa.Column('first_name', sa.String(length=100), nullable=False),
    sa.Column('last_name', sa.String(length=100), nullable=False),
    sa.Column('bio', sa.Text(), nullable=False),
    sa.Column('role', sa.Enum('learner', 'tutor', name='user_role', native_enum=False, length=20), nullable=False),
    sa.Column('is_profile_complete', sa.Boolean(), nullable=False),
    sa.Column('selected_subjects', sa.JSON(), nullable=False),
    sa.Column('hourly_rate', sa.Float(), nullable=True),
    sa.Column('years_experience', sa.Integer(), nullable=True),
    sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('email'),
    sa.UniqueConstraint('username_normalized')
    )
    op.create_index('idx_users_role', 'users', ['role'], unique=False)

    # Booking requests
    op.create_table('session_requests',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('student_id', sa.Uuid(), nullable=False),
    sa.Column('tutor_id', sa.Uuid(), nullable=False),
    sa.Column('subject', sa.String(length=100), nullable=False),
    sa.Column('requested_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('duration_minutes', sa.Integer(), nullable=False),
    sa.Column('message', sa.Text(), nullable=False),
    sa.Column('hourly_rate', sa.Float(), nullable=False),
    sa.Column('status', sa.Enum('pending', 'accepted', 'rejected', name='session_status', native_enum=False, length=20), nullable=False),
    sa.Column('date_created', sa.DateTime(timezone=True), nullable=False),
    sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
    sa.ForeignKeyConstraint(['student_id'], ['users.id']),
    sa.ForeignKeyConstraint(['tutor_id'], ['users.id']),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_session_requests_student', 'session_requests', ['student_id'], unique=False)
    op.create_index('idx_session_requests_tutor_status', 'session_requests', ['tutor_id', 'status'], unique=False)
    op.create_index('idx_session_requests_requested_at', 'session_requests', ['requested_at'], unique=False)

    # Notifications
    op.create_table('notifications',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('title', sa.String(length=200), nullable=False),
    sa.Column('message', sa.Text(), nullable=False),
    sa.Column('type', sa.Enum('session_request', 'session_accepted', 'session_rejected', 'general', name='notification_type', native_enum=False, length=30), nullable=False),
    sa.Column('recipient_email', sa.String(length=255), nullable=False),
    sa.Column('related_session_id', sa.Uuid(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('is_read', sa.Boolean(), nullable=False),
    sa.ForeignKeyConstraint(['related_session_id'], ['session_requests.id']),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_notifications_recipient_read', 'notifications', ['recipient_email', 'is_read'], unique=False)
    op.create_index('idx_notifications_related_session', 'notifications', ['related_session_id'], unique=False)


def downgrade() -> None:
    # Drop indexes
    op.drop_index('idx_notifications_related_session', table_name='notifications')
    op.drop_index('idx_notifications_recipient_read', table_name='notifications')
    op.drop_index('idx_session_requests_requested_at', table_name='session_requests')
    op.drop_index('idx_session_requests_tutor_status', table_name='session_requests')
    op.drop_index('idx_session_requests_student', table_name='session_requests')
    op.drop_index('idx_users_role', table_name='users')

    # Drop tables
    op.drop_table('notifications')
    op.drop_table('session_requests')
    op.drop_table('users')
