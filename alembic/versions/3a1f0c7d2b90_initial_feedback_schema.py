"""initial feedback schema

Revision ID: 3a1f0c7d2b90
Revises:
Create Date: 2026-10-12 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql
from sqlmodel.sql.sqltypes import AutoString


# revision identifiers, used by Alembic.
revision: str = '3a1f0c7d2b90'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _ts() -> sa.types.TypeEngine:
    return sa.DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), 'mysql')


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', _ts(), nullable=False),
        sa.Column('updated_at', _ts(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', AutoString(), primary_key=True),
        sa.Column('email', AutoString(), nullable=False),
        sa.Column('name', AutoString(), nullable=True),
        sa.Column('company', AutoString(), nullable=True),
        sa.Column('hashed_password', AutoString(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('role', sa.Enum('user', 'admin', name='user_role'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'refresh_tokens',
        sa.Column('id', AutoString(), primary_key=True),
        sa.Column('token', AutoString(), nullable=False),
        sa.Column('user_id', AutoString(), nullable=False),
        sa.Column('expires_at', _ts(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_refresh_tokens_id', 'refresh_tokens', ['id'])
    op.create_index('ix_refresh_tokens_token', 'refresh_tokens', ['token'], unique=True)
    op.create_index('ix_refresh_tokens_user_id', 'refresh_tokens', ['user_id'])

    op.create_table(
        'feedbacks',
        sa.Column('id', AutoString(), primary_key=True),
        sa.Column('user_id', AutoString(), nullable=True),
        sa.Column('type', sa.Enum('bug', 'feature', 'improvement', 'other', name='feedback_type'), nullable=False),
        sa.Column(
            'severity',
            sa.Enum('low', 'medium', 'high', 'critical', name='feedback_severity'),
            nullable=False,
        ),
        sa.Column('title', AutoString(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('new', 'in_progress', 'resolved', 'closed', name='feedback_status'),
            nullable=False,
        ),
        sa.Column(
            'priority',
            sa.Enum('low', 'medium', 'high', 'critical', name='feedback_priority'),
            nullable=True,
        ),
        sa.Column('admin_note', sa.Text(), nullable=True),
        sa.Column('linked_issue', AutoString(), nullable=True),
        sa.Column('screenshot', sa.Text(), nullable=True),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False),
        sa.Column('page_url', AutoString(), nullable=False),
        sa.Column('page_title', AutoString(), nullable=True),
        sa.Column('user_agent', AutoString(), nullable=True),
        sa.Column('screen_size', AutoString(), nullable=True),
        sa.Column('device_type', AutoString(), nullable=True),
        sa.Column('viewed_at', _ts(), nullable=True),
        sa.Column('last_user_read_at', _ts(), nullable=True),
        sa.Column('last_admin_read_at', _ts(), nullable=True),
        sa.Column('resolved_at', _ts(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_feedbacks_id', 'feedbacks', ['id'])
    op.create_index('ix_feedbacks_user_id', 'feedbacks', ['user_id'])
    op.create_index('ix_feedbacks_viewed_at', 'feedbacks', ['viewed_at'])

    op.create_table(
        'feedback_messages',
        sa.Column('id', AutoString(), primary_key=True),
        sa.Column('feedback_id', AutoString(), nullable=False),
        sa.Column('author_id', AutoString(), nullable=False),
        sa.Column('author_type', sa.Enum('user', 'admin', name='author_type'), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_feedback_messages_id', 'feedback_messages', ['id'])
    op.create_index('ix_feedback_messages_feedback_id', 'feedback_messages', ['feedback_id'])
    op.create_index('ix_feedback_messages_author_id', 'feedback_messages', ['author_id'])
    # serves the newest-message-per-side lookup of the unread counters
    op.create_index(
        'ix_feedback_messages_thread_author_created',
        'feedback_messages',
        ['feedback_id', 'author_type', 'created_at'],
    )

    op.create_table(
        'notifications',
        sa.Column('id', AutoString(), primary_key=True),
        sa.Column('user_id', AutoString(), nullable=False),
        sa.Column('type', AutoString(), nullable=False),
        sa.Column('title', AutoString(), nullable=False),
        sa.Column('message', AutoString(), nullable=False),
        sa.Column('link', AutoString(), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'])
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_read', 'notifications', ['read'])

    op.create_table(
        'system_settings',
        sa.Column('id', AutoString(), primary_key=True),
        sa.Column('feedback_system_enabled', sa.Boolean(), nullable=False),
        sa.Column('beta_enabled', sa.Boolean(), nullable=False),
        sa.Column('beta_end_date', _ts(), nullable=True),
        sa.Column('max_beta_users', sa.Integer(), nullable=False),
        sa.Column('updated_by', AutoString(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_system_settings_id', 'system_settings', ['id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('system_settings')
    op.drop_table('notifications')
    op.drop_table('feedback_messages')
    op.drop_table('feedbacks')
    op.drop_table('refresh_tokens')
    op.drop_table('users')
