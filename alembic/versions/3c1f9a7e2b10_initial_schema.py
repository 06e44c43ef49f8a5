"""initial_schema

Revision ID: 3c1f9a7e2b10
Revises:
Create Date: 2026-10-19 09:12:44.501233

"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3c1f9a7e2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('last_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('role', sa.String(20), nullable=False, server_default='apprenant'),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
    op.create_index(op.f('ix_users_is_active'), 'users', ['is_active'], unique=False)

    op.create_table(
        'sites',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(20), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('region', sa.String(100), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_sites_code'), 'sites', ['code'], unique=True)
    op.create_index(op.f('ix_sites_name'), 'sites', ['name'], unique=False)
    op.create_index(op.f('ix_sites_active'), 'sites', ['active'], unique=False)

    op.create_table(
        'training_sessions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('status', sa.String(30), nullable=False, server_default='planned'),
        sa.Column('site_id', sa.Uuid(), sa.ForeignKey('sites.id'), nullable=False),
        sa.Column('location', sa.String(200), nullable=False),
        sa.Column('start_datetime', sa.DateTime(), nullable=False),
        sa.Column('end_datetime', sa.DateTime(), nullable=False),
        sa.Column('duration_hours', sa.Integer(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default='20'),
        sa.Column('urgent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_by', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('validated_hr_at', sa.DateTime(), nullable=True),
        sa.Column('validated_hr_by', sa.Uuid(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('validated_hse_at', sa.DateTime(), nullable=True),
        sa.Column('validated_hse_by', sa.Uuid(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "status IN ('planned', 'awaiting_hse', 'validated_hr', 'validated_hse', "
            "'ongoing', 'completed', 'cancelled')",
            name='ck_training_sessions_status',
        ),
        sa.CheckConstraint(
            "type = 'HSE' OR validated_hse_at IS NULL",
            name='ck_training_sessions_hse_stamp_only_for_hse',
        ),
    )
    op.create_index(op.f('ix_training_sessions_type'), 'training_sessions', ['type'])
    op.create_index(op.f('ix_training_sessions_status'), 'training_sessions', ['status'])
    op.create_index(op.f('ix_training_sessions_site_id'), 'training_sessions', ['site_id'])
    op.create_index(
        op.f('ix_training_sessions_start_datetime'), 'training_sessions', ['start_datetime']
    )
    op.create_index(op.f('ix_training_sessions_created_by'), 'training_sessions', ['created_by'])

    op.create_table(
        'session_audit_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('session_id', sa.Uuid(), sa.ForeignKey('training_sessions.id'), nullable=False),
        sa.Column('changed_by', sa.String(255), nullable=False),
        sa.Column('changed_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('action', sa.String(20), nullable=False),
        sa.Column('changed_fields', sa.JSON(), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=False),
        sa.Column('new_values', sa.JSON(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_session_audit_logs_session_id'), 'session_audit_logs', ['session_id']
    )

    op.create_table(
        'attendances',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('session_id', sa.Uuid(), sa.ForeignKey('training_sessions.id'), nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('mode', sa.String(20), nullable=False, server_default='manual'),
        sa.Column('checkin_at', sa.DateTime(), nullable=True),
        sa.Column('checkout_at', sa.DateTime(), nullable=True),
        sa.Column('absent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('late', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('hours_attended', sa.Numeric(5, 2), nullable=True),
        sa.Column('marked_by', sa.Uuid(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'user_id', name='uq_attendance_session_user'),
    )
    op.create_index(op.f('ix_attendances_session_id'), 'attendances', ['session_id'])
    op.create_index(op.f('ix_attendances_user_id'), 'attendances', ['user_id'])


def downgrade() -> None:
    op.drop_index(op.f('ix_attendances_user_id'), table_name='attendances')
    op.drop_index(op.f('ix_attendances_session_id'), table_name='attendances')
    op.drop_table('attendances')

    op.drop_index(op.f('ix_session_audit_logs_session_id'), table_name='session_audit_logs')
    op.drop_table('session_audit_logs')

    op.drop_index(op.f('ix_training_sessions_created_by'), table_name='training_sessions')
    op.drop_index(op.f('ix_training_sessions_start_datetime'), table_name='training_sessions')
    op.drop_index(op.f('ix_training_sessions_site_id'), table_name='training_sessions')
    op.drop_index(op.f('ix_training_sessions_status'), table_name='training_sessions')
    op.drop_index(op.f('ix_training_sessions_type'), table_name='training_sessions')
    op.drop_table('training_sessions')

    op.drop_index(op.f('ix_sites_active'), table_name='sites')
    op.drop_index(op.f('ix_sites_name'), table_name='sites')
    op.drop_index(op.f('ix_sites_code'), table_name='sites')
    op.drop_table('sites')

    op.drop_index(op.f('ix_users_is_active'), table_name='users')
    op.drop_index(op.f('ix_users_role'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
