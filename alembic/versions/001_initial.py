"""Initial database schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    # Enable extensions
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # Tasks table (tenant-scoped)
    op.create_table(
        'tasks',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('tenant_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False, server_default='todo'),
        sa.Column('priority', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('assignee_id', sa.UUID(), nullable=True),
        sa.Column('due_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tasks_tenant_id', 'tasks', ['tenant_id'])
    op.create_index('ix_tasks_assignee_id', 'tasks', ['assignee_id'])
    op.create_index('ix_tasks_tenant_status', 'tasks', ['tenant_id', 'status'])
    op.create_index(
        'ix_tasks_tenant_created_live',
        'tasks',
        ['tenant_id', sa.text('created_at DESC'), 'id'],
        postgresql_where=sa.text('deleted_at IS NULL'),
    )

    # Insurance policies table (organization-scoped)
    op.create_table(
        'insurance_policies',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('organization_id', sa.UUID(), nullable=False),
        sa.Column('patient_id', sa.UUID(), nullable=False),
        sa.Column('policy_number', sa.String(64), nullable=False),
        sa.Column('payer_name', sa.String(255), nullable=False),
        sa.Column('group_number', sa.String(64), nullable=True),
        sa.Column('plan_type', sa.String(50), nullable=False),
        sa.Column('policy_status', sa.String(32), nullable=False, server_default='pending'),
        sa.Column('coverage_start_date', sa.Date(), nullable=False),
        sa.Column('coverage_end_date', sa.Date(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('organization_id', 'policy_number', name='uq_policy_org_number'),
    )
    op.create_index('ix_insurance_policies_organization_id', 'insurance_policies', ['organization_id'])
    op.create_index('ix_insurance_policies_patient_id', 'insurance_policies', ['patient_id'])

    # Reminders table (owner-scoped)
    op.create_table(
        'reminders',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('owner_id', sa.UUID(), nullable=False),
        sa.Column('reminder_type', sa.String(50), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(32), nullable=False, server_default='pending'),
        sa.Column('scheduled_for', sa.DateTime(timezone=True), nullable=False),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('acknowledged_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('delivery_uri', sa.String(1024), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reminders_owner_id', 'reminders', ['owner_id'])
    op.create_index('ix_reminders_owner_scheduled', 'reminders', ['owner_id', 'scheduled_for', 'id'])

    # Members table (tenant-scoped)
    op.create_table(
        'members',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('uuid_generate_v4()')),
        sa.Column('tenant_id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('role', sa.String(50), nullable=False, server_default='member'),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('avatar_storage_uri', sa.String(1024), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'email', name='uq_member_tenant_email'),
    )
    op.create_index('ix_members_tenant_id', 'members', ['tenant_id'])


def downgrade() -> None:
    op.drop_table('members')
    op.drop_table('reminders')
    op.drop_table('insurance_policies')
    op.drop_table('tasks')
