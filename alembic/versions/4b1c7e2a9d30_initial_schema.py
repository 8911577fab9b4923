"""Initial schema

Revision ID: 4b1c7e2a9d30
Revises:
Create Date: 2026-10-17 09:12:44.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b1c7e2a9d30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True):
    columns = [sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False)]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('encrypted_password', sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('year_built', sa.Integer(), nullable=False),
        sa.Column('area', sa.Float(), nullable=False),
        sa.Column('heating_type', sa.String(), nullable=False),
        sa.Column('floors', sa.Integer(), nullable=False),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_properties_id', 'properties', ['id'])
    op.create_index('ix_properties_user_id', 'properties', ['user_id'])

    op.create_table(
        'property_access',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column(
            'role',
            sa.Enum('owner', 'admin', 'edit', 'view', name='access_role', native_enum=False),
            nullable=False,
        ),
        sa.Column('invite_email', sa.String(), nullable=True),
        sa.Column('invite_accepted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('invited_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('accepted_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_property_access_id', 'property_access', ['id'])
    op.create_index('ix_property_access_property_id', 'property_access', ['property_id'])
    op.create_index('ix_property_access_user_id', 'property_access', ['user_id'])
    op.create_index('ix_property_access_invite_email', 'property_access', ['invite_email'])

    op.create_table(
        'maintenance_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('cost', sa.Float(), nullable=False),
        sa.Column('provider', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_maintenance_logs_id', 'maintenance_logs', ['id'])
    op.create_index('ix_maintenance_logs_property_id', 'maintenance_logs', ['property_id'])

    op.create_table(
        'recurring_tasks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('frequency', sa.String(), nullable=False),
        sa.Column('priority', sa.String(), nullable=False),
        sa.Column('estimated_cost', sa.String(), nullable=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('next_due_date', sa.Date(), nullable=False),
        sa.Column('last_generated_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_recurring_tasks_id', 'recurring_tasks', ['id'])
    op.create_index('ix_recurring_tasks_property_id', 'recurring_tasks', ['property_id'])

    op.create_table(
        'planned_tasks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column(
            'recurring_task_id',
            sa.Integer(),
            sa.ForeignKey('recurring_tasks.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('priority', sa.String(), nullable=False),
        sa.Column('estimated_cost', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('recurring_task_id', 'due_date', name='uq_planned_tasks_recurring_due'),
    )
    op.create_index('ix_planned_tasks_id', 'planned_tasks', ['id'])
    op.create_index('ix_planned_tasks_property_id', 'planned_tasks', ['property_id'])
    op.create_index('ix_planned_tasks_recurring_task_id', 'planned_tasks', ['recurring_task_id'])

    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('log_id', sa.Integer(), sa.ForeignKey('maintenance_logs.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('data', sa.Text(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('size', sa.Integer(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_documents_id', 'documents', ['id'])
    op.create_index('ix_documents_property_id', 'documents', ['property_id'])

    op.create_table(
        'appliances',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.id'), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('model_number', sa.String(), nullable=True),
        sa.Column('year_installed', sa.Integer(), nullable=False),
        sa.Column('month_installed', sa.Integer(), nullable=False),
        sa.Column('manual_id', sa.Integer(), sa.ForeignKey('documents.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_appliances_id', 'appliances', ['id'])
    op.create_index('ix_appliances_property_id', 'appliances', ['property_id'])

    op.create_table(
        'warranties',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('appliance_id', sa.Integer(), sa.ForeignKey('appliances.id'), nullable=False),
        sa.Column('provider', sa.String(), nullable=False),
        sa.Column('expiration_date', sa.Date(), nullable=False),
        sa.Column('coverage_details', sa.Text(), nullable=True),
        sa.Column('document_id', sa.Integer(), sa.ForeignKey('documents.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('appliance_id', name='uq_warranties_appliance_id'),
    )
    op.create_index('ix_warranties_id', 'warranties', ['id'])

    op.create_table(
        'seasonal_checklists',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.id'), nullable=False),
        sa.Column('season', sa.String(), nullable=False),
        sa.Column('items', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('property_id', 'season', name='uq_seasonal_checklists_property_season'),
    )
    op.create_index('ix_seasonal_checklists_id', 'seasonal_checklists', ['id'])
    op.create_index('ix_seasonal_checklists_property_id', 'seasonal_checklists', ['property_id'])


def downgrade() -> None:
    for table in (
        'seasonal_checklists',
        'warranties',
        'appliances',
        'documents',
        'planned_tasks',
        'recurring_tasks',
        'maintenance_logs',
        'property_access',
        'properties',
        'users',
    ):
        op.drop_table(table)
