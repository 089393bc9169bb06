"""Initial asset custody schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Reference data
    op.create_table(
        'departments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name_native', sa.String(255), nullable=False),
        sa.Column('name_alt', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_departments')
    )
    op.create_index('ix_departments_id', 'departments', ['id'], unique=False)
    op.create_index('ix_departments_name_native', 'departments', ['name_native'], unique=False)
    op.create_index('ix_departments_name_alt', 'departments', ['name_alt'], unique=False)

    op.create_table(
        'asset_locations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_asset_locations')
    )
    op.create_index('ix_asset_locations_id', 'asset_locations', ['id'], unique=False)
    op.create_index('ix_asset_locations_name', 'asset_locations', ['name'], unique=False)

    op.create_table(
        'statuses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('value', sa.String(100), nullable=False),
        sa.Column('label', sa.String(255), nullable=False),
        sa.Column('color', sa.String(20), nullable=False, server_default='#adb5bd'),
        sa.PrimaryKeyConstraint('id', name='pk_statuses')
    )
    op.create_index('ix_statuses_id', 'statuses', ['id'], unique=False)
    op.create_index('ix_statuses_value', 'statuses', ['value'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='User'),
        sa.Column('department_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id'], name='fk_users_department_id_departments'),
        sa.PrimaryKeyConstraint('id', name='pk_users')
    )
    op.create_index('ix_users_id', 'users', ['id'], unique=False)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_department_id', 'users', ['department_id'], unique=False)

    op.create_table(
        'system_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key_name', sa.String(100), nullable=False),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_system_settings'),
        sa.UniqueConstraint('key_name', name='uq_system_settings_key_name')
    )

    # Registry
    op.create_table(
        'assets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(100), nullable=False),
        sa.Column('inventory_number', sa.String(100), nullable=True),
        sa.Column('serial_number', sa.String(100), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('department_id', sa.Integer(), nullable=True),
        sa.Column('location_id', sa.Integer(), nullable=True),
        sa.Column('room', sa.String(100), nullable=True),
        sa.Column('owner_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(100), nullable=True),
        sa.Column('image_ref', sa.String(500), nullable=True),
        sa.Column('acquired_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id'], name='fk_assets_department_id_departments'),
        sa.ForeignKeyConstraint(['location_id'], ['asset_locations.id'], name='fk_assets_location_id_asset_locations'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_assets_owner_id_users'),
        sa.PrimaryKeyConstraint('id', name='pk_assets')
    )
    op.create_index('ix_assets_id', 'assets', ['id'], unique=False)
    op.create_index('ix_assets_code', 'assets', ['code'], unique=True)
    op.create_index('ix_assets_inventory_number', 'assets', ['inventory_number'], unique=False)
    op.create_index('ix_assets_department_id', 'assets', ['department_id'], unique=False)
    op.create_index('ix_assets_location_id', 'assets', ['location_id'], unique=False)
    op.create_index('ix_assets_status', 'assets', ['status'], unique=False)

    # Workflows. asset_id carries no foreign key: history survives asset deletion.
    op.create_table(
        'asset_transfers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('asset_id', sa.Integer(), nullable=False),
        sa.Column('from_department_id', sa.Integer(), nullable=True),
        sa.Column('to_department_id', sa.Integer(), nullable=False),
        sa.Column('requested_by', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('requested_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['from_department_id'], ['departments.id'], name='fk_asset_transfers_from_department_id_departments'),
        sa.ForeignKeyConstraint(['to_department_id'], ['departments.id'], name='fk_asset_transfers_to_department_id_departments'),
        sa.ForeignKeyConstraint(['requested_by'], ['users.id'], name='fk_asset_transfers_requested_by_users'),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id'], name='fk_asset_transfers_approved_by_users'),
        sa.PrimaryKeyConstraint('id', name='pk_asset_transfers')
    )
    op.create_index('ix_asset_transfers_id', 'asset_transfers', ['id'], unique=False)
    op.create_index('ix_asset_transfers_asset_id', 'asset_transfers', ['asset_id'], unique=False)
    op.create_index('ix_asset_transfers_from_department_id', 'asset_transfers', ['from_department_id'], unique=False)
    op.create_index('ix_asset_transfers_to_department_id', 'asset_transfers', ['to_department_id'], unique=False)
    op.create_index('ix_asset_transfers_status', 'asset_transfers', ['status'], unique=False)
    op.create_index('ix_asset_transfers_asset_requested', 'asset_transfers', ['asset_id', 'requested_at'], unique=False)
    # At most one pending transfer per asset
    op.create_index(
        'uq_asset_transfers_one_pending',
        'asset_transfers',
        ['asset_id'],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
        sqlite_where=sa.text("status = 'pending'"),
    )

    op.create_table(
        'asset_audits',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('asset_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('department_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(100), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('checked_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('confirmed', sa.SmallInteger(), nullable=False, server_default=sa.text('0')),
        sa.Column('confirmed_by', sa.Integer(), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_asset_audits_user_id_users'),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id'], name='fk_asset_audits_department_id_departments'),
        sa.ForeignKeyConstraint(['confirmed_by'], ['users.id'], name='fk_asset_audits_confirmed_by_users'),
        sa.PrimaryKeyConstraint('id', name='pk_asset_audits')
    )
    op.create_index('ix_asset_audits_id', 'asset_audits', ['id'], unique=False)
    op.create_index('ix_asset_audits_asset_id', 'asset_audits', ['asset_id'], unique=False)
    op.create_index('ix_asset_audits_department_id', 'asset_audits', ['department_id'], unique=False)
    op.create_index('ix_asset_audits_confirmed', 'asset_audits', ['confirmed'], unique=False)
    # Stable paging order
    op.create_index('ix_asset_audits_checked', 'asset_audits', ['checked_at', 'id'], unique=False)
    # At most one unconfirmed audit per asset
    op.create_index(
        'uq_asset_audits_one_unconfirmed',
        'asset_audits',
        ['asset_id'],
        unique=True,
        postgresql_where=sa.text('confirmed = 0'),
        sqlite_where=sa.text('confirmed = 0'),
    )

    op.create_table(
        'asset_edit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('asset_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('edited_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_asset_edit_logs_user_id_users'),
        sa.PrimaryKeyConstraint('id', name='pk_asset_edit_logs')
    )
    op.create_index(
        'ix_asset_edit_logs_user_asset_time',
        'asset_edit_logs',
        ['user_id', 'asset_id', 'edited_at'],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index('ix_asset_edit_logs_user_asset_time', table_name='asset_edit_logs')
    op.drop_table('asset_edit_logs')

    op.drop_index('uq_asset_audits_one_unconfirmed', table_name='asset_audits')
    op.drop_index('ix_asset_audits_checked', table_name='asset_audits')
    op.drop_index('ix_asset_audits_confirmed', table_name='asset_audits')
    op.drop_index('ix_asset_audits_department_id', table_name='asset_audits')
    op.drop_index('ix_asset_audits_asset_id', table_name='asset_audits')
    op.drop_index('ix_asset_audits_id', table_name='asset_audits')
    op.drop_table('asset_audits')

    op.drop_index('uq_asset_transfers_one_pending', table_name='asset_transfers')
    op.drop_index('ix_asset_transfers_asset_requested', table_name='asset_transfers')
    op.drop_index('ix_asset_transfers_status', table_name='asset_transfers')
    op.drop_index('ix_asset_transfers_to_department_id', table_name='asset_transfers')
    op.drop_index('ix_asset_transfers_from_department_id', table_name='asset_transfers')
    op.drop_index('ix_asset_transfers_asset_id', table_name='asset_transfers')
    op.drop_index('ix_asset_transfers_id', table_name='asset_transfers')
    op.drop_table('asset_transfers')

    op.drop_index('ix_assets_status', table_name='assets')
    op.drop_index('ix_assets_location_id', table_name='assets')
    op.drop_index('ix_assets_department_id', table_name='assets')
    op.drop_index('ix_assets_inventory_number', table_name='assets')
    op.drop_index('ix_assets_code', table_name='assets')
    op.drop_index('ix_assets_id', table_name='assets')
    op.drop_table('assets')

    op.drop_table('system_settings')

    op.drop_index('ix_users_department_id', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')

    op.drop_index('ix_statuses_value', table_name='statuses')
    op.drop_index('ix_statuses_id', table_name='statuses')
    op.drop_table('statuses')

    op.drop_index('ix_asset_locations_name', table_name='asset_locations')
    op.drop_index('ix_asset_locations_id', table_name='asset_locations')
    op.drop_table('asset_locations')

    op.drop_index('ix_departments_name_alt', table_name='departments')
    op.drop_index('ix_departments_name_native', table_name='departments')
    op.drop_index('ix_departments_id', table_name='departments')
    op.drop_table('departments')
