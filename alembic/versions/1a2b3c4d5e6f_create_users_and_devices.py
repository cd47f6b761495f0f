"""create_users_and_devices

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-19

Adds:
- users table for registered accounts
- devices table (state stored as its ordinal: 0 inactive, 1 available, 2 in-use)

Sessions are kept in memory and have no table.
"""
from alembic import op
import sqlalchemy as sa

revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'devices',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('brand', sa.String(255), nullable=False),
        sa.Column('state', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('state IN (0, 1, 2)', name='ck_devices_state'),
    )
    op.create_index('idx_devices_brand', 'devices', ['brand'], unique=False)
    op.create_index('idx_devices_state', 'devices', ['state'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_devices_state', table_name='devices')
    op.drop_index('idx_devices_brand', table_name='devices')
    op.drop_table('devices')
    op.drop_table('users')
