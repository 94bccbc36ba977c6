"""create pages and activities tables

Revision ID: 3b7e1c9d2a40
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3b7e1c9d2a40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('pages',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('name1', sa.String(length=50), nullable=False),
        sa.Column('name2', sa.String(length=50), nullable=True),
        sa.Column('occasion', sa.String(length=100), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('photo_urls', sa.JSON(), nullable=False),
        sa.Column('plan', sa.String(length=10), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False, server_default='pending_payment'),
        sa.Column('billing_id', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('activated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_pages_id', 'pages', ['id'])
    op.create_index('ix_pages_slug', 'pages', ['slug'], unique=True)
    op.create_index('ix_pages_billing_id', 'pages', ['billing_id'], unique=True)
    op.create_index('ix_pages_plan', 'pages', ['plan'])
    op.create_index('ix_pages_status', 'pages', ['status'])

    op.create_table('activities',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('prompt', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('emoji', sa.String(length=16), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_activities_type', 'activities', ['type'])


def downgrade() -> None:
    op.drop_index('ix_activities_type', table_name='activities')
    op.drop_table('activities')

    op.drop_index('ix_pages_status', table_name='pages')
    op.drop_index('ix_pages_plan', table_name='pages')
    op.drop_index('ix_pages_billing_id', table_name='pages')
    op.drop_index('ix_pages_slug', table_name='pages')
    op.drop_index('ix_pages_id', table_name='pages')
    op.drop_table('pages')
