"""Initial schema - content and promotions

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-19 00:00:00.000000

Creates the three content tables (tracks, bundles, kits) and the
append-only promotions ledger.
Based on the SQLAlchemy models defined in database/models/.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


CONTENT_TABLES = ('tracks', 'bundles', 'kits')


def _content_columns():
    return [
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('owner_id', sa.Integer, nullable=True),
        sa.Column('title', sa.String(255), nullable=False, server_default=''),
        sa.Column('preview_url', sa.Text, nullable=True),
        sa.Column('genre', sa.String(50), nullable=True),
        sa.Column('tags', sa.Text, nullable=True),
        sa.Column('play_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('like_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('approved', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('rejected', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    ]


def upgrade() -> None:
    # ==================================================
    # CONTENT
    # ==================================================

    for table in CONTENT_TABLES:
        op.create_table(table, *_content_columns())
        op.create_index(f'ix_{table}_owner_id', table, ['owner_id'])
        op.create_index(f'ix_{table}_created_at', table, ['created_at'])
        op.create_index(f'ix_{table}_genre', table, ['genre'])
        op.create_index(f'idx_{table}_moderation_created', table, ['approved', 'rejected', 'created_at'])

    # ==================================================
    # PROMOTIONS
    # ==================================================

    op.create_table(
        'promotions',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('target_type', sa.String(20), nullable=False),
        sa.Column('target_id', sa.Integer, nullable=False),
        sa.Column('tier', sa.String(20), nullable=False, server_default='standard'),
        sa.Column('start_date', sa.DateTime, nullable=False),
        sa.Column('duration_days', sa.Integer, nullable=False),
        sa.Column('end_date', sa.DateTime, nullable=False),
        sa.Column('owner_id', sa.Integer, nullable=True),
        sa.Column(
            'extends_id', sa.Integer,
            sa.ForeignKey('promotions.id', ondelete='SET NULL'),
            nullable=True
        ),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('ix_promotions_owner_id', 'promotions', ['owner_id'])
    op.create_index('ix_promotions_extends_id', 'promotions', ['extends_id'])
    op.create_index('ix_promotions_created_at', 'promotions', ['created_at'])
    op.create_index('idx_promotions_target', 'promotions', ['target_type', 'target_id'])
    op.create_index('idx_promotions_window', 'promotions', ['target_type', 'start_date', 'end_date'])


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('promotions')
    for table in reversed(CONTENT_TABLES):
        op.drop_table(table)
