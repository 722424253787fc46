"""Add summary_cache table

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18 09:00:00.000000

This migration creates the summary cache keyed by the SHA-256
fingerprint of the source URL.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create summary_cache table."""
    op.create_table(
        'summary_cache',
        sa.Column('url_hash', sa.String(64), primary_key=True),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('last_modified', sa.DateTime(timezone=True), nullable=False),
        sa.Column('summary', sa.Text(), nullable=False),
        sa.Column('expire_at', sa.DateTime(timezone=True), nullable=False),
    )

    # Purge queries scan by expiry
    op.create_index('ix_summary_cache_expire_at', 'summary_cache', ['expire_at'])


def downgrade() -> None:
    """Drop summary_cache table."""
    op.drop_index('ix_summary_cache_expire_at', table_name='summary_cache')
    op.drop_table('summary_cache')
