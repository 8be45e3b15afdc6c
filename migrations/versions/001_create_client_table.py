"""Create client table for mailing entries.

Changes:
- Create client table (one row per recipient/message of a mailing)
- Unique constraint on the full payload + insert_time (duplicate inserts fail)
- Indexes on mailing_id (send) and insert_time (retention sweeps)

Revision ID: 001_create_client_table
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_create_client_table'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create client table and its indexes."""
    print("  Creating client table...")

    op.create_table(
        'client',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('mailing_id', sa.Integer(), nullable=False),
        sa.Column('insert_time', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'email', 'title', 'content', 'mailing_id', 'insert_time',
            name='uq_client_payload',
        ),
    )
    op.create_index('ix_client_mailing_id', 'client', ['mailing_id'], unique=False)
    op.create_index('ix_client_insert_time', 'client', ['insert_time'], unique=False)

    print("  Created client table with 2 indexes")


def downgrade() -> None:
    """Drop client table."""
    print("  Dropping client table...")
    op.drop_index('ix_client_insert_time', table_name='client')
    op.drop_index('ix_client_mailing_id', table_name='client')
    op.drop_table('client')
