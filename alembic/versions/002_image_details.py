"""Add location, historical period and storage path to images

Revision ID: 002_image_details
Revises: 001_initial
Create Date: 2026-10-14

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002_image_details'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Caption, alt text, description and cultural context live in translations
    op.add_column('images', sa.Column('location', sa.String(255), nullable=True))
    op.add_column('images', sa.Column('historical_period', sa.String(100), nullable=True))
    op.add_column('images', sa.Column('storage_path', sa.Text(), nullable=True))


def downgrade() -> None:
    op.drop_column('images', 'storage_path')
    op.drop_column('images', 'historical_period')
    op.drop_column('images', 'location')
