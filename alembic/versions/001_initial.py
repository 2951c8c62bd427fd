"""Initial migration

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-12

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LANGUAGES = [
    ('en', 'English', 'English'),
    ('hi', 'हिन्दी', 'Hindi'),
    ('bn', 'বাংলা', 'Bengali'),
    ('te', 'తెలుగు', 'Telugu'),
    ('mr', 'मराठी', 'Marathi'),
    ('ta', 'தமிழ்', 'Tamil'),
    ('gu', 'ગુજરાતી', 'Gujarati'),
    ('kn', 'ಕನ್ನಡ', 'Kannada'),
    ('ml', 'മലയാളം', 'Malayalam'),
    ('or', 'ଓଡ଼ିଆ', 'Odia'),
    ('pa', 'ਪੰਜਾਬੀ', 'Punjabi'),
    ('as', 'অসমীয়া', 'Assamese'),
    ('ks', 'कॉशुर', 'Kashmiri'),
    ('kok', 'कोंकणी', 'Konkani'),
    ('mni', 'মৈতৈলোন্', 'Manipuri'),
    ('ne', 'नेपाली', 'Nepali'),
    ('sa', 'संस्कृतम्', 'Sanskrit'),
    ('sd', 'سنڌي', 'Sindhi'),
    ('ur', 'اردو', 'Urdu'),
    ('brx', 'बड़ो', 'Bodo'),
    ('sat', 'ᱥᱟᱱᱛᱟᱲᱤ', 'Santhali'),
    ('mai', 'मैथिली', 'Maithili'),
    ('doi', 'डोगरी', 'Dogri'),
]


def upgrade() -> None:
    # Create languages table
    languages = op.create_table(
        'languages',
        sa.Column('code', sa.String(10), primary_key=True),
        sa.Column('native_name', sa.String(100), nullable=False),
        sa.Column('english_name', sa.String(100), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.bulk_insert(
        languages,
        [{'code': c, 'native_name': n, 'english_name': e, 'is_active': True} for c, n, e in LANGUAGES],
    )

    # Create cities table
    op.create_table(
        'cities',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('slug', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('state', sa.String(100), nullable=False, index=True),
        sa.Column('region', sa.String(50), nullable=False, index=True),
        sa.Column('preview_image_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # Create heritage_items table
    op.create_table(
        'heritage_items',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('city_id', postgresql.UUID(as_uuid=False), sa.ForeignKey('cities.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('category', sa.String(50), nullable=False, index=True),
        sa.Column('historical_period', sa.String(100), nullable=True),
        sa.Column('thumbnail_image_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # Create translations table
    op.create_table(
        'translations',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('language_code', sa.String(10), sa.ForeignKey('languages.code', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('field_name', sa.String(50), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint(
            'entity_type', 'entity_id', 'language_code', 'field_name',
            name='uq_translations_entity_language_field',
        ),
    )

    # Create images table
    op.create_table(
        'images',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('heritage_id', postgresql.UUID(as_uuid=False), sa.ForeignKey('heritage_items.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('thumbnail_url', sa.Text(), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('display_order >= 0', name='ck_images_display_order_non_negative'),
    )

    # Create indexes
    op.create_index('idx_heritage_city_category', 'heritage_items', ['city_id', 'category'])
    op.create_index('idx_translations_entity', 'translations', ['entity_type', 'entity_id', 'language_code'])
    op.create_index('idx_images_heritage_order', 'images', ['heritage_id', 'display_order'])


def downgrade() -> None:
    op.drop_index('idx_images_heritage_order')
    op.drop_index('idx_translations_entity')
    op.drop_index('idx_heritage_city_category')
    op.drop_table('images')
    op.drop_table('translations')
    op.drop_table('heritage_items')
    op.drop_table('cities')
    op.drop_table('languages')
