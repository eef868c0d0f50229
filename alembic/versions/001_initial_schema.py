"""Initial schema: users, blog content, media library and stock tables

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

Creates:
- users, categories, posts, media
- stock_info (company master data)
- stocks, stock_daily, stock_assets, stock_metrics, stock_eps, stock_pe,
  each unique on (symbol, date) and cascading from stock_info.symbol
"""
from typing import List, Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SERIES_TABLES = ['stocks', 'stock_daily', 'stock_assets', 'stock_metrics', 'stock_eps', 'stock_pe']


def _symbol_date_columns() -> List[sa.Column]:
    return [
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'symbol',
            sa.String(length=20),
            sa.ForeignKey('stock_info.symbol', ondelete='CASCADE', onupdate='CASCADE'),
            nullable=False,
        ),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _create_series_table(name: str, *columns: sa.Column) -> None:
    op.create_table(
        name,
        *_symbol_date_columns(),
        *columns,
        sa.UniqueConstraint('symbol', 'date', name=f'uq_{name}_symbol_date'),
    )
    op.create_index(f'ix_{name}_id', name, ['id'])
    op.create_index(f'ix_{name}_symbol', name, ['symbol'])
    op.create_index(f'ix_{name}_date', name, ['date'])


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=50), nullable=False, unique=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=10), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_id', 'users', ['id'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
    )
    op.create_index('ix_categories_id', 'categories', ['id'])
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)

    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('thumbnail', sa.String(length=500), nullable=True),
        sa.Column('thumbnail_alt', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_posts_id', 'posts', ['id'])
    op.create_index('ix_posts_slug', 'posts', ['slug'], unique=True)
    op.create_index('ix_posts_user_id', 'posts', ['user_id'])
    op.create_index('ix_posts_category_id', 'posts', ['category_id'])
    op.create_index('ix_posts_created_at', 'posts', ['created_at'])

    op.create_table(
        'media',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('filename', sa.String(length=255), nullable=False),
        sa.Column('filepath', sa.String(length=500), nullable=False),
        sa.Column('mimetype', sa.String(length=100), nullable=False),
        sa.Column('size', sa.Integer(), nullable=False),
        sa.Column('alt_text', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('title', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('caption', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_media_id', 'media', ['id'])
    op.create_index('ix_media_user_id', 'media', ['user_id'])
    op.create_index('ix_media_created_at', 'media', ['created_at'])

    op.create_table(
        'stock_info',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('symbol', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
    )
    op.create_index('ix_stock_info_id', 'stock_info', ['id'])
    op.create_index('ix_stock_info_symbol', 'stock_info', ['symbol'], unique=True)

    _create_series_table(
        'stocks',
        sa.Column('open', sa.Float(), nullable=True),
        sa.Column('high', sa.Float(), nullable=True),
        sa.Column('low', sa.Float(), nullable=True),
        sa.Column('close', sa.Float(), nullable=True),
        sa.Column('band_dow', sa.Float(), nullable=True),
        sa.Column('band_up', sa.Float(), nullable=True),
        sa.Column('trend_q', sa.Float(), nullable=True),
        sa.Column('fq', sa.Float(), nullable=True),
        sa.Column('qv1', sa.BigInteger(), nullable=True),
    )
    _create_series_table(
        'stock_daily',
        sa.Column('open', sa.Float(), nullable=True),
        sa.Column('high', sa.Float(), nullable=True),
        sa.Column('low', sa.Float(), nullable=True),
        sa.Column('close', sa.Float(), nullable=True),
        sa.Column('volume', sa.BigInteger(), nullable=True),
        sa.Column('close_price', sa.Float(), nullable=False),
        sa.Column('return_value', sa.Float(), nullable=True),
        sa.Column('kldd', sa.BigInteger(), nullable=True),
        sa.Column('von_hoa', sa.Float(), nullable=True),
        sa.Column('pe', sa.Float(), nullable=True),
        sa.Column('roa', sa.Float(), nullable=True),
        sa.Column('roe', sa.Float(), nullable=True),
        sa.Column('eps', sa.Float(), nullable=True),
    )
    _create_series_table(
        'stock_assets',
        sa.Column('tts', sa.Float(), nullable=True),
        sa.Column('vcsh', sa.Float(), nullable=True),
        sa.Column('tb_tts_nganh', sa.Float(), nullable=True),
    )
    _create_series_table(
        'stock_metrics',
        sa.Column('roa', sa.Float(), nullable=True),
        sa.Column('roe', sa.Float(), nullable=True),
        sa.Column('tb_roa_nganh', sa.Float(), nullable=True),
        sa.Column('tb_roe_nganh', sa.Float(), nullable=True),
    )
    _create_series_table(
        'stock_eps',
        sa.Column('eps', sa.Float(), nullable=True),
        sa.Column('eps_nganh', sa.Float(), nullable=True),
    )
    _create_series_table(
        'stock_pe',
        sa.Column('pe', sa.Float(), nullable=True),
        sa.Column('pe_nganh', sa.Float(), nullable=True),
    )


def downgrade() -> None:
    for name in reversed(SERIES_TABLES):
        op.drop_table(name)
    op.drop_table('stock_info')
    op.drop_table('media')
    op.drop_table('posts')
    op.drop_table('categories')
    op.drop_table('users')
