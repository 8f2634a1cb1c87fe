"""Create catalog tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 10:12:44.201873

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c2a9d7b10'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'categories',
        sa.Column('category_id', sa.Integer(), primary_key=True),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('categories.category_id'), nullable=True),
        sa.Column('category_name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False, unique=True),
        sa.Column('description', sa.String(1000), nullable=True),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('idx_categories_parent_id', 'categories', ['parent_id'])
    op.create_index('idx_categories_is_active', 'categories', ['is_active'])
    op.create_index('idx_categories_display_order', 'categories', ['display_order'])

    op.create_table(
        'brands',
        sa.Column('brand_id', sa.Integer(), primary_key=True),
        sa.Column('brand_name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False, unique=True),
        sa.Column('description', sa.String(1000), nullable=True),
        sa.Column('logo_url', sa.String(500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('idx_brands_is_active', 'brands', ['is_active'])

    op.create_table(
        'products',
        sa.Column('product_id', sa.Integer(), primary_key=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.category_id'), nullable=False),
        sa.Column('brand_id', sa.Integer(), sa.ForeignKey('brands.brand_id'), nullable=True),
        sa.Column('product_name', sa.String(500), nullable=False),
        sa.Column('slug', sa.String(500), nullable=False, unique=True),
        sa.Column('sku', sa.String(100), nullable=True, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('short_description', sa.String(1000), nullable=True),
        sa.Column('original_price', sa.Numeric(15, 2), nullable=False),
        sa.Column('sale_price', sa.Numeric(15, 2), nullable=True),
        sa.Column('discount_percent', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('stock_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('sold_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_new', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_bestseller', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('video_url', sa.String(500), nullable=True),
        *_timestamps(),
    )
    for column in ('category_id', 'brand_id', 'is_active', 'is_featured', 'is_new',
                   'is_bestseller', 'sale_price', 'created_at'):
        op.create_index(f'idx_products_{column}', 'products', [column])

    op.create_table(
        'product_images',
        sa.Column('image_id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('products.product_id', ondelete='CASCADE'), nullable=False),
        sa.Column('image_url', sa.String(500), nullable=False),
        sa.Column('alt_text', sa.String(255), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('idx_product_images_product_id', 'product_images', ['product_id'])
    op.create_index('idx_product_images_is_primary', 'product_images', ['is_primary'])

    op.create_table(
        'product_reviews',
        sa.Column('review_id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('products.product_id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(255), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('is_approved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_verified_purchase', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('idx_product_reviews_product_id', 'product_reviews', ['product_id'])
    op.create_index('idx_product_reviews_rating', 'product_reviews', ['rating'])
    op.create_index('idx_product_reviews_is_approved', 'product_reviews', ['is_approved'])


def downgrade() -> None:
    op.drop_table('product_reviews')
    op.drop_table('product_images')
    op.drop_table('products')
    op.drop_table('brands')
    op.drop_table('categories')
