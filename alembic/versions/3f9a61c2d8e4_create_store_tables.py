"""create_store_tables

Revision ID: 3f9a61c2d8e4
Revises:
Create Date: 2025-07-09 13:09:18.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = '3f9a61c2d8e4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


STORE_TABLES = [
    'store_categories',
    'store_addons',
    'store_orders',
    'store_order_items',
    'store_reviews',
]

UPDATED_AT_TABLES = [
    'store_categories',
    'store_addons',
    'store_orders',
    'store_reviews',
]

IS_SUPER_ADMIN = "auth.uid() IN (SELECT id FROM super_admins)"

# (table, policy name, command, role, USING, WITH CHECK)
POLICIES = [
    ('store_categories', 'Anyone can view active categories', 'SELECT', None, 'is_active = true', None),
    ('store_categories', 'Super admins can manage categories', 'ALL', 'authenticated', IS_SUPER_ADMIN, IS_SUPER_ADMIN),
    ('store_addons', 'Anyone can view published addons', 'SELECT', None, 'is_published = true', None),
    ('store_addons', 'Super admins can manage addons', 'ALL', 'authenticated', IS_SUPER_ADMIN, IS_SUPER_ADMIN),
    ('store_orders', 'Super admins can view all orders', 'SELECT', 'authenticated', IS_SUPER_ADMIN, None),
    ('store_orders', 'Super admins can manage orders', 'ALL', 'authenticated', IS_SUPER_ADMIN, IS_SUPER_ADMIN),
    ('store_orders', 'Allow anonymous order creation', 'INSERT', 'anon', None, 'true'),
    ('store_order_items', 'Super admins can view all order items', 'SELECT', 'authenticated', IS_SUPER_ADMIN, None),
    ('store_order_items', 'Super admins can manage order items', 'ALL', 'authenticated', IS_SUPER_ADMIN, IS_SUPER_ADMIN),
    ('store_order_items', 'Allow anonymous order item creation', 'INSERT', 'anon', None, 'true'),
    ('store_reviews', 'Anyone can view published reviews', 'SELECT', None, 'is_published = true', None),
    ('store_reviews', 'Super admins can manage reviews', 'ALL', 'authenticated', IS_SUPER_ADMIN, IS_SUPER_ADMIN),
    ('store_reviews', 'Allow anonymous review creation', 'INSERT', 'anon', None, 'true'),
]


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema - Add store tables, triggers and RLS policies."""

    op.create_table(
        'store_categories',
        sa.Column('id', UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('slug', sa.String(100), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=True),
        sa.Column('display_order', sa.Integer(), server_default='0', nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table(
        'store_addons',
        sa.Column('id', UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('short_description', sa.String(500), nullable=True),
        sa.Column('category_id', UUID(as_uuid=True), sa.ForeignKey('store_categories.id'), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('original_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('currency', sa.String(3), server_default='KES', nullable=True),
        sa.Column('features', JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=True),
        sa.Column('images', JSONB(), server_default=sa.text("'[]'::jsonb"), nullable=True),
        sa.Column('is_published', sa.Boolean(), server_default='false', nullable=True),
        sa.Column('is_featured', sa.Boolean(), server_default='false', nullable=True),
        sa.Column('is_popular', sa.Boolean(), server_default='false', nullable=True),
        sa.Column('version', sa.String(50), server_default='1.0.0', nullable=True),
        sa.Column(
            'compatibility',
            JSONB(),
            server_default=sa.text('\'{"saas": true, "standalone": true}\'::jsonb'),
            nullable=True,
        ),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('installation_notes', sa.Text(), nullable=True),
        sa.Column('support_level', sa.String(50), server_default='standard', nullable=True),
        sa.Column('download_count', sa.Integer(), server_default='0', nullable=True),
        sa.Column('rating', sa.Numeric(3, 2), server_default='0', nullable=True),
        sa.Column('review_count', sa.Integer(), server_default='0', nullable=True),
        *_timestamps(),
        sa.Column('created_by', sa.String(255), nullable=True),
        sa.Column('updated_by', sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )

    op.create_table(
        'store_orders',
        sa.Column('id', UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('order_number', sa.String(40), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('customer_phone', sa.String(50), nullable=True),
        sa.Column('institution_name', sa.String(255), nullable=True),
        sa.Column('billing_address', JSONB(), nullable=True),
        sa.Column('order_status', sa.String(20), server_default='pending', nullable=True),
        sa.Column('payment_status', sa.String(20), server_default='pending', nullable=True),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('payment_reference', sa.String(100), nullable=True),
        sa.Column('subtotal', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('tax_amount', sa.Numeric(10, 2), server_default='0', nullable=True),
        sa.Column('discount_amount', sa.Numeric(10, 2), server_default='0', nullable=True),
        sa.Column('total_amount', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('currency', sa.String(3), server_default='KES', nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_number'),
        sa.CheckConstraint(
            "order_status IN ('pending', 'processing', 'completed', 'cancelled', 'refunded')",
            name='store_order_status',
        ),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'paid', 'failed', 'refunded')",
            name='store_payment_status',
        ),
    )

    op.create_table(
        'store_order_items',
        sa.Column('id', UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('order_id', UUID(as_uuid=True), sa.ForeignKey('store_orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('addon_id', UUID(as_uuid=True), sa.ForeignKey('store_addons.id'), nullable=True),
        sa.Column('addon_name', sa.String(255), nullable=False),
        sa.Column('addon_description', sa.Text(), nullable=True),
        sa.Column('quantity', sa.Integer(), server_default='1', nullable=False),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('total_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('addon_version', sa.String(50), nullable=True),
        sa.Column('license_key', sa.String(255), nullable=True),
        sa.Column('download_url', sa.String(512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('quantity > 0', name='store_order_items_positive_quantity'),
    )

    op.create_table(
        'store_reviews',
        sa.Column('id', UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('addon_id', UUID(as_uuid=True), sa.ForeignKey('store_addons.id', ondelete='CASCADE'), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('review_text', sa.Text(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), server_default='false', nullable=True),
        sa.Column('is_published', sa.Boolean(), server_default='false', nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='store_reviews_rating_range'),
    )

    # Create indexes for performance
    op.create_index('idx_store_addons_category_id', 'store_addons', ['category_id'])
    op.create_index('idx_store_addons_published', 'store_addons', ['is_published'])
    op.create_index('idx_store_addons_featured', 'store_addons', ['is_featured'])
    op.create_index('idx_store_orders_status', 'store_orders', ['order_status'])
    op.create_index('idx_store_orders_email', 'store_orders', ['customer_email'])
    op.create_index('idx_store_orders_created_at', 'store_orders', ['created_at'])
    op.create_index('idx_store_order_items_order_id', 'store_order_items', ['order_id'])
    op.create_index('idx_store_reviews_addon_id', 'store_reviews', ['addon_id'])

    # updated_at triggers
    op.execute(
        """
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = now();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
        """
    )
    for table in UPDATED_AT_TABLES:
        op.execute(
            f"CREATE TRIGGER update_{table}_updated_at BEFORE UPDATE ON {table} "
            "FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
        )

    # Called by clients holding only the anon key, who cannot UPDATE store_addons
    op.execute(
        """
        CREATE OR REPLACE FUNCTION increment_download_count(addon_id uuid)
        RETURNS void AS $$
            UPDATE store_addons
            SET download_count = COALESCE(download_count, 0) + 1
            WHERE id = increment_download_count.addon_id;
        $$ LANGUAGE sql SECURITY DEFINER
        """
    )

    # Row-level security
    for table in STORE_TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")

    for table, name, command, role, using, check in POLICIES:
        statement = f'CREATE POLICY "{name}" ON {table} FOR {command}'
        if role:
            statement += f" TO {role}"
        if using:
            statement += f" USING ({using})"
        if check:
            statement += f" WITH CHECK ({check})"
        op.execute(statement)


def downgrade() -> None:
    """Downgrade schema - Remove store tables."""

    for table, name, *_ in reversed(POLICIES):
        op.execute(f'DROP POLICY IF EXISTS "{name}" ON {table}')

    op.execute("DROP FUNCTION IF EXISTS increment_download_count(uuid)")
    for table in UPDATED_AT_TABLES:
        op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")

    op.drop_index('idx_store_reviews_addon_id', table_name='store_reviews')
    op.drop_index('idx_store_order_items_order_id', table_name='store_order_items')
    op.drop_index('idx_store_orders_created_at', table_name='store_orders')
    op.drop_index('idx_store_orders_email', table_name='store_orders')
    op.drop_index('idx_store_orders_status', table_name='store_orders')
    op.drop_index('idx_store_addons_featured', table_name='store_addons')
    op.drop_index('idx_store_addons_published', table_name='store_addons')
    op.drop_index('idx_store_addons_category_id', table_name='store_addons')

    op.drop_table('store_reviews')
    op.drop_table('store_order_items')
    op.drop_table('store_orders')
    op.drop_table('store_addons')
    op.drop_table('store_categories')
