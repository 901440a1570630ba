"""create accounts, tenants and catalog_items

Revision ID: 4f1c2a9e7b3d
Revises:
Create Date: 2026-10-19 10:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4f1c2a9e7b3d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'accounts',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('name', sa.String(length=200), nullable=False),
    sa.Column('password_hash', sa.String(length=255), nullable=False),
    sa.Column('role', sa.String(length=20), nullable=False, comment='Account role (owner, admin)'),
    sa.Column('tenant_id', sa.String(length=36), nullable=True, comment='Tenant owned by this account (non-owning pointer)'),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_accounts_email'), 'accounts', ['email'], unique=True)

    op.create_table(
        'tenants',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('owner_id', sa.String(length=36), nullable=False, comment='Account that owns this business'),
    sa.Column('display_name', sa.String(length=200), nullable=False),
    sa.Column('slug', sa.String(length=220), nullable=False, comment='Public storefront identifier (lowercase, immutable)'),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('category', sa.String(length=100), nullable=True),
    sa.Column('logo_url', sa.String(length=500), nullable=True),
    sa.Column('banner_url', sa.String(length=500), nullable=True),
    sa.Column('phone', sa.String(length=30), nullable=True),
    sa.Column('whatsapp', sa.String(length=30), nullable=True),
    sa.Column('email', sa.String(length=255), nullable=True),
    sa.Column('address', sa.String(length=500), nullable=True),
    sa.Column('brand_color', sa.String(length=7), nullable=False),
    sa.Column('year_established', sa.Integer(), nullable=True),
    sa.Column('social_links', sa.JSON(), nullable=False, comment='Social profile URLs keyed by network (instagram, facebook, website)'),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['owner_id'], ['accounts.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('owner_id')
    )
    op.create_index(op.f('ix_tenants_slug'), 'tenants', ['slug'], unique=True)
    op.create_index('ix_tenants_category', 'tenants', ['category'], unique=False)

    op.create_table(
        'catalog_items',
    sa.Column('id', sa.String(length=36), nullable=False),
    sa.Column('tenant_id', sa.String(length=36), nullable=False, comment='Owning tenant'),
    sa.Column('name', sa.String(length=200), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('price', sa.Numeric(precision=14, scale=2, asdecimal=False), nullable=False, comment='Non-negative price, currency-agnostic'),
    sa.Column('category', sa.String(length=100), nullable=True),
    sa.Column('images', sa.JSON(), nullable=False, comment='Ordered list of {url, storage_key, is_primary}'),
    sa.Column('status', sa.String(length=20), nullable=False, comment='Product status (available, sold, out_of_stock)'),
    sa.Column('specs', sa.JSON(), nullable=False, comment='Owner-defined attributes (string to string)'),
    sa.Column('view_count', sa.Integer(), nullable=False),
    sa.Column('click_count', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_catalog_items_tenant_id', 'catalog_items', ['tenant_id'], unique=False)
    op.create_index('ix_catalog_items_status', 'catalog_items', ['status'], unique=False)
    op.create_index('ix_catalog_items_category', 'catalog_items', ['category'], unique=False)
    op.create_index('ix_catalog_items_tenant_created', 'catalog_items', ['tenant_id', 'created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_catalog_items_tenant_created', table_name='catalog_items')
    op.drop_index('ix_catalog_items_category', table_name='catalog_items')
    op.drop_index('ix_catalog_items_status', table_name='catalog_items')
    op.drop_index('ix_catalog_items_tenant_id', table_name='catalog_items')
    op.drop_table('catalog_items')
    op.drop_index('ix_tenants_category', table_name='tenants')
    op.drop_index(op.f('ix_tenants_slug'), table_name='tenants')
    op.drop_table('tenants')
    op.drop_index(op.f('ix_accounts_email'), table_name='accounts')
    op.drop_table('accounts')
