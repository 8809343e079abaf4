"""initial schema

Revision ID: 3a7c1e9d2b40
Revises:
Create Date: 2026-10-18 09:12:04.518233

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a7c1e9d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Check if tables already exist (for existing databases)
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = inspector.get_table_names()

    if 'restaurants' not in existing_tables:
        op.create_table('restaurants',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('slug', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('timezone', sa.String(), nullable=False),
            sa.Column('owner_email', sa.String(), nullable=True),
            sa.Column('availability_mode', sa.String(), nullable=False),
            sa.Column('is_open', sa.Boolean(), nullable=False),
            sa.Column('is_accepting_orders', sa.Boolean(), nullable=False),
            sa.Column('subscription_status', sa.String(), nullable=True),
            sa.Column('trial_end_date', sa.DateTime(timezone=True), nullable=True),
            sa.Column('bonus_weeks', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_restaurants_id'), 'restaurants', ['id'], unique=False)
        op.create_index(op.f('ix_restaurants_slug'), 'restaurants', ['slug'], unique=True)

    if 'restaurant_hours' not in existing_tables:
        op.create_table('restaurant_hours',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('restaurant_id', sa.Integer(), nullable=False),
            sa.Column('day_of_week', sa.Integer(), nullable=False),
            sa.Column('is_open', sa.Boolean(), nullable=False),
            sa.Column('slots', sa.JSON(), nullable=False),
            sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('restaurant_id', 'day_of_week', name='uix_restaurant_day')
        )
        op.create_index(op.f('ix_restaurant_hours_id'), 'restaurant_hours', ['id'], unique=False)
        op.create_index(op.f('ix_restaurant_hours_restaurant_id'), 'restaurant_hours', ['restaurant_id'], unique=False)

    if 'subscriptions' not in existing_tables:
        op.create_table('subscriptions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('restaurant_id', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(), nullable=False),
            sa.Column('trial_end', sa.DateTime(timezone=True), nullable=True),
            sa.Column('bonus_days', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_subscriptions_id'), 'subscriptions', ['id'], unique=False)
        op.create_index(op.f('ix_subscriptions_restaurant_id'), 'subscriptions', ['restaurant_id'], unique=False)
        op.create_index(op.f('ix_subscriptions_status'), 'subscriptions', ['status'], unique=False)
        op.create_index('ix_subscriptions_restaurant_created_at', 'subscriptions', ['restaurant_id', 'created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_subscriptions_restaurant_created_at', table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_status'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_restaurant_id'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_id'), table_name='subscriptions')
    op.drop_table('subscriptions')
    op.drop_index(op.f('ix_restaurant_hours_restaurant_id'), table_name='restaurant_hours')
    op.drop_index(op.f('ix_restaurant_hours_id'), table_name='restaurant_hours')
    op.drop_table('restaurant_hours')
    op.drop_index(op.f('ix_restaurants_slug'), table_name='restaurants')
    op.drop_index(op.f('ix_restaurants_id'), table_name='restaurants')
    op.drop_table('restaurants')
