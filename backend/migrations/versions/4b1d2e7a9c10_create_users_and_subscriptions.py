"""create users and subscriptions

Revision ID: 4b1d2e7a9c10
Revises:
Create Date: 2024-06-01 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '4b1d2e7a9c10'
down_revision = None
branch_labels = None
depends_on = None

CURRENCIES = ('USD', 'EUR', 'GBP', 'INR', 'AUD', 'CAD', 'JPY')
FREQUENCIES = ('daily', 'weekly', 'monthly', 'yearly')
CATEGORIES = (
    'sports', 'news', 'entertainment', 'lifestyle',
    'technology', 'finance', 'politics', 'other',
)
STATUSES = ('active', 'cancelled', 'expired')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.String(length=254), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_email'), ['email'], unique=False)

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('currency', sa.Enum(*CURRENCIES, name='subscription_currency'), nullable=False),
        sa.Column('frequency', sa.Enum(*FREQUENCIES, name='subscription_frequency'), nullable=True),
        sa.Column('category', sa.Enum(*CATEGORIES, name='subscription_category'), nullable=False),
        sa.Column('payment_method', sa.String(length=100), nullable=False),
        sa.Column('status', sa.Enum(*STATUSES, name='subscription_status'), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('renewal_date', sa.DateTime(), nullable=False),
        sa.Column('cancellation_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('price >= 0', name=op.f('ck_subscriptions_price_non_negative')),
        sa.CheckConstraint('renewal_date > start_date', name=op.f('ck_subscriptions_renewal_after_start')),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name=op.f('fk_subscriptions_user_id_users'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_subscriptions')),
    )
    with op.batch_alter_table('subscriptions', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_subscriptions_user_id'), ['user_id'], unique=False)
        batch_op.create_index('ix_subscriptions_renewal_date', ['renewal_date'], unique=False)


def downgrade():
    with op.batch_alter_table('subscriptions', schema=None) as batch_op:
        batch_op.drop_index('ix_subscriptions_renewal_date')
        batch_op.drop_index(batch_op.f('ix_subscriptions_user_id'))
    op.drop_table('subscriptions')

    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_users_email'))
    op.drop_table('users')
    sa.Enum(name='subscription_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='subscription_category').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='subscription_frequency').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='subscription_currency').drop(op.get_bind(), checkfirst=True)
