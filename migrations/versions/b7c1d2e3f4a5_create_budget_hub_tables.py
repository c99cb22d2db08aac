"""create budget hub tables

Revision ID: b7c1d2e3f4a5
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision: str = 'b7c1d2e3f4a5'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create hubs, accounts, categories, recurring templates, transactions, budgets, goals, notifications."""
    op.create_table(
        'hubs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('budget_carry_over', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('budget_email_warnings', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'financial_accounts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hub_id', sa.Integer(), sa.ForeignKey('hubs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('balance', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'transaction_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hub_id', sa.Integer(), sa.ForeignKey('hubs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
    )

    op.create_table(
        'recurring_transaction_templates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hub_id', sa.Integer(), sa.ForeignKey('hubs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('financial_account_id', sa.Integer(),
                  sa.ForeignKey('financial_accounts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('category_id', sa.Integer(),
                  sa.ForeignKey('transaction_categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('source', sa.String(255), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('frequency_days', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active', index=True),
        sa.Column('last_generated_date', sa.Date(), nullable=True),
        sa.Column('last_failed_date', sa.Date(), nullable=True),
        sa.Column('failure_reason', sa.Text(), nullable=True),
        sa.Column('consecutive_failures', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('user_language', sa.String(5), nullable=False, server_default='en'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('frequency_days >= 1', name='ck_recurring_frequency_days_positive'),
        sa.CheckConstraint('consecutive_failures >= 0', name='ck_recurring_consecutive_failures_non_negative'),
    )

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hub_id', sa.Integer(), sa.ForeignKey('hubs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('financial_account_id', sa.Integer(),
                  sa.ForeignKey('financial_accounts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('category_id', sa.Integer(),
                  sa.ForeignKey('transaction_categories.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('source', sa.String(255), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('occurred_on', sa.Date(), nullable=False, index=True),
        sa.Column('recurring_template_id', sa.Integer(),
                  sa.ForeignKey('recurring_transaction_templates.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('recurring_template_id', 'occurred_on', name='uq_transaction_template_due'),
    )

    op.create_table(
        'budgets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hub_id', sa.Integer(), sa.ForeignKey('hubs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('category_id', sa.Integer(),
                  sa.ForeignKey('transaction_categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('allocated_amount', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('spent_amount', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('warning_percentage', sa.Integer(), nullable=False, server_default='80'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'budget_instances',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('budget_id', sa.Integer(), sa.ForeignKey('budgets.id', ondelete='CASCADE'), nullable=False),
        sa.Column('hub_id', sa.Integer(), sa.ForeignKey('hubs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('allocated_amount', sa.Numeric(precision=20, scale=2), nullable=True),
        sa.Column('carried_over_amount', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('spent_amount', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('budget_id', 'month', 'year', name='uq_budget_instance_budget_period'),
        sa.UniqueConstraint('hub_id', 'category_id', 'month', 'year', name='uq_budget_instance_category_period'),
    )
    op.create_index('ix_budget_instances_hub_period', 'budget_instances', ['hub_id', 'year', 'month'])

    op.create_table(
        'saving_goals',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hub_id', sa.Integer(), sa.ForeignKey('hubs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('goal_amount', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('amount_saved', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('monthly_allocation', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('auto_allocation_enabled', sa.Boolean(), nullable=False, server_default=sa.false(), index=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hub_id', sa.Integer(), sa.ForeignKey('hubs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('rule_code', sa.String(64), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('entity_type', sa.String(32), nullable=True),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('period', sa.String(7), nullable=True),
        sa.Column('metadata', JSONB, nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.func.now(), index=True),
    )


def downgrade() -> None:
    """Drop budget hub tables."""
    op.drop_table('notifications')
    op.drop_table('saving_goals')
    op.drop_index('ix_budget_instances_hub_period', table_name='budget_instances')
    op.drop_table('budget_instances')
    op.drop_table('budgets')
    op.drop_table('transactions')
    op.drop_table('recurring_transaction_templates')
    op.drop_table('transaction_categories')
    op.drop_table('financial_accounts')
    op.drop_table('hubs')
