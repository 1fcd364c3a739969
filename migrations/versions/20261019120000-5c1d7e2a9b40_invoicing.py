"""Invoicing

Revision ID: 5c1d7e2a9b40
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1d7e2a9b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def timesheet_totals():
    return [
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('total_regular_hours', sa.Float(), nullable=False),
        sa.Column('total_overtime_hours', sa.Float(), nullable=False),
        sa.Column('total_regular_amount', sa.Float(), nullable=False),
        sa.Column('total_overtime_amount', sa.Float(), nullable=False),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'company_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('logo_url', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=False),
        sa.Column('city', sa.String(), nullable=False),
        sa.Column('state', sa.String(), nullable=False),
        sa.Column('country', sa.String(), nullable=False),
        sa.Column('zip_code', sa.String(), nullable=False),
        sa.Column('phone_numbers', sa.JSON(), nullable=True),
        sa.Column('email_addresses', sa.JSON(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('tax_id', sa.String(), nullable=True),
        sa.Column('gst_number', sa.String(), nullable=True),
        *timestamps(),
    )

    op.create_table(
        'client_company',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('logo_url', sa.String(), nullable=True),
        sa.Column('bill_to_address', sa.String(), nullable=False),
        sa.Column('bill_to_city', sa.String(), nullable=False),
        sa.Column('bill_to_state', sa.String(), nullable=False),
        sa.Column('bill_to_country', sa.String(), nullable=False),
        sa.Column('bill_to_zip_code', sa.String(), nullable=False),
        sa.Column('contact_person', sa.String(), nullable=True),
        sa.Column('phone_numbers', sa.JSON(), nullable=True),
        sa.Column('email_addresses', sa.JSON(), nullable=True),
        *timestamps(),
    )

    op.create_table(
        'candidate',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('encrypted_email', sa.String(), nullable=False),
        *timestamps(),
    )

    op.create_table(
        'candidate_billing',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidate.id'), nullable=False),
        sa.Column('hourly_rate', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(), nullable=False),
        sa.Column('working_days_per_week', sa.Integer(), nullable=False),
        sa.Column('employment_type', sa.String(), nullable=False),
        sa.Column('supervisor_name', sa.String(), nullable=True),
        sa.Column('company_settings_id', sa.Integer(),
                  sa.ForeignKey('company_settings.id'), nullable=True),
        sa.Column('client_company_id', sa.Integer(),
                  sa.ForeignKey('client_company.id'), nullable=True),
        *timestamps(),
    )
    op.create_index('ix_candidate_billing_candidate_id', 'candidate_billing',
                    ['candidate_id'], unique=True)

    op.create_table(
        'weekly_timesheet',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidate.id'), nullable=False),
        sa.Column('week_start_date', sa.Date(), nullable=False),
        sa.Column('week_end_date', sa.Date(), nullable=False),
        sa.Column('daily_hours', sa.JSON(), nullable=True),
        sa.Column('daily_overtime', sa.JSON(), nullable=True),
        sa.Column('total_weekly_hours', sa.Float(), nullable=False),
        sa.Column('total_weekly_amount', sa.Float(), nullable=False),
        *timesheet_totals(),
        *timestamps(),
    )
    op.create_index('ix_weekly_timesheet_candidate_id', 'weekly_timesheet', ['candidate_id'])
    op.create_index('ix_weekly_timesheet_status', 'weekly_timesheet', ['status'])

    op.create_table(
        'bi_weekly_timesheet',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidate.id'), nullable=False),
        sa.Column('period_start_date', sa.Date(), nullable=False),
        sa.Column('period_end_date', sa.Date(), nullable=False),
        sa.Column('week1_hours', sa.JSON(), nullable=True),
        sa.Column('week1_overtime', sa.JSON(), nullable=True),
        sa.Column('week2_hours', sa.JSON(), nullable=True),
        sa.Column('week2_overtime', sa.JSON(), nullable=True),
        sa.Column('total_bi_weekly_hours', sa.Float(), nullable=False),
        sa.Column('total_bi_weekly_amount', sa.Float(), nullable=False),
        *timesheet_totals(),
        *timestamps(),
    )
    op.create_index('ix_bi_weekly_timesheet_candidate_id', 'bi_weekly_timesheet', ['candidate_id'])
    op.create_index('ix_bi_weekly_timesheet_status', 'bi_weekly_timesheet', ['status'])

    op.create_table(
        'invoice',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('invoice_number', sa.String(), nullable=False),
        sa.Column('timesheet_id', sa.Integer(), sa.ForeignKey('weekly_timesheet.id'),
                  nullable=True, unique=True),
        sa.Column('bi_weekly_timesheet_id', sa.Integer(), sa.ForeignKey('bi_weekly_timesheet.id'),
                  nullable=True, unique=True),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidate.id'), nullable=False),
        sa.Column('candidate_name', sa.String(), nullable=False),
        sa.Column('encrypted_candidate_email', sa.String(), nullable=False),
        sa.Column('week_start_date', sa.Date(), nullable=False),
        sa.Column('week_end_date', sa.Date(), nullable=False),
        sa.Column('total_hours', sa.Float(), nullable=False),
        sa.Column('hourly_rate', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(), nullable=False),
        sa.Column('currency_conversion_rate', sa.Float(), nullable=False),
        sa.Column('six_month_average_rate', sa.Float(), nullable=False),
        sa.Column('amount_inr', sa.Float(), nullable=False),
        sa.Column('gst_rate', sa.Float(), nullable=False),
        sa.Column('gst_amount', sa.Float(), nullable=False),
        sa.Column('total_with_gst', sa.Float(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('issued_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        *timestamps(),
        sa.CheckConstraint(
            '(timesheet_id IS NULL) <> (bi_weekly_timesheet_id IS NULL)',
            name='ck_invoice_single_timesheet'),
    )
    op.create_index('ix_invoice_invoice_number', 'invoice', ['invoice_number'], unique=True)
    op.create_index('ix_invoice_candidate_id', 'invoice', ['candidate_id'])

    op.create_table(
        'currency_rate',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('month', sa.String(), nullable=False),
        sa.Column('base', sa.String(), nullable=False),
        sa.Column('quote', sa.String(), nullable=False),
        sa.Column('average', sa.Float(), nullable=False),
        *timestamps(),
        sa.UniqueConstraint('month', 'base', 'quote', name='uq_currency_rate_month_pair'),
    )
    op.create_index('ix_currency_rate_month', 'currency_rate', ['month'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_currency_rate_month', table_name='currency_rate')
    op.drop_table('currency_rate')
    op.drop_index('ix_invoice_candidate_id', table_name='invoice')
    op.drop_index('ix_invoice_invoice_number', table_name='invoice')
    op.drop_table('invoice')
    op.drop_index('ix_bi_weekly_timesheet_status', table_name='bi_weekly_timesheet')
    op.drop_index('ix_bi_weekly_timesheet_candidate_id', table_name='bi_weekly_timesheet')
    op.drop_table('bi_weekly_timesheet')
    op.drop_index('ix_weekly_timesheet_status', table_name='weekly_timesheet')
    op.drop_index('ix_weekly_timesheet_candidate_id', table_name='weekly_timesheet')
    op.drop_table('weekly_timesheet')
    op.drop_index('ix_candidate_billing_candidate_id', table_name='candidate_billing')
    op.drop_table('candidate_billing')
    op.drop_table('candidate')
    op.drop_table('client_company')
    op.drop_table('company_settings')
