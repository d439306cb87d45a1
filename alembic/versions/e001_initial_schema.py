"""initial_schema

Revision ID: e001_initial_schema
Revises:
Create Date: 2026-01-12 10:04:31.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'e001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create profiles, events, registrations and cron_logs.

    registrations gets a partial unique index so only settled rows
    ('paid', 'free') are unique per (event_id, attendee_email).
    """
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('affiliation', sa.String(), nullable=True),
        sa.Column('is_admin', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('submissions_date', sa.Date(), nullable=True),
        sa.Column('submissions_today', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'])

    op.create_table(
        'events',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('host_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('event_date', sa.DateTime(), nullable=False),
        sa.Column('location_type', sa.String(length=10), nullable=False),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('venue_address', sa.String(), nullable=True),
        sa.Column('meeting_link', sa.String(), nullable=True),
        sa.Column('max_capacity', sa.Integer(), nullable=False),
        sa.Column('current_registrations', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('price', sa.Integer(), server_default=sa.text('0'), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('reviewed_by', sa.String(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('max_capacity > 0', name='ck_events_capacity_positive'),
        sa.CheckConstraint('price >= 0', name='ck_events_price_non_negative'),
        sa.CheckConstraint('current_registrations >= 0', name='ck_events_registrations_non_negative'),
        sa.ForeignKeyConstraint(['host_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['reviewed_by'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('title'),
    )
    op.create_index('ix_events_host_id', 'events', ['host_id'])
    op.create_index('ix_events_status', 'events', ['status'])
    op.create_index('ix_events_event_date', 'events', ['event_date'])
    op.create_index('ix_events_expires_at', 'events', ['expires_at'])

    op.create_table(
        'registrations',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('event_id', sa.String(), nullable=False),
        sa.Column('attendee_name', sa.String(length=100), nullable=False),
        sa.Column('attendee_email', sa.String(), nullable=False),
        sa.Column('whatsapp_number', sa.String(length=20), nullable=True),
        sa.Column('registered_at', sa.DateTime(), nullable=False),
        sa.Column('payment_status', sa.String(length=10), nullable=False),
        sa.Column('razorpay_order_id', sa.String(), nullable=True),
        sa.Column('razorpay_payment_id', sa.String(), nullable=True),
        sa.Column('amount_paid', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('razorpay_order_id'),
    )
    op.create_index('ix_registrations_event_id', 'registrations', ['event_id'])
    op.create_index('ix_registrations_attendee_email', 'registrations', ['attendee_email'])
    op.create_index(
        'uq_registrations_settled_event_email',
        'registrations',
        ['event_id', 'attendee_email'],
        unique=True,
        postgresql_where=sa.text("payment_status IN ('paid', 'free')"),
    )

    op.create_table(
        'cron_logs',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('job_name', sa.String(), nullable=False),
        sa.Column('job_type', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False),
        sa.Column('events_affected', sa.Integer(), nullable=False),
        sa.Column('duration_ms', sa.Integer(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('triggered_by', sa.String(length=20), nullable=False),
        sa.Column('executed_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_cron_logs_job_type', 'cron_logs', ['job_type'])
    op.create_index('ix_cron_logs_executed_at', 'cron_logs', ['executed_at'])


def downgrade() -> None:
    op.drop_index('ix_cron_logs_executed_at', table_name='cron_logs')
    op.drop_index('ix_cron_logs_job_type', table_name='cron_logs')
    op.drop_table('cron_logs')
    op.drop_index('uq_registrations_settled_event_email', table_name='registrations')
    op.drop_index('ix_registrations_attendee_email', table_name='registrations')
    op.drop_index('ix_registrations_event_id', table_name='registrations')
    op.drop_table('registrations')
    op.drop_index('ix_events_expires_at', table_name='events')
    op.drop_index('ix_events_event_date', table_name='events')
    op.drop_index('ix_events_status', table_name='events')
    op.drop_index('ix_events_host_id', table_name='events')
    op.drop_table('events')
    op.drop_index('ix_profiles_email', table_name='profiles')
    op.drop_table('profiles')
