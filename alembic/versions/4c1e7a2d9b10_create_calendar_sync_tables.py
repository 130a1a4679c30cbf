"""create_calendar_sync_tables

Revision ID: 4c1e7a2d9b10
Revises:
Create Date: 2026-10-18 09:12:44.201137

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1e7a2d9b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'account_credentials',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('account_id', sa.String(length=100), nullable=False),
        sa.Column('account_kind', sa.String(length=20), nullable=False),
        sa.Column('company_id', sa.String(length=100), nullable=True),
        sa.Column('user_type', sa.String(length=20), nullable=True),
        sa.Column('access_token', sa.Text(), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('expires_in', sa.Integer(), nullable=False),
        sa.Column('scope', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_account_credentials_account_id', 'account_credentials', ['account_id'])
    op.create_index(
        'ix_account_credential_lookup',
        'account_credentials',
        ['account_id', 'account_kind'],
        unique=True,
    )

    op.create_table(
        'account_details',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('ghl_id', sa.String(length=100), nullable=False),
        sa.Column('account_kind', sa.String(length=20), nullable=True),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('email', sa.String(length=200), nullable=True),
        sa.Column('timezone', sa.String(length=64), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_account_details_ghl_id', 'account_details', ['ghl_id'], unique=True)

    op.create_table(
        'calendar_records',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('ghl_calendar_id', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('slot_interval', sa.Integer(), nullable=False),
        sa.Column('slot_duration', sa.Integer(), nullable=False),
        sa.Column('pre_buffer_time', sa.Integer(), nullable=False),
        sa.Column('allow_booking_after', sa.Integer(), nullable=False),
        sa.Column('allow_booking_for', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('group_id', sa.String(length=100), nullable=True),
        sa.Column('slug', sa.String(length=255), nullable=True),
        sa.Column('appointments_per_slot', sa.Integer(), nullable=False),
        sa.Column('appointments_per_day', sa.Integer(), nullable=False),
        sa.Column('allow_cancellation', sa.Boolean(), nullable=True),
        sa.Column('allow_reschedule', sa.Boolean(), nullable=True),
        sa.Column('ghl_location_id', sa.String(length=100), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        'ix_calendar_records_ghl_calendar_id', 'calendar_records', ['ghl_calendar_id'], unique=True
    )
    op.create_index('ix_calendar_records_ghl_location_id', 'calendar_records', ['ghl_location_id'])

    op.create_table(
        'calendar_open_hours',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column(
            'calendar_id',
            sa.String(length=36),
            sa.ForeignKey('calendar_records.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('open_hour', sa.Integer(), nullable=False),
        sa.Column('open_minute', sa.Integer(), nullable=False),
        sa.Column('close_hour', sa.Integer(), nullable=False),
        sa.Column('close_minute', sa.Integer(), nullable=False),
        sa.Column('ghl_calendar_id', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('calendar_id', 'day_of_week', name='uq_open_hours_calendar_day'),
    )

    op.create_table(
        'calendar_team_members',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column(
            'calendar_id',
            sa.String(length=36),
            sa.ForeignKey('calendar_records.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('user_id', sa.String(length=100), nullable=False),
        sa.Column('priority', sa.Float(), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=True),
        sa.Column('ghl_calendar_id', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('calendar_id', 'user_id', name='uq_team_member_calendar_user'),
    )

    op.create_table(
        'calendar_booked_slots',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('ghl_event_id', sa.String(length=100), nullable=False),
        sa.Column('appointment_status', sa.String(length=50), nullable=True),
        sa.Column('ghl_location_id', sa.String(length=100), nullable=True),
        sa.Column('ghl_assigned_user_id', sa.String(length=100), nullable=True),
        sa.Column('ghl_calendar_id', sa.String(length=100), nullable=True),
        sa.Column('start_time', sa.BigInteger(), nullable=True),
        sa.Column('end_time', sa.BigInteger(), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        'ix_calendar_booked_slots_ghl_event_id', 'calendar_booked_slots', ['ghl_event_id'], unique=True
    )
    op.create_index(
        'ix_calendar_booked_slots_ghl_calendar_id', 'calendar_booked_slots', ['ghl_calendar_id']
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('calendar_booked_slots')
    op.drop_table('calendar_team_members')
    op.drop_table('calendar_open_hours')
    op.drop_table('calendar_records')
    op.drop_table('account_details')
    op.drop_table('account_credentials')
