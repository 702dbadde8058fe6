"""Initial migration - events, guests, inventory, budget and itinerary tables

Revision ID: 4f1c2a9b7e3d
Revises:
Create Date: 2026-10-16 12:00:00

"""
from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy_utils import UUIDType

# revision identifiers, used by Alembic.
revision: str = '4f1c2a9b7e3d'
down_revision: Union[str, None] = None
branch_labels: Union[str, None] = None
depends_on: Union[str, None] = None


def _uuid_pk() -> sa.Column:
    return sa.Column('uuid', UUIDType(binary=False), primary_key=True)


def _fk(name: str, target: str, ondelete: str = 'CASCADE', nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        UUIDType(binary=False),
        sa.ForeignKey(f'{target}.uuid', ondelete=ondelete),
        nullable=nullable,
        index=True,
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.current_timestamp(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.current_timestamp(), nullable=False),
    ]


def upgrade() -> None:
    # Create events table
    op.create_table(
        'events',
        _uuid_pk(),
        *_timestamps(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('location', sa.String(500), nullable=True),
        sa.Column('timezone', sa.String(50), nullable=True),
        sa.Column('event_code', sa.String(50), nullable=True, unique=True),
    )

    # Create tiers table (guest labels: VIP, Family, ...)
    op.create_table(
        'tiers',
        _uuid_pk(),
        *_timestamps(),
        _fk('event_id', 'events'),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('add_on_budget', sa.Integer, nullable=False),
        sa.Column('waitlist_priority', sa.Integer, nullable=True),
        sa.Column('requires_room', sa.Boolean, nullable=False),
    )

    # Create guests table
    op.create_table(
        'guests',
        _uuid_pk(),
        *_timestamps(),
        _fk('event_id', 'events'),
        _fk('label_id', 'tiers', ondelete='SET NULL', nullable=True),
        sa.Column('name', sa.String(255), nullable=False, index=True),
        sa.Column('email', sa.String(255), nullable=True, index=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending', 'confirmed', 'declined', 'arrived', 'no_show', name='guest_status_enum'),
            nullable=False,
        ),
        sa.Column('allocated_seats', sa.Integer, nullable=False),
        sa.Column('confirmed_seats', sa.Integer, nullable=False),
        sa.Column('is_on_waitlist', sa.Boolean, nullable=False),
        sa.Column('waitlist_priority', sa.Integer, nullable=False),
        sa.Column(
            'registration_source',
            sa.Enum('invited', 'on_spot', 'self_reg', name='registration_source_enum'),
            nullable=False,
        ),
        sa.Column('booking_ref', sa.String(20), nullable=True),
    )

    # Create resource_pools table (hotel and flight blocks)
    op.create_table(
        'resource_pools',
        _uuid_pk(),
        *_timestamps(),
        _fk('event_id', 'events'),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('inventory_type', sa.Enum('hotel', 'flight', name='inventory_type_enum'), nullable=False),
        sa.Column('is_primary', sa.Boolean, nullable=False),
        sa.Column('blocked', sa.Integer, nullable=False),
        sa.Column('confirmed', sa.Integer, nullable=False),
        sa.Column('valid_from', sa.Date, nullable=True),
        sa.Column('valid_to', sa.Date, nullable=True),
        sa.Column('negotiated_rate', sa.Numeric(12, 2), nullable=True),
    )

    # Create waitlist_entries table
    op.create_table(
        'waitlist_entries',
        _uuid_pk(),
        *_timestamps(),
        _fk('pool_id', 'resource_pools'),
        _fk('guest_id', 'guests'),
        sa.Column('priority', sa.Integer, nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('requested_seats', sa.Integer, nullable=False),
        sa.UniqueConstraint('pool_id', 'guest_id', name='uq_waitlist_pool_guest'),
    )

    # Create perks and tier_perks tables
    op.create_table(
        'perks',
        _uuid_pk(),
        *_timestamps(),
        _fk('event_id', 'events'),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('perk_type', sa.String(50), nullable=False),
        sa.Column('unit_cost', sa.Integer, nullable=False),
        sa.Column(
            'pricing_type',
            sa.Enum('included', 'requestable', 'self_pay', name='pricing_type_enum'),
            nullable=False,
        ),
        sa.Column('currency', sa.String(3), nullable=False),
    )
    op.create_table(
        'tier_perks',
        _uuid_pk(),
        *_timestamps(),
        _fk('tier_id', 'tiers'),
        _fk('perk_id', 'perks'),
        sa.Column('is_enabled', sa.Boolean, nullable=False),
        sa.Column('expense_handled_by_client', sa.Boolean, nullable=False),
        sa.Column('budget_consumed', sa.Integer, nullable=True),
        sa.Column('agent_override', sa.Boolean, nullable=False),
        sa.UniqueConstraint('tier_id', 'perk_id', name='uq_tier_perk'),
    )

    # Create guest_requests table
    op.create_table(
        'guest_requests',
        _uuid_pk(),
        *_timestamps(),
        _fk('guest_id', 'guests'),
        _fk('perk_id', 'perks', ondelete='SET NULL', nullable=True),
        sa.Column('request_type', sa.Enum('perk_request', 'custom', name='request_type_enum'), nullable=False),
        sa.Column(
            'addon_type',
            sa.Enum(
                'room_upgrade',
                'airport_transfer',
                'extra_bed',
                'early_checkin',
                'late_checkout',
                'return_flight',
                'sightseeing',
                'custom',
                name='addon_type_enum',
            ),
            nullable=True,
        ),
        sa.Column(
            'status',
            sa.Enum('pending', 'approved', 'rejected', 'forwarded_to_client', name='request_status_enum'),
            nullable=False,
            index=True,
        ),
        sa.Column('budget_consumed', sa.Integer, nullable=False),
        sa.Column('was_forwarded', sa.Boolean, nullable=False),
        sa.Column('notes', sa.Text, nullable=True),
    )

    # Create itinerary tables
    op.create_table(
        'itinerary_sessions',
        _uuid_pk(),
        *_timestamps(),
        _fk('event_id', 'events'),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('is_mandatory', sa.Boolean, nullable=False),
        sa.Column('capacity', sa.Integer, nullable=True),
        sa.Column('current_attendees', sa.Integer, nullable=False),
    )
    op.create_table(
        'itinerary_registrations',
        _uuid_pk(),
        *_timestamps(),
        _fk('guest_id', 'guests'),
        _fk('session_id', 'itinerary_sessions'),
        sa.Column('registered_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('guest_id', 'session_id', name='uq_registration_guest_session'),
    )


def downgrade() -> None:
    op.drop_table('itinerary_registrations')
    op.drop_table('itinerary_sessions')
    op.drop_table('guest_requests')
    op.drop_table('tier_perks')
    op.drop_table('perks')
    op.drop_table('waitlist_entries')
    op.drop_table('resource_pools')
    op.drop_table('guests')
    op.drop_table('tiers')
    op.drop_table('events')

    for enum_name in (
        'request_status_enum',
        'addon_type_enum',
        'request_type_enum',
        'pricing_type_enum',
        'inventory_type_enum',
        'registration_source_enum',
        'guest_status_enum',
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
