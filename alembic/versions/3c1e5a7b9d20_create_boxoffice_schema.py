"""create boxoffice schema

Revision ID: 3c1e5a7b9d20
Revises:
Create Date: 2026-10-12 09:14:27.418503

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3c1e5a7b9d20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

event_state = postgresql.ENUM('proximo', 'activo', 'finalizado', 'cancelado', name='event_state', create_type=False)
event_type = postgresql.ENUM('football', 'cinema', 'concert', 'theater', 'festival', name='event_type',
                             create_type=False)
location_category = postgresql.ENUM('stadium', 'cinema', 'concert', 'theater', 'festival', name='location_category',
                                    create_type=False)
seat_map_type = postgresql.ENUM('football', 'cinema', 'theater', name='seat_map_type', create_type=False)
ticket_status = postgresql.ENUM('pending', 'paid', 'cancelled', name='ticket_status', create_type=False)


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in (event_state, event_type, location_category, seat_map_type, ticket_status):
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        'seat_maps',
        sa.Column('id', sa.Text(), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('type', seat_map_type, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        'seat_map_sections',
        sa.Column('id', sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column('seat_map_id', sa.Text(), sa.ForeignKey('seat_maps.id', ondelete='CASCADE'), nullable=False),
        sa.Column('section_id', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('rows', sa.Integer(), nullable=False),
        sa.Column('seats_per_row', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('color', sa.Text(), nullable=False),
        sa.Column('position', sa.Text(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.UniqueConstraint('seat_map_id', 'section_id', name='uq_seat_map_section'),
        sa.CheckConstraint('rows > 0', name='chk_seat_map_section_rows'),
        sa.CheckConstraint('seats_per_row > 0', name='chk_seat_map_section_seats'),
        sa.CheckConstraint('price >= 0', name='chk_seat_map_section_price'),
    )
    op.create_table(
        'locations',
        sa.Column('id', sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('category', location_category, nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.Column('seat_map_id', sa.Text(), sa.ForeignKey('seat_maps.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('type', event_type, nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('location_id', sa.Integer(), sa.ForeignKey('locations.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('state', event_state, nullable=False, server_default='proximo'),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='EUR'),
        sa.Column('uses_section_pricing', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('blocked_seats', postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column('blocked_sections', postgresql.ARRAY(sa.Text()), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('price >= 0', name='chk_event_price_nonneg'),
        sa.CheckConstraint('capacity >= 0', name='chk_event_capacity_nonneg'),
    )
    op.create_index('ix_events_date', 'events', ['date'])
    op.create_index('ix_events_state', 'events', ['state'])
    op.create_index('ix_events_location_id', 'events', ['location_id'])

    op.create_table(
        'event_sections',
        sa.Column('id', sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('section_id', sa.Text(), nullable=False),
        sa.Column('section_name', sa.Text(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('rows', sa.Integer(), nullable=False),
        sa.Column('seats_per_row', sa.Integer(), nullable=False),
        sa.Column('default_price', sa.Numeric(10, 2), nullable=True),
        sa.UniqueConstraint('event_id', 'section_id', name='uq_event_section'),
        sa.CheckConstraint('default_price >= 0', name='chk_section_default_price'),
        sa.CheckConstraint('capacity >= 0', name='chk_section_capacity'),
        sa.CheckConstraint('rows > 0', name='chk_section_rows'),
        sa.CheckConstraint('seats_per_row > 0', name='chk_section_seats_per_row'),
    )
    op.create_index('ix_event_sections_event_id', 'event_sections', ['event_id'])

    op.create_table(
        'event_section_row_prices',
        sa.Column('id', sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column('section_pk', sa.Integer(), sa.ForeignKey('event_sections.id', ondelete='CASCADE'),
                  nullable=False),
        sa.Column('row', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.UniqueConstraint('section_pk', 'row', name='uq_section_row'),
        sa.CheckConstraint('price >= 0', name='chk_row_price_nonneg'),
    )
    op.create_index('ix_event_section_row_prices_section_pk', 'event_section_row_prices', ['section_pk'])

    op.create_table(
        'seat_map_configurations',
        sa.Column('id', sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False,
                  unique=True),
        sa.Column('seat_map_id', sa.Text(), nullable=True),
        sa.Column('blocked_seats', postgresql.ARRAY(sa.Text()), nullable=False, server_default='{}'),
        sa.Column('blocked_sections', postgresql.ARRAY(sa.Text()), nullable=False, server_default='{}'),
        sa.Column('configured_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'tickets',
        sa.Column('id', sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('status', ticket_status, nullable=False, server_default='pending'),
        sa.Column('qr_code', sa.Text(), nullable=False, unique=True),
        sa.Column('ticket_number', sa.Text(), nullable=False, unique=True),
        sa.Column('validation_code', sa.Text(), nullable=False),
        sa.Column('purchased_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('price >= 0', name='chk_ticket_price_nonneg'),
        sa.CheckConstraint('quantity > 0', name='chk_ticket_quantity_pos'),
    )
    op.create_index('ix_tickets_user_id', 'tickets', ['user_id'])
    op.create_index('ix_tickets_event_id', 'tickets', ['event_id'])
    op.create_index('ix_tickets_event_status', 'tickets', ['event_id', 'status'])
    op.create_index('ix_tickets_user_status', 'tickets', ['user_id', 'status'])

    op.create_table(
        'ticket_seats',
        sa.Column('id', sa.Integer(), sa.Identity(always=True), primary_key=True),
        sa.Column('ticket_id', sa.Integer(), sa.ForeignKey('tickets.id', ondelete='CASCADE'), nullable=False),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('seat_id', sa.Text(), nullable=False),
        sa.Column('section_id', sa.Text(), nullable=False),
        sa.Column('row', sa.Integer(), nullable=False),
        sa.Column('seat', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint('price >= 0', name='chk_ticket_seat_price_nonneg'),
    )
    op.create_index('ix_ticket_seats_ticket_id', 'ticket_seats', ['ticket_id'])
    op.create_index(
        'uq_ticket_seats_event_seat_active',
        'ticket_seats',
        ['event_id', 'seat_id'],
        unique=True,
        postgresql_where=sa.text('active')
    )


def downgrade() -> None:
    op.drop_table('ticket_seats')
    op.drop_table('tickets')
    op.drop_table('seat_map_configurations')
    op.drop_table('event_section_row_prices')
    op.drop_table('event_sections')
    op.drop_table('events')
    op.drop_table('locations')
    op.drop_table('seat_map_sections')
    op.drop_table('seat_maps')

    bind = op.get_bind()
    for enum_type in (ticket_status, seat_map_type, location_category, event_type, event_state):
        enum_type.drop(bind, checkfirst=True)
