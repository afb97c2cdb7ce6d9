"""move legacy seat blocks into seat_map_configurations

Revision ID: 8d2f4b6a1e37
Revises: 3c1e5a7b9d20
Create Date: 2026-10-14 16:02:51.733120

"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '8d2f4b6a1e37'
down_revision: Union[str, Sequence[str], None] = '3c1e5a7b9d20'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO seat_map_configurations (event_id, seat_map_id, blocked_seats, blocked_sections, configured_at)
        SELECT e.id, l.seat_map_id, COALESCE(e.blocked_seats, '{}'), COALESCE(e.blocked_sections, '{}'), now()
        FROM events e
        JOIN locations l ON l.id = e.location_id
        WHERE (e.blocked_seats IS NOT NULL OR e.blocked_sections IS NOT NULL)
        ON CONFLICT (event_id) DO UPDATE
        SET blocked_seats = ARRAY(
                SELECT DISTINCT unnest(seat_map_configurations.blocked_seats || EXCLUDED.blocked_seats)
            ),
            blocked_sections = ARRAY(
                SELECT DISTINCT unnest(seat_map_configurations.blocked_sections || EXCLUDED.blocked_sections)
            )
    """)
    op.execute("""
        UPDATE events SET blocked_seats = NULL, blocked_sections = NULL
        WHERE blocked_seats IS NOT NULL OR blocked_sections IS NOT NULL
    """)


def downgrade() -> None:
    op.execute("""
        UPDATE events e
        SET blocked_seats = c.blocked_seats, blocked_sections = c.blocked_sections
        FROM seat_map_configurations c
        WHERE c.event_id = e.id
    """)
