from .locations.models import Location, SeatMap, SeatMapSection
from .events.models import Event, EventSection, RowPrice, SeatMapConfiguration
from .tickets.models import Ticket, TicketSeat

__all__ = (
    "Location", "SeatMap", "SeatMapSection", "Event", "EventSection", "RowPrice", "SeatMapConfiguration",
    "Ticket", "TicketSeat"
)
