"""Put direct bookings on the calendar.

Reservations made outside the channel manager never show up in the
synced feed. Each active direct reservation becomes a synthetic stay
event unless the feed already has an event with the same day range.
"""

from __future__ import annotations

from collections.abc import Sequence

from .classification import valid_span
from .records import EventKind, EventSource, OccupancyEvent, Reservation

DIRECT_EVENT_PREFIX = "direct-"
DIRECT_EVENT_LABEL = "Reserva Direta"


def direct_event(reservation: Reservation) -> OccupancyEvent:
    return OccupancyEvent(
        id=f"{DIRECT_EVENT_PREFIX}{reservation.id}",
        label=reservation.guest_name or DIRECT_EVENT_LABEL,
        start_day=reservation.check_in_day,
        end_day=reservation.check_out_day,
        reservation_code=reservation.reservation_code,
        kind=EventKind.STAY,
        source=EventSource.DIRECT,
    )


def merge_direct_reservations(
    events: Sequence[OccupancyEvent],
    reservations: Sequence[Reservation],
) -> list[OccupancyEvent]:
    """Feed events followed by synthetic events for direct reservations.

    Cancelled reservations and those with an unusable date range are left
    out. Inputs are not modified.
    """
    merged = list(events)
    ranges = {(e.start_day, e.end_day) for e in merged}

    for reservation in reservations:
        if reservation.source != "direct" or reservation.is_cancelled:
            continue
        event = direct_event(reservation)
        if valid_span(event) is None:
            continue
        key = (event.start_day, event.end_day)
        if key in ranges:
            continue
        merged.append(event)
        ranges.add(key)

    return merged
