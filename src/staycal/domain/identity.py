"""Cross-source identity resolution.

Pipeline (per event, one way, no backtracking):

    OccupancyEvent -> PreRegistration -> Reservation

- Event to pre-registration: exact day-level match of both check-in and
  check-out. No code fallback in this direction.
- Pre-registration to reservation: linked renter identity when set,
  otherwise reservation code.
- Event to reservation directly (fallback when no link was found): event
  reservation code, then exact day range.

Ambiguous matches resolve to the first candidate in input order. Nothing
is persisted; callers re-run resolution against each fresh snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .days import normalize_key
from .records import OccupancyEvent, PreRegistration, Reservation

logger = logging.getLogger(__name__)


class OccupancyState(str, Enum):
    FULLY_REGISTERED = "fully_registered"
    PRE_REGISTERED = "pre_registered"
    UNREGISTERED = "unregistered"
    HOST_BLOCKED = "host_blocked"


@dataclass(frozen=True)
class ResolvedOccupant:
    event: OccupancyEvent
    pre_registration: PreRegistration | None
    reservation: Reservation | None
    state: OccupancyState


def find_pre_registration(
    event: OccupancyEvent,
    registrations: Sequence[PreRegistration],
) -> PreRegistration | None:
    """Find the pre-registration whose stay dates equal the event's.

    Returns the first match in input order. When more than one registration
    shares the dates a warning is logged with the candidate ids.
    """
    if event.start_day is None or event.end_day is None:
        return None

    matches = [
        r
        for r in registrations
        if r.check_in_day == event.start_day and r.check_out_day == event.end_day
    ]
    if not matches:
        return None

    if len(matches) > 1:
        # Log ids only: registrations carry guest contact data
        logger.warning(
            "ambiguous pre-registration match",
            extra={
                "extra_fields": {
                    "event_id": event.id,
                    "start_day": event.start_day.isoformat(),
                    "end_day": event.end_day.isoformat(),
                    "candidate_ids": [m.id for m in matches],
                },
            },
        )
    return matches[0]


def find_reservation(
    registration: PreRegistration | None,
    reservations: Sequence[Reservation],
) -> Reservation | None:
    """Find the reservation a pre-registration points to.

    Order:
    1. linked_reservation_id against reservation.guest_identity
    2. reservation_code against reservation.reservation_code
    A set link is authoritative: the code is not tried when the link misses.
    """
    if registration is None:
        return None

    linked = normalize_key(registration.linked_reservation_id)
    if linked:
        return next(
            (r for r in reservations if normalize_key(r.guest_identity) == linked),
            None,
        )

    code = normalize_key(registration.reservation_code)
    if code:
        return next(
            (r for r in reservations if normalize_key(r.reservation_code) == code),
            None,
        )

    return None


def find_reservation_for_event(
    event: OccupancyEvent,
    reservations: Sequence[Reservation],
) -> Reservation | None:
    """Match a reservation to an event without a pre-registration.

    Tries the event's reservation code first, then the exact day range.
    Cancelled reservations never match.
    """
    if event.start_day is None or event.end_day is None:
        return None

    active = [r for r in reservations if not r.is_cancelled]

    code = normalize_key(event.reservation_code)
    if code:
        by_code = next(
            (r for r in active if normalize_key(r.reservation_code) == code),
            None,
        )
        if by_code is not None:
            return by_code

    return next(
        (
            r
            for r in active
            if r.check_in_day == event.start_day and r.check_out_day == event.end_day
        ),
        None,
    )


def resolve_occupant(
    event: OccupancyEvent,
    registrations: Sequence[PreRegistration],
    reservations: Sequence[Reservation],
) -> ResolvedOccupant:
    """Resolve who occupies an event.

    Host blocks never carry a guest, so resolution is not attempted.
    """
    if event.is_host_block:
        return ResolvedOccupant(event, None, None, OccupancyState.HOST_BLOCKED)

    pre_registration = find_pre_registration(event, registrations)
    reservation = find_reservation(pre_registration, reservations)
    if reservation is None:
        reservation = find_reservation_for_event(event, reservations)

    if reservation is not None:
        state = OccupancyState.FULLY_REGISTERED
    elif pre_registration is not None:
        state = OccupancyState.PRE_REGISTERED
    else:
        state = OccupancyState.UNREGISTERED

    return ResolvedOccupant(event, pre_registration, reservation, state)
