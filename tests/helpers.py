"""Record builders shared by the staycal tests.

These are NOT fixtures - they are regular functions.
"""

from __future__ import annotations

from datetime import date

from staycal.domain.records import (
    HOST_BLOCK_LABEL,
    OccupancyEvent,
    PreRegistration,
    Reservation,
)


def make_event(
    start: date | None,
    end: date | None,
    *,
    event_id: str = "evt-1",
    label: str = "Reserved",
    reservation_code: str | None = None,
) -> OccupancyEvent:
    return OccupancyEvent(
        id=event_id,
        label=label,
        start_day=start,
        end_day=end,
        reservation_code=reservation_code,
    )


def make_block(start: date, end: date, *, event_id: str = "blk-1") -> OccupancyEvent:
    return make_event(start, end, event_id=event_id, label=HOST_BLOCK_LABEL)


def make_pre_registration(
    check_in: date | None,
    check_out: date | None,
    *,
    reg_id: str = "pre-1",
    linked_reservation_id: str | None = None,
    reservation_code: str | None = None,
    **extra,
) -> PreRegistration:
    return PreRegistration(
        id=reg_id,
        guest_name="Guest Test",
        check_in_day=check_in,
        check_out_day=check_out,
        linked_reservation_id=linked_reservation_id,
        reservation_code=reservation_code,
        **extra,
    )


def make_reservation(
    *,
    res_id: str = "res-1",
    guest_name: str = "Guest Test",
    guest_identity: str | None = "user-1",
    reservation_code: str | None = None,
    check_in: date | None = None,
    check_out: date | None = None,
    **extra,
) -> Reservation:
    return Reservation(
        id=res_id,
        guest_identity=guest_identity,
        guest_name=guest_name,
        reservation_code=reservation_code,
        check_in_day=check_in,
        check_out_day=check_out,
        **extra,
    )
