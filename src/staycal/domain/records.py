"""Read-only records handed to the reconciliation engine.

Three independent streams:
- OccupancyEvent: occupied blocks from the external calendar sync
- PreRegistration: guest intent created locally before the stay
- Reservation: confirmed booking with full guest/vehicle detail

Records are snapshots. The engine reads them and never mutates them.
Day fields hold None when the upstream value failed to parse; such
records are excluded from classification and matching.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from .days import normalize_key

# Summary the channel manager puts on days the host closed manually
HOST_BLOCK_LABEL = "Airbnb (Not available)"


# ── Enums ─────────────────────────────────────────────────


class EventKind(str, Enum):
    STAY = "stay"
    HOST_BLOCK = "host-block"


class EventSource(str, Enum):
    SYNC = "sync"
    DIRECT = "direct"


# ── Records ───────────────────────────────────────────────


@dataclass(frozen=True)
class OccupancyEvent:
    """Occupied block [start_day, end_day) from the external calendar.

    ``kind`` is set by the snapshot loader. When it is None (records built
    by hand) the label is compared against HOST_BLOCK_LABEL.
    """

    id: str
    label: str
    start_day: date | None
    end_day: date | None
    reservation_code: str | None = None
    kind: EventKind | None = None
    source: EventSource = EventSource.SYNC

    @property
    def is_host_block(self) -> bool:
        if self.kind is not None:
            return self.kind == EventKind.HOST_BLOCK
        return normalize_key(self.label) == HOST_BLOCK_LABEL


@dataclass(frozen=True)
class PreRegistration:
    """Guest intent registered before the stay.

    ``linked_reservation_id`` is the renter identity written once the guest
    completes the full registration. Some flows only ever fill
    ``reservation_code``.
    """

    id: str
    guest_name: str
    check_in_day: date | None
    check_out_day: date | None
    email: str | None = None
    phone: str | None = None
    linked_reservation_id: str | None = None
    reservation_code: str | None = None
    status: str = "pending"
    adults_count: int | None = None
    children_count: int | None = None
    babies_count: int | None = None
    check_in_time: str | None = None
    check_out_time: str | None = None


@dataclass(frozen=True)
class Guest:
    name: str
    age: int | None = None


@dataclass(frozen=True)
class Vehicle:
    brand: str
    model: str
    color: str
    license_plate: str


@dataclass(frozen=True)
class Reservation:
    """Confirmed booking.

    ``guest_identity`` is the renter's stable identity (user id), distinct
    from the document ``id``.
    """

    id: str
    guest_identity: str | None
    guest_name: str
    reservation_code: str | None = None
    email: str | None = None
    phone: str | None = None
    guests: tuple[Guest, ...] = ()
    vehicles: tuple[Vehicle, ...] = ()
    check_in_day: date | None = None
    check_out_day: date | None = None
    status: str = "upcoming"
    source: str | None = None
    number_of_guests: int | None = None
    adults_count: int | None = None
    children_count: int | None = None
    babies_count: int | None = None
    check_in_time: str | None = None
    check_out_time: str | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.status == "cancelled"
