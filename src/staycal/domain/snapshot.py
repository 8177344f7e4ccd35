"""Load upstream documents into read-only engine records.

Upstream payloads are loosely typed: ids and codes arrive as strings or
numbers, dates as ISO datetimes or bare days, contact data either nested
under ``contact`` or flat. Two key conventions are accepted:

- canonical: id/label/startDay/endDay, guestName/checkInDay/
  linkedReservationId, guestIdentity
- document store: uid/summary/start/end, _id/name/checkInDate/
  registeredUserId, userId/checkInDate

A record with no id is skipped (logged, never raised). A record whose date
does not parse is kept with a None day; the engine excludes it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from staycal.observability.redaction import safe_log_context

from .classification import valid_span
from .days import normalize_day, normalize_key
from .records import (
    HOST_BLOCK_LABEL,
    EventKind,
    EventSource,
    Guest,
    OccupancyEvent,
    PreRegistration,
    Reservation,
    Vehicle,
)

logger = logging.getLogger(__name__)


class InvalidRecordError(Exception):
    """Raised when an upstream payload cannot become a record."""

    def __init__(self, record_type: str, reason: str) -> None:
        self.record_type = record_type
        self.reason = reason
        super().__init__(f"Invalid {record_type}: {reason}")


@dataclass(frozen=True)
class Snapshot:
    """One consistent view of the three record sets."""

    events: tuple[OccupancyEvent, ...] = ()
    pre_registrations: tuple[PreRegistration, ...] = ()
    reservations: tuple[Reservation, ...] = ()


# ── Field helpers ─────────────────────────────────────────


def _first(payload: Mapping[str, Any], *keys: str) -> Any:
    """First non-None value among keys."""
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _optional_str(value: Any) -> str | None:
    key = normalize_key(value)
    return key or None


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _contact(payload: Mapping[str, Any], *, email_key: str, phone_key: str) -> tuple[str | None, str | None]:
    contact = payload.get("contact")
    if not isinstance(contact, Mapping):
        contact = {}
    email = _first(contact, "email") or payload.get(email_key) or payload.get("email")
    phone = _first(contact, "phone") or payload.get(phone_key) or payload.get("phone")
    return _optional_str(email), _optional_str(phone)


def _require_id(payload: Any, record_type: str, *keys: str) -> str:
    if not isinstance(payload, Mapping):
        raise InvalidRecordError(record_type, "payload is not a mapping")
    record_id = normalize_key(_first(payload, *keys))
    if not record_id:
        raise InvalidRecordError(record_type, "missing id")
    return record_id


# ── Per-record loaders ────────────────────────────────────


def event_from_payload(
    payload: Mapping[str, Any],
    *,
    host_block_label: str = HOST_BLOCK_LABEL,
) -> OccupancyEvent:
    """Build an OccupancyEvent from a synced calendar entry.

    An explicit ``kind`` ("stay" / "host-block") wins; otherwise the label
    is compared with ``host_block_label``.

    Raises:
        InvalidRecordError: payload is not a mapping or has no id.
    """
    event_id = _require_id(payload, "event", "id", "uid", "_id")
    label = normalize_key(_first(payload, "label", "summary"))

    raw_kind = normalize_key(payload.get("kind"))
    if raw_kind in (EventKind.STAY.value, EventKind.HOST_BLOCK.value):
        kind = EventKind(raw_kind)
    elif label == host_block_label:
        kind = EventKind.HOST_BLOCK
    else:
        kind = EventKind.STAY

    return OccupancyEvent(
        id=event_id,
        label=label,
        start_day=normalize_day(_first(payload, "startDay", "start_day", "start")),
        end_day=normalize_day(_first(payload, "endDay", "end_day", "end")),
        reservation_code=_optional_str(_first(payload, "reservationCode", "reservation_code")),
        kind=kind,
        source=EventSource.SYNC,
    )


def pre_registration_from_payload(payload: Mapping[str, Any]) -> PreRegistration:
    """Build a PreRegistration from a locally stored document.

    Raises:
        InvalidRecordError: payload is not a mapping or has no id.
    """
    reg_id = _require_id(payload, "pre_registration", "id", "_id")
    email, phone = _contact(payload, email_key="email", phone_key="phone")

    return PreRegistration(
        id=reg_id,
        guest_name=normalize_key(_first(payload, "guestName", "guest_name", "name")),
        check_in_day=normalize_day(_first(payload, "checkInDay", "check_in_day", "checkInDate")),
        check_out_day=normalize_day(_first(payload, "checkOutDay", "check_out_day", "checkOutDate")),
        email=email,
        phone=phone,
        linked_reservation_id=_optional_str(
            _first(payload, "linkedReservationId", "linked_reservation_id", "registeredUserId")
        ),
        reservation_code=_optional_str(_first(payload, "reservationCode", "reservation_code")),
        status=normalize_key(payload.get("status")) or "pending",
        adults_count=_optional_int(payload.get("adultsCount")),
        children_count=_optional_int(payload.get("childrenCount")),
        babies_count=_optional_int(payload.get("babiesCount")),
        check_in_time=_optional_str(payload.get("checkInTime")),
        check_out_time=_optional_str(payload.get("checkOutTime")),
    )


def _guests(raw: Any) -> tuple[Guest, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(
        Guest(name=normalize_key(g.get("name")), age=_optional_int(g.get("age")))
        for g in raw
        if isinstance(g, Mapping)
    )


def _vehicles(raw: Any) -> tuple[Vehicle, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(
        Vehicle(
            brand=normalize_key(v.get("brand")),
            model=normalize_key(v.get("model")),
            color=normalize_key(v.get("color")),
            license_plate=normalize_key(_first(v, "licensePlate", "license_plate")),
        )
        for v in raw
        if isinstance(v, Mapping)
    )


def reservation_from_payload(payload: Mapping[str, Any]) -> Reservation:
    """Build a Reservation from a confirmed booking document.

    Raises:
        InvalidRecordError: payload is not a mapping or has no id.
    """
    res_id = _require_id(payload, "reservation", "id", "_id")
    email, phone = _contact(payload, email_key="guestEmail", phone_key="guestPhone")

    return Reservation(
        id=res_id,
        guest_identity=_optional_str(_first(payload, "guestIdentity", "guest_identity", "userId")),
        guest_name=normalize_key(_first(payload, "guestName", "guest_name")),
        reservation_code=_optional_str(_first(payload, "reservationCode", "reservation_code")),
        email=email,
        phone=phone,
        guests=_guests(payload.get("guests")),
        vehicles=_vehicles(payload.get("vehicles")),
        check_in_day=normalize_day(_first(payload, "checkInDay", "check_in_day", "checkInDate")),
        check_out_day=normalize_day(_first(payload, "checkOutDay", "check_out_day", "checkOutDate")),
        status=normalize_key(payload.get("status")) or "upcoming",
        source=_optional_str(payload.get("source")),
        number_of_guests=_optional_int(payload.get("numberOfGuests")),
        adults_count=_optional_int(payload.get("adultsCount")),
        children_count=_optional_int(payload.get("childrenCount")),
        babies_count=_optional_int(payload.get("babiesCount")),
        check_in_time=_optional_str(payload.get("checkInTime")),
        check_out_time=_optional_str(payload.get("checkOutTime")),
    )


# ── Snapshot ──────────────────────────────────────────────


def _load_all(record_type: str, payloads: Iterable[Any], loader) -> list:
    records = []
    for index, payload in enumerate(payloads):
        try:
            records.append(loader(payload))
        except InvalidRecordError as exc:
            logger.warning(
                "record skipped",
                extra={
                    "extra_fields": safe_log_context(
                        record_type=record_type,
                        index=index,
                        reason=exc.reason,
                    ),
                },
            )
    return records


def load_snapshot(
    events: Iterable[Mapping[str, Any]] = (),
    pre_registrations: Iterable[Mapping[str, Any]] = (),
    reservations: Iterable[Mapping[str, Any]] = (),
    *,
    host_block_label: str = HOST_BLOCK_LABEL,
) -> Snapshot:
    """Load the three upstream collections into a Snapshot.

    Bad records are skipped with a warning. Events with an unusable
    interval are kept (classification skips them) but reported here once,
    so per-day classification stays silent.
    """
    loaded_events = _load_all(
        "event",
        events,
        lambda p: event_from_payload(p, host_block_label=host_block_label),
    )
    for event in loaded_events:
        if valid_span(event) is None:
            logger.warning(
                "event interval invalid",
                extra={
                    "extra_fields": {
                        "event_id": event.id,
                        "start_day": event.start_day.isoformat() if event.start_day else None,
                        "end_day": event.end_day.isoformat() if event.end_day else None,
                    },
                },
            )

    snapshot = Snapshot(
        events=tuple(loaded_events),
        pre_registrations=tuple(_load_all("pre_registration", pre_registrations, pre_registration_from_payload)),
        reservations=tuple(_load_all("reservation", reservations, reservation_from_payload)),
    )
    logger.debug(
        "snapshot loaded",
        extra={
            "extra_fields": {
                "events": len(snapshot.events),
                "pre_registrations": len(snapshot.pre_registrations),
                "reservations": len(snapshot.reservations),
            },
        },
    )
    return snapshot
