"""Calendar endpoints.

The caller posts the three record snapshots it already fetched (synced
events, pre-registrations, reservations); the engine reconciles them and
the result is serialized for the calendar surfaces.

Provides:
- POST /calendar/month: month grid for the public, staff or admin view
- POST /calendar/day: single-day detail
- POST /calendar/turnovers: upcoming arrivals and departures
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field, field_validator

from staycal.config import Settings
from staycal.domain.calendar import (
    CalendarDay,
    Turnover,
    build_day,
    build_month,
    upcoming_turnovers,
)
from staycal.domain.days import today_key
from staycal.domain.display import guest_count, translate_label
from staycal.domain.identity import ResolvedOccupant
from staycal.domain.snapshot import Snapshot, load_snapshot
from staycal.observability.logging import get_logger

router = APIRouter(prefix="/calendar", tags=["calendar"])

logger = get_logger(__name__)

MAX_WINDOW_DAYS = 31


# ── Schemas ───────────────────────────────────────────────


class SnapshotRequest(BaseModel):
    # Entries stay untyped: load_snapshot skips bad records one by one
    events: list[Any] = Field(default_factory=list)
    pre_registrations: list[Any] = Field(default_factory=list)
    reservations: list[Any] = Field(default_factory=list)
    today: date | None = None


class MonthRequest(SnapshotRequest):
    year: int = Field(ge=1970, le=2100)
    month: int
    view_mode: Literal["public", "staff", "admin"] = "staff"

    @field_validator("month")
    @classmethod
    def month_in_range(cls, v: int) -> int:
        if not 1 <= v <= 12:
            raise ValueError("month must be between 1 and 12")
        return v


class DayRequest(SnapshotRequest):
    day: date
    view_mode: Literal["public", "staff", "admin"] = "staff"


class TurnoversRequest(SnapshotRequest):
    window_days: int | None = Field(default=None, ge=0, le=MAX_WINDOW_DAYS)


# ── Serialization ─────────────────────────────────────────


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def _occupant_to_dict(occupant: ResolvedOccupant, *, with_contact: bool) -> dict:
    event = occupant.event
    pre_reg = occupant.pre_registration
    reservation = occupant.reservation
    guests = guest_count(reservation, pre_reg)

    data: dict[str, Any] = {
        "state": occupant.state.value,
        "event": {
            "id": event.id,
            "label": translate_label(event.label),
            "start_day": _iso(event.start_day),
            "end_day": _iso(event.end_day),
            "reservation_code": event.reservation_code,
            "source": event.source.value,
        },
        "pre_registration": None,
        "reservation": None,
        "guests": {"total": guests.total, "label": guests.label},
    }
    if pre_reg is not None:
        data["pre_registration"] = {
            "id": pre_reg.id,
            "guest_name": pre_reg.guest_name,
            "status": pre_reg.status,
        }
        if with_contact:
            data["pre_registration"].update(email=pre_reg.email, phone=pre_reg.phone)
    if reservation is not None:
        data["reservation"] = {
            "id": reservation.id,
            "guest_name": reservation.guest_name,
            "reservation_code": reservation.reservation_code,
            "status": reservation.status,
        }
        if with_contact:
            data["reservation"].update(email=reservation.email, phone=reservation.phone)
    return data


def _day_to_dict(day: CalendarDay, view_mode: str) -> dict:
    data: dict[str, Any] = {
        "day": day.day.isoformat(),
        "is_today": day.is_today,
        "is_past": day.is_past,
        "reserved": day.reserved,
        "blocked": day.blocked,
    }
    if view_mode == "public":
        return data

    with_contact = view_mode == "admin"
    data.update(
        check_in_count=day.check_in_count,
        check_out_count=day.check_out_count,
        check_in_time=day.check_in_time,
        check_out_time=day.check_out_time,
        check_ins=[_occupant_to_dict(o, with_contact=with_contact) for o in day.check_ins],
        check_outs=[_occupant_to_dict(o, with_contact=with_contact) for o in day.check_outs],
        stays=[_occupant_to_dict(o, with_contact=with_contact) for o in day.stays],
    )
    if view_mode == "admin":
        data.update(
            pre_registered=day.pre_registered,
            fully_pre_registered=day.fully_pre_registered,
        )
    return data


def _turnover_to_dict(turnover: Turnover) -> dict:
    return {
        "day": turnover.day.isoformat(),
        "kind": turnover.kind,
        "time": turnover.time,
        "guests": {"total": turnover.guests.total, "label": turnover.guests.label},
        "occupant": _occupant_to_dict(turnover.occupant, with_contact=False),
    }


# ── Helpers ───────────────────────────────────────────────


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def _snapshot(body: SnapshotRequest, settings: Settings) -> Snapshot:
    return load_snapshot(
        body.events,
        body.pre_registrations,
        body.reservations,
        host_block_label=settings.host_block_label,
    )


def _today(body: SnapshotRequest, settings: Settings) -> date:
    return body.today or today_key(settings.timezone)


# ── Routes ────────────────────────────────────────────────


@router.post("/month")
def post_month(body: MonthRequest, request: Request) -> dict:
    """Month grid for one calendar surface.

    The public view carries availability only.
    """
    settings = _settings(request)
    snapshot = _snapshot(body, settings)
    month = build_month(
        snapshot,
        body.year,
        body.month,
        view_mode=body.view_mode,
        today=_today(body, settings),
        checkin_time=settings.default_checkin_time,
        checkout_time=settings.default_checkout_time,
    )

    # Counts only: snapshots carry guest data
    logger.info(
        "calendar month built",
        extra={
            "extra_fields": {
                "year": body.year,
                "month": body.month,
                "view_mode": body.view_mode,
                "events": len(snapshot.events),
                "pre_registrations": len(snapshot.pre_registrations),
                "reservations": len(snapshot.reservations),
            }
        },
    )

    return {
        "year": month.year,
        "month": month.month,
        "leading_blanks": month.leading_blanks,
        "view_mode": body.view_mode,
        "days": [_day_to_dict(d, body.view_mode) for d in month.days],
    }


@router.post("/day")
def post_day(body: DayRequest, request: Request) -> dict:
    """Detail for one selected day."""
    settings = _settings(request)
    day = build_day(
        _snapshot(body, settings),
        body.day,
        view_mode=body.view_mode,
        today=_today(body, settings),
        checkin_time=settings.default_checkin_time,
        checkout_time=settings.default_checkout_time,
    )
    return _day_to_dict(day, body.view_mode)


@router.post("/turnovers")
def post_turnovers(body: TurnoversRequest, request: Request) -> dict:
    """Upcoming arrivals and departures for the staff dashboard."""
    settings = _settings(request)
    today = _today(body, settings)
    window = body.window_days if body.window_days is not None else settings.turnover_window_days
    turnovers = upcoming_turnovers(
        _snapshot(body, settings),
        today,
        window_days=window,
        checkin_time=settings.default_checkin_time,
        checkout_time=settings.default_checkout_time,
    )
    return {
        "today": today.isoformat(),
        "window_days": window,
        "turnovers": [_turnover_to_dict(t) for t in turnovers],
    }
