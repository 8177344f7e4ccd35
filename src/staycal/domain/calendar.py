"""Calendar views built on the reconciliation engine.

One implementation for every surface:
- public: availability only, never guest identity
- staff: availability plus resolved arrivals, departures and stays
- admin: staff view plus pre-registration coverage flags

Each event is resolved once per build; days reuse the result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Literal

from staycal.config import DEFAULT_CHECKIN_TIME, DEFAULT_CHECKOUT_TIME

from .classification import DayClassification, ViewMode, classify_day, is_blocked, is_reserved
from .days import DayKey, leading_blanks, month_days
from .display import GuestCount, guest_count
from .identity import OccupancyState, ResolvedOccupant, resolve_occupant
from .merge import merge_direct_reservations
from .records import OccupancyEvent
from .snapshot import Snapshot

TurnoverKind = Literal["check_in", "check_out"]


@dataclass(frozen=True)
class DayResolution:
    classification: DayClassification
    stays: list[ResolvedOccupant] = field(default_factory=list)
    check_ins: list[ResolvedOccupant] = field(default_factory=list)
    check_outs: list[ResolvedOccupant] = field(default_factory=list)

    @property
    def state(self) -> OccupancyState | None:
        """Occupancy state of the day; None when free.

        With several overlapping stays the first one in feed order wins.
        """
        if not self.classification.occupied:
            return None
        if self.classification.is_host_block:
            return OccupancyState.HOST_BLOCKED
        return self.stays[0].state if self.stays else None


@dataclass(frozen=True)
class CalendarDay:
    day: DayKey
    is_today: bool
    is_past: bool
    reserved: bool
    blocked: bool
    check_in_count: int
    check_out_count: int
    check_ins: list[ResolvedOccupant] = field(default_factory=list)
    check_outs: list[ResolvedOccupant] = field(default_factory=list)
    stays: list[ResolvedOccupant] = field(default_factory=list)
    check_in_time: str | None = None
    check_out_time: str | None = None
    # Admin view only
    pre_registered: bool | None = None
    fully_pre_registered: bool | None = None


@dataclass(frozen=True)
class CalendarMonth:
    year: int
    month: int
    leading_blanks: int
    days: list[CalendarDay]


@dataclass(frozen=True)
class Turnover:
    day: DayKey
    kind: TurnoverKind
    occupant: ResolvedOccupant
    time: str
    guests: GuestCount


class _Resolver:
    """Resolves each event once against a snapshot."""

    def __init__(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot
        self.events = calendar_events(snapshot)
        self._cache: dict[OccupancyEvent, ResolvedOccupant] = {}

    def occupant(self, event: OccupancyEvent) -> ResolvedOccupant:
        resolved = self._cache.get(event)
        if resolved is None:
            resolved = resolve_occupant(
                event,
                self.snapshot.pre_registrations,
                self.snapshot.reservations,
            )
            self._cache[event] = resolved
        return resolved

    def day(self, day: DayKey) -> DayResolution:
        classification = classify_day(day, self.events)
        if classification.is_host_block:
            # Host blocks carry no guest
            stays: list[ResolvedOccupant] = []
        else:
            stays = [self.occupant(e) for e in classification.covering if not e.is_host_block]
        return DayResolution(
            classification=classification,
            stays=stays,
            check_ins=[self.occupant(e) for e in classification.check_ins],
            check_outs=[self.occupant(e) for e in classification.check_outs],
        )


def calendar_events(snapshot: Snapshot) -> list[OccupancyEvent]:
    """Feed events plus synthetic events for direct reservations."""
    return merge_direct_reservations(snapshot.events, snapshot.reservations)


def resolve_day(day: DayKey, snapshot: Snapshot) -> DayResolution:
    """Classification of ``day`` with every relevant event resolved."""
    return _Resolver(snapshot).day(day)


def turnover_time(occupant: ResolvedOccupant, kind: TurnoverKind, default: str) -> str:
    """Reservation time, else pre-registration time, else default."""
    attr = "check_in_time" if kind == "check_in" else "check_out_time"
    for record in (occupant.reservation, occupant.pre_registration):
        value = getattr(record, attr, None) if record is not None else None
        if value:
            return value
    return default


def _build_day(
    resolver: _Resolver,
    day: DayKey,
    *,
    view_mode: ViewMode,
    today: DayKey,
    checkin_time: str,
    checkout_time: str,
) -> CalendarDay:
    resolution = resolver.day(day)
    classification = resolution.classification
    reserved = is_reserved(day, resolver.events, view_mode)
    blocked = is_blocked(day, resolver.events)

    is_today = day == today
    idle = not (reserved or blocked or classification.check_ins or classification.check_outs)
    is_past = day < today or (is_today and idle)

    base = dict(
        day=day,
        is_today=is_today,
        is_past=is_past,
        reserved=reserved,
        blocked=blocked,
        check_in_count=len(classification.check_ins),
        check_out_count=len(classification.check_outs),
    )
    if view_mode == "public":
        return CalendarDay(**base)

    admin_flags = {}
    if view_mode == "admin":
        with_pre_reg = [o.pre_registration is not None for o in resolution.stays]
        admin_flags = dict(
            pre_registered=any(with_pre_reg),
            fully_pre_registered=bool(with_pre_reg) and all(with_pre_reg),
        )

    return CalendarDay(
        **base,
        check_ins=resolution.check_ins,
        check_outs=resolution.check_outs,
        stays=resolution.stays,
        check_in_time=(
            turnover_time(resolution.check_ins[0], "check_in", checkin_time)
            if resolution.check_ins
            else None
        ),
        check_out_time=(
            turnover_time(resolution.check_outs[0], "check_out", checkout_time)
            if resolution.check_outs
            else None
        ),
        **admin_flags,
    )


def build_day(
    snapshot: Snapshot,
    day: DayKey,
    *,
    view_mode: ViewMode = "staff",
    today: DayKey,
    checkin_time: str = DEFAULT_CHECKIN_TIME,
    checkout_time: str = DEFAULT_CHECKOUT_TIME,
) -> CalendarDay:
    """Detail for a single day (the selected-day panel)."""
    return _build_day(
        _Resolver(snapshot),
        day,
        view_mode=view_mode,
        today=today,
        checkin_time=checkin_time,
        checkout_time=checkout_time,
    )


def build_month(
    snapshot: Snapshot,
    year: int,
    month: int,
    *,
    view_mode: ViewMode = "staff",
    today: DayKey,
    checkin_time: str = DEFAULT_CHECKIN_TIME,
    checkout_time: str = DEFAULT_CHECKOUT_TIME,
) -> CalendarMonth:
    """Month grid (Sunday-first) for one calendar surface."""
    resolver = _Resolver(snapshot)
    days = [
        _build_day(
            resolver,
            day,
            view_mode=view_mode,
            today=today,
            checkin_time=checkin_time,
            checkout_time=checkout_time,
        )
        for day in month_days(year, month)
    ]
    return CalendarMonth(
        year=year,
        month=month,
        leading_blanks=leading_blanks(year, month),
        days=days,
    )


def upcoming_turnovers(
    snapshot: Snapshot,
    today: DayKey,
    *,
    window_days: int = 3,
    checkin_time: str = DEFAULT_CHECKIN_TIME,
    checkout_time: str = DEFAULT_CHECKOUT_TIME,
) -> list[Turnover]:
    """Arrivals and departures from today through today + window_days.

    Sorted by day, departures before arrivals on the same day.
    """
    resolver = _Resolver(snapshot)
    last = today + timedelta(days=window_days)
    turnovers: list[Turnover] = []

    for event in resolver.events:
        if event.is_host_block or event.start_day is None or event.end_day is None:
            continue
        if event.start_day >= event.end_day:
            continue
        occupant = resolver.occupant(event)
        guests = guest_count(occupant.reservation, occupant.pre_registration)
        if today <= event.end_day <= last:
            turnovers.append(
                Turnover(
                    event.end_day,
                    "check_out",
                    occupant,
                    turnover_time(occupant, "check_out", checkout_time),
                    guests,
                )
            )
        if today <= event.start_day <= last:
            turnovers.append(
                Turnover(
                    event.start_day,
                    "check_in",
                    occupant,
                    turnover_time(occupant, "check_in", checkin_time),
                    guests,
                )
            )

    turnovers.sort(key=lambda t: (t.day, 0 if t.kind == "check_out" else 1))
    return turnovers
