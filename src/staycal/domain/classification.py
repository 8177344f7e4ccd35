"""Classify a calendar day against the occupancy event set.

Half-open semantics everywhere: an event occupies [start_day, end_day).
The check-out day is free for a new arrival, so a turnover day reports the
leaving event in check_outs and the arriving one in check_ins.

Malformed events (missing day, start_day >= end_day) are skipped, never
fatal: one bad upstream record must not blank the whole calendar.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal

from .days import DayKey
from .records import OccupancyEvent

ViewMode = Literal["public", "staff", "admin"]


@dataclass(frozen=True)
class DayClassification:
    day: DayKey
    occupied: bool
    is_host_block: bool
    check_ins: list[OccupancyEvent] = field(default_factory=list)
    check_outs: list[OccupancyEvent] = field(default_factory=list)
    spanning: list[OccupancyEvent] = field(default_factory=list)
    covering: list[OccupancyEvent] = field(default_factory=list)


def valid_span(event: OccupancyEvent) -> tuple[DayKey, DayKey] | None:
    """Return (start_day, end_day) or None for an unusable interval."""
    start, end = event.start_day, event.end_day
    if start is None or end is None or start >= end:
        return None
    return start, end


def covers(event: OccupancyEvent, day: DayKey) -> bool:
    span = valid_span(event)
    return span is not None and span[0] <= day < span[1]


def covering_events(day: DayKey, events: Iterable[OccupancyEvent]) -> list[OccupancyEvent]:
    return [e for e in events if covers(e, day)]


def classify_day(day: DayKey, events: Iterable[OccupancyEvent]) -> DayClassification:
    """Classify ``day`` against ``events``.

    - occupied: at least one valid event covers the day
    - is_host_block: occupied and every covering event is a host block
      (a real stay overlapping a block reports False)
    - check_ins / check_outs: guest events starting / ending on the day
    - spanning: covering events that started before the day (mid-stay)
    """
    check_ins: list[OccupancyEvent] = []
    check_outs: list[OccupancyEvent] = []
    spanning: list[OccupancyEvent] = []
    covering: list[OccupancyEvent] = []

    for event in events:
        span = valid_span(event)
        if span is None:
            continue
        start, end = span

        if start <= day < end:
            covering.append(event)
            if start != day:
                spanning.append(event)

        if event.is_host_block:
            continue
        if start == day:
            check_ins.append(event)
        if end == day:
            check_outs.append(event)

    occupied = bool(covering)
    return DayClassification(
        day=day,
        occupied=occupied,
        is_host_block=occupied and all(e.is_host_block for e in covering),
        check_ins=check_ins,
        check_outs=check_outs,
        spanning=spanning,
        covering=covering,
    )


def is_blocked(day: DayKey, events: Iterable[OccupancyEvent]) -> bool:
    """True if some host block covers the day."""
    return any(e.is_host_block and covers(e, day) for e in events)


def is_reserved(day: DayKey, events: Iterable[OccupancyEvent], view_mode: ViewMode = "staff") -> bool:
    """True if a guest stay occupies the day.

    The public view also counts the check-out day: the property is turned
    over that day and cannot be offered to a new guest from the public
    calendar. Staff and admin views use plain half-open semantics.
    """
    for event in events:
        if event.is_host_block:
            continue
        span = valid_span(event)
        if span is None:
            continue
        start, end = span
        if start <= day < end:
            return True
        if view_mode == "public" and day == end:
            return True
    return False
