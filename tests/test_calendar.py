"""Tests for calendar views (month grid, day detail, turnovers)."""

from datetime import date

import pytest

from helpers import (
    make_block,
    make_event,
    make_pre_registration,
    make_reservation,
)
from staycal.domain.calendar import (
    build_day,
    build_month,
    calendar_events,
    resolve_day,
    upcoming_turnovers,
)
from staycal.domain.identity import OccupancyState
from staycal.domain.snapshot import Snapshot

JUN_1 = date(2024, 6, 1)
JUN_3 = date(2024, 6, 3)
JUN_5 = date(2024, 6, 5)
JUN_8 = date(2024, 6, 8)
JUN_10 = date(2024, 6, 10)
JUN_12 = date(2024, 6, 12)


@pytest.fixture
def snapshot():
    """June 2024: a registered stay, a pre-registered stay and a host block."""
    return Snapshot(
        events=(
            make_event(JUN_1, JUN_5, event_id="stay-a"),
            make_event(JUN_5, JUN_8, event_id="stay-b"),
            make_block(JUN_10, JUN_12),
        ),
        pre_registrations=(
            make_pre_registration(
                JUN_1, JUN_5, reg_id="pre-a", linked_reservation_id="user-1", check_out_time="10:00"
            ),
            make_pre_registration(JUN_5, JUN_8, reg_id="pre-b"),
        ),
        reservations=(make_reservation(res_id="res-a", guest_identity="user-1"),),
    )


class TestResolveDay:
    def test_turnover_day(self, snapshot):
        result = resolve_day(JUN_5, snapshot)

        assert [o.event.id for o in result.check_outs] == ["stay-a"]
        assert [o.event.id for o in result.check_ins] == ["stay-b"]
        assert result.check_outs[0].state == OccupancyState.FULLY_REGISTERED
        assert result.check_ins[0].state == OccupancyState.PRE_REGISTERED
        assert result.state == OccupancyState.PRE_REGISTERED

    def test_host_block_day(self, snapshot):
        result = resolve_day(date(2024, 6, 11), snapshot)

        assert result.state == OccupancyState.HOST_BLOCKED
        assert result.stays == []

    def test_free_day(self, snapshot):
        assert resolve_day(date(2024, 6, 20), snapshot).state is None

    def test_unregistered_day(self):
        snapshot = Snapshot(events=(make_event(JUN_1, JUN_5),))
        assert resolve_day(JUN_3, snapshot).state == OccupancyState.UNREGISTERED


class TestBuildMonth:
    def test_grid_shape(self, snapshot):
        month = build_month(snapshot, 2024, 6, today=JUN_1)

        assert month.year == 2024
        assert month.month == 6
        assert month.leading_blanks == 6
        assert len(month.days) == 30
        assert month.days[0].day == JUN_1

    def test_staff_view_resolves_occupants(self, snapshot):
        month = build_month(snapshot, 2024, 6, view_mode="staff", today=JUN_1)
        jun_5 = month.days[4]

        assert jun_5.reserved is True
        assert jun_5.check_in_count == 1
        assert jun_5.check_out_count == 1
        assert jun_5.check_outs[0].reservation.id == "res-a"
        assert jun_5.check_ins[0].pre_registration.id == "pre-b"
        assert jun_5.pre_registered is None

    def test_public_view_has_no_identity(self, snapshot):
        month = build_month(snapshot, 2024, 6, view_mode="public", today=JUN_1)

        for day in month.days:
            assert day.check_ins == []
            assert day.check_outs == []
            assert day.stays == []

    def test_public_view_reserves_check_out_day(self, snapshot):
        month = build_month(snapshot, 2024, 6, view_mode="public", today=JUN_1)
        staff = build_month(snapshot, 2024, 6, view_mode="staff", today=JUN_1)

        # stay-b ends JUN_8; nothing arrives that day
        assert month.days[7].reserved is True
        assert staff.days[7].reserved is False

    def test_blocked_days(self, snapshot):
        month = build_month(snapshot, 2024, 6, today=JUN_1)

        assert month.days[9].blocked is True
        assert month.days[9].reserved is False
        assert month.days[11].blocked is False

    def test_admin_pre_registration_flags(self):
        snapshot = Snapshot(
            events=(
                make_event(JUN_1, JUN_5, event_id="a"),
                make_event(JUN_3, JUN_8, event_id="b"),
            ),
            pre_registrations=(make_pre_registration(JUN_1, JUN_5),),
        )

        month = build_month(snapshot, 2024, 6, view_mode="admin", today=JUN_1)

        assert month.days[1].pre_registered is True
        assert month.days[1].fully_pre_registered is True
        # JUN_3: a has a pre-registration, b does not
        assert month.days[2].pre_registered is True
        assert month.days[2].fully_pre_registered is False
        # JUN_20: free
        assert month.days[19].pre_registered is False
        assert month.days[19].fully_pre_registered is False

    def test_turnover_times(self, snapshot):
        month = build_month(snapshot, 2024, 6, today=JUN_1, checkin_time="16:00")
        jun_5 = month.days[4]

        assert jun_5.check_out_time == "10:00"  # from pre-a
        assert jun_5.check_in_time == "16:00"  # default

    def test_direct_reservation_on_calendar(self):
        snapshot = Snapshot(
            reservations=(
                make_reservation(
                    res_id="d1", check_in=JUN_10, check_out=JUN_12, source="direct"
                ),
            ),
        )

        month = build_month(snapshot, 2024, 6, today=JUN_1)
        jun_10 = month.days[9]

        assert jun_10.reserved is True
        assert jun_10.check_ins[0].event.id == "direct-d1"
        assert jun_10.check_ins[0].reservation.id == "d1"
        assert [e.id for e in calendar_events(snapshot)] == ["direct-d1"]

    def test_same_output_for_same_snapshot(self, snapshot):
        first = build_month(snapshot, 2024, 6, view_mode="admin", today=JUN_1)
        second = build_month(snapshot, 2024, 6, view_mode="admin", today=JUN_1)

        assert first == second


class TestIsPast:
    def test_days_before_today(self, snapshot):
        month = build_month(snapshot, 2024, 6, today=JUN_3)

        assert month.days[0].is_past is True
        assert month.days[1].is_past is True
        assert month.days[3].is_past is False

    def test_idle_today_is_past(self):
        day = build_day(Snapshot(), JUN_3, today=JUN_3)

        assert day.is_today is True
        assert day.is_past is True

    def test_occupied_today_is_not_past(self, snapshot):
        day = build_day(snapshot, JUN_3, today=JUN_3)

        assert day.is_today is True
        assert day.is_past is False

    def test_check_out_today_is_not_past(self):
        snapshot = Snapshot(events=(make_event(JUN_1, JUN_3),))
        day = build_day(snapshot, JUN_3, today=JUN_3)

        assert day.is_past is False


class TestUpcomingTurnovers:
    def test_window_and_order(self, snapshot):
        turnovers = upcoming_turnovers(snapshot, JUN_3, window_days=3)

        assert [(t.day, t.kind, t.occupant.event.id) for t in turnovers] == [
            (JUN_5, "check_out", "stay-a"),
            (JUN_5, "check_in", "stay-b"),
        ]

    def test_times_and_guests(self, snapshot):
        turnovers = upcoming_turnovers(snapshot, JUN_3, window_days=3, checkin_time="15:30")

        assert turnovers[0].time == "10:00"
        assert turnovers[1].time == "15:30"
        assert turnovers[1].guests.total == 1

    def test_window_is_inclusive(self, snapshot):
        turnovers = upcoming_turnovers(snapshot, JUN_5, window_days=3)

        assert (JUN_8, "check_out") in [(t.day, t.kind) for t in turnovers]

    def test_host_blocks_excluded(self, snapshot):
        turnovers = upcoming_turnovers(snapshot, JUN_10, window_days=5)

        assert turnovers == []

    def test_skips_invalid_events(self):
        snapshot = Snapshot(events=(make_event(JUN_5, JUN_5), make_event(None, JUN_5, event_id="x")))

        assert upcoming_turnovers(snapshot, JUN_1, window_days=10) == []
