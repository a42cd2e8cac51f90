"""
Unit tests for the availability timeline.
"""

from datetime import date, datetime, time, timedelta

from autoplanner.models.enums import DayPeriod, PlacementHeuristic
from autoplanner.services.timeline import PlacementStatus, Timeline, period_window

DAY = date(2026, 3, 2)


def dt(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


def minutes(value: int) -> timedelta:
    return timedelta(minutes=value)


def assert_no_double_booking(timeline: Timeline, day: date = DAY) -> None:
    occupied = timeline.occupied_blocks(day)
    for i, first in enumerate(occupied):
        for second in occupied[i + 1:]:
            assert not first.overlaps(second.start, second.end)


class TestBuild:
    def test_single_free_block_per_day(self):
        timeline = Timeline.build(DAY, DAY + timedelta(days=2), time(8, 0), time(20, 0))
        assert len(timeline.dates()) == 3
        blocks = timeline.blocks(DAY)
        assert len(blocks) == 1
        assert blocks[0].is_free
        assert (blocks[0].start, blocks[0].end) == (dt(8), dt(20))

    def test_wrapping_window(self):
        timeline = Timeline.build(DAY, DAY, time(22, 0), time(2, 0))
        block = timeline.blocks(DAY)[0]
        assert block.start == dt(22)
        assert block.end == dt(2, day=DAY + timedelta(days=1))

    def test_equal_start_and_end_is_full_day(self):
        timeline = Timeline.build(DAY, DAY, time(0, 0), time(0, 0))
        assert timeline.blocks(DAY)[0].duration == timedelta(days=1)

    def test_blocks_after_midnight_keep_their_day(self):
        timeline = Timeline.build(DAY, DAY, time(22, 0), time(6, 0))
        result = timeline.place(1, dt(0, day=DAY + timedelta(days=1)), minutes(60), day=DAY)

        assert result.blocks[0].day == DAY
        assert all(block.day == DAY for block in timeline.blocks(DAY))


class TestPlace:
    def test_split_keeps_tiling(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        result = timeline.place(1, dt(10), minutes(60))

        assert result.status == PlacementStatus.SUCCESS
        blocks = timeline.blocks(DAY)
        assert [(b.start, b.end, b.is_free) for b in blocks] == [
            (dt(8), dt(10), True),
            (dt(10), dt(11), False),
            (dt(11), dt(20), True),
        ]
        assert timeline.is_tiled(DAY)

    def test_overlap_reports_occupant(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        timeline.place(1, dt(9), minutes(60))
        result = timeline.place(2, dt(9, 30), minutes(60))

        assert result.status == PlacementStatus.CONFLICT
        assert result.conflicting_task_id == 1
        assert result.conflict_time == dt(9, 30)
        assert timeline.is_tiled(DAY)
        assert_no_double_booking(timeline)

    def test_outside_window_is_failure(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        result = timeline.place(1, dt(19, 30), minutes(60))
        assert result.status == PlacementStatus.FAILURE

    def test_zero_duration_is_failure(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        assert timeline.place(1, dt(9), minutes(0)).status == PlacementStatus.FAILURE

    def test_unknown_date_is_failure(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        result = timeline.place(1, dt(9, day=DAY + timedelta(days=5)), minutes(30))
        assert result.status == PlacementStatus.FAILURE


class TestInsertBuffer:
    def test_buffer_follows_block(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        timeline.place(1, dt(9), minutes(30))
        buffer_block = timeline.insert_buffer(dt(9, 30), minutes(10))

        assert buffer_block is not None
        assert buffer_block.is_buffer
        assert (buffer_block.start, buffer_block.end) == (dt(9, 30), dt(9, 40))
        assert timeline.is_tiled(DAY)

    def test_buffer_fills_exact_gap(self):
        timeline = Timeline.build(DAY, DAY, time(9, 0), time(9, 40))
        timeline.place(1, dt(9), minutes(30))

        buffer_block = timeline.insert_buffer(dt(9, 30), minutes(10))

        assert buffer_block is not None
        assert (buffer_block.start, buffer_block.end) == (dt(9, 30), dt(9, 40))
        assert not any(block.is_free for block in timeline.blocks(DAY))
        assert timeline.is_tiled(DAY)

    def test_no_buffer_when_gap_too_small(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        timeline.place(1, dt(19, 0), minutes(55))
        assert timeline.insert_buffer(dt(19, 55), minutes(10)) is None
        assert timeline.blocks(DAY)[-1].is_free


class TestFindSlot:
    def test_earliest_fit(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        timeline.place(1, dt(8), minutes(60))
        slot = timeline.find_slot(minutes(30))
        assert slot.start == dt(9)

    def test_respects_min_start_and_max_end(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        slot = timeline.find_slot(minutes(60), min_start=dt(13))
        assert slot.start == dt(13)
        assert timeline.find_slot(minutes(60), max_end=dt(8, 30)) is None

    def test_best_fit_prefers_tightest_gap(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        # Free: 08:00-09:00 (60), 09:30-10:00 (30), 10:30-20:00
        timeline.place(1, dt(9), minutes(30))
        timeline.place(2, dt(10), minutes(30))

        earliest = timeline.find_slot(minutes(30), heuristic=PlacementHeuristic.EARLIEST_FIT)
        best = timeline.find_slot(minutes(30), heuristic=PlacementHeuristic.BEST_FIT)

        assert earliest.start == dt(8)
        assert best.start == dt(9, 30)

    def test_earliest_date_wins(self):
        timeline = Timeline.build(DAY, DAY + timedelta(days=1), time(8, 0), time(9, 0))
        timeline.place(1, dt(8), minutes(60))
        slot = timeline.find_slot(minutes(30))
        assert slot.day == DAY + timedelta(days=1)


class TestPeriodWindows:
    def test_period_clock_windows(self):
        assert period_window(DAY, DayPeriod.MORNING) == (dt(6), dt(12))
        assert period_window(DAY, DayPeriod.EVENING) == (dt(12), dt(18))
        assert period_window(DAY, DayPeriod.NIGHT) == (dt(18), dt(0, day=DAY + timedelta(days=1)))
        assert period_window(DAY, DayPeriod.ALLDAY) is None
        assert period_window(DAY, DayPeriod.NONE) is None

    def test_morning_is_clipped_to_work_start(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        slot = timeline.find_slot(minutes(60), period=DayPeriod.MORNING)
        assert (slot.start, slot.end) == (dt(8), dt(9))

    def test_evening_starts_at_noon(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        slot = timeline.find_slot(minutes(60), period=DayPeriod.EVENING)
        assert slot.start == dt(12)

    def test_night_ends_at_work_end(self):
        timeline = Timeline.build(DAY, DAY, time(8, 0), time(20, 0))
        assert timeline.find_slot(minutes(120), period=DayPeriod.NIGHT).start == dt(18)
        assert timeline.find_slot(minutes(150), period=DayPeriod.NIGHT) is None

    def test_full_period_moves_to_next_date(self):
        timeline = Timeline.build(DAY, DAY + timedelta(days=1), time(8, 0), time(20, 0))
        timeline.place(1, dt(8), minutes(240))

        slot = timeline.find_slot(minutes(30), period=DayPeriod.MORNING)

        assert slot.day == DAY + timedelta(days=1)
        assert slot.start == dt(8, day=DAY + timedelta(days=1))

    def test_period_outside_work_hours_has_no_slot(self):
        timeline = Timeline.build(DAY, DAY, time(13, 0), time(17, 0))
        assert timeline.find_slot(minutes(30), period=DayPeriod.MORNING) is None
