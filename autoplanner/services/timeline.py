"""
Per-date availability timeline.

Each date in the scheduling window owns a list of TimeBlocks, kept sorted by
start, that exactly tiles that date's work window: every instant in
[work_start, work_end) belongs to exactly one block.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional

from autoplanner.models.enums import DayPeriod, PlacementHeuristic
from autoplanner.utils.datetime_utils import iter_dates

# Clock windows of the symbolic day periods; None ends at the next midnight
PERIOD_WINDOWS: dict[DayPeriod, tuple[time, Optional[time]]] = {
    DayPeriod.MORNING: (time(6, 0), time(12, 0)),
    DayPeriod.EVENING: (time(12, 0), time(18, 0)),
    DayPeriod.NIGHT: (time(18, 0), None),
}


def period_window(day: date, period: DayPeriod) -> Optional[tuple[datetime, datetime]]:
    """Absolute window of a day period on a date, or None when the period has no window."""
    bounds = PERIOD_WINDOWS.get(period)
    if bounds is None:
        return None
    start, end = bounds
    if end is None:
        return datetime.combine(day, start), datetime.combine(day + timedelta(days=1), time(0, 0))
    return datetime.combine(day, start), datetime.combine(day, end)


@dataclass
class TimeBlock:
    """A free or occupied interval on the timeline."""

    start: datetime
    end: datetime
    is_free: bool = True
    task_id: Optional[int] = None
    # Timeline date owning the block (differs from start.date() after midnight)
    day: Optional[date] = None

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_buffer(self) -> bool:
        """Occupied time that belongs to no task (buffer or break)."""
        return not self.is_free and self.task_id is None

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and self.end > start


class PlacementStatus(str, Enum):
    """Outcome tag of a placement attempt."""

    SUCCESS = "SUCCESS"
    CONFLICT = "CONFLICT"
    FAILURE = "FAILURE"


@dataclass
class PlacementResult:
    """
    Tagged placement outcome.

    SUCCESS carries the placed blocks, CONFLICT the occupying task id and the
    contested instant, FAILURE only a reason.
    """

    status: PlacementStatus
    blocks: list[TimeBlock] = field(default_factory=list)
    reason: str = ""
    conflicting_task_id: Optional[int] = None
    conflict_time: Optional[datetime] = None

    @classmethod
    def success(cls, blocks: list[TimeBlock]) -> PlacementResult:
        return cls(status=PlacementStatus.SUCCESS, blocks=blocks)

    @classmethod
    def conflict(
        cls, reason: str, conflicting_task_id: Optional[int], conflict_time: datetime
    ) -> PlacementResult:
        return cls(
            status=PlacementStatus.CONFLICT,
            reason=reason,
            conflicting_task_id=conflicting_task_id,
            conflict_time=conflict_time,
        )

    @classmethod
    def failure(cls, reason: str) -> PlacementResult:
        return cls(status=PlacementStatus.FAILURE, reason=reason)


@dataclass
class SlotCandidate:
    """A free interval found for a task (not yet placed)."""

    day: date
    start: datetime
    end: datetime
    host_block: TimeBlock

    @property
    def leftover(self) -> timedelta:
        return self.host_block.duration - (self.end - self.start)


class Timeline:
    """Availability blocks for every date in the scheduling window."""

    def __init__(self) -> None:
        self._days: dict[date, list[TimeBlock]] = {}
        self._bounds: dict[date, tuple[datetime, datetime]] = {}

    @classmethod
    def build(
        cls,
        start_date: date,
        end_date: date,
        work_start: time,
        work_end: time,
    ) -> Timeline:
        """
        Create one free block per date spanning the work window.

        A work end at or before the work start wraps into the next day; equal
        start and end mean a full 24 hours.
        """
        timeline = cls()
        for day in iter_dates(start_date, end_date):
            day_start = datetime.combine(day, work_start)
            if work_end == work_start:
                day_end = day_start + timedelta(days=1)
            elif work_end < work_start:
                day_end = datetime.combine(day + timedelta(days=1), work_end)
            else:
                day_end = datetime.combine(day, work_end)

            blocks: list[TimeBlock] = []
            if day_start < day_end:
                blocks.append(TimeBlock(day_start, day_end, is_free=True, day=day))
                timeline._bounds[day] = (day_start, day_end)
            timeline._days[day] = blocks
        return timeline

    def dates(self) -> list[date]:
        return sorted(self._days.keys())

    def blocks(self, day: date) -> list[TimeBlock]:
        return list(self._days.get(day, []))

    def bounds(self, day: date) -> Optional[tuple[datetime, datetime]]:
        return self._bounds.get(day)

    def occupied_blocks(self, day: date) -> list[TimeBlock]:
        return [block for block in self._days.get(day, []) if not block.is_free]

    def place(
        self,
        task_id: int,
        start: datetime,
        duration: timedelta,
        day: Optional[date] = None,
    ) -> PlacementResult:
        """
        Occupy [start, start + duration) for a task.

        The single free block containing the interval is replaced by the task
        block plus up to two free remainders. If no free block contains it,
        an overlapping occupied block is reported as a conflict.
        """
        if duration <= timedelta(0):
            return PlacementResult.failure("Task has no duration to schedule")

        day = day or start.date()
        day_blocks = self._days.get(day)
        if day_blocks is None:
            return PlacementResult.failure("Date not found in timeline")
        end = start + duration

        target_index = next(
            (
                index
                for index, block in enumerate(day_blocks)
                if block.is_free and block.start <= start and block.end >= end
            ),
            None,
        )
        if target_index is None:
            occupying = next(
                (block for block in day_blocks if not block.is_free and block.overlaps(start, end)),
                None,
            )
            if occupying is not None:
                return PlacementResult.conflict(
                    f"Overlaps with existing task {occupying.task_id}",
                    occupying.task_id,
                    start,
                )
            return PlacementResult.failure("No containing free block found or doesn't fit")

        free_block = day_blocks.pop(target_index)
        task_block = TimeBlock(start, end, is_free=False, task_id=task_id, day=day)
        day_blocks.append(task_block)
        if free_block.start < start:
            day_blocks.append(TimeBlock(free_block.start, start, is_free=True, day=day))
        if free_block.end > end:
            day_blocks.append(TimeBlock(end, free_block.end, is_free=True, day=day))
        day_blocks.sort(key=lambda block: block.start)

        return PlacementResult.success([task_block])

    def insert_buffer(
        self, after: datetime, duration: timedelta, day: Optional[date] = None
    ) -> Optional[TimeBlock]:
        """
        Occupy the head of the free block starting exactly at `after`.

        Nothing is inserted unless that free block is at least as long as the
        buffer; an exact fit turns the whole block into the buffer.
        """
        if duration <= timedelta(0):
            return None
        day = day or after.date()
        day_blocks = self._days.get(day)
        if not day_blocks:
            return None

        index = next(
            (i for i, block in enumerate(day_blocks) if block.is_free and block.start == after),
            None,
        )
        if index is None or day_blocks[index].duration < duration:
            return None

        free_block = day_blocks.pop(index)
        buffer_end = free_block.start + duration
        buffer_block = TimeBlock(free_block.start, buffer_end, is_free=False, task_id=None, day=day)
        day_blocks.append(buffer_block)
        if buffer_end < free_block.end:
            day_blocks.append(TimeBlock(buffer_end, free_block.end, is_free=True, day=day))
        day_blocks.sort(key=lambda block: block.start)
        return buffer_block

    def find_slot(
        self,
        duration: timedelta,
        min_start: Optional[datetime] = None,
        max_end: Optional[datetime] = None,
        heuristic: PlacementHeuristic = PlacementHeuristic.EARLIEST_FIT,
        period: DayPeriod = DayPeriod.NONE,
    ) -> Optional[SlotCandidate]:
        """
        Find the first date with a free interval of the given length.

        On that date EARLIEST_FIT returns the earliest start and BEST_FIT the
        candidate leaving the least unused time in its block. A day period
        with a clock window limits every date to that window.
        """
        for day in self.dates():
            bounds = self._bounds.get(day)
            if bounds is None:
                continue
            day_start, day_end = bounds

            window = period_window(day, period)
            if window is not None:
                day_start = max(day_start, window[0])
                day_end = min(day_end, window[1])
                if day_start >= day_end:
                    continue

            candidates: list[SlotCandidate] = []
            for block in self._days[day]:
                if not block.is_free:
                    continue
                slot_start = max(block.start, day_start)
                if min_start is not None:
                    slot_start = max(slot_start, min_start)
                slot_end = slot_start + duration
                if slot_end > block.end:
                    continue
                if max_end is not None and slot_end > max_end:
                    continue
                if slot_end > day_end:
                    continue
                candidates.append(SlotCandidate(day, slot_start, slot_end, block))

            if not candidates:
                continue
            if heuristic == PlacementHeuristic.BEST_FIT:
                return min(candidates, key=lambda slot: (slot.leftover, slot.start))
            return min(candidates, key=lambda slot: slot.start)
        return None

    def is_tiled(self, day: date) -> bool:
        """Check that the date's blocks cover its work window with no gap or overlap."""
        bounds = self._bounds.get(day)
        day_blocks = self._days.get(day, [])
        if bounds is None:
            return not day_blocks
        if not day_blocks:
            return False

        cursor = bounds[0]
        for block in day_blocks:
            if block.start != cursor or block.end <= block.start:
                return False
            cursor = block.end
        return cursor == bounds[1]
