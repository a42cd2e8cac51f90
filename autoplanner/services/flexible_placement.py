"""
Greedy placement of flexible tasks.

Tasks are placed in descending score order into the earliest eligible free
time. No backtracking: once a chunk is placed it stays.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from autoplanner.models.enums import DayOrganization, DayPeriod, PlacementHeuristic, PrioritizationStrategy
from autoplanner.models.task import DEFAULT_TASK_MINUTES, Task
from autoplanner.services.priority_scorer import score_task
from autoplanner.services.timeline import (
    PERIOD_WINDOWS,
    PlacementResult,
    PlacementStatus,
    TimeBlock,
    Timeline,
)

# Loop guard per task. Every successful iteration places at least
# MIN_SPLIT_MINUTES, so 100 attempts cover any window the scopes allow.
MAX_PLACEMENT_ATTEMPTS = 100
MIN_SPLIT_MINUTES = 15
BUFFER_MINUTES = 10
BREAK_MINUTES = 15

NO_SLOT_REASON = "No suitable time slot found"
CANNOT_FIT_PERIOD_REASON = "No free time within the requested day period"


@dataclass
class FlexiblePlacement:
    """Outcome for one flexible task, in placement order."""

    task: Task
    score: float
    result: PlacementResult


class FlexiblePlacementEngine:
    """Places scored flexible tasks onto the timeline."""

    def __init__(
        self,
        buffer_minutes: int = BUFFER_MINUTES,
        break_minutes: int = BREAK_MINUTES,
        min_split_minutes: int = MIN_SPLIT_MINUTES,
        default_task_minutes: int = DEFAULT_TASK_MINUTES,
        logger: Optional[logging.Logger] = None,
    ):
        self.buffer_minutes = buffer_minutes
        self.break_minutes = break_minutes
        self.min_split_minutes = min_split_minutes
        self.default_task_minutes = default_task_minutes
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    def rank(
        self, tasks: list[Task], strategy: PrioritizationStrategy, now: datetime
    ) -> list[tuple[Task, float]]:
        """Score tasks and sort by descending score; equal scores keep input order."""
        scored = [(task, score_task(task, strategy, now, self.default_task_minutes)) for task in tasks]
        return sorted(scored, key=lambda pair: -pair[1])

    def place_all(
        self,
        tasks: list[Task],
        timeline: Timeline,
        now: datetime,
        strategy: PrioritizationStrategy = PrioritizationStrategy.URGENT_FIRST,
        day_organization: DayOrganization = DayOrganization.MAXIMIZE_PRODUCTIVITY,
        heuristic: PlacementHeuristic = PlacementHeuristic.EARLIEST_FIT,
        allow_splitting: bool = False,
        relaxed_deadline_ids: Optional[Iterable[int]] = None,
    ) -> list[FlexiblePlacement]:
        """
        Place every flexible task.

        Args:
            tasks: Flexible tasks to place
            timeline: Timeline to mutate (fixed tasks already placed)
            now: Current instant, used for scoring
            strategy: Prioritization strategy
            day_organization: Buffer/break style
            heuristic: Slot choice within a date
            allow_splitting: Planner-wide splitting flag (tasks may override)
            relaxed_deadline_ids: Tasks whose deadline does not bound placement

        Returns:
            One FlexiblePlacement per task, highest score first
        """
        relaxed = set(relaxed_deadline_ids or ())
        placements: list[FlexiblePlacement] = []

        for task, score in self.rank(tasks, strategy, now):
            splitting = task.allow_splitting if task.allow_splitting is not None else allow_splitting
            max_end = None if task.id in relaxed else task.deadline
            result = self.place_task(
                task,
                timeline,
                min_start=task.start_datetime,
                max_end=max_end,
                day_organization=day_organization,
                heuristic=heuristic,
                allow_splitting=splitting,
            )
            self._logger.debug(f"Flexible task {task.id} (score {score:.2f}): {result.status.value}")
            placements.append(FlexiblePlacement(task=task, score=score, result=result))

        placed = sum(1 for p in placements if p.result.status == PlacementStatus.SUCCESS)
        self._logger.info(f"Flexible placement: {placed}/{len(placements)} tasks placed")
        return placements

    def place_task(
        self,
        task: Task,
        timeline: Timeline,
        min_start: Optional[datetime] = None,
        max_end: Optional[datetime] = None,
        day_organization: DayOrganization = DayOrganization.MAXIMIZE_PRODUCTIVITY,
        heuristic: PlacementHeuristic = PlacementHeuristic.EARLIEST_FIT,
        allow_splitting: bool = False,
    ) -> PlacementResult:
        """
        Place one task, possibly in several chunks.

        A task planned for a morning, evening or night period only uses free
        time inside that period on each date.
        """
        period = task.start_plan.day_period if task.start_plan else DayPeriod.NONE
        total = timedelta(minutes=task.effective_duration_minutes(self.default_task_minutes))
        if total <= timedelta(0):
            return PlacementResult.failure("Task has no duration to schedule")

        remaining = total
        placed: list[TimeBlock] = []
        attempts = 0

        while remaining > timedelta(0) and attempts < MAX_PLACEMENT_ATTEMPTS:
            attempts += 1
            if allow_splitting and remaining < total:
                needed = max(remaining, timedelta(minutes=self.min_split_minutes))
            else:
                needed = remaining

            earliest = min_start
            if placed and (earliest is None or placed[-1].end > earliest):
                earliest = placed[-1].end

            slot = timeline.find_slot(
                needed, min_start=earliest, max_end=max_end, heuristic=heuristic, period=period
            )
            if slot is None:
                self._logger.debug(
                    f"Task {task.id}: no slot for {int(needed.total_seconds() // 60)} min"
                )
                break

            result = timeline.place(task.id, slot.start, needed, day=slot.day)
            if result.status != PlacementStatus.SUCCESS:
                self._logger.warning(
                    f"Task {task.id}: slot at {slot.start} rejected by timeline ({result.reason})"
                )
                if placed:
                    return PlacementResult.success(placed)
                return result

            block = result.blocks[0]
            placed.append(block)
            remaining -= block.duration
            self._insert_gap(timeline, block, slot.day, day_organization)

            if not allow_splitting:
                break

        if attempts >= MAX_PLACEMENT_ATTEMPTS and remaining > timedelta(0):
            self._logger.warning(f"Task {task.id}: gave up after {MAX_PLACEMENT_ATTEMPTS} attempts")

        if not placed:
            if period in PERIOD_WINDOWS:
                return PlacementResult.failure(CANNOT_FIT_PERIOD_REASON)
            return PlacementResult.failure(NO_SLOT_REASON)
        if remaining > timedelta(0):
            self._logger.info(
                f"Task {task.id}: partially placed, {int(remaining.total_seconds() // 60)} min left over"
            )
        return PlacementResult.success(placed)

    def _insert_gap(
        self, timeline: Timeline, block: TimeBlock, day: date, day_organization: DayOrganization
    ) -> None:
        if day_organization == DayOrganization.FOCUS_URGENT_BUFFER:
            minutes = self.buffer_minutes
        elif day_organization == DayOrganization.LOOSE_SCHEDULE_BREAKS:
            minutes = self.break_minutes
        else:
            return
        timeline.insert_buffer(block.end, timedelta(minutes=minutes), day=day)
