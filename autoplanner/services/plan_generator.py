"""
Plan generation pipeline.

Resolves the window, classifies tasks, expands recurrences, places fixed
occurrences, then fills the remaining free time with flexible tasks in
score order. Each call owns its timeline; nothing is shared between calls.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from autoplanner.core.config import Settings, get_settings
from autoplanner.models.planner import InfoItem, PlannerInput, PlannerOutput
from autoplanner.models.task import DEFAULT_TASK_MINUTES
from autoplanner.services.fixed_placement import FixedOccurrence, FixedPlacementEngine
from autoplanner.services.flexible_placement import (
    BREAK_MINUTES,
    BUFFER_MINUTES,
    MIN_SPLIT_MINUTES,
    FlexiblePlacementEngine,
)
from autoplanner.services.overdue_handler import apply_overdue_policy
from autoplanner.services.recurrence_expander import RecurrenceExpander
from autoplanner.services.result_assembler import ResultAssembler
from autoplanner.services.task_classifier import classify_tasks
from autoplanner.services.timeline import Timeline
from autoplanner.services.window_resolver import resolve_window


class PlanGenerator:
    """
    Greedy planner.

    Deterministic: the same input and `now` always produce the same output.
    """

    def __init__(
        self,
        default_task_minutes: int = DEFAULT_TASK_MINUTES,
        buffer_minutes: int = BUFFER_MINUTES,
        break_minutes: int = BREAK_MINUTES,
        min_split_minutes: int = MIN_SPLIT_MINUTES,
        logger: Optional[logging.Logger] = None,
    ):
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self.recurrence_expander = RecurrenceExpander(logger=self._logger)
        self.fixed_engine = FixedPlacementEngine(
            default_task_minutes=default_task_minutes, logger=self._logger
        )
        self.flexible_engine = FlexiblePlacementEngine(
            buffer_minutes=buffer_minutes,
            break_minutes=break_minutes,
            min_split_minutes=min_split_minutes,
            default_task_minutes=default_task_minutes,
            logger=self._logger,
        )

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, logger: Optional[logging.Logger] = None
    ) -> PlanGenerator:
        settings = settings or get_settings()
        return cls(
            default_task_minutes=settings.DEFAULT_TASK_MINUTES,
            buffer_minutes=settings.BUFFER_MINUTES,
            break_minutes=settings.BREAK_MINUTES,
            min_split_minutes=settings.MIN_SPLIT_MINUTES,
            logger=logger,
        )

    def generate_plan(self, planner_input: PlannerInput, now: datetime) -> PlannerOutput:
        """
        Build a plan for the requested scope.

        Never raises: an unexpected error is logged and whatever was
        assembled so far is returned with an info item describing the failure.

        Args:
            planner_input: Tasks and scheduling preferences
            now: Current instant

        Returns:
            PlannerOutput
        """
        window_start, window_end = resolve_window(planner_input.schedule_scope, now)
        tasks_by_id = {task.id: task for task in planner_input.tasks}
        assembler = ResultAssembler(
            now=now,
            window_start=window_start,
            window_end=window_end,
            tasks_by_id=tasks_by_id,
        )

        try:
            self._run(planner_input, now, assembler)
        except Exception as e:
            self._logger.exception(f"Plan generation failed: {e}")
            assembler.add_info(
                [InfoItem(message=f"Planning stopped early: {e}", relevant_date=window_start)]
            )

        output = assembler.build()
        self._logger.info(
            f"Plan {window_start} - {window_end}: {output.scheduled_count} blocks, "
            f"{len(output.unresolved_conflicts)} conflicts, "
            f"{len(output.unresolved_expired)} expired, "
            f"{len(output.postponed_tasks)} postponed"
        )
        return output

    def _run(self, planner_input: PlannerInput, now: datetime, assembler: ResultAssembler) -> None:
        window_start = assembler.window_start
        window_end = assembler.window_end
        self._logger.info(
            f"Generating plan for {window_start} - {window_end} "
            f"({len(planner_input.tasks)} tasks, scope {planner_input.schedule_scope.value})"
        )

        classified = classify_tasks(planner_input.tasks, window_start, window_end, now)
        self._logger.info(
            f"Classified: {len(classified.fixed)} fixed, {len(classified.recurring)} recurring, "
            f"{len(classified.flexible)} flexible"
        )

        order = {task.id: index for index, task in enumerate(planner_input.tasks)}
        occurrences = [
            FixedOccurrence(task=task, start=task.start_datetime, order=order[task.id])
            for task in classified.fixed
        ]
        for task in classified.recurring:
            expansion = self.recurrence_expander.expand_detailed(
                task, window_start, window_end, planner_input.work_start_time
            )
            occurrences.extend(
                FixedOccurrence(task=task, start=start, order=order[task.id])
                for start in expansion.occurrences
            )
            if expansion.truncated:
                assembler.add_info(
                    [
                        InfoItem(
                            task=task,
                            message=f"Recurrence truncated: {expansion.truncated_reason}",
                            relevant_date=window_start,
                        )
                    ]
                )

        timeline = Timeline.build(
            window_start, window_end, planner_input.work_start_time, planner_input.work_end_time
        )
        report = self.fixed_engine.place_all(
            occurrences, timeline, window_start, window_end, assembler.tasks_by_id
        )
        assembler.add_fixed(report)

        decision = apply_overdue_policy(
            classified.flexible,
            planner_input.overdue_task_handling,
            now,
            window_start,
            logger=self._logger,
        )
        assembler.add_postponed(decision.postponed)
        assembler.add_info(decision.info_items)

        placements = self.flexible_engine.place_all(
            decision.to_place,
            timeline,
            now,
            strategy=planner_input.prioritization_strategy,
            day_organization=planner_input.day_organization,
            heuristic=planner_input.placement_heuristic,
            allow_splitting=planner_input.allow_splitting,
            relaxed_deadline_ids=decision.relaxed_deadline_ids,
        )
        assembler.add_flexible(placements)
        assembler.add_unattempted_expired(
            classified.flexible, {placement.task.id for placement in placements}
        )
