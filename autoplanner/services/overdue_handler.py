"""
Overdue flexible task policy.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from autoplanner.models.enums import OverdueTaskHandling
from autoplanner.models.planner import InfoItem
from autoplanner.models.task import Task


@dataclass
class OverdueDecision:
    """How the flexible set is adjusted before placement."""

    to_place: list[Task] = field(default_factory=list)
    relaxed_deadline_ids: set[int] = field(default_factory=set)
    postponed: list[Task] = field(default_factory=list)
    info_items: list[InfoItem] = field(default_factory=list)


def apply_overdue_policy(
    tasks: list[Task],
    policy: OverdueTaskHandling,
    now: datetime,
    window_start: date,
    logger: Optional[logging.Logger] = None,
) -> OverdueDecision:
    """
    Split flexible tasks according to the overdue policy.

    MANAGE_WHEN_FREE leaves every task untouched; expired ones end up in the
    expired list if they cannot be placed. ADD_TODAY_FREE_TIME lifts the
    deadline bound of expired tasks. POSTPONE_TO_TOMORROW keeps them out of
    this plan.
    """
    log = logger if logger is not None else logging.getLogger(__name__)
    decision = OverdueDecision()
    tomorrow = now.date() + timedelta(days=1)

    for task in tasks:
        if policy == OverdueTaskHandling.MANAGE_WHEN_FREE or not task.is_expired(now):
            decision.to_place.append(task)
            continue

        if policy == OverdueTaskHandling.ADD_TODAY_FREE_TIME:
            decision.to_place.append(task)
            decision.relaxed_deadline_ids.add(task.id)
            decision.info_items.append(
                InfoItem(
                    task=task,
                    message="Overdue task scheduled into free time",
                    relevant_date=max(window_start, now.date()),
                )
            )
            log.debug(f"Overdue task {task.id}: deadline lifted")
        else:
            decision.postponed.append(task)
            decision.info_items.append(
                InfoItem(
                    task=task,
                    message=f"Overdue task postponed to {tomorrow.isoformat()}",
                    relevant_date=tomorrow,
                )
            )
            log.debug(f"Overdue task {task.id}: postponed to {tomorrow}")

    if decision.relaxed_deadline_ids or decision.postponed:
        log.info(
            f"Overdue policy {policy.value}: {len(decision.relaxed_deadline_ids)} relaxed, "
            f"{len(decision.postponed)} postponed"
        )
    return decision
