"""
Enum definitions for the application.

These enums are used across models and provide type-safe values for task
attributes and planner preferences.
"""

from enum import Enum


class Priority(str, Enum):
    """Priority tier of a task."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    NONE = "NONE"


class DayPeriod(str, Enum):
    """
    Symbolic time-of-day used instead of an exact clock time.

    A task whose start plan carries a period (anything but NONE) has no
    exact start and is never placed as a fixed task.
    """

    MORNING = "MORNING"
    EVENING = "EVENING"
    NIGHT = "NIGHT"
    ALLDAY = "ALLDAY"
    NONE = "NONE"


class FrequencyType(str, Enum):
    """Recurrence frequency."""

    NONE = "NONE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"
    CUSTOM = "CUSTOM"


class IntervalUnit(str, Enum):
    """Unit of the interval for CUSTOM recurrence."""

    DAY = "DAY"
    WEEK = "WEEK"
    MONTH = "MONTH"


class Weekday(str, Enum):
    """Day of week (order matches date.weekday())."""

    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"

    @property
    def index(self) -> int:
        return list(Weekday).index(self)


class ScheduleScope(str, Enum):
    """Which dates a planning run covers."""

    TODAY = "TODAY"
    TOMORROW = "TOMORROW"
    THIS_WEEK = "THIS_WEEK"


class PrioritizationStrategy(str, Enum):
    """User-selected adjustment applied on top of the base urgency score."""

    URGENT_FIRST = "URGENT_FIRST"
    HIGH_PRIORITY_FIRST = "HIGH_PRIORITY_FIRST"
    SHORT_TASKS_FIRST = "SHORT_TASKS_FIRST"
    EARLIER_DEADLINES_FIRST = "EARLIER_DEADLINES_FIRST"


class DayOrganization(str, Enum):
    """
    How the day should feel.

    MAXIMIZE_PRODUCTIVITY = back-to-back placement
    FOCUS_URGENT_BUFFER = short buffer after each flexible chunk
    LOOSE_SCHEDULE_BREAKS = longer break after each flexible chunk
    """

    MAXIMIZE_PRODUCTIVITY = "MAXIMIZE_PRODUCTIVITY"
    FOCUS_URGENT_BUFFER = "FOCUS_URGENT_BUFFER"
    LOOSE_SCHEDULE_BREAKS = "LOOSE_SCHEDULE_BREAKS"


class PlacementHeuristic(str, Enum):
    """Slot choice among candidates on the same date."""

    EARLIEST_FIT = "EARLIEST_FIT"
    BEST_FIT = "BEST_FIT"


class OverdueTaskHandling(str, Enum):
    """What to do with flexible tasks whose deadline already passed."""

    ADD_TODAY_FREE_TIME = "ADD_TODAY_FREE_TIME"
    MANAGE_WHEN_FREE = "MANAGE_WHEN_FREE"
    POSTPONE_TO_TOMORROW = "POSTPONE_TO_TOMORROW"


class ConflictType(str, Enum):
    """Classification of an unresolved planning problem."""

    FIXED_VS_FIXED = "FIXED_VS_FIXED"
    NO_SLOT_IN_SCOPE = "NO_SLOT_IN_SCOPE"
    CANNOT_FIT_PERIOD = "CANNOT_FIT_PERIOD"
    OUTSIDE_WORK_HOURS = "OUTSIDE_WORK_HOURS"
    PLACEMENT_ERROR = "PLACEMENT_ERROR"
