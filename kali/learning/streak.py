"""Daily activity streak tracking."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StreakState:
    """Streak counter and the activity time it was last advanced from."""

    streak: int
    last_activity_date: Optional[datetime]


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days elapsed from ``earlier`` to ``later``, floored."""
    return (later - earlier) // ONE_DAY


def update_streak(state: StreakState, now: datetime) -> StreakState:
    """Advance the streak for one lesson completion at ``now``.

    - same day: streak unchanged, activity time refreshed
    - next day: streak + 1
    - longer gap: streak restarts at 1
    - ``now`` before the last activity: left untouched and logged
    """
    if state.last_activity_date is None:
        return StreakState(streak=1, last_activity_date=now)

    days_diff = days_between(state.last_activity_date, now)

    if days_diff < 0:
        logger.warning(
            f"Activity time {now.isoformat()} precedes last activity "
            f"{state.last_activity_date.isoformat()}; streak left at {state.streak}"
        )
        return state

    if days_diff == 0:
        return StreakState(streak=state.streak, last_activity_date=now)
    if days_diff == 1:
        return StreakState(streak=state.streak + 1, last_activity_date=now)
    return StreakState(streak=1, last_activity_date=now)
