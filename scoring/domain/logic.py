"""Streak, XP and level rules for completed study sessions."""
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..config import BASE_XP, MISSED_DAY_PENALTY, XP_PER_LEVEL

DAY = timedelta(days=1)


@dataclass(frozen=True)
class PreviousSession:
    ended_at: datetime
    streak: int
    xp: int


@dataclass(frozen=True)
class Score:
    xp: int
    streak: int
    level: int
    days_since: int = 0


def calculate_level(xp: int) -> int:
    return max(0, xp) // XP_PER_LEVEL + 1


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days between two instants, rounded up; order does not matter."""
    return math.ceil(abs(later - earlier) / DAY)


def accuracy(correct: int, incorrect: int) -> float:
    total = correct + incorrect
    if total == 0:
        return 0.0
    return round(correct / total * 100, 2)


def score_session(previous: Optional[PreviousSession], session_start: datetime,
                  same_day_xp: int = BASE_XP) -> Score:
    """
    Score a session that starts at `session_start` against the last saved one.

    One day since the last session continues the streak, more than one resets
    it and costs MISSED_DAY_PENALTY XP per missed day, less than one holds it.
    """
    if previous is None:
        return Score(xp=BASE_XP, streak=1, level=calculate_level(BASE_XP))

    days_since = days_between(previous.ended_at, session_start)
    if days_since == 1:
        streak = previous.streak + 1
        xp = previous.xp + BASE_XP
    elif days_since > 1:
        penalty = (days_since - 1) * MISSED_DAY_PENALTY
        streak = 1
        xp = max(0, previous.xp - penalty + BASE_XP)
    else:
        streak = previous.streak
        xp = previous.xp + same_day_xp

    return Score(xp=xp, streak=streak, level=calculate_level(xp), days_since=days_since)
