from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from .enums import Outcome
from ..config import CORRECT_INTERVAL_DAYS, MAX_INTERVAL_DAYS, RETRY_DAYS


@dataclass(frozen=True)
class ReviewState:
    correct_count: int = 0
    incorrect_count: int = 0
    last_reviewed_at: Optional[datetime] = None
    next_review_at: Optional[datetime] = None


def interval_days(correct_count: int) -> int:
    # First correct answer already jumps to 2 days
    if correct_count < 1:
        raise ValueError(f"correct_count must be >= 1, got {correct_count}")
    return CORRECT_INTERVAL_DAYS.get(correct_count, MAX_INTERVAL_DAYS)


def on_correct(state: ReviewState, now: datetime) -> ReviewState:
    correct_count = state.correct_count + 1
    return replace(
        state,
        correct_count=correct_count,
        last_reviewed_at=now,
        next_review_at=now + timedelta(days=interval_days(correct_count)),
    )


def on_incorrect(state: ReviewState, now: datetime) -> ReviewState:
    return replace(
        state,
        incorrect_count=state.incorrect_count + 1,
        last_reviewed_at=now,
        next_review_at=now + timedelta(days=RETRY_DAYS),
    )


def apply_outcome(state: ReviewState, outcome: int, now: datetime) -> ReviewState:
    # outcome is validated earlier
    if outcome == Outcome.CORRECT:
        return on_correct(state, now)
    return on_incorrect(state, now)


def is_due(state: ReviewState, now: datetime) -> bool:
    return state.next_review_at is None or state.next_review_at <= now
