from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from django.db import DatabaseError, transaction
from django.utils import timezone
import structlog
from studytrack.context import Credentials, Result
from studytrack.errors import RecordNotFound, StoreUnavailable
from ..config import DUE_CARDS_LIMIT
from ..data import repos
from ..domain.enums import Outcome
from ..domain.logic import ReviewState, apply_outcome
from ..utils.time import to_local_iso

logger = structlog.get_logger()


@dataclass(frozen=True)
class ReviewResult:
    card_id: int
    outcome: int
    correct_count: int
    incorrect_count: int
    last_reviewed_at: Optional[datetime]
    next_review_at: datetime
    interval_days: int
    idempotent: bool


def _state_of(review):
    return ReviewState(
        correct_count=review.correct_count,
        incorrect_count=review.incorrect_count,
        last_reviewed_at=review.last_reviewed_at,
        next_review_at=review.next_review_at,
    )


def _result(log, idempotent):
    # Everything comes from the log row, so a replay reports the original answer
    return ReviewResult(
        card_id=log.card_id,
        outcome=log.outcome,
        correct_count=log.correct_count,
        incorrect_count=log.incorrect_count,
        last_reviewed_at=log.created_at,
        next_review_at=log.next_review_at,
        interval_days=log.interval_days,
        idempotent=idempotent,
    )


def ensure_review_record(credentials: Credentials, card_id: int, now=None) -> Result:
    """Create the review row for a card the user owns, due immediately."""
    try:
        with transaction.atomic():
            card = repos.get_owned_card(credentials.user_id, card_id)
            review, created = repos.get_or_create_review_for_update(
                credentials.user_id, card.pk, now
            )
    except RecordNotFound as e:
        return Result(error=e)
    except DatabaseError as e:
        logger.exception("ensure_review_failed",
            user_id=str(credentials.user_id),
            card_id=str(card_id),
        )
        return Result(error=StoreUnavailable(str(e)))
    if created:
        logger.info("review_record_created",
            user_id=str(credentials.user_id),
            card_id=str(card_id),
        )
    return Result(value=review)


def record_answer(credentials: Credentials, card_id: int, outcome: int,
                  idempotency_key: str, now=None) -> Result:
    user_id = credentials.user_id
    logger.info("review_received",
        user_id=str(user_id),
        card_id=str(card_id),
        outcome=int(outcome),
        idempotency_key=idempotency_key,
    )
    now = now or timezone.now()

    try:
        with transaction.atomic():
            card = repos.get_owned_card(user_id, card_id)
            # Serialize updates per (user, card) before looking at the log
            review, _ = repos.get_or_create_review_for_update(user_id, card.pk, now)

            existing = repos.get_existing_idempotent(user_id, card.pk, idempotency_key)
            if existing:
                logger.info("idempotent_reuse",
                    user_id=str(user_id),
                    card_id=str(card_id),
                    next_review_utc=existing.next_review_at.isoformat(),
                    next_review_local=to_local_iso(existing.next_review_at),
                )
                return Result(value=_result(existing, True))

            state = apply_outcome(_state_of(review), outcome, now)
            review.correct_count = state.correct_count
            review.incorrect_count = state.incorrect_count
            review.last_reviewed_at = state.last_reviewed_at
            review.next_review_at = state.next_review_at
            review.save(update_fields=[
                "correct_count", "incorrect_count", "last_reviewed_at",
                "next_review_at", "updated_at",
            ])

            interval = (state.next_review_at - now).days
            log, was_idempotent = repos.persist_review(
                user_id, card.pk, int(outcome), idempotency_key,
                state.next_review_at, interval,
                state.correct_count, state.incorrect_count, now,
            )
    except RecordNotFound as e:
        logger.warning("review_card_not_found", user_id=str(user_id), card_id=str(card_id))
        return Result(error=e)
    except DatabaseError as e:
        # Counts stay untouched; the caller decides whether to retry
        logger.exception("review_store_failed", user_id=str(user_id), card_id=str(card_id))
        return Result(error=StoreUnavailable(str(e)))

    logger.info("review_scheduled",
        user_id=str(user_id),
        card_id=str(card_id),
        correct_count=review.correct_count,
        incorrect_count=review.incorrect_count,
        interval_days=log.interval_days,
        next_review_utc=log.next_review_at.isoformat(),
        next_review_local=to_local_iso(log.next_review_at),
    )
    return Result(value=_result(log, was_idempotent))


def mark_correct(credentials, card_id, idempotency_key, now=None):
    return record_answer(credentials, card_id, Outcome.CORRECT, idempotency_key, now)


def mark_incorrect(credentials, card_id, idempotency_key, now=None):
    return record_answer(credentials, card_id, Outcome.INCORRECT, idempotency_key, now)


def get_review_record(credentials: Credentials, card_id: int):
    try:
        repos.get_owned_card(credentials.user_id, card_id)
        return repos.get_review(credentials.user_id, card_id)
    except DatabaseError as e:
        logger.exception("review_record_failed",
            user_id=str(credentials.user_id),
            card_id=str(card_id),
        )
        raise StoreUnavailable(str(e)) from e


def get_due_cards(credentials: Credentials, until=None, limit=DUE_CARDS_LIMIT):
    """Review rows (with their card) due at or before `until`, oldest first."""
    until = until or timezone.now()
    try:
        return repos.due_reviews(credentials.user_id, until, limit)
    except DatabaseError as e:
        logger.exception("due_cards_failed", user_id=str(credentials.user_id))
        raise StoreUnavailable(str(e)) from e


def create_flashcard(credentials: Credentials, subject, question, answer):
    card = repos.create_flashcard(credentials.user_id, subject, question, answer)
    logger.info("flashcard_created", user_id=str(credentials.user_id), card_id=str(card.pk))
    return card


def list_flashcards(credentials: Credentials, subject=None):
    return repos.list_flashcards(credentials.user_id, subject)
