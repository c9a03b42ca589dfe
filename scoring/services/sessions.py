from django.db import DatabaseError, transaction
from django.utils import timezone
import structlog
from studytrack.context import Credentials
from studytrack.errors import StoreUnavailable
from ..config import SESSION_HISTORY_LIMIT, same_day_xp
from ..data import repos
from ..domain.logic import PreviousSession, accuracy, calculate_level, score_session

logger = structlog.get_logger()


def _previous(session):
    if session is None:
        return None
    return PreviousSession(
        ended_at=session.ended_at, streak=session.streak_count, xp=session.xp_earned
    )


def save_session(credentials: Credentials, started_at, ended_at, correct_count,
                 incorrect_count, idempotency_key, now=None):
    """
    Score and append a completed session. Returns (session, was_idempotent).
    `now` stamps the row's created_at.
    """
    user_id = credentials.user_id
    now = now or timezone.now()
    logger.info("session_received",
        user_id=str(user_id),
        started_at=started_at.isoformat(),
        ended_at=ended_at.isoformat(),
        correct_count=correct_count,
        incorrect_count=incorrect_count,
        idempotency_key=idempotency_key,
    )

    try:
        with transaction.atomic():
            progress = repos.get_or_create_progress_for_update(user_id)

            existing = repos.get_existing_idempotent(user_id, idempotency_key)
            if existing:
                logger.info("idempotent_reuse",
                    user_id=str(user_id),
                    session_id=existing.pk,
                    xp=existing.xp_earned,
                )
                return existing, True

            previous = repos.latest_session(user_id, progress.reset_after_id)
            score = score_session(_previous(previous), started_at, same_day_xp())

            session, was_idempotent = repos.insert_session(
                user_id,
                idempotency_key,
                started_at=started_at,
                ended_at=ended_at,
                correct_count=correct_count,
                incorrect_count=incorrect_count,
                cards_reviewed=correct_count + incorrect_count,
                accuracy=accuracy(correct_count, incorrect_count),
                xp_earned=score.xp,
                streak_count=score.streak,
                level=score.level,
                created_at=now,
            )
            progress.version += 1
            progress.save(update_fields=["version"])
    except DatabaseError as e:
        logger.exception("session_store_failed", user_id=str(user_id))
        raise StoreUnavailable(str(e)) from e

    logger.info("session_scored",
        user_id=str(user_id),
        session_id=session.pk,
        days_since=score.days_since,
        xp=session.xp_earned,
        streak=session.streak_count,
        user_level=session.level,
        version=progress.version,
    )
    return session, was_idempotent


def get_user_stats(credentials: Credentials):
    try:
        progress = repos.get_progress(credentials.user_id)
        reset_after_id = progress.reset_after_id if progress else None
        latest = repos.latest_session(credentials.user_id, reset_after_id)
    except DatabaseError as e:
        raise StoreUnavailable(str(e)) from e

    if latest is None:
        return {"xp": 0, "streak": 0, "level": 1, "ended_at": None}
    return {
        "xp": latest.xp_earned,
        "streak": latest.streak_count,
        "level": latest.level,
        "ended_at": latest.ended_at,
    }


def simulate_session(credentials: Credentials, session_start):
    """What save_session would award for a session starting now, without writing."""
    try:
        progress = repos.get_progress(credentials.user_id)
        reset_after_id = progress.reset_after_id if progress else None
        latest = repos.latest_session(credentials.user_id, reset_after_id)
    except DatabaseError as e:
        raise StoreUnavailable(str(e)) from e

    score = score_session(_previous(latest), session_start, same_day_xp())
    return {
        "current_xp": latest.xp_earned if latest else 0,
        "current_streak": latest.streak_count if latest else 0,
        "current_level": latest.level if latest else calculate_level(0),
        "new_xp": score.xp,
        "new_streak": score.streak,
        "new_level": score.level,
        "days_since": score.days_since,
    }


def list_sessions(credentials: Credentials, limit=SESSION_HISTORY_LIMIT):
    try:
        progress = repos.get_progress(credentials.user_id)
        return repos.list_sessions(
            credentials.user_id, progress.reset_after_id if progress else None, limit
        )
    except DatabaseError as e:
        raise StoreUnavailable(str(e)) from e


def reset_user_progress(credentials: Credentials, now=None):
    """
    Start XP and streak over from zero; session history is kept.
    Sessions saved before the reset stay out of scoring and stats,
    whatever their ended_at.
    """
    now = now or timezone.now()
    try:
        with transaction.atomic():
            progress = repos.get_or_create_progress_for_update(credentials.user_id)
            progress.reset_at = now
            progress.reset_after_id = repos.last_session_id(credentials.user_id) or 0
            progress.version += 1
            progress.save(update_fields=["reset_at", "reset_after_id", "version"])
    except DatabaseError as e:
        logger.exception("reset_failed", user_id=str(credentials.user_id))
        raise StoreUnavailable(str(e)) from e

    logger.info("progress_reset",
        user_id=str(credentials.user_id),
        reset_at=now.isoformat(),
        reset_after_id=progress.reset_after_id,
        version=progress.version,
    )
    return progress
