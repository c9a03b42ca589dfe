import pytest
import logging
from datetime import datetime, timedelta, timezone as dt_tz
from unittest import mock
from django.db import OperationalError
from django.urls import reverse
from django.utils import timezone

from scoring.data.models import ReviewSession, UserProgress
from scoring.services.sessions import (
    get_user_stats,
    list_sessions,
    reset_user_progress,
    save_session,
    simulate_session,
)
from studytrack.context import Credentials
from studytrack.errors import StoreUnavailable

logger = logging.getLogger(__name__)

USERNAME = "student"
D = datetime(2026, 3, 1, 18, 0, tzinfo=dt_tz.utc)

# Helpers

def study(credentials, start, key, correct=8, incorrect=2, minutes=25):
    session, _ = save_session(
        credentials, start, start + timedelta(minutes=minutes), correct, incorrect, key
    )
    return session


def post_session(client, start, key, correct=8, incorrect=2, username=USERNAME):
    payload = {
        "started_at": start.isoformat(),
        "ended_at": (start + timedelta(minutes=25)).isoformat(),
        "correct_count": correct,
        "incorrect_count": incorrect,
        "idempotency_key": key,
    }
    resp = client.post(reverse("sessions"), data=payload, content_type="application/json",
                       HTTP_X_USER_NAME=username)
    data = resp.json()
    logger.info(
        "POST /sessions → status=%s xp=%s streak=%s level=%s",
        resp.status_code,
        data.get("xp_earned"),
        data.get("streak_count"),
        data.get("level"),
    )
    return resp


# Service tests

@pytest.mark.django_db
def test_first_session_scores_base_xp(credentials):
    session = study(credentials, D, "s1")

    assert (session.xp_earned, session.streak_count, session.level) == (40, 1, 1)
    assert session.cards_reviewed == 10
    assert float(session.accuracy) == 80.0


@pytest.mark.django_db
def test_streak_and_penalty_across_days(credentials):
    first = study(credentials, D, "s1")
    # next session starts one day after the first ended
    second = study(credentials, first.ended_at + timedelta(days=1), "s2")
    assert (second.xp_earned, second.streak_count, second.level) == (80, 2, 1)

    third = study(credentials, second.ended_at + timedelta(days=3), "s3")
    assert (third.xp_earned, third.streak_count, third.level) == (100, 1, 2)

    assert UserProgress.objects.get(user_id=credentials.user_id).version == 3


@pytest.mark.django_db
def test_history_is_append_only(credentials):
    study(credentials, D, "s1")
    study(credentials, D + timedelta(days=1), "s2")

    history = list_sessions(credentials)
    assert [s.idempotency_key for s in history] == ["s2", "s1"]
    assert [s.xp_earned for s in history] == [80, 40]


@pytest.mark.django_db
def test_replayed_session_is_not_scored_twice(credentials):
    first, was_idem_1 = save_session(credentials, D, D + timedelta(minutes=5), 1, 0, "dup")
    again, was_idem_2 = save_session(credentials, D, D + timedelta(minutes=5), 1, 0, "dup")

    assert was_idem_1 is False
    assert was_idem_2 is True
    assert again.pk == first.pk
    assert ReviewSession.objects.count() == 1


@pytest.mark.django_db
def test_sessions_are_scored_per_user(credentials, other_user):
    study(credentials, D, "s1")
    rival = study(Credentials.from_user(other_user), D + timedelta(days=1), "s1")

    assert (rival.xp_earned, rival.streak_count) == (40, 1)


@pytest.mark.django_db
def test_same_day_policy_from_settings(credentials, settings):
    settings.STUDYTRACK_SAME_DAY_XP = 0
    first = study(credentials, D, "s1")
    # Start at the exact instant the last session ended
    second = study(credentials, first.ended_at, "s2")

    assert second.xp_earned == 40
    assert second.streak_count == 1


@pytest.mark.django_db
def test_user_stats_defaults_and_latest(credentials):
    assert get_user_stats(credentials) == {"xp": 0, "streak": 0, "level": 1, "ended_at": None}

    study(credentials, D, "s1")
    latest = study(credentials, D + timedelta(days=1), "s2")
    stats = get_user_stats(credentials)
    assert stats == {"xp": 80, "streak": 2, "level": 1, "ended_at": latest.ended_at}


@pytest.mark.django_db
def test_simulate_does_not_write(credentials):
    first = study(credentials, D, "s1")
    sim = simulate_session(credentials, first.ended_at + timedelta(days=3))

    assert sim == {
        "current_xp": 40,
        "current_streak": 1,
        "current_level": 1,
        "new_xp": 60,
        "new_streak": 1,
        "new_level": 1,
        "days_since": 3,
    }
    assert ReviewSession.objects.count() == 1


@pytest.mark.django_db
def test_reset_starts_over_but_keeps_history(credentials):
    study(credentials, D, "s1")
    study(credentials, D + timedelta(days=1), "s2")

    reset_user_progress(credentials, now=D + timedelta(days=1, hours=1))
    assert get_user_stats(credentials)["xp"] == 0
    assert ReviewSession.objects.count() == 2

    after = study(credentials, D + timedelta(days=2), "s3")
    assert (after.xp_earned, after.streak_count, after.level) == (40, 1, 1)


@pytest.mark.django_db
def test_store_failure_raises_store_unavailable(credentials):
    with mock.patch(
        "scoring.services.sessions.repos.insert_session",
        side_effect=OperationalError("database is locked"),
    ):
        with pytest.raises(StoreUnavailable):
            study(credentials, D, "s1")

    assert ReviewSession.objects.count() == 0


@pytest.mark.django_db
def test_backdated_session_after_reset_still_counts(credentials):
    study(credentials, D, "s1")
    reset_user_progress(credentials, now=D + timedelta(days=1))

    # Submitted after the reset, but ended before it
    late = study(credentials, D + timedelta(hours=20), "s2", minutes=60)
    assert late.xp_earned == 40

    stats = get_user_stats(credentials)
    assert stats["xp"] == 40
    assert stats["ended_at"] == late.ended_at
    assert [s.idempotency_key for s in list_sessions(credentials)] == ["s2"]

    following = study(credentials, late.ended_at + timedelta(days=1), "s3")
    assert (following.xp_earned, following.streak_count) == (80, 2)


@pytest.mark.django_db
def test_session_saved_before_reset_stays_hidden(credentials):
    # Ends after the reset instant but was saved before the reset
    study(credentials, D + timedelta(days=1), "s1", minutes=5)
    reset_user_progress(credentials, now=D + timedelta(days=1))

    assert get_user_stats(credentials) == {"xp": 0, "streak": 0, "level": 1, "ended_at": None}
    assert list_sessions(credentials) == []


@pytest.mark.django_db
def test_save_session_stamps_created_at(credentials):
    saved_at = D + timedelta(hours=2)
    session, _ = save_session(
        credentials, D, D + timedelta(minutes=25), 1, 1, "s1", now=saved_at
    )

    assert session.created_at == saved_at
    assert ReviewSession.objects.get(pk=session.pk).created_at == saved_at


@pytest.mark.django_db
def test_session_scored_event_keeps_user_level(credentials, caplog):
    caplog.set_level(logging.INFO)
    study(credentials, D, "s1")

    events = [
        r.msg for r in caplog.records
        if isinstance(r.msg, dict) and r.msg.get("event") == "session_scored"
    ]
    assert len(events) == 1
    assert events[0]["user_level"] == 1
    assert events[0]["xp"] == 40
    assert events[0]["level"] == "info"


# API tests

@pytest.mark.django_db
def test_post_session_api(client, user):
    resp = post_session(client, D, "api-1")
    data = resp.json()
    assert resp.status_code == 201
    assert data["xp_earned"] == 40
    assert data["accuracy"] == 80.0
    assert data["idempotent"] is False

    replay = post_session(client, D, "api-1")
    assert replay.status_code == 200
    assert replay.json()["idempotent"] is True

    nxt = post_session(client, D + timedelta(days=1), "api-2").json()
    assert (nxt["xp_earned"], nxt["streak_count"]) == (80, 2)
    logger.info("✓ Passed: sessions scored over API")


@pytest.mark.django_db
def test_post_session_rejects_end_before_start(client, user):
    payload = {
        "started_at": D.isoformat(),
        "ended_at": (D - timedelta(minutes=1)).isoformat(),
        "correct_count": 1,
        "incorrect_count": 0,
        "idempotency_key": "bad",
    }
    resp = client.post(reverse("sessions"), data=payload, content_type="application/json",
                       HTTP_X_USER_NAME=USERNAME)
    assert resp.status_code == 400


@pytest.mark.django_db
def test_stats_history_simulate_and_reset_api(client, user):
    start = timezone.now() - timedelta(days=2)
    post_session(client, start, "api-1")

    stats = client.get(reverse("user-stats"), HTTP_X_USER_NAME=USERNAME).json()
    assert (stats["xp"], stats["streak"], stats["level"]) == (40, 1, 1)

    history = client.get(reverse("sessions"), HTTP_X_USER_NAME=USERNAME).json()["sessions"]
    assert len(history) == 1

    sim = client.post(
        reverse("simulate-session"),
        data={"session_start": (start + timedelta(days=1)).isoformat()},
        content_type="application/json",
        HTTP_X_USER_NAME=USERNAME,
    ).json()
    assert (sim["new_xp"], sim["new_streak"]) == (80, 2)

    reset = client.post(reverse("user-reset"), HTTP_X_USER_NAME=USERNAME)
    assert reset.status_code == 200
    stats = client.get(reverse("user-stats"), HTTP_X_USER_NAME=USERNAME).json()
    assert stats == {"xp": 0, "streak": 0, "level": 1, "ended_at": None}


@pytest.mark.django_db
def test_store_unavailable_maps_to_503(client, user):
    with mock.patch(
        "scoring.services.sessions.repos.latest_session",
        side_effect=OperationalError("database is locked"),
    ):
        resp = client.get(reverse("user-stats"), HTTP_X_USER_NAME=USERNAME)

    assert resp.status_code == 503
    assert resp.json()["retryable"] is True


@pytest.mark.django_db
def test_stats_require_authentication(client):
    resp = client.get(reverse("user-stats"))
    assert resp.status_code == 401
