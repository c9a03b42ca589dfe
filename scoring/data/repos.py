from django.db import transaction, IntegrityError
from .models import ReviewSession, UserProgress

def get_or_create_progress_for_update(user_id):
    """
    Fetch the user's progress row and lock it, serializing session writes.
    Must run inside transaction.atomic().
    """
    progress, _ = UserProgress.objects.select_for_update().get_or_create(user_id=user_id)
    return progress

def get_progress(user_id):
    return UserProgress.objects.filter(user_id=user_id).first()

def _visible_sessions(user_id, reset_after_id):
    # Sessions saved before the last reset, by insertion order, are hidden
    qs = ReviewSession.objects.filter(user_id=user_id)
    if reset_after_id is not None:
        qs = qs.filter(pk__gt=reset_after_id)
    return qs

def last_session_id(user_id):
    return (ReviewSession.objects.filter(user_id=user_id)
            .order_by("-pk").values_list("pk", flat=True).first())

def latest_session(user_id, reset_after_id=None):
    return _visible_sessions(user_id, reset_after_id).order_by("-ended_at", "-pk").first()

def list_sessions(user_id, reset_after_id=None, limit=50):
    return list(_visible_sessions(user_id, reset_after_id).order_by("-ended_at", "-pk")[:limit])

def get_existing_idempotent(user_id, idem_key):
    return ReviewSession.objects.filter(user_id=user_id, idempotency_key=idem_key).first()

def insert_session(user_id, idem_key, **fields):
    """
    Insert ReviewSession; if a concurrent duplicate slips in, return the existing one.
    """
    try:
        with transaction.atomic():
            return ReviewSession.objects.create(
                user_id=user_id, idempotency_key=idem_key, **fields
            ), False
    except IntegrityError:
        return get_existing_idempotent(user_id, idem_key), True
