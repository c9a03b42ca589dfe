from django.db import transaction, IntegrityError
from django.utils import timezone
from studytrack.errors import RecordNotFound
from .models import CardReview, Flashcard, ReviewLog

def get_owned_card(user_id, card_id):
    try:
        return Flashcard.objects.get(pk=card_id, owner_id=user_id)
    except Flashcard.DoesNotExist:
        raise RecordNotFound(f"Flashcard {card_id} not found") from None

def get_or_create_review_for_update(user_id, card_id, now=None):
    """
    Fetch the review row and lock it for update to avoid races.
    Create if missing. Must run inside transaction.atomic().
    """
    review, created = (CardReview.objects
                       .select_for_update()
                       .get_or_create(
                           user_id=user_id, card_id=card_id,
                           defaults={"next_review_at": now or timezone.now()},
                       ))
    return review, created

def get_review(user_id, card_id):
    try:
        return CardReview.objects.get(user_id=user_id, card_id=card_id)
    except CardReview.DoesNotExist:
        raise RecordNotFound(f"No review record for flashcard {card_id}") from None

def get_existing_idempotent(user_id, card_id, idem_key):
    return ReviewLog.objects.filter(
        user_id=user_id, card_id=card_id, idempotency_key=idem_key
    ).first()

def persist_review(user_id, card_id, outcome, idem_key, next_review_at, interval_days,
                   correct_count, incorrect_count, now=None):
    """
    Insert ReviewLog; if a concurrent duplicate slips in, return the existing one.
    """
    try:
        with transaction.atomic():
            return ReviewLog.objects.create(
                user_id=user_id, card_id=card_id, outcome=outcome,
                idempotency_key=idem_key, next_review_at=next_review_at,
                interval_days=interval_days, correct_count=correct_count,
                incorrect_count=incorrect_count, created_at=now or timezone.now(),
            ), False
    except IntegrityError:
        # Duplicate idempotency key safeguard
        existing = get_existing_idempotent(user_id, card_id, idem_key)
        return existing, True

def due_reviews(user_id, until, limit):
    return list(
        CardReview.objects.select_related("card")
        .filter(user_id=user_id, card__owner_id=user_id, next_review_at__lte=until)
        .order_by("next_review_at", "pk")[:limit]
    )

def create_flashcard(user_id, subject, question, answer):
    return Flashcard.objects.create(
        owner_id=user_id, subject=subject, question=question, answer=answer
    )

def list_flashcards(user_id, subject=None):
    qs = Flashcard.objects.filter(owner_id=user_id).order_by("subject", "pk")
    if subject:
        qs = qs.filter(subject=subject)
    return list(qs)
