from django.conf import settings
from django.db import models
from django.utils import timezone

class Flashcard(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="flashcards"
    )
    subject = models.CharField(max_length=100, blank=True, default="")
    question = models.TextField()
    answer = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        app_label = "scheduler"
        indexes = [
            models.Index(fields=["owner", "subject"], name="flashcard_owner_subject_idx"),
        ]

class CardReview(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="card_reviews"
    )
    card = models.ForeignKey(Flashcard, on_delete=models.CASCADE, related_name="reviews")
    correct_count = models.PositiveIntegerField(default=0)
    incorrect_count = models.PositiveIntegerField(default=0)
    last_reviewed_at = models.DateTimeField(null=True, blank=True)
    next_review_at = models.DateTimeField(default=timezone.now)  # UTC
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "scheduler"
        unique_together = (("user", "card"),)
        indexes = [
            models.Index(fields=["user", "next_review_at"], name="cardreview_user_due_idx"),
        ]

class ReviewLog(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    card = models.ForeignKey(Flashcard, on_delete=models.CASCADE)
    outcome = models.SmallIntegerField()
    idempotency_key = models.CharField(max_length=64)
    created_at = models.DateTimeField(default=timezone.now)
    next_review_at = models.DateTimeField()
    interval_days = models.PositiveIntegerField()
    # Counts right after this answer, so replays report the same snapshot
    correct_count = models.PositiveIntegerField(default=0)
    incorrect_count = models.PositiveIntegerField(default=0)

    class Meta:
        app_label = "scheduler"
        unique_together = (("user", "card", "idempotency_key"),)
        indexes = [
            models.Index(fields=["user", "card", "created_at"], name="reviewlog_user_card_idx"),
        ]
