from django.conf import settings
from django.db import models
from django.utils import timezone

class UserProgress(models.Model):
    """Per-user lock row for session writes; version bumps on every save."""
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="progress"
    )
    version = models.PositiveIntegerField(default=0)
    reset_at = models.DateTimeField(null=True, blank=True)
    # pk of the last session saved before the reset
    reset_after_id = models.BigIntegerField(null=True, blank=True)

    class Meta:
        app_label = "scoring"

class ReviewSession(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="review_sessions"
    )
    started_at = models.DateTimeField()
    ended_at = models.DateTimeField()
    correct_count = models.PositiveIntegerField(default=0)
    incorrect_count = models.PositiveIntegerField(default=0)
    cards_reviewed = models.PositiveIntegerField(default=0)
    accuracy = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    xp_earned = models.PositiveIntegerField()   # cumulative
    streak_count = models.PositiveIntegerField()
    level = models.PositiveIntegerField()
    idempotency_key = models.CharField(max_length=64)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        app_label = "scoring"
        unique_together = (("user", "idempotency_key"),)
        indexes = [
            models.Index(fields=["user", "ended_at"], name="session_user_ended_idx"),
        ]
