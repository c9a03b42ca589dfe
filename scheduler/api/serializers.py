from rest_framework import serializers

from ..data.models import CardReview, Flashcard
from ..domain.enums import OUTCOME_LABELS

class ReviewInSerializer(serializers.Serializer):
    outcome = serializers.IntegerField(min_value=0, max_value=1)
    idempotency_key = serializers.CharField(max_length=64)

class DueQuerySerializer(serializers.Serializer):
    until = serializers.DateTimeField(required=False)  # ISO-8601
    limit = serializers.IntegerField(required=False, min_value=1, max_value=500)

class FlashcardSerializer(serializers.ModelSerializer):
    class Meta:
        model = Flashcard
        fields = ["id", "subject", "question", "answer", "created_at"]
        read_only_fields = ["id", "created_at"]

class CardReviewSerializer(serializers.ModelSerializer):
    card_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = CardReview
        fields = [
            "card_id", "correct_count", "incorrect_count",
            "last_reviewed_at", "next_review_at",
        ]

class ReviewResultSerializer(serializers.Serializer):
    card_id = serializers.IntegerField()
    outcome = serializers.IntegerField()
    outcome_label = serializers.SerializerMethodField()
    correct_count = serializers.IntegerField()
    incorrect_count = serializers.IntegerField()
    last_reviewed_at = serializers.DateTimeField(allow_null=True)
    next_review_at = serializers.DateTimeField()
    interval_days = serializers.IntegerField()
    idempotent = serializers.BooleanField()

    def get_outcome_label(self, obj):
        return OUTCOME_LABELS[obj.outcome]
