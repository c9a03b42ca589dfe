from rest_framework import serializers

from ..data.models import ReviewSession

class SessionInSerializer(serializers.Serializer):
    started_at = serializers.DateTimeField()
    ended_at = serializers.DateTimeField()
    correct_count = serializers.IntegerField(min_value=0)
    incorrect_count = serializers.IntegerField(min_value=0)
    idempotency_key = serializers.CharField(max_length=64)

    def validate(self, attrs):
        if attrs["ended_at"] < attrs["started_at"]:
            raise serializers.ValidationError("ended_at must not be before started_at")
        return attrs

class SimulateInSerializer(serializers.Serializer):
    session_start = serializers.DateTimeField(required=False)

class SessionSerializer(serializers.ModelSerializer):
    accuracy = serializers.FloatField()

    class Meta:
        model = ReviewSession
        fields = [
            "id", "started_at", "ended_at", "correct_count", "incorrect_count",
            "cards_reviewed", "accuracy", "xp_earned", "streak_count", "level",
        ]

class StatsSerializer(serializers.Serializer):
    xp = serializers.IntegerField()
    streak = serializers.IntegerField()
    level = serializers.IntegerField()
    ended_at = serializers.DateTimeField(allow_null=True)
