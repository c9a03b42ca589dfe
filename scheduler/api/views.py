from rest_framework import views, status
from rest_framework.response import Response
import structlog
import uuid
from studytrack.context import Credentials
from ..config import DUE_CARDS_LIMIT
from ..services import reviews
from ..utils.time import to_local_iso
from .serializers import (
    CardReviewSerializer,
    DueQuerySerializer,
    FlashcardSerializer,
    ReviewInSerializer,
    ReviewResultSerializer,
)

base_logger = structlog.get_logger()


def _bind(credentials):
    # Create a unique request_id
    return base_logger.bind(request_id=str(uuid.uuid4()), user_id=str(credentials.user_id))


class FlashcardListView(views.APIView):
    def get(self, request):
        credentials = Credentials.from_user(request.user)
        cards = reviews.list_flashcards(credentials, request.query_params.get("subject"))
        return Response({"cards": FlashcardSerializer(cards, many=True).data})

    def post(self, request):
        credentials = Credentials.from_user(request.user)
        s = FlashcardSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        card = reviews.create_flashcard(credentials, **s.validated_data)
        return Response(FlashcardSerializer(card).data, status=status.HTTP_201_CREATED)


class ReviewView(views.APIView):
    def post(self, request, card_id):
        credentials = Credentials.from_user(request.user)
        logger = _bind(credentials)

        s = ReviewInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        result = reviews.record_answer(
            credentials,
            card_id,
            s.validated_data["outcome"],
            s.validated_data["idempotency_key"],
        )
        # StoreError goes through the API exception handler
        outcome = result.unwrap()
        status_code = status.HTTP_200_OK if outcome.idempotent else status.HTTP_201_CREATED

        # Log with request_id & relevant context
        logger.info(
            "review_api_response",
            card_id=str(card_id),
            outcome=outcome.outcome,
            idempotent=outcome.idempotent,
            interval_days=outcome.interval_days,
            next_review_utc=outcome.next_review_at.isoformat(),
            status=status_code,
        )

        data = ReviewResultSerializer(outcome).data
        data["next_review_local"] = to_local_iso(outcome.next_review_at)
        return Response(data, status=status_code)


class ReviewRecordView(views.APIView):
    def get(self, request, card_id):
        credentials = Credentials.from_user(request.user)
        review = reviews.get_review_record(credentials, card_id)
        return Response(CardReviewSerializer(review).data)


class DueCardsView(views.APIView):
    def get(self, request):
        credentials = Credentials.from_user(request.user)
        logger = _bind(credentials)

        qs = DueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        until = qs.validated_data.get("until")
        limit = qs.validated_data.get("limit", DUE_CARDS_LIMIT)

        due = reviews.get_due_cards(credentials, until, limit)
        results = [
            dict(FlashcardSerializer(r.card).data, next_review_at=r.next_review_at.isoformat())
            for r in due
        ]

        logger.info(
            "due_cards_api_response",
            until_utc=until.isoformat() if until else None,
            card_count=len(results),
        )

        return Response(
            {
                "until_utc": until.isoformat() if until else None,
                "until_local": to_local_iso(until) if until else None,
                "cards": results,
            }
        )
