from django.urls import path
from .views import DueCardsView, FlashcardListView, ReviewRecordView, ReviewView

urlpatterns = [
    path("cards", FlashcardListView.as_view(), name="cards"),
    path("cards/due", DueCardsView.as_view(), name="due-cards"),
    path("cards/<int:card_id>/review", ReviewRecordView.as_view(), name="review-record"),
    path("cards/<int:card_id>/reviews", ReviewView.as_view(), name="review"),
]
