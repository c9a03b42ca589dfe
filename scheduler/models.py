from .data.models import CardReview, Flashcard, ReviewLog  # noqa: F401
