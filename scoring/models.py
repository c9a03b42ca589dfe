from .data.models import ReviewSession, UserProgress  # noqa: F401
