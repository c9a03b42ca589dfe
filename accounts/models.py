from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """
    Custom User model that extends the default Django User model.
    Flashcards, review records and study sessions all hang off it.
    """

    pass
