import pytest
from django.contrib.auth import get_user_model

from studytrack.context import Credentials


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(username="student")


@pytest.fixture
def other_user(db):
    return get_user_model().objects.create_user(username="rival")


@pytest.fixture
def credentials(user):
    return Credentials.from_user(user)
