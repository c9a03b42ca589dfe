from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import NotAuthenticated, StoreError

T = TypeVar("T")


@dataclass(frozen=True)
class Credentials:
    """Identity of the caller, passed into every service call."""

    user_id: int
    username: str

    @classmethod
    def from_user(cls, user):
        if user is None or not user.is_authenticated:
            raise NotAuthenticated()
        return cls(user_id=user.pk, username=user.get_username())


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value
