from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import AuthToken, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def create(self, user: User) -> None:
        raise NotImplementedError

    def touch_last_login(self, user_id: str, when: datetime) -> bool:
        raise NotImplementedError


class TokenRepository(Protocol):
    def create(self, token: AuthToken) -> None:
        raise NotImplementedError

    def get(self, token: str) -> Optional[AuthToken]:
        raise NotImplementedError

    def delete(self, token: str) -> bool:
        raise NotImplementedError

    def delete_expired(self, now: datetime) -> int:
        raise NotImplementedError
