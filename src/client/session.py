"""Client-side authentication session.

Holds the bearer token and current user profile for one logged-in client.
The session is passed explicitly to whatever needs it; ``load`` and ``clear``
are called on login/register and logout.
"""

from typing import Any, Dict, Optional


class AuthSession:
    """Token and profile of the logged-in user, if any."""

    def __init__(self):
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.user["id"] if self.user else None

    def load(self, token: str, user: Optional[Dict[str, Any]]) -> None:
        self.token = token
        self.user = user

    def clear(self) -> None:
        self.token = None
        self.user = None

    def auth_headers(self) -> Dict[str, str]:
        if self.token is None:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
