# services/identity.py
from typing import Optional

from fastapi import Request


class IdentityProvider:
    """
    Resolves the caller's user id. Sign-in itself happens elsewhere: either an
    auth proxy in front of the app sets a trusted header, or the development
    login page stores the user name in a cookie.
    """

    def __init__(self, header_name: str = "X-User-Id", cookie_name: str = "chat_user_id"):
        self.header_name = header_name
        self.cookie_name = cookie_name

    def authenticate(self, request: Request) -> Optional[str]:
        for raw in (request.headers.get(self.header_name), request.cookies.get(self.cookie_name)):
            if raw and raw.strip():
                return raw.strip()
        return None
