# Copyright (C) 2026 The Wishboat Contributors
#
# This file is part of Wishboat.
#
# Wishboat is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# Wishboat is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with Wishboat.  If not, see <http://www.gnu.org/licenses/>.
"""`AuthRequest`, `AuthAnswer` and `AuthProvider`: The authentication tools for the user system.
"""
from dataclasses import dataclass
from typing import Optional

from .storage import TokenRecordStorage, UserRecordStorage
from .usr import UserRecord


@dataclass
class AuthRequest(object):
    """The request for authentication.

    Attributes:
        username: `Optional[str]`. The user identity.
        password: `Optional[str]`.
        request_token: `bool`. If request a new session token.

    Typical usages:

    Verify the user with username and password, and request a token:
    ````python
    AuthRequest(
        username = "...",
        password = "...",
        request_token = True,
    )
    ````
    """

    username: Optional[str] = None
    password: Optional[str] = None
    request_token: bool = False


@dataclass
class AuthAnswer(object):
    """The answer for authentication.

    Attributes:
        handled: `bool`. If the request can be handled correctly.
        success: `bool`. The result of the authentication.
        token: `Optional[str]`. The `token` string.
    """

    handled: bool
    success: bool
    token: Optional[str] = None


class AuthProvider(object):
    """Provide authentication to the HTTP API gateway.

    `token_expiration_seconds` is the lifetime of issued tokens, `None` for tokens never expire.
    """

    def __init__(
        self,
        user_record_storage: UserRecordStorage,
        token_record_storage: TokenRecordStorage,
        token_expiration_seconds: Optional[int] = None,
    ) -> None:
        self.user_record_storage = user_record_storage
        self.token_record_storage = token_record_storage
        self.token_expiration_seconds = token_expiration_seconds
        super().__init__()

    async def auth(self, request: AuthRequest) -> AuthAnswer:
        """Process an authentication request."""
        if not (request.username and request.password):
            return AuthAnswer(handled=False, success=False)
        password_checking = await self.user_record_storage.check_user_password(
            request.username, request.password
        )
        if not password_checking:
            return AuthAnswer(handled=True, success=False)
        token = None
        if request.request_token:
            await self.token_record_storage.remove_expired(request.username)
            token = await self.token_record_storage.create_token(
                request.username,
                expiration_offest_seconds=self.token_expiration_seconds,
            )
        return AuthAnswer(
            handled=True,
            success=True,
            token=(token.token if token else None),
        )

    async def user_of_token(self, token: str) -> Optional[UserRecord]:
        """Return the user signed in with `token`.
        Return `None` when the token is unknown or the user is gone. An expired token is removed and gives `None`."""
        record = await self.token_record_storage.find_token(token)
        if not record:
            return None
        if not record.is_avaliable():
            await self.revoke(token)
            return None
        return await self.user_record_storage.get(record.user_id)

    async def revoke(self, token: str) -> bool:
        """Remove the token. Return `False` if it is not found."""
        return await self.token_record_storage.remove_one({"token": token})
