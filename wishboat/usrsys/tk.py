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

"""Session tokens: `TokenRecord`.

A token is issued when a user signs in and is kept in the session cookie of the HTTP API gateway.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4


def _now() -> float:
    return datetime.now(timezone.utc).timestamp()


@dataclass
class TokenRecord(object):
    """Infomation about a token.

    Attributes:
        token: `str`. The token string.
        user_id: `str`. The identity of the authenticated user.
        expiration: `Optional[int]` of unix timestamp (from UTC). After the time of the timestamp described, the token is unavaliable.
    """

    token: str
    user_id: str
    expiration: Optional[int] = None

    @classmethod
    def new(
        cls, user_id: str, *, expiration_offest_seconds: Optional[int] = None
    ) -> "TokenRecord":
        """Shortcut to create a new token object. The token never expires if `expiration_offest_seconds` is `None`.

        ..Note:: this method just create an object, you should store it before using. Or just use `TokenRecordStorage.create_token`, which will take care of that.
        """
        expir = None
        if expiration_offest_seconds is not None:
            expir = int(_now()) + expiration_offest_seconds
        return cls(token=uuid4().hex, user_id=user_id, expiration=expir)

    def is_avaliable(self) -> bool:
        """Check if the token is avaliable."""
        return self.expiration is None or _now() < self.expiration
