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
"""`LoginHandler` and `LogoutHandler`: sessions of the HTTP API gateway.
"""
from tornado.web import authenticated

from ..usrsys.auth import AuthRequest
from .base import SESSION_COOKIE, BaseRequestHandler


class LoginHandler(BaseRequestHandler):
    """Sign in with the form fields "username" and "password".

    On success the session token is kept in a signed cookie and the client is sent to the profile.
    """

    def get(self):
        self.write_view({"title": self.lang("LOGIN_TITLE")})

    async def post(self):
        answer = await self.auth_provider.auth(
            AuthRequest(
                username=self.get_body_argument("username", ""),
                password=self.get_body_argument("password", ""),
                request_token=True,
            )
        )
        if not (answer.success and answer.token):
            self.flash("error", self.lang("LOGIN_FAILED"))
            return self.redirect_to("/login")
        self.set_signed_cookie(SESSION_COOKIE, answer.token, httponly=True)
        next_url = self.get_query_argument("next", "/profile")
        if not next_url.startswith("/") or next_url.startswith("//"):
            next_url = "/profile"
        self.redirect_to(next_url)


class LogoutHandler(BaseRequestHandler):
    @authenticated
    async def post(self):
        token = self.get_signed_cookie(SESSION_COOKIE)
        if token:
            await self.auth_provider.revoke(token.decode("utf-8"))
        self.clear_cookie(SESSION_COOKIE)
        self.redirect_to("/login")
