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
"""Handlers of the profile pages: info, password and profile picture.
"""
from typing import Any, Dict

from tornado.web import authenticated

from ..usrsys.profile import ProfileAnswer, UploadedFile
from ..usrsys.usr import UserRecord
from .base import SESSION_COOKIE, BaseRequestHandler


def profile_view(user: UserRecord) -> Dict[str, Any]:
    return {
        "identity": user.identity,
        "info": user.info,
        "pfp": "/uploads/{}".format(user.pfp.file) if user.pfp else None,
    }


class ProfileRequestHandler(BaseRequestHandler):
    def flash_answer(self, answer: ProfileAnswer) -> None:
        self.flash("success" if answer.success else "error", self.lang(answer.message))

    def sign_out_missing_user(self) -> None:
        """The user of the session is gone, end the session and go to sign in."""
        self.clear_cookie(SESSION_COOKIE)
        self.flash("error", self.lang("PROFILE_USER_NOT_FOUND"))
        self.redirect_to("/login")


class ProfileHandler(ProfileRequestHandler):
    @authenticated
    async def get(self):
        user = await self.profile_manager.ensure_pfp(self.current_user.identity)
        if not user:
            return self.sign_out_missing_user()
        self.write_view(
            {
                "title": self.lang("PROFILE_TITLE", user.identity),
                "user": profile_view(user),
            }
        )


class ProfileInfoHandler(ProfileRequestHandler):
    @authenticated
    async def post(self):
        form = {
            k: self.get_body_argument(k) for k in self.request.body_arguments.keys()
        }
        answer = await self.profile_manager.update_info(self.current_user, form)
        self.flash_answer(answer)
        self.redirect_to("/profile")


class ProfilePasswordHandler(ProfileRequestHandler):
    @authenticated
    async def get(self):
        user = await self.profile_manager.ensure_pfp(self.current_user.identity)
        if not user:
            return self.sign_out_missing_user()
        self.write_view(
            {
                "title": self.lang("PROFILE_PASSWORD_TITLE", user.identity),
                "user": profile_view(user),
            }
        )

    @authenticated
    async def post(self):
        answer = await self.profile_manager.change_password(
            self.current_user,
            self.get_body_argument("oldPassword", ""),
            self.get_body_argument("newPassword", ""),
        )
        self.flash_answer(answer)
        self.redirect_to("/profile/password")


class ProfilePictureUploadHandler(ProfileRequestHandler):
    """Upload the profile picture, as the multipart field "profilePicture"."""

    @authenticated
    async def post(self):
        files = self.request.files.get("profilePicture")
        upload = None
        if files:
            upload = UploadedFile(
                filename=files[0].filename,
                content_type=files[0].content_type,
                body=files[0].body,
            )
        answer = await self.profile_manager.upload_pfp(self.current_user, upload)
        self.flash_answer(answer)
        self.redirect_to("/profile")
