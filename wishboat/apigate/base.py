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
"""`BaseRequestHandler`: the tools used in tornado handlers.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from tornado.web import RequestHandler

from ..lang import Lang
from ..storagehub import StorageHub
from ..usrsys.auth import AuthProvider
from ..usrsys.profile import ProfileManager
from ..usrsys.usr import UserRecord
from ..utils.storage import StorageError
from ..wishlist.errors import StoreUnavailable
from ..wishlist.pledges import PledgeAggregator, PledgeMutator

SESSION_COOKIE = "wishboat_session"
"""The signed cookie keeping the session token."""

FLASH_COOKIE = "wishboat_flash"
"""The signed cookie keeping flash messages until the next view."""


class BaseRequestHandler(RequestHandler):
    """The tools used while handling requests.

    The components come from the application settings, see `wishboat.apigate.HTTPAPIGateway`.
    `current_user` is the `UserRecord` of the session, or `None`.

    Actions answer "303 See Other" with `BaseRequestHandler.redirect_to`, leaving messages for the next view with `BaseRequestHandler.flash`.
    Views answer JSON with `BaseRequestHandler.write_view`, which takes the messages out.
    A failing store sends the client back to the profile, see `BaseRequestHandler.write_error`.
    """

    __logger = logging.getLogger("wishboat.apigate.BaseRequestHandler")

    current_user: Optional[UserRecord]

    def initialize(self) -> None:
        settings = self.application.settings
        self._storage_hub: StorageHub = settings["storage_hub"]
        self._auth_provider: AuthProvider = settings["auth_provider"]
        self._profile_manager: ProfileManager = settings["profile_manager"]
        self._pledge_aggregator: PledgeAggregator = settings["pledge_aggregator"]
        self._pledge_mutator: PledgeMutator = settings["pledge_mutator"]
        self._lang: Lang = settings["lang"]
        self._flashes: Optional[List[Dict[str, str]]] = None

    async def prepare(self) -> None:
        token = self.get_signed_cookie(SESSION_COOKIE)
        if token:
            self.current_user = await self.auth_provider.user_of_token(
                token.decode("utf-8")
            )

    @property
    def storage_hub(self) -> StorageHub:
        """Storage hub of the instance."""
        return self._storage_hub

    @property
    def auth_provider(self) -> AuthProvider:
        return self._auth_provider

    @property
    def profile_manager(self) -> ProfileManager:
        return self._profile_manager

    @property
    def pledge_aggregator(self) -> PledgeAggregator:
        return self._pledge_aggregator

    @property
    def pledge_mutator(self) -> PledgeMutator:
        return self._pledge_mutator

    @property
    def lang(self) -> Lang:
        return self._lang

    def _pending_flashes(self) -> List[Dict[str, str]]:
        if self._flashes is None:
            self._flashes = []
            saved = self.get_signed_cookie(FLASH_COOKIE)
            if saved:
                self._flashes.extend(json.loads(saved))
        return self._flashes

    def flash(self, category: str, message: str) -> None:
        """Leave `message` for the next view. `category` is "success" or "error". A message already left is not repeated."""
        flashes = self._pending_flashes()
        entry = {"category": category, "message": message}
        if entry in flashes:
            return
        flashes.append(entry)
        self.set_signed_cookie(FLASH_COOKIE, json.dumps(flashes))

    def pop_flashes(self) -> List[Dict[str, str]]:
        """Take all the messages left for this view."""
        flashes = self._pending_flashes()
        self._flashes = []
        if flashes:
            self.clear_cookie(FLASH_COOKIE)
        return flashes

    def redirect_to(self, url: str) -> None:
        self.redirect(url, status=303)

    def write_view(self, view: Dict[str, Any]) -> None:
        """Answer the `view` in JSON, with the flash messages under "flashes"."""
        view = dict(view)
        view["flashes"] = self.pop_flashes()
        self.set_header("Content-Type", "application/json; charset=UTF-8")
        self.finish(json.dumps(view))

    def log_exception(self, typ, value, tb) -> None:
        if isinstance(value, (StorageError, StoreUnavailable)):
            self.__logger.warning(
                "store unavailable while serving %s: %s", self.request.uri, value
            )
        else:
            super().log_exception(typ, value, tb)

    def write_error(self, status_code: int, **kwargs: Any) -> None:
        """Send the client back to the profile with a message when the store failed.

        The profile itself answers "503 Service Unavailable" with the message, it has nowhere to go back.
        """
        error = kwargs["exc_info"][1] if "exc_info" in kwargs else None
        if isinstance(error, StorageError):
            error = StoreUnavailable(str(error))
        if not isinstance(error, StoreUnavailable):
            return super().write_error(status_code, **kwargs)
        self.flash("error", self.lang(error.message_key, *error.message_args))
        if self.request.path == "/profile":
            self.set_status(503)
            self.write_view({"title": self.lang("NAVBAR_PROFILE"), "user": None})
        else:
            self.redirect_to("/profile")
