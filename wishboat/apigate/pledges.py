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
"""Handlers of the pledges page: the pledges of the user, and the purchased flag of them.
"""
import dataclasses

from tornado.web import authenticated

from ..wishlist.errors import PledgeError
from .base import BaseRequestHandler


class PledgeRequestHandler(BaseRequestHandler):
    def flash_error(self, error: PledgeError) -> None:
        self.flash("error", self.lang(error.message_key, *error.message_args))


class PledgesHandler(PledgeRequestHandler):
    """List the pledges made by the user, grouped by the owner of the wishlists.

    The client is sent back to the profile if the wishlists could not be read, see `BaseRequestHandler.write_error`.
    """

    @authenticated
    async def get(self):
        groups = await self.pledge_aggregator.pledges_of(self.current_user.identity)
        self.write_view(
            {
                "title": self.lang("NAVBAR_PLEDGES"),
                "pledgesByOwner": [dataclasses.asdict(g) for g in groups],
            }
        )


class PledgePurchasedHandler(PledgeRequestHandler):
    """Toggle the purchased flag of an item pledged by the user, then go back to the pledges."""

    @authenticated
    async def post(self, owner: str, item_id: str):
        answer = await self.pledge_mutator.toggle_purchased(
            owner, item_id, self.current_user.identity
        )
        if answer.success:
            self.flash(
                "success",
                self.lang(
                    "PLEDGE_MARKED_PURCHASED"
                    if answer.purchased
                    else "PLEDGE_MARKED_NOT_PURCHASED"
                ),
            )
        else:
            assert answer.error
            self.flash_error(answer.error)
        self.redirect_to("/profile/pledges")
