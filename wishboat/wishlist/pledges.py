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
"""Pledges of one user across all wishlists (`PledgeAggregator`), and the purchased flag of pledged items (`PledgeMutator`).
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

from ..usrsys.storage import UserRecordStorage
from ..usrsys.usr import WishlistItem
from ..utils.storage import StorageError
from .errors import NotPledgeOwner, PledgeError, StoreUnavailable
from .manager import WishlistManager


@dataclass
class Pledge(object):
    """An item pledged by a user, in the shape shown to the user.

    Attributes:
        owner: `str`. The owner of the wishlist containing the item.
        id: `Optional[str]`. The item id.
        name: `str`. The item name, or the url if the item has no name.
        price, image, url, note: As `wishboat.usrsys.usr.WishlistItem`.
        added_by: `Optional[str]`.
        purchased: `bool`.
    """

    owner: str
    id: Optional[str]
    name: str
    price: Optional[str]
    image: Optional[str]
    url: Optional[str]
    note: Optional[str]
    added_by: Optional[str]
    purchased: bool

    @classmethod
    def of(cls, owner: str, item: WishlistItem) -> "Pledge":
        return cls(
            owner=owner,
            id=item.id,
            name=item.display_name,
            price=item.price,
            image=item.image,
            url=item.url,
            note=item.note,
            added_by=item.added_by,
            purchased=bool(item.purchased),
        )


@dataclass
class PledgeGroup(object):
    """Pledges on the wishlist of one `owner`, in the wishlist order."""

    owner: str
    pledges: List[Pledge]


def owner_order(owner: str):
    """Sort key of owners: case-insensitive first, then lowercase before uppercase so the order is total."""
    return (owner.casefold(), owner.swapcase())


class PledgeAggregator(Protocol):
    """A protocol type for finding the pledges of a user.

    The result is grouped by owner, groups sorted by `owner_order`, pledges in the wishlist order.
    Raise `StoreUnavailable` when the wishlists could not be read, no partial result is returned.
    """

    async def pledges_of(self, user_id: str) -> List[PledgeGroup]:
        ...


class ScanPledgeAggregator(PledgeAggregator):
    """Find pledges by reading every user document.

    ..note:: Each call reads all the documents. An implementation of `PledgeAggregator` on an index of `pledgedBy` can replace it when it gets slow.
    """

    __logger = logging.getLogger("wishboat.wishlist.ScanPledgeAggregator")

    def __init__(self, user_record_storage: UserRecordStorage) -> None:
        self.user_record_storage = user_record_storage
        super().__init__()

    async def pledges_of(self, user_id: str) -> List[PledgeGroup]:
        try:
            records = await self.user_record_storage.all_docs()
        except StorageError as e:
            self.__logger.error("could not read wishlists: %s", e)
            raise StoreUnavailable(str(e)) from e
        groups: Dict[str, List[Pledge]] = {}
        for record in records:
            for item in record.wishlist:
                if item.pledged_by is not None and item.pledged_by == user_id:
                    groups.setdefault(record.identity, []).append(
                        Pledge.of(record.identity, item)
                    )
        return [
            PledgeGroup(owner=owner, pledges=groups[owner])
            for owner in sorted(groups, key=owner_order)
        ]


@dataclass
class PledgeAnswer(object):
    """The answer of toggling the purchased flag.

    Attributes:
        success: `bool`.
        purchased: `Optional[bool]`. The flag after toggling, `None` when failed.
        error: `Optional[PledgeError]`. Why it failed.
    """

    success: bool
    purchased: Optional[bool] = None
    error: Optional[PledgeError] = None


class PledgeMutator(object):
    """Toggle the purchased flag of pledged items. Only the user who pledged an item can do it."""

    __logger = logging.getLogger("wishboat.wishlist.PledgeMutator")

    def __init__(self, wishlist_manager: WishlistManager) -> None:
        self.wishlist_manager = wishlist_manager
        super().__init__()

    async def toggle_purchased(
        self, owner_id: str, item_id: str, user_id: str
    ) -> PledgeAnswer:
        """Toggle the purchased flag of item `item_id` in `owner_id`'s wishlist, on behalf of `user_id`.

        The answer fails with `OwnerNotFound`, `ItemNotFound`, `NotPledgeOwner` or `StoreUnavailable`.
        Nothing is written unless it succeeds, and only the item's purchased flag is changed.
        """
        try:
            wishlist = await self.wishlist_manager.get(owner_id)
            item = wishlist.get(item_id)
            if item.pledged_by is None or item.pledged_by != user_id:
                raise NotPledgeOwner(item_id)
            item.purchased = not item.purchased
            await wishlist.save()
        except NotPledgeOwner as e:
            self.__logger.warning(
                "%s tried to toggle item %s of %s, pledged by someone else",
                user_id,
                item_id,
                owner_id,
            )
            return PledgeAnswer(success=False, error=e)
        except PledgeError as e:
            return PledgeAnswer(success=False, error=e)
        self.__logger.info(
            "%s marked item %s of %s %s",
            user_id,
            item_id,
            owner_id,
            "purchased" if item.purchased else "not purchased",
        )
        return PledgeAnswer(success=True, purchased=item.purchased)
