"""`WishlistManager` and `Wishlist`: load an owner's wishlist, change it, save it back.
"""
import logging
from typing import List, Optional
from uuid import uuid4

from ..usrsys.storage import UserRecordStorage
from ..usrsys.usr import UserRecord, WishlistItem
from ..utils.storage import StorageError
from .errors import AlreadyPledged, ItemNotFound, OwnerNotFound, StoreUnavailable


class Wishlist(object):
    """The wishlist of one owner, loaded from the owner's document.

    Changes on the items stay in memory until `Wishlist.save`, which writes the whole owner document back.

    Related:

    - `wishboat.usrsys.storage.UserRecordStorage.put`
    """

    __logger = logging.getLogger("wishboat.wishlist.Wishlist")

    def __init__(
        self, owner_record: UserRecord, user_record_storage: UserRecordStorage
    ) -> None:
        self.owner_record = owner_record
        self.user_record_storage = user_record_storage
        super().__init__()

    @property
    def owner(self) -> str:
        """The owner identity."""
        return self.owner_record.identity

    @property
    def items(self) -> List[WishlistItem]:
        return self.owner_record.wishlist

    def find(self, item_id: str) -> Optional[WishlistItem]:
        """Return the item of `item_id`, `None` if not found. Ids are compared as strings."""
        item_id = str(item_id)
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def get(self, item_id: str) -> WishlistItem:
        """Return the item of `item_id`. Raise `ItemNotFound` if not found."""
        item = self.find(item_id)
        if item is None:
            raise ItemNotFound(item_id)
        return item

    def add(self, item: WishlistItem) -> WishlistItem:
        """Append `item` to the wishlist. An id is generated when `item.id` is empty.

        Raise `ValueError` if the id is used by another item.
        """
        if not item.id:
            item.id = uuid4().hex
        elif self.find(item.id):
            raise ValueError(
                "item {!r} exists in {}'s wishlist".format(item.id, self.owner)
            )
        self.items.append(item)
        return item

    def pledge(self, item_id: str, user_id: str) -> WishlistItem:
        """Mark the item pledged by `user_id`.

        Pledging again an item pledged by `user_id` changes nothing. Raise `AlreadyPledged` if another user pledged it.
        """
        item = self.get(item_id)
        if item.pledged_by and item.pledged_by != user_id:
            raise AlreadyPledged(item_id)
        item.pledged_by = user_id
        return item

    async def save(self) -> None:
        """Write the owner document, with all the changes, back in one replace."""
        try:
            await self.user_record_storage.put(self.owner_record)
        except StorageError as e:
            self.__logger.error("could not save %s's wishlist: %s", self.owner, e)
            raise StoreUnavailable(str(e)) from e


class WishlistManager(object):
    """Give out `Wishlist` by owner identity. Every call reads the owner document again, nothing is cached."""

    def __init__(self, user_record_storage: UserRecordStorage) -> None:
        self.user_record_storage = user_record_storage
        super().__init__()

    async def get(self, owner_id: str) -> Wishlist:
        """Load the wishlist of `owner_id`.
        Raise `OwnerNotFound` if there is no such user, `StoreUnavailable` if the store failed."""
        try:
            record = await self.user_record_storage.get(owner_id)
        except StorageError as e:
            raise StoreUnavailable(str(e)) from e
        if not record:
            raise OwnerNotFound(owner_id)
        return Wishlist(record, self.user_record_storage)
