"""Errors about wishlists and pledges.

Each error has a `message_key`, the key of the message shown to users (see `wishboat.lang`), and `args` to format the message with.
"""
from typing import Tuple


class PledgeError(Exception):
    message_key = "PLEDGE_ERROR"

    @property
    def message_args(self) -> Tuple[str, ...]:
        return tuple(str(a) for a in self.args)


class StoreUnavailable(PledgeError):
    """The document store failed to read or write."""

    message_key = "PLEDGE_STORE_UNAVAILABLE"


class OwnerNotFound(PledgeError):
    """No wishlist for the owner id."""

    message_key = "PLEDGE_OWNER_NOT_FOUND"


class ItemNotFound(PledgeError):
    """No item of the id in the wishlist."""

    message_key = "PLEDGE_ITEM_NOT_FOUND"


class NotPledgeOwner(PledgeError):
    """The acting user did not pledge the item."""

    message_key = "PLEDGE_NOT_PLEDGE_OWNER"


class AlreadyPledged(PledgeError):
    """Another user already pledged the item."""

    message_key = "PLEDGE_ALREADY_PLEDGED"
