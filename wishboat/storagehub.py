"""This module contains `StorageHub`, the storage centre of wishboat.
"""
from .usrsys.storage import TokenRecordStorage, UserRecordStorage
from .utils.storage import CommonStorage, Database, SQLStorage
from .wishlist.manager import WishlistManager


class StorageHub(object):
    """The storage centre for wishboat. This class stores storages keep wishboat storing data.

    ..note:: Typically you use the one from `wishboat.Wishboat`.

    Related:

    - `wishboat.utils.storage` The abstract storage layer of wishboat.
    """

    def __init__(self, database: Database) -> None:
        self.database = database
        """The database instance.
        .. important:: Don't depends on this property, use the storages."""
        super().__init__()

    def get_common_storage(self, name: str) -> CommonStorage:
        """Get a common storage with `name`."""
        return SQLStorage(self.database, name)

    @property
    def user_records(self) -> UserRecordStorage:
        """
        Related:

        - `wishboat.usrsys.usr.UserRecord` The object being stored.
        """
        return UserRecordStorage(self.get_common_storage("users"))

    @property
    def token_records(self) -> TokenRecordStorage:
        """
        Related:

        - `wishboat.usrsys.tk.TokenRecord` The object being stored.
        """
        return TokenRecordStorage(self.get_common_storage("tokens"))

    @property
    def wishlist_manager(self) -> WishlistManager:
        return WishlistManager(self.user_records)

    def close(self) -> None:
        self.database.close()
