"""This module contains all storage classes for the user system.
"""
from typing import Any, Dict, List, Optional

from ..utils.asec import password_check, password_hashing
from ..utils.storage import (
    CommonStorage,
    CommonStorageAdapter,
    CommonStorageRecordWrapper,
    DataclassCommonStorageAdapter,
)
from .tk import TokenRecord
from .usr import ProfilePicture, UserRecord, WishlistItem


class UserRecordAdapter(CommonStorageAdapter[UserRecord]):
    """Convert `UserRecord` to the user document and back.

    The document keeps the wishlist items under their document field names (`addedBy`, `pledgedBy`).
    A document without `wishlist` has an empty wishlist.
    """

    def record2dict(self, record: UserRecord) -> Dict[str, Any]:
        return {
            "identity": record.identity,
            "password_b64hash": record.password_b64hash,
            "info": dict(record.info),
            "pfp": {"file": record.pfp.file} if record.pfp else None,
            "wishlist": [item.to_doc() for item in record.wishlist],
        }

    def dict2record(self, d: Dict[str, Any]) -> UserRecord:
        pfp = d.get("pfp")
        return UserRecord(
            identity=d["identity"],
            password_b64hash=d.get("password_b64hash", ""),
            info=dict(d.get("info") or {}),
            pfp=ProfilePicture(file=pfp["file"]) if pfp else None,
            wishlist=[WishlistItem.from_doc(i) for i in (d.get("wishlist") or [])],
        )


class UserRecordStorage(CommonStorageRecordWrapper[UserRecord]):
    """
    A `wishboat.utils.storage.RecordStorage` for `wishboat.usrsys.usr.UserRecord`.

    Besides the queries, it is the document store of users: `get`, `put` and `all_docs`.
    """

    def __init__(self, common_storage: CommonStorage) -> None:
        super().__init__(common_storage, UserRecordAdapter())

    async def get(self, user_id: str) -> Optional[UserRecord]:
        """Get the user document of `user_id`, `None` if not found."""
        return await self.find_one({"identity": user_id})

    async def put(self, record: UserRecord) -> UserRecord:
        """Insert or replace the whole document of `record.identity`."""
        result = await self.update_one(
            {"identity": record.identity}, record, upsert=True
        )
        assert result
        return result

    async def all_docs(self) -> List[UserRecord]:
        """All user documents."""
        return [rec async for rec in self.find({})]

    async def check_user_password(self, user_id: str, password: str) -> bool:
        """Check the user password.
        ..note:: The `password` is the password in plaintext.
        """
        doc = await self.get(user_id)
        if not doc:
            return False
        return await password_check(password, doc.password_b64hash)

    async def create_new_user(self, user_id: str, password: str) -> UserRecord:
        """Create a new user with an empty wishlist, then save it.

        Raises `ValueError` if `user_id` is taken.
        """
        if await self.get(user_id):
            raise ValueError("user {!r} exists".format(user_id))
        rec = UserRecord(
            identity=user_id,
            password_b64hash=await password_hashing(password),
        )
        await self.store(rec)
        return rec


class TokenRecordStorage(CommonStorageRecordWrapper[TokenRecord]):
    """
    A `wishboat.utils.storage.RecordStorage` for `wishboat.usrsys.tk.TokenRecord`.
    """

    def __init__(self, common_storage: CommonStorage) -> None:
        super().__init__(common_storage, DataclassCommonStorageAdapter(TokenRecord))

    async def create_token(
        self, user_id: str, *, expiration_offest_seconds: Optional[int] = None
    ) -> TokenRecord:
        """Create a new token."""
        new_record = TokenRecord.new(
            user_id, expiration_offest_seconds=expiration_offest_seconds
        )
        await self.store(new_record)
        return new_record

    async def find_token(self, token: str) -> Optional[TokenRecord]:
        """Find a `wishboat.usrsys.tk.TokenRecord` with `token` as the token string."""
        return await self.find_one({"token": token})

    async def remove_expired(self, user_id: str) -> int:
        """Remove the expired tokens of `user_id`. Return the number of tokens removed."""
        count = 0
        async for record in self.find({"user_id": user_id}):
            if not record.is_avaliable():
                count += await self.remove({"token": record.token})
        return count
