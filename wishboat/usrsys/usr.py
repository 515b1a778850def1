"""This module contains definitions about users, their profile pictures and their wishlists.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

INFO_KEYS = [
    "shoeSize",
    "ringSize",
    "dressSize",
    "sweaterSize",
    "shirtSize",
    "pantsSize",
    "coatSize",
    "hatSize",
    "phoneModel",
]
"""The keys allowed in `UserRecord.info`. Anything else submitted is dropped."""


@dataclass
class ProfilePicture(object):
    """A reference to a profile picture.

    Attributes:
        file: `str`. The file name in the upload directory.
    """

    file: str


@dataclass
class WishlistItem(object):
    """One item on a wishlist. The item belongs to the wishlist (the user) containing it.

    Attributes:
        id: `Optional[str]`. Unique in the wishlist containing it. `None` for an item stored without id, it can not be found by id.
        name: `Optional[str]`. Falls back to `url` when shown.
        price: `Optional[str]`.
        image: `Optional[str]`. The image url.
        url: `Optional[str]`. Where to buy.
        note: `Optional[str]`.
        added_by: `Optional[str]`. The user id of whoever added the item.
        pledged_by: `Optional[str]`. The user id of whoever promised to buy the item.
        purchased: `bool`. Only the user in `pledged_by` can change it.
    """

    id: Optional[str]
    name: Optional[str] = None
    price: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None
    note: Optional[str] = None
    added_by: Optional[str] = None
    pledged_by: Optional[str] = None
    purchased: bool = False

    @property
    def display_name(self) -> str:
        return self.name or self.url or ""

    def to_doc(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "url": self.url,
            "note": self.note,
            "addedBy": self.added_by,
            "pledgedBy": self.pledged_by,
            "purchased": self.purchased,
        }

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "WishlistItem":
        return cls(
            id=None if doc.get("id") is None else str(doc["id"]),
            name=doc.get("name"),
            price=doc.get("price"),
            image=doc.get("image"),
            url=doc.get("url"),
            note=doc.get("note"),
            added_by=doc.get("addedBy"),
            pledged_by=doc.get("pledgedBy"),
            purchased=bool(doc.get("purchased")),
        )


@dataclass
class UserRecord(object):
    """Infomation about user. One user is one document, the wishlist is embedded.

    Attributes:
        identity: `str`. Unique identity choose by user, also the login name.
        password_b64hash: `str`. Hashed password. See `wishboat.utils.asec.password_hashing`.
        info: `Dict[str, str]`. Sizing infomation, the keys are in `INFO_KEYS`.
        pfp: `Optional[ProfilePicture]`.
        wishlist: `List[WishlistItem]`. In the order the items were added.
    """

    identity: str
    password_b64hash: str
    info: Dict[str, str] = field(default_factory=dict)
    pfp: Optional[ProfilePicture] = None
    wishlist: List[WishlistItem] = field(default_factory=list)
