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
from typing import Optional

import pytest
from wishboat import Wishboat
from wishboat.config import Config
from wishboat.storagehub import StorageHub
from wishboat.usrsys.storage import UserRecordStorage
from wishboat.usrsys.usr import UserRecord, WishlistItem
from wishboat.utils.storage import MEMORY_DATABASE, Database


def item(
    id: str,
    name: Optional[str] = None,
    pledged_by: Optional[str] = None,
    purchased: bool = False,
    **kwargs
) -> WishlistItem:
    return WishlistItem(
        id=id, name=name, pledged_by=pledged_by, purchased=purchased, **kwargs
    )


async def seed(
    user_records: UserRecordStorage, owner: str, *items: WishlistItem
) -> UserRecord:
    """Put a user owning `items`. The user cannot sign in, the password hash is empty."""
    return await user_records.put(
        UserRecord(identity=owner, password_b64hash="", wishlist=list(items))
    )


@pytest.fixture
def storage_hub():
    hub = StorageHub(Database(MEMORY_DATABASE))
    try:
        yield hub
    finally:
        hub.close()


@pytest.fixture
async def wishboat(tmp_path):
    instance = Wishboat(
        Config(
            database_path=MEMORY_DATABASE,
            upload_dir=str(tmp_path / "uploads"),
            pfp_upload_max_size=1,
            cookie_secret="wishboat-test-secret",
        )
    )
    try:
        await instance.start()
        yield instance
    finally:
        await instance.stop()
