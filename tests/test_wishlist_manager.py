import pytest
from wishboat.storagehub import StorageHub
from wishboat.usrsys.usr import WishlistItem
from wishboat.wishlist import AlreadyPledged, ItemNotFound, OwnerNotFound

from .utils import item, seed


class TestWishlistManager:
    async def test_get_unknown_owner_raises(self, storage_hub: StorageHub):
        with pytest.raises(OwnerNotFound):
            await storage_hub.wishlist_manager.get("nobody")

    async def test_item_ids_are_compared_as_strings(self, storage_hub: StorageHub):
        await seed(storage_hub.user_records, "alice", item("42", name="Kettle"))
        wishlist = await storage_hub.wishlist_manager.get("alice")
        assert wishlist.get(42).name == "Kettle"  # type: ignore
        with pytest.raises(ItemNotFound):
            wishlist.get("43")

    async def test_added_items_are_saved_in_order(self, storage_hub: StorageHub):
        await seed(storage_hub.user_records, "alice")
        wishlist = await storage_hub.wishlist_manager.get("alice")
        wishlist.add(WishlistItem(id="", name="Kettle", added_by="alice"))
        wishlist.add(WishlistItem(id="lamp", name="Lamp", added_by="bob"))
        await wishlist.save()

        reloaded = await storage_hub.wishlist_manager.get("alice")
        assert [i.name for i in reloaded.items] == ["Kettle", "Lamp"]
        assert reloaded.items[0].id
        assert reloaded.items[1].added_by == "bob"

    async def test_add_refuses_duplicated_ids(self, storage_hub: StorageHub):
        await seed(storage_hub.user_records, "alice", item("1"))
        wishlist = await storage_hub.wishlist_manager.get("alice")
        with pytest.raises(ValueError):
            wishlist.add(item("1"))

    async def test_pledge_cannot_be_taken_over(self, storage_hub: StorageHub):
        await seed(storage_hub.user_records, "alice", item("1"))
        wishlist = await storage_hub.wishlist_manager.get("alice")
        wishlist.pledge("1", "bob")
        wishlist.pledge("1", "bob")
        with pytest.raises(AlreadyPledged):
            wishlist.pledge("1", "eve")
        await wishlist.save()

        reloaded = await storage_hub.wishlist_manager.get("alice")
        assert reloaded.get("1").pledged_by == "bob"
        assert reloaded.get("1").purchased is False

    async def test_changes_are_not_saved_until_save(self, storage_hub: StorageHub):
        await seed(storage_hub.user_records, "alice", item("1"))
        wishlist = await storage_hub.wishlist_manager.get("alice")
        wishlist.pledge("1", "bob")

        reloaded = await storage_hub.wishlist_manager.get("alice")
        assert reloaded.get("1").pledged_by is None
