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
import itertools

import pytest
from wishboat.storagehub import StorageHub
from wishboat.utils.storage import StorageError
from wishboat.wishlist import (
    ItemNotFound,
    NotPledgeOwner,
    OwnerNotFound,
    Pledge,
    PledgeGroup,
    PledgeMutator,
    ScanPledgeAggregator,
    StoreUnavailable,
    WishlistManager,
)

from .utils import item, seed


class BrokenUserRecords(object):
    """Stands for a user record storage whose backend is down."""

    async def all_docs(self):
        raise StorageError("database is locked")

    async def get(self, user_id):
        raise StorageError("database is locked")


class TestScanPledgeAggregator:
    async def test_pledge_on_another_wishlist_is_listed(self, storage_hub: StorageHub):
        await seed(
            storage_hub.user_records,
            "alice",
            item("42", name="Kettle", pledged_by="bob", price="30", added_by="alice"),
        )
        groups = await ScanPledgeAggregator(storage_hub.user_records).pledges_of("bob")
        assert groups == [
            PledgeGroup(
                owner="alice",
                pledges=[
                    Pledge(
                        owner="alice",
                        id="42",
                        name="Kettle",
                        price="30",
                        image=None,
                        url=None,
                        note=None,
                        added_by="alice",
                        purchased=False,
                    )
                ],
            )
        ]

    async def test_only_pledges_of_the_user_are_listed(self, storage_hub: StorageHub):
        await seed(
            storage_hub.user_records,
            "alice",
            item("1", pledged_by="bob"),
            item("2", pledged_by="eve"),
            item("3"),
            item("4", pledged_by="bob"),
        )
        await seed(storage_hub.user_records, "carol", item("5", pledged_by="eve"))
        groups = await ScanPledgeAggregator(storage_hub.user_records).pledges_of("bob")
        assert [(p.owner, p.id) for g in groups for p in g.pledges] == [
            ("alice", "1"),
            ("alice", "4"),
        ]

    async def test_items_without_pledge_are_never_listed(self, storage_hub: StorageHub):
        await seed(storage_hub.user_records, "alice", item("1"), item("2"))
        aggregator = ScanPledgeAggregator(storage_hub.user_records)
        assert await aggregator.pledges_of("bob") == []
        assert await aggregator.pledges_of("alice") == []

    async def test_groups_are_sorted_by_owner_whatever_the_scan_order(
        self, storage_hub: StorageHub
    ):
        owners = ["carol", "alice", "dave"]
        for order in itertools.permutations(owners):
            hub_records = storage_hub.user_records
            await hub_records.remove({})
            for owner in order:
                await seed(hub_records, owner, item("1", pledged_by="bob"))
            groups = await ScanPledgeAggregator(hub_records).pledges_of("bob")
            assert [g.owner for g in groups] == ["alice", "carol", "dave"]

    async def test_owner_order_ignores_letter_case_first(self, storage_hub: StorageHub):
        for owner in ["bob", "Carol", "alice"]:
            await seed(storage_hub.user_records, owner, item("1", pledged_by="eve"))
        groups = await ScanPledgeAggregator(storage_hub.user_records).pledges_of("eve")
        assert [g.owner for g in groups] == ["alice", "bob", "Carol"]

    async def test_owners_differing_in_case_put_lowercase_first(
        self, storage_hub: StorageHub
    ):
        for owner in ["A", "b", "a"]:
            await seed(storage_hub.user_records, owner, item("1", pledged_by="eve"))
        groups = await ScanPledgeAggregator(storage_hub.user_records).pledges_of("eve")
        assert [g.owner for g in groups] == ["a", "A", "b"]

    async def test_items_stored_without_id_are_still_listed(
        self, storage_hub: StorageHub
    ):
        await storage_hub.get_common_storage("users").store(
            {
                "identity": "carol",
                "password_b64hash": "",
                "wishlist": [{"name": "Legacy", "pledgedBy": "bob"}, {"name": "Old"}],
            }
        )
        await seed(storage_hub.user_records, "alice", item("1", pledged_by="bob"))
        groups = await ScanPledgeAggregator(storage_hub.user_records).pledges_of("bob")
        assert [g.owner for g in groups] == ["alice", "carol"]
        assert [(p.id, p.name) for p in groups[1].pledges] == [(None, "Legacy")]

    async def test_pledges_keep_the_wishlist_order(self, storage_hub: StorageHub):
        await seed(
            storage_hub.user_records,
            "alice",
            item("z", pledged_by="bob"),
            item("a", pledged_by="bob"),
            item("m", pledged_by="bob"),
        )
        (group,) = await ScanPledgeAggregator(storage_hub.user_records).pledges_of(
            "bob"
        )
        assert [p.id for p in group.pledges] == ["z", "a", "m"]

    async def test_name_falls_back_to_url(self, storage_hub: StorageHub):
        await seed(
            storage_hub.user_records,
            "alice",
            item("1", url="https://shop.example/kettle", pledged_by="bob"),
            item("2", pledged_by="bob"),
        )
        (group,) = await ScanPledgeAggregator(storage_hub.user_records).pledges_of(
            "bob"
        )
        assert [p.name for p in group.pledges] == ["https://shop.example/kettle", ""]

    async def test_document_without_wishlist_has_no_pledges(
        self, storage_hub: StorageHub
    ):
        await storage_hub.get_common_storage("users").store(
            {"identity": "dave", "password_b64hash": ""}
        )
        await seed(storage_hub.user_records, "alice", item("1", pledged_by="bob"))
        groups = await ScanPledgeAggregator(storage_hub.user_records).pledges_of("bob")
        assert [g.owner for g in groups] == ["alice"]

    async def test_purchased_is_a_strict_boolean(self, storage_hub: StorageHub):
        await storage_hub.get_common_storage("users").store(
            {
                "identity": "alice",
                "password_b64hash": "",
                "wishlist": [{"id": 7, "pledgedBy": "bob", "purchased": 1}],
            }
        )
        (group,) = await ScanPledgeAggregator(storage_hub.user_records).pledges_of(
            "bob"
        )
        assert group.pledges[0].purchased is True
        assert group.pledges[0].id == "7"

    async def test_pledges_of_deleted_users_stay_on_wishlists(
        self, storage_hub: StorageHub
    ):
        await seed(storage_hub.user_records, "alice", item("1", pledged_by="ghost"))
        groups = await ScanPledgeAggregator(storage_hub.user_records).pledges_of(
            "ghost"
        )
        assert [g.owner for g in groups] == ["alice"]

    async def test_store_failure_raises_store_unavailable(self):
        aggregator = ScanPledgeAggregator(BrokenUserRecords())  # type: ignore
        with pytest.raises(StoreUnavailable):
            await aggregator.pledges_of("bob")


@pytest.fixture
def mutator(storage_hub: StorageHub) -> PledgeMutator:
    return PledgeMutator(storage_hub.wishlist_manager)


class TestPledgeMutator:
    async def test_pledger_can_mark_item_purchased(
        self, storage_hub: StorageHub, mutator: PledgeMutator
    ):
        await seed(storage_hub.user_records, "alice", item("42", pledged_by="bob"))
        answer = await mutator.toggle_purchased("alice", "42", "bob")
        assert answer.success
        assert answer.purchased is True
        wishlist = await storage_hub.wishlist_manager.get("alice")
        assert wishlist.get("42").purchased is True

    async def test_other_users_cannot_toggle(
        self, storage_hub: StorageHub, mutator: PledgeMutator
    ):
        await seed(storage_hub.user_records, "alice", item("42", pledged_by="bob"))
        for user in ["eve", "alice"]:
            answer = await mutator.toggle_purchased("alice", "42", user)
            assert not answer.success
            assert answer.purchased is None
            assert isinstance(answer.error, NotPledgeOwner)
        wishlist = await storage_hub.wishlist_manager.get("alice")
        assert wishlist.get("42").purchased is False
        assert wishlist.get("42").pledged_by == "bob"

    async def test_unpledged_items_cannot_be_toggled(
        self, storage_hub: StorageHub, mutator: PledgeMutator
    ):
        await seed(storage_hub.user_records, "alice", item("42"))
        answer = await mutator.toggle_purchased("alice", "42", "bob")
        assert isinstance(answer.error, NotPledgeOwner)
        wishlist = await storage_hub.wishlist_manager.get("alice")
        assert wishlist.get("42").purchased is False

    async def test_missing_item(self, storage_hub: StorageHub, mutator: PledgeMutator):
        await seed(storage_hub.user_records, "alice", item("42", pledged_by="bob"))
        answer = await mutator.toggle_purchased("alice", "999", "bob")
        assert not answer.success
        assert isinstance(answer.error, ItemNotFound)

    async def test_missing_owner(self, mutator: PledgeMutator):
        answer = await mutator.toggle_purchased("nobody", "42", "bob")
        assert not answer.success
        assert isinstance(answer.error, OwnerNotFound)

    async def test_store_failure_is_answered(self):
        mutator = PledgeMutator(WishlistManager(BrokenUserRecords()))  # type: ignore
        answer = await mutator.toggle_purchased("alice", "42", "bob")
        assert not answer.success
        assert isinstance(answer.error, StoreUnavailable)

    async def test_toggling_twice_gives_the_original_value(
        self, storage_hub: StorageHub, mutator: PledgeMutator
    ):
        await seed(
            storage_hub.user_records,
            "alice",
            item("1", pledged_by="bob", purchased=True),
        )
        first = await mutator.toggle_purchased("alice", "1", "bob")
        second = await mutator.toggle_purchased("alice", "1", "bob")
        assert (first.purchased, second.purchased) == (False, True)
        wishlist = await storage_hub.wishlist_manager.get("alice")
        assert wishlist.get("1").purchased is True

    async def test_other_items_are_untouched(
        self, storage_hub: StorageHub, mutator: PledgeMutator
    ):
        await seed(
            storage_hub.user_records,
            "alice",
            item("1", name="Kettle", pledged_by="bob", price="30", note="blue"),
            item("2", name="Lamp", pledged_by="bob"),
            item("3", name="Mug", pledged_by="eve", purchased=True),
            item("4", name="Book"),
        )
        await seed(storage_hub.user_records, "carol", item("1", pledged_by="bob"))
        before = await storage_hub.user_records.all_docs()

        answer = await mutator.toggle_purchased("alice", "1", "bob")
        assert answer.success

        after = {rec.identity: rec for rec in await storage_hub.user_records.all_docs()}
        for rec in before:
            for old, new in zip(rec.wishlist, after[rec.identity].wishlist):
                if rec.identity == "alice" and old.id == "1":
                    assert new.purchased is not old.purchased
                    old.purchased = new.purchased
                assert new == old

    async def test_aggregator_sees_the_toggle(
        self, storage_hub: StorageHub, mutator: PledgeMutator
    ):
        await seed(storage_hub.user_records, "alice", item("42", pledged_by="bob"))
        aggregator = ScanPledgeAggregator(storage_hub.user_records)
        await mutator.toggle_purchased("alice", "42", "bob")
        (group,) = await aggregator.pledges_of("bob")
        assert group.pledges[0].purchased is True
