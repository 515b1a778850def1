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

"""Wishlists and pledges.

Every user owns one wishlist, embedded in the user document. Other users pledge to buy items of it.

## Who may touch what
An item's `pledged_by` is set once by whoever pledges it, and no one else can take the pledge over (`manager.Wishlist.pledge`).
From then on, only that user can toggle the item's `purchased` flag (`pledges.PledgeMutator`).

## Reading pledges
Pledges are not stored on their own: `pledges.PledgeAggregator` finds them in the wishlists each time they are asked for.
"""
from .errors import (
    AlreadyPledged,
    ItemNotFound,
    NotPledgeOwner,
    OwnerNotFound,
    PledgeError,
    StoreUnavailable,
)
from .manager import Wishlist, WishlistManager
from .pledges import (
    Pledge,
    PledgeAggregator,
    PledgeAnswer,
    PledgeGroup,
    PledgeMutator,
    ScanPledgeAggregator,
)
