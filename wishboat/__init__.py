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

import httpx

from .apigate import HTTPAPIGateway
from .config import Config
from .lang import Lang
from .storagehub import StorageHub
from .usrsys.auth import AuthProvider
from .usrsys.profile import ProfileManager
from .usrsys.usr import UserRecord
from .utils import global_executor
from .utils.storage import Database
from .wishlist.manager import WishlistManager
from .wishlist.pledges import PledgeAggregator, PledgeMutator, ScanPledgeAggregator


class Wishboat(object):
    """The entry of Wishboat. This class stores configuration and tools to keep other components running.

    Wishboat splits its feature units as reusable components:

    - User System (`wishboat.usrsys`)
    - Wishlists and pledges (`wishboat.wishlist`)
    - HTTP API Gateway (`wishboat.apigate`)

    Every component gets what it needs from this class when constructed, the `config` and the `lang` included.

    ..note:: `pledge_aggregator` can be given to replace the scan of all wishlists, see `wishboat.wishlist.pledges.PledgeAggregator`.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        pledge_aggregator: Optional[PledgeAggregator] = None,
    ) -> None:
        if not config:
            config = Config()
        self.config = config
        """`wishboat.config.Config`."""
        self.lang = Lang(config.language)
        """`wishboat.lang.Lang`. Messages in the configured language."""
        self.database = Database(config.database_path)
        """Database instance. Notice that this property may not be avaliable in future."""
        self.storage_hub = StorageHub(self.database)
        """`wishboat.StorageHub`. The references to all storages in wishboat."""
        self.auth_provider = AuthProvider(
            self.storage_hub.user_records,
            self.storage_hub.token_records,
            token_expiration_seconds=config.token_expiration_seconds,
        )
        self.profile_manager = ProfileManager(self.storage_hub.user_records, config)
        self.pledge_aggregator: PledgeAggregator = (
            pledge_aggregator
            if pledge_aggregator
            else ScanPledgeAggregator(self.storage_hub.user_records)
        )
        self.pledge_mutator = PledgeMutator(self.storage_hub.wishlist_manager)
        self.http_api_gate = HTTPAPIGateway(
            storage_hub=self.storage_hub,
            auth_provider=self.auth_provider,
            profile_manager=self.profile_manager,
            pledge_aggregator=self.pledge_aggregator,
            pledge_mutator=self.pledge_mutator,
            lang=self.lang,
            cookie_secret=config.cookie_secret,
            upload_dir=config.upload_dir,
            http_binds=config.http_binds,
            debug=config.debug,
        )
        super().__init__()

    @property
    def wishlist_manager(self) -> WishlistManager:
        return self.storage_hub.wishlist_manager

    async def start(self):
        """Start the engine!"""
        await self.http_api_gate.start()

    async def stop(self):
        """Stop the HTTP API gateway and close the database."""
        await self.http_api_gate.stop()
        self.storage_hub.close()
        global_executor.shutdown()

    async def new_user(self, user_id: str, password: str) -> UserRecord:
        """Create a new user. This method is used for programmaic uses from outside."""
        return await self.storage_hub.user_records.create_new_user(user_id, password)

    def http_api_gate_client(self) -> httpx.AsyncClient:
        return self.http_api_gate.http_client()
