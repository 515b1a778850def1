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
"""The HTTP API Gateway for Wishboat.

Views answer JSON, actions answer redirects and leave flash messages for the next view.
"""
import logging
from typing import List, Optional, Tuple

from httpx import AsyncClient
from tornado.httpserver import HTTPServer
from tornado.netutil import bind_sockets
from tornado.web import Application, StaticFileHandler

from ..lang import Lang
from ..storagehub import StorageHub
from ..usrsys.auth import AuthProvider
from ..usrsys.profile import ProfileManager
from ..wishlist.pledges import PledgeAggregator, PledgeMutator
from .login import LoginHandler, LogoutHandler
from .pledges import PledgePurchasedHandler, PledgesHandler
from .profile import (
    ProfileHandler,
    ProfileInfoHandler,
    ProfilePasswordHandler,
    ProfilePictureUploadHandler,
)


class HTTPAPIGateway(object):
    """The HTTP API Gateway for Wishboat.

    Current handlers:

    - `/login`, `/logout`: `login.LoginHandler`, `login.LogoutHandler`
    - `/profile`: `profile.ProfileHandler`
    - `/profile/info`: `profile.ProfileInfoHandler`
    - `/profile/password`: `profile.ProfilePasswordHandler`
    - `/profile/upload-pfp`: `profile.ProfilePictureUploadHandler`
    - `/profile/pledges`: `pledges.PledgesHandler`
    - `/profile/pledges/<owner>/<item id>/purchased`: `pledges.PledgePurchasedHandler`
    - `/uploads/<file>`: the uploaded profile pictures

    Related:

    - [Tornado documentation](https://www.tornadoweb.org)
    """

    __logger = logging.getLogger("wishboat.apigate.HTTPAPIGateway")

    def __init__(
        self,
        *,
        storage_hub: StorageHub,
        auth_provider: AuthProvider,
        profile_manager: ProfileManager,
        pledge_aggregator: PledgeAggregator,
        pledge_mutator: PledgeMutator,
        lang: Lang,
        cookie_secret: str,
        upload_dir: str,
        http_binds: List[Tuple[Optional[str], int]],
        debug: bool = False,
    ) -> None:
        self._application = Application(
            [
                (r"/login", LoginHandler),
                (r"/logout", LogoutHandler),
                (r"/profile", ProfileHandler),
                (r"/profile/info", ProfileInfoHandler),
                (r"/profile/password", ProfilePasswordHandler),
                (r"/profile/upload-pfp", ProfilePictureUploadHandler),
                (r"/profile/pledges", PledgesHandler),
                (r"/profile/pledges/([^/]+)/([^/]+)/purchased", PledgePurchasedHandler),
                (r"/uploads/(.*)", StaticFileHandler, {"path": upload_dir}),
            ],
            storage_hub=storage_hub,
            auth_provider=auth_provider,
            profile_manager=profile_manager,
            pledge_aggregator=pledge_aggregator,
            pledge_mutator=pledge_mutator,
            lang=lang,
            cookie_secret=cookie_secret,
            login_url="/login",
            debug=debug,
        )
        self._http_server: Optional[HTTPServer] = None
        self._http_binds = http_binds
        super().__init__()

    @property
    def http_binds(self) -> List[Tuple[Optional[str], int]]:
        """The tcp binds for HTTP server.
        Each element in the list is a tuple of (binding address/hostname/None, port).

        For example:

        - `("127.0.0.1", 1989)` binds the port 1989 on address 127.0.0.1.
        - `("::0", 525)` binds the port 525 on address ::0.
        - `(None, 8080)` binds port 8080 on all network interfaces.

        Related:

        - `HTTPAPIGateway.start` the method will automatically binds a random port on 127.0.0.1 if this list is empty.
        """
        return self._http_binds

    @property
    def application(self) -> Application:
        """Application instance for HTTP server."""
        return self._application

    async def start(self) -> None:
        """Listen to the address-port pairs given in `HTTPAPIGateway.http_binds`.

        This method will bind a random port on 127.0.0.1 and put it into `HTTPAPIGateway.http_binds` list if the list is empty.
        """
        self._http_server = HTTPServer(self.application)
        if not self.http_binds:
            sockets = bind_sockets(0, "127.0.0.1")
            self.http_binds.append(("127.0.0.1", sockets[0].getsockname()[1]))
            self._http_server.add_sockets(sockets)
        else:
            for addr, port in self.http_binds:
                self._http_server.listen(port, addr if addr else "")
        for addr, port in self.http_binds:
            self.__logger.info("listening on %s:%d", addr or "*", port)

    async def stop(self) -> None:
        """Prevent new incoming request and wait for all existing connections closed."""
        assert self._http_server
        self._http_server.stop()
        await self._http_server.close_all_connections()
        self._http_server = None

    def http_client(self) -> AsyncClient:
        """Return a http client from httpx which uses the first bind from `HTTPAPIGateway.http_binds` as base url.

        Related:

        - [httpx documentation](https://www.python-httpx.org/)
        """
        assert self._http_server
        address, port = self.http_binds[0]
        if not address:
            address = "localhost"
        base_url = "http://{}:{}".format(address, port)
        return AsyncClient(base_url=base_url)
