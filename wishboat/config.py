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
"""`Config`: the configuration of one Wishboat instance.

It is given to `wishboat.Wishboat` and passed down to the components which need it, nothing reads it from a global.
"""
from dataclasses import dataclass, field
from os import environ
from secrets import token_hex
from typing import List, Mapping, Optional, Tuple

from .utils.storage import MEMORY_DATABASE

DEFAULT_TOKEN_EXPIRATION_SECONDS = 7 * 24 * 60 * 60


@dataclass
class Config(object):
    """Configuration of Wishboat.

    Attributes:
        database_path: `str`. A file path, ":mem:" for an in-memory database, or an SQLAlchemy URL.
        upload_dir: `str`. The directory keeping uploaded profile pictures.
        pfp_upload_max_size: `float`. The size limit of profile pictures, in MiB.
        cookie_secret: `str`. The key signing cookies. A random one is generated if not given, sessions will not survive restarting.
        token_expiration_seconds: `Optional[int]`. Lifetime of session tokens, `None` for never expire.
        language: `str`. The language of messages, see `wishboat.lang`.
        http_binds: `List[Tuple[Optional[str], int]]`. See `wishboat.apigate.HTTPAPIGateway.http_binds`.
        debug: `bool`. The debug mode of tornado.
    """

    database_path: str = MEMORY_DATABASE
    upload_dir: str = "uploads"
    pfp_upload_max_size: float = 5
    cookie_secret: str = field(default_factory=token_hex)
    token_expiration_seconds: Optional[int] = DEFAULT_TOKEN_EXPIRATION_SECONDS
    language: str = "en"
    http_binds: List[Tuple[Optional[str], int]] = field(default_factory=list)
    debug: bool = False

    @property
    def pfp_upload_max_bytes(self) -> int:
        return int(self.pfp_upload_max_size * 1024 * 1024)

    @classmethod
    def from_environ(cls, env: Mapping[str, str] = environ) -> "Config":
        """Build a config from `WISHBOAT_*` variables. Unset variables keep the defaults.

        - `WISHBOAT_DATABASE_PATH`
        - `WISHBOAT_UPLOAD_DIR`
        - `WISHBOAT_PFP_UPLOAD_MAX_SIZE`
        - `WISHBOAT_COOKIE_SECRET`
        - `WISHBOAT_TOKEN_EXPIRATION_SECONDS`, "0" for never expire
        - `WISHBOAT_LANGUAGE`
        - `WISHBOAT_HTTP_BINDS`, comma separated "address:port" or "port"
        - `WISHBOAT_DEBUG`, "1" or "true" to enable
        """
        config = cls()
        if "WISHBOAT_DATABASE_PATH" in env:
            config.database_path = env["WISHBOAT_DATABASE_PATH"]
        if "WISHBOAT_UPLOAD_DIR" in env:
            config.upload_dir = env["WISHBOAT_UPLOAD_DIR"]
        if "WISHBOAT_PFP_UPLOAD_MAX_SIZE" in env:
            config.pfp_upload_max_size = float(env["WISHBOAT_PFP_UPLOAD_MAX_SIZE"])
        if "WISHBOAT_COOKIE_SECRET" in env:
            config.cookie_secret = env["WISHBOAT_COOKIE_SECRET"]
        if "WISHBOAT_TOKEN_EXPIRATION_SECONDS" in env:
            seconds = int(env["WISHBOAT_TOKEN_EXPIRATION_SECONDS"])
            config.token_expiration_seconds = seconds if seconds > 0 else None
        if "WISHBOAT_LANGUAGE" in env:
            config.language = env["WISHBOAT_LANGUAGE"]
        if "WISHBOAT_HTTP_BINDS" in env:
            config.http_binds = parse_http_binds(env["WISHBOAT_HTTP_BINDS"])
        if "WISHBOAT_DEBUG" in env:
            config.debug = env["WISHBOAT_DEBUG"].lower() in ("1", "true", "yes")
        return config


def parse_http_binds(s: str) -> List[Tuple[Optional[str], int]]:
    """Parse "127.0.0.1:8080,9090" into `[("127.0.0.1", 8080), (None, 9090)]`.
    IPv6 addresses are written in brackets: "[::1]:8080".
    """
    binds: List[Tuple[Optional[str], int]] = []
    for part in s.split(","):
        part = part.strip()
        if not part:
            continue
        addr, sep, port = part.rpartition(":")
        if not sep:
            binds.append((None, int(port)))
        else:
            binds.append((addr.strip("[]") or None, int(port)))
    return binds
