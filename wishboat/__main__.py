"""Run a Wishboat server: `python -m wishboat`.

The configuration comes from the environment, see `wishboat.config.Config.from_environ`. The arguments override it.
"""
import asyncio
import logging
from argparse import ArgumentParser, Namespace

from . import Wishboat
from .config import Config, parse_http_binds


def parse_args() -> Namespace:
    parser = ArgumentParser(prog="wishboat", description="wishlist pledges server")
    parser.add_argument(
        "--bind", metavar="ADDR:PORT", help="comma separated addresses to listen"
    )
    parser.add_argument("--database", metavar="PATH", help="database path")
    parser.add_argument("--upload-dir", metavar="DIR", help="profile pictures dir")
    parser.add_argument("--debug", action="store_true", help="debug mode")
    return parser.parse_args()


async def serve(config: Config) -> None:
    instance = Wishboat(config)
    await instance.start()
    try:
        await asyncio.Event().wait()
    finally:
        await instance.stop()


def main() -> None:
    args = parse_args()
    config = Config.from_environ()
    if args.bind:
        config.http_binds = parse_http_binds(args.bind)
    if args.database:
        config.database_path = args.database
    if args.upload_dir:
        config.upload_dir = args.upload_dir
    if args.debug:
        config.debug = True
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
