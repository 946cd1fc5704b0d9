"""Command line lookup of a blog's public information."""

import argparse
import logging

from dotenv import load_dotenv

from src.paths import ENV_FILE
from src.tumblr.client import TumblrClient
from src.tumblr.exceptions import TumblrClientError
from src.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.tumblr",
        description="Show the title and post count of a Tumblr blog.",
    )
    parser.add_argument("blog", help="Blog name or host name, e.g. staff or example.com")
    parser.add_argument(
        "--avatar",
        type=int,
        nargs="?",
        const=64,
        default=None,
        help="Also print the avatar URL at this size (default 64)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Look up a blog and print a one-line summary.

    :param argv: Command line arguments, defaults to ``sys.argv``.
    :returns: Process exit code.
    """
    args = _build_parser().parse_args(argv)

    load_dotenv(ENV_FILE)
    configure_logging()

    try:
        with TumblrClient.from_settings() as client:
            blog = client.blog_info(args.blog)
            if blog is None:
                logger.error(f"Could not decode blog info for {args.blog}")
                return 1

            print(f"{blog.title or blog.name}: {blog.post_count or 0} posts")

            if args.avatar is not None:
                print(client.blog_avatar(args.blog, args.avatar))

    except TumblrClientError as e:
        logger.error(f"Tumblr lookup failed: {e}")
        return 1

    return 0
