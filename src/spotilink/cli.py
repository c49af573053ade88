"""Command-line artist lookup built on the authorization code flow.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from ._config import OAuthClientConfig
from ._flow import authenticate
from .client import SpotifyClient
from .exceptions import (
    ApiError,
    AuthFlowError,
    ConfigurationError,
    OAuthProviderError,
    SpotilinkError,
)
from .models import Artist, ItemType

logger = logging.getLogger(__name__)

SEARCH_MARKET = "US"
SEARCH_LIMIT = 10


async def prompt(question: str) -> str:
    """Read one line from stdin without blocking the event loop."""
    answer = await asyncio.to_thread(input, question)
    return answer.strip()


def _print_authorization_url(url: str, opened: bool) -> None:
    if not opened:
        print("Could not open a browser. Visit this URL to authorize:")
        print(url)


def format_artist_details(artist: Artist) -> list[str]:
    """Return the printable detail lines for ``artist``."""
    genres = ", ".join(artist.genres) or "N/A"
    followers = artist.followers.total if artist.followers else None
    spotify_url = artist.external_urls.spotify if artist.external_urls else None

    lines = [
        "Artist Details:",
        f"Name: {artist.name}",
        f"Genres: {genres}",
        f"Popularity: {artist.popularity if artist.popularity is not None else 'N/A'}",
        f"Followers: {followers if followers is not None else 'N/A'}",
        f"Spotify URL: {spotify_url or 'N/A'}",
    ]
    if artist.images:
        lines.append(f"Image URL: {artist.images[0].url}")
    return lines


def format_artist_choice(index: int, artist: Artist) -> str:
    genres = ", ".join(artist.genres) or "N/A"
    return (
        f"{index}. {artist.name} "
        f"(Genres: {genres}, Popularity: {artist.popularity})"
    )


async def select_artist(artists: Sequence[Artist]) -> Artist | None:
    """Pick one artist, prompting when there is more than one.

    Returns:
        The chosen artist, or None for an invalid selection.

    """
    if len(artists) == 1:
        logger.info("Only one artist found: %s", artists[0].name)
        return artists[0]

    print("Multiple artists found:")
    for idx, artist in enumerate(artists, start=1):
        print(format_artist_choice(idx, artist))

    choice = await prompt("Select artist number: ")
    try:
        idx = int(choice) - 1
    except ValueError:
        idx = -1
    if idx < 0 or idx >= len(artists):
        print("Invalid selection.")
        return None

    logger.info("Selected artist: %s", artists[idx].name)
    return artists[idx]


async def lookup_artist(session: SpotifyClient, artist_name: str | None = None) -> Artist | None:
    """Search for an artist by name and print the chosen one's details."""
    profile = await session.users.get_current_profile()
    if not profile.id:
        msg = "Could not retrieve user ID."
        raise ApiError(msg, "MISSING_USER_ID")
    logger.info("User ID is %s", profile.id)

    if not artist_name:
        artist_name = await prompt("Enter artist name: ")

    logger.info("Searching for artist %r...", artist_name)
    result = await session.search.search(
        f"artist:{artist_name}",
        [ItemType.ARTIST],
        market=SEARCH_MARKET,
        limit=SEARCH_LIMIT,
        offset=0,
    )
    artists = result.artists.items if result.artists else []
    logger.info("Found %d artist(s).", len(artists))
    if not artists:
        print("No artists found.")
        return None

    selected = await select_artist(artists)
    if selected is None:
        return None
    if not selected.id:
        print("Selected artist has no ID.")
        return None

    print()
    for line in format_artist_details(selected):
        print(line)
    return selected


async def run(args: argparse.Namespace) -> None:
    """Authenticate and run the artist lookup."""
    config = OAuthClientConfig.from_env(args.env_file)
    if args.timeout is not None:
        if args.timeout < 0:
            msg = f"--timeout must not be negative: {args.timeout}"
            raise ConfigurationError(msg, details={"timeout": args.timeout})
        config = config.model_copy(
            update={"callback_timeout": args.timeout or None}
        )

    session = await authenticate(config, on_authorization_url=_print_authorization_url)
    async with session:
        await lookup_artist(session, args.artist)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spotilink",
        description="Sign in to Spotify from the terminal and look up an artist",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file with SPOTIFY_* settings",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for the browser redirect (0 waits forever)",
    )
    parser.add_argument(
        "--artist",
        default=None,
        help="Artist name to search for instead of prompting",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        asyncio.run(run(args))
    except OAuthProviderError as e:
        print(f"OAuth Error: {e.message} ({e.code})", file=sys.stderr)
        return 1
    except AuthFlowError as e:
        print(f"Authentication failed: {e.message}", file=sys.stderr)
        return 1
    except ConfigurationError as e:
        print(f"Configuration Error: {e.message}", file=sys.stderr)
        return 1
    except ApiError as e:
        print(f"Spotify API Error: {e.message}", file=sys.stderr)
        return 1
    except SpotilinkError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    except Exception:
        logger.exception("Unexpected Error")
        return 1
    return 0
