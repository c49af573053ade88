"""Example usage of spotilink."""
# Copyright (c) 2025 Spotilink. All rights reserved.

import asyncio
import logging

from spotilink import OAuthClientConfig, authenticate
from spotilink.exceptions import AuthFlowError, SpotilinkError


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def show_url(url: str, opened: bool) -> None:
    """Print the consent URL when no browser could be opened."""
    if not opened:
        print(f"Open this URL to continue: {url}")


async def main() -> None:
    """Execute main example function."""
    config = OAuthClientConfig.from_env()

    try:
        logger.info("=== Sign-in Example ===")
        session = await authenticate(config, on_authorization_url=show_url)

        async with session:
            profile = await session.users.get_current_profile()
            logger.info(
                "Welcome, %s! (ID: %s)",
                profile.display_name or "User",
                profile.id,
            )

            logger.info("=== Search Example ===")
            result = await session.search.search("artist:Nina Simone", ["artist"], limit=5)
            for artist in result.artists.items if result.artists else []:
                logger.info("%s (popularity %s)", artist.name, artist.popularity)

    except AuthFlowError as e:
        logger.error("Sign-in failed: %s", e.message)
    except SpotilinkError as e:
        logger.error("Spotify error: %s", e.message)


if __name__ == "__main__":
    asyncio.run(main())
