"""Best-effort browser launch for the consent page."""

from __future__ import annotations

import logging
import webbrowser

logger = logging.getLogger(__name__)


def open_browser(url: str) -> bool:
    """Open ``url`` in the user's default browser.

    Failure is logged and reported through the return value, never raised.

    Returns:
        True if a browser was launched, False otherwise.

    """
    try:
        opened = webbrowser.open(url)
    except (webbrowser.Error, OSError) as exc:
        logger.warning("Could not open a browser: %s", exc)
        return False

    if opened:
        logger.info("Opened browser for authorization")
    else:
        logger.warning("No browser available to open the authorization URL")
    return bool(opened)
