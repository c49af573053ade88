"""Loopback HTTP listener that catches a single OAuth redirect.

Copyright (c) 2025 Spotilink. All rights reserved.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Self
from urllib.parse import urlsplit

from aiohttp import web

from .exceptions import CallbackTimeoutError, ConfigurationError, ListenerBindError
from .models import AuthorizationCode, CallbackError, CallbackOutcome

logger = logging.getLogger(__name__)

LOOPBACK_HOSTS = frozenset({"127.0.0.1", "::1"})
FALLBACK_BIND_HOST = "127.0.0.1"

SUCCESS_PAGE = "<h1>Authorization successful! You can close this window.</h1>"
FAILURE_PAGE = "<h1>No code found in the callback.</h1>"
ALREADY_HANDLED_PAGE = "<h1>This authorization request was already handled.</h1>"


def resolve_listen_address(
    redirect_uri: str, default_port: int | None = None
) -> tuple[str, int]:
    """Return the loopback ``(host, port)`` to bind for ``redirect_uri``.

    The port comes from the URI when explicit, otherwise ``default_port``.

    Raises:
        ConfigurationError: If the URI is not absolute or no port resolves.

    """
    parts = urlsplit(redirect_uri)
    if not parts.scheme or not parts.hostname:
        msg = f"Redirect URI is not an absolute URL: {redirect_uri!r}"
        raise ConfigurationError(msg)

    try:
        port = parts.port
    except ValueError as e:
        msg = f"Redirect URI has an invalid port: {redirect_uri!r}"
        raise ConfigurationError(msg) from e

    if port is None:
        port = default_port
    if port is None:
        msg = f"Redirect URI has no port and no default is configured: {redirect_uri!r}"
        raise ConfigurationError(msg)

    host = parts.hostname if parts.hostname in LOOPBACK_HOSTS else FALLBACK_BIND_HOST
    return host, port


class CallbackListener:
    """Short-lived HTTP server that resolves exactly one callback outcome.

    ``start()`` binds the socket, ``wait()`` suspends until the first request
    has been answered, and ``close()`` releases the socket. The outcome is
    held in a one-shot future; requests that arrive after it is resolved are
    answered with 409 and have no effect.
    """

    def __init__(self, redirect_uri: str, *, default_port: int | None = None) -> None:
        self.redirect_uri = redirect_uri
        self.host, self.port = resolve_listen_address(redirect_uri, default_port)
        self._runner: web.AppRunner | None = None
        self._outcome: asyncio.Future[CallbackOutcome] | None = None

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    @property
    def is_listening(self) -> bool:
        return self._runner is not None

    async def start(self) -> None:
        """Bind the loopback socket.

        Raises:
            ListenerBindError: If the port cannot be bound.

        """
        if self._runner is not None:
            return

        self._outcome = asyncio.get_running_loop().create_future()

        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._handle_callback)

        runner = web.AppRunner(app, access_log=None)
        await runner.setup()
        site = web.TCPSite(runner, self.host, self.port)
        try:
            await site.start()
        except OSError as e:
            await runner.cleanup()
            msg = f"Could not listen on {self.host}:{self.port}: {e.strerror or e}"
            raise ListenerBindError(
                msg, details={"host": self.host, "port": self.port}
            ) from e

        self._runner = runner
        logger.info("Listening for redirect on %s", self.redirect_uri)

    async def wait(self, timeout: float | None = None) -> CallbackOutcome:
        """Wait for the callback outcome, closing the listener afterwards.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely

        Returns:
            The outcome of the first callback request.

        Raises:
            CallbackTimeoutError: If no callback arrives within ``timeout``.

        """
        if self._outcome is None:
            msg = "CallbackListener.start() must be called before wait()"
            raise RuntimeError(msg)

        try:
            return await asyncio.wait_for(asyncio.shield(self._outcome), timeout)
        except asyncio.TimeoutError as e:
            logger.warning("No callback received within %ss", timeout)
            msg = f"No authorization callback received within {timeout} seconds"
            raise CallbackTimeoutError(msg, timeout=timeout) from e
        finally:
            await self.close()

    async def close(self) -> None:
        """Stop the server and release the socket; safe to call repeatedly."""
        runner, self._runner = self._runner, None
        if runner is not None:
            await runner.cleanup()
            logger.debug("Callback listener on %s:%s closed", self.host, self.port)

    async def _handle_callback(self, request: web.Request) -> web.StreamResponse:
        if self._outcome is None or self._outcome.done():
            logger.debug("Ignoring extra callback request %s", request.path)
            response = web.Response(
                text=ALREADY_HANDLED_PAGE, status=409, content_type="text/html"
            )
            response.force_close()
            return response

        # request.url is rebuilt from the Host header and the request target.
        query = request.url.query
        code = query.get("code", "").strip()

        outcome: CallbackOutcome
        if code:
            outcome = AuthorizationCode(code=code)
            response = web.Response(text=SUCCESS_PAGE, status=200, content_type="text/html")
        else:
            outcome = CallbackError(
                provider_error=query.get("error"),
                provider_error_description=query.get("error_description"),
            )
            logger.warning(
                "Callback without authorization code (error=%s)",
                outcome.provider_error,
            )
            response = web.Response(text=FAILURE_PAGE, status=400, content_type="text/html")

        # Flush the page before resolving so shutdown cannot cut it off.
        response.force_close()
        await response.prepare(request)
        await response.write_eof()

        if not self._outcome.done():
            self._outcome.set_result(outcome)
        return response


async def await_callback(
    redirect_uri: str,
    *,
    timeout: float | None = None,
    default_port: int | None = None,
) -> CallbackOutcome:
    """Bind a listener for ``redirect_uri`` and return the first callback outcome."""
    listener = CallbackListener(redirect_uri, default_port=default_port)
    await listener.start()
    return await listener.wait(timeout)
