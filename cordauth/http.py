# SPDX-License-Identifier: MIT

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, ClassVar, Dict, Optional
from urllib.parse import quote as _uriquote

import aiohttp

from . import __version__
from .errors import Unclassified, ValidationError, http_exception_from
from .utils import json_or_text

__all__ = (
    "Route",
    "HTTPClient",
)

_log = logging.getLogger(__name__)

METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})


class Route:
    """An endpoint of the Discord API.

    Parameters
    -----------
    method: :class:`str`
        The HTTP method, one of ``GET``, ``POST``, ``PUT``, ``PATCH`` or ``DELETE``.
    path: :class:`str`
        The path appended to the base URL. ``{name}`` fields are filled from
        ``parameters`` and URL-quoted.
    base: Optional[:class:`str`]
        Overrides :attr:`BASE` for endpoints living outside the versioned API.
    """

    BASE: ClassVar[str] = "https://discord.com/api/v10"

    def __init__(self, method: str, path: str, *, base: Optional[str] = None, **parameters: Any) -> None:
        method = method.upper()
        if method not in METHODS:
            raise ValidationError(f"Unsupported HTTP method: {method!r}")

        self.method: str = method
        self.path: str = path
        url = (base or self.BASE) + path
        if parameters:
            url = url.format_map(
                {k: _uriquote(v) if isinstance(v, str) else v for k, v in parameters.items()}
            )
        self.url: str = url

    def __repr__(self) -> str:
        return f"<Route method={self.method!r} url={self.url!r}>"


class HTTPClient:
    """Sends single requests to Discord and turns failures into exceptions.

    Nothing is retried and no rate limit bookkeeping happens here; every
    call is exactly one request through the underlying
    :class:`aiohttp.ClientSession`.

    Parameters
    -----------
    connector: Optional[:class:`aiohttp.BaseConnector`]
        The connector used when the client creates its own session.
    session: Optional[:class:`aiohttp.ClientSession`]
        A session to send requests through. It is not closed by :meth:`close`.
    proxy: Optional[:class:`str`]
        Optional proxy URL to use for requests.
    proxy_auth: Optional[:class:`aiohttp.BasicAuth`]
        Optional proxy authentication.
    """

    def __init__(
        self,
        connector: Optional[aiohttp.BaseConnector] = None,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        proxy: Optional[str] = None,
        proxy_auth: Optional[aiohttp.BasicAuth] = None,
    ) -> None:
        self.connector: Optional[aiohttp.BaseConnector] = connector
        self.proxy: Optional[str] = proxy
        self.proxy_auth: Optional[aiohttp.BasicAuth] = proxy_auth
        self.__session: Optional[aiohttp.ClientSession] = session
        self._owns_session: bool = session is None

        user_agent = "DiscordBot (cordauth {0}) Python/{1[0]}.{1[1]} aiohttp/{2}"
        self.user_agent: str = user_agent.format(__version__, sys.version_info, aiohttp.__version__)

    def _get_session(self) -> aiohttp.ClientSession:
        if self.__session is None or self.__session.closed:
            self.__session = aiohttp.ClientSession(connector=self.connector)
            self._owns_session = True
        return self.__session

    async def request(
        self,
        route: Route,
        *,
        token: Optional[str] = None,
        token_type: str = "Bearer",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        data: Any = None,
        json: Any = None,
    ) -> Any:
        """Sends a request and returns the decoded body.

        Parameters
        -----------
        route: :class:`Route`
            The endpoint to call.
        token: Optional[:class:`str`]
            The credential placed in the ``Authorization`` header.
        token_type: :class:`str`
            ``Bearer`` for user access tokens, ``Bot`` for the bot token.
        headers: Optional[Dict[:class:`str`, :class:`str`]]
            Extra headers. They cannot replace ``Authorization``.
        params: Optional[Dict[:class:`str`, Any]]
            The query string.
        data: Any
            A form body.
        json: Any
            A JSON body.

        Raises
        -------
        HTTPException
            The subclass matching the response status, or
            :exc:`Unclassified` when no response arrived.
        """
        merged: Dict[str, str] = {"User-Agent": self.user_agent}
        if headers:
            merged.update(headers)
        if token is not None:
            merged["Authorization"] = f"{token_type} {token}"

        kwargs: Dict[str, Any] = {"headers": merged}
        if params is not None:
            kwargs["params"] = params
        if data is not None:
            kwargs["data"] = data
        if json is not None:
            kwargs["json"] = json
        if self.proxy is not None:
            kwargs["proxy"] = self.proxy
        if self.proxy_auth is not None:
            kwargs["proxy_auth"] = self.proxy_auth

        session = self._get_session()
        try:
            async with session.request(route.method, route.url, **kwargs) as response:
                _log.debug("%s %s has returned %s", route.method, route.url, response.status)
                body = await json_or_text(response)

                if 200 <= response.status <= 300:
                    _log.debug("%s %s has received %s", route.method, route.url, body)
                    return body

                if response.status == 429:
                    _log.warning("We are being rate limited on %s %s.", route.method, route.url)

                raise http_exception_from(response.status, body, response)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            _log.debug("%s %s failed without a response: %r", route.method, route.url, exc)
            raise Unclassified(f"Request to {route.url} failed: {exc}") from exc

    async def close(self) -> None:
        """Closes the underlying session if this client created it."""
        if self.__session is not None and self._owns_session:
            await self.__session.close()
        self.__session = None
