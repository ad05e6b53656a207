# SPDX-License-Identifier: MIT

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode

from aiohttp import BaseConnector, BasicAuth, ClientSession

from ..config import OAuth2Credentials, load_scopes
from ..errors import PreconditionFailed, ValidationError
from ..http import HTTPClient, Route
from ..types.oauth2 import Application, Connection, Guild, GuildMember, User
from ..types.snowflake import Snowflake, SnowflakeList
from ..utils import MISSING, parse_snowflake, require_str
from .token import OAuth2Token

if TYPE_CHECKING:
    from typing_extensions import Self

    from .session import OAuth2Session

__all__ = ("OAuth2Client",)

_log = logging.getLogger(__name__)

AUTHORIZE_URL = "https://discord.com/oauth2/authorize"
REVOKE_BASE = "https://discord.com/api"
DEFAULT_STATE = "1bac472"

_FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class OAuth2Client:
    """Handles the OAuth2 flow and the user-facing API requests

    The client holds no user tokens. Every call takes the access token it
    should act with, or goes through an :class:`OAuth2Session`.

    Parameters
    -----------
    client_id: :class:`str`
        The client ID provided by Discord
    client_secret: :class:`str`
        The client secret provided by Discord
    redirect_uri: :class:`str`
        The redirect URI for the OAuth2 flow
    scopes: Optional[List[:class:`str`]]
        The OAuth2 scopes to request by default
    client_token: Optional[:class:`str`]
        The bot token, used by :meth:`join_guild` and :meth:`fetch_application`
    connector: Optional[:class:`aiohttp.BaseConnector`]
        The connector to use for the client session.
    session: Optional[:class:`aiohttp.ClientSession`]
        An existing session to send requests through.
    proxy: Optional[:class:`str`]
        Optional proxy URL to use for requests.
    proxy_auth: Optional[:class:`aiohttp.BasicAuth`]
        Optional proxy authentication.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scopes: Optional[List[str]] = None,
        *,
        client_token: Optional[str] = None,
        connector: Optional[BaseConnector] = None,
        session: Optional[ClientSession] = None,
        proxy: Optional[str] = None,
        proxy_auth: Optional[BasicAuth] = None,
    ) -> None:
        self.credentials = OAuth2Credentials(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            client_token=client_token,
        )
        self.scopes: List[str] = self._check_scopes(scopes if scopes is not None else [])

        self.http = HTTPClient(
            connector,
            session=session,
            proxy=proxy,
            proxy_auth=proxy_auth,
        )

    @classmethod
    def from_env(cls, scopes: Optional[List[str]] = None, **kwargs: Any) -> Self:
        """Creates a client from ``DISCORD_*`` environment variables.

        ``DISCORD_OAUTH2_SCOPES`` takes precedence over ``scopes``.
        """
        credentials = OAuth2Credentials.from_env()
        return cls(
            credentials.client_id,
            credentials.client_secret,
            credentials.redirect_uri,
            load_scopes(scopes),
            client_token=credentials.client_token,
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"<OAuth2Client client_id={self.client_id!r} scopes={self.scopes!r}>"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.http.close()

    @property
    def client_id(self) -> str:
        return self.credentials.client_id

    @property
    def redirect_uri(self) -> str:
        return self.credentials.redirect_uri

    @staticmethod
    def _check_scopes(scopes: Iterable[str]) -> List[str]:
        if isinstance(scopes, str):
            raise ValidationError("scopes must be a list of str")
        scopes = list(scopes)
        if not all(isinstance(s, str) for s in scopes):
            raise ValidationError("scopes must be a list of str")
        return scopes

    def _form(self, **fields: str) -> Dict[str, str]:
        payload = {
            "client_id": self.credentials.client_id,
            "client_secret": self.credentials.client_secret,
        }
        payload.update(fields)
        return payload

    def _require_bot_token(self) -> str:
        if self.credentials.client_token is None:
            raise PreconditionFailed("A bot token (client_token) is required for this operation.")
        return self.credentials.client_token

    def get_authorize_url(
        self,
        scopes: Optional[List[str]] = None,
        state: str = DEFAULT_STATE,
        **kwargs: Any,
    ) -> str:
        """Gets the OAuth2 authorization URL

        Parameters
        -----------
        scopes: Optional[List[:class:`str`]]
            The scopes to request, defaults to the client's scopes
        state: :class:`str`
            The state to include in the auth request
        **kwargs
            Additional query parameters to include, e.g. ``prompt="none"``
        """
        scopes = self._check_scopes(scopes if scopes is not None else self.scopes)
        if not isinstance(state, str):
            raise ValidationError(f"state must be a str, not {type(state).__name__}")

        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(scopes),
            "state": state,
        }
        params.update(kwargs)

        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> OAuth2Token:
        """Exchanges an authorization code for an access and refresh token

        Parameters
        -----------
        code: :class:`str`
            The authorization code from OAuth2 redirect
        """
        require_str(code, "code")
        payload = self._form(
            grant_type="authorization_code",
            code=code,
            redirect_uri=self.redirect_uri,
        )

        route = Route("POST", "/oauth2/token")
        token_data = await self.http.request(route, headers=_FORM_HEADERS, data=payload)
        return OAuth2Token(token_data)

    async def refresh_token(self, refresh_token: str) -> OAuth2Token:
        """Exchanges a refresh token for a new token pair

        Parameters
        -----------
        refresh_token: :class:`str`
            The refresh token to use
        """
        require_str(refresh_token, "refresh_token")
        payload = self._form(grant_type="refresh_token", refresh_token=refresh_token)

        route = Route("POST", "/oauth2/token")
        token_data = await self.http.request(route, headers=_FORM_HEADERS, data=payload)
        return OAuth2Token(token_data)

    async def revoke_token(self, access_token: Optional[str], refresh_token: Optional[str]) -> None:
        """Revokes a token pair

        Discord revokes the whole grant, so both tokens stop working.

        Parameters
        -----------
        access_token: Optional[:class:`str`]
            The access token of the grant
        refresh_token: Optional[:class:`str`]
            The refresh token of the grant

        Raises
        -------
        PreconditionFailed
            Either token is ``None``. Nothing is sent.
        """
        if not access_token or not refresh_token:
            raise PreconditionFailed("Access token and refresh token are required to revoke the token.")
        require_str(refresh_token, "refresh_token")

        route = Route("POST", "/oauth2/token/revoke", base=REVOKE_BASE)
        await self.http.request(route, headers=_FORM_HEADERS, data=self._form(token=refresh_token))
        _log.debug("Revoked OAuth2 grant for client %s.", self.client_id)

    async def fetch_user(self, access_token: str) -> User:
        """Fetches the authenticated user's info

        Parameters
        -----------
        access_token: :class:`str`
            The user's access token
        """
        require_str(access_token, "access_token")
        return await self.http.request(Route("GET", "/users/@me"), token=access_token)

    async def fetch_username(self, access_token: str) -> str:
        """Fetches the authenticated user's username"""
        user = await self.fetch_user(access_token)
        return user["username"]

    async def fetch_connections(self, access_token: str) -> List[Connection]:
        """Fetches the authenticated user's connections

        Requires the ``connections`` scope.

        Parameters
        -----------
        access_token: :class:`str`
            The user's access token
        """
        require_str(access_token, "access_token")
        return await self.http.request(Route("GET", "/users/@me/connections"), token=access_token)

    async def fetch_guilds(self, access_token: str) -> List[Guild]:
        """Fetches the authenticated user's guilds

        Requires the ``guilds`` scope.

        Parameters
        -----------
        access_token: :class:`str`
            The user's access token
        """
        require_str(access_token, "access_token")
        return await self.http.request(Route("GET", "/users/@me/guilds"), token=access_token)

    async def fetch_guild_member(self, access_token: str, guild_id: Snowflake) -> GuildMember:
        """Fetches the authenticated user's member info for a guild

        Requires the ``guilds.members.read`` scope.

        Parameters
        -----------
        access_token: :class:`str`
            The user's access token
        guild_id: :class:`Snowflake`
            The ID of the guild
        """
        require_str(access_token, "access_token")
        route = Route(
            "GET",
            "/users/@me/guilds/{guild_id}/member",
            guild_id=parse_snowflake(guild_id, name="guild_id"),
        )
        return await self.http.request(route, token=access_token)

    async def fetch_application(self) -> Application:
        """Fetches the bot's application info using the bot token"""
        route = Route("GET", "/oauth2/applications/@me")
        return await self.http.request(route, token=self._require_bot_token(), token_type="Bot")

    async def join_guild(
        self,
        access_token: str,
        guild_id: Snowflake,
        user_id: Snowflake,
        *,
        roles: Optional[SnowflakeList] = None,
        nick: Optional[str] = MISSING,
        mute: bool = MISSING,
        deaf: bool = MISSING,
    ) -> Optional[GuildMember]:
        """Adds the user to a guild

        The request is authorized with the bot token, which must be in the
        guild with the ``CREATE_INSTANT_INVITE`` permission. The user's
        token needs the ``guilds.join`` scope.

        Parameters
        -----------
        access_token: :class:`str`
            The user's access token
        guild_id: :class:`Snowflake`
            The ID of the guild to join
        user_id: :class:`Snowflake`
            The ID of the user to add
        roles: Optional[List[:class:`Snowflake`]]
            Roles to give the new member
        nick: Optional[:class:`str`]
            The member's nickname
        mute: :class:`bool`
            Whether the member is muted in voice channels
        deaf: :class:`bool`
            Whether the member is deafened in voice channels

        Returns
        --------
        Optional[:class:`dict`]
            The new member, or ``None`` if the user already was one.
        """
        require_str(access_token, "access_token")
        bot_token = self._require_bot_token()

        payload: Dict[str, Any] = {
            "access_token": access_token,
            "roles": [parse_snowflake(r, name="role") for r in roles or []],
        }
        if nick is not MISSING:
            payload["nick"] = nick
        if mute is not MISSING:
            payload["mute"] = mute
        if deaf is not MISSING:
            payload["deaf"] = deaf

        route = Route(
            "PUT",
            "/guilds/{guild_id}/members/{user_id}",
            guild_id=parse_snowflake(guild_id, name="guild_id"),
            user_id=parse_snowflake(user_id, name="user_id"),
        )
        data = await self.http.request(route, token=bot_token, token_type="Bot", json=payload)
        return data or None

    def create_session(self, token: Optional[OAuth2Token] = None) -> OAuth2Session:
        """Creates a session holding ``token`` for this client"""
        from .session import OAuth2Session

        return OAuth2Session.from_token(self, token)
