# SPDX-License-Identifier: MIT

from __future__ import annotations

from typing import List, Optional

from ..errors import PreconditionFailed
from ..types.oauth2 import Connection, Guild, GuildMember, User
from ..types.snowflake import Snowflake, SnowflakeList
from ..utils import MISSING
from .client import OAuth2Client
from .token import OAuth2Token

__all__ = ("OAuth2Session",)


class OAuth2Session:
    """Holds one user's tokens and runs requests with them

    The tokens are never refreshed behind your back; call :meth:`refresh`
    or :meth:`set_token` yourself when they go stale.

    Parameters
    -----------
    client: :class:`OAuth2Client`
        The OAuth2 client to use
    access_token: Optional[:class:`str`]
        The user's access token
    refresh_token: Optional[:class:`str`]
        The user's refresh token
    """

    __slots__ = ("client", "access_token", "refresh_token")

    def __init__(
        self,
        client: OAuth2Client,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
    ) -> None:
        self.client: OAuth2Client = client
        self.access_token: Optional[str] = access_token
        self.refresh_token: Optional[str] = refresh_token

    @classmethod
    def from_token(cls, client: OAuth2Client, token: Optional[OAuth2Token] = None) -> OAuth2Session:
        session = cls(client)
        if token is not None:
            session.set_token(token)
        return session

    def __repr__(self) -> str:
        return f"<OAuth2Session authorized={self.access_token is not None}>"

    def set_token(self, token: OAuth2Token) -> None:
        """Replaces both tokens with the ones from ``token``"""
        self.access_token = token.access_token
        self.refresh_token = token.refresh_token

    def set_access_token(self, access_token: Optional[str]) -> None:
        self.access_token = access_token

    def set_refresh_token(self, refresh_token: Optional[str]) -> None:
        self.refresh_token = refresh_token

    def _require_access_token(self) -> str:
        if not self.access_token:
            raise PreconditionFailed("No access token is set on this session.")
        return self.access_token

    async def fetch_user(self) -> User:
        """Fetches the authenticated user's info"""
        return await self.client.fetch_user(self._require_access_token())

    async def fetch_username(self) -> str:
        """Fetches the authenticated user's username"""
        return await self.client.fetch_username(self._require_access_token())

    async def fetch_connections(self) -> List[Connection]:
        """Fetches the authenticated user's connections"""
        return await self.client.fetch_connections(self._require_access_token())

    async def fetch_guilds(self) -> List[Guild]:
        """Fetches the authenticated user's guilds"""
        return await self.client.fetch_guilds(self._require_access_token())

    async def fetch_guild_member(self, guild_id: Snowflake) -> GuildMember:
        """Fetches the authenticated user's member info for a guild"""
        return await self.client.fetch_guild_member(self._require_access_token(), guild_id)

    async def join_guild(
        self,
        guild_id: Snowflake,
        user_id: Snowflake,
        *,
        roles: Optional[SnowflakeList] = None,
        nick: Optional[str] = MISSING,
        mute: bool = MISSING,
        deaf: bool = MISSING,
    ) -> Optional[GuildMember]:
        """Adds the user to a guild"""
        return await self.client.join_guild(
            self._require_access_token(),
            guild_id,
            user_id,
            roles=roles,
            nick=nick,
            mute=mute,
            deaf=deaf,
        )

    async def refresh(self) -> OAuth2Token:
        """Trades the refresh token for a new pair and stores it"""
        if not self.refresh_token:
            raise PreconditionFailed("No refresh token is set on this session.")
        token = await self.client.refresh_token(self.refresh_token)
        self.set_token(token)
        return token

    async def revoke(self) -> None:
        """Revokes the current grant and clears both tokens

        Raises
        -------
        PreconditionFailed
            The access token or the refresh token is not set.
        """
        await self.client.revoke_token(self.access_token, self.refresh_token)
        self.access_token = None
        self.refresh_token = None
