# SPDX-License-Identifier: MIT

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

from .errors import ValidationError
from .utils import parse_snowflake, require_str

__all__ = (
    "OAuth2Credentials",
    "load_scopes",
)

ENV_CLIENT_ID = "DISCORD_CLIENT_ID"
ENV_CLIENT_SECRET = "DISCORD_CLIENT_SECRET"
ENV_REDIRECT_URI = "DISCORD_REDIRECT_URI"
ENV_BOT_TOKEN = "DISCORD_BOT_TOKEN"
ENV_SCOPES = "DISCORD_OAUTH2_SCOPES"


@dataclass(frozen=True)
class OAuth2Credentials:
    """The application's OAuth2 credentials.

    Parameters
    -----------
    client_id: :class:`str`
        The client ID provided by Discord.
    client_secret: :class:`str`
        The client secret provided by Discord.
    redirect_uri: :class:`str`
        The redirect URI registered for the OAuth2 flow.
    client_token: Optional[:class:`str`]
        The bot token, needed to add users to guilds and to fetch the application.
    """

    client_id: str
    client_secret: str
    redirect_uri: str
    client_token: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "client_id", parse_snowflake(self.client_id, name="client_id"))
        require_str(self.client_secret, "client_secret")
        require_str(self.redirect_uri, "redirect_uri")
        if self.client_token is not None:
            require_str(self.client_token, "client_token")

    def __repr__(self) -> str:
        return f"<OAuth2Credentials client_id={self.client_id!r} redirect_uri={self.redirect_uri!r}>"

    @classmethod
    def from_env(cls) -> OAuth2Credentials:
        """Reads the credentials from the environment, or a ``.env`` file."""
        load_dotenv()
        missing = [
            name for name in (ENV_CLIENT_ID, ENV_CLIENT_SECRET, ENV_REDIRECT_URI)
            if not os.environ.get(name)
        ]
        if missing:
            raise ValidationError(f"Missing environment variables: {', '.join(missing)}")

        return cls(
            client_id=os.environ[ENV_CLIENT_ID],
            client_secret=os.environ[ENV_CLIENT_SECRET],
            redirect_uri=os.environ[ENV_REDIRECT_URI],
            client_token=os.environ.get(ENV_BOT_TOKEN) or None,
        )


def load_scopes(default: Optional[List[str]] = None) -> List[str]:
    """Reads the space separated scopes from ``DISCORD_OAUTH2_SCOPES``."""
    load_dotenv()
    raw = os.environ.get(ENV_SCOPES, "")
    scopes = raw.split()
    if scopes:
        return scopes
    return list(default) if default is not None else []
