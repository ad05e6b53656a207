# SPDX-License-Identifier: MIT

from __future__ import annotations

from typing import Dict, Optional

from ..errors import ValidationError
from ..types.oauth2 import Token

__all__ = ("OAuth2Token",)


class OAuth2Token:
    """The tokens returned by a code exchange or refresh.

    Nothing here tracks expiry; ``expires_in`` is passed through as Discord sent it.

    Parameters
    -----------
    token_data: :class:`dict`
        The raw ``/oauth2/token`` response.
    """

    __slots__ = ("_token_data", "_access_token", "_refresh_token", "_token_type", "_expires_in", "_scope")

    def __init__(self, token_data: Token) -> None:
        if not isinstance(token_data, dict) or not isinstance(token_data.get("access_token"), str):
            raise ValidationError("Token response is missing access_token")

        self._token_data: Token = token_data
        self._access_token: str = token_data["access_token"]
        self._refresh_token: Optional[str] = token_data.get("refresh_token")
        self._token_type: str = token_data.get("token_type", "Bearer")
        self._expires_in: Optional[int] = token_data.get("expires_in")
        self._scope: Optional[str] = token_data.get("scope")

    def __repr__(self) -> str:
        return f"<OAuth2Token token_type={self._token_type!r} scope={self._scope!r}>"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, OAuth2Token) and other._token_data == self._token_data

    __hash__ = None  # type: ignore[assignment]

    @property
    def access_token(self) -> str:
        return self._access_token

    @property
    def refresh_token(self) -> Optional[str]:
        return self._refresh_token

    @property
    def token_type(self) -> str:
        return self._token_type

    @property
    def expires_in(self) -> Optional[int]:
        return self._expires_in

    @property
    def scope(self) -> Optional[str]:
        return self._scope

    def get_auth_header(self) -> Dict[str, str]:
        return {"Authorization": f"{self.token_type} {self.access_token}"}

    def to_dict(self) -> Token:
        return self._token_data
