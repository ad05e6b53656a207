# SPDX-License-Identifier: MIT

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Union

from .errors import ValidationError

if TYPE_CHECKING:
    from aiohttp import ClientResponse

__all__ = (
    "MISSING",
    "json_or_text",
    "parse_snowflake",
    "require_str",
)

_SNOWFLAKE_MAX = (1 << 64) - 1


class _MissingSentinel:
    __slots__ = ()

    def __eq__(self, other: Any) -> bool:
        return False

    def __bool__(self) -> bool:
        return False

    def __hash__(self) -> int:
        return 0

    def __repr__(self) -> str:
        return "..."


MISSING: Any = _MissingSentinel()


async def json_or_text(response: ClientResponse) -> Any:
    """Decodes a response body as JSON when Discord says it is JSON, text otherwise."""
    text = await response.text(encoding="utf-8", errors="replace")
    content_type = response.headers.get("Content-Type", "")
    if content_type.startswith("application/json") and text:
        try:
            return json.loads(text)
        except ValueError:
            return text
    return text


def parse_snowflake(value: Union[int, str], *, name: str = "id") -> str:
    """Parses a Discord ID into its wire form.

    Parameters
    ----------
    value: Union[:class:`int`, :class:`str`]
        The ID to parse.
    name: :class:`str`
        The argument name used in the error message.

    Raises
    ------
    ValidationError
        The value is not a 64-bit unsigned integer.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a snowflake, not bool")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        number = int(value)
    else:
        raise ValidationError(f"{name} must be a snowflake, got {value!r}")

    if not 0 <= number <= _SNOWFLAKE_MAX:
        raise ValidationError(f"{name} is out of the snowflake range: {value!r}")
    return str(number)


def require_str(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{name} must be a non-empty str, not {type(value).__name__}")
    return value
