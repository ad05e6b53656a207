# SPDX-License-Identifier: MIT

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, Optional, Type

if TYPE_CHECKING:
    from aiohttp import ClientResponse

__all__ = (
    "CordAuthException",
    "HTTPException",
    "BadRequest",
    "InvalidAccessToken",
    "Forbidden",
    "NotFound",
    "RateLimited",
    "UpstreamServerError",
    "Unclassified",
    "PreconditionFailed",
    "ValidationError",
    "classify",
    "http_exception_from",
)


class CordAuthException(Exception):
    """Base exception class for cordauth.

    Every error raised by this library can be caught with this class.
    """

    pass


class HTTPException(CordAuthException):
    """Exception that's raised when an HTTP request operation fails.

    Attributes
    ----------
    status: Optional[:class:`int`]
        The status code of the HTTP request, ``None`` when no response was received.
    message: :class:`str`
        Discord's error message, or the default message for the status.
    context: Optional[:class:`str`]
        The JSON-serialized response body. Only set when Discord
        returned a ``message`` of its own.
    response: Optional[:class:`aiohttp.ClientResponse`]
        The response of the failed HTTP request.
    """

    default_message: str = "An unexpected error occurred."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status: Optional[int] = None,
        context: Optional[str] = None,
        response: Optional[ClientResponse] = None,
    ) -> None:
        self.status: Optional[int] = status
        self.message: str = message or self.default_message
        self.context: Optional[str] = context
        self.response: Optional[ClientResponse] = response

        fmt = "{0} (status code: {1})"
        super().__init__(fmt.format(self.message, status) if status is not None else self.message)


class BadRequest(HTTPException):
    """Exception that's raised for when status code 400 occurs."""

    default_message = "The request was malformed or invalid."


class InvalidAccessToken(HTTPException):
    """Exception that's raised for when status code 401 occurs.

    The access token is invalid, revoked or expired.
    """

    default_message = "The access token is invalid or has expired."


class Forbidden(HTTPException):
    """Exception that's raised for when status code 403 occurs."""

    default_message = "Access to this resource is forbidden."


class NotFound(HTTPException):
    """Exception that's raised for when status code 404 occurs."""

    default_message = "The requested resource was not found."


class RateLimited(HTTPException):
    """Exception that's raised for when status code 429 occurs.

    The request is not retried.

    Attributes
    ----------
    retry_after: Optional[:class:`float`]
        The amount of seconds Discord asked to wait, if it said so.
    """

    default_message = "You are being rate limited."

    def __init__(self, *args: Any, retry_after: Optional[float] = None, **kwargs: Any) -> None:
        self.retry_after: Optional[float] = retry_after
        super().__init__(*args, **kwargs)


class UpstreamServerError(HTTPException):
    """Exception that's raised for when status code 500 occurs."""

    default_message = "Discord encountered an internal server error."


class Unclassified(HTTPException):
    """Exception that's raised for any other failing status code,
    or when the request never got a response at all.
    """

    default_message = "An unexpected error occurred."


class PreconditionFailed(CordAuthException):
    """Exception that's raised when an operation is called without
    the state it needs, such as revoking without both tokens set.

    No request is made when this is raised.
    """

    pass


class ValidationError(CordAuthException, ValueError):
    """Exception that's raised when an argument has the wrong shape."""

    pass


_STATUS_ERRORS: Dict[int, Type[HTTPException]] = {
    400: BadRequest,
    401: InvalidAccessToken,
    403: Forbidden,
    404: NotFound,
    429: RateLimited,
    500: UpstreamServerError,
}


def classify(status: int) -> Type[HTTPException]:
    """Returns the exception class for a failing HTTP status code."""
    return _STATUS_ERRORS.get(status, Unclassified)


def http_exception_from(
    status: int,
    body: Any,
    response: Optional[ClientResponse] = None,
) -> HTTPException:
    """Builds the exception for a failed response.

    If ``body`` carries Discord's own ``message`` it replaces the default
    message and the whole body is kept as ``context``.

    Parameters
    ----------
    status: :class:`int`
        The status code of the response.
    body: Any
        The decoded response body.
    response: Optional[:class:`aiohttp.ClientResponse`]
        The response itself.
    """
    cls = classify(status)
    message: Optional[str] = None
    context: Optional[str] = None

    if isinstance(body, dict) and "message" in body:
        message = str(body["message"])
        context = json.dumps(body)

    kwargs: Dict[str, Any] = {"status": status, "context": context, "response": response}
    if cls is RateLimited and isinstance(body, dict):
        retry_after = body.get("retry_after")
        if isinstance(retry_after, (int, float)) and not isinstance(retry_after, bool):
            kwargs["retry_after"] = float(retry_after)

    return cls(message, **kwargs)
