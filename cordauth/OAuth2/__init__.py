# SPDX-License-Identifier: MIT

"""OAuth2 API Wrapper for Discord

This module provides OAuth2 functionality for Discord's API.
"""

from .client import OAuth2Client
from .token import OAuth2Token
from .session import OAuth2Session

__all__ = (
    'OAuth2Client',
    'OAuth2Token',
    'OAuth2Session'
)
