# SPDX-License-Identifier: MIT

"""
cordauth
~~~~~~~~

A small asynchronous client for Discord's OAuth2 flow.

:license: MIT
"""

__title__ = "cordauth"
__version__ = "0.1.0"

import logging

from .errors import *
from .http import HTTPClient, Route
from .config import OAuth2Credentials
from .OAuth2 import OAuth2Client, OAuth2Session, OAuth2Token
from .types.oauth2 import OAuth2Scope

logging.getLogger(__name__).addHandler(logging.NullHandler())
