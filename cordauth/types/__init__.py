# SPDX-License-Identifier: MIT

"""Typed payloads returned by Discord's OAuth2 endpoints."""
