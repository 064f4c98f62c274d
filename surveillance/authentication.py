"""
Token authentication for the reporting API.

Login and token issuing live outside this project; clients send the
token they were given in the ``Authorization: Token <key>`` header.
Keeping the class here gives the settings a stable import path and
avoids circular imports when REST framework loads authentication
classes during initialization.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """DRF token authentication using the ``Token`` keyword."""

    keyword = 'Token'
