"""
Token authentication for the clinic API.

Kept apart from the views so DRF can import it from settings without
pulling in the view modules.  Clients send ``Authorization: Token <key>``
with the key returned by the login endpoint; JWT clients use ``Bearer``
and are handled by simplejwt.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    keyword = 'Token'
