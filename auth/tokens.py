"""
Opaque access tokens.

A token is drawn once per user from the OS CSPRNG and stored verbatim;
it carries no payload, so there is nothing to decode or expire.
"""

from __future__ import annotations

import secrets
from typing import Optional

from config.settings import config


def generate_access_token(nbytes: Optional[int] = None) -> str:
    """Return a URL-safe random token (``nbytes`` of entropy)."""
    return secrets.token_urlsafe(nbytes or config.access_token_bytes)
