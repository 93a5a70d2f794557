"""
FastAPI dependencies for authentication.

Provides ``get_settings``, ``get_user_store`` and ``get_current_user``
dependencies that are used across the routes.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, Request, status

from api.errors import ApiError
from config.settings import Settings
from database.models import User
from database.store import UserStore

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_store(request: Request) -> UserStore:
    """Return the store the application was started with."""
    return request.app.state.store


def _extract_token(authorization: Optional[str]) -> Optional[str]:
    """Accept both a raw token and ``Bearer <token>``."""
    if authorization is None:
        return None
    token = authorization.strip()
    if token.lower().startswith(_BEARER_PREFIX):
        token = token[len(_BEARER_PREFIX):].strip()
    return token or None


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    store: UserStore = Depends(get_user_store),
) -> User:
    """
    Resolve the ``Authorization`` header to a stored user.

    Raises ``ApiError(401)`` when the header is absent and
    ``ApiError(403)`` when no user holds the presented token.  The
    resolved id is kept on ``request.state`` for the request log.
    """
    token = _extract_token(authorization)
    if token is None:
        logger.warning("Rejected request: access token missing")
        raise ApiError.with_message(status.HTTP_401_UNAUTHORIZED, "Access token is missing")

    user = await store.find_by_access_token(token)
    if user is None:
        logger.warning("Rejected request: invalid access token")
        raise ApiError.with_message(status.HTTP_403_FORBIDDEN, "Invalid access token")

    request.state.user_id = str(user.id)
    return user
