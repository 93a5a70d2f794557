"""
Auth API routes — register a user, open a session.

Routes: POST /users, POST /sessions
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from api.errors import ApiError, store_error_body
from auth.dependencies import get_settings, get_user_store
from auth.password import hash_password, verify_password
from auth.tokens import generate_access_token
from config.settings import Settings
from database.store import StoreError, UserStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterResponse(BaseModel):
    id: str
    access_token: str = Field(serialization_alias="accessToken")


class SessionResponse(BaseModel):
    user_id: str = Field(serialization_alias="userId")
    access_token: str = Field(serialization_alias="accessToken")


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post(
    "/users",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    req: RegisterRequest,
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Register a new user and issue its access token."""
    if not req.name or not req.email or not req.password:
        raise ApiError.with_message(status.HTTP_400_BAD_REQUEST, "All fields are required")

    try:
        existing = await store.find_by_email(req.email)
        if existing is not None:
            logger.warning("Registration refused: email already registered")
            raise ApiError.with_message(status.HTTP_409_CONFLICT, "User already exists")

        password_hash = await run_in_threadpool(
            hash_password, req.password, settings.bcrypt_rounds
        )
        user = await store.create(
            name=req.name,
            email=req.email,
            password=password_hash,
            access_token=generate_access_token(settings.access_token_bytes),
        )
    except StoreError as exc:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            store_error_body(exc, "Could not create user"),
        )
    except ValueError as exc:
        # bcrypt refuses some inputs, e.g. passwords longer than 72 bytes
        hasher_error = StoreError(
            str(exc),
            {"password": {"message": str(exc), "kind": "invalid", "path": "password"}},
        )
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            store_error_body(hasher_error, "Could not create user"),
        )

    logger.info("Registered user %s (%s)", user.name, user.id)
    return {"id": str(user.id), "access_token": user.access_token}


@router.post("/sessions", response_model=SessionResponse)
async def login(
    req: LoginRequest,
    store: UserStore = Depends(get_user_store),
) -> Dict[str, Any]:
    """Login with email + password; returns the user's existing token."""
    user = await store.find_by_email(req.email) if req.email else None

    if user is None:
        logger.warning("Login failed: unknown email")
        raise ApiError(status.HTTP_404_NOT_FOUND)

    if not await run_in_threadpool(verify_password, req.password or "", user.password):
        logger.warning("Login failed: wrong password for %s", user.id)
        raise ApiError(status.HTTP_400_BAD_REQUEST)

    logger.info("Login: %s (%s)", user.name, user.id)
    return {"user_id": str(user.id), "access_token": user.access_token}
