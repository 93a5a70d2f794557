"""
User store — the find/insert operations the HTTP layer needs.

``UserStore`` is the interface handlers depend on; ``SqlAlchemyUserStore``
implements it on top of a ``Database``.  Every SQLAlchemy failure leaves
this module as a ``StoreError`` carrying field-level details.
"""

from __future__ import annotations

import logging
import re
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database.models import User
from database.session import Database

logger = logging.getLogger(__name__)

# column name → JSON field name used in API error payloads
_COLUMN_FIELDS = {
    "name": "name",
    "email": "email",
    "password": "password",
    "access_token": "accessToken",
}

_COLUMN_PATTERNS = (
    re.compile(r"uq_users_(\w+)"),          # named constraints / indexes
    re.compile(r"users\.(\w+)"),            # sqlite: "UNIQUE constraint failed: users.name"
    re.compile(r'column "(\w+)"'),          # postgres not-null violations
)


class StoreError(Exception):
    """A store operation failed; ``errors`` maps field → details."""

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.errors: Dict[str, Any] = errors or {}

    @classmethod
    def from_exception(cls, exc: SQLAlchemyError) -> "StoreError":
        orig = getattr(exc, "orig", None)
        text = str(orig) if orig is not None else str(exc)
        message = text.strip().splitlines()[0] if text.strip() else exc.__class__.__name__
        errors = field_errors(text) if isinstance(exc, IntegrityError) else {}
        return cls(message, errors)


def field_errors(text: str) -> Dict[str, Any]:
    """Derive ``{field: {message, kind, path}}`` from a driver error message."""
    lowered = text.lower()
    if "unique" in lowered or "duplicate" in lowered:
        kind = "unique"
    elif "null" in lowered:
        kind = "required"
    else:
        kind = "invalid"

    errors: Dict[str, Any] = {}
    for pattern in _COLUMN_PATTERNS:
        for column in pattern.findall(text):
            field = _COLUMN_FIELDS.get(column)
            if field is None or field in errors:
                continue
            if kind == "unique":
                message = f"{field} already exists"
            elif kind == "required":
                message = f"{field} is required"
            else:
                message = f"{field} is invalid"
            errors[field] = {"message": message, "kind": kind, "path": field}
    return errors


class UserStore(ABC):
    """Abstract user collection: lookups return ``User`` or ``None``."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by email."""
        ...

    @abstractmethod
    async def find_by_access_token(self, access_token: str) -> Optional[User]:
        ...

    @abstractmethod
    async def create(
        self,
        *,
        name: str,
        email: str,
        password: str,
        access_token: str,
    ) -> User:
        """
        Insert a new user and return it with its assigned ``id``.

        ``password`` must already be hashed.  Raises ``StoreError`` when a
        uniqueness or not-null constraint rejects the insert.
        """
        ...


class SqlAlchemyUserStore(UserStore):
    """``UserStore`` backed by the ``users`` table."""

    def __init__(self, database: Database):
        self._db = database

    async def find_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return await self._first(stmt)

    async def find_by_access_token(self, access_token: str) -> Optional[User]:
        stmt = select(User).where(User.access_token == access_token)
        return await self._first(stmt)

    async def create(
        self,
        *,
        name: str,
        email: str,
        password: str,
        access_token: str,
    ) -> User:
        user = User(
            id=uuid.uuid4(),
            name=name,
            email=email,
            password=password,
            access_token=access_token,
        )
        try:
            async with self._db.session() as session:
                session.add(user)
                await session.flush()
        except SQLAlchemyError as exc:
            logger.warning("Insert of user %r rejected: %s", name, exc.__class__.__name__)
            raise StoreError.from_exception(exc) from exc
        return user

    async def _first(self, stmt) -> Optional[User]:
        try:
            async with self._db.session() as session:
                result = await session.execute(stmt)
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.error("User lookup failed: %s", exc)
            raise StoreError.from_exception(exc) from exc
