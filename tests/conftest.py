"""
Shared fixtures: an in-memory user store and a TestClient wired to it.
"""

from __future__ import annotations

import uuid
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from database.models import User
from database.store import StoreError, UserStore
from main import create_app


class InMemoryUserStore(UserStore):
    """
    ``UserStore`` kept in a dict, with the same uniqueness rules as the
    ``users`` table: unique name, unique lower(email), unique token.
    """

    def __init__(self) -> None:
        self.users: Dict[uuid.UUID, User] = {}

    async def find_by_email(self, email: str) -> Optional[User]:
        wanted = email.lower()
        for user in self.users.values():
            if user.email.lower() == wanted:
                return user
        return None

    async def find_by_access_token(self, access_token: str) -> Optional[User]:
        for user in self.users.values():
            if user.access_token == access_token:
                return user
        return None

    async def create(self, *, name: str, email: str, password: str, access_token: str) -> User:
        for field, taken in (
            ("name", any(u.name == name for u in self.users.values())),
            ("email", any(u.email.lower() == email.lower() for u in self.users.values())),
            ("accessToken", any(u.access_token == access_token for u in self.users.values())),
        ):
            if taken:
                raise StoreError(
                    f"duplicate key value violates unique constraint on {field}",
                    {field: {"message": f"{field} already exists", "kind": "unique", "path": field}},
                )
        user = User(
            id=uuid.uuid4(),
            name=name,
            email=email,
            password=password,
            access_token=access_token,
        )
        self.users[user.id] = user
        return user


@pytest.fixture
def settings() -> Settings:
    return Settings(bcrypt_rounds=4, database_url="postgresql+asyncpg://unused/test")


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def client(settings, store):
    app = create_app(settings=settings, store=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user and return the response JSON."""

    def _register(name: str = "ann", email: str = "Ann@x.com", password: str = "pw1") -> dict:
        response = client.post(
            "/users", json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register
