"""
SQLAlchemy ORM models for the user store.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Column, Index, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("name", name="uq_users_name"),
        UniqueConstraint("access_token", name="uq_users_access_token"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(128), nullable=False)
    email = Column(String(255), nullable=False)  # stored as given
    password = Column(String(255), nullable=False)  # bcrypt hash, never plaintext
    access_token = Column(String(128), nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.id} name={self.name!r}>"


# Emails compare case-insensitively, so uniqueness is on lower(email).
Index("uq_users_email", func.lower(User.email), unique=True)
