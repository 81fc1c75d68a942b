from __future__ import annotations

import datetime as dt
from typing import Literal
from uuid import UUID

import sqlalchemy as sa  # type: ignore[import-not-found]
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column  # type: ignore[import-not-found]

Role = Literal["admin", "editor", "author"]
ROLES: tuple[str, ...] = ("admin", "editor", "author")
DEFAULT_ROLE: Role = "author"


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        sa.CheckConstraint("role IN ('admin', 'editor', 'author')", name="users_role_check"),
    )
    # Fetch server-side created_at on insert; no lazy loads under asyncio.
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(sa.Integer(), sa.Identity(), primary_key=True)
    email: Mapped[str] = mapped_column(sa.Text(), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(sa.Text(), nullable=False, default="")
    password_hash: Mapped[str] = mapped_column(sa.Text(), nullable=False)
    role: Mapped[str] = mapped_column(sa.Text(), nullable=False, default=DEFAULT_ROLE)
    created_at: Mapped[dt.datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
    )
    last_login_at: Mapped[dt.datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )


class Session(Base):
    __tablename__ = "sessions"

    id: Mapped[UUID] = mapped_column(sa.Uuid(), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token_hash: Mapped[str] = mapped_column(sa.Text(), nullable=False, unique=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
    )
    expires_at: Mapped[dt.datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False
    )
    user_agent: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    ip: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
