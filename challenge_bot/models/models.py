"""
ORM models for the challenge registration bot.

Domain overview
---------------
User          — Telegram account, optionally linked to an e-mail address
  └─ RegistrationRecord — the user's single challenge submission
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from challenge_bot.models.base import Base
from challenge_bot.models.entities import RegistrationStatus


class User(Base):
    """Telegram user / potential rider."""
    __tablename__ = "users"

    id:          Mapped[int]           = mapped_column(Integer, primary_key=True, autoincrement=True)
    telegram_id: Mapped[int]           = mapped_column(BigInteger, unique=True, index=True)
    username:    Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    first_name:  Mapped[str]           = mapped_column(String(255))
    last_name:   Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email:       Mapped[Optional[str]] = mapped_column(String(320), unique=True, nullable=True)
    created_at:  Mapped[datetime]      = mapped_column(DateTime, default=func.now())

    registration: Mapped[Optional["RegistrationRecord"]] = relationship(
        back_populates="user", uselist=False
    )

    @property
    def display_name(self) -> str:
        parts = [self.first_name]
        if self.last_name:
            parts.append(self.last_name)
        return " ".join(parts)


class RegistrationRecord(Base):
    """
    Persisted challenge registration.

    `user_id` is UNIQUE: the database is the authoritative guard against a
    second submission from the same account.
    """
    __tablename__ = "registrations"

    id:                      Mapped[str]      = mapped_column(String(36), primary_key=True)
    user_id:                 Mapped[int]      = mapped_column(
        BigInteger, ForeignKey("users.telegram_id"), unique=True, index=True
    )
    full_name:               Mapped[str]      = mapped_column(String(255))
    mobile_number:           Mapped[str]      = mapped_column(String(32))
    email_address:           Mapped[str]      = mapped_column(String(320))
    full_address:            Mapped[str]      = mapped_column(String(1000))
    gender:                  Mapped[str]      = mapped_column(String(20))
    strava_profile_link:     Mapped[str]      = mapped_column(String(500))
    tshirt_size:             Mapped[str]      = mapped_column(String(10), default="")
    delivery_address:        Mapped[str]      = mapped_column(String(1000), default="")
    payment_screenshot_url:  Mapped[str]      = mapped_column(String(1000))
    payment_screenshot_name: Mapped[str]      = mapped_column(String(255))
    where_heard:             Mapped[str]      = mapped_column(String(100))
    payment_tier:            Mapped[str]      = mapped_column(String(20))     # PaymentTier.*
    status:                  Mapped[str]      = mapped_column(String(20), default=RegistrationStatus.PENDING)
    created_at:              Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at:              Mapped[datetime] = mapped_column(DateTime, default=func.now())

    user: Mapped["User"] = relationship(back_populates="registration")
