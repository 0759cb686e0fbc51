# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Bank account model."""

from __future__ import annotations

import uuid as uuid_lib
from typing import TYPE_CHECKING

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from amanah.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from amanah.models.account_type import AccountType


class BankAccount(Base, TimestampMixin):
    """Institution bank account that account types settle into."""

    __tablename__ = "bank_accounts"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    account_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False
    )

    account_types: Mapped[list[AccountType]] = relationship(
        "AccountType", back_populates="bank_account"
    )
