# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Account type model."""

from __future__ import annotations

import uuid as uuid_lib
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from amanah.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from amanah.models.bank_account import BankAccount


class AccountType(Base, TimestampMixin):
    """Product definition for member and customer accounts."""

    __tablename__ = "account_types"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    bank_account_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("bank_accounts.id", ondelete="RESTRICT"),
        nullable=False,
    )
    processing_fee: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    is_member_account: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    can_take_loan: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_dividend_eligible: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    documents_required: Mapped[list[str]] = mapped_column(
        JSON, default=list, nullable=False
    )

    bank_account: Mapped[BankAccount] = relationship(
        "BankAccount", back_populates="account_types"
    )
