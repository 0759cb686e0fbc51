# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Bank account and account type schemas."""

import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class BankAccountCreate(BaseModel):
    """Schema for creating a bank account."""

    name: str = Field(..., min_length=1, max_length=200)
    account_number: str = Field(..., min_length=1, max_length=50)


class BankAccountUpdate(BaseModel):
    """Schema for updating a bank account."""

    name: str | None = Field(None, min_length=1, max_length=200)
    account_number: str | None = Field(None, min_length=1, max_length=50)


class BankAccountResponse(BaseModel):
    """Schema for bank account response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    account_number: str


class AccountTypeCreate(BaseModel):
    """Schema for creating an account type."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    bank_account_id: uuid.UUID
    processing_fee: Decimal = Field(default=Decimal("0"), ge=0)
    is_member_account: bool = False
    can_take_loan: bool = False
    is_dividend_eligible: bool = False
    is_active: bool = True
    documents_required: list[str] = []


class AccountTypeUpdate(BaseModel):
    """Schema for updating an account type."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    bank_account_id: uuid.UUID | None = None
    processing_fee: Decimal | None = Field(None, ge=0)
    is_member_account: bool | None = None
    can_take_loan: bool | None = None
    is_dividend_eligible: bool | None = None
    is_active: bool | None = None
    documents_required: list[str] | None = None


class AccountTypeResponse(BaseModel):
    """Schema for account type response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None
    bank_account_id: uuid.UUID
    processing_fee: Decimal
    is_member_account: bool
    can_take_loan: bool
    is_dividend_eligible: bool
    is_active: bool
    documents_required: list[str]
