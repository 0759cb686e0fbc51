# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for banking_service."""

import uuid
from decimal import Decimal

import pytest

from amanah.schemas.banking import (
    AccountTypeCreate,
    AccountTypeUpdate,
    BankAccountCreate,
    BankAccountUpdate,
)
from amanah.services import banking_service


def make_account(db_session, number: str = "001-100"):
    return banking_service.create_bank_account(
        db_session, BankAccountCreate(name="Operations", account_number=number)
    )


def test_bank_account_crud(db_session):
    account = make_account(db_session)
    assert banking_service.get_bank_account_by_number(db_session, "001-100") == account

    updated = banking_service.update_bank_account(
        db_session, account, BankAccountUpdate(name="Zakat Fund")
    )
    assert updated.name == "Zakat Fund"
    assert updated.account_number == "001-100"

    banking_service.delete_bank_account(db_session, updated)
    assert banking_service.get_bank_accounts(db_session) == []


def test_account_type_crud(db_session):
    account = make_account(db_session)
    account_type = banking_service.create_account_type(
        db_session,
        AccountTypeCreate(
            name="Mudarabah Savings",
            bank_account_id=account.id,
            processing_fee=Decimal("2.50"),
            is_member_account=True,
            is_dividend_eligible=True,
            documents_required=["national_id"],
        ),
    )
    assert account_type.processing_fee == Decimal("2.50")
    assert account_type.documents_required == ["national_id"]

    updated = banking_service.update_account_type(
        db_session,
        account_type,
        AccountTypeUpdate(is_active=False, description=None, name=None),
    )
    assert updated.is_active is False
    assert updated.name == "Mudarabah Savings"

    assert banking_service.get_account_types(db_session, include_inactive=False) == []
    assert len(banking_service.get_account_types(db_session)) == 1

    banking_service.delete_account_type(db_session, updated)
    assert banking_service.get_account_type(db_session, updated.id) is None


def test_account_type_requires_existing_bank_account(db_session):
    with pytest.raises(ValueError, match="Bank account not found"):
        banking_service.create_account_type(
            db_session, AccountTypeCreate(name="Qard", bank_account_id=uuid.uuid4())
        )


def test_bank_account_in_use_cannot_be_deleted(db_session):
    account = make_account(db_session)
    banking_service.create_account_type(
        db_session, AccountTypeCreate(name="Qard", bank_account_id=account.id)
    )

    with pytest.raises(ValueError, match="cannot be deleted"):
        banking_service.delete_bank_account(db_session, account)
