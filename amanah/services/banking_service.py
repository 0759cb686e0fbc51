# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Bank account and account type service."""

import uuid

from sqlalchemy.orm import Session

from amanah.models import AccountType, BankAccount
from amanah.schemas.banking import (
    AccountTypeCreate,
    AccountTypeUpdate,
    BankAccountCreate,
    BankAccountUpdate,
)


def get_bank_accounts(db: Session) -> list[BankAccount]:
    return db.query(BankAccount).order_by(BankAccount.name).all()


def get_bank_account(db: Session, account_id: uuid.UUID) -> BankAccount | None:
    return db.query(BankAccount).filter(BankAccount.id == account_id).first()


def get_bank_account_by_number(db: Session, account_number: str) -> BankAccount | None:
    return (
        db.query(BankAccount)
        .filter(BankAccount.account_number == account_number)
        .first()
    )


def create_bank_account(db: Session, data: BankAccountCreate) -> BankAccount:
    account = BankAccount(**data.model_dump())
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def update_bank_account(
    db: Session, account: BankAccount, data: BankAccountUpdate
) -> BankAccount:
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(account, field, value)
    db.commit()
    db.refresh(account)
    return account


def delete_bank_account(db: Session, account: BankAccount) -> None:
    """Delete a bank account.

    Raises:
        ValueError: If account types still settle into this account
    """
    in_use = (
        db.query(AccountType).filter(AccountType.bank_account_id == account.id).count()
    )
    if in_use:
        raise ValueError(
            f"Bank account is used by {in_use} account type(s) and cannot be deleted"
        )
    db.delete(account)
    db.commit()


def get_account_types(db: Session, include_inactive: bool = True) -> list[AccountType]:
    query = db.query(AccountType)
    if not include_inactive:
        query = query.filter(AccountType.is_active == True)  # noqa: E712
    return query.order_by(AccountType.name).all()


def get_account_type(db: Session, account_type_id: uuid.UUID) -> AccountType | None:
    return db.query(AccountType).filter(AccountType.id == account_type_id).first()


def get_account_type_by_name(db: Session, name: str) -> AccountType | None:
    return db.query(AccountType).filter(AccountType.name == name).first()


def create_account_type(db: Session, data: AccountTypeCreate) -> AccountType:
    """Create an account type.

    Raises:
        ValueError: If the referenced bank account does not exist
    """
    if not get_bank_account(db, data.bank_account_id):
        raise ValueError("Bank account not found")

    account_type = AccountType(**data.model_dump())
    db.add(account_type)
    db.commit()
    db.refresh(account_type)
    return account_type


def update_account_type(
    db: Session, account_type: AccountType, data: AccountTypeUpdate
) -> AccountType:
    updates = data.model_dump(exclude_unset=True)
    bank_account_id = updates.get("bank_account_id")
    if bank_account_id is not None and not get_bank_account(db, bank_account_id):
        raise ValueError("Bank account not found")

    for field, value in updates.items():
        # Only the description may be cleared
        if value is None and field != "description":
            continue
        setattr(account_type, field, value)
    db.commit()
    db.refresh(account_type)
    return account_type


def delete_account_type(db: Session, account_type: AccountType) -> None:
    db.delete(account_type)
    db.commit()
