# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Bank account API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from amanah.api.deps import require_permission
from amanah.database import get_db
from amanah.schemas.banking import (
    BankAccountCreate,
    BankAccountResponse,
    BankAccountUpdate,
)
from amanah.schemas.principal import Principal
from amanah.services import banking_service

router = APIRouter()


@router.get("", response_model=list[BankAccountResponse])
def list_bank_accounts(
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("bank_accounts", "read")),
) -> list[BankAccountResponse]:
    """List all bank accounts."""
    accounts = banking_service.get_bank_accounts(db)
    return [BankAccountResponse.model_validate(a) for a in accounts]


@router.post("", response_model=BankAccountResponse, status_code=status.HTTP_201_CREATED)
def create_bank_account(
    data: BankAccountCreate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("bank_accounts", "create")),
) -> BankAccountResponse:
    """Create a bank account."""
    if banking_service.get_bank_account_by_number(db, data.account_number):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Account number already exists",
        )
    account = banking_service.create_bank_account(db, data)
    return BankAccountResponse.model_validate(account)


@router.put("/{account_id}", response_model=BankAccountResponse)
def update_bank_account(
    account_id: uuid.UUID,
    data: BankAccountUpdate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("bank_accounts", "update")),
) -> BankAccountResponse:
    """Update a bank account."""
    account = banking_service.get_bank_account(db, account_id)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bank account not found",
        )

    if data.account_number:
        existing = banking_service.get_bank_account_by_number(db, data.account_number)
        if existing and existing.id != account_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Account number already exists",
            )

    account = banking_service.update_bank_account(db, account, data)
    return BankAccountResponse.model_validate(account)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bank_account(
    account_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("bank_accounts", "delete")),
) -> None:
    """Delete a bank account that no account type references."""
    account = banking_service.get_bank_account(db, account_id)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bank account not found",
        )
    try:
        banking_service.delete_bank_account(db, account)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
