# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Account type API endpoints."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from amanah.api.deps import require_permission
from amanah.database import get_db
from amanah.schemas.banking import (
    AccountTypeCreate,
    AccountTypeResponse,
    AccountTypeUpdate,
)
from amanah.schemas.principal import Principal
from amanah.services import banking_service

router = APIRouter()


@router.get("", response_model=list[AccountTypeResponse])
def list_account_types(
    include_inactive: bool = True,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("account_types", "read")),
) -> list[AccountTypeResponse]:
    """List account types."""
    account_types = banking_service.get_account_types(db, include_inactive)
    return [AccountTypeResponse.model_validate(t) for t in account_types]


@router.post("", response_model=AccountTypeResponse, status_code=status.HTTP_201_CREATED)
def create_account_type(
    data: AccountTypeCreate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("account_types", "manage")),
) -> AccountTypeResponse:
    """Create an account type."""
    if banking_service.get_account_type_by_name(db, data.name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Account type with this name already exists",
        )
    try:
        account_type = banking_service.create_account_type(db, data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    return AccountTypeResponse.model_validate(account_type)


@router.put("/{account_type_id}", response_model=AccountTypeResponse)
def update_account_type(
    account_type_id: uuid.UUID,
    data: AccountTypeUpdate,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("account_types", "manage")),
) -> AccountTypeResponse:
    """Update an account type."""
    account_type = banking_service.get_account_type(db, account_type_id)
    if not account_type:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account type not found",
        )

    if data.name:
        existing = banking_service.get_account_type_by_name(db, data.name)
        if existing and existing.id != account_type_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Account type with this name already exists",
            )

    try:
        account_type = banking_service.update_account_type(db, account_type, data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    return AccountTypeResponse.model_validate(account_type)


@router.delete("/{account_type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account_type(
    account_type_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(require_permission("account_types", "delete")),
) -> None:
    """Delete an account type."""
    account_type = banking_service.get_account_type(db, account_type_id)
    if not account_type:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account type not found",
        )
    banking_service.delete_account_type(db, account_type)
