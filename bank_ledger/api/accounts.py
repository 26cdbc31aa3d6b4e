"""
Account management endpoints
"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query, status

from .deps import get_bank_system
from .schemas import (
    CreateAccountRequest, CreateAccountsRequest, UpdateNameRequest,
    OverdraftLimitRequest, AccountModel, accounts_payload, parse_amount
)
from ..system import BankSystem


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_account(
    request: CreateAccountRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Create a new account"""
    overdraft_limit = parse_amount(request.overdraft_limit, "overdraft_limit")
    account_id = system.ledger.create_account(request.name, overdraft_limit)
    return {
        "account_id": account_id,
        "message": "Account created successfully"
    }


@router.post("/batch", status_code=status.HTTP_201_CREATED)
async def create_accounts(
    request: CreateAccountsRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Create one account per name"""
    overdraft_limit = parse_amount(request.overdraft_limit, "overdraft_limit")
    account_ids = system.ledger.create_accounts(request.names, overdraft_limit)
    return {"account_ids": account_ids}


@router.get("")
async def list_accounts(
    sort: str = Query("id", pattern="^(id|balance)$"),
    balance: Optional[str] = None,
    above: Optional[str] = None,
    sign: Optional[str] = Query(None, pattern="^(negative|positive)$"),
    system: BankSystem = Depends(get_bank_system)
):
    """List accounts, optionally filtered and sorted by balance"""
    ledger = system.ledger
    if balance is not None:
        accounts = ledger.get_accounts_with_balance(parse_amount(balance, "balance"))
    elif above is not None:
        accounts = ledger.get_accounts_with_balance_above_limit(parse_amount(above, "above"))
    elif sign == "negative":
        accounts = ledger.get_accounts_with_negative_balance()
    elif sign == "positive":
        accounts = ledger.get_accounts_with_positive_balance()
    else:
        accounts = ledger.accounts()

    if sort == "balance":
        accounts = sorted(accounts, key=lambda a: a.balance)
    return accounts_payload(accounts)


@router.get("/search")
async def search_accounts(
    name: str,
    system: BankSystem = Depends(get_bank_system)
):
    """Find accounts by exact holder name"""
    return accounts_payload(system.ledger.search_accounts_by_name(name))


@router.get("/{account_id}")
async def get_account(
    account_id: int,
    system: BankSystem = Depends(get_bank_system)
):
    """Get account details"""
    account = system.ledger.get_account(account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return AccountModel.from_account(account).model_dump()


@router.put("/{account_id}/name")
async def update_account_holder_name(
    account_id: int,
    request: UpdateNameRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Change the account holder's name"""
    if not system.ledger.update_account_holder_name(account_id, request.name):
        raise HTTPException(status_code=404, detail="Account not found")
    return {"message": "Account holder name updated"}


@router.put("/{account_id}/overdraft-limit")
async def change_overdraft_limit(
    account_id: int,
    request: OverdraftLimitRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Change the overdraft limit"""
    new_limit = parse_amount(request.overdraft_limit, "overdraft_limit")
    if not system.ledger.change_overdraft_limit(account_id, new_limit):
        raise HTTPException(status_code=404, detail="Change overdraft limit failed. Check account ID.")
    return {"message": f"Changed overdraft limit to {new_limit}"}


@router.delete("/{account_id}")
async def delete_account(
    account_id: int,
    system: BankSystem = Depends(get_bank_system)
):
    """Delete an account"""
    if not system.ledger.delete_account(account_id):
        raise HTTPException(status_code=404, detail="Account not found")
    return {"message": "Account deleted successfully"}


@router.delete("")
async def delete_all_accounts(system: BankSystem = Depends(get_bank_system)):
    """Delete every account"""
    system.ledger.delete_all_accounts()
    return {"message": "All accounts deleted"}
