"""
Pydantic schemas for API requests and responses
"""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from fastapi import HTTPException

from ..accounts import Account, to_decimal


def parse_amount(value: str, field_name: str = "amount") -> Decimal:
    """Convert a request amount string to Decimal, rejecting garbage with 400"""
    try:
        amount = to_decimal(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {field_name}: {value!r}")
    if not amount.is_finite():
        raise HTTPException(status_code=400, detail=f"Invalid {field_name}: {value!r}")
    return amount


class AccountModel(BaseModel):
    id: int
    name: str
    balance: str = Field(..., description="Decimal amount as string")
    overdraft_limit: str = Field(..., description="Decimal amount as string")
    
    @classmethod
    def from_account(cls, account: Account) -> 'AccountModel':
        return cls(
            id=account.id,
            name=account.name,
            balance=str(account.balance),
            overdraft_limit=str(account.overdraft_limit)
        )


def accounts_payload(accounts: List[Account]) -> dict:
    return {"accounts": [AccountModel.from_account(a).model_dump() for a in accounts]}


def account_payload(account: Optional[Account]) -> dict:
    return {"account": AccountModel.from_account(account).model_dump() if account else None}


# Account schemas
class CreateAccountRequest(BaseModel):
    name: str
    overdraft_limit: str = Field("0", description="Decimal amount as string")


class CreateAccountsRequest(BaseModel):
    names: List[str]
    overdraft_limit: str = Field("0", description="Decimal amount as string")


class UpdateNameRequest(BaseModel):
    name: str


class OverdraftLimitRequest(BaseModel):
    overdraft_limit: str = Field(..., description="Decimal amount as string")


# Transaction schemas
class DepositRequest(BaseModel):
    account_id: int
    amount: str = Field(..., description="Decimal amount as string")


class WithdrawRequest(BaseModel):
    account_id: int
    amount: str = Field(..., description="Decimal amount as string")


class TransferRequest(BaseModel):
    from_account_id: int
    to_account_id: int
    amount: str = Field(..., description="Decimal amount as string")


class SplitRequest(BaseModel):
    source_account_id: int
    target_account_ids: List[int]
    total_amount: str = Field(..., description="Decimal amount as string")


# Bulk operation schemas
class BonusRequest(BaseModel):
    amount: str
    min_balance: str


class FeeRequest(BaseModel):
    amount: str
    balance_threshold: str


class InterestRequest(BaseModel):
    rate: str = Field(..., description="Rate as a decimal, e.g. 0.01 for 1%")


class BulkAmountRequest(BaseModel):
    amount: str
