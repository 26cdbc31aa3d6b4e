"""
Endpoints applying one operation to every account
"""

from fastapi import APIRouter, Depends

from .deps import get_bank_system
from .schemas import BonusRequest, FeeRequest, InterestRequest, BulkAmountRequest, parse_amount
from ..system import BankSystem


router = APIRouter()


@router.post("/bonus")
async def apply_bonus(
    request: BonusRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Apply a bonus to accounts with balance at or above min_balance"""
    system.ledger.apply_bonus(
        parse_amount(request.amount), parse_amount(request.min_balance, "min_balance")
    )
    return {"message": "Bonus applied"}


@router.post("/fee")
async def apply_fee(
    request: FeeRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Apply a fee to accounts with balance below balance_threshold"""
    system.ledger.apply_fee(
        parse_amount(request.amount), parse_amount(request.balance_threshold, "balance_threshold")
    )
    return {"message": "Fee applied"}


@router.post("/interest")
async def add_interest(
    request: InterestRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Add interest to all accounts"""
    rate = parse_amount(request.rate, "rate")
    system.ledger.add_interest(rate)
    return {"message": f"Added interest to all accounts at a rate of {rate * 100}%"}


@router.post("/deposit")
async def bulk_deposit(
    request: BulkAmountRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Deposit the same amount into every account"""
    credited = system.ledger.bulk_deposit(parse_amount(request.amount))
    return {"credited": credited}


@router.post("/withdraw")
async def bulk_withdraw(
    request: BulkAmountRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Withdraw the same amount from every account that can cover it"""
    tally = system.ledger.bulk_withdraw(parse_amount(request.amount))
    return {"results": {result.value: count for result, count in tally.items()}}
