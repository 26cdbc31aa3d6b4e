"""
Read-only aggregate endpoints
"""

from fastapi import APIRouter, Depends

from .deps import get_bank_system
from .schemas import account_payload
from ..system import BankSystem


router = APIRouter()


@router.get("/summary")
async def get_summary(system: BankSystem = Depends(get_bank_system)):
    """Count, total and average balance"""
    ledger = system.ledger
    return {
        "count": ledger.get_total_accounts_count(),
        "total_balance": str(ledger.calculate_total_balance()),
        "average_balance": str(ledger.get_average_balance())
    }


@router.get("/highest")
async def get_highest(system: BankSystem = Depends(get_bank_system)):
    """Account with the highest balance"""
    return account_payload(system.ledger.get_account_with_highest_balance())


@router.get("/lowest")
async def get_lowest(system: BankSystem = Depends(get_bank_system)):
    """Account with the lowest balance"""
    return account_payload(system.ledger.get_account_with_lowest_balance())


@router.get("/newest")
async def get_newest(system: BankSystem = Depends(get_bank_system)):
    """Most recently created account"""
    return account_payload(system.ledger.get_newest_account())
