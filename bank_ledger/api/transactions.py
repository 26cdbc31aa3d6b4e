"""
Balance-changing endpoints: deposit, withdraw, transfer, split
"""

from fastapi import APIRouter, HTTPException, Depends

from .deps import get_bank_system
from .schemas import (
    DepositRequest, WithdrawRequest, TransferRequest, SplitRequest, parse_amount
)
from ..accounts import WithdrawResult
from ..system import BankSystem


router = APIRouter()


@router.post("/deposit")
async def deposit(
    request: DepositRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Deposit money into an account"""
    amount = parse_amount(request.amount)
    if not system.ledger.deposit(request.account_id, amount):
        raise HTTPException(status_code=404, detail=f"Account ID: {request.account_id} not found.")
    return {"message": f"Deposited {amount} to account ID: {request.account_id}"}


@router.post("/withdraw")
async def withdraw(
    request: WithdrawRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Withdraw money from an account; the overdraft limit is not used"""
    amount = parse_amount(request.amount)
    result = system.ledger.withdraw(request.account_id, amount)
    
    if result is WithdrawResult.ACCOUNT_NOT_FOUND:
        raise HTTPException(status_code=404, detail=f"Account ID: {request.account_id} not found.")
    if result is WithdrawResult.INSUFFICIENT_BALANCE:
        raise HTTPException(
            status_code=409,
            detail=f"Insufficient balance for withdrawal in account ID: {request.account_id}"
        )
    return {
        "result": result.value,
        "message": f"Withdrew {amount} from account ID: {request.account_id}"
    }


@router.post("/transfer")
async def transfer(
    request: TransferRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Transfer money between accounts; the overdraft limit applies"""
    amount = parse_amount(request.amount)
    if not system.ledger.transfer(request.from_account_id, request.to_account_id, amount):
        raise HTTPException(status_code=409, detail="Transfer failed. Check account IDs and balance.")
    return {
        "message": f"Transferred {amount} from account ID: {request.from_account_id} "
                   f"to account ID: {request.to_account_id}"
    }


@router.post("/split")
async def split_money(
    request: SplitRequest,
    system: BankSystem = Depends(get_bank_system)
):
    """Split money from one account equally across several"""
    total_amount = parse_amount(request.total_amount, "total_amount")
    result = system.ledger.split_money(
        request.source_account_id, request.target_account_ids, total_amount
    )
    if not result.success:
        raise HTTPException(status_code=400, detail=result.reason)
    return {
        "share": str(result.share),
        "credited": result.credited,
        "skipped": result.skipped,
        "lost_amount": str(result.lost_amount)
    }
