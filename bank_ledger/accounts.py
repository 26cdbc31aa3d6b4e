"""
Account Module

The account entity and its two balance mutations. Deposits are unconstrained;
withdrawals are the only place the overdraft limit is enforced.
"""

from decimal import Decimal, InvalidOperation
from dataclasses import dataclass, field
from typing import Any, Dict, Union
from enum import Enum


Amount = Union[Decimal, int, float, str]


def to_decimal(value: Amount) -> Decimal:
    """
    Convert a numeric value to Decimal without binary float artifacts
    
    Raises:
        ValueError: For non-numeric values, booleans, NaN and infinities
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


class WithdrawResult(Enum):
    """Outcome of a ledger-level withdrawal"""
    SUCCESS = "success"
    ACCOUNT_NOT_FOUND = "account_not_found"
    INSUFFICIENT_BALANCE = "insufficient_balance"


@dataclass
class Account:
    """
    Bank account holding a balance and an overdraft limit.
    
    ``balance >= -overdraft_limit`` is checked only when withdrawing; lowering
    the overdraft limit afterwards is allowed and does not re-validate.
    """
    id: int
    name: str
    balance: Decimal = field(default_factory=lambda: Decimal('0'))
    overdraft_limit: Decimal = field(default_factory=lambda: Decimal('0'))
    
    def __post_init__(self):
        self.balance = to_decimal(self.balance)
        self.overdraft_limit = to_decimal(self.overdraft_limit)
    
    def deposit(self, amount: Amount) -> None:
        """Add amount to the balance (negative amounts are not rejected)"""
        self.balance += to_decimal(amount)
    
    def withdraw(self, amount: Amount) -> bool:
        """
        Withdraw amount if balance plus overdraft covers it
        
        Returns:
            True if the balance was reduced, False if nothing changed
        """
        amount = to_decimal(amount)
        if self.balance + self.overdraft_limit >= amount:
            self.balance -= amount
            return True
        return False
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to the snapshot record form (money stays Decimal)"""
        return {
            "id": self.id,
            "name": self.name,
            "balance": self.balance,
            "overdraftLimit": self.overdraft_limit,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        """Create instance from a snapshot record"""
        if not isinstance(data, dict):
            raise ValueError(f"Account record must be an object, got {type(data).__name__}")
        
        account_id = data["id"]
        if isinstance(account_id, bool) or not isinstance(account_id, int):
            raise ValueError(f"Account id must be an integer, got {account_id!r}")
        
        name = data["name"]
        if not isinstance(name, str):
            raise ValueError(f"Account name must be a string, got {name!r}")
        
        return cls(
            id=account_id,
            name=name,
            balance=to_decimal(data["balance"]),
            overdraft_limit=to_decimal(data["overdraftLimit"])
        )
    
    def __str__(self) -> str:
        return (f"Account ID: {self.id}, Name: {self.name}, "
                f"Balance: {self.balance}, Overdraft Limit: {self.overdraft_limit}")
