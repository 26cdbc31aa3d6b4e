"""
Ledger Module

Owns the mapping of account identity to Account and provides every query and
balance mutation on it. Identities come from a counter that only moves
forward, so a deleted account's id is never handed out again.

Two withdrawal paths exist on purpose:

- ``Account.withdraw`` honours the overdraft limit (used by transfers and fees)
- ``Ledger.withdraw`` refuses anything the plain balance does not cover
  (used by direct withdrawals, bulk withdrawals and splits)

Transfers and splits are not rolled back when the credit side fails: the
debited amount stays debited.
"""

from decimal import Decimal, ROUND_HALF_EVEN, localcontext
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional
import threading

from .accounts import Account, Amount, WithdrawResult, to_decimal
from .logging_config import get_logger, log_action


logger = get_logger(__name__)

TWO_PLACES = Decimal('0.01')


@dataclass
class SplitResult:
    """Outcome of splitting money from one account across several others"""
    success: bool
    share: Optional[Decimal] = None
    credited: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    reason: Optional[str] = None

    @property
    def lost_amount(self) -> Decimal:
        """Money withdrawn for targets that did not exist"""
        if self.share is None:
            return Decimal('0')
        return self.share * len(self.skipped)


class Ledger:
    """
    In-memory ledger of accounts

    All public methods take the same re-entrant lock, so one Ledger can be
    shared between request handlers. Accounts are kept in ascending id
    order; every "first" in a query (ties included) refers to that order.
    """

    def __init__(self, accounts: Optional[Dict[int, Account]] = None):
        self._lock = threading.RLock()
        self._accounts: Dict[int, Account] = {}

        for account_id in sorted(accounts or {}):
            account = accounts[account_id]
            if account.id != account_id:
                raise ValueError(
                    f"Account id {account.id} does not match key {account_id}"
                )
            self._accounts[account_id] = account

        self._next_id = max(self._accounts) + 1 if self._accounts else 0

    @property
    def next_id(self) -> int:
        """Identity the next created account will receive"""
        return self._next_id

    # Iteration and lookup

    def __iter__(self) -> Iterator[Account]:
        with self._lock:
            return iter(list(self._accounts.values()))

    def __len__(self) -> int:
        return self.get_total_accounts_count()

    def __contains__(self, account_id: int) -> bool:
        with self._lock:
            return account_id in self._accounts

    def accounts(self) -> List[Account]:
        """All accounts in ascending id order"""
        with self._lock:
            return list(self._accounts.values())

    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by id"""
        with self._lock:
            return self._accounts.get(account_id)

    def to_snapshot(self) -> Dict[int, Account]:
        """Return the account map for persistence"""
        with self._lock:
            return dict(self._accounts)

    # Account lifecycle

    def create_account(self, name: str, overdraft_limit: Amount = 0) -> int:
        """
        Create an account with a zero balance

        Args:
            name: Account holder's name
            overdraft_limit: How far below zero withdrawals may go

        Returns:
            The new account's id
        """
        with self._lock:
            account = Account(
                id=self._next_id,
                name=name,
                overdraft_limit=to_decimal(overdraft_limit)
            )
            self._next_id += 1
            self._accounts[account.id] = account

        log_action(
            logger, "info", f"Account created with ID: {account.id}",
            action="create_account", resource=str(account.id),
            extra={"overdraft_limit": str(account.overdraft_limit)}
        )
        return account.id

    def create_accounts(self, names: Iterable[str], overdraft_limit: Amount = 0) -> List[int]:
        """Create one account per name, in order"""
        with self._lock:
            return [self.create_account(name, overdraft_limit) for name in names]

    def delete_account(self, account_id: int) -> bool:
        """Remove an account; its id is not reused"""
        with self._lock:
            removed = self._accounts.pop(account_id, None) is not None

        if removed:
            log_action(logger, "info", f"Account {account_id} deleted",
                       action="delete_account", resource=str(account_id))
        return removed

    def delete_all_accounts(self) -> None:
        """Remove every account; ids keep counting from where they were"""
        with self._lock:
            count = len(self._accounts)
            self._accounts.clear()

        log_action(logger, "info", f"Deleted all {count} accounts",
                   action="delete_all_accounts", extra={"next_id": self._next_id})

    def change_overdraft_limit(self, account_id: int, new_limit: Amount) -> bool:
        """Set the overdraft limit without re-checking the current balance"""
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return False
            account.overdraft_limit = to_decimal(new_limit)
            return True

    def update_account_holder_name(self, account_id: int, new_name: str) -> bool:
        """Rename the account holder"""
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                log_action(logger, "warning", "Account not found.",
                           action="update_account_holder_name", resource=str(account_id))
                return False
            account.name = new_name
            return True

    # Balance mutations

    def deposit(self, account_id: int, amount: Amount) -> bool:
        """Deposit into an account; False if it does not exist"""
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return False
            account.deposit(amount)
            return True

    def withdraw(self, account_id: int, amount: Amount) -> WithdrawResult:
        """
        Withdraw from an account using the plain balance only

        The overdraft limit is not consulted here: an account with balance 100
        and overdraft 50 cannot withdraw 120 through this path.
        """
        amount = to_decimal(amount)
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                return WithdrawResult.ACCOUNT_NOT_FOUND
            if account.balance < amount:
                return WithdrawResult.INSUFFICIENT_BALANCE
            account.withdraw(amount)
            return WithdrawResult.SUCCESS

    def transfer(self, from_id: int, to_id: int, amount: Amount) -> bool:
        """
        Move money between two accounts

        The debit honours the source's overdraft limit. The source is debited
        before the target is looked up, so a transfer to an unknown account
        returns False with the source already debited.
        """
        with self._lock:
            source = self._accounts.get(from_id)
            if source is None:
                return False
            if not source.withdraw(amount):
                return False
            # No rollback of the debit if the credit side fails
            if not self.deposit(to_id, amount):
                log_action(
                    logger, "error", f"Deposit to account ID: {to_id} failed after debit",
                    action="transfer", resource=str(from_id),
                    extra={"to_id": to_id, "amount": str(amount)}
                )
                return False
            return True

    def split_money(self, source_id: int, target_ids: List[int], total_amount: Amount) -> SplitResult:
        """
        Withdraw total_amount once from source and share it equally among targets

        The withdrawal uses the strict ledger path. Shares for targets that do
        not exist are skipped and not refunded to the source.
        """
        if not target_ids:
            log_action(logger, "warning", "No target accounts provided.",
                       action="split_money", resource=str(source_id))
            return SplitResult(success=False, reason="No target accounts provided.")

        total_amount = to_decimal(total_amount)
        share = total_amount / len(target_ids)

        with self._lock:
            if self.withdraw(source_id, total_amount) is not WithdrawResult.SUCCESS:
                reason = "Withdrawal from source account failed. Check balance and account ID."
                log_action(logger, "warning", reason,
                           action="split_money", resource=str(source_id))
                return SplitResult(success=False, reason=reason)

            result = SplitResult(success=True, share=share)
            for target_id in target_ids:
                if self.deposit(target_id, share):
                    result.credited.append(target_id)
                else:
                    result.skipped.append(target_id)
                    log_action(
                        logger, "warning",
                        f"Deposit to account ID: {target_id} failed. Check account ID.",
                        action="split_money", resource=str(source_id),
                        extra={"target_id": target_id, "share": str(share)}
                    )
        return result

    # Bulk operations

    def apply_bonus(self, amount: Amount, min_balance: Amount) -> None:
        """Deposit amount into every account with balance >= min_balance"""
        min_balance = to_decimal(min_balance)
        with self._lock:
            for account in self._accounts.values():
                if account.balance >= min_balance:
                    account.deposit(amount)

    def apply_fee(self, amount: Amount, balance_threshold: Amount) -> None:
        """
        Charge a fee to every account with balance below the threshold

        Charged through the overdraft-aware withdrawal; accounts that cannot
        cover the fee are left alone.
        """
        balance_threshold = to_decimal(balance_threshold)
        with self._lock:
            for account in self._accounts.values():
                if account.balance < balance_threshold:
                    account.withdraw(amount)

    def add_interest(self, rate: Amount) -> None:
        """Deposit balance * rate into every account, negative balances included"""
        rate = to_decimal(rate)
        with self._lock:
            for account in self._accounts.values():
                account.deposit(account.balance * rate)

    def bulk_deposit(self, amount: Amount) -> int:
        """Deposit amount into every account; returns how many were credited"""
        with self._lock:
            return sum(1 for account_id in list(self._accounts)
                       if self.deposit(account_id, amount))

    def bulk_withdraw(self, amount: Amount) -> Dict[WithdrawResult, int]:
        """Withdraw amount from every account through the strict path"""
        tally = {result: 0 for result in WithdrawResult}
        with self._lock:
            for account_id in list(self._accounts):
                tally[self.withdraw(account_id, amount)] += 1
        return tally

    # Queries

    def get_total_accounts_count(self) -> int:
        with self._lock:
            return len(self._accounts)

    def calculate_total_balance(self) -> Decimal:
        with self._lock:
            return sum((a.balance for a in self._accounts.values()), Decimal('0'))

    def get_average_balance(self) -> Decimal:
        """Average balance rounded to 2 places; 0 for an empty ledger"""
        with self._lock:
            if not self._accounts:
                return Decimal('0')
            average = self.calculate_total_balance() / len(self._accounts)
        # quantize needs room for every integer digit plus two places
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, average.adjusted() + 3)
            return average.quantize(TWO_PLACES, rounding=ROUND_HALF_EVEN)

    def get_account_with_highest_balance(self) -> Optional[Account]:
        with self._lock:
            if not self._accounts:
                return None
            return max(self._accounts.values(), key=lambda a: a.balance)

    def get_account_with_lowest_balance(self) -> Optional[Account]:
        with self._lock:
            if not self._accounts:
                return None
            return min(self._accounts.values(), key=lambda a: a.balance)

    def get_newest_account(self) -> Optional[Account]:
        """Account with the highest id, or None"""
        with self._lock:
            if not self._accounts:
                return None
            return self._accounts[max(self._accounts)]

    def get_accounts_with_balance(self, balance: Amount) -> List[Account]:
        """Accounts whose balance equals the given value exactly"""
        balance = to_decimal(balance)
        with self._lock:
            return [a for a in self._accounts.values() if a.balance == balance]

    def get_accounts_with_balance_above_limit(self, limit: Amount) -> List[Account]:
        limit = to_decimal(limit)
        with self._lock:
            return [a for a in self._accounts.values() if a.balance > limit]

    def get_accounts_with_negative_balance(self) -> List[Account]:
        with self._lock:
            return [a for a in self._accounts.values() if a.balance < 0]

    def get_accounts_with_positive_balance(self) -> List[Account]:
        with self._lock:
            return [a for a in self._accounts.values() if a.balance > 0]

    def get_accounts_sorted_by_balance(self) -> List[Account]:
        """Accounts by ascending balance; equal balances keep id order"""
        with self._lock:
            return sorted(self._accounts.values(), key=lambda a: a.balance)

    def search_accounts_by_name(self, name: str) -> List[Account]:
        """Accounts whose holder name matches exactly"""
        with self._lock:
            return [a for a in self._accounts.values() if a.name == name]
