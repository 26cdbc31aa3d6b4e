"""
Test suite for accounts module

Tests the account entity's deposit/withdraw primitives and its snapshot
record form.
"""

import pytest
from decimal import Decimal

from bank_ledger.accounts import Account, WithdrawResult, to_decimal


class TestToDecimal:
    """Test amount conversion"""

    def test_float_has_no_binary_artifacts(self):
        """Test floats convert through their shortest repr"""
        assert to_decimal(0.1) == Decimal('0.1')

    def test_int_and_string(self):
        """Test ints and decimal strings convert exactly"""
        assert to_decimal(5) == Decimal('5')
        assert to_decimal("-20.50") == Decimal('-20.50')

    def test_rejects_garbage(self):
        """Test non-numeric values raise ValueError"""
        with pytest.raises(ValueError):
            to_decimal("ten")
        with pytest.raises(ValueError):
            to_decimal(True)
        with pytest.raises(ValueError):
            to_decimal(None)

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-inf", float("nan"),
                                       float("inf"), Decimal("NaN"), Decimal("sNaN")])
    def test_rejects_non_finite(self, value):
        """Test NaN and infinities are not amounts"""
        with pytest.raises(ValueError):
            to_decimal(value)


class TestAccount:
    """Test Account class functionality"""

    def test_new_account_defaults(self):
        """Test a new account starts with zero balance and overdraft"""
        account = Account(id=0, name="Alice")

        assert account.balance == Decimal('0')
        assert account.overdraft_limit == Decimal('0')

    def test_deposit(self):
        """Test deposit adds to balance"""
        account = Account(id=0, name="Alice")
        account.deposit(Decimal('100.25'))

        assert account.balance == Decimal('100.25')

    def test_negative_deposit_is_allowed(self):
        """Test deposits are not validated for sign"""
        account = Account(id=0, name="Alice", balance=Decimal('10'))
        account.deposit(Decimal('-30'))

        assert account.balance == Decimal('-20')

    def test_withdraw_within_balance(self):
        """Test withdrawal covered by balance"""
        account = Account(id=0, name="Alice", balance=Decimal('100'))

        assert account.withdraw(Decimal('40'))
        assert account.balance == Decimal('60')

    def test_withdraw_into_overdraft(self):
        """Test entity-level withdrawal honours the overdraft limit"""
        account = Account(id=0, name="Alice", balance=Decimal('100'),
                          overdraft_limit=Decimal('50'))

        assert account.withdraw(Decimal('120'))
        assert account.balance == Decimal('-20')

    def test_withdraw_exactly_to_limit(self):
        """Test balance + overdraft equal to amount is enough"""
        account = Account(id=0, name="Alice", balance=Decimal('100'),
                          overdraft_limit=Decimal('50'))

        assert account.withdraw(Decimal('150'))
        assert account.balance == Decimal('-50')

    def test_withdraw_beyond_limit_changes_nothing(self):
        """Test refused withdrawal leaves balance untouched"""
        account = Account(id=0, name="Alice", balance=Decimal('100'),
                          overdraft_limit=Decimal('50'))

        assert not account.withdraw(Decimal('150.01'))
        assert account.balance == Decimal('100')

    def test_lowering_overdraft_does_not_revalidate(self):
        """Test balance may sit below -overdraft_limit after the limit drops"""
        account = Account(id=0, name="Alice", overdraft_limit=Decimal('50'))
        assert account.withdraw(Decimal('40'))

        account.overdraft_limit = Decimal('10')

        assert account.balance == Decimal('-40')
        assert account.balance < -account.overdraft_limit

    def test_str(self):
        """Test human-readable description"""
        account = Account(id=3, name="Bob", balance=Decimal('12.5'),
                          overdraft_limit=Decimal('5'))

        assert str(account) == "Account ID: 3, Name: Bob, Balance: 12.5, Overdraft Limit: 5"


class TestAccountRecord:
    """Test snapshot record conversion"""

    def test_to_dict(self):
        """Test record uses snapshot field names and keeps money as Decimal"""
        account = Account(id=1, name="B", balance=Decimal('-20'),
                          overdraft_limit=Decimal('50'))

        assert account.to_dict() == {
            "id": 1,
            "name": "B",
            "balance": Decimal('-20'),
            "overdraftLimit": Decimal('50'),
        }

    def test_from_dict_accepts_numbers(self):
        """Test JSON numbers are accepted for money fields"""
        account = Account.from_dict(
            {"id": 2, "name": "C", "balance": 10, "overdraftLimit": Decimal('2.5')}
        )

        assert account == Account(id=2, name="C", balance=Decimal('10'),
                                  overdraft_limit=Decimal('2.5'))

    def test_from_dict_missing_field(self):
        """Test missing fields raise KeyError"""
        with pytest.raises(KeyError):
            Account.from_dict({"id": 0, "name": "A", "balance": "1"})

    def test_from_dict_rejects_non_integer_id(self):
        """Test id must be an integer"""
        with pytest.raises(ValueError, match="id must be an integer"):
            Account.from_dict({"id": "0", "name": "A", "balance": "1", "overdraftLimit": "0"})

    def test_from_dict_rejects_nan_balance(self):
        """Test a NaN balance is not a valid record"""
        with pytest.raises(ValueError):
            Account.from_dict({"id": 0, "name": "A", "balance": float("nan"), "overdraftLimit": 0})

    def test_from_dict_rejects_non_object(self):
        """Test records must be objects"""
        with pytest.raises(ValueError, match="must be an object"):
            Account.from_dict([0, "A", "1", "0"])


class TestWithdrawResult:
    """Test the three-way withdrawal result"""

    def test_values(self):
        """Test every outcome has a stable value"""
        assert {r.value for r in WithdrawResult} == {
            "success", "account_not_found", "insufficient_balance"
        }
