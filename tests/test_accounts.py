"""
Test suite for accounts module

Tests account opening, unregistration, per-user limits and the order in
which closing preconditions are checked.
"""

import pytest
from datetime import datetime, timezone

from account_core.accounts import AccountManager, AccountSummary
from account_core.config import AccountConfig
from account_core.errors import AccountError, ErrorCode
from account_core.locking import LockManager
from account_core.models import Account, AccountStatus
from account_core.repository import AccountRepository
from account_core.storage import InMemoryStorage
from account_core.users import AccountUserManager


class TestAccount:
    """Test Account record behaviour"""

    def _account(self, **overrides):
        now = datetime.now(timezone.utc)
        fields = dict(
            id=1,
            created_at=now,
            updated_at=now,
            account_user_id=12,
            account_number="1234567890",
            balance=10_000
        )
        fields.update(overrides)
        return Account(**fields)

    def test_defaults(self):
        """Test a new account is in use"""
        account = self._account()

        assert account.account_status == AccountStatus.IN_USE
        assert account.is_in_use
        assert not account.is_unregistered
        assert account.is_owned_by(12)
        assert not account.is_owned_by(13)

    def test_negative_balance_rejected(self):
        """Test an account can never be built with a negative balance"""
        with pytest.raises(AccountError) as exc_info:
            self._account(balance=-1)
        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_use_and_cancel_balance(self):
        """Test debit and credit arithmetic"""
        account = self._account()

        account.use_balance(1000)
        assert account.balance == 9000

        account.cancel_balance(1000)
        assert account.balance == 10_000

    def test_use_more_than_balance(self):
        """Test overdrawing fails and leaves the balance untouched"""
        account = self._account(balance=100)

        with pytest.raises(AccountError) as exc_info:
            account.use_balance(101)
        assert exc_info.value.error_code == ErrorCode.AMOUNT_EXCEED_BALANCE
        assert account.balance == 100

    def test_dict_round_trip(self):
        """Test storage conversion keeps status and timestamps"""
        now = datetime.now(timezone.utc)
        account = self._account(account_status=AccountStatus.UNREGISTERED, balance=0, unregistered_at=now)

        restored = Account.from_dict(account.to_dict())

        assert restored == account


class TestAccountManager:
    """Test account lifecycle operations"""

    def setup_method(self):
        """Set up test fixtures"""
        self.storage = InMemoryStorage()
        self.config = AccountConfig(database_url="memory://")
        self.repository = AccountRepository(self.storage)
        self.user_manager = AccountUserManager(self.repository)
        self.lock_manager = LockManager(self.config)
        self.account_manager = AccountManager(
            self.repository, self.user_manager, self.lock_manager, config=self.config
        )

        self.daehun = self.user_manager.create_user("Daehun", user_id=12)
        self.sonny = self.user_manager.create_user("Sonny", user_id=13)

    def test_create_first_account(self):
        """Test the first account gets the first account number"""
        summary = self.account_manager.create_account(12, 1000)

        assert isinstance(summary, AccountSummary)
        assert summary.user_id == 12
        assert summary.account_number == "0000000000"
        assert summary.balance == 1000
        assert summary.registered_at is not None
        assert summary.unregistered_at is None

        stored = self.repository.find_account_by_number("0000000000")
        assert stored.account_user_id == 12
        assert stored.balance == 1000
        assert stored.account_status == AccountStatus.IN_USE

    def test_create_sequential_accounts(self):
        """Test account numbers increase by one with no gaps"""
        numbers = [self.account_manager.create_account(12, 1000).account_number for _ in range(5)]

        assert numbers == [str(i).zfill(10) for i in range(5)]

    def test_numbers_are_global_across_users(self):
        """Test the sequence is shared between users"""
        first = self.account_manager.create_account(12, 1000)
        second = self.account_manager.create_account(13, 1000)

        assert int(second.account_number) == int(first.account_number) + 1

    def test_create_account_user_not_found(self):
        """Test opening an account for an unknown user"""
        with pytest.raises(AccountError) as exc_info:
            self.account_manager.create_account(99, 1000)

        assert exc_info.value.error_code == ErrorCode.USER_NOT_FOUND
        assert self.storage.load_all(self.repository.accounts_table) == []

    def test_create_account_negative_initial_balance(self):
        """Test a negative opening balance is rejected"""
        with pytest.raises(AccountError) as exc_info:
            self.account_manager.create_account(12, -1)

        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_max_account_is_10(self):
        """Test the eleventh active account is refused"""
        for _ in range(10):
            self.account_manager.create_account(12, 1000)

        with pytest.raises(AccountError) as exc_info:
            self.account_manager.create_account(12, 1000)

        assert exc_info.value.error_code == ErrorCode.MAX_ACCOUNT_PER_USER_10
        assert self.repository.count_active_accounts_for_user(12) == 10

    def test_limit_is_per_user(self):
        """Test another user's accounts do not count toward the limit"""
        for _ in range(10):
            self.account_manager.create_account(12, 1000)

        summary = self.account_manager.create_account(13, 1000)
        assert summary.user_id == 13

    def test_unregistered_accounts_do_not_count(self):
        """Test closing an account frees a slot"""
        numbers = [self.account_manager.create_account(12, 0).account_number for _ in range(10)]
        self.account_manager.delete_account(12, numbers[0])

        summary = self.account_manager.create_account(12, 1000)
        assert summary.account_number == "0000000010"

    def test_delete_account_success(self):
        """Test unregistering an empty account"""
        number = self.account_manager.create_account(12, 0).account_number

        summary = self.account_manager.delete_account(12, number)

        assert summary.user_id == 12
        assert summary.account_number == number
        assert summary.unregistered_at is not None

        stored = self.repository.find_account_by_number(number)
        assert stored.account_status == AccountStatus.UNREGISTERED
        assert stored.unregistered_at == summary.unregistered_at
        assert stored.balance == 0

    def test_delete_account_records_no_transaction(self):
        """Test closing an account writes no transaction"""
        number = self.account_manager.create_account(12, 0).account_number
        self.account_manager.delete_account(12, number)

        assert self.storage.load_all(self.repository.transactions_table) == []

    def test_delete_account_user_not_found(self):
        """Test unregistering for an unknown user"""
        with pytest.raises(AccountError) as exc_info:
            self.account_manager.delete_account(99, "1234567890")

        assert exc_info.value.error_code == ErrorCode.USER_NOT_FOUND

    def test_delete_account_not_found(self):
        """Test unregistering a missing account"""
        with pytest.raises(AccountError) as exc_info:
            self.account_manager.delete_account(12, "1234567890")

        assert exc_info.value.error_code == ErrorCode.ACCOUNT_NOT_FOUND

    def test_delete_account_user_mismatch(self):
        """Test only the owner can unregister an account"""
        number = self.account_manager.create_account(13, 0).account_number

        with pytest.raises(AccountError) as exc_info:
            self.account_manager.delete_account(12, number)

        assert exc_info.value.error_code == ErrorCode.USER_ACCOUNT_UN_MATCH

    def test_delete_account_balance_not_empty(self):
        """Test an account with money cannot be unregistered"""
        number = self.account_manager.create_account(12, 100).account_number

        with pytest.raises(AccountError) as exc_info:
            self.account_manager.delete_account(12, number)

        assert exc_info.value.error_code == ErrorCode.BALANCE_NOT_EMPTY
        assert self.repository.find_account_by_number(number).is_in_use

    def test_delete_account_already_unregistered(self):
        """Test unregistering twice"""
        number = self.account_manager.create_account(12, 0).account_number
        self.account_manager.delete_account(12, number)

        with pytest.raises(AccountError) as exc_info:
            self.account_manager.delete_account(12, number)

        assert exc_info.value.error_code == ErrorCode.ACCOUNT_ALREADY_UNREGISTERED

    def test_delete_precedence_ownership_before_balance(self):
        """Test ownership is checked before balance"""
        number = self.account_manager.create_account(13, 500).account_number

        with pytest.raises(AccountError) as exc_info:
            self.account_manager.delete_account(12, number)

        assert exc_info.value.error_code == ErrorCode.USER_ACCOUNT_UN_MATCH

    def test_delete_precedence_user_before_account(self):
        """Test an unknown user is reported before an unknown account"""
        with pytest.raises(AccountError) as exc_info:
            self.account_manager.delete_account(99, "0000000404")

        assert exc_info.value.error_code == ErrorCode.USER_NOT_FOUND

    def test_error_is_value_error(self):
        """Test business failures can be handled as ValueError"""
        with pytest.raises(ValueError, match="User not found"):
            self.account_manager.create_account(99, 1000)
