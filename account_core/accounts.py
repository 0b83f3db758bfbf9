"""
Account Management Module

Manages the account lifecycle: opening accounts with sequential account
numbers and unregistering them once their balance is empty. Accounts are
never physically deleted; closing an account only changes its status.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional

from .account_numbers import AccountNumberGenerator
from .config import AccountConfig, get_config
from .errors import AccountError, ErrorCode
from .locking import LockManager, ACCOUNT_NUMBER_SEQUENCE_KEY, account_lock_key
from .logging_config import get_logger, log_action
from .models import Account, AccountStatus, AccountUser
from .repository import AccountRepository
from .users import AccountUserManager


@dataclass
class AccountSummary:
    """Result of an account lifecycle operation"""
    user_id: int
    account_number: str
    balance: int
    registered_at: Optional[datetime] = None
    unregistered_at: Optional[datetime] = None

    @classmethod
    def from_account(cls, account: Account) -> 'AccountSummary':
        return cls(
            user_id=account.account_user_id,
            account_number=account.account_number,
            balance=account.balance,
            registered_at=account.registered_at,
            unregistered_at=account.unregistered_at
        )


class AccountManager:
    """
    Opens and closes accounts, enforcing ownership and eligibility rules
    """

    def __init__(
        self,
        repository: AccountRepository,
        user_manager: AccountUserManager,
        lock_manager: LockManager,
        number_generator: Optional[AccountNumberGenerator] = None,
        config: Optional[AccountConfig] = None
    ):
        self.repository = repository
        self.user_manager = user_manager
        self.lock_manager = lock_manager
        self.config = config or get_config()
        self.number_generator = number_generator or AccountNumberGenerator(repository, self.config)
        self.logger = get_logger("account_core.accounts")

    def create_account(self, user_id: int, initial_balance: int) -> AccountSummary:
        """
        Open a new account for a user

        Args:
            user_id: ID of the account owner
            initial_balance: Opening balance in the smallest currency unit

        Returns:
            AccountSummary with the assigned account number

        Raises:
            AccountError: USER_NOT_FOUND, INVALID_ARGUMENT, MAX_ACCOUNT_PER_USER_10
        """
        try:
            user = self.user_manager.get_user(user_id)
            if initial_balance < 0:
                raise AccountError(ErrorCode.INVALID_ARGUMENT, "Initial balance cannot be negative")

            # Number lookup, limit check and insert form one critical section
            with self.lock_manager.hold(ACCOUNT_NUMBER_SEQUENCE_KEY):
                with self.repository.storage.atomic():
                    self._validate_create_account(user)
                    account = self._open_account(user, initial_balance)
        except AccountError as e:
            self._log_failure("create_account", e, user_id, f"user:{user_id}")
            raise

        log_action(
            self.logger, "info", "Account created",
            user_id=user_id, action="create_account",
            resource=f"account:{account.account_number}",
            extra={"account_id": account.id, "initial_balance": initial_balance}
        )
        return AccountSummary.from_account(account)

    def delete_account(self, user_id: int, account_number: str) -> AccountSummary:
        """
        Unregister an account

        Checks run in order: user exists, account exists, owner matches,
        balance is zero, account is still in use.

        Returns:
            AccountSummary carrying the unregistration time
        """
        try:
            user = self.user_manager.get_user(user_id)

            account = self.repository.find_account_by_number(account_number)
            if not account:
                raise AccountError(ErrorCode.ACCOUNT_NOT_FOUND)

            with self.lock_manager.hold(account_lock_key(account.account_number)):
                with self.repository.storage.atomic():
                    account = self.repository.find_account_by_id(account.id)
                    self._validate_delete_account(user, account)

                    now = datetime.now(timezone.utc)
                    account.account_status = AccountStatus.UNREGISTERED
                    account.unregistered_at = now
                    account.updated_at = now
                    self.repository.save_account(account)
        except AccountError as e:
            self._log_failure("delete_account", e, user_id, f"account:{account_number}")
            raise

        log_action(
            self.logger, "info", "Account unregistered",
            user_id=user_id, action="delete_account",
            resource=f"account:{account_number}"
        )
        return AccountSummary.from_account(account)

    def _validate_create_account(self, user: AccountUser) -> None:
        active = self.repository.count_active_accounts_for_user(user.id)
        if active >= self.config.max_accounts_per_user:
            raise AccountError(ErrorCode.MAX_ACCOUNT_PER_USER_10)

    def _validate_delete_account(self, user: AccountUser, account: Account) -> None:
        if not account.is_owned_by(user.id):
            raise AccountError(ErrorCode.USER_ACCOUNT_UN_MATCH)
        if account.balance != 0:
            raise AccountError(ErrorCode.BALANCE_NOT_EMPTY)
        if account.is_unregistered:
            raise AccountError(ErrorCode.ACCOUNT_ALREADY_UNREGISTERED)

    def _open_account(self, user: AccountUser, initial_balance: int) -> Account:
        now = datetime.now(timezone.utc)
        account = Account(
            id=None,
            created_at=now,
            updated_at=now,
            account_user_id=user.id,
            account_number=self.number_generator.next(),
            balance=initial_balance,
            account_status=AccountStatus.IN_USE,
            registered_at=now
        )
        return self.repository.save_account(account)

    def _log_failure(self, action: str, error: AccountError, user_id: int, resource: str) -> None:
        log_action(
            self.logger, "warning", f"{action} failed: {error.error_message}",
            user_id=user_id, action=action, resource=resource,
            extra={"error_code": error.error_code.name}
        )
