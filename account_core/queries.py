"""
Query Service Module

Read-only lookups over accounts and transactions. Nothing here mutates
state or takes account locks.
"""

from dataclasses import dataclass
from typing import List

from .errors import AccountError, ErrorCode
from .models import Account, AccountStatus
from .repository import AccountRepository
from .transactions import TransactionProcessor, TransactionResult
from .users import AccountUserManager


@dataclass
class AccountInfo:
    """Account number and balance, as listed for a user"""
    account_number: str
    balance: int
    account_status: AccountStatus


class QueryService:
    """Account and transaction lookups"""

    def __init__(
        self,
        repository: AccountRepository,
        user_manager: AccountUserManager,
        transaction_processor: TransactionProcessor
    ):
        self.repository = repository
        self.user_manager = user_manager
        self.transaction_processor = transaction_processor

    def get_account(self, account_id: int) -> Account:
        """
        Get account by ID

        Negative ids are rejected with INVALID_ARGUMENT before any lookup;
        they are never valid whatever the storage holds.
        """
        if account_id < 0:
            raise AccountError(ErrorCode.INVALID_ARGUMENT, "Account id cannot be negative")

        account = self.repository.find_account_by_id(account_id)
        if not account:
            raise AccountError(ErrorCode.ACCOUNT_NOT_FOUND)
        return account

    def get_account_by_number(self, account_number: str) -> Account:
        account = self.repository.find_account_by_number(account_number)
        if not account:
            raise AccountError(ErrorCode.ACCOUNT_NOT_FOUND)
        return account

    def get_accounts_by_user(self, user_id: int) -> List[AccountInfo]:
        """All accounts of a user, unregistered ones included, oldest first"""
        user = self.user_manager.get_user(user_id)
        return [
            AccountInfo(
                account_number=account.account_number,
                balance=account.balance,
                account_status=account.account_status
            )
            for account in self.repository.find_accounts_for_user(user.id)
        ]

    def query_transaction(self, transaction_id: str) -> TransactionResult:
        return self.transaction_processor.query_transaction(transaction_id)
