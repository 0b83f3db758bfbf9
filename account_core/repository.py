"""
Repository Module

Persistence collaborator for the account core. Maps domain records to
storage documents and answers the lookups the managers need. Every
cross-entity read goes through an explicit call here.
"""

from typing import List, Optional

from .models import (
    AccountUser, Account, AccountStatus, Transaction,
    TransactionType, TransactionResultType
)
from .storage import StorageInterface, StorageRecord


class AccountRepository:
    """Storage-backed lookups and writes for users, accounts and transactions"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.users_table = "account_users"
        self.accounts_table = "accounts"
        self.transactions_table = "transactions"

    def _save(self, table: str, record: StorageRecord) -> None:
        # New records get their id from storage; existing ones are updated
        if record.id is None:
            record.id = self.storage.insert(table, record.to_dict())
        else:
            self.storage.save(table, str(record.id), record.to_dict())

    # Users

    def save_user(self, user: AccountUser) -> AccountUser:
        """
        Insert a new user; users are immutable once created.

        Raises:
            DuplicateRecordError: an explicit id is already taken
        """
        user.id = self.storage.insert(self.users_table, user.to_dict(), record_id=user.id)
        return user

    def find_user_by_id(self, user_id: int) -> Optional[AccountUser]:
        data = self.storage.load(self.users_table, str(user_id))
        if data:
            return AccountUser.from_dict(data)
        return None

    # Accounts

    def save_account(self, account: Account) -> Account:
        self._save(self.accounts_table, account)
        return account

    def find_account_by_id(self, account_id: int) -> Optional[Account]:
        data = self.storage.load(self.accounts_table, str(account_id))
        if data:
            return Account.from_dict(data)
        return None

    def find_account_by_number(self, account_number: str) -> Optional[Account]:
        found = self.storage.find(self.accounts_table, {"account_number": account_number})
        if found:
            return Account.from_dict(found[0])
        return None

    def find_last_account(self) -> Optional[Account]:
        """Account holding the highest account number, if any"""
        accounts = self.storage.load_all(self.accounts_table)
        if not accounts:
            return None
        last = max(accounts, key=lambda data: int(data['account_number']))
        return Account.from_dict(last)

    def find_accounts_for_user(self, user_id: int) -> List[Account]:
        found = self.storage.find(self.accounts_table, {"account_user_id": user_id})
        accounts = [Account.from_dict(data) for data in found]
        accounts.sort(key=lambda account: account.id)
        return accounts

    def count_active_accounts_for_user(self, user_id: int) -> int:
        found = self.storage.find(self.accounts_table, {"account_user_id": user_id})
        return sum(
            1 for data in found
            if data['account_status'] != AccountStatus.UNREGISTERED.value
        )

    # Transactions

    def save_transaction(self, transaction: Transaction) -> Transaction:
        self._save(self.transactions_table, transaction)
        return transaction

    def find_transaction_by_transaction_id(self, transaction_id: str) -> Optional[Transaction]:
        found = self.storage.find(self.transactions_table, {"transaction_id": transaction_id})
        if found:
            return Transaction.from_dict(found[0])
        return None

    def find_cancel_for(self, original_transaction_id: str) -> Optional[Transaction]:
        """Successful CANCEL that reversed the given USE, if one exists"""
        found = self.storage.find(self.transactions_table, {
            "original_transaction_id": original_transaction_id,
            "transaction_type": TransactionType.CANCEL.value,
            "transaction_result_type": TransactionResultType.S.value
        })
        if found:
            return Transaction.from_dict(found[0])
        return None

    def find_transactions_for_account(self, account_id: int) -> List[Transaction]:
        found = self.storage.find(self.transactions_table, {"account_id": account_id})
        transactions = [Transaction.from_dict(data) for data in found]
        transactions.sort(key=lambda transaction: transaction.id)
        return transactions
