"""
Transaction Processing Module

Applies balance mutations: USE debits an account, CANCEL credits back a
prior successful USE in full. Every attempt against a resolved account is
recorded, including failed ones, so the transaction table doubles as the
audit trail. Mutations of one account are serialized through its lock.
"""

from datetime import datetime, timezone, timedelta
from dataclasses import dataclass
from typing import Optional
import uuid

from .config import AccountConfig, get_config
from .errors import AccountError, ErrorCode
from .locking import LockManager, account_lock_key
from .logging_config import get_logger, log_action
from .models import (
    Account, AccountUser, Transaction, TransactionType, TransactionResultType
)
from .repository import AccountRepository
from .users import AccountUserManager


@dataclass
class TransactionResult:
    """Outcome of a use/cancel attempt, or a transaction lookup"""
    account_number: str
    transaction_type: TransactionType
    transaction_result: TransactionResultType
    transaction_id: str
    amount: int
    balance_snapshot: int
    transacted_at: datetime

    @classmethod
    def from_transaction(cls, transaction: Transaction, account_number: str) -> 'TransactionResult':
        return cls(
            account_number=account_number,
            transaction_type=transaction.transaction_type,
            transaction_result=transaction.transaction_result_type,
            transaction_id=transaction.transaction_id,
            amount=transaction.amount,
            balance_snapshot=transaction.balance_snapshot,
            transacted_at=transaction.transacted_at
        )


def new_transaction_id() -> str:
    return uuid.uuid4().hex


class TransactionProcessor:
    """
    Balance transaction engine with per-account serialization
    """

    def __init__(
        self,
        repository: AccountRepository,
        user_manager: AccountUserManager,
        lock_manager: LockManager,
        config: Optional[AccountConfig] = None
    ):
        self.repository = repository
        self.user_manager = user_manager
        self.lock_manager = lock_manager
        self.config = config or get_config()
        self.logger = get_logger("account_core.transactions")

    def use_balance(
        self,
        user_id: int,
        account_number: str,
        amount: int,
        transaction_id: Optional[str] = None
    ) -> TransactionResult:
        """
        Debit an account

        Args:
            user_id: Requesting user, must own the account
            account_number: Account to debit
            amount: Amount to debit
            transaction_id: Caller's correlation key; logged only, a fresh
                id is always issued for the recorded transaction

        Returns:
            TransactionResult of the successful USE

        Raises:
            AccountError: USER_NOT_FOUND, INVALID_ARGUMENT, ACCOUNT_NOT_FOUND,
                USER_ACCOUNT_UN_MATCH, ACCOUNT_ALREADY_UNREGISTERED,
                AMOUNT_EXCEED_BALANCE, ACCOUNT_TRANSACTION_LOCK
        """
        try:
            user = self.user_manager.get_user(user_id)
            self._validate_amount(amount)

            account = self.repository.find_account_by_number(account_number)
            if not account:
                raise AccountError(ErrorCode.ACCOUNT_NOT_FOUND)

            with self.lock_manager.hold(account_lock_key(account.account_number)):
                try:
                    with self.repository.storage.atomic():
                        account = self.repository.find_account_by_id(account.id)
                        self._validate_use_balance(user, account, amount)
                        account.use_balance(amount)
                        account.updated_at = datetime.now(timezone.utc)
                        self.repository.save_account(account)
                        transaction = self._record(
                            account, TransactionType.USE, TransactionResultType.S, amount
                        )
                except AccountError:
                    self._record_failure(account, TransactionType.USE, amount)
                    raise
        except AccountError as e:
            self._log_failure("use_balance", e, account_number, user_id=user_id,
                              extra={"amount": amount, "client_transaction_id": transaction_id})
            raise

        log_action(
            self.logger, "info", "Balance used",
            user_id=user_id, action="use_balance",
            resource=f"account:{account_number}",
            extra={
                "transaction_id": transaction.transaction_id,
                "client_transaction_id": transaction_id,
                "amount": amount,
                "balance_snapshot": transaction.balance_snapshot
            }
        )
        return TransactionResult.from_transaction(transaction, account_number)

    def cancel_balance(self, transaction_id: str, account_number: str, amount: int) -> TransactionResult:
        """
        Reverse a prior successful USE in full

        Checks run in order: original transaction exists, account exists,
        original is a successful USE, original belongs to the account,
        amount equals the original amount, original not yet cancelled,
        original inside the cancel window, account still in use.

        Returns:
            TransactionResult of the successful CANCEL
        """
        try:
            account = self.repository.find_account_by_number(account_number)
            if not account:
                if not self.repository.find_transaction_by_transaction_id(transaction_id):
                    raise AccountError(ErrorCode.TRANSACTION_NOT_FOUND)
                raise AccountError(ErrorCode.ACCOUNT_NOT_FOUND)

            with self.lock_manager.hold(account_lock_key(account.account_number)):
                try:
                    original = self.repository.find_transaction_by_transaction_id(transaction_id)
                    if not original:
                        raise AccountError(ErrorCode.TRANSACTION_NOT_FOUND)
                    if not original.is_cancellable_use:
                        raise AccountError(
                            ErrorCode.INVALID_REQUEST,
                            "Only successful use transactions can be cancelled"
                        )

                    with self.repository.storage.atomic():
                        account = self.repository.find_account_by_id(account.id)
                        self._validate_cancel_balance(original, account, amount)
                        account.cancel_balance(amount)
                        account.updated_at = datetime.now(timezone.utc)
                        self.repository.save_account(account)
                        transaction = self._record(
                            account, TransactionType.CANCEL, TransactionResultType.S, amount,
                            original_transaction_id=original.transaction_id
                        )
                except AccountError:
                    self._record_failure(account, TransactionType.CANCEL, amount)
                    raise
        except AccountError as e:
            self._log_failure("cancel_balance", e, account_number,
                              extra={"amount": amount, "original_transaction_id": transaction_id})
            raise

        log_action(
            self.logger, "info", "Balance cancelled",
            action="cancel_balance", resource=f"account:{account_number}",
            extra={
                "transaction_id": transaction.transaction_id,
                "original_transaction_id": transaction_id,
                "amount": amount,
                "balance_snapshot": transaction.balance_snapshot
            }
        )
        return TransactionResult.from_transaction(transaction, account_number)

    def query_transaction(self, transaction_id: str) -> TransactionResult:
        """Look up any recorded transaction by its transaction id"""
        transaction = self.repository.find_transaction_by_transaction_id(transaction_id)
        if not transaction:
            raise AccountError(ErrorCode.TRANSACTION_NOT_FOUND)

        account = self.repository.find_account_by_id(transaction.account_id)
        if not account:
            raise AccountError(ErrorCode.ACCOUNT_NOT_FOUND)
        return TransactionResult.from_transaction(transaction, account.account_number)

    def _validate_amount(self, amount: int) -> None:
        if amount < self.config.min_use_amount or amount > self.config.max_use_amount:
            raise AccountError(
                ErrorCode.INVALID_ARGUMENT,
                f"Amount must be between {self.config.min_use_amount} "
                f"and {self.config.max_use_amount}"
            )

    def _validate_use_balance(self, user: AccountUser, account: Account, amount: int) -> None:
        if not account.is_owned_by(user.id):
            raise AccountError(ErrorCode.USER_ACCOUNT_UN_MATCH)
        if not account.is_in_use:
            raise AccountError(ErrorCode.ACCOUNT_ALREADY_UNREGISTERED)
        if amount > account.balance:
            raise AccountError(ErrorCode.AMOUNT_EXCEED_BALANCE)

    def _validate_cancel_balance(self, original: Transaction, account: Account, amount: int) -> None:
        if original.account_id != account.id:
            raise AccountError(ErrorCode.TRANSACTION_ACCOUNT_UN_MATCH)
        if original.amount != amount:
            raise AccountError(ErrorCode.CANCEL_MUST_FULLY)
        if self.repository.find_cancel_for(original.transaction_id):
            raise AccountError(ErrorCode.TRANSACTION_ALREADY_CANCELLED)

        window = timedelta(days=self.config.cancel_window_days)
        if original.transacted_at < datetime.now(timezone.utc) - window:
            raise AccountError(ErrorCode.TOO_OLD_ORDER_TO_CANCEL)

        # An unregistered account's balance is frozen at zero
        if not account.is_in_use:
            raise AccountError(ErrorCode.ACCOUNT_ALREADY_UNREGISTERED)

    def _record(
        self,
        account: Account,
        transaction_type: TransactionType,
        result_type: TransactionResultType,
        amount: int,
        original_transaction_id: Optional[str] = None
    ) -> Transaction:
        now = datetime.now(timezone.utc)
        transaction = Transaction(
            id=None,
            created_at=now,
            updated_at=now,
            transaction_id=new_transaction_id(),
            account_id=account.id,
            transaction_type=transaction_type,
            transaction_result_type=result_type,
            amount=amount,
            balance_snapshot=account.balance,
            transacted_at=now,
            original_transaction_id=original_transaction_id
        )
        return self.repository.save_transaction(transaction)

    def _record_failure(self, account: Account, transaction_type: TransactionType, amount: int) -> Transaction:
        # The in-flight account object may be ahead of what was committed
        current = self.repository.find_account_by_id(account.id) or account
        return self._record(current, transaction_type, TransactionResultType.F, amount)

    def _log_failure(self, action: str, error: AccountError, account_number: str,
                     user_id: Optional[int] = None, extra: Optional[dict] = None) -> None:
        details = {"error_code": error.error_code.name}
        details.update(extra or {})
        log_action(
            self.logger, "warning", f"{action} failed: {error.error_message}",
            user_id=user_id, action=action, resource=f"account:{account_number}",
            extra=details
        )
