"""
Domain Records Module

Plain data records for account users, accounts and balance transactions.
Cross-entity links are explicit id fields; nothing is loaded implicitly.
"""

from datetime import datetime
from dataclasses import dataclass
from typing import Any, Dict, Optional
from enum import Enum

from .errors import AccountError, ErrorCode
from .storage import StorageRecord


class AccountStatus(Enum):
    """Account lifecycle states"""
    IN_USE = "IN_USE"
    UNREGISTERED = "UNREGISTERED"


class TransactionType(Enum):
    """Balance mutation kinds"""
    USE = "USE"          # Debit
    CANCEL = "CANCEL"    # Credit reversing a prior USE


class TransactionResultType(Enum):
    """Outcome of a mutation attempt"""
    S = "S"  # Success
    F = "F"  # Fail


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value)


@dataclass
class AccountUser(StorageRecord):
    """Owner identity; immutable once created"""
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AccountUser':
        return cls(
            id=data['id'],
            created_at=_parse_datetime(data['created_at']),
            updated_at=_parse_datetime(data['updated_at']),
            name=data['name']
        )


@dataclass
class Account(StorageRecord):
    """
    Balance-holding account.

    Balance is an integer amount in the smallest currency unit and never
    goes below zero.
    """
    account_user_id: int
    account_number: str
    balance: int
    account_status: AccountStatus = AccountStatus.IN_USE
    registered_at: Optional[datetime] = None
    unregistered_at: Optional[datetime] = None

    def __post_init__(self):
        if self.balance < 0:
            raise AccountError(ErrorCode.INVALID_ARGUMENT, "Account balance cannot be negative")

    @property
    def is_in_use(self) -> bool:
        return self.account_status == AccountStatus.IN_USE

    @property
    def is_unregistered(self) -> bool:
        return self.account_status == AccountStatus.UNREGISTERED

    def is_owned_by(self, user_id: int) -> bool:
        return self.account_user_id == user_id

    def use_balance(self, amount: int) -> None:
        """Debit ``amount``; fails if it would overdraw the account"""
        if amount > self.balance:
            raise AccountError(ErrorCode.AMOUNT_EXCEED_BALANCE)
        self.balance -= amount

    def cancel_balance(self, amount: int) -> None:
        """Credit back a previously used ``amount``"""
        if amount < 0:
            raise AccountError(ErrorCode.INVALID_ARGUMENT, "Cancel amount cannot be negative")
        self.balance += amount

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        return cls(
            id=data['id'],
            created_at=_parse_datetime(data['created_at']),
            updated_at=_parse_datetime(data['updated_at']),
            account_user_id=data['account_user_id'],
            account_number=data['account_number'],
            balance=data['balance'],
            account_status=AccountStatus(data['account_status']),
            registered_at=_parse_datetime(data.get('registered_at')),
            unregistered_at=_parse_datetime(data.get('unregistered_at'))
        )


@dataclass
class Transaction(StorageRecord):
    """
    Immutable record of one balance mutation attempt, successful or not.

    ``balance_snapshot`` is the account balance right after the attempt.
    CANCEL records point at the USE they reverse through
    ``original_transaction_id``.
    """
    transaction_id: str
    account_id: int
    transaction_type: TransactionType
    transaction_result_type: TransactionResultType
    amount: int
    balance_snapshot: int
    transacted_at: datetime
    original_transaction_id: Optional[str] = None

    @property
    def is_successful(self) -> bool:
        return self.transaction_result_type == TransactionResultType.S

    @property
    def is_cancellable_use(self) -> bool:
        """Only successful USE transactions can be cancelled"""
        return self.transaction_type == TransactionType.USE and self.is_successful

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        return cls(
            id=data['id'],
            created_at=_parse_datetime(data['created_at']),
            updated_at=_parse_datetime(data['updated_at']),
            transaction_id=data['transaction_id'],
            account_id=data['account_id'],
            transaction_type=TransactionType(data['transaction_type']),
            transaction_result_type=TransactionResultType(data['transaction_result_type']),
            amount=data['amount'],
            balance_snapshot=data['balance_snapshot'],
            transacted_at=_parse_datetime(data['transacted_at']),
            original_transaction_id=data.get('original_transaction_id')
        )
