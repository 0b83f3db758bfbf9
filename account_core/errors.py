"""
Error Taxonomy Module

Every expected business failure of the account core is raised as an
AccountError carrying an ErrorCode. The transport layer maps codes to
stable response statuses; the core itself stays transport-agnostic.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Business failure kinds with their default messages"""
    USER_NOT_FOUND = "User not found"
    ACCOUNT_NOT_FOUND = "Account not found"
    TRANSACTION_NOT_FOUND = "Transaction not found"
    USER_ACCOUNT_UN_MATCH = "Account owner does not match the requesting user"
    BALANCE_NOT_EMPTY = "Account balance must be zero to unregister"
    ACCOUNT_ALREADY_UNREGISTERED = "Account is already unregistered"
    MAX_ACCOUNT_PER_USER_10 = "A user may hold at most 10 accounts"
    AMOUNT_EXCEED_BALANCE = "Amount exceeds account balance"
    CANCEL_MUST_FULLY = "Partial cancellation is not allowed"
    TRANSACTION_ALREADY_CANCELLED = "Transaction has already been cancelled"
    TRANSACTION_ACCOUNT_UN_MATCH = "Transaction does not belong to this account"
    TOO_OLD_ORDER_TO_CANCEL = "Transaction is too old to cancel"
    INVALID_ARGUMENT = "Invalid argument"
    ACCOUNT_TRANSACTION_LOCK = "Account is in use by another transaction"
    INVALID_REQUEST = "Invalid request"
    INTERNAL_SERVER_ERROR = "Internal server error"

    @property
    def description(self) -> str:
        return self.value


class AccountError(ValueError):
    """
    Typed business failure.

    Subclasses ValueError so callers that guard against plain ValueError
    keep working, while ``error_code`` gives the precise kind.
    """

    def __init__(self, error_code: ErrorCode, message: Optional[str] = None):
        self.error_code = error_code
        self.error_message = message or error_code.description
        super().__init__(self.error_message)

    def __repr__(self) -> str:
        return f"AccountError({self.error_code.name}, {self.error_message!r})"
