"""
Account Number Generation Module

Account numbers are fixed-width, zero-padded decimal strings issued in
sequence: the next number is the highest existing one plus one.
"""

from typing import Optional

from .config import AccountConfig, get_config
from .errors import AccountError, ErrorCode
from .repository import AccountRepository


class AccountNumberGenerator:
    """
    Derives the next sequential account number.

    The read of the last number and the insert of the new account must
    happen in one critical section; AccountManager holds the
    account-number sequence lock around both.
    """

    def __init__(self, repository: AccountRepository, config: Optional[AccountConfig] = None):
        self.repository = repository
        self.config = config or get_config()

    def format(self, value: int) -> str:
        width = self.config.account_number_length
        if value < 0 or value >= 10 ** width:
            raise AccountError(
                ErrorCode.INVALID_ARGUMENT,
                f"Account number {value} does not fit in {width} digits"
            )
        return str(value).zfill(width)

    def next(self) -> str:
        last_account = self.repository.find_last_account()
        if last_account is None:
            return self.format(self.config.first_account_number)
        return self.format(int(last_account.account_number) + 1)
