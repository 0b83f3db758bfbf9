"""
Lock Management Module

Per-key mutual exclusion for account mutations. Each key (an account
number, or the account-number sequence) gets its own lock, so operations
on different accounts never wait on each other. Acquisition is bounded:
a caller that cannot get the lock after the configured retries fails with
ACCOUNT_TRANSACTION_LOCK instead of blocking forever.
"""

import threading
import weakref
from contextlib import contextmanager
from typing import Optional

from .config import AccountConfig, get_config
from .errors import AccountError, ErrorCode
from .logging_config import get_logger, log_action


ACCOUNT_NUMBER_SEQUENCE_KEY = "account-number"


def account_lock_key(account_number: str) -> str:
    return f"account:{account_number}"


class LockManager:
    """Registry of named locks with timed, retried acquisition"""

    def __init__(self, config: Optional[AccountConfig] = None):
        self.config = config or get_config()
        # Entries vanish once no caller holds or waits on the lock
        self._locks = weakref.WeakValueDictionary()
        self._registry_lock = threading.Lock()
        self.logger = get_logger("account_core.locking")

    def _lock_for(self, key: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def acquire(self, key: str) -> threading.Lock:
        """
        Acquire the lock for ``key``.

        Waits ``lock_wait_seconds`` per attempt for up to
        ``lock_retry_attempts`` attempts.

        Raises:
            AccountError: ACCOUNT_TRANSACTION_LOCK when every attempt times out
        """
        lock = self._lock_for(key)
        attempts = max(1, self.config.lock_retry_attempts)
        for attempt in range(1, attempts + 1):
            if lock.acquire(timeout=self.config.lock_wait_seconds):
                return lock
            log_action(
                self.logger, "warning", f"Lock contention on {key}",
                action="acquire_lock", resource=key,
                extra={"attempt": attempt, "max_attempts": attempts}
            )
        raise AccountError(ErrorCode.ACCOUNT_TRANSACTION_LOCK)

    @contextmanager
    def hold(self, key: str):
        """Hold the lock for ``key`` for the duration of the block"""
        lock = self.acquire(key)
        try:
            yield
        finally:
            lock.release()

    def is_locked(self, key: str) -> bool:
        return self._lock_for(key).locked()
