"""
Account System Assembly

Wires storage, repository, locks and managers into one object that the
API layer (or any other caller) works against.
"""

from typing import Optional

from .accounts import AccountManager
from .config import AccountConfig, get_config
from .locking import LockManager
from .queries import QueryService
from .repository import AccountRepository
from .storage import StorageInterface, create_storage
from .transactions import TransactionProcessor
from .users import AccountUserManager


class AccountSystem:
    """Account core with all components initialized"""

    def __init__(
        self,
        storage: Optional[StorageInterface] = None,
        config: Optional[AccountConfig] = None
    ):
        self.config = config or get_config()
        self.storage = storage or create_storage(self.config.database_url)

        self.repository = AccountRepository(self.storage)
        self.lock_manager = LockManager(self.config)
        self.user_manager = AccountUserManager(self.repository)
        self.account_manager = AccountManager(
            self.repository, self.user_manager, self.lock_manager, config=self.config
        )
        self.transaction_processor = TransactionProcessor(
            self.repository, self.user_manager, self.lock_manager, config=self.config
        )
        self.query_service = QueryService(
            self.repository, self.user_manager, self.transaction_processor
        )

    def close(self) -> None:
        self.storage.close()
