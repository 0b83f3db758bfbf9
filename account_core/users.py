"""
Account User Module

Minimal identity collaborator: registers account owners and resolves them
by id for the account and transaction managers.
"""

from datetime import datetime, timezone
from typing import Optional

from .errors import AccountError, ErrorCode
from .logging_config import get_logger, log_action
from .models import AccountUser
from .repository import AccountRepository
from .storage import DuplicateRecordError


class AccountUserManager:
    """Creates and resolves account owners"""

    def __init__(self, repository: AccountRepository):
        self.repository = repository
        self.logger = get_logger("account_core.users")

    def create_user(self, name: str, user_id: Optional[int] = None) -> AccountUser:
        """
        Register a new account owner

        Args:
            name: Display name
            user_id: Explicit id (assigned sequentially when omitted)

        Returns:
            Created AccountUser
        """
        if not name or not name.strip():
            raise AccountError(ErrorCode.INVALID_ARGUMENT, "User name is required")
        if user_id is not None and user_id < 1:
            raise AccountError(ErrorCode.INVALID_ARGUMENT, "User id must be positive")

        now = datetime.now(timezone.utc)
        try:
            user = self.repository.save_user(AccountUser(
                id=user_id,
                created_at=now,
                updated_at=now,
                name=name.strip()
            ))
        except DuplicateRecordError:
            raise AccountError(ErrorCode.INVALID_REQUEST, f"User {user_id} already exists")

        log_action(
            self.logger, "info", "Account user created",
            user_id=user.id, action="create_user", resource=f"user:{user.id}"
        )
        return user

    def get_user(self, user_id: int) -> AccountUser:
        """Resolve a user or fail with USER_NOT_FOUND"""
        user = self.repository.find_user_by_id(user_id)
        if not user:
            raise AccountError(ErrorCode.USER_NOT_FOUND)
        return user
