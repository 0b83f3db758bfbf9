"""
API dependencies
"""

import threading
from typing import Optional

from ..system import AccountSystem


_account_system: Optional[AccountSystem] = None
_system_lock = threading.Lock()


def get_account_system() -> AccountSystem:
    """Shared AccountSystem, built from configuration on first use"""
    global _account_system
    with _system_lock:
        if _account_system is None:
            _account_system = AccountSystem()
        return _account_system
