"""
Account endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import get_account_system
from .schemas import CreateAccountRequest, DeleteAccountRequest
from ..system import AccountSystem


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_account(
    request: CreateAccountRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Open a new account"""
    summary = system.account_manager.create_account(request.user_id, request.initial_balance)
    return {
        "user_id": summary.user_id,
        "account_number": summary.account_number,
        "registered_at": summary.registered_at.isoformat()
    }


@router.delete("")
def delete_account(
    request: DeleteAccountRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Unregister an account"""
    summary = system.account_manager.delete_account(request.user_id, request.account_number)
    return {
        "user_id": summary.user_id,
        "account_number": summary.account_number,
        "unregistered_at": summary.unregistered_at.isoformat()
    }


@router.get("")
def get_accounts_by_user(
    user_id: int,
    system: AccountSystem = Depends(get_account_system)
):
    """List a user's accounts"""
    accounts = system.query_service.get_accounts_by_user(user_id)
    return [
        {
            "account_number": info.account_number,
            "balance": info.balance,
            "account_status": info.account_status.value
        }
        for info in accounts
    ]


@router.get("/{account_id}")
def get_account(
    account_id: int,
    system: AccountSystem = Depends(get_account_system)
):
    """Get account details"""
    account = system.query_service.get_account(account_id)
    return {
        "id": account.id,
        "user_id": account.account_user_id,
        "account_number": account.account_number,
        "balance": account.balance,
        "account_status": account.account_status.value,
        "registered_at": account.registered_at.isoformat() if account.registered_at else None,
        "unregistered_at": account.unregistered_at.isoformat() if account.unregistered_at else None
    }
