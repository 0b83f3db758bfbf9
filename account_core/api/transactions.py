"""
Transaction endpoints
"""

from fastapi import APIRouter, Depends

from .dependencies import get_account_system
from .schemas import UseBalanceRequest, CancelBalanceRequest
from ..system import AccountSystem
from ..transactions import TransactionResult


router = APIRouter()


def _result_to_dict(result: TransactionResult) -> dict:
    return {
        "account_number": result.account_number,
        "transaction_type": result.transaction_type.value,
        "transaction_result": result.transaction_result.value,
        "transaction_id": result.transaction_id,
        "amount": result.amount,
        "transacted_at": result.transacted_at.isoformat()
    }


@router.post("/use")
def use_balance(
    request: UseBalanceRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Debit an account"""
    result = system.transaction_processor.use_balance(
        user_id=request.user_id,
        account_number=request.account_number,
        amount=request.amount,
        transaction_id=request.transaction_id
    )
    return _result_to_dict(result)


@router.post("/cancel")
def cancel_balance(
    request: CancelBalanceRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Cancel a prior use in full"""
    result = system.transaction_processor.cancel_balance(
        transaction_id=request.transaction_id,
        account_number=request.account_number,
        amount=request.amount
    )
    return _result_to_dict(result)


@router.get("/{transaction_id}")
def query_transaction(
    transaction_id: str,
    system: AccountSystem = Depends(get_account_system)
):
    """Look up a recorded transaction"""
    return _result_to_dict(system.query_service.query_transaction(transaction_id))
