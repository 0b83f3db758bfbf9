"""
Account user endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import get_account_system
from .schemas import CreateUserRequest
from ..system import AccountSystem


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    request: CreateUserRequest,
    system: AccountSystem = Depends(get_account_system)
):
    """Register an account owner"""
    user = system.user_manager.create_user(request.name, user_id=request.user_id)
    return {"user_id": user.id, "name": user.name}
