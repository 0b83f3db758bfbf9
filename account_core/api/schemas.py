"""
Pydantic schemas for API requests
"""

from typing import Optional
from pydantic import BaseModel, Field


class CreateUserRequest(BaseModel):
    name: str = Field(..., min_length=1)
    user_id: Optional[int] = Field(None, ge=1, description="Explicit user id (sequential when omitted)")


class CreateAccountRequest(BaseModel):
    user_id: int = Field(..., ge=1)
    initial_balance: int = Field(..., ge=100, description="Opening balance in the smallest currency unit")


class DeleteAccountRequest(BaseModel):
    user_id: int = Field(..., ge=1)
    account_number: str = Field(..., min_length=10, max_length=10)


class UseBalanceRequest(BaseModel):
    user_id: int = Field(..., ge=1)
    account_number: str = Field(..., min_length=10, max_length=10)
    amount: int = Field(..., ge=10, le=1_000_000_000)
    transaction_id: Optional[str] = Field(None, description="Caller correlation key")


class CancelBalanceRequest(BaseModel):
    transaction_id: str = Field(..., min_length=1)
    account_number: str = Field(..., min_length=10, max_length=10)
    amount: int = Field(..., ge=10, le=1_000_000_000)
