"""Authentication endpoints for the Chatline API."""

from __future__ import annotations

from fastapi import APIRouter, status

from chatline.api.v1.dependencies import AccountServiceDep, CurrentAccountDep
from chatline.schemas.account import (
    AccountResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)

router = APIRouter(tags=["authentication"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
)
async def register(payload: RegisterRequest, accounts: AccountServiceDep) -> RegisterResponse:
    """Create an account with a hashed password."""
    accounts.register(payload.email, payload.password)
    return RegisterResponse(message="User registered")


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, accounts: AccountServiceDep) -> LoginResponse:
    """Exchange email and password for a bearer token."""
    return LoginResponse(token=accounts.login(payload.email, payload.password))


@router.get("/me", response_model=AccountResponse)
async def read_current_account(account: CurrentAccountDep) -> AccountResponse:
    """Return the account identified by the bearer token."""
    return AccountResponse.model_validate(account)
