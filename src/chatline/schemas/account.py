"""Account-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Credentials submitted to create an account."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(..., min_length=3, description="Login email, stored lower-cased")
    password: str = Field(..., min_length=1)


class RegisterResponse(BaseModel):
    message: str


class LoginRequest(BaseModel):
    """Credentials exchanged for an access token."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    token: str


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
