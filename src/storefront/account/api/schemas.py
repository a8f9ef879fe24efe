"""Pydantic request/response schemas for the account API.

These are external contracts, separate from the internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
class AddressView(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    full_name: str
    phone: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    pincode: str
    country: str | None = None
    is_default: bool = False


class UserView(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    username: str
    email: str
    contact: str
    gender: str
    role: str
    is_email_verified: bool
    is_active: bool
    addresses: list[AddressView] = []
    created_at: datetime | None = None


class AuthPayload(BaseModel):
    user: UserView
    token: str


# ---------------------------------------------------------------------------
# Auth requests
# ---------------------------------------------------------------------------
class SignupRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "username": "asha",
                    "email": "asha@example.com",
                    "password": "s3cret-pass",
                    "contact": "9876543210",
                    "gender": "female",
                }
            ]
        }
    }

    username: str = Field(..., max_length=30)
    email: str = Field(..., max_length=254)
    password: str
    contact: str = Field(..., max_length=15)
    gender: str


class LoginRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "asha@example.com", "password": "s3cret-pass"}]}}

    email: str
    password: str


class VerifyOtpRequest(BaseModel):
    email: str
    otp: str = Field(..., max_length=10)
    purpose: str = "email_verification"


class ResendOtpRequest(BaseModel):
    email: str
    purpose: str = "email_verification"


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"email": "asha@example.com", "otp": "482913", "new_password": "n3w-secret"}]
        }
    }

    email: str
    otp: str = Field(..., max_length=10)
    new_password: str


# ---------------------------------------------------------------------------
# Profile and address requests
# ---------------------------------------------------------------------------
class UpdateProfileRequest(BaseModel):
    username: str | None = Field(None, max_length=30)
    contact: str | None = Field(None, max_length=15)
    gender: str | None = None


class AddAddressRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "full_name": "Asha Rao",
                    "phone": "9876543210",
                    "address_line1": "12 MG Road",
                    "city": "Bengaluru",
                    "state": "Karnataka",
                    "pincode": "560001",
                    "is_default": True,
                }
            ]
        }
    }

    full_name: str = Field(..., max_length=100)
    phone: str = Field(..., max_length=15)
    address_line1: str = Field(..., max_length=255)
    address_line2: str | None = Field(None, max_length=255)
    city: str = Field(..., max_length=100)
    state: str = Field(..., max_length=100)
    pincode: str = Field(..., max_length=10)
    country: str | None = Field(None, max_length=100)
    is_default: bool = False


class UpdateAddressRequest(BaseModel):
    full_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=15)
    address_line1: str | None = Field(None, max_length=255)
    address_line2: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    pincode: str | None = Field(None, max_length=10)
    country: str | None = Field(None, max_length=100)
    is_default: bool | None = None
