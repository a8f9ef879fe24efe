"""FastAPI endpoints for accounts: authentication, profile and addresses."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.account.addresses import AddAddress, RemoveAddress, SetDefaultAddress, UpdateAddress
from storefront.account.api.schemas import (
    AddAddressRequest,
    AddressView,
    AuthPayload,
    ForgotPasswordRequest,
    LoginRequest,
    ResendOtpRequest,
    ResetPasswordRequest,
    SignupRequest,
    UpdateAddressRequest,
    UpdateProfileRequest,
    UserView,
    VerifyOtpRequest,
)
from storefront.account.authentication import authenticate
from storefront.account.otp import OtpPurpose
from storefront.account.passwords import ForgotPassword, ResetPassword
from storefront.account.profile import UpdateProfile
from storefront.account.registration import RegisterUser
from storefront.account.security import check_password_strength, hash_secret, issue_token
from storefront.account.user import User
from storefront.account.verification import ResendOtp, VerifyOtp
from storefront.api.auth import current_user
from storefront.api.envelope import Envelope, error_response
from storefront.domain import logger

auth_router = APIRouter(prefix="/auth", tags=["auth"])
users_router = APIRouter(prefix="/users", tags=["users"])


def _auth_payload(user: User) -> AuthPayload:
    return AuthPayload(user=UserView.model_validate(user), token=issue_token(user.id))


def _reload(user_id) -> User:
    return current_domain.repository_for(User).get(user_id)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------
@auth_router.post("/signup", status_code=201, response_model=Envelope[AuthPayload])
async def signup(body: SignupRequest) -> Envelope[AuthPayload]:
    check_password_strength(body.password)
    command = RegisterUser(
        username=body.username,
        email=body.email,
        password_hash=hash_secret(body.password),
        contact=body.contact,
        gender=body.gender,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return Envelope(
        message="Registration successful. Please verify your email with the OTP sent.",
        data=_auth_payload(_reload(user_id)),
    )


@auth_router.post("/login", response_model=Envelope[AuthPayload])
async def login(body: LoginRequest):
    user = authenticate(body.email, body.password)

    if not user.is_email_verified:
        current_domain.process(
            ResendOtp(email=user.email, purpose=OtpPurpose.EMAIL_VERIFICATION.value),
            asynchronous=False,
        )
        return error_response(
            403,
            "Email not verified. A new verification OTP has been sent to your email.",
            requires_verification=True,
            email=user.email,
        )

    logger.info("user_logged_in", user_id=str(user.id))
    return Envelope(message="Login successful", data=_auth_payload(user))


@auth_router.post("/verify-otp", response_model=Envelope[AuthPayload])
async def verify_otp(body: VerifyOtpRequest) -> Envelope[AuthPayload]:
    command = VerifyOtp(email=body.email, otp=body.otp, purpose=body.purpose)
    user_id = current_domain.process(command, asynchronous=False)

    if body.purpose == OtpPurpose.EMAIL_VERIFICATION.value:
        return Envelope(message="Email verified successfully", data=_auth_payload(_reload(user_id)))
    return Envelope(message="OTP verified successfully")


@auth_router.post("/resend-otp", response_model=Envelope[None])
async def resend_otp(body: ResendOtpRequest) -> Envelope[None]:
    current_domain.process(ResendOtp(email=body.email, purpose=body.purpose), asynchronous=False)
    return Envelope(message="OTP sent successfully")


@auth_router.post("/forgot-password", response_model=Envelope[None])
async def forgot_password(body: ForgotPasswordRequest) -> Envelope[None]:
    current_domain.process(ForgotPassword(email=body.email), asynchronous=False)
    return Envelope(message="Password reset OTP sent to your email")


@auth_router.post("/reset-password", response_model=Envelope[None])
async def reset_password(body: ResetPasswordRequest) -> Envelope[None]:
    check_password_strength(body.new_password, field_name="new_password")
    command = ResetPassword(
        email=body.email,
        otp=body.otp,
        password_hash=hash_secret(body.new_password),
    )
    current_domain.process(command, asynchronous=False)
    return Envelope(message="Password reset successful")


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------
@users_router.get("/profile", response_model=Envelope[UserView])
async def get_profile(user: User = Depends(current_user)) -> Envelope[UserView]:
    return Envelope(data=UserView.model_validate(user))


@users_router.put("/profile", response_model=Envelope[UserView])
async def update_profile(body: UpdateProfileRequest, user: User = Depends(current_user)) -> Envelope[UserView]:
    command = UpdateProfile(
        user_id=user.id,
        username=body.username,
        contact=body.contact,
        gender=body.gender,
    )
    current_domain.process(command, asynchronous=False)
    return Envelope(message="Profile updated successfully", data=UserView.model_validate(_reload(user.id)))


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------
def _addresses(user_id) -> list[AddressView]:
    return [AddressView.model_validate(a) for a in _reload(user_id).addresses]


@users_router.get("/addresses", response_model=Envelope[list[AddressView]])
async def list_addresses(user: User = Depends(current_user)) -> Envelope[list[AddressView]]:
    return Envelope(data=[AddressView.model_validate(a) for a in user.addresses])


@users_router.post("/addresses", status_code=201, response_model=Envelope[list[AddressView]])
async def add_address(body: AddAddressRequest, user: User = Depends(current_user)) -> Envelope[list[AddressView]]:
    command = AddAddress(user_id=user.id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return Envelope(message="Address added successfully", data=_addresses(user.id))


@users_router.put("/addresses/{address_id}", response_model=Envelope[list[AddressView]])
async def update_address(
    address_id: str, body: UpdateAddressRequest, user: User = Depends(current_user)
) -> Envelope[list[AddressView]]:
    command = UpdateAddress(user_id=user.id, address_id=address_id, **body.model_dump())
    current_domain.process(command, asynchronous=False)
    return Envelope(message="Address updated successfully", data=_addresses(user.id))


@users_router.delete("/addresses/{address_id}", response_model=Envelope[list[AddressView]])
async def delete_address(address_id: str, user: User = Depends(current_user)) -> Envelope[list[AddressView]]:
    current_domain.process(RemoveAddress(user_id=user.id, address_id=address_id), asynchronous=False)
    return Envelope(message="Address deleted successfully", data=_addresses(user.id))


@users_router.put("/addresses/{address_id}/set-default", response_model=Envelope[list[AddressView]])
async def set_default_address(address_id: str, user: User = Depends(current_user)) -> Envelope[list[AddressView]]:
    current_domain.process(SetDefaultAddress(user_id=user.id, address_id=address_id), asynchronous=False)
    return Envelope(message="Default address updated", data=_addresses(user.id))
