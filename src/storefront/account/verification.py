"""One-time password delivery and redemption: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.account.notices import send_password_reset_code, send_verification_code
from storefront.account.otp import OneTimePassword, OtpPurpose, issue_otp, redeem_otp
from storefront.account.user import User
from storefront.domain import logger, storefront


@storefront.command(part_of="OneTimePassword")
class ResendOtp:
    """Issue a fresh code for an existing account, retiring older ones."""

    email: String(required=True, max_length=254)
    purpose: String(required=True, choices=OtpPurpose)


@storefront.command(part_of="OneTimePassword")
class VerifyOtp:
    email: String(required=True, max_length=254)
    otp: String(required=True, max_length=10)
    purpose: String(required=True, choices=OtpPurpose)


def deliver_code(email, purpose, username=None):
    """Issue a code for ``purpose`` and email it."""
    code = issue_otp(email, purpose)
    ttl = int(current_domain.config["custom"]["OTP_TTL_MINUTES"])
    if purpose == OtpPurpose.PASSWORD_RESET.value:
        send_password_reset_code(email, code, ttl_minutes=ttl)
    else:
        send_verification_code(email, code, ttl_minutes=ttl, username=username)


@storefront.command_handler(part_of=OneTimePassword)
class OtpHandler:
    @handle(ResendOtp)
    def resend_otp(self, command):
        user = current_domain.repository_for(User).find_by_email(command.email)
        if user is None:
            raise ObjectNotFoundError("User not found")

        deliver_code(user.email, command.purpose, username=user.username)
        logger.info("otp_resent", user_id=str(user.id), purpose=command.purpose)

    @handle(VerifyOtp)
    def verify_otp(self, command):
        redeem_otp(command.email, command.purpose, command.otp)

        if command.purpose != OtpPurpose.EMAIL_VERIFICATION.value:
            return None

        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)
        if user is None:
            raise ObjectNotFoundError("User not found")

        user.verify_email()
        repo.add(user)
        logger.info("email_verified", user_id=str(user.id))
        return str(user.id)
