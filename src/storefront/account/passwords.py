"""Password recovery: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.account.notices import send_password_changed
from storefront.account.otp import OtpPurpose, redeem_otp
from storefront.account.user import User
from storefront.account.verification import deliver_code
from storefront.domain import logger, storefront


@storefront.command(part_of="User")
class ForgotPassword:
    email: String(required=True, max_length=254)


@storefront.command(part_of="User")
class ResetPassword:
    """Replace the password after redeeming a password-reset code."""

    email: String(required=True, max_length=254)
    otp: String(required=True, max_length=10)
    password_hash: String(required=True, max_length=128)


@storefront.command_handler(part_of=User)
class PasswordRecoveryHandler:
    @handle(ForgotPassword)
    def forgot_password(self, command):
        user = current_domain.repository_for(User).find_by_email(command.email)
        if user is None:
            raise ObjectNotFoundError("No user found with this email")

        deliver_code(user.email, OtpPurpose.PASSWORD_RESET.value)
        logger.info("password_reset_requested", user_id=str(user.id))

    @handle(ResetPassword)
    def reset_password(self, command):
        redeem_otp(command.email, OtpPurpose.PASSWORD_RESET.value, command.otp)

        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)
        if user is None:
            raise ObjectNotFoundError("User not found")

        user.change_password(command.password_hash)
        repo.add(user)

        send_password_changed(user.email)
        logger.info("password_reset", user_id=str(user.id))
