"""User registration: command and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.account.notices import send_verification_code
from storefront.account.otp import OtpPurpose, issue_otp
from storefront.account.user import User
from storefront.domain import logger, storefront


@storefront.command(part_of="User")
class RegisterUser:
    """Create an unverified account. The password arrives already hashed."""

    username: String(required=True, max_length=30)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=128)
    contact: String(required=True, max_length=15)
    gender: String(required=True, max_length=10)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        repo.ensure_available(
            username=command.username.strip(),
            email=command.email,
            contact=command.contact,
        )

        user = User.register(
            username=command.username,
            email=command.email,
            password_hash=command.password_hash,
            contact=command.contact,
            gender=command.gender,
        )
        repo.add(user)

        code = issue_otp(user.email, OtpPurpose.EMAIL_VERIFICATION.value)
        send_verification_code(
            user.email,
            code,
            ttl_minutes=int(current_domain.config["custom"]["OTP_TTL_MINUTES"]),
            username=user.username,
        )

        logger.info("user_registered", user_id=str(user.id))
        return str(user.id)
