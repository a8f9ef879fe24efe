"""One-time password aggregate: short-lived, single-use numeric codes.

Codes are stored as bcrypt hashes. Issuing a new code for an email and
purpose retires every code still outstanding for that pair, so only the
most recent one can ever be redeemed.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String
from protean.utils.globals import current_domain

from storefront.account.security import generate_otp, hash_secret, verify_secret
from storefront.domain import logger, storefront

INVALID_OTP_MESSAGE = "Invalid or expired OTP"


class OtpPurpose(Enum):
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"


def _as_utc(value: datetime) -> datetime:
    # Relational providers may hand back naive timestamps; they are stored in UTC.
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@storefront.aggregate
class OneTimePassword:
    email: String(required=True, max_length=254)
    purpose: String(required=True, choices=OtpPurpose)
    code_hash: String(required=True, max_length=128)
    expires_at: DateTime(required=True)
    is_used: Boolean(default=False)
    created_at: DateTime()

    @classmethod
    def issue(cls, email, purpose, code_hash, ttl_minutes, now=None):
        now = now or datetime.now(UTC)
        return cls(
            email=email.strip().lower(),
            purpose=purpose,
            code_hash=code_hash,
            expires_at=now + timedelta(minutes=ttl_minutes),
            created_at=now,
        )

    def is_expired(self, now=None) -> bool:
        now = now or datetime.now(UTC)
        return _as_utc(self.expires_at) <= now

    def is_redeemable(self, now=None) -> bool:
        return not self.is_used and not self.is_expired(now)

    def redeem(self, now=None):
        if not self.is_redeemable(now):
            raise ValidationError({"otp": [INVALID_OTP_MESSAGE]})
        self.is_used = True

    def retire(self):
        self.is_used = True


@storefront.repository(part_of=OneTimePassword)
class OneTimePasswordRepository:
    def outstanding(self, email: str, purpose: str) -> list[OneTimePassword]:
        """Unused codes for the pair, newest first."""
        return (
            self._dao.query.filter(email=email.strip().lower(), purpose=purpose, is_used=False)
            .order_by("-created_at")
            .all()
            .items
        )


def issue_otp(email: str, purpose: str) -> str:
    """Retire outstanding codes for ``email``/``purpose`` and store a fresh one.

    Returns the plain code so the caller can deliver it; only its hash is persisted.
    """
    repo = current_domain.repository_for(OneTimePassword)
    for stale in repo.outstanding(email, purpose):
        stale.retire()
        repo.add(stale)

    code = generate_otp()
    otp = OneTimePassword.issue(
        email=email,
        purpose=purpose,
        code_hash=hash_secret(code),
        ttl_minutes=int(current_domain.config["custom"]["OTP_TTL_MINUTES"]),
    )
    repo.add(otp)
    logger.info("otp_issued", purpose=purpose, otp_id=str(otp.id))
    return code


def redeem_otp(email: str, purpose: str, code: str) -> OneTimePassword:
    """Mark the matching outstanding code as used, or raise ``ValidationError``."""
    repo = current_domain.repository_for(OneTimePassword)
    now = datetime.now(UTC)
    for candidate in repo.outstanding(email, purpose):
        if candidate.is_redeemable(now) and verify_secret(code, candidate.code_hash):
            candidate.redeem(now)
            repo.add(candidate)
            return candidate

    raise ValidationError({"otp": [INVALID_OTP_MESSAGE]})
