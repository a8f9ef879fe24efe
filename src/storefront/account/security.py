"""Password hashing, one-time codes and access tokens.

Secrets are hashed with bcrypt. Access tokens are HS256 JWTs whose ``sub``
claim is the user id. Settings come from the ``[custom]`` section of the
domain configuration.
"""

import secrets
import string
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

MIN_PASSWORD_LENGTH = 6

# bcrypt only looks at the first 72 bytes of its input
_BCRYPT_MAX_BYTES = 72


def _settings() -> dict:
    return current_domain.config["custom"]


def _encode(raw: str) -> bytes:
    return raw.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def check_password_strength(password: str | None, field_name: str = "password") -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError({field_name: [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})


def hash_secret(raw: str) -> str:
    rounds = int(_settings().get("BCRYPT_ROUNDS", 12))
    return bcrypt.hashpw(_encode(raw), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_secret(raw: str | None, hashed: str | None) -> bool:
    if not raw or not hashed:
        return False
    return bcrypt.checkpw(_encode(raw), hashed.encode("utf-8"))


def generate_otp() -> str:
    length = int(_settings().get("OTP_LENGTH", 6))
    return "".join(secrets.choice(string.digits) for _ in range(length))


def issue_token(user_id, now: datetime | None = None) -> str:
    settings = _settings()
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=int(settings["JWT_TTL_HOURS"])),
    }
    return jwt.encode(payload, settings["JWT_SECRET"], algorithm=settings["JWT_ALGORITHM"])


def decode_token(token: str) -> str:
    """Return the user id carried by ``token``.

    Raises ``jwt.PyJWTError`` when the token is malformed, tampered with or expired.
    """
    settings = _settings()
    payload = jwt.decode(
        token,
        settings["JWT_SECRET"],
        algorithms=[settings["JWT_ALGORITHM"]],
        options={"require": ["sub", "exp"]},
    )
    return payload["sub"]
