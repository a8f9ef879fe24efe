"""Account emails: verification codes, reset codes and confirmations."""

import html

from storefront.domain import logger
from storefront.mail import get_email_gateway
from storefront.mail.email_port import SENT, Delivery


def _deliver(to: str, subject: str, body: str, html_body: str | None = None, kind: str = "") -> Delivery:
    result = get_email_gateway().send(to=to, subject=subject, body=body, html_body=html_body)
    if result.get("status") != SENT:
        logger.warning("email_not_sent", kind=kind, error=result.get("error"))
    else:
        logger.info("email_sent", kind=kind, message_id=result.get("message_id"))
    return result


def send_verification_code(email: str, code: str, ttl_minutes: int, username: str | None = None) -> Delivery:
    greeting = f"Welcome {username}! " if username else ""
    body = f"{greeting}Your OTP for email verification is: {code}. Valid for {ttl_minutes} minutes."
    html_body = (
        "<div style=\"font-family: Arial, sans-serif;\">"
        f"<p>{html.escape(greeting)}Please use the code below to verify your email address:</p>"
        f"<p style=\"font-size: 24px; font-weight: bold; letter-spacing: 5px;\">{code}</p>"
        f"<p>This code is valid for {ttl_minutes} minutes.</p>"
        "</div>"
    )
    return _deliver(email, "Email Verification OTP", body, html_body, kind="email_verification")


def send_password_reset_code(email: str, code: str, ttl_minutes: int) -> Delivery:
    body = f"Your OTP for password reset is: {code}. Valid for {ttl_minutes} minutes."
    return _deliver(email, "Password Reset OTP", body, kind="password_reset")


def send_password_changed(email: str) -> Delivery:
    body = "Your password has been reset successfully. If you did not do this, contact support immediately."
    return _deliver(email, "Password Reset Successful", body, kind="password_changed")
