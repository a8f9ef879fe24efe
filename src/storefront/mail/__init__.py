"""Outgoing mail gateway.

A single adapter instance serves the process. The in-memory adapter is the
default; deployments install a real one with ``set_email_gateway`` at
startup.
"""

from storefront.mail.email_port import EmailPort

_gateway: EmailPort | None = None


def get_email_gateway() -> EmailPort:
    """Return the configured email adapter, creating the default on first use."""
    global _gateway
    if _gateway is None:
        from storefront.mail.fake_email import FakeEmailAdapter

        _gateway = FakeEmailAdapter()
    return _gateway


def set_email_gateway(gateway: EmailPort) -> None:
    global _gateway
    _gateway = gateway


def reset_email_gateway() -> None:
    """Drop the current adapter (useful for testing)."""
    global _gateway
    _gateway = None
