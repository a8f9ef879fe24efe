"""Outgoing mail contract shared by every adapter."""

from abc import ABC, abstractmethod
from typing import TypedDict

SENT = "sent"
FAILED = "failed"


class Delivery(TypedDict, total=False):
    message_id: str | None
    status: str
    error: str


class EmailPort(ABC):
    """Adapters deliver one plain-text message, optionally with an HTML part."""

    @abstractmethod
    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> Delivery:
        """Deliver a message. Report failure in the result instead of raising."""
