"""In-memory email adapter used in development and tests."""

from uuid import uuid4

from storefront.mail.email_port import FAILED, SENT, Delivery, EmailPort


class FakeEmailAdapter(EmailPort):
    """Keeps every delivered message in ``outbox``.

    ``fail_with`` simulates an outage: later sends are refused until ``reset``.
    """

    def __init__(self):
        self.outbox: list[dict] = []
        self.outage: str | None = None

    def fail_with(self, reason: str = "Email delivery failed"):
        self.outage = reason

    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> Delivery:
        if self.outage:
            return {"message_id": None, "status": FAILED, "error": self.outage}

        message = {"message_id": f"mail-{uuid4().hex[:12]}", "to": to, "subject": subject, "body": body}
        if html_body:
            message["html_body"] = html_body
        self.outbox.append(message)
        return {"message_id": message["message_id"], "status": SENT}

    def messages_to(self, address: str) -> list[dict]:
        return [m for m in self.outbox if m["to"] == address]

    def reset(self):
        self.outbox.clear()
        self.outage = None
