"""
Core email sending utilities using the MailerSend HTTP API.
"""

from dataclasses import dataclass
from typing import Any, Optional

from html import escape

import httpx

from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)


@dataclass
class EmailAddress:
    email: str
    name: Optional[str] = None

    def to_dict(self) -> dict[str, str]:
        data = {"email": self.email}
        if self.name:
            data["name"] = self.name
        return data


class MailerSendError(Exception):
    """Raised when MailerSend rejects a request."""

    def __init__(
        self, message: str, status_code: Optional[int] = None, response_text: str = ""
    ):
        self.message = message
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(message)


class MailerSendClient:
    """Async client for the MailerSend email endpoint (bearer-token auth)."""

    def __init__(
        self,
        api_key: str,
        api_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("MAILERSEND_API_KEY is required")
        self.api_url = api_url or get_settings().MAILERSEND_API_URL
        self.timeout = timeout
        self._transport = transport
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "X-Requested-With": "XMLHttpRequest",
        }

    async def send(
        self,
        sender: EmailAddress,
        to: list[EmailAddress],
        subject: str,
        html: str,
        text: Optional[str] = None,
    ) -> None:
        """
        Send one email. MailerSend answers 202 Accepted on success.

        Raises MailerSendError on a non-2xx response; transport errors from
        httpx propagate unchanged.
        """
        payload: dict[str, Any] = {
            "from": sender.to_dict(),
            "to": [recipient.to_dict() for recipient in to],
            "subject": subject,
            "html": html,
        }
        if text:
            payload["text"] = text

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            response = await client.post(
                self.api_url, headers=self._headers, json=payload
            )

        if not response.is_success:
            raise MailerSendError(
                f"MailerSend returned {response.status_code}",
                status_code=response.status_code,
                response_text=response.text,
            )


def get_mail_client() -> Optional[MailerSendClient]:
    """Return a client when an API key is configured, otherwise None."""
    settings = get_settings()
    if not settings.MAILERSEND_API_KEY:
        return None
    return MailerSendClient(settings.MAILERSEND_API_KEY, settings.MAILERSEND_API_URL)


async def send_email(
    to_email: str,
    subject: str,
    body: str,
    html_body: Optional[str] = None,
    to_name: Optional[str] = None,
    from_email: Optional[str] = None,
    from_name: Optional[str] = None,
    client: Optional[MailerSendClient] = None,
) -> bool:
    """
    Send an email through MailerSend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        body: Plain text body
        html_body: Optional HTML body (the plain text is wrapped in <pre> otherwise)
        to_name: Optional recipient display name
        from_email: Sender email (defaults to STORE_FROM_EMAIL)
        from_name: Sender name (defaults to STORE_FROM_NAME)
        client: Optional preconfigured client

    Returns:
        True if the email was accepted, False otherwise. Never raises.
    """
    settings = get_settings()
    client = client or get_mail_client()

    if client is None:
        logger.warning("MAILERSEND_API_KEY not configured - email not sent")
        logger.info(f"Would have sent email to {to_email}: {subject}")
        return False

    sender = EmailAddress(
        from_email or settings.STORE_FROM_EMAIL, from_name or settings.STORE_FROM_NAME
    )

    try:
        logger.info(f"Sending email to {to_email}: {subject}")
        await client.send(
            sender=sender,
            to=[EmailAddress(to_email, to_name)],
            subject=subject,
            html=html_body or f"<pre>{escape(body)}</pre>",
            text=body,
        )
        logger.info(f"Email sent successfully to {to_email}")
        return True

    except MailerSendError as e:
        logger.error(f"MailerSend rejected email to {to_email}: {e} {e.response_text}")
        return False
    except httpx.HTTPError as e:
        logger.error(f"Failed to reach MailerSend: {type(e).__name__}: {e}")
        return False
    except Exception as e:
        logger.error(f"Failed to send email: {type(e).__name__}: {e}")
        return False
