"""Outbound delivery channels: SMS (Twilio REST API) and email (SendGrid).

Both gateways raise `NotificationError` when the provider refuses a message;
the dispatcher decides what a failed channel means for the caller.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from ..core.exceptions import NotificationError

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"


class SmsGateway(Protocol):
    is_configured: bool

    def send(self, *, to: str, body: str) -> str:
        raise NotImplementedError


class EmailGateway(Protocol):
    is_configured: bool

    def send(self, *, to: str, subject: str, text: str, html: str) -> None:
        raise NotImplementedError


class TwilioSmsGateway:
    def __init__(
        self,
        account_sid: Optional[str],
        auth_token: Optional[str],
        from_number: Optional[str],
        *,
        timeout: float = 10,
    ):
        self._account_sid = account_sid or ""
        self._auth_token = auth_token or ""
        self._from_number = from_number or ""
        self._timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self._account_sid and self._auth_token and self._from_number)

    def send(self, *, to: str, body: str) -> str:
        url = TWILIO_MESSAGES_URL.format(sid=self._account_sid)
        try:
            response = requests.post(
                url,
                data={"To": to, "From": self._from_number, "Body": body},
                auth=(self._account_sid, self._auth_token),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise NotificationError(f"SMS to {to} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if not response.ok:
            raise NotificationError(
                f"SMS to {to} failed ({payload.get('code', response.status_code)}): {payload.get('message', response.text)}"
            )

        logger.info("SMS sent to %s (sid=%s, status=%s)", to, payload.get("sid"), payload.get("status"))
        return str(payload.get("sid") or "")


class SendGridEmailGateway:
    def __init__(self, api_key: Optional[str], from_email: Optional[str]):
        self._api_key = api_key or ""
        self._from_email = from_email or ""

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._from_email)

    def send(self, *, to: str, subject: str, text: str, html: str) -> None:
        message = Mail(
            from_email=self._from_email,
            to_emails=to,
            subject=subject,
            plain_text_content=text,
            html_content=html,
        )
        try:
            response = SendGridAPIClient(self._api_key).send(message)
        except Exception as e:
            # python-http-client raises its own HTTPError hierarchy for 4xx/5xx.
            raise NotificationError(f"Email to {to} failed: {e}") from e

        if response.status_code not in (200, 201, 202):
            raise NotificationError(f"Email to {to} failed with status {response.status_code}")
        logger.info("Email sent to %s: %s", to, subject)
