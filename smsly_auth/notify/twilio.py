"""
Twilio SMS Notifier
===================
Delivers passcodes through the Twilio Messages API.
"""

from base64 import b64encode
from typing import Optional

import httpx
import structlog

from ..config import TwilioConfig
from ..exceptions import DeliveryError
from ..logging import mask_subject
from .base import Notifier

logger = structlog.get_logger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioNotifier(Notifier):
    """
    Twilio SMS notifier.

    Sends from ``messaging_service_sid`` when configured, otherwise from
    ``from_number``.
    """

    name = "twilio"

    def __init__(
        self,
        config: TwilioConfig,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            config: Twilio credentials and sender
            client: Pre-built HTTP client (tests, shared pools)
        """
        if not config.messaging_service_sid and not config.from_number:
            raise ValueError("Twilio needs TWILIO_PHONE_NUMBER or TWILIO_MESSAGING_SERVICE_SID")
        self.config = config
        self.base_url = f"{TWILIO_API_BASE}/Accounts/{config.account_sid}"
        self._client = client

    async def initialize(self) -> None:
        """Create HTTP client with auth."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
            logger.info("Notifier initialized", provider=self.name)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Notifier closed", provider=self.name)

    def _auth_header(self) -> str:
        raw = f"{self.config.account_sid}:{self.config.auth_token}".encode()
        return f"Basic {b64encode(raw).decode()}"

    async def send(self, subject: str, message: str) -> None:
        """Send an SMS via Twilio."""
        await self.initialize()

        payload = {
            "To": subject,
            "Body": message,
        }
        if self.config.messaging_service_sid:
            payload["MessagingServiceSid"] = self.config.messaging_service_sid
        else:
            payload["From"] = self.config.from_number

        try:
            response = await self._client.post(
                f"{self.base_url}/Messages.json",
                data=payload,
                headers={"Authorization": self._auth_header()},
            )
        except httpx.HTTPError as e:
            logger.error("Twilio send failed", subject=mask_subject(subject), error=str(e))
            raise DeliveryError(f"Request failed: {type(e).__name__}", provider=self.name) from e

        if response.status_code == 201:
            # Accepted even if the body is not JSON
            try:
                data = response.json()
            except ValueError:
                data = {}
            logger.info(
                "SMS accepted by provider",
                provider=self.name,
                subject=mask_subject(subject),
                message_sid=data.get("sid"),
            )
            return

        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        logger.warning(
            "Twilio rejected message",
            subject=mask_subject(subject),
            status=response.status_code,
            error_code=error_data.get("code"),
        )
        raise DeliveryError(
            error_data.get("message", "Provider rejected message"),
            provider=self.name,
            status_code=response.status_code,
        )
