"""
Tests for passcode notifiers.
"""

from base64 import b64encode
from urllib.parse import parse_qs

import httpx
import pytest

from conftest import PHONE


def _twilio(handler, **overrides):
    from smsly_auth.config import TwilioConfig
    from smsly_auth.notify import TwilioNotifier

    settings = {
        "account_sid": "AC123",
        "auth_token": "tok",
        "from_number": "+15550001111",
    }
    settings.update(overrides)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TwilioNotifier(TwilioConfig(**settings), client=client)


class TestTwilioNotifier:
    """Tests for TwilioNotifier."""

    @pytest.mark.asyncio
    async def test_send_success(self):
        """201 from Twilio is success; request carries form data and auth."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["form"] = parse_qs(request.content.decode())
            return httpx.Response(201, json={"sid": "SM1", "status": "queued"})

        notifier = _twilio(handler)
        await notifier.send(PHONE, "Your OTP for registration is: 482913")
        await notifier.close()

        assert captured["url"] == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
        assert captured["auth"] == "Basic " + b64encode(b"AC123:tok").decode()
        assert captured["form"]["To"] == [PHONE]
        assert captured["form"]["From"] == ["+15550001111"]
        assert captured["form"]["Body"] == ["Your OTP for registration is: 482913"]

    @pytest.mark.asyncio
    async def test_messaging_service_preferred(self):
        """MessagingServiceSid replaces From when configured."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["form"] = parse_qs(request.content.decode())
            return httpx.Response(201, json={"sid": "SM1"})

        notifier = _twilio(handler, messaging_service_sid="MG1")
        await notifier.send(PHONE, "hi")

        assert captured["form"]["MessagingServiceSid"] == ["MG1"]
        assert "From" not in captured["form"]

    @pytest.mark.asyncio
    async def test_accepted_with_non_json_body(self):
        """201 is success even when the body is not JSON."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, text="OK")

        notifier = _twilio(handler)
        await notifier.send(PHONE, "Your OTP for registration is: 482913")
        await notifier.close()

    @pytest.mark.asyncio
    async def test_provider_rejection(self):
        """Non-201 raises DeliveryError with the status code."""
        from smsly_auth.exceptions import DeliveryError

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"code": 21211, "message": "Invalid 'To' Phone Number"})

        notifier = _twilio(handler)

        with pytest.raises(DeliveryError) as exc_info:
            await notifier.send(PHONE, "hi")

        assert exc_info.value.status_code == 400
        assert exc_info.value.provider == "twilio"

    @pytest.mark.asyncio
    async def test_network_error(self):
        """Transport failures raise DeliveryError."""
        from smsly_auth.exceptions import DeliveryError

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        notifier = _twilio(handler)

        with pytest.raises(DeliveryError):
            await notifier.send(PHONE, "hi")

    def test_requires_sender(self):
        """Either a from number or a messaging service is needed."""
        from smsly_auth.config import TwilioConfig
        from smsly_auth.notify import TwilioNotifier

        with pytest.raises(ValueError):
            TwilioNotifier(TwilioConfig(account_sid="AC1", auth_token="tok"))


class TestInMemoryNotifier:
    """Tests for InMemoryNotifier."""

    @pytest.mark.asyncio
    async def test_outbox(self, notifier):
        """Messages are kept in order per subject."""
        await notifier.send(PHONE, "first")
        await notifier.send("+15550000000", "other")
        await notifier.send(PHONE, "second")

        assert len(notifier.outbox) == 3
        assert notifier.last_message(PHONE) == "second"
        assert notifier.last_message("+15559999999") is None
