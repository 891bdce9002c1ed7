"""
Notifier Contract
=================
Out-of-band delivery of passcodes to a subject.
"""

from abc import ABC, abstractmethod


class Notifier(ABC):
    """
    Abstract base class for passcode delivery channels.

    ``send`` is a single opaque call with no retry built in. It returns on
    success and raises ``DeliveryError`` on failure.
    """

    name: str = "base"

    @abstractmethod
    async def send(self, subject: str, message: str) -> None:
        """
        Deliver ``message`` to ``subject``.

        Args:
            subject: Recipient phone number
            message: Text containing the passcode

        Raises:
            DeliveryError: If the provider did not accept the message
        """
        pass

    async def close(self) -> None:
        """Clean up resources (e.g., close HTTP clients)."""
        pass
