"""
Passcode Notifiers
==================
Delivery channels for OTP messages.
"""

from .base import Notifier
from .memory import InMemoryNotifier, OutboxMessage
from .twilio import TwilioNotifier

__all__ = [
    "Notifier",
    "InMemoryNotifier",
    "OutboxMessage",
    "TwilioNotifier",
]
