"""
In-Memory Notifier
==================
Collects messages instead of sending them. Used in dev mode and tests.
"""

from dataclasses import dataclass
from typing import List, Optional

import structlog

from ..logging import mask_subject
from .base import Notifier

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OutboxMessage:
    subject: str
    message: str


class InMemoryNotifier(Notifier):
    """Appends every message to ``outbox``."""

    name = "memory"

    def __init__(self):
        self.outbox: List[OutboxMessage] = []

    async def send(self, subject: str, message: str) -> None:
        self.outbox.append(OutboxMessage(subject=subject, message=message))
        logger.info("Message queued in memory outbox", subject=mask_subject(subject))

    def last_message(self, subject: str) -> Optional[str]:
        """Most recent message sent to ``subject``."""
        for item in reversed(self.outbox):
            if item.subject == subject:
                return item.message
        return None
