"""Notifier adapters."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from truthtally.domain.ports.notifications import NotificationIntent

log = logging.getLogger(__name__)


class LoggingNotifier:
    """Record notification intents in the log instead of delivering them."""

    def notify(self, intent: NotificationIntent) -> None:
        log.info(
            "Notification %s for %s from %s: %s",
            intent.kind,
            intent.recipient_uid,
            intent.sender_uid or "-",
            intent.data,
        )


if TYPE_CHECKING:
    from truthtally.domain.ports.notifications import Notifier

    _notifier_check: Notifier = LoggingNotifier()
