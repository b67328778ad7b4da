"""Multicast dispatch of one notification to a batch of push tokens."""

import logging

from household_notify.core.config import Constants
from household_notify.core.errors import PushTransportError
from household_notify.domain.endpoint import DeliveryOutcome
from household_notify.domain.notification import MulticastMessage, Notification
from household_notify.interface.protocols import PushTransport


logger = logging.getLogger(__name__)


class MulticastDispatcher:
    """Send a notification to many tokens and return one outcome per token.

    The transport caps how many tokens one call may carry, so larger lists are
    split into consecutive chunks; outcomes are concatenated in token order.
    """

    def __init__(self, transport: PushTransport, *, batch_size: int = Constants.FCM_MAX_TOKENS_PER_MULTICAST) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._transport = transport
        self._batch_size = min(batch_size, Constants.FCM_MAX_TOKENS_PER_MULTICAST)

    def build_message(self, tokens: list[str], notification: Notification) -> MulticastMessage:
        """Attach platform delivery hints: high priority on Android, default sound on iOS."""
        return MulticastMessage(
            tokens=tokens,
            notification=notification,
            android={"priority": Constants.ANDROID_PRIORITY},
            apns={"payload": {"aps": {"sound": Constants.APNS_SOUND}}},
        )

    async def send(self, tokens: list[str], notification: Notification) -> list[DeliveryOutcome]:
        """Dispatch to every token.

        Args:
            tokens: Ordered registration tokens
            notification: Composed notification

        Returns:
            Outcomes aligned with tokens (result[i] describes tokens[i]); empty
            without calling the transport when tokens is empty

        Raises:
            PushTransportError: If the transport returns a misaligned batch
        """
        if not tokens:
            logger.debug("No tokens to send to, skipping dispatch")
            return []

        outcomes: list[DeliveryOutcome] = []
        for start in range(0, len(tokens), self._batch_size):
            chunk = tokens[start : start + self._batch_size]
            chunk_outcomes = await self._transport.send_multicast(self.build_message(chunk, notification))
            if len(chunk_outcomes) != len(chunk):
                raise PushTransportError(
                    f"Transport returned {len(chunk_outcomes)} outcomes for {len(chunk)} tokens"
                )
            outcomes.extend(chunk_outcomes)

        success_count = sum(1 for outcome in outcomes if outcome.success)
        logger.info(
            "Sent to %d/%d devices.",
            success_count,
            len(tokens),
            extra={"notification_type": notification.data.get("type", ""), "success_count": success_count},
        )
        return outcomes
