"""Payment-channel confirmation checks."""

import structlog

from .models import ChannelValidationResult, PaymentChannelEvent
from .provider import FraudDataProvider

logger = structlog.get_logger()

SUPPORTED_CHANNELS = frozenset({"credit_card", "bank_transfer"})


class PaymentChannelValidator:
    """Checks a channel confirmation against transactions the provider has
    flagged for that channel."""

    def __init__(self, provider: FraudDataProvider) -> None:
        self._provider = provider

    async def validate_channel(self, event: PaymentChannelEvent) -> ChannelValidationResult:
        channel = event.channel_type
        if channel not in SUPPORTED_CHANNELS:
            return ChannelValidationResult(
                is_suspicious=False,
                reason=f"Unsupported or unknown payment channel: {channel}",
            )

        if await self._provider.is_flagged_channel_transaction(channel, event.transaction_id):
            logger.info(
                "channel_transaction_flagged",
                channel_type=channel,
                transaction_id=event.transaction_id,
            )
            label = channel.replace("_", " ")
            return ChannelValidationResult(
                is_suspicious=True,
                reason=f"Transaction {event.transaction_id} via {label} is fraudulent",
            )

        return ChannelValidationResult(
            is_suspicious=False, reason="Payment channel transaction validated"
        )
