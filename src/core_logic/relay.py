# src/core_logic/relay.py
import asyncio
from enum import Enum

from src.core_logic.errors import RelayTransportError
from src.core_logic.internal_message import InboundMessage, Platform, SLACK, other_platform
from src.core_logic.translator import translate_message
from src.senders.base import OutboundRelay
from src.services.mapping_store import MappingStore, MessageCorrelation


class RelayOutcome(str, Enum):
    IGNORED_SELF = "ignored_self"
    UNMAPPED = "unmapped"
    EDIT_UNCORRELATED = "edit_uncorrelated"
    SENT = "sent"
    UPDATED = "updated"
    FAILED = "failed"


class RelayOrchestrator:
    """
    Routes one inbound event to the paired channel on the other platform:
    resolves the destination through the MappingStore, translates the message,
    calls the destination's OutboundRelay and records the new correlation.
    """
    def __init__(self, store: MappingStore, relays: dict[Platform, OutboundRelay]):
        self.store = store
        self.relays = relays

    async def handle_event(self, message: InboundMessage) -> RelayOutcome:
        # 1. Never relay our own posts back, or the two platforms would echo forever
        if message.is_from_self:
            return RelayOutcome.IGNORED_SELF

        # 2. Unmapped channels are expected and simply dropped
        destination_channel = self.store.resolve_channel(message.platform, message.channel_id)
        if not destination_channel:
            return RelayOutcome.UNMAPPED

        destination = other_platform(message.platform)
        relay = self.relays[destination]

        if message.is_edit:
            return await self._relay_edit(message, destination, relay)
        return await self._relay_new(message, destination, destination_channel, relay)

    async def _relay_new(self, message: InboundMessage, destination: Platform, destination_channel: str, relay: OutboundRelay) -> RelayOutcome:
        parent_destination_id = None
        if message.reply_parent_id:
            parent = await asyncio.to_thread(self.store.get_correlation, message.platform, message.channel_id, message.reply_parent_id)
            if parent:
                parent_destination_id = parent.message_id_for(destination)
            else:
                print(f"[RELAY] Parent {message.reply_parent_id} of {message.platform} message {message.message_id} was never relayed. Posting top-level.")

        outbound = translate_message(message, parent_destination_id)

        try:
            destination_message_id = await relay.send(destination_channel, outbound.text, reply_to_id=outbound.reply_to_id)
        except RelayTransportError as e:
            print(f"[RELAY] ERROR relaying {message.platform} message {message.message_id} to {destination} channel {destination_channel}: {e}")
            return RelayOutcome.FAILED

        own_side = {
            "channel_id": message.channel_id,
            "message_id": message.message_id,
            "parent_id": message.reply_parent_id,
        }
        other_side = {
            "channel_id": destination_channel,
            "message_id": destination_message_id,
            "parent_id": outbound.reply_to_id,
        }
        telegram_side, slack_side = (own_side, other_side) if destination == SLACK else (other_side, own_side)

        # Correlation storage may be Firestore; keep its blocking calls off the event loop
        await asyncio.to_thread(self.store.put_correlation, MessageCorrelation(
            telegram_channel_id=telegram_side["channel_id"],
            telegram_message_id=telegram_side["message_id"],
            slack_channel_id=slack_side["channel_id"],
            slack_message_ts=slack_side["message_id"],
            parent_telegram_message_id=telegram_side["parent_id"],
            parent_slack_message_ts=slack_side["parent_id"],
        ))
        print(f"[RELAY] Relayed {message.platform} {message.channel_id}/{message.message_id} -> {destination} {destination_channel}/{destination_message_id}")
        return RelayOutcome.SENT

    async def _relay_edit(self, message: InboundMessage, destination: Platform, relay: OutboundRelay) -> RelayOutcome:
        correlation = await asyncio.to_thread(self.store.get_correlation, message.platform, message.channel_id, message.message_id)
        target_channel = correlation.channel_id_for(destination) if correlation else None
        target_message_id = correlation.message_id_for(destination) if correlation else None
        if not target_channel or not target_message_id:
            print(f"[RELAY] Edit of un-relayed {message.platform} message {message.message_id}. Nothing to update.")
            return RelayOutcome.EDIT_UNCORRELATED

        outbound = translate_message(message)
        try:
            await relay.update(target_channel, target_message_id, outbound.text)
        except RelayTransportError as e:
            print(f"[RELAY] ERROR updating {destination} message {target_message_id} in {target_channel}: {e}")
            return RelayOutcome.FAILED

        print(f"[RELAY] Propagated edit of {message.platform} message {message.message_id} to {destination} {target_channel}/{target_message_id}")
        return RelayOutcome.UPDATED
