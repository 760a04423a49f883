# src/senders/telegram_sender.py

from typing import Optional
from telethon import TelegramClient
from telethon.errors import RPCError
from src.core_logic.errors import RelayTransportError


def _to_peer(channel_id: str) -> int:
    # Telethon resolves chats by their numeric ID; the rest of the bridge
    # keeps IDs as opaque strings, so the conversion only happens here.
    return int(channel_id)


class TelegramRelay:
    """
    Sends and edits messages in Telegram chats through the bot's TelegramClient.
    """
    def __init__(self, client: TelegramClient, parse_mode: str = "md"):
        self.client = client
        self.parse_mode = parse_mode

    async def send(self, channel_id: str, text: str, reply_to_id: Optional[str] = None) -> str:
        try:
            message = await self.client.send_message(
                _to_peer(channel_id),
                text,
                reply_to=int(reply_to_id) if reply_to_id else None,
                parse_mode=self.parse_mode,
            )
        except (RPCError, ValueError, ConnectionError) as e:
            raise RelayTransportError("telegram", "send", e) from e

        print(f"[TELEGRAM_SENDER] Message {message.id} sent successfully to chat {channel_id}.")
        return str(message.id)

    async def update(self, channel_id: str, message_id: str, text: str) -> None:
        try:
            await self.client.edit_message(
                _to_peer(channel_id),
                int(message_id),
                text,
                parse_mode=self.parse_mode,
            )
        except (RPCError, ValueError, ConnectionError) as e:
            raise RelayTransportError("telegram", "update", e) from e

        print(f"[TELEGRAM_SENDER] Message {message_id} updated in chat {channel_id}.")
