# src/senders/base.py
from typing import Optional, Protocol


class OutboundRelay(Protocol):
    """
    What the orchestrator needs from a platform transport. Both methods raise
    RelayTransportError when the platform call fails.
    """

    async def send(self, channel_id: str, text: str, reply_to_id: Optional[str] = None) -> str:
        """Posts a new message and returns the platform's id for it."""
        ...

    async def update(self, channel_id: str, message_id: str, text: str) -> None:
        """Replaces the text of a message this bot posted earlier."""
        ...
