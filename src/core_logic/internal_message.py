# src/core_logic/internal_message.py

from dataclasses import dataclass
from typing import Literal, Optional

Platform = Literal['telegram', 'slack']

TELEGRAM: Platform = 'telegram'
SLACK: Platform = 'slack'
PLATFORMS: tuple[Platform, ...] = (TELEGRAM, SLACK)


def other_platform(platform: Platform) -> Platform:
    if platform == TELEGRAM:
        return SLACK
    if platform == SLACK:
        return TELEGRAM
    raise ValueError(f"Unknown platform: {platform!r}")


@dataclass(frozen=True)
class InboundMessage:
    """
    A standardized, internal representation of a message event from either platform.
    The core logic of the bridge should only ever interact with this object.

    Every identifier is an opaque string. Slack timestamps like '1700000000.000100'
    must round-trip exactly, so nothing here is ever parsed as a number.
    """
    platform: Platform
    channel_id: str  # For Telegram, the chat ID. For Slack, the channel ID.
    message_id: str  # For Telegram, the message ID. For Slack, the message ts.
    text: Optional[str] = None
    has_media: bool = False
    sender_label: Optional[str] = None
    channel_label: Optional[str] = None
    reply_parent_id: Optional[str] = None  # Telegram reply_to_msg_id / Slack thread_ts
    is_edit: bool = False
    is_from_self: bool = False


@dataclass(frozen=True)
class OutboundMessage:
    """The translated payload for the destination platform."""
    text: str
    reply_to_id: Optional[str] = None
