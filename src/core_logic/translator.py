# src/core_logic/translator.py

from typing import Optional

from src.core_logic.internal_message import InboundMessage, OutboundMessage, Platform, TELEGRAM, SLACK

MEDIA_PLACEHOLDER = "[Media content is present but cannot be directly embedded]"
EDITED_MARKER = "(edited)"


def platform_label(platform: Platform) -> str:
    return {TELEGRAM: "Telegram", SLACK: "Slack"}[platform]


def describe_channel(platform: Platform, channel_name: Optional[str]) -> Optional[str]:
    """
    Builds the human-readable channel label used in the context line,
    e.g. 'Telegram channel "Announcements"' or 'Slack #general'.
    """
    if not channel_name:
        return None
    if platform == TELEGRAM:
        return f'{platform_label(platform)} channel "{channel_name}"'
    return f"{platform_label(platform)} #{channel_name.lstrip('#')}"


def build_context_line(channel_label: Optional[str], is_edit: bool) -> Optional[str]:
    if channel_label:
        suffix = f" {EDITED_MARKER}" if is_edit else ""
        return f"*From {channel_label}{suffix}*"
    if is_edit:
        return f"*{EDITED_MARKER}*"
    return None


def format_text(message: InboundMessage) -> str:
    """
    Renders the destination text: context line, sender line, the original
    text verbatim and, when the source carried media, the placeholder notice.
    """
    lines = []
    context_line = build_context_line(message.channel_label, message.is_edit)
    if context_line:
        lines.append(context_line)
    if message.sender_label:
        lines.append(f"*{message.sender_label}*")
    if message.text:
        lines.append(message.text)

    text = "\n".join(lines)
    if message.has_media:
        text = f"{text}\n\n{MEDIA_PLACEHOLDER}" if text else MEDIA_PLACEHOLDER
    return text


def translate_message(message: InboundMessage, parent_destination_id: Optional[str] = None) -> OutboundMessage:
    """
    Converts an inbound message into the payload for the other platform.

    `parent_destination_id` is the destination-side id of the correlated reply
    parent. Passing None relays the message top-level, which is what happens
    when the parent was never relayed. Edits never carry reply linkage since
    they are applied as updates to an existing message.
    """
    reply_to_id = None if message.is_edit else parent_destination_id
    return OutboundMessage(text=format_text(message), reply_to_id=reply_to_id)
