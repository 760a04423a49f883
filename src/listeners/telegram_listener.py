# src/listeners/telegram_listener.py

import asyncio
from asyncio import Queue
from dataclasses import replace
from typing import Optional
from telethon import TelegramClient, events, utils
from telethon.errors import RPCError
from telethon.tl.types import MessageMediaWebPage
from src.core_logic.internal_message import InboundMessage, TELEGRAM
from src.core_logic.translator import describe_channel


def _has_media(message) -> bool:
    media = getattr(message, 'media', None)
    # Link previews arrive as media but are not something the poster attached
    return media is not None and not isinstance(media, MessageMediaWebPage)


def telegram_message_to_inbound(message, chat_title: Optional[str] = None, sender_name: Optional[str] = None, is_edit: bool = False) -> InboundMessage:
    """Converts a Telethon message into our standardized InboundMessage."""
    reply_to_msg_id = getattr(message, 'reply_to_msg_id', None)
    sender_label = getattr(message, 'post_author', None) or sender_name
    return InboundMessage(
        platform=TELEGRAM,
        channel_id=str(message.chat_id),
        message_id=str(message.id),
        # Raw text; the entity markup is not re-rendered
        text=message.message or None,
        has_media=_has_media(message),
        sender_label=sender_label or None,
        channel_label=describe_channel(TELEGRAM, chat_title),
        reply_parent_id=str(reply_to_msg_id) if reply_to_msg_id else None,
        is_edit=is_edit,
        is_from_self=bool(getattr(message, 'out', False)),
    )


async def _fetch_labels(event) -> tuple[Optional[str], Optional[str]]:
    chat_title, sender_name = None, None
    try:
        chat = await event.get_chat()
        chat_title = getattr(chat, 'title', None)
        # Channel posts have no sender; post_author covers signed posts
        if not event.message.post and event.message.sender_id:
            sender = await event.get_sender()
            sender_name = utils.get_display_name(sender) if sender else None
    except (RPCError, ValueError) as e:
        print(f"[TELEGRAM_LISTENER] Error fetching chat or sender info: {e}")
    return chat_title, sender_name


async def _with_labels(event, inbound: InboundMessage) -> InboundMessage:
    chat_title, sender_name = await _fetch_labels(event)
    return replace(
        inbound,
        channel_label=describe_channel(TELEGRAM, chat_title),
        sender_label=inbound.sender_label or sender_name or None,
    )


def setup_telegram_listener(client: TelegramClient, relay_queue: Queue):
    """
    Sets up the event handlers for the Telegram client.
    This function doesn't run the client, it just prepares it.

    Telethon runs every update handler as its own task, so the queue slot is
    taken before the first await. Label lookups then run in a task the relay
    worker awaits, which keeps the queue in arrival order.
    """
    print("[TELEGRAM_LISTENER] Setting up event handlers...")

    def enqueue(event, is_edit: bool):
        message = event.message
        if not message:
            return
        try:
            inbound = telegram_message_to_inbound(message, is_edit=is_edit)
            # Our own posts are dropped by the orchestrator; no need to look up labels
            if inbound.is_from_self:
                relay_queue.put_nowait(inbound)
            else:
                relay_queue.put_nowait(asyncio.ensure_future(_with_labels(event, inbound)))
        except Exception as e:
            print(f"[TELEGRAM_LISTENER] Error handling Telegram message {getattr(message, 'id', '?')}: {e}")

    @client.on(events.NewMessage())
    async def on_new_message(event: events.NewMessage.Event):
        enqueue(event, is_edit=False)

    @client.on(events.MessageEdited())
    async def on_edited_message(event: events.MessageEdited.Event):
        enqueue(event, is_edit=True)

    print("[TELEGRAM_LISTENER] Event handlers registered.")
