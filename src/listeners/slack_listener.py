# src/listeners/slack_listener.py

import asyncio
from asyncio import Queue
from typing import Optional
from slack_bolt.async_app import AsyncApp
from slack_sdk.errors import SlackClientError
from slack_sdk.web.async_client import AsyncWebClient
from src.core_logic.internal_message import InboundMessage, SLACK
from src.core_logic.translator import describe_channel

# Plain messages have no subtype. Everything else (joins, deletes, topic changes...) is not relayed.
RELAYED_SUBTYPES = {None, "file_share", "thread_broadcast", "bot_message", "me_message"}


def slack_event_to_inbound(event: dict, channel_name: Optional[str] = None, user_name: Optional[str] = None) -> Optional[InboundMessage]:
    """
    Converts a Slack `message` event into our standardized InboundMessage.
    Returns None for events that should not be relayed at all.
    """
    subtype = event.get("subtype")
    channel_id = event.get("channel")

    if subtype == "message_changed":
        body = event.get("message") or {}
        previous = event.get("previous_message") or {}
        # Link unfurls also arrive as message_changed, with the text untouched
        if previous and previous.get("text") == body.get("text"):
            return None
        is_edit = True
    elif subtype in RELAYED_SUBTYPES:
        body = event
        is_edit = False
    else:
        return None

    ts = body.get("ts")
    if not channel_id or not ts:
        return None

    thread_ts = body.get("thread_ts")
    is_thread_reply = bool(thread_ts) and thread_ts != ts

    return InboundMessage(
        platform=SLACK,
        channel_id=str(channel_id),
        message_id=str(ts),
        text=body.get("text") or None,
        has_media=bool(body.get("files") or body.get("attachments")),
        sender_label=user_name,
        channel_label=describe_channel(SLACK, channel_name),
        reply_parent_id=str(thread_ts) if is_thread_reply else None,
        is_edit=is_edit,
        is_from_self=bool(body.get("bot_id")) or body.get("subtype") == "bot_message",
    )


def _message_user(event: dict) -> Optional[str]:
    if event.get("subtype") == "message_changed":
        return (event.get("message") or {}).get("user")
    return event.get("user")


async def fetch_slack_labels(client: AsyncWebClient, channel_id: str, user_id: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """Looks up the channel name and the poster's real name for the context lines."""
    channel_name, user_name = None, None
    try:
        channel_info = await client.conversations_info(channel=channel_id)
        channel_name = (channel_info.get("channel") or {}).get("name")
        if user_id:
            user_info = await client.users_info(user=user_id)
            user = user_info.get("user") or {}
            user_name = user.get("real_name") or user.get("name")
    except SlackClientError as e:
        print(f"[SLACK_LISTENER] Error fetching Slack channel or user info: {e}")
    return channel_name, user_name


async def _with_labels(client: AsyncWebClient, event: dict, inbound: InboundMessage) -> InboundMessage:
    channel_name, user_name = await fetch_slack_labels(client, inbound.channel_id, _message_user(event))
    return slack_event_to_inbound(event, channel_name, user_name)


def setup_slack_listener(app: AsyncApp, relay_queue: Queue):
    """
    Registers the message handler that converts Slack events and puts them
    on the relay queue. Socket mode dispatches each event as its own task, so
    events are queued in arrival order and labels are resolved afterwards.
    """
    print("[SLACK_LISTENER] Setting up event handler...")

    @app.event("message")
    async def handle_message_events(event: dict, client: AsyncWebClient):
        """
        This function is triggered for ANY message event the bot can see.
        """
        try:
            inbound = slack_event_to_inbound(event)
            if inbound is None:
                return
            # Reserve the queue slot before the first await; the worker awaits the lookup
            if inbound.is_from_self:
                relay_queue.put_nowait(inbound)
            else:
                relay_queue.put_nowait(asyncio.ensure_future(_with_labels(client, event, inbound)))
        except Exception as e:
            print(f"[SLACK_LISTENER] Error handling Slack message event: {e}")

    print("[SLACK_LISTENER] General message handler registered.")
