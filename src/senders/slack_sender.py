# src/senders/slack_sender.py

from typing import Optional
from slack_sdk.errors import SlackClientError
from slack_sdk.web.async_client import AsyncWebClient
from src.core_logic.errors import RelayTransportError


class SlackRelay:
    """
    Posts and updates messages in Slack channels. Message IDs are Slack `ts`
    strings and are passed through untouched.
    """
    def __init__(self, slack_client: AsyncWebClient, unfurl_links: bool = True):
        self.slack_client = slack_client
        self.unfurl_links = unfurl_links

    async def send(self, channel_id: str, text: str, reply_to_id: Optional[str] = None) -> str:
        kwargs = {
            "channel": channel_id,
            "text": text,
            "unfurl_links": self.unfurl_links,
        }
        # Slack threads hang off the parent's ts
        if reply_to_id:
            kwargs["thread_ts"] = reply_to_id

        try:
            response = await self.slack_client.chat_postMessage(**kwargs)
        except SlackClientError as e:
            raise RelayTransportError("slack", "send", e) from e

        ts = response.get("ts")
        if not ts:
            raise RelayTransportError("slack", "send", ValueError("chat.postMessage returned no ts"))
        print(f"[SLACK_SENDER] Message {ts} sent successfully to channel {channel_id}.")
        return str(ts)

    async def update(self, channel_id: str, message_id: str, text: str) -> None:
        try:
            await self.slack_client.chat_update(channel=channel_id, ts=message_id, text=text)
        except SlackClientError as e:
            raise RelayTransportError("slack", "update", e) from e

        print(f"[SLACK_SENDER] Message {message_id} updated in channel {channel_id}.")
