import asyncio
from types import SimpleNamespace

import pytest
from slack_sdk.errors import SlackApiError

from src.core_logic.errors import RelayTransportError
from src.senders.slack_sender import SlackRelay
from src.senders.telegram_sender import TelegramRelay


class FakeTelegramClient:
    def __init__(self, error=None):
        self.error = error
        self.sent = []
        self.edited = []

    async def send_message(self, entity, text, reply_to=None, parse_mode=None):
        if self.error:
            raise self.error
        self.sent.append((entity, text, reply_to))
        return SimpleNamespace(id=321)

    async def edit_message(self, entity, message, text, parse_mode=None):
        if self.error:
            raise self.error
        self.edited.append((entity, message, text))


class FakeSlackClient:
    def __init__(self, error=None):
        self.error = error
        self.posted = []
        self.updated = []

    async def chat_postMessage(self, **kwargs):
        if self.error:
            raise self.error
        self.posted.append(kwargs)
        return {"ok": True, "ts": "1700000000.000100"}

    async def chat_update(self, **kwargs):
        if self.error:
            raise self.error
        self.updated.append(kwargs)


def test_telegram_send_returns_string_id_and_sets_reply():
    client = FakeTelegramClient()
    message_id = asyncio.run(TelegramRelay(client).send("-1001", "hi", reply_to_id="7"))
    assert message_id == "321"
    assert client.sent == [(-1001, "hi", 7)]


def test_telegram_update_targets_the_message():
    client = FakeTelegramClient()
    asyncio.run(TelegramRelay(client).update("-1001", "321", "edited"))
    assert client.edited == [(-1001, 321, "edited")]


def test_telegram_errors_become_transport_errors():
    relay = TelegramRelay(FakeTelegramClient(error=ValueError("Could not find the input entity")))
    with pytest.raises(RelayTransportError) as excinfo:
        asyncio.run(relay.send("-1001", "hi"))
    assert excinfo.value.platform == "telegram"
    assert excinfo.value.operation == "send"


def test_slack_send_threads_and_returns_ts_verbatim():
    client = FakeSlackClient()
    ts = asyncio.run(SlackRelay(client).send("C1", "hi", reply_to_id="1699999999.000900"))
    assert ts == "1700000000.000100"
    assert client.posted == [{"channel": "C1", "text": "hi", "unfurl_links": True, "thread_ts": "1699999999.000900"}]


def test_slack_top_level_send_has_no_thread():
    client = FakeSlackClient()
    asyncio.run(SlackRelay(client).send("C1", "hi"))
    assert "thread_ts" not in client.posted[0]


def test_slack_update():
    client = FakeSlackClient()
    asyncio.run(SlackRelay(client).update("C1", "1.000100", "edited"))
    assert client.updated == [{"channel": "C1", "ts": "1.000100", "text": "edited"}]


def test_slack_api_errors_become_transport_errors():
    error = SlackApiError("channel_not_found", {"ok": False, "error": "channel_not_found"})
    relay = SlackRelay(FakeSlackClient(error=error))
    with pytest.raises(RelayTransportError) as excinfo:
        asyncio.run(relay.update("C1", "1.1", "x"))
    assert excinfo.value.platform == "slack"
    assert excinfo.value.cause is error
