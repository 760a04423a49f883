from types import SimpleNamespace

from src.listeners.slack_listener import slack_event_to_inbound
from src.listeners.telegram_listener import telegram_message_to_inbound


def tg_message(**overrides):
    base = dict(chat_id=-1001234, id=55, message="hello", media=None, reply_to_msg_id=None, out=False, post_author=None, post=False, sender_id=7)
    base.update(overrides)
    return SimpleNamespace(**base)


def test_telegram_message_ids_become_strings():
    inbound = telegram_message_to_inbound(tg_message(), chat_title="News")
    assert inbound.platform == "telegram"
    assert inbound.channel_id == "-1001234"
    assert inbound.message_id == "55"
    assert inbound.channel_label == 'Telegram channel "News"'
    assert inbound.reply_parent_id is None
    assert not inbound.has_media
    assert not inbound.is_edit


def test_telegram_reply_media_and_edit():
    inbound = telegram_message_to_inbound(tg_message(reply_to_msg_id=54, media=object(), message=""), is_edit=True)
    assert inbound.reply_parent_id == "54"
    assert inbound.has_media
    assert inbound.text is None
    assert inbound.is_edit


def test_telegram_outgoing_is_flagged_as_self():
    assert telegram_message_to_inbound(tg_message(out=True)).is_from_self


def test_telegram_signed_post_author_wins_over_sender_name():
    inbound = telegram_message_to_inbound(tg_message(post_author="Editor"), sender_name="Channel Bot")
    assert inbound.sender_label == "Editor"
    assert telegram_message_to_inbound(tg_message(), sender_name="Bob").sender_label == "Bob"


def test_slack_plain_message():
    event = {"type": "message", "channel": "C1", "user": "U1", "text": "hi", "ts": "1700000000.000100"}
    inbound = slack_event_to_inbound(event, channel_name="general", user_name="Alice")
    assert inbound.platform == "slack"
    assert inbound.channel_id == "C1"
    assert inbound.message_id == "1700000000.000100"
    assert inbound.channel_label == "Slack #general"
    assert inbound.sender_label == "Alice"
    assert inbound.reply_parent_id is None
    assert not inbound.is_from_self


def test_slack_thread_reply_declares_parent():
    event = {"channel": "C1", "text": "r", "ts": "1700000001.000200", "thread_ts": "1700000000.000100"}
    assert slack_event_to_inbound(event).reply_parent_id == "1700000000.000100"


def test_slack_thread_parent_itself_is_not_a_reply():
    event = {"channel": "C1", "text": "p", "ts": "1700000000.000100", "thread_ts": "1700000000.000100"}
    assert slack_event_to_inbound(event).reply_parent_id is None


def test_slack_bot_messages_are_self():
    assert slack_event_to_inbound({"channel": "C1", "text": "x", "ts": "1.1", "bot_id": "B1"}).is_from_self
    assert slack_event_to_inbound({"channel": "C1", "text": "x", "ts": "1.1", "subtype": "bot_message"}).is_from_self


def test_slack_files_mark_media():
    event = {"channel": "C1", "ts": "1.1", "subtype": "file_share", "files": [{"id": "F1"}]}
    inbound = slack_event_to_inbound(event)
    assert inbound.has_media
    assert inbound.text is None


def test_slack_message_changed_is_an_edit_of_the_inner_message():
    event = {
        "channel": "C1",
        "subtype": "message_changed",
        "message": {"user": "U1", "text": "new", "ts": "1.1"},
        "previous_message": {"user": "U1", "text": "old", "ts": "1.1"},
    }
    inbound = slack_event_to_inbound(event)
    assert inbound.is_edit
    assert inbound.message_id == "1.1"
    assert inbound.text == "new"


def test_slack_unfurl_only_change_is_skipped():
    event = {
        "channel": "C1",
        "subtype": "message_changed",
        "message": {"text": "see https://x", "ts": "1.1", "attachments": [{}]},
        "previous_message": {"text": "see https://x", "ts": "1.1"},
    }
    assert slack_event_to_inbound(event) is None


def test_slack_other_subtypes_are_skipped():
    assert slack_event_to_inbound({"channel": "C1", "ts": "1.1", "subtype": "channel_join"}) is None
    assert slack_event_to_inbound({"channel": "C1", "ts": "1.1", "subtype": "message_deleted"}) is None


def test_telegram_text_is_the_raw_message_not_rendered_markdown():
    message = tg_message(message="2*3 = 6_ish")
    message.text = "2\\*3 = 6\\_ish"
    assert telegram_message_to_inbound(message).text == "2*3 = 6_ish"
