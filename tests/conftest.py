import sys
from pathlib import Path

import pytest

# Make `src` and `config` importable when tests run from a checkout
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from src.core_logic.errors import RelayTransportError
from src.services.mapping_store import MappingStore


class FakeRelay:
    """Records every outbound call; hands out sequential message ids."""
    def __init__(self, platform, id_prefix="", fail=False):
        self.platform = platform
        self.id_prefix = id_prefix
        self.fail = fail
        self.sent = []      # (channel_id, text, reply_to_id)
        self.updated = []   # (channel_id, message_id, text)

    @property
    def calls(self):
        return len(self.sent) + len(self.updated)

    async def send(self, channel_id, text, reply_to_id=None):
        if self.fail:
            raise RelayTransportError(self.platform, "send", RuntimeError("boom"))
        self.sent.append((channel_id, text, reply_to_id))
        return f"{self.id_prefix}{len(self.sent)}"

    async def update(self, channel_id, message_id, text):
        if self.fail:
            raise RelayTransportError(self.platform, "update", RuntimeError("boom"))
        self.updated.append((channel_id, message_id, text))


@pytest.fixture
def mappings_path(tmp_path):
    return str(tmp_path / "mappings.json")


@pytest.fixture
def store(mappings_path):
    return MappingStore(mappings_path)


@pytest.fixture
def telegram_relay():
    return FakeRelay("telegram")


@pytest.fixture
def slack_relay():
    # Slack ids are ts strings; the prefix keeps them non-integer like the real thing
    return FakeRelay("slack", id_prefix="1700000000.00010")


@pytest.fixture
def make_relay():
    return FakeRelay
