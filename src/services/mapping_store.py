# src/services/mapping_store.py
import json
import os
import tempfile
import threading
from dataclasses import asdict, dataclass
from typing import Optional

from src.core_logic.errors import DuplicateMappingError, MappingNotFoundError
from src.core_logic.internal_message import Platform, TELEGRAM, SLACK
from src.services.kv_store import InMemoryKeyValueStore, KeyValueStore


@dataclass(frozen=True)
class ChannelMapping:
    telegram_channel: str
    slack_channel: str

    def channel_for(self, platform: Platform) -> str:
        return self.telegram_channel if platform == TELEGRAM else self.slack_channel

    def to_record(self) -> dict:
        return {"telegramChannel": self.telegram_channel, "slackChannel": self.slack_channel}

    @classmethod
    def from_record(cls, record: dict) -> "ChannelMapping":
        telegram_channel = record["telegramChannel"]
        slack_channel = record["slackChannel"]
        if telegram_channel is None or slack_channel is None:
            raise ValueError(f"Incomplete mapping record: {record}")
        return cls(telegram_channel=str(telegram_channel), slack_channel=str(slack_channel))


@dataclass(frozen=True)
class MessageCorrelation:
    """One cross-posted message, as seen on both platforms. Never mutated once stored."""
    telegram_channel_id: Optional[str]
    telegram_message_id: Optional[str]
    slack_channel_id: Optional[str]
    slack_message_ts: Optional[str]
    parent_telegram_message_id: Optional[str] = None
    parent_slack_message_ts: Optional[str] = None

    def message_id_for(self, platform: Platform) -> Optional[str]:
        return self.telegram_message_id if platform == TELEGRAM else self.slack_message_ts

    def channel_id_for(self, platform: Platform) -> Optional[str]:
        return self.telegram_channel_id if platform == TELEGRAM else self.slack_channel_id

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "MessageCorrelation":
        fields = cls.__dataclass_fields__
        return cls(**{name: data.get(name) for name in fields})


def _correlation_key(platform: Platform, channel_id: str, message_id: str) -> str:
    return f"{platform}-{channel_id}-{message_id}"


class MappingStore:
    """
    Owns the channel-pair mappings (persisted to a JSON file) and the
    message correlations (kept behind a KeyValueStore).

    A single lock serializes all access so the two relay workers and the
    admin surfaces never see a half-applied mutation.
    """
    def __init__(self, mappings_file: str, correlations: Optional[KeyValueStore] = None):
        self.mappings_file = mappings_file
        self._correlations = correlations if correlations is not None else InMemoryKeyValueStore()
        self._lock = threading.RLock()
        self._mappings: list[ChannelMapping] = []
        self._load_mappings()

    # --- Mapping persistence ---
    def _load_mappings(self):
        if not os.path.exists(self.mappings_file):
            print(f"[MAPPING_STORE] No mappings file found at {self.mappings_file}. Starting with empty mappings.")
            self._mappings = []
            try:
                self._save_mappings()
            except OSError as e:
                print(f"[MAPPING_STORE] ERROR: Could not create {self.mappings_file}: {e}")
            return

        try:
            with open(self.mappings_file, 'r', encoding='utf-8') as f:
                records = json.load(f)
            if not isinstance(records, list):
                raise ValueError(f"expected a list of mappings, got {type(records).__name__}")
            self._mappings = [ChannelMapping.from_record(record) for record in records]
            print(f"[MAPPING_STORE] Loaded {len(self._mappings)} mappings from {self.mappings_file}")
        except (OSError, ValueError, KeyError, TypeError) as e:
            # json.JSONDecodeError is a ValueError
            print(f"[MAPPING_STORE] ERROR loading mappings from {self.mappings_file}: {e}. Starting with empty mappings.")
            self._mappings = []

    def _save_mappings(self):
        """
        Rewrites the whole mappings file. The data is written to a temp file,
        fsynced and renamed over the target so the file is never half-written.
        """
        directory = os.path.dirname(os.path.abspath(self.mappings_file))
        os.makedirs(directory, exist_ok=True)
        records = [mapping.to_record() for mapping in self._mappings]

        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".mappings-", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(records, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.mappings_file)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        print(f"[MAPPING_STORE] Saved {len(records)} mappings to {self.mappings_file}")

    # --- Channel mappings ---
    def list_mappings(self) -> list[ChannelMapping]:
        with self._lock:
            return list(self._mappings)

    def add_mapping(self, telegram_channel: str, slack_channel: str):
        mapping = ChannelMapping(telegram_channel=telegram_channel, slack_channel=slack_channel)
        with self._lock:
            if mapping in self._mappings:
                raise DuplicateMappingError(telegram_channel, slack_channel)
            self._mappings.append(mapping)
            try:
                self._save_mappings()
            except OSError:
                self._mappings.remove(mapping)
                raise

    def remove_mapping(self, telegram_channel: str, slack_channel: str):
        target = ChannelMapping(telegram_channel=telegram_channel, slack_channel=slack_channel)
        with self._lock:
            if target not in self._mappings:
                raise MappingNotFoundError(telegram_channel, slack_channel)
            previous = self._mappings
            self._mappings = [mapping for mapping in previous if mapping != target]
            try:
                self._save_mappings()
            except OSError:
                self._mappings = previous
                raise

    def resolve_channel(self, platform: Platform, channel_id: str) -> Optional[str]:
        """Returns the channel paired with `channel_id` on the other platform, or None if unmapped."""
        if platform not in (TELEGRAM, SLACK):
            raise ValueError(f"Unknown platform: {platform!r}")
        with self._lock:
            for mapping in self._mappings:
                if mapping.channel_for(platform) == channel_id:
                    return mapping.slack_channel if platform == TELEGRAM else mapping.telegram_channel
        return None

    # --- Message correlations ---
    def put_correlation(self, correlation: MessageCorrelation):
        """
        Indexes the correlation under both platforms' (channel, message) keys.
        A side with a missing channel or message id is simply not indexed.
        """
        record = correlation.to_dict()
        with self._lock:
            for platform in (TELEGRAM, SLACK):
                channel_id = correlation.channel_id_for(platform)
                message_id = correlation.message_id_for(platform)
                if channel_id and message_id:
                    self._correlations.put(_correlation_key(platform, channel_id, message_id), record)

    def get_correlation(self, platform: Platform, channel_id: str, message_id: str) -> Optional[MessageCorrelation]:
        if not channel_id or not message_id:
            return None
        with self._lock:
            record = self._correlations.get(_correlation_key(platform, channel_id, message_id))
        return MessageCorrelation.from_dict(record) if record else None

    def get_correlation_by_telegram(self, channel_id: str, message_id: str) -> Optional[MessageCorrelation]:
        return self.get_correlation(TELEGRAM, channel_id, message_id)

    def get_correlation_by_slack(self, channel_id: str, message_ts: str) -> Optional[MessageCorrelation]:
        return self.get_correlation(SLACK, channel_id, message_ts)
