# src/admin/service.py
from dataclasses import dataclass
from typing import Optional

from src.core_logic.errors import DuplicateMappingError, MappingNotFoundError
from src.services.mapping_store import MappingStore

INVALID_INPUT = "InvalidInput"


@dataclass(frozen=True)
class AdminResult:
    ok: bool
    message: str
    error: Optional[str] = None  # "DuplicateMappingError", "MappingNotFoundError" or "InvalidInput"


class MappingAdmin:
    """
    The administration surface over the MappingStore. User-input errors are
    reported in the result instead of being raised.
    """
    def __init__(self, store: MappingStore):
        self.store = store

    def list(self) -> list[dict]:
        return [
            {"telegram": mapping.telegram_channel, "slack": mapping.slack_channel}
            for mapping in self.store.list_mappings()
        ]

    def add(self, telegram_channel: str, slack_channel: str) -> AdminResult:
        telegram_channel, slack_channel = (telegram_channel or "").strip(), (slack_channel or "").strip()
        if not telegram_channel or not slack_channel:
            return AdminResult(False, "Both a Telegram and a Slack channel ID are required.", INVALID_INPUT)
        try:
            self.store.add_mapping(telegram_channel, slack_channel)
        except DuplicateMappingError as e:
            return AdminResult(False, str(e), type(e).__name__)
        print(f"[ADMIN] Mapping added: Telegram {telegram_channel} <-> Slack {slack_channel}")
        return AdminResult(True, f"Mapping added: Telegram `{telegram_channel}` ↔ Slack `{slack_channel}`")

    def remove(self, telegram_channel: str, slack_channel: str) -> AdminResult:
        telegram_channel, slack_channel = (telegram_channel or "").strip(), (slack_channel or "").strip()
        if not telegram_channel or not slack_channel:
            return AdminResult(False, "Both a Telegram and a Slack channel ID are required.", INVALID_INPUT)
        try:
            self.store.remove_mapping(telegram_channel, slack_channel)
        except MappingNotFoundError as e:
            return AdminResult(False, str(e), type(e).__name__)
        print(f"[ADMIN] Mapping removed: Telegram {telegram_channel} <-> Slack {slack_channel}")
        return AdminResult(True, f"Mapping removed: Telegram `{telegram_channel}` ↔ Slack `{slack_channel}`")
