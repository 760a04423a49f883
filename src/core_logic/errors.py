# src/core_logic/errors.py


class RelayBridgeError(Exception):
    """Base class for every error raised by the relay core."""


class DuplicateMappingError(RelayBridgeError):
    def __init__(self, telegram_channel: str, slack_channel: str):
        self.telegram_channel = telegram_channel
        self.slack_channel = slack_channel
        super().__init__(f"This mapping already exists: Telegram {telegram_channel} <-> Slack {slack_channel}")


class MappingNotFoundError(RelayBridgeError):
    def __init__(self, telegram_channel: str, slack_channel: str):
        self.telegram_channel = telegram_channel
        self.slack_channel = slack_channel
        super().__init__(f"Mapping not found: Telegram {telegram_channel} <-> Slack {slack_channel}")


class RelayTransportError(RelayBridgeError):
    """
    Raised by an outbound relay when the platform API call fails.
    The orchestrator logs it and abandons the attempt; nothing retries it.
    """
    def __init__(self, platform: str, operation: str, cause: Exception | None = None):
        self.platform = platform
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"{platform} {operation} failed{detail}")
