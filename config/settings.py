# config/settings.py
import os
from dotenv import load_dotenv

project_root = os.path.join(os.path.dirname(__file__), '..')
dotenv_path = os.path.join(project_root, '.env')
load_dotenv(dotenv_path=dotenv_path, override=True)


def _split_list(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(',') if item.strip()]


def load_app_config() -> dict:
    data_dir = os.path.join(project_root, 'data')
    return {
        "telegram_api_id": os.getenv("TELEGRAM_API_ID"),
        "telegram_api_hash": os.getenv("TELEGRAM_API_HASH"),
        "telegram_bot_token": os.getenv("TELEGRAM_BOT_TOKEN"),
        "telegram_session_name": os.getenv("TELEGRAM_SESSION_NAME", "relay_bot"),
        "slack_bot_token": os.getenv("SLACK_BOT_TOKEN"),
        "slack_app_token": os.getenv("SLACK_APP_TOKEN"),
        "slack_admins": _split_list(os.getenv("SLACK_ADMINS")),
        "data_dir": data_dir,
        "mappings_file": os.getenv("MAPPINGS_FILE", "mappings.json"),
        "correlation_backend": os.getenv("CORRELATION_BACKEND", "memory").strip().lower(),
        "firebase_cred_path": os.getenv("FIREBASE_CRED_PATH"),
        "firestore_collection": os.getenv("FIRESTORE_COLLECTION", "relay_message_correlations"),
        "admin_api_token": os.getenv("ADMIN_API_TOKEN"),
        "admin_api_host": os.getenv("ADMIN_API_HOST", "127.0.0.1"),
        "admin_api_port": int(os.getenv("ADMIN_API_PORT", 8000)),
    }


def validate_config(config: dict):
    """Raises ValueError for settings the bridge cannot start without."""
    if not config["telegram_api_id"] or not config["telegram_api_hash"] or not config["telegram_bot_token"]:
        raise ValueError("CRITICAL: TELEGRAM_API_ID, TELEGRAM_API_HASH and TELEGRAM_BOT_TOKEN must be set in .env")
    if not str(config["telegram_api_id"]).isdigit():
        raise ValueError("CRITICAL: TELEGRAM_API_ID must be numeric.")
    if not config["slack_bot_token"] or not config["slack_app_token"]:
        raise ValueError("CRITICAL: SLACK_BOT_TOKEN and SLACK_APP_TOKEN must be set in .env")
    if config["correlation_backend"] not in ("memory", "firestore"):
        raise ValueError(f"CRITICAL: Unknown CORRELATION_BACKEND '{config['correlation_backend']}'. Use 'memory' or 'firestore'.")
    if config["correlation_backend"] == "firestore" and not config["firebase_cred_path"]:
        raise ValueError("CRITICAL: FIREBASE_CRED_PATH must be set when CORRELATION_BACKEND=firestore")


APP_CONFIG = load_app_config()
