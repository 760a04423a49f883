# src/main.py

import asyncio
import os
import traceback
from telethon import TelegramClient
from slack_bolt.async_app import AsyncApp
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler

# Import configurations and managers
from config.settings import APP_CONFIG, validate_config
from src.core_logic.internal_message import TELEGRAM, SLACK
from src.core_logic.relay import RelayOrchestrator
from src.services.kv_store import FirestoreKeyValueStore, InMemoryKeyValueStore, create_firestore_client
from src.services.mapping_store import MappingStore

# Import all modular components
from src.listeners.telegram_listener import setup_telegram_listener
from src.listeners.slack_listener import setup_slack_listener
from src.senders.telegram_sender import TelegramRelay
from src.senders.slack_sender import SlackRelay
from src.workers.relay_worker import relay_worker
from src.admin.service import MappingAdmin
from src.admin.slack_commands import setup_slack_admin_commands
from src.admin.api import create_admin_app, create_admin_server


def build_correlation_store(config: dict):
    if config["correlation_backend"] == "firestore":
        db = create_firestore_client(config["firebase_cred_path"])
        return FirestoreKeyValueStore(db, config["firestore_collection"])
    print("[MAIN] Message correlations are kept in memory and will be lost on restart.")
    return InMemoryKeyValueStore()


async def main():
    """
    Initializes and runs the Telegram and Slack sides of the bridge, one
    ordered relay worker per platform, and the optional admin API.
    """
    print("[MAIN] Initializing application...")
    validate_config(APP_CONFIG)

    store = MappingStore(APP_CONFIG['mappings_file'], build_correlation_store(APP_CONFIG))
    admin = MappingAdmin(store)
    relay_queues = {
        TELEGRAM: asyncio.Queue(),
        SLACK: asyncio.Queue(),
    }

    # --- PLATFORM CLIENTS INITIALIZATION ---
    os.makedirs(APP_CONFIG['data_dir'], exist_ok=True)
    telegram_client = TelegramClient(
        os.path.join(APP_CONFIG['data_dir'], APP_CONFIG['telegram_session_name']),
        int(APP_CONFIG['telegram_api_id']),
        APP_CONFIG['telegram_api_hash'],
    )
    slack_app = AsyncApp(token=APP_CONFIG['slack_bot_token'])
    slack_socket_handler = AsyncSocketModeHandler(slack_app, APP_CONFIG['slack_app_token'])

    orchestrator = RelayOrchestrator(store, {
        TELEGRAM: TelegramRelay(telegram_client),
        SLACK: SlackRelay(slack_app.client),
    })

    admin_server = None
    if APP_CONFIG.get("admin_api_token"):
        admin_app = create_admin_app(admin, APP_CONFIG['admin_api_token'])
        admin_server = create_admin_server(admin_app, APP_CONFIG['admin_api_host'], APP_CONFIG['admin_api_port'])

    # --- BOT LIFECYCLE MANAGEMENT ---
    try:
        print("[MAIN] Connecting Telegram bot...")
        await telegram_client.start(bot_token=APP_CONFIG['telegram_bot_token'])
        print("[MAIN] Telegram bot connected.")

        # --- REGISTER LISTENERS AND COMMANDS ---
        setup_telegram_listener(telegram_client, relay_queues[TELEGRAM])
        setup_slack_listener(slack_app, relay_queues[SLACK])
        setup_slack_admin_commands(slack_app, admin, APP_CONFIG['slack_admins'])

        # --- LAUNCH ALL WORKERS (CONCURRENTLY) ---
        print("[MAIN] Launching all background workers...")
        async with asyncio.TaskGroup() as tg:
            tg.create_task(slack_socket_handler.start_async())
            tg.create_task(telegram_client.run_until_disconnected())
            tg.create_task(relay_worker(relay_queues[TELEGRAM], orchestrator, TELEGRAM))
            tg.create_task(relay_worker(relay_queues[SLACK], orchestrator, SLACK))
            if admin_server:
                tg.create_task(admin_server.serve())

            print("--- Cross-posting bridge is running. Press Ctrl+C to stop. ---")

    except* Exception as eg:
        print(f"--- Main task group encountered errors: ---")
        for exc in eg.exceptions:
            traceback.print_exception(type(exc), exc, exc.__traceback__)
    finally:
        # --- GRACEFUL SHUTDOWN ---
        print("[MAIN] Shutting down...")
        if telegram_client.is_connected():
            await telegram_client.disconnect()
        await slack_socket_handler.close_async()
        print("[MAIN] All clients disconnected. Shutdown complete.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        print("\n[MAIN] Shutdown requested by user.")
