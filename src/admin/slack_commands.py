# src/admin/slack_commands.py

from slack_bolt.async_app import AsyncApp
from src.admin.service import MappingAdmin


def format_mapping_list(mappings: list[dict]) -> str:
    if not mappings:
        return "No channel mappings configured."
    lines = ["*Current Channel Mappings:*", ""]
    for mapping in mappings:
        lines.append(f"• Telegram: `{mapping['telegram']}` ↔ Slack: `{mapping['slack']}`")
    return "\n".join(lines)


def parse_mapping_args(text: str) -> tuple[str, str] | None:
    """Parses '<telegram channel id> <slack channel id>'; anything else is None."""
    parts = (text or "").split()
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def setup_slack_admin_commands(app: AsyncApp, admin: MappingAdmin, admin_user_ids: list[str]):
    """
    Registers /list-mappings, /add-mapping and /remove-mapping.
    Listing is open to everyone; changes require a user ID from SLACK_ADMINS.
    """
    if not admin_user_ids:
        print("[SLACK_ADMIN] Warning: No admin users defined in SLACK_ADMINS. Mapping changes will be unavailable.")
    else:
        print(f"[SLACK_ADMIN] Admins configured: {len(admin_user_ids)} users")

    def is_admin(user_id: str) -> bool:
        return user_id in admin_user_ids

    @app.command("/list-mappings")
    async def list_mappings(ack, respond):
        await ack()
        await respond(format_mapping_list(admin.list()))

    async def change_mapping(command: dict, ack, respond, verb: str, action):
        if not is_admin(command.get("user_id")):
            await ack(response_type="ephemeral", text=f"You do not have permission to {verb} channel mappings. This action requires admin privileges.")
            return
        await ack()

        args = parse_mapping_args(command.get("text", ""))
        if args is None:
            await respond(f"Usage: {command.get('command')} [Telegram Channel ID] [Slack Channel ID]")
            return

        result = action(*args)
        await respond(result.message if result.ok else f"Error: {result.message}")

    @app.command("/add-mapping")
    async def add_mapping(command, ack, respond):
        await change_mapping(command, ack, respond, "add", admin.add)

    @app.command("/remove-mapping")
    async def remove_mapping(command, ack, respond):
        await change_mapping(command, ack, respond, "remove", admin.remove)

    print("[SLACK_ADMIN] Mapping commands registered.")
