# src/workers/relay_worker.py
import inspect
from asyncio import Queue
from src.core_logic.internal_message import InboundMessage
from src.core_logic.relay import RelayOrchestrator


async def relay_worker(relay_queue: Queue, orchestrator: RelayOrchestrator, platform: str):
    """
    Consumes one platform's inbound events strictly in arrival order. Each event
    is relayed to completion before the next is taken, so a reply never overtakes
    the parent it needs to be threaded under.

    Queue items are either an InboundMessage or an awaitable resolving to one
    (listeners queue their label lookups so the slot is taken on arrival).
    """
    tag = f"[{platform.upper()}_RELAY]"
    print(f"{tag} Worker started.")
    while True:
        item = await relay_queue.get()
        try:
            message: InboundMessage = await item if inspect.isawaitable(item) else item
            outcome = await orchestrator.handle_event(message)
            print(f"{tag} {message.channel_id}/{message.message_id}: {outcome.value}")
        except Exception as e:
            # One bad event must not stop delivery of the ones behind it
            print(f"CRITICAL ERROR in {platform} Relay Worker: {e}")
        finally:
            relay_queue.task_done()
