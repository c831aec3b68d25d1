import asyncio
from typing import Any, Awaitable, Callable, Dict, List

from app.shared.utils import logger

Handler = Callable[[Any], Awaitable[None]]


class EventBus:
    """In-process pub/sub used for analytics side-channels"""

    def __init__(self, handler_timeout: float = 5.0):
        self.subscriptions: Dict[str, List[Callable]] = {}
        self.handler_timeout = handler_timeout
        self.log = logger.get_logger("event_bus")

    async def publish(self, event_name: str, event_data: Any):
        handlers = self.subscriptions.get(event_name, [])
        if not handlers:
            return
        await asyncio.gather(*(self._run_handler(h, event_data) for h in handlers))

    async def _run_handler(self, handler: Callable, event_data: Any):
        try:
            await asyncio.wait_for(
                handler(event_data)
                if asyncio.iscoroutinefunction(handler)
                else asyncio.to_thread(handler, event_data),
                timeout=self.handler_timeout,
            )
        except asyncio.TimeoutError:
            self.log.error(f"Handler timed out: {handler.__name__}")
        except Exception as e:
            self.log.error(f"Error in event handler {handler.__name__}: {e}")

    def subscribe(self, event_name: str, handler: Callable[[Any], None]):
        handlers = self.subscriptions.setdefault(event_name, [])
        if handler not in handlers:
            handlers.append(handler)
        self.log.debug(f"Subscribed handler to: {event_name}")

    def clear(self):
        self.subscriptions.clear()


event_bus = EventBus()
