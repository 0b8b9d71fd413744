# =============================================================================
# Greeting Handler - Sample Handler
# =============================================================================
# Starting point for new handlers: add operations as methods, register them
# with @operation, and export the Lambda entry point.
# =============================================================================

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from lambda6.runtime.endpoint import operation
from lambda6.runtime.handler import Handler

logger = logging.getLogger(__name__)


class GreetingHandler(Handler):
    """Sample handler with synchronous, asynchronous and AWS-backed operations."""

    @operation
    def test(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Echo the operation name and selected payload fields."""
        return {
            "operation_name": self.operation,
            "payload_name": payload.get("name"),
            "payload_title": payload.get("title"),
        }

    @operation(category="greetings")
    def greet(self, payload: Dict[str, Any]) -> str:
        """Greet someone by name."""
        return self.format_greeting(payload["name"])

    @operation(category="greetings")
    async def greet_later(self, payload: Dict[str, Any]) -> str:
        """Greet someone after an optional delay (seconds)."""
        await asyncio.sleep(float(payload.get("delay", 0)))
        return self.format_greeting(payload["name"])

    @operation(category="storage")
    def save_greeting(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Store a greeting in the DynamoDB table named by options or TABLE_NAME."""
        item = {
            "pk": f"GREETING#{payload['name']}",
            "greeting": self.format_greeting(payload["name"]),
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        self.deps.table(self.options.get("table_name")).put_item(Item=item)
        logger.info(f"Stored greeting for {payload['name']}")
        return item

    # Not registered: never reachable from an event
    def format_greeting(self, name: str) -> str:
        return f"{self.operation}: hi, {name}"


lambda_handler = GreetingHandler().as_lambda()
