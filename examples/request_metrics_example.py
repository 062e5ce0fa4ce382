"""Example: asserting on request timers and log parameters of an ASGI app.

Run with:
    python examples/request_metrics_example.py

The app is wrapped with ASGIMetricsMiddleware, exercised through
httpx.ASGITransport, and then checked with the obscheck assertions:
    - one log record carries the order id as a parameter
    - the request timer is tagged with the templated uri
"""

import asyncio
import logging

import httpx

from obscheck import (
    InMemoryMeterRegistry,
    assert_message,
    assert_tag_value_present,
    capture_logs,
    join_tag_values,
)
from obscheck.adapters.frameworks.asgi import (
    ASGIMetricsMiddleware,
    Receive,
    Scope,
    Send,
)

logger = logging.getLogger("orders")


async def orders_app(scope: Scope, receive: Receive, send: Send) -> None:
    """Answer /orders/<id> with 200 and log the order id."""
    order_id = scope["path"].rsplit("/", 1)[-1]
    logger.info("Order %s fetched", order_id)
    await send({"type": "http.response.start", "status": 200, "headers": []})
    await send({"type": "http.response.body", "body": b"{}"})


registry = InMemoryMeterRegistry()
app = ASGIMetricsMiddleware(
    orders_app, registry, match_patterns={r"/orders/\d+": "/orders/{id}"}
)


async def main() -> None:
    with capture_logs("orders") as logs:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://demo") as client:
            await client.get("/orders/17")
            await client.get("/orders/42")

    assert_message("42", logs)
    assert_tag_value_present("uri", "/orders/{id}", registry)
    print("uri tags:", join_tag_values("uri", registry.instruments()))


if __name__ == "__main__":
    asyncio.run(main())
