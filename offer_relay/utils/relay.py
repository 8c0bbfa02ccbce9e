"""Best-effort delivery of offer letter payloads to the n8n webhook."""
from __future__ import annotations

import asyncio
from typing import Any

import httpx

from offer_relay import config
from offer_relay.utils.logging import get_logger

logger = get_logger("utils.relay")

# Strong references to in-flight deliveries; the event loop only keeps weak ones.
_in_flight: set[asyncio.Task[None]] = set()


async def _post_payload(url: str, payload: dict[str, Any]) -> httpx.Response:
    async with httpx.AsyncClient(timeout=config.RELAY_TIMEOUT_SECONDS) as client:
        return await client.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
        )


async def forward_payload(url: str, payload: dict[str, Any]) -> None:
    """POST the payload to the webhook once and log the outcome.

    Transport errors and non-2xx responses are logged and swallowed: nobody
    is waiting for the result and there is no retry.
    """

    try:
        response = await _post_payload(url, payload)
    except httpx.HTTPError as exc:
        logger.exception("Error calling n8n webhook %s: %s", url, exc, extra={"url": url})
        return

    if response.is_success:
        logger.info(
            "n8n webhook success (%s)",
            response.status_code,
            extra={"url": url, "status_code": response.status_code},
        )
        return

    logger.error(
        "n8n webhook error (%s): %s",
        response.status_code,
        response.text,
        extra={"url": url, "status_code": response.status_code, "body": response.text},
    )


def dispatch(url: str, payload: dict[str, Any]) -> asyncio.Task[None]:
    """Schedule delivery on the running loop and return without awaiting it."""

    task = asyncio.create_task(forward_payload(url, payload), name="offer-letter-relay")
    _in_flight.add(task)
    task.add_done_callback(_in_flight.discard)
    logger.debug("Relay dispatched to %s", url, extra={"in_flight": len(_in_flight)})
    return task


__all__ = ["dispatch", "forward_payload"]
