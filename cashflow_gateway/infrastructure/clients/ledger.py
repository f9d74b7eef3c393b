"""Ledger sync client - pushes confirmed allocations to the cloud ledger with retry"""

import asyncio
import logging
from typing import Any, Dict

import httpx

from cashflow_gateway.config import settings
from cashflow_gateway.domain.exceptions import LedgerSyncError
from cashflow_gateway.infrastructure.observability.metrics import sync_failure_counter, sync_latency_histogram

logger = logging.getLogger(__name__)


class LedgerSyncClient:
    """Client for sending allocation events to the ledger sync endpoint"""

    def __init__(
        self,
        sync_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.sync_url = sync_url or settings.ledger_sync_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.sync_max_retries
        self.backoff_base = settings.sync_backoff_base
        self.transport = transport

    async def send_allocation_event(self, payload: Dict[str, Any]) -> None:
        """
        Deliver a confirmed allocation to the ledger, at least once.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^(attempt-1))
        - Retries on HTTP errors and network failures
        - Every attempt resends the same payload; the allocation is never recomputed

        Raises:
            LedgerSyncError: After the last attempt fails
        """
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with sync_latency_histogram.time():
                        response = await client.post(self.sync_url, json=payload)
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    sync_failure_counter.inc()
                    logger.warning(
                        "Ledger sync attempt failed",
                        extra={"attempt": attempt, "allocation_id": payload.get("allocation_id"), "error": str(e)},
                    )

                    if attempt >= self.max_retries:
                        raise LedgerSyncError(f"Ledger sync failed after {attempt} attempts") from e

                    await asyncio.sleep(self.backoff_base * (2 ** (attempt - 1)))
