"""Budget alert webhook client with exponential backoff retry logic"""

import asyncio
from typing import Any, Dict

import httpx

from wealthblend.config import settings
from wealthblend.domain.exceptions import AlertDeliveryError
from wealthblend.infrastructure.observability.metrics import webhook_failure_counter, webhook_latency_histogram


class AlertClient:
    """Client for delivering budget usage alerts to the notification service"""

    def __init__(self, webhook_url: str | None = None, timeout: float | None = None):
        self.webhook_url = webhook_url or settings.alert_webhook_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base

    async def send_budget_alert(self, payload: Dict[str, Any]) -> None:
        """
        Send a budget alert event with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^attempt)
        - Retries on error responses and network failures

        Raises:
            AlertDeliveryError: After the final failed attempt
        """
        attempt = 0
        async with httpx.AsyncClient() as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json=payload,
                            timeout=self.timeout,
                        )
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        raise AlertDeliveryError(f"Alert webhook failed after {attempt} attempts: {e}") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
