# kriedko/modules/feedback/services/forwarding_service.py

import logging
from typing import Any, Dict, Optional

import httpx

from kriedko.core.config import Settings

logger = logging.getLogger(__name__)


class RemoteAggregatorForwarder:
    """
    Best-effort copy of accepted submissions to a secondary aggregator.

    Runs after the primary store has the record; failures are logged and
    dropped and never reach the client.
    """

    def __init__(
        self,
        url: Optional[str],
        api_key: Optional[str] = None,
        timeout_seconds: float = 5.0,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "RemoteAggregatorForwarder":
        return cls(
            url=settings.remote_aggregator_url,
            api_key=settings.remote_aggregator_key,
            timeout_seconds=settings.remote_aggregator_timeout_seconds,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    async def forward(self, record: Dict[str, Any]) -> bool:
        """POST one record. Returns True on a 2xx response."""
        if not self.enabled:
            return False

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(self.url, json=record, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"Forwarding feedback {record.get('id')} failed: {e}")
            return False

        if not response.is_success:
            logger.warning(
                f"Remote aggregator rejected feedback {record.get('id')}: "
                f"HTTP {response.status_code}"
            )
            return False

        logger.debug(f"Forwarded feedback {record.get('id')} to {self.url}")
        return True
