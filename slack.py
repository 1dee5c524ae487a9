# ABOUTME: Minimal Slack Web API client for posting Block Kit messages
# ABOUTME: Wraps chat.postMessage and converts failures to DeliveryError

import logging
from typing import Any, Dict, List, Optional
import httpx
from errors import DeliveryError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://slack.com/api"


class SlackClient:
    """Posts messages to Slack channels with a bot token."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=httpx.Timeout(timeout),
            transport=transport
        )

    async def __aenter__(self) -> "SlackClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def post_message(self, channel: str, text: str, blocks: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Post a message via chat.postMessage.

        Args:
            channel: Channel ID to post to
            text: Plain-text fallback for notifications and old clients
            blocks: Block Kit blocks

        Returns:
            Slack's response body

        Raises:
            DeliveryError: If the request fails or Slack answers ok=false
        """
        try:
            response = await self._client.post(
                "/chat.postMessage",
                json={"channel": channel, "text": text, "blocks": blocks}
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise DeliveryError(response.text, status_code=response.status_code)

        # Slack reports most failures as 200 with ok=false
        body = response.json()
        if not body.get("ok"):
            raise DeliveryError(body.get("error", "unknown_error"), status_code=response.status_code)

        logger.debug("Posted message %s to %s", body.get("ts"), channel)
        return body
