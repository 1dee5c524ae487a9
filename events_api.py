# ABOUTME: Client for the solidarity.tech events API
# ABOUTME: Retrieves every event for a chapter by walking pages until a short page

import logging
from typing import Any, Dict, List, Optional
import httpx
from pydantic import ValidationError
from errors import UpstreamFetchError
from models import Event

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.solidarity.tech"
PAGE_SIZE = 100


def create_events_client(
    api_key: str,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """Create an HTTP client authorized for the events API."""
    return httpx.AsyncClient(
        base_url=base_url,
        headers={
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        },
        timeout=httpx.Timeout(timeout),
        transport=transport
    )


async def fetch_events_page(client: httpx.AsyncClient, chapter_id: int, page: int) -> List[Dict[str, Any]]:
    """
    Fetch one page of raw event records scoped to a chapter.

    Raises:
        UpstreamFetchError: If the API returns a non-success status
    """
    response = await client.get(
        "/v1/events",
        params={
            "scope_id": chapter_id,
            "scope_type": "Chapter",
            "_limit": PAGE_SIZE,
            "_page": page,
        }
    )
    if not response.is_success:
        raise UpstreamFetchError(response.status_code, response.text)

    body = response.json()
    return body.get("data") or []


def parse_events(items: List[Dict[str, Any]], chapter_id: int) -> List[Event]:
    """Validate raw records, skipping and logging any that are malformed."""
    events = []
    for item in items:
        try:
            events.append(Event.model_validate(item))
        except ValidationError as e:
            event_id = item.get("id") if isinstance(item, dict) else None
            logger.warning("Skipping malformed event %s for chapter %s: %s", event_id, chapter_id, e)
    return events


async def fetch_all_events(client: httpx.AsyncClient, chapter_id: int) -> List[Event]:
    """
    Fetch every event for a chapter.

    Pages are requested one at a time starting at 1. A page with fewer
    than PAGE_SIZE events is the last one; when the true last page is
    exactly full, the following empty page ends the loop.

    Args:
        client: Client from create_events_client
        chapter_id: Chapter used as the query scope

    Returns:
        All valid events across all pages, in API order

    Raises:
        UpstreamFetchError: If any page request fails
    """
    all_events: List[Event] = []
    page = 1

    while True:
        items = await fetch_events_page(client, chapter_id, page)
        all_events.extend(parse_events(items, chapter_id))
        logger.debug("Chapter %s page %d: %d events", chapter_id, page, len(items))

        # Skipped records still count towards a full page
        if len(items) < PAGE_SIZE:
            break
        page += 1

    return all_events
