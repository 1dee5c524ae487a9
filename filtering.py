# ABOUTME: Time-window filtering and chronological sorting of events
# ABOUTME: Reduces each event to its upcoming sessions and drops ineligible events

import logging
from datetime import datetime
from typing import List, Optional, Sequence
from models import Event, FilteredEvent
from utils import get_time_window

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_TAG = "slack-exclude"


def is_displayable(event: Event, exclude_tag: str = DEFAULT_EXCLUDE_TAG) -> bool:
    """An event needs a public page and must not be tagged for exclusion."""
    return bool(event.page_url) and exclude_tag not in event.tags


def filter_and_sort_events(
    events: Sequence[Event],
    days_ahead: int,
    now: Optional[datetime] = None,
    exclude_tag: str = DEFAULT_EXCLUDE_TAG
) -> List[FilteredEvent]:
    """
    Keep the sessions starting within the lookahead window.

    Sessions are kept when now <= start <= now + days_ahead days. Events
    with no page URL, carrying the exclusion tag, or left without sessions
    are dropped. Sorting is stable, so ties keep their input order.

    Args:
        events: Raw events from the events API
        days_ahead: Size of the lookahead window in days
        now: Start of the window (defaults to the current UTC instant)
        exclude_tag: Tag that opts an event out of the digest

    Returns:
        Events sorted by their earliest remaining session
    """
    now, cutoff = get_time_window(days_ahead, now)

    filtered = []
    for event in events:
        if not is_displayable(event, exclude_tag):
            continue

        sessions = sorted(
            (s for s in event.sessions if now <= s.start_time <= cutoff),
            key=lambda s: s.start_time
        )
        if not sessions:
            continue

        filtered.append(FilteredEvent(
            **event.model_dump(exclude={'sessions'}),
            sessions=sessions
        ))

    logger.debug("%d of %d events have sessions before %s", len(filtered), len(events), cutoff.isoformat())
    return sorted(filtered, key=lambda e: e.first_start)
