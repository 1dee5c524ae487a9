# ABOUTME: Slack Block Kit message builder for upcoming chapter events
# ABOUTME: Renders filtered events into a block-count-bounded message with overflow notice

from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional, Sequence
from zoneinfo import ZoneInfo
from models import BlockDocument, EventSession, FilteredEvent
from utils import escape_mrkdwn, format_date_range, format_header_date_range

DISPLAY_TIMEZONE = ZoneInfo("America/New_York")

# Slack rejects messages with more than 50 blocks
SLACK_MAX_BLOCKS = 50
FIXED_BLOCKS = 2  # header + subtitle
BLOCKS_PER_EVENT = 2  # section + divider
OVERFLOW_BLOCKS = 1
MAX_VISIBLE_EVENTS = (SLACK_MAX_BLOCKS - FIXED_BLOCKS - OVERFLOW_BLOCKS) // BLOCKS_PER_EVENT

VIRTUAL_TYPES = {"virtual", "online"}

EVENT_TYPE_LABELS = {
    "in_person": "🏢 In Person",
    "in-person": "🏢 In Person",
    "virtual": "💻 Virtual",
    "online": "💻 Virtual",
    "hybrid": "🔀 Hybrid",
}

Block = Dict[str, Any]


def event_type_label(event_type: str) -> str:
    """Display label for an event type, or '' for unrecognized types."""
    return EVENT_TYPE_LABELS.get(event_type.lower(), "")


def header_text(chapter_name: str) -> str:
    return f"📅 Upcoming Events — {chapter_name}"


def format_session_line(session: EventSession, event_type: str, tz: tzinfo = DISPLAY_TIMEZONE) -> str:
    """
    Format one session as a line of mrkdwn.

    The location is left out for virtual events, and the type label is
    left out when the type is unrecognized.
    """
    normalized = event_type.lower()
    line = f"📅 *{format_date_range(session.start_time, session.end_time, tz)}*"

    location = session.location
    if location and normalized not in VIRTUAL_TYPES:
        line += f"   📍 _{escape_mrkdwn(location)}_"

    label = event_type_label(normalized)
    if label:
        line += f"   {label}"
    return line


def event_section(event: FilteredEvent, tz: tzinfo = DISPLAY_TIMEZONE) -> Block:
    """Section block with the linked title followed by one line per session."""
    lines = [f"*<{event.page_url}|{escape_mrkdwn(event.title)}>*"]
    lines.extend(format_session_line(s, event.event_type, tz) for s in event.sessions)
    return {
        "type": "section",
        "text": {"type": "mrkdwn", "text": "\n".join(lines)},
    }


def overflow_notice(overflow: int, days_ahead: int) -> Block:
    noun = "event" if overflow == 1 else "events"
    return {
        "type": "context",
        "elements": [
            {
                "type": "mrkdwn",
                "text": f"_+{overflow} more {noun} in the next {days_ahead} days not shown._",
            }
        ],
    }


def build_blocks(
    chapter_name: str,
    chapter_url: str,
    events: Sequence[FilteredEvent],
    days_ahead: int,
    now: Optional[datetime] = None,
    tz: tzinfo = DISPLAY_TIMEZONE
) -> List[Block]:
    """
    Build the Block Kit blocks for a chapter's upcoming events.

    Layout is a header, a subtitle with the date range and a link to the
    chapter's events page, then a section per event separated by dividers.
    Only the first MAX_VISIBLE_EVENTS events are rendered; the rest are
    summarized in a trailing context block.

    Args:
        chapter_name: Shown in the header
        chapter_url: Chapter's full events page
        events: Filtered events, soonest first
        days_ahead: Size of the lookahead window in days
        now: Start of the window (defaults to the current UTC instant)
        tz: Zone used for displayed dates and times

    Returns:
        At most SLACK_MAX_BLOCKS blocks
    """
    if now is None:
        now = datetime.now(timezone.utc)

    date_range = format_header_date_range(now, days_ahead, tz)
    blocks: List[Block] = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": header_text(chapter_name), "emoji": True},
        },
        {
            "type": "context",
            "elements": [
                {
                    "type": "mrkdwn",
                    "text": f"Next {days_ahead} days · {date_range} · <{chapter_url}|All Events>",
                }
            ],
        },
    ]

    if not events:
        blocks.append({
            "type": "section",
            "text": {"type": "mrkdwn", "text": f"No upcoming events in the next {days_ahead} days."},
        })
        return blocks

    visible = events[:MAX_VISIBLE_EVENTS]
    overflow = len(events) - len(visible)

    for i, event in enumerate(visible):
        if i > 0:
            blocks.append({"type": "divider"})
        blocks.append(event_section(event, tz))

    if overflow > 0:
        blocks.append(overflow_notice(overflow, days_ahead))

    return blocks


def build_fallback_text(chapter_name: str, event_count: int, days_ahead: int) -> str:
    """Plain-text summary for notifications and clients without block support."""
    if event_count > 0:
        return f"{header_text(chapter_name)}: {event_count} event(s) in the next {days_ahead} days."
    return f"{header_text(chapter_name)}: No upcoming events in the next {days_ahead} days."


def build_message(
    chapter_name: str,
    chapter_url: str,
    events: Sequence[FilteredEvent],
    days_ahead: int,
    now: Optional[datetime] = None,
    tz: tzinfo = DISPLAY_TIMEZONE
) -> BlockDocument:
    """Build the blocks and fallback text for one chapter's message."""
    return BlockDocument(
        blocks=build_blocks(chapter_name, chapter_url, events, days_ahead, now=now, tz=tz),
        text=build_fallback_text(chapter_name, len(events), days_ahead)
    )
