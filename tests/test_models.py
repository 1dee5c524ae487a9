# ABOUTME: Tests for event and chapter models
# ABOUTME: Validates parsing of API payloads and chapter mapping records

from datetime import datetime, timezone
import pytest
from pydantic import ValidationError
from models import ChapterMapping, Event, EventSession, FilteredEvent


def test_event_parses_api_payload():
    """Wire keys map onto model fields and offsets are preserved."""
    event = Event.model_validate({
        "id": 9,
        "title": "Canvass",
        "event_type": "in_person",
        "event_page_url": "https://example.org/events/9",
        "tags": ["outreach"],
        "event_sessions": [{
            "id": 90,
            "start_time": "2026-02-28T11:00:00.000-06:00",
            "end_time": "2026-02-28T13:00:00.000-06:00",
            "title": "Morning shift",
            "location_name": "Union Hall",
            "location_address": "",
        }],
    })

    assert event.page_url == "https://example.org/events/9"
    assert event.sessions[0].start_time.hour == 11
    assert event.sessions[0].start_time.utcoffset().total_seconds() == -6 * 3600
    assert event.sessions[0].location == "Union Hall"


def test_event_tolerates_nulls():
    """Null sessions, tags and type read as empty."""
    event = Event.model_validate({
        "id": 1,
        "title": "Draft",
        "event_type": None,
        "event_page_url": None,
        "tags": None,
        "event_sessions": None,
    })

    assert event.sessions == []
    assert event.tags == []
    assert event.event_type == ""
    assert event.page_url is None


def test_filtered_event_requires_a_session():
    """A filtered event cannot be empty."""
    with pytest.raises(ValidationError):
        FilteredEvent(id=1, title="Empty", sessions=[], page_url="https://example.org")


def test_chapter_mapping_uses_camel_case_keys():
    """Chapter mapping records use the camelCase keys of the JSON config."""
    mapping = ChapterMapping.model_validate({
        "chapterId": 42,
        "channelId": "C0123",
        "name": "Brooklyn",
        "pageUrl": "https://example.org/brooklyn",
    })

    assert mapping.chapter_id == 42
    assert mapping.channel_id == "C0123"
    assert mapping.page_url == "https://example.org/brooklyn"


def test_chapter_mapping_is_immutable():
    """Chapter mappings are frozen."""
    mapping = ChapterMapping(chapter_id=1, channel_id="C1", name="X", page_url="https://example.org")

    with pytest.raises(ValidationError):
        mapping.name = "Y"


def test_session_without_offset_is_read_as_utc():
    """Timestamps lacking a UTC offset are treated as UTC."""
    session = EventSession.model_validate({
        "id": 1,
        "start_time": "2026-02-26T11:00:00",
        "end_time": "2026-02-26T13:00:00",
        "title": "Shift",
    })

    assert session.start_time == datetime(2026, 2, 26, 11, 0, tzinfo=timezone.utc)
    assert session.end_time.tzinfo is timezone.utc


def test_null_titles_read_as_empty():
    """Null event and session titles do not fail validation."""
    event = Event.model_validate({
        "id": 1,
        "title": None,
        "event_sessions": [{
            "id": 10,
            "start_time": "2026-02-26T11:00:00-05:00",
            "end_time": "2026-02-26T13:00:00-05:00",
            "title": None,
        }],
    })

    assert event.title == ""
    assert event.sessions[0].title == ""
