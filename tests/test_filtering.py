# ABOUTME: Tests for time-window filtering and sorting of events
# ABOUTME: Covers exclusion rules, window boundaries and sort stability

from datetime import datetime, timedelta, timezone
import pytest
from filtering import filter_and_sort_events, is_displayable
from models import Event

NOW = datetime(2026, 3, 2, 15, 0, tzinfo=timezone.utc)


def make_event(event_id, starts, page_url="https://example.org/e", tags=None, event_type="in_person"):
    """Build an event with one-hour sessions at the given start times."""
    return Event.model_validate({
        "id": event_id,
        "title": f"Event {event_id}",
        "event_type": event_type,
        "event_page_url": page_url,
        "tags": tags or [],
        "event_sessions": [
            {
                "id": event_id * 100 + i,
                "start_time": start.isoformat(),
                "end_time": (start + timedelta(hours=1)).isoformat(),
                "title": f"Session {i}",
                "location_name": None,
                "location_address": "1 Main St",
            }
            for i, start in enumerate(starts)
        ],
    })


def test_keeps_sessions_inside_window():
    """Only sessions starting between now and the cutoff are kept."""
    event = make_event(1, [
        NOW - timedelta(hours=1),
        NOW + timedelta(days=1),
        NOW + timedelta(days=8),
    ])

    result = filter_and_sort_events([event], 7, now=NOW)

    assert len(result) == 1
    assert [s.start_time for s in result[0].sessions] == [NOW + timedelta(days=1)]


def test_window_bounds_are_inclusive():
    """Sessions starting exactly at now or at the cutoff are kept."""
    event = make_event(1, [NOW + timedelta(days=7), NOW])

    result = filter_and_sort_events([event], 7, now=NOW)

    assert [s.start_time for s in result[0].sessions] == [NOW, NOW + timedelta(days=7)]


def test_compares_instants_across_offsets():
    """Start times with other UTC offsets are compared as instants."""
    chicago = timezone(timedelta(hours=-6))
    # 08:59 in UTC-6 is 14:59 UTC, one minute before NOW
    early = make_event(1, [datetime(2026, 3, 2, 8, 59, tzinfo=chicago)])
    # 09:01 in UTC-6 is 15:01 UTC
    late = make_event(2, [datetime(2026, 3, 2, 9, 1, tzinfo=chicago)])

    result = filter_and_sort_events([early, late], 7, now=NOW)

    assert [e.id for e in result] == [2]


def test_sorts_sessions_within_event():
    """Kept sessions should be in ascending start order."""
    event = make_event(1, [NOW + timedelta(days=3), NOW + timedelta(days=1), NOW + timedelta(days=2)])

    result = filter_and_sort_events([event], 7, now=NOW)

    starts = [s.start_time for s in result[0].sessions]
    assert starts == sorted(starts)


def test_sorts_events_by_first_remaining_session():
    """Events are ordered by their earliest in-window session."""
    a = make_event(1, [NOW - timedelta(days=1), NOW + timedelta(days=5)])
    b = make_event(2, [NOW + timedelta(days=2)])
    c = make_event(3, [NOW + timedelta(hours=3), NOW + timedelta(days=6)])

    result = filter_and_sort_events([a, b, c], 7, now=NOW)

    assert [e.id for e in result] == [3, 2, 1]


def test_sort_is_stable_for_equal_start_times():
    """Events starting at the same instant keep their input order."""
    start = NOW + timedelta(days=1)
    events = [make_event(i, [start]) for i in (5, 3, 9, 1)]

    result = filter_and_sort_events(events, 7, now=NOW)

    assert [e.id for e in result] == [5, 3, 9, 1]


def test_excludes_events_without_page_url():
    """Events without a public page are dropped."""
    events = [
        make_event(1, [NOW + timedelta(days=1)], page_url=None),
        make_event(2, [NOW + timedelta(days=1)], page_url=""),
        make_event(3, [NOW + timedelta(days=1)]),
    ]

    result = filter_and_sort_events(events, 7, now=NOW)

    assert [e.id for e in result] == [3]


def test_excludes_tagged_events():
    """Events tagged for exclusion are dropped even if otherwise eligible."""
    events = [
        make_event(1, [NOW + timedelta(days=1)], tags=["outreach", "slack-exclude"]),
        make_event(2, [NOW + timedelta(days=1)], tags=["outreach"]),
    ]

    result = filter_and_sort_events(events, 7, now=NOW)

    assert [e.id for e in result] == [2]


def test_custom_exclude_tag():
    """The exclusion tag can be overridden."""
    event = make_event(1, [NOW + timedelta(days=1)], tags=["private"])

    assert filter_and_sort_events([event], 7, now=NOW, exclude_tag="private") == []
    assert len(filter_and_sort_events([event], 7, now=NOW)) == 1


def test_excludes_events_without_sessions_in_window():
    """Events with no sessions, or only past/far sessions, are dropped."""
    events = [
        make_event(1, []),
        make_event(2, [NOW - timedelta(days=2), NOW + timedelta(days=30)]),
    ]

    assert filter_and_sort_events(events, 7, now=NOW) == []


def test_empty_input():
    """No events yields an empty list."""
    assert filter_and_sort_events([], 7, now=NOW) == []


def test_does_not_modify_input():
    """Filtering returns new objects and leaves the input untouched."""
    event = make_event(1, [NOW - timedelta(days=1), NOW + timedelta(days=1)])

    filter_and_sort_events([event], 7, now=NOW)

    assert len(event.sessions) == 2


def test_filtered_event_keeps_event_fields():
    """Filtered events carry the original event's fields."""
    event = make_event(1, [NOW + timedelta(days=1)], tags=["a"], event_type="hybrid")

    result = filter_and_sort_events([event], 7, now=NOW)[0]

    assert result.id == 1
    assert result.title == "Event 1"
    assert result.event_type == "hybrid"
    assert result.page_url == "https://example.org/e"
    assert result.tags == ["a"]


def test_defaults_to_current_time():
    """Without an explicit now, the window starts at the current instant."""
    soon = datetime.now(timezone.utc) + timedelta(hours=1)
    past = datetime.now(timezone.utc) - timedelta(hours=1)

    result = filter_and_sort_events([make_event(1, [soon]), make_event(2, [past])], 7)

    assert [e.id for e in result] == [1]


@pytest.mark.parametrize("page_url,tags,expected", [
    ("https://example.org/e", [], True),
    (None, [], False),
    ("https://example.org/e", ["slack-exclude"], False),
])
def test_is_displayable(page_url, tags, expected):
    """Displayability depends on page URL and exclusion tag."""
    event = make_event(1, [], page_url=page_url, tags=tags)

    assert is_displayable(event) is expected


def test_session_without_offset_does_not_break_filter():
    """Offset-less timestamps from the API are compared as UTC."""
    event = Event.model_validate({
        "id": 1,
        "title": "Event 1",
        "event_type": "in_person",
        "event_page_url": "https://example.org/e",
        "event_sessions": [{
            "id": 10,
            "start_time": "2026-03-03T11:00:00",
            "end_time": "2026-03-03T13:00:00",
            "title": "Session",
        }],
    })

    result = filter_and_sort_events([event], 7, now=NOW)

    assert [e.id for e in result] == [1]
    assert result[0].first_start == datetime(2026, 3, 3, 11, 0, tzinfo=timezone.utc)
