# ABOUTME: Pydantic models for chapters, events and rendered messages
# ABOUTME: Mirrors the solidarity.tech /v1/events payload and the Slack message body

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChapterMapping(BaseModel):
    """One chapter to fetch events for and the Slack channel to post them in."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    chapter_id: int = Field(alias='chapterId')
    channel_id: str = Field(alias='channelId')
    name: str
    page_url: str = Field(alias='pageUrl')


class EventSession(BaseModel):
    """A single scheduled occurrence of an event."""
    id: int
    start_time: datetime
    end_time: datetime
    title: str = ""
    location_name: Optional[str] = None
    location_address: Optional[str] = None

    @field_validator('title', mode='before')
    @classmethod
    def none_title_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator('start_time', 'end_time', mode='after')
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # Timestamps without an offset are read as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def location(self) -> Optional[str]:
        """Street address if present, otherwise the venue name."""
        return self.location_address or self.location_name or None


class Event(BaseModel):
    """An event as returned by the events API."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = ""
    event_type: str = ""
    sessions: List[EventSession] = Field(default_factory=list, alias='event_sessions')
    page_url: Optional[str] = Field(default=None, alias='event_page_url')
    tags: List[str] = Field(default_factory=list)

    @field_validator('title', 'event_type', mode='before')
    @classmethod
    def none_text_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator('sessions', 'tags', mode='before')
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class FilteredEvent(Event):
    """An event reduced to its in-window sessions, sorted by start time."""
    sessions: List[EventSession] = Field(min_length=1, alias='event_sessions')

    @property
    def first_start(self) -> datetime:
        return self.sessions[0].start_time


class BlockDocument(BaseModel):
    """Slack Block Kit blocks plus the plain-text fallback for one message."""
    blocks: List[Dict[str, Any]]
    text: str
