# ABOUTME: Entry point that posts upcoming events to each chapter's Slack channel
# ABOUTME: Runs fetch, filter, build and deliver per chapter, isolating chapter failures

import argparse
import asyncio
import json
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence
import httpx
from opentelemetry import trace
from config import Settings, get_settings
from errors import ConfigurationError
from events_api import create_events_client, fetch_all_events
from filtering import filter_and_sort_events
from blocks import build_message
from instrumentation import initialize_instrumentation, shutdown_instrumentation
from models import ChapterMapping
from slack import SlackClient

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

EXIT_OK = 0
EXIT_CHAPTER_FAILED = 1
EXIT_CONFIG_ERROR = 2


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging and quiet the HTTP client loggers."""
    logging.basicConfig(format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    debug = root.isEnabledFor(logging.DEBUG)
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.DEBUG if debug else logging.WARNING)


async def post_chapter(
    mapping: ChapterMapping,
    settings: Settings,
    events_client: httpx.AsyncClient,
    slack_client: SlackClient,
    now: Optional[datetime] = None,
    dry_run: bool = False
) -> None:
    """
    Fetch, filter, render and post one chapter's upcoming events.

    Args:
        mapping: Chapter to post for
        settings: Application settings
        events_client: Client for the events API
        slack_client: Client used to deliver the message
        now: Start of the lookahead window (defaults to the current instant)
        dry_run: Log the message payload instead of posting it

    Raises:
        UpstreamFetchError: If event retrieval fails
        DeliveryError: If Slack rejects the message
    """
    days_ahead = settings.events_days_ahead

    with tracer.start_as_current_span("post_chapter") as span:
        span.set_attribute("chapter.id", mapping.chapter_id)
        span.set_attribute("chapter.name", mapping.name)

        logger.info("Fetching events for chapter: %s (%s)", mapping.name, mapping.chapter_id)
        all_events = await fetch_all_events(events_client, mapping.chapter_id)

        events = filter_and_sort_events(
            all_events,
            days_ahead,
            now=now,
            exclude_tag=settings.exclude_tag
        )
        total_sessions = sum(len(e.sessions) for e in events)
        logger.info(
            "  → %d total events fetched, %d event(s) with %d session(s) in window",
            len(all_events), len(events), total_sessions
        )
        span.set_attribute("events.fetched", len(all_events))
        span.set_attribute("events.in_window", len(events))

        message = build_message(
            mapping.name,
            mapping.page_url,
            events,
            days_ahead,
            now=now,
            tz=settings.tzinfo
        )

        if dry_run:
            logger.info("  → Dry run, not posting to %s:\n%s", mapping.channel_id, json.dumps(
                {"channel": mapping.channel_id, "text": message.text, "blocks": message.blocks},
                indent=2,
                ensure_ascii=False
            ))
            return

        await slack_client.post_message(
            channel=mapping.channel_id,
            text=message.text,
            blocks=message.blocks
        )
        logger.info("  → Posted to channel %s", mapping.channel_id)


def select_chapters(chapters: Sequence[ChapterMapping], names: Optional[Iterable[str]]) -> List[ChapterMapping]:
    """Chapters whose name is in names, in configured order (all when names is empty)."""
    if not names:
        return list(chapters)
    wanted = {name.lower() for name in names}
    return [c for c in chapters if c.name.lower() in wanted]


async def run_chapters(
    settings: Settings,
    chapters: Optional[Sequence[ChapterMapping]] = None,
    events_client: Optional[httpx.AsyncClient] = None,
    slack_client: Optional[SlackClient] = None,
    now: Optional[datetime] = None,
    dry_run: bool = False
) -> bool:
    """
    Post events for each chapter, one at a time, in configured order.

    A failing chapter is logged and skipped; the remaining chapters are
    still attempted.

    Returns:
        True if every chapter succeeded
    """
    if chapters is None:
        chapters = settings.chapter_channel_mapping
    if events_client is None:
        events_client = create_events_client(
            settings.solidarity_tech_api_key,
            base_url=settings.solidarity_tech_base_url,
            timeout=settings.http_timeout_seconds
        )
    if slack_client is None:
        slack_client = SlackClient(
            settings.slack_bot_token,
            base_url=settings.slack_api_base_url,
            timeout=settings.http_timeout_seconds
        )

    any_failed = False
    async with events_client, slack_client:
        for mapping in chapters:
            try:
                await post_chapter(mapping, settings, events_client, slack_client, now=now, dry_run=dry_run)
            except Exception:
                logger.exception("Failed to post events for chapter %s", mapping.name)
                any_failed = True

    return not any_failed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Post upcoming chapter events to Slack.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the rendered messages instead of posting to Slack"
    )
    parser.add_argument(
        "--chapter",
        action="append",
        metavar="NAME",
        help="Only post for this chapter (may be repeated)"
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Post upcoming events for every configured chapter and return an exit code."""
    args = parse_args(argv)
    configure_logging()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level)

    chapters = select_chapters(settings.chapter_channel_mapping, args.chapter)
    if not chapters:
        logger.error("No configured chapter matches %s", ", ".join(args.chapter))
        return EXIT_CONFIG_ERROR

    langfuse = initialize_instrumentation(settings)
    try:
        ok = asyncio.run(run_chapters(settings, chapters=chapters, dry_run=args.dry_run))
    finally:
        shutdown_instrumentation(langfuse)

    return EXIT_OK if ok else EXIT_CHAPTER_FAILED


if __name__ == '__main__':
    raise SystemExit(main())
