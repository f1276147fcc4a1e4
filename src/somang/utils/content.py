"""Pure helpers that turn stored post content into display text."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

TAG_PATTERN = re.compile(r"<[^>]*>")
YOUTUBE_ID_PATTERN = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&\n?#]+)")
YOUTUBE_EMBED_BASE = "https://www.youtube.com/embed/"
DEFAULT_PREVIEW_LENGTH = 150

# Korea Standard Time; no daylight saving.
DISPLAY_TIMEZONE = timezone(timedelta(hours=9))


def strip_tags(content: str) -> str:
    """Remove anything that looks like a markup tag."""
    return TAG_PATTERN.sub("", content)


def preview_text(content: str, limit: int = DEFAULT_PREVIEW_LENGTH) -> str:
    """Return the tag-free text of ``content`` cut to at most ``limit`` characters.

    Tags are removed before counting, so markup never uses up the budget.
    Text that already fits is returned unchanged and no ellipsis is appended.

    >>> preview_text("<p>Hello</p>World", 5)
    'Hello'
    """
    if limit <= 0:
        return ""
    return strip_tags(content)[:limit]


def extract_video_id(url: str | None) -> str | None:
    """Return the YouTube video id in ``url``, if it has a known shape.

    Recognised shapes are ``youtube.com/watch?v=<id>`` and ``youtu.be/<id>``.
    """
    if not url:
        return None
    match = YOUTUBE_ID_PATTERN.search(url)
    return match.group(1) if match else None


def video_embed_url(url: str | None) -> str | None:
    """Return an embeddable player URL, or None when the link should stay plain."""
    video_id = extract_video_id(url)
    if video_id is None:
        return None
    return f"{YOUTUBE_EMBED_BASE}{video_id}"


def render_body(content: str) -> str:
    """Render stored content for the detail page; line breaks become ``<br>``."""
    return content.replace("\n", "<br>")


def format_korean_date(value: datetime, *, with_time: bool = False) -> str:
    """Format ``value`` the way the boards display dates, e.g. ``2024년 3월 5일``."""
    if value.tzinfo is not None:
        value = value.astimezone(DISPLAY_TIMEZONE)
    text = f"{value.year}년 {value.month}월 {value.day}일"
    if with_time:
        meridiem = "오전" if value.hour < 12 else "오후"
        hour = value.hour % 12 or 12
        text = f"{text} {meridiem} {hour:02d}:{value.minute:02d}"
    return text
