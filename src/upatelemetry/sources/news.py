"""NASA space station blog crawler (RSS)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import feedparser

from upatelemetry import _constants as const
from upatelemetry._transport import Transport
from upatelemetry.exceptions import UpaSourceError, UpaTransportError
from upatelemetry.ingestion.normalize import clean_excerpt, format_news_date
from upatelemetry.models.news import NewsArticle, NewsDigest
from upatelemetry.sources.result import SourceFailure, SourceOk

_logger = logging.getLogger(__name__)


def _entry_date(entry: Any) -> str:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if parsed is not None:
        try:
            return format_news_date(datetime(*parsed[:6], tzinfo=UTC))
        except (TypeError, ValueError):
            pass
    raw = entry.get("published") or entry.get("updated")
    return str(raw).strip() if raw else ""


def parse_feed(
    xml_text: str,
    *,
    max_items: int = const.NEWS_MAX_ITEMS,
    excerpt_chars: int = const.NEWS_EXCERPT_CHARS,
) -> NewsDigest:
    """Extract the newest ``max_items`` articles from an RSS document."""
    parsed = feedparser.parse(xml_text)
    if parsed.get("bozo") and not parsed.entries:
        reason = parsed.get("bozo_exception")
        raise UpaSourceError(f"Failed to parse RSS XML: {reason}", source="news")

    articles: list[NewsArticle] = []
    for entry in parsed.entries[:max_items]:
        title = str(entry.get("title") or "").strip()
        link = str(entry.get("link") or "").strip()
        articles.append(
            NewsArticle(
                title=title or "Untitled",
                link=link or "#",
                date=_entry_date(entry),
                excerpt=clean_excerpt(entry.get("summary") or entry.get("description"), excerpt_chars),
            )
        )
    return NewsDigest(articles=tuple(articles))


class NewsSource:
    name = "news"

    def __init__(
        self,
        transport: Transport,
        *,
        url: str = const.NEWS_URL,
        max_items: int = const.NEWS_MAX_ITEMS,
        excerpt_chars: int = const.NEWS_EXCERPT_CHARS,
    ) -> None:
        self._transport = transport
        self._url = url
        self._max_items = max_items
        self._excerpt_chars = excerpt_chars

    async def fetch(self) -> SourceOk[NewsDigest] | SourceFailure:
        try:
            xml_text = await self._transport.get_text(self._url)
        except UpaTransportError as exc:
            _logger.debug("NASA RSS fetch failed", exc_info=True)
            return SourceFailure(f"Failed to fetch NASA RSS feed: {exc}", source=self.name)
        try:
            digest = parse_feed(xml_text, max_items=self._max_items, excerpt_chars=self._excerpt_chars)
        except UpaSourceError as exc:
            return SourceFailure(str(exc), source=self.name)
        return SourceOk(digest, source=self._url)
