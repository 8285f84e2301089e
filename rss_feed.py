"""
RSS Feed Module
Renders the cached article batch as an RSS 2.0 document.

The projector never sorts: the first FEED_ITEM_LIMIT items are emitted in
the order they were cached. Text escaping is left to ElementTree.
"""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, Iterable, Optional

from dateutil import parser as dateutil_parser

from config import FEED_ITEM_LIMIT, FEED_PATH

ATOM_NS = "http://www.w3.org/2005/Atom"
ET.register_namespace("atom", ATOM_NS)

FEED_TITLE = "The Briefing"
FEED_DESCRIPTION = "Satirical news from India, generated fresh."
FEED_LANGUAGE = "en-in"

def parse_article_date(label: Any) -> Optional[datetime]:
    """Parse a display date like 'Oct 19, 2025'. Returns None when unparsable."""
    if not isinstance(label, str) or not label.strip():
        return None
    try:
        dt = dateutil_parser.parse(label)
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _build_item(channel: ET.Element, article: Dict[str, Any], base_url: str) -> None:
    item = ET.SubElement(channel, "item")
    ET.SubElement(item, "title").text = _text(article.get("headline"))
    ET.SubElement(item, "description").text = _text(article.get("summary"))
    ET.SubElement(item, "author").text = _text(article.get("author"))
    ET.SubElement(item, "category").text = _text(article.get("category"))

    article_id = article.get("id")
    if article_id is not None:
        ET.SubElement(item, "link").text = f"{base_url}/#article-{article_id}"
        guid = ET.SubElement(item, "guid", isPermaLink="false")
        guid.text = _text(article_id)
    else:
        ET.SubElement(item, "link").text = f"{base_url}/"

    published = parse_article_date(article.get("date"))
    if published is not None:
        ET.SubElement(item, "pubDate").text = format_datetime(published)


def render_feed(batch: Iterable[Dict[str, Any]], base_url: str, now: Optional[datetime] = None) -> str:
    """Return the feed document for the first FEED_ITEM_LIMIT articles of `batch`."""
    base_url = base_url.rstrip("/")
    now = now or datetime.now(timezone.utc)

    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = FEED_TITLE
    ET.SubElement(channel, "link").text = f"{base_url}/"
    ET.SubElement(channel, "description").text = FEED_DESCRIPTION
    ET.SubElement(channel, "language").text = FEED_LANGUAGE
    ET.SubElement(channel, "lastBuildDate").text = format_datetime(now)
    ET.SubElement(channel, f"{{{ATOM_NS}}}link", {
        "href": f"{base_url}{FEED_PATH}",
        "rel": "self",
        "type": "application/rss+xml",
    })

    for i, article in enumerate(batch):
        if i >= FEED_ITEM_LIMIT:
            break
        _build_item(channel, article, base_url)

    body = ET.tostring(rss, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body
