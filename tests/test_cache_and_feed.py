"""
tests/test_cache_and_feed.py — article cache semantics and RSS rendering.

Run: pytest tests/test_cache_and_feed.py -v
"""

import os
import sys
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from article_cache import ArticleCache
from rss_feed import ATOM_NS, parse_article_date, render_feed


def make_articles(n, date="Oct 19, 2025"):
    return [
        {
            "id": 1000 + i,
            "category": "politics",
            "headline": f"Headline {i}",
            "summary": f"Summary {i}.",
            "author": "Anjali Mehta",
            "date": date,
        }
        for i in range(n)
    ]


def parse(xml):
    return ET.fromstring(xml.encode("utf-8"))


# ═══════════════════════════════════════════
# CACHE
# ═══════════════════════════════════════════

def test_cache_starts_empty():
    assert ArticleCache().read_all() == []


def test_replace_then_read_preserves_order():
    cache = ArticleCache()
    batch = make_articles(5)
    assert cache.replace(batch) == 5
    assert cache.read_all() == batch


def test_replace_with_empty_clears():
    cache = ArticleCache()
    cache.replace(make_articles(5))
    assert cache.replace([]) == 0
    assert cache.read_all() == []


def test_replace_with_none_clears():
    cache = ArticleCache()
    cache.replace(make_articles(2))
    assert cache.replace(None) == 0
    assert len(cache) == 0


def test_replace_is_wholesale_not_merge():
    cache = ArticleCache()
    cache.replace(make_articles(5))
    cache.replace(make_articles(2))
    assert [a["id"] for a in cache.read_all()] == [1000, 1001]


def test_reads_are_copies():
    cache = ArticleCache()
    batch = make_articles(1)
    cache.replace(batch)

    batch[0]["headline"] = "mutated by caller after replace"
    snapshot = cache.read_all()
    snapshot[0]["headline"] = "mutated by reader"
    snapshot.append({"id": 9})

    assert cache.read_all()[0]["headline"] == "Headline 0"
    assert len(cache) == 1


# ═══════════════════════════════════════════
# DATES
# ═══════════════════════════════════════════

def test_parse_article_date_formats():
    expected = datetime(2025, 10, 19, tzinfo=timezone.utc)
    for label in ["Oct 19, 2025", "October 19, 2025", "2025-10-19", "19 Oct 2025", "  Oct  19,  2025 ",
                  "Sunday, October 19, 2025", "Oct. 19, 2025", "19th October 2025", "October 19th, 2025"]:
        assert parse_article_date(label) == expected, label


def test_parse_article_date_rfc2822():
    dt = parse_article_date("Sun, 19 Oct 2025 10:30:00 +0000")
    assert dt == datetime(2025, 10, 19, 10, 30, tzinfo=timezone.utc)


def test_parse_article_date_garbage():
    assert parse_article_date("the day after Diwali") is None
    assert parse_article_date("") is None
    assert parse_article_date(None) is None


# ═══════════════════════════════════════════
# FEED
# ═══════════════════════════════════════════

def test_render_caps_at_twenty_in_input_order():
    root = parse(render_feed(make_articles(25), "https://briefing.test"))
    items = root.find("channel").findall("item")

    assert len(items) == 20
    assert [i.findtext("title") for i in items] == [f"Headline {n}" for n in range(20)]


def test_render_item_fields():
    root = parse(render_feed(make_articles(1), "https://briefing.test"))
    item = root.find("channel/item")

    assert item.findtext("description") == "Summary 0."
    assert item.findtext("author") == "Anjali Mehta"
    assert item.findtext("category") == "politics"
    assert item.findtext("guid") == "1000"
    assert item.find("guid").get("isPermaLink") == "false"
    assert item.findtext("link") == "https://briefing.test/#article-1000"
    assert item.findtext("pubDate").startswith("Sun, 19 Oct 2025 00:00:00")


def test_render_channel_metadata():
    now = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    root = parse(render_feed([], "https://briefing.test/", now=now))
    channel = root.find("channel")

    assert root.tag == "rss"
    assert root.get("version") == "2.0"
    assert channel.findtext("title") == "The Briefing"
    assert channel.findtext("link") == "https://briefing.test/"
    assert channel.findtext("lastBuildDate") == "Fri, 02 Jan 2026 03:04:05 +0000"
    assert channel.findall("item") == []

    self_links = channel.findall(f"{{{ATOM_NS}}}link")
    assert len(self_links) == 1
    assert self_links[0].get("href") == "https://briefing.test/rss"
    assert self_links[0].get("rel") == "self"


def test_render_escapes_markup():
    batch = [{"id": 1, "headline": "Chai <b>&</b> \"samosa\"", "summary": "a < b", "date": "Oct 19, 2025"}]
    xml = render_feed(batch, "https://briefing.test")

    assert "<b>" not in xml
    assert "&lt;b&gt;&amp;&lt;/b&gt;" in xml
    assert parse(xml).findtext("channel/item/title") == "Chai <b>&</b> \"samosa\""


def test_unparsable_date_omits_pubdate():
    root = parse(render_feed(make_articles(1, date="someday"), "https://briefing.test"))
    assert root.find("channel/item/pubDate") is None


def test_missing_fields_render_empty():
    root = parse(render_feed([{"headline": "Only a headline"}], "https://briefing.test"))
    item = root.find("channel/item")
    assert item.findtext("title") == "Only a headline"
    assert item.findtext("author") == ""
    assert item.find("guid") is None
