from datetime import datetime, timedelta, timezone

from models.link import Link
from services.links import link_matches_search, paginate
from services.persistence import as_utc, isoformat, normalize_tags
from services.tags import summarize_tags


def _link(**fields):
    defaults = {"title": "Title", "url": "https://example.com", "description": None, "tags": []}
    defaults.update(fields)
    return Link(**defaults)


def test_search_is_case_insensitive_on_text_fields():
    link = _link(title="Async Python", description="Event loops explained")
    assert link_matches_search(link, "python")
    assert link_matches_search(link, "LOOPS")
    assert not link_matches_search(link, "rust")


def test_search_requires_exact_tag_membership():
    link = _link(title="x", tags=["ml", "Python"])
    assert link_matches_search(link, "ml")
    assert link_matches_search(link, "Python")
    assert not link_matches_search(link, "m")


def test_blank_search_matches_everything():
    assert link_matches_search(_link(), None)
    assert link_matches_search(_link(), "   ")


def test_paginate_metadata():
    rows, meta = paginate(list(range(10)), page=2, limit=4)
    assert rows == [4, 5, 6, 7]
    assert meta == {"page": 2, "limit": 4, "total": 10, "pages": 3}

    rows, meta = paginate([], page=1, limit=20)
    assert rows == []
    assert meta["pages"] == 0


def test_normalize_tags():
    assert normalize_tags(None) == []
    assert normalize_tags([" a ", "b", "", "a", "  "]) == ["a", "b"]


def test_timestamps_are_rendered_in_utc():
    naive = datetime(2026, 1, 2, 3, 4, 5)
    assert isoformat(naive) == "2026-01-02T03:04:05.000000+00:00"
    shifted = datetime(2026, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))
    assert as_utc(shifted) == datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert isoformat(None) is None


def test_summarize_tags_tracks_last_use():
    older = datetime(2026, 1, 1, tzinfo=timezone.utc)
    newer = datetime(2026, 2, 1, tzinfo=timezone.utc)
    summary = summarize_tags([
        _link(tags=["a", "b"], updated_at=older),
        _link(tags=["a"], updated_at=newer),
    ])
    assert summary["a"]["count"] == 2
    assert summary["a"]["last_used"] == newer
    assert summary["b"]["last_used"] == older
