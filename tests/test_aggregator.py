# File: tests/test_aggregator.py
"""Тесты правил аудита и health score."""
import json

import pytest

from seo_scout.aggregator import Summary, audit, calculate_health_score, check_broken_pages, check_duplicates
from seo_scout.crawler.models import ImageInfo, PageRecord

GOOD_TITLE = "A perfectly sized title for the page"  # 36 символов
GOOD_DESCRIPTION = "d" * 130


def good_page(url: str = "https://example.com/", **overrides) -> PageRecord:
    fields = dict(
        url=url,
        status_code=200,
        load_time=0.1234,
        title=GOOD_TITLE + url,
        meta_description=GOOD_DESCRIPTION + url,
        h1_tags=("Heading",),
        word_count=500,
        images=(ImageInfo(src="/a.png", alt="A"),),
        canonical=url,
        og_tags={"og:title": "t", "og:description": "d"},
        schema_markup=({"@type": "Thing"},),
    )
    fields.update(overrides)
    return PageRecord(**fields)


def issue_types(report) -> list[str]:
    return [i.type for i in report.issues]


def test_clean_site_scores_100():
    report = audit([good_page("https://example.com/a"), good_page("https://example.com/b")], "https://example.com/")
    assert report.issues == []
    assert report.health_score == 100
    assert report.total_pages == 2


def test_empty_crawl_scores_100():
    report = audit([], "https://example.com/")
    assert report.health_score == 100
    assert report.total_pages == 0
    assert report.issues == []


@pytest.mark.parametrize(
    "overrides,expected_type,severity",
    [
        ({"title": None}, "missing_title", "error"),
        ({"title": "Short"}, "title_too_short", "warning"),
        ({"title": "x" * 61}, "title_too_long", "warning"),
        ({"meta_description": None}, "missing_meta_description", "error"),
        ({"meta_description": "short"}, "meta_description_too_short", "warning"),
        ({"meta_description": "x" * 161}, "meta_description_too_long", "warning"),
        ({"h1_tags": ()}, "missing_h1", "error"),
        ({"h1_tags": ("One", "Two")}, "multiple_h1", "error"),
        ({"images": (ImageInfo(src="/b.png"),)}, "missing_image_alt", "warning"),
        ({"word_count": 299}, "thin_content", "warning"),
        ({"canonical": None}, "missing_canonical", "notice"),
        ({"og_tags": {"og:title": "only title"}}, "missing_open_graph", "notice"),
        ({"schema_markup": ()}, "missing_schema", "notice"),
        ({"status_code": 404}, "broken_pages", "error"),
    ],
)
def test_single_rule(overrides, expected_type, severity):
    page = good_page(**overrides)
    report = audit([page], "https://example.com/")
    assert issue_types(report) == [expected_type]
    issue = report.issues[0]
    assert issue.severity == severity
    assert issue.affected_urls[0].startswith(page.url)
    assert issue.recommendation


def test_http_pages_flagged_without_ssl():
    report = audit([good_page("http://example.com/")], "http://example.com/")
    assert issue_types(report) == ["missing_ssl"]
    assert report.issues[0].message == "1 page(s) not using HTTPS"


def test_message_counts_pages():
    pages = [good_page(f"https://example.com/{i}", title=None) for i in range(3)]
    report = audit(pages, "https://example.com/")
    missing = report.issues[0]
    assert missing.message == "3 page(s) missing title tag"
    assert missing.affected_urls == [p.url for p in pages]


def test_broken_pages_include_status():
    pages = [good_page("https://example.com/x", status_code=500), good_page("https://example.com/y")]
    (issue,) = check_broken_pages(pages)
    assert issue.affected_urls == ["https://example.com/x (500)"]


def test_duplicates():
    pages = [
        good_page("https://example.com/a", title=GOOD_TITLE, meta_description=GOOD_DESCRIPTION),
        good_page("https://example.com/b", title=GOOD_TITLE, meta_description=GOOD_DESCRIPTION),
        good_page("https://example.com/c"),
    ]
    titles, descriptions = check_duplicates(pages)
    assert titles.type == "duplicate_titles"
    assert titles.message == "1 duplicate title tag(s) found"
    assert titles.affected_urls == [
        f"https://example.com/a ({GOOD_TITLE})",
        f"https://example.com/b ({GOOD_TITLE})",
    ]
    assert descriptions.type == "duplicate_meta_descriptions"
    assert descriptions.affected_urls == ["https://example.com/a", "https://example.com/b"]


@pytest.mark.parametrize(
    "summary,pages,expected",
    [
        (Summary(), 0, 100),
        (Summary(errors=1), 1, 90),
        (Summary(errors=10, warnings=10, notices=10), 1, 10),
        (Summary(errors=1, warnings=1, notices=1), 2, 92),
        (Summary(errors=1, warnings=1, notices=1), 4, 96),
        (Summary(notices=1), 4, 100),
        (Summary(warnings=1), 10, 100),
    ],
)
def test_health_score(summary, pages, expected):
    assert calculate_health_score(summary, pages) == expected


def test_summary_matches_issues():
    report = audit([good_page(title=None, canonical=None, word_count=10)], "https://example.com/")
    assert (report.summary.errors, report.summary.warnings, report.summary.notices) == (1, 1, 1)
    assert report.health_score == 83


def test_report_json_round_trip():
    report = audit([good_page()], "https://example.com/")
    data = json.loads(report.json())
    assert data["url"] == "https://example.com/"
    assert data["summary"] == {"errors": 0, "warnings": 0, "notices": 0}
    assert data["pages"][0]["load_time"] == 0.123
    assert "pages" not in report.to_dict(include_pages=False)
