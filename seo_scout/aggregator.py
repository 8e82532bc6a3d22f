# File: seo_scout/aggregator.py
"""seo_scout.aggregator: Правила SEO-аудита и расчёт health score по собранным страницам."""

from __future__ import annotations

import json
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Literal, Optional, Sequence

from seo_scout.crawler.models import PageRecord

__all__ = ["AuditIssue", "AuditReport", "Summary", "audit", "calculate_health_score", "CHECKS"]

Severity = Literal["error", "warning", "notice"]

TITLE_MIN, TITLE_MAX = 30, 60
DESCRIPTION_MIN, DESCRIPTION_MAX = 120, 160
THIN_CONTENT_WORDS = 300


@dataclass(slots=True)
class AuditIssue:
    """Одна проблема аудита и страницы, которых она касается."""

    type: str
    severity: Severity
    message: str
    affected_urls: List[str]
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "severity": self.severity,
            "message": self.message,
            "affected_urls": list(self.affected_urls),
            "recommendation": self.recommendation,
        }


@dataclass(slots=True)
class Summary:
    errors: int = 0
    warnings: int = 0
    notices: int = 0

    @classmethod
    def from_issues(cls, issues: Sequence[AuditIssue]) -> Summary:
        return cls(
            errors=sum(1 for i in issues if i.severity == "error"),
            warnings=sum(1 for i in issues if i.severity == "warning"),
            notices=sum(1 for i in issues if i.severity == "notice"),
        )


@dataclass(slots=True)
class AuditReport:
    """Итог аудита сайта: проблемы, сводка, health score и сами страницы."""

    url: str
    crawled_at: str
    total_pages: int
    health_score: int
    issues: List[AuditIssue] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    pages: List[PageRecord] = field(default_factory=list)

    def to_dict(self, *, include_pages: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "url": self.url,
            "crawled_at": self.crawled_at,
            "total_pages": self.total_pages,
            "health_score": self.health_score,
            "issues": [i.to_dict() for i in self.issues],
            "summary": {
                "errors": self.summary.errors,
                "warnings": self.summary.warnings,
                "notices": self.summary.notices,
            },
        }
        if include_pages:
            data["pages"] = [p.to_dict() for p in self.pages]
        return data

    def json(self, *, pretty: bool = False, include_pages: bool = True) -> str:
        """Возвращает JSON-представление отчёта."""
        return json.dumps(
            self.to_dict(include_pages=include_pages),
            ensure_ascii=False,
            indent=2 if pretty else None,
        )


def _issue(
    type_: str,
    severity: Severity,
    pages: Sequence[PageRecord],
    message: str,
    recommendation: str,
) -> List[AuditIssue]:
    if not pages:
        return []
    return [
        AuditIssue(
            type=type_,
            severity=severity,
            message=message.format(count=len(pages)),
            affected_urls=[p.url for p in pages],
            recommendation=recommendation,
        )
    ]


def check_titles(pages: Sequence[PageRecord]) -> List[AuditIssue]:
    return (
        _issue(
            "missing_title", "error",
            [p for p in pages if not p.title],
            "{count} page(s) missing title tag",
            "Add a unique, descriptive title tag to each page (30-60 characters)",
        )
        + _issue(
            "title_too_short", "warning",
            [p for p in pages if p.title and len(p.title) < TITLE_MIN],
            "{count} page(s) with title tags shorter than 30 characters",
            "Expand title tags to at least 30 characters for better SEO",
        )
        + _issue(
            "title_too_long", "warning",
            [p for p in pages if p.title and len(p.title) > TITLE_MAX],
            "{count} page(s) with title tags longer than 60 characters",
            "Shorten title tags to 60 characters or less to avoid truncation",
        )
    )


def check_meta_descriptions(pages: Sequence[PageRecord]) -> List[AuditIssue]:
    return (
        _issue(
            "missing_meta_description", "error",
            [p for p in pages if not p.meta_description],
            "{count} page(s) missing meta description",
            "Add a compelling meta description to each page (120-160 characters)",
        )
        + _issue(
            "meta_description_too_short", "warning",
            [p for p in pages if p.meta_description and len(p.meta_description) < DESCRIPTION_MIN],
            "{count} page(s) with meta description shorter than 120 characters",
            "Expand meta descriptions to at least 120 characters",
        )
        + _issue(
            "meta_description_too_long", "warning",
            [p for p in pages if p.meta_description and len(p.meta_description) > DESCRIPTION_MAX],
            "{count} page(s) with meta description longer than 160 characters",
            "Shorten meta descriptions to 160 characters or less",
        )
    )


def check_h1_tags(pages: Sequence[PageRecord]) -> List[AuditIssue]:
    return (
        _issue(
            "missing_h1", "error",
            [p for p in pages if not p.h1_tags],
            "{count} page(s) missing H1 tag",
            "Add exactly one H1 tag to each page with the main heading",
        )
        + _issue(
            "multiple_h1", "error",
            [p for p in pages if len(p.h1_tags) > 1],
            "{count} page(s) with multiple H1 tags",
            "Use only one H1 tag per page for proper heading structure",
        )
    )


def check_images(pages: Sequence[PageRecord]) -> List[AuditIssue]:
    return _issue(
        "missing_image_alt", "warning",
        [p for p in pages if any(not img.alt for img in p.images)],
        "{count} page(s) with images missing alt text",
        "Add descriptive alt text to all images for accessibility and SEO",
    )


def check_content(pages: Sequence[PageRecord]) -> List[AuditIssue]:
    return _issue(
        "thin_content", "warning",
        [p for p in pages if p.word_count < THIN_CONTENT_WORDS],
        "{count} page(s) with less than 300 words",
        "Add more substantive content (at least 300 words) to improve SEO value",
    )


def check_canonical(pages: Sequence[PageRecord]) -> List[AuditIssue]:
    return _issue(
        "missing_canonical", "notice",
        [p for p in pages if not p.canonical],
        "{count} page(s) missing canonical tag",
        "Add canonical tags to prevent duplicate content issues",
    )


def check_open_graph(pages: Sequence[PageRecord]) -> List[AuditIssue]:
    return _issue(
        "missing_open_graph", "notice",
        [p for p in pages if not p.og_tags.get("og:title") or not p.og_tags.get("og:description")],
        "{count} page(s) missing Open Graph tags",
        "Add og:title, og:description, og:image for better social sharing",
    )


def check_schema(pages: Sequence[PageRecord]) -> List[AuditIssue]:
    return _issue(
        "missing_schema", "notice",
        [p for p in pages if not p.schema_markup],
        "{count} page(s) missing structured data (schema.org)",
        "Add JSON-LD structured data (Organization, LocalBusiness, Product, etc.)",
    )


def check_broken_pages(pages: Sequence[PageRecord]) -> List[AuditIssue]:
    broken = [p for p in pages if 400 <= p.status_code < 600]
    if not broken:
        return []
    return [
        AuditIssue(
            type="broken_pages",
            severity="error",
            message=f"{len(broken)} page(s) returning error status codes",
            affected_urls=[f"{p.url} ({p.status_code})" for p in broken],
            recommendation="Fix or redirect broken pages to improve user experience",
        )
    ]


def check_ssl(pages: Sequence[PageRecord]) -> List[AuditIssue]:
    return _issue(
        "missing_ssl", "error",
        [p for p in pages if p.url.startswith("http://")],
        "{count} page(s) not using HTTPS",
        "Implement SSL certificate and redirect all HTTP traffic to HTTPS",
    )


def _group_by(pages: Sequence[PageRecord], key: Callable[[PageRecord], Optional[str]]) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = defaultdict(list)
    for page in pages:
        value = key(page)
        if value:
            groups[value].append(page.url)
    return {value: urls for value, urls in groups.items() if len(urls) > 1}


def check_duplicates(pages: Sequence[PageRecord]) -> List[AuditIssue]:
    issues: List[AuditIssue] = []

    titles = _group_by(pages, lambda p: p.title)
    if titles:
        issues.append(
            AuditIssue(
                type="duplicate_titles",
                severity="warning",
                message=f"{len(titles)} duplicate title tag(s) found",
                affected_urls=[f"{url} ({title})" for title, urls in titles.items() for url in urls],
                recommendation="Create unique title tags for each page",
            )
        )

    descriptions = _group_by(pages, lambda p: p.meta_description)
    if descriptions:
        issues.append(
            AuditIssue(
                type="duplicate_meta_descriptions",
                severity="warning",
                message=f"{len(descriptions)} duplicate meta description(s) found",
                affected_urls=[url for urls in descriptions.values() for url in urls],
                recommendation="Write unique meta descriptions for each page",
            )
        )
    return issues


CHECKS: Sequence[Callable[[Sequence[PageRecord]], List[AuditIssue]]] = (
    check_titles,
    check_meta_descriptions,
    check_h1_tags,
    check_images,
    check_content,
    check_canonical,
    check_open_graph,
    check_schema,
    check_broken_pages,
    check_ssl,
    check_duplicates,
)


def calculate_health_score(summary: Summary, total_pages: int) -> int:
    """Health score 0-100: штрафы за ошибки (max 40), предупреждения (max 30), заметки (max 20)."""
    if total_pages <= 0:
        return 100
    score = 100.0
    score -= min(summary.errors / total_pages * 10, 40)
    score -= min(summary.warnings / total_pages * 5, 30)
    score -= min(summary.notices / total_pages * 2, 20)
    # округление половин вверх, как Math.round
    return max(0, math.floor(score + 0.5))


def audit(pages: Sequence[PageRecord], base_url: str) -> AuditReport:
    """Прогоняет все проверки по страницам и собирает AuditReport."""
    issues: List[AuditIssue] = []
    for check in CHECKS:
        issues.extend(check(pages))
    summary = Summary.from_issues(issues)
    return AuditReport(
        url=base_url,
        crawled_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        total_pages=len(pages),
        health_score=calculate_health_score(summary, len(pages)),
        issues=issues,
        summary=summary,
        pages=list(pages),
    )
