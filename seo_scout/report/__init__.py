# File: seo_scout/report/__init__.py
"""seo_scout.report: Генерация отчётов аудита (JSON и HTML), используемая CLI."""

from __future__ import annotations

from seo_scout.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from seo_scout.report.json_report import render_json

__all__ = ["render_json", "render_html", "DEFAULT_TEMPLATE_DIR"]
