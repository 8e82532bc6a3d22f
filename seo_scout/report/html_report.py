# File: seo_scout/report/html_report.py
"""seo_scout.report.html_report: HTML-версия AuditReport на Jinja2.

Встроенный шаблон лежит в ``seo_scout/report/templates``; свою папку можно
передать через ``template_dir`` (в ней должен быть ``report.html.j2``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from seo_scout.aggregator import AuditReport

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
TEMPLATE_NAME = "report.html.j2"

# нижние границы health score для цветовых классов шаблона
SCORE_CLASSES = ((80, "good"), (50, "fair"))


def score_class(score: int) -> str:
    for threshold, css in SCORE_CLASSES:
        if score >= threshold:
            return css
    return "poor"


def _environment(template_dir: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_html(
    report: AuditReport,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит ``report`` в HTML-файл и возвращает путь к нему.

    Args:
        report: результат :func:`seo_scout.aggregator.audit`.
        template_dir: папка с ``report.html.j2``; ``None`` берёт встроенный шаблон.
        output_path: куда сохранить HTML (родительские папки создаются).

    В контексте шаблона доступны ``report``, ``summary``, ``issues``,
    ``pages`` и ``score_class``.
    """
    source = DEFAULT_TEMPLATE_DIR if template_dir is None else Path(template_dir)
    target = Path(output_path)
    target.parent.mkdir(parents=True, exist_ok=True)

    context: dict[str, Any] = {
        "report": report,
        "summary": report.summary,
        "issues": report.issues,
        "pages": report.pages,
        "score_class": score_class(report.health_score),
    }
    html = _environment(source).get_template(TEMPLATE_NAME).render(**context)
    target.write_text(html, encoding="utf-8")
    return target
