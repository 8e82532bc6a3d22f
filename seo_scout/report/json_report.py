# seo_scout/report/json_report.py
"""JSON-выгрузка AuditReport: тот же документ, что отдаёт HTTP API в поле ``data``."""
from pathlib import Path

from seo_scout.aggregator import AuditReport


def render_json(
    report: AuditReport,
    output_path: Path | str,
    *,
    pretty: bool = True,
    include_pages: bool = True,
) -> Path:
    """
    Записывает ``report`` в ``output_path`` (родительские папки создаются).

    ``pretty`` даёт отступ в 2 пробела, ``include_pages=False`` оставляет
    только проблемы, сводку и health score. Возвращает путь к файлу.

        >>> render_json(report, "reports/example.json")  # doctest: +SKIP
        PosixPath('reports/example.json')
    """
    target = Path(output_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(report.json(pretty=pretty, include_pages=include_pages), encoding="utf-8")
    return target
