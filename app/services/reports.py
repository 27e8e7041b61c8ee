# app/services/reports.py
from __future__ import annotations

import io
import os
import re
import datetime as dt
import logging
from typing import Dict

from jinja2 import Environment, FileSystemLoader, select_autoescape
from xhtml2pdf import pisa

from app.core.config import settings
from app.schemas.analytics import EventAnalytics, GlobalAnalytics, StaffStats

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates", "reports")


def report_filename(name: str, suffix: str = "report") -> str:
    base = re.sub(r"[^a-z0-9]", "_", (name or "event").lower())
    return f"{base}-{suffix}.pdf"


class ReportService:
    """Renders aggregation results to PDF. Holds no state between requests."""

    def __init__(self, title: str | None = None):
        self.title = title or settings.REPORT_TITLE
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def render_html(self, template: str, ctx: Dict) -> str:
        tpl = self.env.get_template(template)
        return tpl.render(title=self.title, generated_at=dt.datetime.now(dt.timezone.utc), **ctx)

    def _to_pdf(self, html: str) -> bytes:
        out = io.BytesIO()
        result = pisa.CreatePDF(io.StringIO(html), dest=out)
        if result.err:
            logger.error("pdf rendering failed with %s error(s)", result.err)
            raise RuntimeError("Failed to render PDF report")
        return out.getvalue()

    def event_report(self, analytics: EventAnalytics) -> bytes:
        return self._to_pdf(self.render_html("event.html", {"event": analytics.event, "stats": analytics.stats}))

    def global_report(self, analytics: GlobalAnalytics) -> bytes:
        return self._to_pdf(self.render_html("global.html", {"stats": analytics.stats}))

    def staff_report(self, stats: StaffStats) -> bytes:
        return self._to_pdf(self.render_html("staff.html", {"stats": stats}))


def get_report_service() -> ReportService:
    return ReportService()
