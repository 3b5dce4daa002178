# src/exporters/html_serializer.py — v1
"""HTML document serializer using Jinja2 templates.

The template receives the JSON-LD structured record as ``report``, so a
custom template sees exactly the fields of the JSON-LD output.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from earlreport.core.models import ReportModel
from earlreport.exporters.base_serializer import BaseReportSerializer, escape_iri
from earlreport.exporters.jsonld_serializer import report_to_record
from earlreport.version import __version__

TEMPLATE_DIR = Path(__file__).parent / "templates"
DEFAULT_TEMPLATE = "earl_report.html.j2"


def _local(value: str | None) -> str:
    """Drop a CURIE prefix or IRI namespace: 'earl:passed' -> 'passed'."""
    if not value:
        return ""
    return value.rsplit("#", 1)[-1].rsplit(":", 1)[-1]


class HtmlSerializer(BaseReportSerializer):
    """Render the report through a Jinja2 template.

    Args:
        template: Template source overriding the built-in template.
    """

    def __init__(self, template: str | None = None) -> None:
        self._template_source = template
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(["html", "xml", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["local"] = _local

    @property
    def format_name(self) -> str:
        return "html"

    @property
    def file_extension(self) -> str:
        return ".html"

    def render(self, report: ReportModel) -> str:
        if self._template_source is not None:
            template = self.env.from_string(self._template_source)
        else:
            template = self.env.get_template(DEFAULT_TEMPLATE)
        return template.render(
            report=report_to_record(report),
            totals={escape_iri(sid): counts for sid, counts in report.outcome_totals().items()},
            version=__version__,
        )
