# src/exporters/base_serializer.py — v1
"""Abstract report serializer interface."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from earlreport.core.models import ReportModel

# Characters not allowed inside an IRI reference
_IRI_UNSAFE = re.compile(r'[\x00-\x20<>"{}|^`\\]')


def escape_iri(value: str) -> str:
    """Percent-encode characters an IRI may not carry. Blank node labels pass through."""
    if value.startswith("_:"):
        return value
    return _IRI_UNSAFE.sub(lambda m: "%%%02X" % ord(m.group()), value)


class BaseReportSerializer(ABC):
    """Unified interface for report output formats.

    Serializers only read the report model; they never modify it.
    """

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Output format identifier (e.g., 'jsonld', 'turtle')."""

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Output file extension (e.g., '.jsonld', '.ttl')."""

    @abstractmethod
    def render(self, report: ReportModel) -> str:
        """Return the serialized report."""

    async def export(self, report: ReportModel, output_path: str) -> str:
        """Write the serialized report to a file, return its path."""
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(report), encoding="utf-8")
        return str(path)
