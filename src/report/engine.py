# src/report/engine.py — v1
"""EARL report engine — public entry point for consolidation.

Usage:
    from earlreport.report.engine import EarlReport
    engine = await EarlReport.load("manifest.ttl", ["impl-a.ttl", "impl-b.jsonld"])
    html = engine.generate("html")

The engine loads the manifest and every result graph into one graph,
resolves missing subject and developer descriptions, and then builds the
report model once, on first use.
"""

from __future__ import annotations

import asyncio
import json
import logging
from functools import cached_property
from pathlib import Path
from typing import IO, Sequence

from rdflib import Graph
from rdflib.plugin import PluginException

from earlreport.config.settings import Settings
from earlreport.core.models import ReportModel
from earlreport.core.queries import DEFAULT_QUERIES, QuerySet
from earlreport.exporters.jsonld_serializer import record_to_report, report_to_record
from earlreport.exporters.serializer_factory import (
    UnsupportedFormatError,
    canonical_format,
    create_serializer,
    is_report_format,
)
from earlreport.graph import store
from earlreport.graph.reference_resolver import ResolutionReport, resolve_references
from earlreport.logging.context import set_step, source_context
from earlreport.report.manifest_extractor import extract_test_cases
from earlreport.report.matrix_builder import build_report

logger = logging.getLogger(__name__)


class ManifestRequiredError(ValueError):
    """Raised when no test manifest is given."""


class EarlReport:
    """Consolidated EARL report over one merged graph.

    Args:
        graph: Merged manifest, result and description graph. None when the
            engine was rebuilt from an earlier JSON-LD record.
        sources: Identifiers of the result sources, in input order.
        settings: Report settings.
        queries: Queries to run against the graph.
        report: Ready-made report model (skips extraction and matrix build).
    """

    def __init__(
        self,
        graph: Graph | None,
        sources: Sequence[str] = (),
        settings: Settings | None = None,
        queries: QuerySet | None = None,
        report: ReportModel | None = None,
    ) -> None:
        if graph is None and report is None:
            raise ValueError("EarlReport needs a graph or a report model")
        self.graph = graph
        self.sources = [str(s) for s in sources]
        self.settings = settings or Settings()
        self.queries = _queries_for(self.settings, queries)
        self.resolution: ResolutionReport | None = None
        self._preloaded = report

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    async def load(
        cls,
        manifest: str | Path | None,
        reports: Sequence[str | Path] = (),
        settings: Settings | None = None,
        queries: QuerySet | None = None,
    ) -> EarlReport:
        """Load the manifest and result graphs, then resolve references.

        Raises:
            ManifestRequiredError: If ``manifest`` is missing.
            LoadError: If the manifest or any result graph cannot be loaded.
        """
        if not manifest:
            raise ManifestRequiredError("Test manifest must be specified")
        settings = settings or Settings()
        level = _status_level(settings)

        set_step("load")
        with source_context(str(manifest)):
            logger.log(level, "read %s", manifest)
            graph = await asyncio.to_thread(
                store.load_graph, manifest, settings.base, settings.fetch_timeout
            )
            logger.log(
                level, "  loaded %d triples", len(graph),
                extra={"data": {"triples": len(graph)}},
            )

        for source in reports:
            with source_context(str(source)):
                logger.log(level, "read %s", source)
                report_graph = await asyncio.to_thread(
                    store.load_graph, source, None, settings.fetch_timeout
                )
                gained = store.merge_graph(graph, report_graph)
                logger.log(
                    level, "  loaded %d triples (%d new)", len(report_graph), gained,
                    extra={"data": {"triples": len(report_graph), "gained": gained}},
                )
        set_step(None)

        engine = cls(graph, [str(s) for s in reports], settings, queries)
        if settings.resolve_references:
            engine.resolution = await resolve_references(
                graph,
                engine.queries,
                timeout=settings.fetch_timeout,
                concurrency=settings.fetch_concurrency,
                status_level=level,
            )
        return engine

    @classmethod
    def from_json(cls, source: str | Path, settings: Settings | None = None) -> EarlReport:
        """Rebuild an engine from JSON-LD written by an earlier run.

        ``source`` is a path to the record, or the record text itself.
        """
        text = str(source)
        path = Path(text)
        if not text.lstrip().startswith("{") and path.is_file():
            text = path.read_text(encoding="utf-8")
        report = record_to_report(json.loads(text))
        return cls(None, report.sources, settings, report=report)

    # ------------------------------------------------------------------
    # Report model
    # ------------------------------------------------------------------

    @cached_property
    def report(self) -> ReportModel:
        """The rollup model, built on first access and reused afterwards.

        Raises:
            EmptyManifestError: If the manifest holds no test cases.
            ValueError: If neither a graph nor a report model is held.
        """
        if self._preloaded is not None:
            return self._preloaded
        graph = self.graph
        if graph is None:
            raise ValueError("EarlReport has no graph to build a report from")

        set_step("extract")
        entries = extract_test_cases(graph, self.queries.manifest)
        logger.log(_status_level(self.settings), "found %d test cases", len(entries))

        set_step("matrix")
        try:
            return build_report(
                graph,
                entries,
                self.queries,
                sources=self.sources,
                name=self.settings.name,
                bib_ref=self.settings.bib_ref,
                homepage=self.settings.homepage,
            )
        finally:
            set_step(None)

    def record(self) -> dict:
        """The report as a JSON-LD structured record."""
        return report_to_record(self.report)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def generate(
        self,
        fmt: str = "html",
        io: IO[str] | None = None,
        template: str | None = None,
    ) -> str:
        """Serialize the report, or dump the raw graph for non-report formats.

        Args:
            fmt: 'jsonld'/'json', 'turtle'/'ttl', 'html', or any rdflib
                serializer name for a raw graph dump.
            io: Optional text stream that also receives the output.
            template: Jinja2 template source for html output.

        Returns:
            The serialized output.
        """
        logger.log(_status_level(self.settings), "generate: %s", fmt)
        set_step("render")
        try:
            if is_report_format(fmt):
                output = self._serializer(fmt, template).render(self.report)
            else:
                output = self._dump(fmt)
        finally:
            set_step(None)
        if io is not None:
            io.write(output)
        return output

    async def export(
        self,
        fmt: str,
        output_path: str | Path,
        template: str | None = None,
    ) -> str:
        """Write the output for ``fmt`` to a file, return its path."""
        if is_report_format(fmt):
            return await self._serializer(fmt, template).export(self.report, str(output_path))
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self._dump(fmt), encoding="utf-8")
        return str(path)

    def _serializer(self, fmt: str, template: str | None):
        options: dict[str, object] = {}
        if canonical_format(fmt) == "html" and template is not None:
            options["template"] = template
        return create_serializer(fmt, **options)

    def _dump(self, fmt: str) -> str:
        if self.graph is None:
            raise UnsupportedFormatError(
                f"Format {fmt!r} dumps the source graph, which a JSON-LD input does not have"
            )
        try:
            return store.dump_graph(self.graph, fmt)
        except PluginException as exc:
            raise UnsupportedFormatError(f"Unsupported output format: {fmt!r}") from exc


def _queries_for(settings: Settings, queries: QuerySet | None) -> QuerySet:
    queries = queries or DEFAULT_QUERIES
    if settings.query is not None:
        queries = queries.with_manifest_query(settings.manifest_query())
    return queries


def _status_level(settings: Settings) -> int:
    return logging.INFO if settings.verbose else logging.DEBUG
