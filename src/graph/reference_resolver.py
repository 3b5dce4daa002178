# src/graph/reference_resolver.py — v1
"""Reference resolver — fetch descriptions of subjects and developers.

Assertions name their test subject by URI, and DOAP descriptions name
developers by URI. When the merged graph holds no description for one of
these, the resolver dereferences the URI and merges whatever it finds.

Two passes, in this order:
  1. Subjects: every assertion subject without a named doap:Project.
  2. Developers: every developer URI without a foaf:name. Developer
     references only become visible once subject descriptions are merged.

Fetches within a pass run concurrently in worker threads. Merges are applied
one at a time on the event loop, since rdflib graphs are not safe for
concurrent writers. A failed fetch is logged and the run continues.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from rdflib import Graph, URIRef

from earlreport.core.queries import DEFAULT_QUERIES, QuerySet
from earlreport.graph import store
from earlreport.graph.store import LoadError
from earlreport.logging.context import set_step

logger = logging.getLogger(__name__)


@dataclass
class ResolutionReport:
    """What the resolver fetched, merged and failed to fetch."""

    requested: list[str] = field(default_factory=list)
    merged: dict[str, int] = field(default_factory=dict)  # uri -> triples gained
    failed: dict[str, str] = field(default_factory=dict)  # uri -> reason

    @property
    def triples_gained(self) -> int:
        return sum(self.merged.values())


def missing_subjects(graph: Graph, queries: QuerySet = DEFAULT_QUERIES) -> list[str]:
    """Assertion subjects that have no named DOAP description yet."""
    described: set[str] = set()
    candidates: set[str] = set()
    for row in store.run_query(graph, queries.doap):
        subject = row["subject"]
        if not isinstance(subject, URIRef):
            continue
        if row["name"] is not None:
            described.add(str(subject))
        else:
            candidates.add(str(subject))
    return sorted(candidates - described)


def missing_developers(graph: Graph, queries: QuerySet = DEFAULT_QUERIES) -> list[str]:
    """Developer URIs referenced from test subjects but lacking a foaf:name."""
    named: set[str] = set()
    candidates: set[str] = set()
    for row in store.run_query(graph, queries.test_subject):
        developer = row["developer"]
        if not isinstance(developer, URIRef):
            continue
        if row["devName"] is not None:
            named.add(str(developer))
        else:
            candidates.add(str(developer))
    return sorted(candidates - named)


async def resolve_references(
    graph: Graph,
    queries: QuerySet = DEFAULT_QUERIES,
    timeout: float = store.DEFAULT_TIMEOUT,
    concurrency: int = 8,
    status_level: int = logging.INFO,
) -> ResolutionReport:
    """Fetch and merge missing subject, then developer, descriptions.

    Args:
        graph: Merged manifest and report graph; modified in place.
        queries: Query set providing the DOAP and test-subject queries.
        timeout: Per-fetch timeout in seconds.
        concurrency: Maximum number of fetches in flight.
        status_level: Log level for progress messages.

    Returns:
        ResolutionReport covering both passes.
    """
    report = ResolutionReport()

    set_step("resolve-subjects")
    subjects = missing_subjects(graph, queries)
    for uri in subjects:
        logger.log(status_level, "read DOAP description for %s", uri)
    await _fetch_and_merge(graph, subjects, report, timeout, concurrency, status_level)

    set_step("resolve-developers")
    developers = missing_developers(graph, queries)
    for uri in developers:
        logger.log(status_level, "read description for developer %s", uri)
    await _fetch_and_merge(graph, developers, report, timeout, concurrency, status_level)

    set_step(None)
    if report.failed:
        logger.warning(
            "%d of %d references could not be resolved",
            len(report.failed), len(report.requested),
        )
    return report


async def _fetch_and_merge(
    graph: Graph,
    uris: list[str],
    report: ResolutionReport,
    timeout: float,
    concurrency: int,
    status_level: int,
) -> None:
    if not uris:
        return
    semaphore = asyncio.Semaphore(concurrency)

    async def fetch(uri: str) -> Graph | None:
        async with semaphore:
            try:
                return await asyncio.to_thread(store.load_graph, uri, None, timeout)
            except LoadError as exc:
                logger.warning("Failed to load %s: %s", uri, exc.reason)
                report.failed[uri] = exc.reason
                return None

    report.requested.extend(uris)
    fetched = await asyncio.gather(*(fetch(uri) for uri in uris))

    for uri, fetched_graph in zip(uris, fetched):
        if fetched_graph is None:
            continue
        gained = store.merge_graph(graph, fetched_graph)
        report.merged[uri] = gained
        logger.log(status_level, "  loaded %d triples from %s", gained, uri)
