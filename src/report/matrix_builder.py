# src/report/matrix_builder.py — v1
"""Matrix builder — dense subject × test assertion matrix.

Steps:
  1. Build the test-subject roster: every distinct assertion subject,
     enriched with whatever DOAP/FOAF description the graph holds, sorted
     by id.
  2. Allocate one placeholder assertion (untested, automatic) per roster
     subject for every manifest test, in manifest order.
  3. Overlay the real assertions, enumerated by subject. A later assertion
     for the same cell overwrites an earlier one. Assertions about tests
     outside the manifest are logged and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rdflib import Graph, URIRef
from rdflib.term import Node

from earlreport.core.models import (
    DEFAULT_MODE,
    MODES,
    OUTCOMES,
    Assertion,
    Developer,
    ManifestEntry,
    ReportModel,
    TestCase,
    TestSubject,
)
from earlreport.core.queries import DEFAULT_QUERIES, QuerySet
from earlreport.graph import store

logger = logging.getLogger(__name__)

# Outcome names from earlier EARL drafts
LEGACY_OUTCOMES: dict[str, str] = {
    "pass": "passed",
    "fail": "failed",
    "notTested": "untested",
    "cannotTell": "cantTell",
    "notApplicable": "inapplicable",
}


class EmptyManifestError(Exception):
    """Raised when the manifest yields no test cases."""


@dataclass
class OverlayStats:
    """Counters from the assertion overlay step."""

    applied: int = 0
    overwritten: int = 0
    orphaned: list[str] = field(default_factory=list)
    rejected: int = 0


# === ROSTER ===


def build_roster(graph: Graph, queries: QuerySet = DEFAULT_QUERIES) -> list[TestSubject]:
    """Return every assertion subject, described where possible, sorted by id."""
    subject_ids = {store.node_id(row["subject"]) for row in store.run_query(graph, queries.doap)}

    info: dict[str, dict] = {}
    developers: dict[str, dict[str, dict]] = {}
    for row in store.run_query(graph, queries.test_subject):
        sid = store.node_id(row["uri"])
        if sid not in subject_ids:
            continue
        entry = info.setdefault(sid, {})
        for prop, column in (
            ("name", "name"),
            ("description", "doapDesc"),
            ("homepage", "homepage"),
            ("language", "language"),
        ):
            if row[column] is not None:
                entry[prop] = str(row[column])
        _collect_developer(developers.setdefault(sid, {}), row)

    roster: list[TestSubject] = []
    for sid in sorted(subject_ids):
        devs = [Developer(**d) for d in developers.get(sid, {}).values()]
        roster.append(TestSubject(id=sid, developers=devs, **info.get(sid, {})))
    return roster


def _collect_developer(collected: dict[str, dict], row: dict[str, Node | None]) -> None:
    """Fold one query row into the developers collected for a subject."""
    developer = row["developer"]
    if developer is None:
        return
    if row["devName"] is None and not isinstance(developer, URIRef):
        return
    key = store.node_id(developer)
    dev = collected.setdefault(key, {"kind": "Person"})
    if isinstance(developer, URIRef):
        dev["id"] = str(developer)
    if row["devName"] is not None:
        dev["name"] = str(row["devName"])
    if row["devHomepage"] is not None:
        dev["homepage"] = str(row["devHomepage"])
    if row["devType"] is not None and str(row["devType"]).endswith("Organization"):
        dev["kind"] = "Organization"


# === MATRIX ===


def build_matrix(
    entries: list[ManifestEntry],
    roster: list[TestSubject],
) -> dict[str, TestCase]:
    """Allocate the dense default matrix, keyed by test URI in manifest order.

    Raises:
        EmptyManifestError: If ``entries`` is empty.
    """
    if not entries:
        raise EmptyManifestError("No test cases found in manifest")

    test_cases: dict[str, TestCase] = {}
    for entry in entries:
        test_cases[entry.uri] = TestCase(
            id=entry.uri,
            title=entry.title,
            action=entry.action,
            description=entry.description,
            result=entry.result,
            assertions=[Assertion(test=entry.uri, subject=s.id) for s in roster],
        )
    return test_cases


def overlay_assertions(
    graph: Graph,
    query: str,
    test_cases: dict[str, TestCase],
    roster: list[TestSubject],
) -> OverlayStats:
    """Write every real assertion into its matrix cell, in place."""
    stats = OverlayStats()
    columns = {subject.id: index for index, subject in enumerate(roster)}
    touched: set[tuple[str, str]] = set()

    for row in store.run_query(graph, query):
        test_id = store.node_id(row["test"])
        subject_id = store.node_id(row["subject"])

        test_case = test_cases.get(test_id)
        if test_case is None:
            logger.warning(
                "No test case found for %s (asserted on %s), assertion skipped",
                test_id, subject_id,
            )
            stats.orphaned.append(test_id)
            continue
        column = columns.get(subject_id)
        if column is None:
            logger.warning("Subject %s is not in the roster, assertion skipped", subject_id)
            stats.rejected += 1
            continue

        outcome = normalize_outcome(row["outcome"])
        if outcome is None:
            logger.warning(
                "Unknown outcome %s for %s on %s, cell left untested",
                row["outcome"], test_id, subject_id,
            )
            stats.rejected += 1
            continue

        cell = test_case.assertions[column]
        cell.outcome = outcome  # type: ignore[assignment]
        cell.mode = normalize_mode(row["mode"])  # type: ignore[assignment]
        cell.asserted_by = store.node_id(row["by"]) if row["by"] is not None else None

        if (test_id, subject_id) in touched:
            stats.overwritten += 1
        touched.add((test_id, subject_id))
        stats.applied += 1

    return stats


def local_name(node: Node | None) -> str:
    """Part of an IRI after its last '#' (or '/' when there is no '#')."""
    if node is None:
        return ""
    text = str(node)
    if "#" in text:
        return text.rsplit("#", 1)[1]
    return text.rsplit("/", 1)[-1]


def normalize_outcome(node: Node | None) -> str | None:
    """Map an earl:outcome value to the outcome vocabulary, or None."""
    name = local_name(node)
    name = LEGACY_OUTCOMES.get(name, name)
    return name if name in OUTCOMES else None


def normalize_mode(node: Node | None) -> str:
    """Map an earl:mode value to the mode vocabulary.

    A missing or empty mode reads as automatic. This hides assertions that
    never stated a mode, so it is logged at debug level.
    """
    name = local_name(node)
    if not name:
        logger.debug("Assertion without mode, assuming %s", DEFAULT_MODE)
        return DEFAULT_MODE
    if name not in MODES:
        logger.warning("Unknown mode %s, assuming %s", node, DEFAULT_MODE)
        return DEFAULT_MODE
    return name


# === REPORT ===


def build_report(
    graph: Graph,
    entries: list[ManifestEntry],
    queries: QuerySet = DEFAULT_QUERIES,
    sources: list[str] | None = None,
    name: str | None = None,
    bib_ref: str | None = None,
    homepage: str | None = None,
) -> ReportModel:
    """Build the canonical report model from a merged graph.

    Raises:
        EmptyManifestError: If ``entries`` is empty.
    """
    roster = build_roster(graph, queries)
    logger.debug("Roster: %s", ", ".join(s.id for s in roster) or "(empty)")

    test_cases = build_matrix(entries, roster)
    logger.debug("Test cases:\n  %s", "\n  ".join(test_cases))

    stats = overlay_assertions(graph, queries.assertion, test_cases, roster)
    logger.info(
        "Matrix: %d tests x %d subjects, %d assertions applied (%d overwritten, %d orphaned)",
        len(test_cases), len(roster), stats.applied, stats.overwritten, len(stats.orphaned),
    )

    return ReportModel(
        name=name,
        bib_ref=bib_ref,
        homepage=homepage,
        sources=list(sources or []),
        subjects=roster,
        tests=list(test_cases.values()),
    )
