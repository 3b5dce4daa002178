# src/report/manifest_extractor.py — v1
"""Manifest extractor — recover the ordered list of test cases.

Runs the manifest query and collapses its rows into one ManifestEntry per
test URI. Manifests that enumerate tests through ``mf:entries ( ... )``
bind the list head on the row of the first listed test; the order is then
taken from the list itself. Otherwise rows keep the order the query engine
returned them in.
"""

from __future__ import annotations

import logging

from rdflib import Graph
from rdflib.term import Node

from earlreport.core.models import ManifestEntry
from earlreport.graph import store
from earlreport.graph.rdf_list import iter_rdf_list

logger = logging.getLogger(__name__)


def extract_test_cases(graph: Graph, query: str) -> list[ManifestEntry]:
    """Run ``query`` against ``graph`` and return tests in manifest order.

    Args:
        graph: Merged graph holding the manifest.
        query: Manifest query. Must project ``uri``, ``title`` and
            ``testAction``; ``description``, ``testResult`` and ``lh`` are
            optional.

    Returns:
        One entry per distinct test URI. Listed URIs that the query did not
        return (for instance tests missing mf:name or mf:action) are left out.
    """
    entries: dict[str, ManifestEntry] = {}

    for row in store.run_query(graph, query):
        uri = row.get("uri")
        if uri is None:
            continue
        entry = _entry_from_row(row)
        previous = entries.get(entry.uri)
        entries[entry.uri] = _combine(previous, entry) if previous else entry

    heads: list[str] = []
    for entry in entries.values():
        if entry.list_head is not None and entry.list_head not in heads:
            heads.append(entry.list_head)
    if not heads:
        return list(entries.values())

    ordered: list[ManifestEntry] = []
    seen: set[str] = set()
    for head in heads:
        for item in iter_rdf_list(graph, store.to_node(head)):
            key = store.node_id(item)
            if key in seen:
                continue
            seen.add(key)
            entry = entries.get(key)
            if entry is None:
                logger.debug("Listed test %s has no name or action, skipped", key)
                continue
            ordered.append(entry)
    return ordered


def _entry_from_row(row: dict[str, Node | None]) -> ManifestEntry:
    return ManifestEntry(
        uri=store.node_id(row["uri"]),
        title=_text(row.get("title")) or "",
        action=_text(row.get("testAction")) or "",
        description=_text(row.get("description")),
        result=_text(row.get("testResult")),
        list_head=_text(row.get("lh")),
    )


def _combine(previous: ManifestEntry, latest: ManifestEntry) -> ManifestEntry:
    """Later rows win field by field; unbound fields keep earlier values."""
    update = {
        name: value
        for name, value in latest.model_dump().items()
        if value not in (None, "")
    }
    return previous.model_copy(update=update)


def _text(node: Node | None) -> str | None:
    if node is None:
        return None
    return store.node_id(node)
