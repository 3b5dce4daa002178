# src/graph/store.py — v1
"""Graph store adapter — thin layer over rdflib.

Loads serialized graphs from paths or URIs, merges graphs, runs SPARQL
queries and dumps graphs. Everything above this module talks to rdflib only
through these functions.
"""

from __future__ import annotations

import http.client
import logging
import urllib.error
import urllib.request
from pathlib import Path
from typing import Iterator
from urllib.parse import urlparse

from rdflib import BNode, Graph, URIRef
from rdflib.term import Node
from rdflib.util import guess_format

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

ACCEPT_HEADER = (
    "text/turtle, application/ld+json;q=0.9, application/rdf+xml;q=0.8, "
    "application/n-triples;q=0.7, application/n-quads;q=0.6, "
    "application/trig;q=0.6, */*;q=0.1"
)

# Media type -> rdflib parser name
_CONTENT_TYPES: dict[str, str] = {
    "text/turtle": "turtle",
    "application/x-turtle": "turtle",
    "application/ld+json": "json-ld",
    "application/json": "json-ld",
    "application/rdf+xml": "xml",
    "application/xml": "xml",
    "text/xml": "xml",
    "application/n-triples": "nt",
    "application/n-quads": "nquads",
    "application/trig": "trig",
    "text/n3": "n3",
}

_REMOTE_SCHEMES = ("http", "https", "file")


class LoadError(Exception):
    """Raised when a source cannot be fetched or parsed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Cannot load {source}: {reason}")
        self.source = source
        self.reason = reason


def load_graph(
    source: str | Path,
    base: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Graph:
    """Parse a serialized graph from a filesystem path or URI.

    Args:
        source: Path, or http/https/file URI.
        base: Base URI for resolving relative references (defaults to the
            source location).
        timeout: Seconds to wait for a remote source.

    Returns:
        A new graph holding the parsed triples.

    Raises:
        LoadError: If the source is unreachable or unparsable.
    """
    location = str(source)
    if urlparse(location).scheme in _REMOTE_SCHEMES:
        return _load_remote(location, base, timeout)
    return _load_file(Path(location), base)


def _load_file(path: Path, base: str | None) -> Graph:
    if not path.is_file():
        raise LoadError(str(path), "no such file")
    fmt = guess_format(str(path)) or "turtle"
    graph = Graph()
    try:
        graph.parse(source=str(path), format=fmt, publicID=base)
    except Exception as exc:
        raise LoadError(str(path), f"{type(exc).__name__}: {exc}") from exc
    return graph


def _load_remote(url: str, base: str | None, timeout: float) -> Graph:
    logger.debug("Fetching %s (timeout %.1fs)", url, timeout)
    request = urllib.request.Request(url, headers={"Accept": ACCEPT_HEADER})
    try:
        with urllib.request.urlopen(request, timeout=timeout) as resp:
            payload = resp.read()
            content_type = resp.headers.get_content_type() if resp.headers else ""
            final_url = resp.geturl() or url
    except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as exc:
        raise LoadError(url, f"{type(exc).__name__}: {exc}") from exc

    fmt = _format_for(content_type, final_url)
    graph = Graph()
    try:
        graph.parse(data=payload, format=fmt, publicID=base or final_url)
    except Exception as exc:
        raise LoadError(url, f"{type(exc).__name__}: {exc}") from exc
    return graph


def _format_for(content_type: str | None, location: str) -> str:
    """Pick a parser from the media type, then the extension, then Turtle."""
    if content_type:
        fmt = _CONTENT_TYPES.get(content_type.lower())
        if fmt is not None:
            return fmt
    return guess_format(urlparse(location).path) or "turtle"


def merge_graph(graph: Graph, other: Graph) -> int:
    """Add every triple of ``other`` to ``graph``.

    Returns:
        Number of triples gained. Re-merging the same graph gains nothing.
    """
    before = len(graph)
    for triple in other:
        graph.add(triple)
    return len(graph) - before


def run_query(graph: Graph, query: str) -> Iterator[dict[str, Node | None]]:
    """Execute a SPARQL SELECT and yield one mapping per solution.

    Every projected variable is present in each mapping; unbound variables
    map to None. The iterator is consumed once.
    """
    result = graph.query(query)
    names = [str(var) for var in result.vars or []]
    for row in result:
        yield {name: row[index] for index, name in enumerate(names)}


def dump_graph(graph: Graph, fmt: str) -> str:
    """Serialize the whole graph with any rdflib serializer."""
    return graph.serialize(format=fmt)


def node_id(node: Node) -> str:
    """Identifier string for a node: the URI, or ``_:label`` for blank nodes."""
    if isinstance(node, BNode):
        return f"_:{node}"
    return str(node)


def to_node(identifier: str) -> Node:
    """Inverse of ``node_id``: ``_:label`` gives a blank node, anything else a URI."""
    if identifier.startswith("_:"):
        return BNode(identifier[2:])
    return URIRef(identifier)
