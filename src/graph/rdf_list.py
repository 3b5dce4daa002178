# src/graph/rdf_list.py — v1
"""Walk an RDF collection (rdf:first / rdf:rest chain) held in a graph."""

from __future__ import annotations

import logging
from typing import Iterator

from rdflib import Graph
from rdflib.namespace import RDF
from rdflib.term import Node

logger = logging.getLogger(__name__)


def iter_rdf_list(graph: Graph, head: Node) -> Iterator[Node]:
    """Yield the members of the list starting at ``head``, in order.

    Stops at rdf:nil or at a cell without rdf:rest. Cells without rdf:first
    contribute nothing. The graph does not guarantee the chain is acyclic,
    so a revisited cell ends the walk.
    """
    visited: set[Node] = set()
    node: Node | None = head
    while node is not None and node != RDF.nil:
        if node in visited:
            logger.warning("RDF list starting at %s loops back to %s", head, node)
            return
        visited.add(node)
        item = graph.value(node, RDF.first)
        if item is not None:
            yield item
        node = graph.value(node, RDF.rest)
