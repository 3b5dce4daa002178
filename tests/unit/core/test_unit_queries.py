# tests/unit/core/test_unit_queries.py — v1
"""Tests for core/queries.py — built-in queries and QuerySet."""

from __future__ import annotations

import dataclasses

import pytest
from rdflib.plugins.sparql import prepareQuery

from earlreport.core.queries import (
    ASSERTION_QUERY,
    DEFAULT_QUERIES,
    DOAP_QUERY,
    MANIFEST_QUERY,
    TEST_SUBJECT_QUERY,
    TURTLE_PREFIXES,
    QuerySet,
)


class TestBuiltinQueries:
    @pytest.mark.parametrize(
        "query", [MANIFEST_QUERY, TEST_SUBJECT_QUERY, DOAP_QUERY, ASSERTION_QUERY]
    )
    def test_queries_parse(self, query):
        prepareQuery(query)

    def test_manifest_projection(self):
        names = [str(v) for v in prepareQuery(MANIFEST_QUERY).algebra["PV"]]
        assert names == ["lh", "uri", "title", "description", "testAction", "testResult"]


class TestQuerySet:
    def test_defaults(self):
        assert DEFAULT_QUERIES.manifest == MANIFEST_QUERY
        assert DEFAULT_QUERIES.assertion == ASSERTION_QUERY

    def test_with_manifest_query(self):
        custom = DEFAULT_QUERIES.with_manifest_query("SELECT * WHERE { ?s ?p ?o }")
        assert custom.manifest == "SELECT * WHERE { ?s ?p ?o }"
        assert custom.doap == DOAP_QUERY
        assert DEFAULT_QUERIES.manifest == MANIFEST_QUERY

    def test_empty_override_is_noop(self):
        assert DEFAULT_QUERIES.with_manifest_query(None) is DEFAULT_QUERIES
        assert DEFAULT_QUERIES.with_manifest_query("") is DEFAULT_QUERIES

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            QuerySet().manifest = "x"  # type: ignore[misc]


class TestTurtlePrefixes:
    def test_prefix_order(self):
        assert list(TURTLE_PREFIXES) == [
            "dc", "doap", "earl", "foaf", "mf", "owl", "rdf", "rdfs", "xhv", "xsd",
        ]

    def test_namespaces(self):
        assert TURTLE_PREFIXES["dc"] == "http://purl.org/dc/terms/"
        assert TURTLE_PREFIXES["earl"] == "http://www.w3.org/ns/earl#"
