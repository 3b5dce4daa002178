# tests/unit/report/test_unit_manifest_extractor.py — v1
"""Tests for report/manifest_extractor.py — test enumeration and ordering."""

from __future__ import annotations

from rdflib import URIRef

from conftest import MANIFEST_ORDERED, MANIFEST_UNORDERED, PREFIXES, T1, T2, T3, make_graph
from earlreport.core.queries import MANIFEST_QUERY, MF
from earlreport.graph.store import node_id
from earlreport.report.manifest_extractor import extract_test_cases


class TestUnorderedManifest:
    def test_returns_each_test_once(self):
        entries = extract_test_cases(make_graph(MANIFEST_UNORDERED), MANIFEST_QUERY)
        assert sorted(e.uri for e in entries) == [T1, T2]

    def test_optional_fields(self):
        entries = {e.uri: e for e in extract_test_cases(make_graph(MANIFEST_UNORDERED), MANIFEST_QUERY)}
        assert entries[T1].title == "Test one"
        assert entries[T1].description == "First test"
        assert entries[T1].action == "http://example.org/tests/t1.in"
        assert entries[T1].result == "http://example.org/tests/t1.out"
        assert entries[T2].description is None
        assert entries[T2].result is None
        assert entries[T2].list_head is None

    def test_duplicate_rows_collapse(self):
        ttl = MANIFEST_UNORDERED + f'<{T1}> rdfs:comment "Another comment" .\n'
        entries = extract_test_cases(make_graph(ttl), MANIFEST_QUERY)
        assert [e.uri for e in entries].count(T1) == 1

    def test_empty_graph(self):
        assert extract_test_cases(make_graph(PREFIXES), MANIFEST_QUERY) == []


class TestOrderedManifest:
    def test_list_order_is_kept(self):
        entries = extract_test_cases(make_graph(MANIFEST_ORDERED), MANIFEST_QUERY)
        assert [e.uri for e in entries] == [T3, T1, T2]

    def test_list_head_recorded(self):
        entries = extract_test_cases(make_graph(MANIFEST_ORDERED), MANIFEST_QUERY)
        assert entries[0].list_head is not None

    def test_list_head_names_the_entries_list(self):
        graph = make_graph(MANIFEST_ORDERED)
        (head,) = graph.objects(URIRef("http://example.org/tests/manifest"), MF.entries)
        entries = extract_test_cases(graph, MANIFEST_QUERY)
        assert entries[0].list_head == node_id(head)
        assert all(e.list_head is None for e in entries[1:])

    def test_two_manifests_keep_their_own_order(self):
        ttl = PREFIXES + f"""
<http://example.org/m1> mf:entries ( <{T3}> <{T1}> ) .
<http://example.org/m2> mf:entries ( <{T2}> ) .
<{T1}> mf:name "one"; mf:action <http://example.org/1> .
<{T2}> mf:name "two"; mf:action <http://example.org/2> .
<{T3}> mf:name "three"; mf:action <http://example.org/3> .
"""
        uris = [e.uri for e in extract_test_cases(make_graph(ttl), MANIFEST_QUERY)]
        assert sorted(uris) == sorted([T1, T2, T3])
        assert uris.index(T3) < uris.index(T1)

    def test_unlisted_tests_are_dropped(self):
        ttl = MANIFEST_ORDERED + (
            '<http://example.org/tests/manifest#extra> mf:name "Extra"; '
            "mf:action <http://example.org/tests/extra.in> .\n"
        )
        entries = extract_test_cases(make_graph(ttl), MANIFEST_QUERY)
        assert [e.uri for e in entries] == [T3, T1, T2]

    def test_repeated_list_member_emitted_once(self):
        ttl = PREFIXES + f"""
<http://example.org/m> mf:entries ( <{T1}> <{T2}> <{T1}> ) .
<{T1}> mf:name "one"; mf:action <http://example.org/1> .
<{T2}> mf:name "two"; mf:action <http://example.org/2> .
"""
        entries = extract_test_cases(make_graph(ttl), MANIFEST_QUERY)
        assert [e.uri for e in entries] == [T1, T2]


class TestCustomQuery:
    def test_query_without_list_head(self):
        query = """
        PREFIX mf: <http://www.w3.org/2001/sw/DataAccess/tests/test-manifest#>
        SELECT ?uri ?title ?testAction WHERE { ?uri mf:name ?title; mf:action ?testAction . }
        """
        entries = extract_test_cases(make_graph(MANIFEST_ORDERED), query)
        assert sorted(e.uri for e in entries) == sorted([T1, T2, T3])
