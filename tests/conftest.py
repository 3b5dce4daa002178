# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides small manifests, result graphs and DOAP descriptions in Turtle,
written to temp directories. No network access: remote loads are patched.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from rdflib import Graph

from earlreport.config.settings import Settings
from earlreport.logging.context import clear_context

PREFIXES = """
@prefix dc: <http://purl.org/dc/terms/> .
@prefix doap: <http://usefulinc.com/ns/doap#> .
@prefix earl: <http://www.w3.org/ns/earl#> .
@prefix foaf: <http://xmlns.com/foaf/0.1/> .
@prefix mf: <http://www.w3.org/2001/sw/DataAccess/tests/test-manifest#> .
@prefix rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
"""

T1 = "http://example.org/tests/manifest#t1"
T2 = "http://example.org/tests/manifest#t2"
T3 = "http://example.org/tests/manifest#t3"
S1 = "http://example.org/impl/alpha"
S2 = "http://example.org/impl/beta"
DEV = "http://example.org/people/ada"

# Unordered manifest: T1, T2, no mf:entries list
MANIFEST_UNORDERED = PREFIXES + f"""
<{T1}> mf:name "Test one"; rdfs:comment "First test";
  mf:action <http://example.org/tests/t1.in>; mf:result <http://example.org/tests/t1.out> .
<{T2}> mf:name "Test two"; mf:action <http://example.org/tests/t2.in> .
"""

# Ordered manifest: T3, T1, T2 via mf:entries; an extra unlisted-but-broken entry
MANIFEST_ORDERED = PREFIXES + f"""
<http://example.org/tests/manifest> a mf:Manifest;
  mf:entries ( <{T3}> <{T1}> <http://example.org/tests/manifest#broken> <{T2}> ) .
<{T1}> mf:name "Test one"; mf:action <http://example.org/tests/t1.in> .
<{T2}> mf:name "Test two"; mf:action <http://example.org/tests/t2.in> .
<{T3}> mf:name "Test three"; mf:action <http://example.org/tests/t3.in> .
<http://example.org/tests/manifest#broken> mf:name "No action" .
"""


def assertion_ttl(
    subject: str,
    test: str,
    outcome: str = "passed",
    mode: str | None = "automatic",
    by: str | None = "http://example.org/people/ada",
) -> str:
    """One earl:Assertion in Turtle."""
    lines = ["[ a earl:Assertion", f"  earl:subject <{subject}>", f"  earl:test <{test}>"]
    if by is not None:
        lines.append(f"  earl:assertedBy <{by}>")
    if mode is not None:
        lines.append(f"  earl:mode earl:{mode}")
    lines.append(f"  earl:result [ a earl:TestResult; earl:outcome earl:{outcome} ] ] .")
    return ";\n".join(lines) + "\n"


def doap_ttl(subject: str, name: str, developer: str | None = None) -> str:
    """DOAP description of a test subject."""
    body = f'<{subject}> a doap:Project; doap:name "{name}"; ' \
        f'doap:homepage <{subject}/home>; doap:programming-language "Python"'
    if developer:
        body += f"; doap:developer <{developer}>"
    return body + " .\n"


def make_graph(ttl: str) -> Graph:
    graph = Graph()
    graph.parse(data=ttl, format="turtle")
    return graph


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def write_ttl(tmp_path: Path):
    """Write Turtle text to a file under tmp_path and return its path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def unordered_manifest(write_ttl) -> Path:
    return write_ttl("manifest.ttl", MANIFEST_UNORDERED)


@pytest.fixture
def ordered_manifest(write_ttl) -> Path:
    return write_ttl("manifest-ordered.ttl", MANIFEST_ORDERED)


@pytest.fixture
def alpha_report(write_ttl) -> Path:
    """Report for S1: T1 passed, with an inline DOAP description."""
    return write_ttl(
        "alpha.ttl",
        PREFIXES
        + doap_ttl(S1, "Alpha", developer=DEV)
        + f'<{DEV}> a foaf:Person; foaf:name "Ada"; foaf:homepage <http://example.org/ada> .\n'
        + assertion_ttl(S1, T1, "passed"),
    )


@pytest.fixture
def beta_report(write_ttl) -> Path:
    """Report for S2 (no DOAP description): T1 failed, T2 passed."""
    return write_ttl(
        "beta.ttl",
        PREFIXES
        + assertion_ttl(S2, T1, "failed", mode="manual", by=None)
        + assertion_ttl(S2, T2, "passed"),
    )
