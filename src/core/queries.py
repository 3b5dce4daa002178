# src/core/queries.py — v1
"""Built-in SPARQL queries and the vocabularies they use.

Each query is a named constant. ``QuerySet`` bundles them so that the
resolver, the manifest extractor and the matrix builder receive their
queries at construction instead of reading module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from rdflib import Namespace
from rdflib.namespace import DCTERMS, DOAP, FOAF, OWL, RDF, RDFS, XSD

EARL = Namespace("http://www.w3.org/ns/earl#")
MF = Namespace("http://www.w3.org/2001/sw/DataAccess/tests/test-manifest#")
XHV = Namespace("http://www.w3.org/1999/xhtml/vocab#")

# Prefixes written at the top of Turtle output, in output order
TURTLE_PREFIXES: dict[str, str] = {
    "dc": str(DCTERMS),
    "doap": str(DOAP),
    "earl": str(EARL),
    "foaf": str(FOAF),
    "mf": str(MF),
    "owl": str(OWL),
    "rdf": str(RDF),
    "rdfs": str(RDFS),
    "xhv": str(XHV),
    "xsd": str(XSD),
}

MANIFEST_QUERY = """
PREFIX dc: <http://purl.org/dc/terms/>
PREFIX mf: <http://www.w3.org/2001/sw/DataAccess/tests/test-manifest#>
PREFIX rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#>
PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>

SELECT ?lh ?uri ?title ?description ?testAction ?testResult
WHERE {
  ?uri mf:name ?title; mf:action ?testAction.
  OPTIONAL { ?uri rdfs:comment ?description. }
  OPTIONAL { ?uri mf:result ?testResult. }
  OPTIONAL { [ mf:entries ?lh] . ?lh rdf:first ?uri . }
}
"""

TEST_SUBJECT_QUERY = """
PREFIX doap: <http://usefulinc.com/ns/doap#>
PREFIX foaf: <http://xmlns.com/foaf/0.1/>

SELECT DISTINCT ?uri ?name ?doapDesc ?homepage ?language ?developer ?devName ?devType ?devHomepage
WHERE {
  ?uri a doap:Project; doap:name ?name .
  OPTIONAL { ?uri doap:homepage ?homepage . }
  OPTIONAL { ?uri doap:description ?doapDesc . }
  OPTIONAL { ?uri doap:programming-language ?language . }
  OPTIONAL {
    ?uri doap:developer ?developer .
    OPTIONAL { ?developer foaf:name ?devName . }
    OPTIONAL { ?developer a ?devType . }
    OPTIONAL { ?developer foaf:homepage ?devHomepage . }
  }
}
"""

DOAP_QUERY = """
PREFIX earl: <http://www.w3.org/ns/earl#>
PREFIX doap: <http://usefulinc.com/ns/doap#>

SELECT DISTINCT ?subject ?name
WHERE {
  [ a earl:Assertion; earl:subject ?subject ] .
  OPTIONAL {
    ?subject a doap:Project; doap:name ?name
  }
}
"""

# assertedBy and mode are optional in EARL; outcome, subject and test are not
ASSERTION_QUERY = """
PREFIX earl: <http://www.w3.org/ns/earl#>

SELECT ?by ?mode ?outcome ?subject ?test
WHERE {
  ?assertion a earl:Assertion;
    earl:result [earl:outcome ?outcome];
    earl:subject ?subject;
    earl:test ?test .
  OPTIONAL { ?assertion earl:assertedBy ?by . }
  OPTIONAL { ?assertion earl:mode ?mode . }
}
ORDER BY ?subject
"""


@dataclass(frozen=True)
class QuerySet:
    """The four queries a consolidation run executes."""

    manifest: str = MANIFEST_QUERY
    test_subject: str = TEST_SUBJECT_QUERY
    doap: str = DOAP_QUERY
    assertion: str = ASSERTION_QUERY

    def with_manifest_query(self, query: str | None) -> QuerySet:
        """Return a copy using ``query`` for manifest extraction."""
        if not query:
            return self
        return replace(self, manifest=query)


DEFAULT_QUERIES = QuerySet()
