# src/exporters/jsonld_serializer.py — v1
"""JSON-LD structured-record serializer.

The record is the compacted form of the rollup under a fixed context, so
the same document reads as plain JSON (for templates) and as RDF. It can
also be parsed back into a ReportModel to re-render an earlier run.
"""

from __future__ import annotations

import json
from typing import Any

from earlreport.core.models import (
    DEFAULT_MODE,
    DEFAULT_OUTCOME,
    Assertion,
    Developer,
    ReportModel,
    TestCase,
    TestSubject,
)
from earlreport.exporters.base_serializer import BaseReportSerializer, escape_iri

REPORT_CONTEXT: dict[str, Any] = {
    "@vocab": "http://www.w3.org/ns/earl#",
    "foaf:homepage": {"@type": "@id"},
    "dc": "http://purl.org/dc/terms/",
    "doap": "http://usefulinc.com/ns/doap#",
    "earl": "http://www.w3.org/ns/earl#",
    "mf": "http://www.w3.org/2001/sw/DataAccess/tests/test-manifest#",
    "foaf": "http://xmlns.com/foaf/0.1/",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "assertedBy": {"@type": "@id"},
    "assertions": {"@type": "@id", "@container": "@list"},
    "bibRef": {"@id": "dc:bibliographicCitation"},
    "description": {"@id": "dc:description"},
    "developer": {"@id": "doap:developer", "@type": "@id", "@container": "@set"},
    "doapDesc": {"@id": "doap:description"},
    "homepage": {"@id": "doap:homepage", "@type": "@id"},
    "label": {"@id": "rdfs:label"},
    "language": {"@id": "doap:programming-language"},
    "mode": {"@type": "@id"},
    "name": {"@id": "doap:name"},
    "outcome": {"@type": "@id"},
    "subject": {"@type": "@id"},
    "test": {"@type": "@id"},
    "testAction": {"@id": "mf:action", "@type": "@id"},
    "testResult": {"@id": "mf:result", "@type": "@id"},
    "tests": {"@type": "@id", "@container": "@list"},
    "testSubjects": {"@type": "@id", "@container": "@list"},
    "title": {"@id": "dc:title"},
}

REPORT_TYPES = ["earl:Software", "doap:Project"]
SUBJECT_TYPES = ["earl:TestSubject", "doap:Project"]
TEST_CASE_TYPES = ["earl:TestCriterion", "earl:TestCase"]


class JsonLdSerializer(BaseReportSerializer):
    """Render the report as a context-qualified JSON-LD record."""

    def __init__(self, indent: int = 2) -> None:
        self._indent = indent

    @property
    def format_name(self) -> str:
        return "jsonld"

    @property
    def file_extension(self) -> str:
        return ".jsonld"

    def render(self, report: ReportModel) -> str:
        return json.dumps(report_to_record(report), indent=self._indent, ensure_ascii=False)


# === MODEL -> RECORD ===


def report_to_record(report: ReportModel) -> dict[str, Any]:
    """Project the report model onto the structured record."""
    record: dict[str, Any] = {
        "@context": REPORT_CONTEXT,
        "@id": "",
        "@type": list(REPORT_TYPES),
        "assertions": [escape_iri(s) for s in report.sources],
        "name": report.name,
        "bibRef": report.bib_ref,
    }
    if report.homepage:
        record["homepage"] = escape_iri(report.homepage)
    record["testSubjects"] = [_subject_record(s) for s in report.subjects]
    record["tests"] = [_test_case_record(tc) for tc in report.tests]
    return record


def _subject_record(subject: TestSubject) -> dict[str, Any]:
    rec: dict[str, Any] = {"@id": escape_iri(subject.id), "@type": list(SUBJECT_TYPES)}
    if subject.name is not None:
        rec["name"] = subject.name
    if subject.developers:
        rec["developer"] = [_developer_record(d) for d in subject.developers]
    if subject.description is not None:
        rec["doapDesc"] = subject.description
    if subject.homepage is not None:
        rec["homepage"] = escape_iri(subject.homepage)
    if subject.language is not None:
        rec["language"] = subject.language
    return rec


def _developer_record(developer: Developer) -> dict[str, Any]:
    rec: dict[str, Any] = {"@type": f"foaf:{developer.kind}"}
    if developer.id is not None:
        rec["@id"] = escape_iri(developer.id)
    if developer.name is not None:
        rec["foaf:name"] = developer.name
    if developer.homepage is not None:
        rec["foaf:homepage"] = escape_iri(developer.homepage)
    return rec


def _test_case_record(test_case: TestCase) -> dict[str, Any]:
    rec: dict[str, Any] = {
        "@id": escape_iri(test_case.id),
        "@type": list(TEST_CASE_TYPES),
        "title": test_case.title,
    }
    if test_case.description is not None:
        rec["description"] = test_case.description
    rec["testAction"] = escape_iri(test_case.action)
    if test_case.result is not None:
        rec["testResult"] = escape_iri(test_case.result)
    rec["assertions"] = [_assertion_record(a) for a in test_case.assertions]
    return rec


def _assertion_record(assertion: Assertion) -> dict[str, Any]:
    rec: dict[str, Any] = {
        "@type": "earl:Assertion",
        "test": escape_iri(assertion.test),
        "subject": escape_iri(assertion.subject),
    }
    if assertion.asserted_by is not None:
        rec["assertedBy"] = escape_iri(assertion.asserted_by)
    rec["mode"] = f"earl:{assertion.mode}"
    rec["result"] = {"@type": "earl:TestResult", "outcome": f"earl:{assertion.outcome}"}
    return rec


# === RECORD -> MODEL ===


def record_to_report(record: dict[str, Any]) -> ReportModel:
    """Rebuild a ReportModel from a record written by ``report_to_record``.

    Raises:
        ValueError: If the record has no test list.
    """
    if "tests" not in record:
        raise ValueError("Not an EARL report record: missing 'tests'")
    return ReportModel(
        name=record.get("name"),
        bib_ref=record.get("bibRef"),
        homepage=record.get("homepage"),
        sources=list(record.get("assertions") or []),
        subjects=[_subject_from(rec) for rec in record.get("testSubjects") or []],
        tests=[_test_case_from(rec) for rec in record["tests"]],
    )


def _subject_from(rec: dict[str, Any]) -> TestSubject:
    developers = rec.get("developer") or []
    if isinstance(developers, dict):
        developers = [developers]
    return TestSubject(
        id=rec["@id"],
        name=rec.get("name"),
        description=rec.get("doapDesc"),
        homepage=rec.get("homepage"),
        language=rec.get("language"),
        developers=[_developer_from(d) for d in developers],
    )


def _developer_from(rec: dict[str, Any]) -> Developer:
    types = rec.get("@type") or []
    if isinstance(types, str):
        types = [types]
    kind = "Organization" if any(t.endswith("Organization") for t in types) else "Person"
    return Developer(
        id=rec.get("@id"),
        name=rec.get("foaf:name"),
        homepage=rec.get("foaf:homepage"),
        kind=kind,
    )


def _test_case_from(rec: dict[str, Any]) -> TestCase:
    return TestCase(
        id=rec["@id"],
        title=rec.get("title", ""),
        action=rec.get("testAction", ""),
        description=rec.get("description"),
        result=rec.get("testResult"),
        assertions=[_assertion_from(a, rec["@id"]) for a in rec.get("assertions") or []],
    )


def _assertion_from(rec: dict[str, Any], test_id: str) -> Assertion:
    result = rec.get("result") or {}
    return Assertion(
        test=rec.get("test", test_id),
        subject=rec["subject"],
        asserted_by=rec.get("assertedBy"),
        mode=_strip_prefix(rec.get("mode")) or DEFAULT_MODE,
        outcome=_strip_prefix(result.get("outcome")) or DEFAULT_OUTCOME,
    )


def _strip_prefix(value: str | None) -> str | None:
    if not value:
        return None
    return value.rsplit(":", 1)[-1].rsplit("#", 1)[-1]
