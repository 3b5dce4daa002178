# src/exporters/turtle_serializer.py — v1
"""Turtle serializer — hand-laid statement blocks.

Output layout: prefix preamble, the report node with its three ordered
lists (sources, subjects, tests), one block per test subject, then one block
per test case with its assertions inlined as blank nodes. It carries the
same statements as the JSON-LD record.
"""

from __future__ import annotations

from rdflib import Literal

from earlreport.core.models import Assertion, Developer, ReportModel, TestCase, TestSubject
from earlreport.core.queries import TURTLE_PREFIXES
from earlreport.exporters.base_serializer import BaseReportSerializer, escape_iri


class TurtleSerializer(BaseReportSerializer):
    """Render the report as Turtle."""

    @property
    def format_name(self) -> str:
        return "turtle"

    @property
    def file_extension(self) -> str:
        return ".ttl"

    def render(self, report: ReportModel) -> str:
        parts = [_preamble(), _report_block(report)]
        parts.append("#\n# Subject Definitions\n#\n")
        parts.extend(_subject_block(subject) for subject in report.subjects)
        parts.append("#\n# Test Case Definitions\n#\n")
        parts.extend(_test_case_block(test_case) for test_case in report.tests)
        return "".join(parts)


def _preamble() -> str:
    lines = [f"@prefix {prefix}: <{iri}> ." for prefix, iri in TURTLE_PREFIXES.items()]
    return "\n".join(lines) + "\n\n"


def _report_block(report: ReportModel) -> str:
    props: list[tuple[str, str]] = []
    if report.homepage:
        props.append(("doap:homepage", _resource(report.homepage)))
    if report.name is not None:
        props.append(("doap:name", _literal(report.name)))
    if report.bib_ref is not None:
        props.append(("dc:bibliographicCitation", _literal(report.bib_ref)))
    props.append(("earl:assertions", _list(_resource(s) for s in report.sources)))
    props.append(("earl:testSubjects", _list(_resource(s.id) for s in report.subjects)))
    props.append(("earl:tests", _list(_resource(tc.id) for tc in report.tests)))
    return _block("<>", ["earl:Software", "doap:Project"], props)


def _subject_block(subject: TestSubject) -> str:
    props: list[tuple[str, str]] = []
    if subject.name is not None:
        props.append(("doap:name", _literal(subject.name)))
    if subject.description is not None:
        props.append(("doap:description", _literal(subject.description)))
    if subject.homepage is not None:
        props.append(("doap:homepage", _resource(subject.homepage)))
    if subject.language is not None:
        props.append(("doap:programming-language", _literal(subject.language)))
    if subject.developers:
        refs = [_developer_ref(d) for d in subject.developers]
        props.append(("doap:developer", ",\n    ".join(refs)))
    res = _block(_resource(subject.id), ["earl:TestSubject", "doap:Project"], props)

    for developer in subject.developers:
        if developer.id is not None:
            res += _block(
                _resource(developer.id),
                [f"foaf:{developer.kind}"],
                _developer_props(developer),
            )
    return res


def _developer_ref(developer: Developer) -> str:
    if developer.id is not None:
        return _resource(developer.id)
    inner = [f"a foaf:{developer.kind}"]
    inner += [f"{p} {o}" for p, o in _developer_props(developer)]
    return "[ " + " ; ".join(inner) + " ]"


def _developer_props(developer: Developer) -> list[tuple[str, str]]:
    props: list[tuple[str, str]] = []
    if developer.name is not None:
        props.append(("foaf:name", _literal(developer.name)))
    if developer.homepage is not None:
        props.append(("foaf:homepage", _resource(developer.homepage)))
    return props


def _test_case_block(test_case: TestCase) -> str:
    props: list[tuple[str, str]] = [("dc:title", _literal(test_case.title))]
    if test_case.description is not None:
        props.append(("dc:description", _literal(test_case.description)))
    props.append(("mf:action", _resource(test_case.action)))
    if test_case.result is not None:
        props.append(("mf:result", _resource(test_case.result)))
    assertions = "".join(_assertion_node(a) for a in test_case.assertions)
    props.append(("earl:assertions", f"(\n{assertions}  )"))
    return _block(_resource(test_case.id), ["earl:TestCriterion", "earl:TestCase"], props)


def _assertion_node(assertion: Assertion) -> str:
    lines = ["    [ a earl:Assertion"]
    if assertion.asserted_by is not None:
        lines.append(f"      earl:assertedBy {_resource(assertion.asserted_by)}")
    lines.append(f"      earl:test {_resource(assertion.test)}")
    lines.append(f"      earl:subject {_resource(assertion.subject)}")
    lines.append(f"      earl:mode earl:{assertion.mode}")
    lines.append(
        f"      earl:result [ a earl:TestResult ; earl:outcome earl:{assertion.outcome} ] ]"
    )
    return " ;\n".join(lines) + "\n"


def _block(subject: str, types: list[str], props: list[tuple[str, str]]) -> str:
    lines = [f"{subject} a {', '.join(types)}"]
    lines += [f"  {predicate} {obj}" for predicate, obj in props]
    return " ;\n".join(lines) + " .\n\n"


def _list(items) -> str:
    members = list(items)
    if not members:
        return "( )"
    return "(\n    " + "\n    ".join(members) + "\n  )"


def _resource(value: str) -> str:
    """A blank node label as-is, anything else as an IRI reference."""
    if value.startswith("_:"):
        return value
    return f"<{escape_iri(value)}>"


def _literal(value: str) -> str:
    return Literal(value).n3()
