# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

from typing import Iterator, Literal

from pydantic import BaseModel, Field

Outcome = Literal["passed", "failed", "untested", "cantTell", "inapplicable"]
Mode = Literal["automatic", "manual", "semiAuto"]

OUTCOMES: tuple[str, ...] = ("passed", "failed", "untested", "cantTell", "inapplicable")
MODES: tuple[str, ...] = ("automatic", "manual", "semiAuto")

DEFAULT_OUTCOME: Outcome = "untested"
DEFAULT_MODE: Mode = "automatic"


# === MANIFEST ===


class ManifestEntry(BaseModel):
    """One test as recovered by the manifest extraction query."""

    uri: str
    title: str
    action: str
    description: str | None = None
    result: str | None = None
    list_head: str | None = None


# === TEST SUBJECTS ===


class Developer(BaseModel):
    """Person or organization credited on a test subject (FOAF)."""

    id: str | None = None  # None for anonymous nodes
    name: str | None = None
    homepage: str | None = None
    kind: Literal["Person", "Organization"] = "Person"


class TestSubject(BaseModel):
    """Software under test, described with DOAP."""

    __test__ = False  # not a pytest class

    id: str
    name: str | None = None
    description: str | None = None
    homepage: str | None = None
    language: str | None = None
    developers: list[Developer] = Field(default_factory=list)


# === MATRIX ===


class Assertion(BaseModel):
    """A single matrix cell: the outcome of one test for one subject."""

    test: str
    subject: str
    asserted_by: str | None = None
    mode: Mode = DEFAULT_MODE
    outcome: Outcome = DEFAULT_OUTCOME


class TestCase(BaseModel):
    """A manifest test with one assertion per roster subject."""

    __test__ = False

    id: str
    title: str
    action: str
    description: str | None = None
    result: str | None = None
    assertions: list[Assertion] = Field(default_factory=list)


class ReportModel(BaseModel):
    """Canonical rollup report: roster plus ordered, fully populated tests."""

    name: str | None = None
    bib_ref: str | None = None
    homepage: str | None = None
    sources: list[str] = Field(default_factory=list)
    subjects: list[TestSubject] = Field(default_factory=list)
    tests: list[TestCase] = Field(default_factory=list)

    def cells(self) -> Iterator[tuple[str, str, str, str, str | None]]:
        """Yield (subject, test, outcome, mode, asserted_by) for every cell."""
        for test_case in self.tests:
            for assertion in test_case.assertions:
                yield (
                    assertion.subject,
                    assertion.test,
                    assertion.outcome,
                    assertion.mode,
                    assertion.asserted_by,
                )

    def assertion_count(self) -> int:
        return sum(len(tc.assertions) for tc in self.tests)

    def outcome_totals(self) -> dict[str, dict[str, int]]:
        """Count outcomes per subject id, every outcome key present."""
        totals = {s.id: {o: 0 for o in OUTCOMES} for s in self.subjects}
        for subject, _test, outcome, _mode, _by in self.cells():
            totals.setdefault(subject, {o: 0 for o in OUTCOMES})[outcome] += 1
        return totals
