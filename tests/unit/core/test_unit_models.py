# tests/unit/core/test_unit_models.py — v1
"""Tests for core/models.py — shared Pydantic models.

Also covers version.py import validation.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

import earlreport
from earlreport.core.models import (
    DEFAULT_MODE,
    DEFAULT_OUTCOME,
    MODES,
    OUTCOMES,
    Assertion,
    Developer,
    ManifestEntry,
    ReportModel,
    TestCase,
    TestSubject,
)
from earlreport.version import __version__


# === VERSION ===


class TestVersion:
    def test_version_format(self):
        assert len(__version__.split(".")) == 3

    def test_package_exports_version(self):
        assert earlreport.__version__ == __version__


# === VOCABULARY ===


class TestVocabulary:
    def test_outcomes(self):
        assert set(OUTCOMES) == {"passed", "failed", "untested", "cantTell", "inapplicable"}
        assert DEFAULT_OUTCOME in OUTCOMES

    def test_modes(self):
        assert set(MODES) == {"automatic", "manual", "semiAuto"}
        assert DEFAULT_MODE == "automatic"


# === MODELS ===


class TestManifestEntry:
    def test_optional_fields(self):
        entry = ManifestEntry(uri="http://t/1", title="one", action="http://t/1.in")
        assert entry.description is None
        assert entry.result is None
        assert entry.list_head is None


class TestDeveloper:
    def test_defaults(self):
        dev = Developer()
        assert dev.id is None
        assert dev.kind == "Person"

    def test_invalid_kind(self):
        with pytest.raises(ValidationError):
            Developer(kind="Robot")


class TestAssertion:
    def test_defaults(self):
        a = Assertion(test="http://t/1", subject="http://s/1")
        assert a.outcome == "untested"
        assert a.mode == "automatic"
        assert a.asserted_by is None

    def test_invalid_outcome(self):
        with pytest.raises(ValidationError):
            Assertion(test="http://t/1", subject="http://s/1", outcome="pass")

    def test_invalid_mode(self):
        with pytest.raises(ValidationError):
            Assertion(test="http://t/1", subject="http://s/1", mode="heuristic")


class TestReportModel:
    def _report(self) -> ReportModel:
        subjects = [TestSubject(id="http://s/a"), TestSubject(id="http://s/b")]
        tests = [
            TestCase(
                id="http://t/1", title="one", action="http://t/1.in",
                assertions=[
                    Assertion(test="http://t/1", subject="http://s/a", outcome="passed"),
                    Assertion(test="http://t/1", subject="http://s/b", outcome="failed"),
                ],
            ),
            TestCase(
                id="http://t/2", title="two", action="http://t/2.in",
                assertions=[
                    Assertion(test="http://t/2", subject="http://s/a", outcome="passed",
                              mode="manual", asserted_by="http://p/1"),
                    Assertion(test="http://t/2", subject="http://s/b"),
                ],
            ),
        ]
        return ReportModel(subjects=subjects, tests=tests)

    def test_empty_defaults(self):
        report = ReportModel()
        assert report.name is None
        assert report.sources == []
        assert report.assertion_count() == 0
        assert report.outcome_totals() == {}

    def test_cells_in_test_order(self):
        cells = list(self._report().cells())
        assert cells[0] == ("http://s/a", "http://t/1", "passed", "automatic", None)
        assert cells[2] == ("http://s/a", "http://t/2", "passed", "manual", "http://p/1")
        assert len(cells) == 4

    def test_assertion_count(self):
        assert self._report().assertion_count() == 4

    def test_outcome_totals(self):
        totals = self._report().outcome_totals()
        assert totals["http://s/a"]["passed"] == 2
        assert totals["http://s/b"]["failed"] == 1
        assert totals["http://s/b"]["untested"] == 1
        assert set(totals["http://s/a"]) == set(OUTCOMES)

    def test_json_round_trip(self):
        report = self._report()
        assert ReportModel.model_validate_json(report.model_dump_json()) == report
