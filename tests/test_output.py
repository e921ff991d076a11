"""
Tests for output formatters (to_json, to_markdown, to_summary).

These are fast tests - no geometry building required.
"""

import json
import pytest

from flugelhorn.calculator.output import to_json, to_markdown, to_summary
from flugelhorn.calculator.validation import (
    ValidationResult,
    ValidationMessage,
    Severity,
)
from flugelhorn.io.schema import SCHEMA_VERSION


@pytest.fixture
def valid_result():
    return ValidationResult(valid=True, messages=[])


@pytest.fixture
def failing_result():
    return ValidationResult(
        valid=False,
        messages=[
            ValidationMessage(
                severity=Severity.ERROR,
                code="WALL_TOO_THIN",
                message="Wall 0.50mm is below the 0.80mm minimum",
                suggestion="Increase wall_mm",
                part="main_slide",
            ),
            ValidationMessage(
                severity=Severity.WARNING,
                code="FEW_SLICES",
                message="Only 4 slices",
                part="leadpipe",
            ),
        ],
    )


class TestToJson:

    def test_schema_version(self, design):
        data = json.loads(to_json(design))
        assert data["schema_version"] == SCHEMA_VERSION
        assert data["name"] == "test_horn"

    def test_enums_as_strings(self, design):
        data = json.loads(to_json(design))
        assert data["tubes"][0]["bore"]["law"] == "linear"

    def test_no_validation_key_by_default(self, design):
        assert "validation" not in json.loads(to_json(design))

    def test_validation_included(self, design, failing_result):
        data = json.loads(to_json(design, validation=failing_result))
        assert data["validation"]["valid"] is False
        first = data["validation"]["messages"][0]
        assert first["severity"] == "error"
        assert first["code"] == "WALL_TOO_THIN"
        assert first["part"] == "main_slide"

    def test_indent(self, design):
        assert "\n    " in to_json(design, indent=4)


class TestToMarkdown:

    def test_title_and_table(self, design):
        md = to_markdown(design)
        assert md.startswith("# test_horn")
        assert "| Part | Type | Bore | Wall |" in md

    def test_every_part_listed(self, design):
        md = to_markdown(design)
        for name in design.part_names():
            assert f"| {name} |" in md

    def test_bores_in_inches(self, design):
        # 80mm rim
        assert '80.00mm (3.150")' in to_markdown(design)

    def test_bell_row_runs_rim_to_throat(self, design):
        assert '| bell | bell | 80.00mm (3.150") → 12.00mm (0.472") | 1.20mm |' in to_markdown(design)

    def test_piston_row(self, design):
        assert "| valve1_piston | piston | 1 passages | clearance 0.15mm |" in to_markdown(design)

    def test_validation_section(self, design, failing_result):
        md = to_markdown(design, validation=failing_result)
        assert "## Validation" in md
        assert "**ERROR** `WALL_TOO_THIN`" in md
        assert "  - Increase wall_mm" in md

    def test_validation_no_findings(self, design, valid_result):
        assert "No findings." in to_markdown(design, validation=valid_result)


class TestToSummary:

    def test_part_count(self, design):
        summary = to_summary(design)
        assert summary.splitlines()[0].startswith("test_horn: 6 part(s)")

    def test_valid_status(self, design, valid_result):
        assert "Validation: valid (0 error(s)" in to_summary(design, valid_result)

    def test_invalid_lists_findings(self, design, failing_result):
        summary = to_summary(design, failing_result)
        assert "INVALID" in summary
        assert "[error] WALL_TOO_THIN" in summary
        assert "[warning] FEW_SLICES" in summary
