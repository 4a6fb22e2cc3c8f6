"""Unit tests for validation report generation."""

import io
import json

from rich.console import Console

from fhirmodel.domain.ports import ParseError, Result
from fhirmodel.domain.resources import Claim
from fhirmodel.infrastructure.validation_report import (
    build_validation_report,
    print_validation_report_summary,
)


def _results(minimal_claim_tree):
    good = Claim.from_tree(minimal_claim_tree)
    bad_tree = dict(minimal_claim_tree, status="bogus")
    del bad_tree["use"]
    bad = Claim.from_tree(bad_tree)
    failure = Result.failure_result(
        ParseError("expected a single value", path="Claim.status"),
        error_details={"record_index": 2, "path": "Claim.status"},
    )
    return [
        ("claims.json", Result.success_result(good), good.validate()),
        ("claims.json", Result.success_result(bad), bad.validate()),
        ("claims.json", failure, []),
    ]


class TestBuildValidationReport:
    """Test report contents."""

    def test_summary(self, minimal_claim_tree):
        result = build_validation_report(_results(minimal_claim_tree))

        assert result.is_success()
        summary = result.value["summary"]
        assert summary["records"] == 2
        assert summary["failed_documents"] == 1
        assert summary["records_with_errors"] == 1
        assert summary["by_severity"] == {"error": 2}
        assert summary["by_kind"] == {"invalid-code": 1, "missing-required-field": 1}

    def test_records_and_failures(self, minimal_claim_tree):
        report = build_validation_report(_results(minimal_claim_tree)).value

        first = report["records"][0]
        assert first["resource_type"] == "Claim"
        assert first["id"] == "100150"
        assert first["violations"] == []
        assert len(first["fingerprint"]) == 64
        assert report["failures"][0]["error_type"] == "ParseError"
        assert report["failures"][0]["record_index"] == 2
        assert "saved_to" not in report

    def test_save(self, tmp_path, minimal_claim_tree):
        output = tmp_path / "reports" / "validation.json"

        result = build_validation_report(_results(minimal_claim_tree), output_path=str(output))

        assert result.value["saved_to"] == str(output)
        saved = json.loads(output.read_text(encoding="utf-8"))
        assert saved["summary"]["records"] == 2
        assert [v["path"] for v in saved["records"][1]["violations"]] == ["Claim.use", "Claim.status"]

    def test_save_failure(self, tmp_path, minimal_claim_tree):
        """Writing onto a directory returns a failure instead of raising."""
        result = build_validation_report(_results(minimal_claim_tree), output_path=str(tmp_path))

        assert result.is_failure()
        assert result.error_type == "ValueError"


class TestPrintValidationReportSummary:
    """Test console output."""

    def test_print(self, tmp_path, minimal_claim_tree):
        output = tmp_path / "validation.json"
        report = build_validation_report(_results(minimal_claim_tree), output_path=str(output)).value
        buffer = io.StringIO()

        print_validation_report_summary(report, console=Console(file=buffer, width=120))

        text = buffer.getvalue()
        assert "Validation Summary" in text
        assert "Failed documents" in text
        assert "Report saved to" in text
