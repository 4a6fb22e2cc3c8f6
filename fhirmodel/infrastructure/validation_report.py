"""Validation Report Generator.

Summarizes the findings of a validation run across one or more documents:
counts by severity and by kind, per-record findings, and failed documents.
Reports can be saved as JSON for later review.
"""

import json
import logging
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console
from rich.table import Table

from fhirmodel.domain.ports import Result, Violation

logger = logging.getLogger(__name__)


def build_validation_report(
    results: Iterable[tuple[str, Result, list[Violation]]],
    output_path: Optional[str] = None,
) -> Result[dict]:
    """Build a validation report.

    Parameters:
        results: ``(source, read result, violations)`` per document; violations
            are empty for documents that failed to parse
        output_path: Optional path to save the report as JSON

    Returns:
        Result[dict]: Report dictionary, with ``saved_to`` when written to disk
    """
    by_severity: Counter = Counter()
    by_kind: Counter = Counter()
    records = []
    failures = []

    for source, result, violations in results:
        if result.is_failure():
            failures.append({
                "source": source,
                "error": result.error,
                "error_type": result.error_type,
                **(result.error_details or {}),
            })
            continue
        record = result.value
        for violation in violations:
            by_severity[violation.severity.value] += 1
            by_kind[violation.kind.value] += 1
        records.append({
            "source": source,
            "resource_type": record.type_name,
            "id": getattr(record, "id", None),
            "fingerprint": record.fingerprint(),
            "violations": [violation.model_dump(mode="json") for violation in violations],
        })

    report = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "summary": {
            "records": len(records),
            "failed_documents": len(failures),
            "records_with_errors": sum(
                1 for record in records
                if any(v["severity"] == "error" for v in record["violations"])
            ),
            "by_severity": dict(by_severity),
            "by_kind": dict(by_kind),
        },
        "records": records,
        "failures": failures,
    }

    if output_path:
        try:
            output_file = Path(output_path)
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with open(output_file, 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2, default=str)
            logger.info(f"Validation report saved to {output_file}")
            return Result.success_result({**report, "saved_to": str(output_file)})
        except OSError as e:
            return Result.failure_result(
                ValueError(f"Failed to save report to {output_path}: {str(e)}"),
                error_type="ValueError"
            )

    return Result.success_result(report)


def print_validation_report_summary(report: dict, console: Optional[Console] = None) -> None:
    """Print a human-readable summary of a validation report."""
    console = console or Console()
    summary = report.get("summary", {})

    table = Table(title="Validation Summary", show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Records", str(summary.get("records", 0)))
    table.add_row("Records with errors", str(summary.get("records_with_errors", 0)))
    table.add_row("Failed documents", str(summary.get("failed_documents", 0)))
    for severity in ("error", "warning", "information"):
        table.add_row(f"Findings ({severity})", str(summary.get("by_severity", {}).get(severity, 0)))
    console.print(table)

    if report.get("saved_to"):
        console.print(f"Report saved to [bold]{report['saved_to']}[/bold]")
