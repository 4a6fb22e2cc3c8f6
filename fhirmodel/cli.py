"""Command Line Interface for fhirmodel.

This module provides a CLI using Typer for validating and converting FHIR
Claim, ClaimResponse and MedicationKnowledge documents, and for browsing the
type registry.

Commands:
    - validate: parse documents and report data-quality findings
    - convert: re-encode a document as JSON or XML
    - describe: show the fields of a registered type
    - types: list registered type names
    - info: show the active configuration
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fhirmodel.adapters.codecs import codec_for_path, get_codec
from fhirmodel.adapters.readers import get_reader
from fhirmodel.domain import registry
from fhirmodel.domain.enums import Severity
from fhirmodel.domain.ports import ModelError, Result
from fhirmodel.infrastructure.diagnostics_context import diagnostics_context
from fhirmodel.infrastructure.settings import settings
from fhirmodel.infrastructure.validation_report import (
    build_validation_report,
    print_validation_report_summary,
)

# Initialize Typer app and Rich console
app = typer.Typer(
    name="fhirmodel",
    help="fhirmodel: FHIR R4 Claim, ClaimResponse and MedicationKnowledge records",
    add_completion=False
)
console = Console()

_SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "dim",
}


def _print_violation(violation) -> None:
    style = _SEVERITY_STYLES[violation.severity]
    console.print(f"  [{style}]{violation.severity.value}[/{style}] {escape(violation.path)}: {escape(violation.message)}")


@app.command()
def validate(
    files: List[Path] = typer.Argument(..., help="JSON, NDJSON or XML files to validate", exists=True),
    report: Optional[Path] = typer.Option(None, "--report", "-r", help="Write a JSON validation report to this path"),
    save_report: bool = typer.Option(False, "--save-report", help="Write a timestamped report to the configured report directory"),
    strict: bool = typer.Option(False, "--strict", help="Treat warning findings as failures"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List every finding"),
) -> None:
    """Parse documents and check required fields and code bindings.

    Exits with status 1 when a document fails to parse or a record has an
    error finding (or, with --strict, a warning finding).

    Examples:
        fhirmodel validate claim.json
        fhirmodel validate bundle.ndjson claim.xml --report reports/run.json
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        console.print("[dim]Verbose logging enabled[/dim]")

    options = settings.parse_options()
    rows: list = []
    for path in files:
        try:
            reader = get_reader(path, options=options)
            results = list(reader.read(path))
        except ModelError as e:
            console.print(f"[red]✗[/red] {escape(str(path))}: {escape(str(e))}")
            rows.append((str(path), Result.failure_result(e, error_details={"source": str(path)}), []))
            continue

        for result in results:
            if result.is_failure():
                console.print(f"[red]✗[/red] {escape(str(path))}: {escape(result.error)}")
                rows.append((str(path), result, []))
                continue
            record = result.value
            violations = record.validate()
            rows.append((str(path), result, violations))
            errors = sum(1 for v in violations if v.is_fatal)
            mark = "[red]✗[/red]" if errors else "[green]✓[/green]"
            console.print(f"{mark} {escape(str(path))}: {record.type_name} ({len(violations)} finding(s))")
            if verbose:
                for violation in violations:
                    _print_violation(violation)

    if report is None and save_report:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report = Path(settings.config.report_dir) / f"validation_{stamp}.json"
    report_result = build_validation_report(rows, output_path=str(report) if report else None)
    if report_result.is_failure():
        console.print(f"[red]✗[/red] {escape(report_result.error)}")
        raise typer.Exit(code=1)
    console.print()
    print_validation_report_summary(report_result.value, console=console)

    failed_severities = {Severity.ERROR, Severity.WARNING} if strict else {Severity.ERROR}
    failed = any(
        result.is_failure() or any(v.severity in failed_severities for v in violations)
        for _, result, violations in rows
    )
    if failed:
        raise typer.Exit(code=1)


@app.command()
def convert(
    input_file: Path = typer.Argument(..., help="JSON or XML document", exists=True),
    to: str = typer.Option(..., "--to", "-t", help="Output format: json or xml"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file; prints to stdout if omitted"),
) -> None:
    """Convert a single resource document between FHIR JSON and FHIR XML.

    Examples:
        fhirmodel convert claim.json --to xml
        fhirmodel convert claim.xml --to json --output claim.json
    """
    config = settings.config
    try:
        reader_codec = codec_for_path(input_file)
        writer_codec = get_codec(to, **({"indent": config.json_indent} if to.lower() == "json" else {"pretty": config.xml_pretty}))
        with diagnostics_context() as diagnostics:
            record = reader_codec.loads(input_file.read_bytes(), options=config.parse_options())
        text = writer_codec.dumps(record)
    except ModelError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    for violation in diagnostics:
        _print_violation(violation)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")
        console.print(f"[green]✓[/green] Wrote {record.type_name} to {escape(str(output))}")
    else:
        typer.echo(text)


@app.command()
def describe(
    type_name: str = typer.Argument(..., help="Type name, e.g. Claim or Claim.Item.Detail"),
) -> None:
    """Show the fields of a registered type."""
    try:
        descriptors = registry.fields_of(type_name)
    except ModelError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    table = Table(title=type_name, show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan")
    table.add_column("Card.")
    table.add_column("Kind", style="green")
    table.add_column("Binding")
    for descriptor in descriptors:
        binding = ""
        if descriptor.binding is not None:
            binding = f"{descriptor.binding.strength.value} {descriptor.binding.url}"
        name = f"{descriptor.name} ({descriptor.display_name})" if descriptor.is_choice else descriptor.name
        table.add_row(escape(name), descriptor.cardinality, descriptor.kind, binding)
    console.print(table)


@app.command()
def types(
    resources: bool = typer.Option(False, "--resources", help="Only list resource types"),
) -> None:
    """List registered type names."""
    for name in registry.type_names(resources_only=resources):
        typer.echo(name)


@app.command()
def info() -> None:
    """Display version and configuration."""
    config = settings.config
    console.print("[bold blue]fhirmodel[/bold blue]\n")

    info_table = Table(show_header=False, box=None, padding=(0, 2))
    info_table.add_row("Application:", settings.app_name)
    info_table.add_row("Version:", settings.app_version)
    info_table.add_row("Unknown keys:", config.unknown_keys.value)
    info_table.add_row("Required fields:", config.required_fields.value)
    info_table.add_row("Log level:", config.log_level)
    info_table.add_row("JSON indent:", str(config.json_indent))
    info_table.add_row("XML pretty:", str(config.xml_pretty))
    info_table.add_row("Report directory:", config.report_dir)
    info_table.add_row("Resource types:", ", ".join(registry.type_names(resources_only=True)))

    console.print(info_table)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version information"),
) -> None:
    """fhirmodel: FHIR R4 record model."""
    if version:
        console.print(f"{settings.app_name} v{settings.app_version}")
        raise typer.Exit()

    try:
        level = settings.log_level
    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid configuration: {escape(str(e))}")
        raise typer.Exit(code=1)
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


if __name__ == "__main__":
    app()
