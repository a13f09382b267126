import logging
import platform
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mapping_validator.datamodel.document import DocumentFormat
from mapping_validator.datamodel.responses import EntityMappingResult
from mapping_validator.mapping.orchestrator import validate_mapping
from mapping_validator.mapping.shape_parser import parse_target_fields
from mapping_validator.settings import mapping_validator_settings

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(no_args_is_help=True, rich_markup_mode="rich")


def _read_text(path: Path) -> str:
    if not path.is_file():
        err_console.print(f"[red]File not found:[/] {path}")
        raise typer.Exit(code=2)
    return path.read_text(encoding="utf-8-sig")


def _render_report(report: EntityMappingResult) -> None:
    if report.error_message:
        err_console.print(f"[red]Validation aborted:[/] {escape(report.error_message)}")
        return

    table = Table(title="Field mapping")
    table.add_column("Property")
    table.add_column("Type")
    table.add_column("Source")
    table.add_column("Kind")
    table.add_column("Value")
    table.add_column("Result")
    for item in report.fields:
        table.add_row(
            escape(item.property_name),
            escape(item.property_type),
            escape(item.matched_source_name or "-"),
            item.source_value_kind or "-",
            escape(item.source_value_preview or ""),
            "[green]ok[/]" if item.success else f"[red]{escape(item.reason or '')}[/]",
        )
    console.print(table)
    console.print(
        f"{report.success_count}/{report.total_fields} fields matched, "
        f"{report.failed_count} failed"
    )


@app.command()
def validate(
    document: Annotated[
        Path,
        typer.Argument(help="JSON or XML document to validate."),
    ],
    class_file: Annotated[
        Path,
        typer.Argument(
            help="Class definition with 'public <type> <name> { get; set; }' properties."
        ),
    ],
    document_format: Annotated[
        Optional[DocumentFormat],
        typer.Option(
            "--format",
            help="Document format. Defaults to the document file extension.",
        ),
    ] = None,
    collection: Annotated[
        bool,
        typer.Option(help="The root is a list; validate its first element."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the report as JSON."),
    ] = False,
) -> None:
    logging.basicConfig(level=mapping_validator_settings.log_level.upper())

    if document_format is None:
        is_xml = document.suffix.lower() == ".xml"
        document_format = DocumentFormat.XML if is_xml else DocumentFormat.JSON

    report = validate_mapping(
        _read_text(document),
        parse_target_fields(_read_text(class_file)),
        document_format=document_format,
        collection=collection,
    )

    if json_output:
        console.print_json(report.model_dump_json())
    else:
        _render_report(report)

    if not report.success:
        raise typer.Exit(code=1)


@app.command()
def run(
    host: Annotated[
        str,
        typer.Option(help="Host to bind the HTTP server."),
    ] = mapping_validator_settings.host,
    port: Annotated[
        int,
        typer.Option(help="Port to bind the HTTP server."),
    ] = mapping_validator_settings.port,
    reload: Annotated[
        bool,
        typer.Option(help="Reload the server on code changes."),
    ] = mapping_validator_settings.reload,
) -> None:
    from uvicorn import run as uvicorn_run

    console.print("Starting Mapping Validator 🚀")
    console.print(f"Listening on [bold]{host}:{port}[/]")
    uvicorn_run(
        "mapping_validator.app:app",
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def version() -> None:
    console.print(
        f"Python: {platform.python_version()} ({sys.implementation.cache_tag})"
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
