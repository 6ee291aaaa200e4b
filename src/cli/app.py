"""Typer CLI entrypoint for PDF extraction and export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from cli.commands import config as config_commands
from core.config import get_settings
from pdfextract import __version__

console = Console(stderr=True)

app = typer.Typer(
    help="PDF OCR extraction, normalization and Word export.",
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    add_completion=True,
)
app.add_typer(config_commands.app, name="config")


@app.callback()
def root(
    ctx: typer.Context,
    version_flag: bool = typer.Option(
        False,
        "-v",
        "--version",
        help="Show the installed version and exit.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: LOG_LEVEL or INFO)",
    ),
) -> None:
    if version_flag:
        typer.echo(__version__)
        raise typer.Exit()
    _configure_logging(log_level or get_settings().log_level)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command(help="Run OCR on a PDF and print the normalized document")
def extract(
    pdf_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        metavar="PDF",
    ),
    api_key: str = typer.Option(
        ...,
        "--api-key",
        envvar="MISTRAL_API_KEY",
        help="Provider API key",
    ),
    output_format: str = typer.Option(
        "json",
        "--format",
        help="Output format: json|text|html",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write to a file instead of stdout",
    ),
) -> None:
    from cli.common import check_format, render_document, write_or_echo
    from services.extraction import EmptyResultError, extract_document
    from services.providers import MistralOcrClient, ProviderError

    output_format = check_format(output_format)
    settings = get_settings()
    content = pdf_path.read_bytes()
    if len(content) > settings.max_upload_bytes:
        console.print(f"[red]PDF exceeds the {settings.max_upload_mb} MB limit.[/red]")
        raise typer.Exit(code=1)

    try:
        with console.status("Running OCR..."):
            document = extract_document(content, MistralOcrClient(api_key, settings=settings))
    except EmptyResultError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    except ProviderError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    write_or_echo(render_document(document, output_format), output)


@app.command(help="Normalize a saved OCR provider payload (JSON)")
def normalize(
    payload_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        metavar="PAYLOAD",
    ),
    output_format: str = typer.Option(
        "json",
        "--format",
        help="Output format: json|text|html",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write to a file instead of stdout",
    ),
) -> None:
    from cli.common import check_format, read_json, render_document, write_or_echo
    from services.extraction import EmptyResultError, normalize_payload

    output_format = check_format(output_format)
    try:
        document = normalize_payload(read_json(payload_path))
    except EmptyResultError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    write_or_echo(render_document(document, output_format), output)


@app.command("export", help="Export a normalized document to .doc or .docx")
def export_cmd(
    document_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        metavar="DOCUMENT",
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Target file",
    ),
    export_format: str = typer.Option(
        "doc",
        "--format",
        help="Export format: doc|docx",
    ),
    descriptions: bool = typer.Option(
        True,
        "--descriptions/--no-descriptions",
        help="Replace images with generated descriptions",
    ),
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        envvar="MISTRAL_API_KEY",
        help="Provider API key (needed for descriptions)",
    ),
) -> None:
    from pydantic import ValidationError

    from cli.common import read_json
    from schemas.requests import ExportRequest
    from services.export import NothingToExportError, export_document
    from services.providers import VisionDescriber

    if export_format not in ("doc", "docx"):
        raise typer.BadParameter(f"Unsupported format: {export_format} (doc|docx)")
    if descriptions and not api_key:
        raise typer.BadParameter("--api-key is required unless --no-descriptions is set")

    payload = read_json(document_path)
    if not isinstance(payload, dict):
        raise typer.BadParameter(f"{document_path} does not hold a document object")
    payload.update(disableDescriptions=not descriptions, format=export_format)
    try:
        request = ExportRequest.model_validate(payload)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    vision = VisionDescriber(api_key) if descriptions else None
    try:
        with console.status("Exporting..."):
            result = export_document(request, vision=vision)
    except NothingToExportError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.content)
    console.print(f"Wrote: {output}")


@app.command(help="Serve the HTTP API with uvicorn")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    import uvicorn

    uvicorn.run("api.main:app", host=host, port=port, reload=reload)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    app()


__all__ = ["app", "main"]
