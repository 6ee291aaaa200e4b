"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from normalization.assembler import pages_to_plain_text
from schemas.internal.documents import Document
from schemas.responses import ExtractResponse

OUTPUT_FORMATS = ("json", "text", "html")


def emit_json(data: Any) -> None:
    typer.echo(json_dumps(data))


def json_dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)


def read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON in {path}: {exc}") from exc


def check_format(value: str) -> str:
    normalized = value.strip().lower()
    if normalized not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"Unsupported format: {value} (json|text|html)")
    return normalized


def render_document(document: Document, output_format: str) -> str:
    """Render an assembled document in one of the CLI output formats."""
    if output_format == "text":
        return pages_to_plain_text(document.pages)
    if output_format == "html":
        return document.html or ""
    response = ExtractResponse.from_document(document)
    return json_dumps(response.model_dump(by_alias=True))


def write_or_echo(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    typer.echo(f"Wrote: {output}", err=True)
