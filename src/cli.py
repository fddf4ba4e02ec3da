"""CLI interface for pagecraft's local document store."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from pagecraft.config import PagecraftConfig, load_config, merge_cli_overrides
from pagecraft.content.models import ContentDocument, DocumentStatus, Locale
from pagecraft.content.render import render_document
from pagecraft.content.schemas import get_schema, schema_names
from pagecraft.editor.services import Editor
from pagecraft.errors import PagecraftError, PersistenceError, ValidationIssue
from pagecraft.persistence.local import JsonFileAdapter

app = typer.Typer(
    name="pagecraft",
    help="Inspect, edit, validate and publish bilingual content documents.",
)

console = Console()

_state: dict[str, PagecraftConfig] = {}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from pagecraft import __version__

        console.print(f"pagecraft {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .pagecraft.toml file."),
    ] = None,
    store: Annotated[
        Optional[Path],
        typer.Option("--store", "-s", help="Directory holding the document store."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging.")] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """pagecraft - bilingual content documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    cfg = load_config(config)
    _state["config"] = merge_cli_overrides(cfg, store_dir=str(store) if store else None)


def _config() -> PagecraftConfig:
    return _state.get("config") or load_config()


def _store() -> JsonFileAdapter:
    return JsonFileAdapter(Path(_config().store.directory))


def _require(store: JsonFileAdapter, document_id: str) -> ContentDocument:
    document = store.get(document_id)
    if document is None:
        console.print(f"[red]No document {document_id!r} in {store.path}[/red]")
        raise typer.Exit(1)
    return document


def _open_editor(store: JsonFileAdapter, document: ContentDocument) -> Editor:
    try:
        schema = get_schema(document.schema_name)
    except PagecraftError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    return Editor(store, schema, document, settings=_config().editor)


async def _apply_and_save(editor: Editor, patch: dict[str, object]) -> list[ValidationIssue]:
    # Edits arm the autosave timer, which needs a running loop.
    editor.session.apply(patch)
    return await editor.save()


def _print_issues(issues: list[ValidationIssue]) -> None:
    table = Table(title=f"{len(issues)} issue(s)")
    table.add_column("Code", style="yellow")
    table.add_column("Message")
    for issue in issues:
        table.add_row(issue.code.value, issue.message)
    console.print(table)


@app.command()
def schemas() -> None:
    """List the built-in document schemas."""
    table = Table(title="Schemas")
    table.add_column("Name", style="cyan")
    table.add_column("Resource")
    table.add_column("Placements")
    table.add_column("Lists")
    for name in schema_names():
        schema = get_schema(name)
        table.add_row(name, schema.resource, ", ".join(schema.placements), ", ".join(schema.lists))
    console.print(table)


@app.command("list")
def list_cmd(
    schema_name: Annotated[
        Optional[str], typer.Option("--schema", help="Only documents of this schema.")
    ] = None,
    status: Annotated[
        Optional[DocumentStatus], typer.Option("--status", help="Only draft or published.")
    ] = None,
) -> None:
    """List stored documents."""
    documents = _store().list(schema_name=schema_name, status=status)
    if not documents:
        console.print("[yellow]No documents found[/yellow]")
        return
    table = Table(title="Documents")
    table.add_column("ID", style="cyan")
    table.add_column("Schema")
    table.add_column("Status")
    for document in documents:
        color = "green" if document.is_published else "yellow"
        table.add_row(document.id, document.schema_name, f"[{color}]{document.status.value}[/{color}]")
    console.print(table)


@app.command()
def init(
    schema_name: Annotated[str, typer.Argument(help="Schema to create a document for.")],
    document_id: Annotated[
        Optional[str], typer.Option("--id", help="Document id (generated if omitted).")
    ] = None,
) -> None:
    """Create a draft document filled with schema defaults."""
    try:
        schema = get_schema(schema_name)
    except PagecraftError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    store = _store()
    if document_id and store.exists(document_id):
        console.print(f"[red]Document {document_id!r} already exists[/red]")
        raise typer.Exit(1)
    document = schema.new_document(document_id)
    store.upsert(document)
    console.print(f"Created {schema_name} document [bold]{document.id}[/bold]")


@app.command()
def show(
    document_id: Annotated[str, typer.Argument(help="Document id.")],
    locale: Annotated[Optional[Locale], typer.Option("--locale", "-l")] = None,
) -> None:
    """Print a document the way the public site would see it."""
    document = _require(_store(), document_id)
    page = render_document(document, locale or _config().editor.default_locale)

    console.print(f"[bold]{document.id}[/bold] ({document.schema_name}, {document.status.value})")
    for name, text in page.fields.items():
        console.print(f"[cyan]{name}[/cyan]: {text}")
    for placement, blocks in page.placements.items():
        console.print(f"[magenta]\\[{placement}][/magenta]")
        for block in blocks:
            console.print(f"  {block.kind.value}: {block.text}")
    for name, entries in page.lists.items():
        console.print(f"[green]{name}[/green]")
        for entry in entries:
            console.print(f"  - {entry}")


@app.command()
def edit(
    document_id: Annotated[str, typer.Argument(help="Document id.")],
    field: Annotated[str, typer.Argument(help="Localized field to change.")],
    mn: Annotated[Optional[str], typer.Option("--mn", help="Mongolian text.")] = None,
    en: Annotated[Optional[str], typer.Option("--en", help="English text.")] = None,
) -> None:
    """Change one localized field and save it (validation applies)."""
    store = _store()
    document = _require(store, document_id)
    if field not in document.fields:
        console.print(f"[red]{document.schema_name} documents have no field {field!r}[/red]")
        raise typer.Exit(1)
    value = {key: text for key, text in (("mn", mn), ("en", en)) if text is not None}
    if not value:
        console.print("[yellow]Nothing to change: pass --mn and/or --en[/yellow]")
        raise typer.Exit(1)
    editor = _open_editor(store, document)
    try:
        issues = asyncio.run(_apply_and_save(editor, {"fields": {field: {"value": value}}}))
    except PagecraftError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    finally:
        editor.dispose()
    if issues:
        _print_issues(issues)
        raise typer.Exit(1)
    console.print(f"Saved {field} on {document_id}")


@app.command("validate")
def validate_cmd(
    document_id: Annotated[str, typer.Argument(help="Document id.")],
) -> None:
    """Report every validation issue of a document."""
    store = _store()
    editor = _open_editor(store, _require(store, document_id))
    issues = editor.validate()
    editor.dispose()
    if issues:
        _print_issues(issues)
        raise typer.Exit(1)
    console.print("[green]Document is valid[/green]")


@app.command()
def publish(
    document_id: Annotated[str, typer.Argument(help="Document id.")],
) -> None:
    """Validate, save and publish a document."""
    store = _store()
    editor = _open_editor(store, _require(store, document_id))
    try:
        issues = asyncio.run(editor.publish())
    except PersistenceError as exc:
        console.print(f"[red]Publish failed: {exc}[/red]")
        raise typer.Exit(1) from exc
    finally:
        editor.dispose()
    if issues:
        _print_issues(issues)
        raise typer.Exit(1)
    console.print(f"[green]Published {document_id}[/green]")
