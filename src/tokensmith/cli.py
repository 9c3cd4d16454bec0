"""
tokensmith command line.

Commands:
- resolve: resolve a JSON/YAML token file and print the result as JSON
- eval: resolve a single expression, optionally against a token file
- functions: list the function catalog
- refs: show which tokens a token's raw value references
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from rich.console import Console
from rich.table import Table

from tokensmith import __version__
from tokensmith.core.diagnostics import Diagnostic
from tokensmith.core.engine import TokenEngine
from tokensmith.core.errors import TokensmithError
from tokensmith.core.references import MISSING, find_references, lookup_token
from tokensmith.core.settings import load_settings

app = typer.Typer(
    help="Resolve design token expressions: references, color, contrast, typography and math functions",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

YAML_SUFFIXES = (".yaml", ".yml")


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tokensmith {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-V", help="Log debug output from the engine")
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """tokensmith CLI main callback for global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Helpers
# =============================================================================


def load_token_file(path: Path) -> dict[str, Any]:
    """Read a token tree from JSON or YAML (chosen by file suffix)."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        err_console.print(f"[red]Cannot read {path}: {e}[/red]")
        raise typer.Exit(code=1) from e

    try:
        data = yaml.safe_load(text) if path.suffix.lower() in YAML_SUFFIXES else json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        err_console.print(f"[red]Invalid token file {path}: {e}[/red]")
        raise typer.Exit(code=1) from e

    if not isinstance(data, dict):
        err_console.print(f"[red]{path} must contain a mapping of tokens[/red]")
        raise typer.Exit(code=1)
    return data


def _engine(config: Path | None) -> TokenEngine:
    try:
        return TokenEngine(settings=load_settings(config or Path.cwd()))
    except TokensmithError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e


def _print_diagnostics(diagnostics: list[Diagnostic]) -> None:
    if not diagnostics:
        return
    err_console.print(f"[yellow]{len(diagnostics)} expression(s) left unresolved:[/yellow]")
    for diagnostic in diagnostics:
        err_console.print(f"  {diagnostic.format()}", markup=False)


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False)


# =============================================================================
# Commands
# =============================================================================


@app.command("resolve")
def resolve_command(
    file: Annotated[Path, typer.Argument(help="JSON or YAML token file")],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write JSON here instead of stdout")
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Directory holding tokensmith.toml or pyproject.toml"),
    ] = None,
    strict: Annotated[
        bool, typer.Option("--strict", help="Exit with code 2 if anything stays unresolved")
    ] = False,
) -> None:
    """Resolve every token in FILE and print the resolved tree as JSON."""
    tree = load_token_file(file)
    report = _engine(config).resolve_all_with_report(tree)
    rendered = json.dumps(report.value, indent=2, ensure_ascii=False)

    if output is not None:
        output.write_text(rendered + "\n", encoding="utf-8")
        err_console.print(f"[green]✓[/green] Wrote {output}")
    else:
        typer.echo(rendered)

    _print_diagnostics(report.diagnostics)
    if strict and report.diagnostics:
        raise typer.Exit(code=2)


@app.command("eval")
def eval_command(
    expression: Annotated[str, typer.Argument(help="Value to resolve, e.g. 'tint(#6366f1, 80%)'")],
    tokens: Annotated[
        Path | None, typer.Option("--tokens", "-t", help="Token file for {references}")
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Directory holding tokensmith.toml or pyproject.toml"),
    ] = None,
) -> None:
    """Resolve a single EXPRESSION."""
    tree = load_token_file(tokens) if tokens is not None else {}
    report = _engine(config).resolve_one_with_report(expression, tree)
    typer.echo(_to_text(report.value))
    _print_diagnostics(report.diagnostics)


@app.command("functions")
def functions_command(
    family: Annotated[
        str | None, typer.Option("--family", "-f", help="Only list this family")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List the available token functions."""
    docs = TokenEngine().function_docs()
    if family is not None:
        if family not in docs:
            err_console.print(
                f"[red]Unknown family '{family}'. Available: {', '.join(docs)}[/red]"
            )
            raise typer.Exit(code=1)
        docs = {family: docs[family]}

    if as_json:
        payload = {
            fam: {name: doc.model_dump(exclude={"name", "family"}) for name, doc in entries.items()}
            for fam, entries in docs.items()
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(title="Token functions")
    table.add_column("Family", style="cyan")
    table.add_column("Signature", style="green")
    table.add_column("Description")
    for fam, entries in docs.items():
        for doc in entries.values():
            table.add_row(fam, doc.signature, doc.description)
    console.print(table)


@app.command("refs")
def refs_command(
    file: Annotated[Path, typer.Argument(help="JSON or YAML token file")],
    path: Annotated[str, typer.Argument(help="Dot-path of the token, e.g. color.light")],
) -> None:
    """Show the references in the raw value of the token at PATH."""
    tree = load_token_file(file)
    raw = lookup_token(tree, path)
    if raw is MISSING:
        err_console.print(f"[red]No token at '{path}'[/red]")
        raise typer.Exit(code=1)

    references = find_references(raw)
    if not references:
        console.print(f"{path} has no references")
        return

    table = Table(title=f"References in {path}")
    table.add_column("Reference", style="cyan")
    table.add_column("Status")
    for ref in references:
        found = lookup_token(tree, ref) is not MISSING
        table.add_row(ref, "[green]found[/green]" if found else "[red]missing[/red]")
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
