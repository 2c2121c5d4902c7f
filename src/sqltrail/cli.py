"""CLI entry point for SQL Trail."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from sqlglot.errors import SqlglotError

from sqltrail.catalog import CatalogError, SchemaCatalog
from sqltrail.global_models import OutputFormat
from sqltrail.graph.serialization import write_graph
from sqltrail.lineage import IssueKind, ModelSet, ResolutionIssue
from sqltrail.utils.config import load_config

DEFAULT_OUTPUT = "graph.dot"

app = typer.Typer(
    name="sqltrail",
    help="Column lineage graph for a directory of SQL models and a schema catalog.",
    add_completion=False,
)
err_console = Console(stderr=True)


def _report_issues(
    issues: List[ResolutionIssue],
    verbose: bool,
) -> None:
    """Print resolution issues as warnings.

    Ambiguous columns are always reported; columns that simply have no known
    type are reported only in verbose mode.
    """
    for issue in issues:
        if issue.kind == IssueKind.AMBIGUOUS or verbose:
            err_console.print(
                f"[yellow]Warning:[/yellow] {issue.model}.{issue.column}: "
                f"{issue.message}"
            )


@app.command()
def main(
    catalog_path: Path = typer.Argument(
        ...,
        metavar="CATALOG",
        help="Path to the schema catalog (sources.yml or .json)",
    ),
    sql_dir: Path = typer.Argument(
        ...,
        metavar="SQL_DIR",
        help="Path to the folder with .sql model files",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help=f"Output file path (default: {DEFAULT_OUTPUT}, or from config)",
    ),
    output_format: Optional[OutputFormat] = typer.Option(
        None,
        "--output-format",
        "-f",
        help="Output format: 'dot', 'mermaid' or 'json' (default: dot, or from config)",
    ),
    dialect: Optional[str] = typer.Option(
        None,
        "--dialect",
        "-d",
        help="SQL dialect (default: generic, or from config)",
    ),
    recursive: bool = typer.Option(
        False,
        "--recursive",
        "-r",
        help="Recursively search the folder for SQL files",
    ),
    glob_pattern: Optional[str] = typer.Option(
        None,
        "--glob",
        "-g",
        help="Glob pattern for matching SQL files (default: *.sql)",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail instead of warning when a column cannot be tied to one table",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Also report columns whose type could not be determined",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress warnings",
    ),
) -> None:
    """
    Build the lineage graph of a folder of SQL models.

    Every .sql file becomes a model named after its file stem. Output columns
    are typed from the catalog, directly or through one referenced model, and
    the graph is written with one labeled edge per (source table, model) pair.

    Examples:

        # Write graph.dot in the current directory
        sqltrail sources.yml ./models

        # Write a Mermaid diagram instead
        sqltrail sources.yml ./models -f mermaid -o lineage.mmd
    """
    config = load_config()
    dialect = dialect or config.dialect
    output = output or Path(config.output or DEFAULT_OUTPUT)
    output_format = output_format or config.output_format or OutputFormat.DOT
    glob_pattern = glob_pattern or config.glob_pattern or "*.sql"
    recursive = recursive or bool(config.recursive)
    strict = strict or bool(config.strict)

    try:
        catalog = SchemaCatalog.from_path(catalog_path)
        model_set = ModelSet.load_from_dir(
            sql_dir,
            catalog,
            dialect=dialect,
            recursive=recursive,
            glob_pattern=glob_pattern,
        )

    except FileNotFoundError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except CatalogError as e:
        err_console.print(f"[red]Error:[/red] Invalid catalog: {e}")
        raise typer.Exit(1)

    except SqlglotError as e:
        err_console.print(f"[red]Error:[/red] Failed to parse SQL: {e}")
        raise typer.Exit(1)

    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except OSError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    issues = model_set.issues
    if not quiet:
        for name in model_set.duplicate_names:
            err_console.print(
                f"[yellow]Warning:[/yellow] Duplicate model name '{name}': "
                "several files share this stem and will be merged into one node"
            )
        _report_issues(issues, verbose)

    ambiguous = [issue for issue in issues if issue.kind == IssueKind.AMBIGUOUS]
    if strict and ambiguous:
        err_console.print(
            f"[red]Error:[/red] {len(ambiguous)} ambiguous column(s) found "
            "(--strict); no graph written"
        )
        raise typer.Exit(1)

    graph = model_set.to_graph(dialect=dialect, catalog_path=str(catalog_path))

    try:
        write_graph(graph, output, output_format)
    except OSError as e:
        err_console.print(f"[red]Error:[/red] Could not write {output}: {e}")
        raise typer.Exit(1)

    err_console.print(f"graph successfully written to file: {output}")


if __name__ == "__main__":
    app()
