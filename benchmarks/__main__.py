"""Entry point for benchmarks CLI."""

from typing import Annotated

import typer

from . import benchs  # pyright: ignore[reportUnusedImport] # noqa: F401
from ._pipeline import render, run_pipeline, select
from ._registery import CONSOLE

app = typer.Typer(help="Benchmarks for pyopersist developments.")

Group = Annotated[
    str | None,
    typer.Option("--group", "-g", help="Only cases of this group (build, pipeline, query)."),
]
Kind = Annotated[
    str | None,
    typer.Option("--kind", "-k", help="Only cases materializing into this kind, e.g. Stack."),
]


@app.command(name="list")
def list_cases(*, group: Group = None, kind: Kind = None) -> None:
    """Show the registered cases."""
    select(group, kind).peek(lambda c: CONSOLE.print(c.describe())).materialize()


@app.command()
def run(*, group: Group = None, kind: Kind = None) -> None:
    """Run benchmark cases and print their per-call timings."""
    CONSOLE.print("Running benchmarks...", style="bold blue")
    render(run_pipeline(group, kind))
    CONSOLE.print("✓ Done", style="bold green")


if __name__ == "__main__":
    app()
