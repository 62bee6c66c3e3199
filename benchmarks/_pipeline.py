"""Selection, aggregation and rendering of benchmark timings."""

import statistics
import subprocess
from dataclasses import dataclass
from typing import Self

from rich.table import Table

import pyopersist as pp

from ._registery import CASES, CONSOLE, Case, Timing, measure_all


@dataclass(slots=True, frozen=True)
class Stat:
    """Per-call timings of one case, in microseconds."""

    case: Case
    calls: int
    median_us: float
    best_us: float

    @classmethod
    def from_timing(cls, timing: Timing) -> Self:
        per_call = [total / timing.calls * 1e6 for total in timing.totals]
        return cls(timing.case, timing.calls, statistics.median(per_call), min(per_call))


def select(group: str | None = None, kind: str | None = None) -> pp.LazyCollection[Case]:
    """The registered cases, optionally restricted to one **group** and one kind name."""
    selected = (
        pp.LazyCollection.from_iter(CASES)
        .filter(lambda c: group is None or c.group == group)
        .filter(lambda c: kind is None or c.kind.name == kind)
    )
    if selected.is_empty():
        msg = f"No benchmark case for group={group!r}, kind={kind!r}!"
        raise ValueError(msg)
    return selected


def run_pipeline(
    group: str | None = None, kind: str | None = None
) -> pp.LazyCollection[Stat]:
    return select(group, kind).into(measure_all).map(Stat.from_timing)


def render(stats: pp.LazyCollection[Stat]) -> None:
    """Print the stats as a table, with the current git revision as caption."""
    table = Table(
        "case",
        "kind",
        "path",
        "depth",
        "size",
        "calls",
        "median (µs/call)",
        "best (µs/call)",
        title="Benchmarks",
        caption=_get_git_hash().map(lambda h: h[:10]).ok().unwrap_or("unknown revision"),
    )
    stats.sort(
        lambda s: (
            s.case.group, s.case.name, s.case.size, s.case.depth, s.case.kind.name, s.case.path
        )
    ).peek(
        lambda s: table.add_row(
            f"{s.case.group}.{s.case.name}",
            s.case.kind.name,
            s.case.path,
            str(s.case.depth),
            str(s.case.size),
            str(s.calls),
            f"{s.median_us:.2f}",
            f"{s.best_us:.2f}",
        )
    ).materialize()
    CONSOLE.print(table)


def _get_git_hash() -> pp.Result[str, Exception]:
    """Get current git commit hash."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],  # noqa: S607
            capture_output=True,
            text=True,
            check=True,
        )
        return pp.Ok(result.stdout.strip())
    except Exception as e:  # noqa: BLE001
        return pp.Err(e)
