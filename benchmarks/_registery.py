"""Benchmark cases, registered once and expanded over kinds, sizes and pipeline depths."""

import itertools
import timeit
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Final

from rich.console import Console
from rich.progress import track

import pyopersist as pp

type BenchFn = Callable[[], object]
type CaseFactory = Callable[[pp.CollectorDescriptor, int, int], BenchFn]
"""Prepares the inputs for a kind, a size and a pipeline depth, and returns the timed call."""

SIZES: Final = (1_000, 10_000, 50_000)
REPEATS: Final = 7

CONSOLE: Final = Console()


@dataclass(slots=True, frozen=True)
class Case:
    """One point of the benchmark grid."""

    group: str
    name: str
    kind: pp.CollectorDescriptor
    size: int
    depth: int
    factory: CaseFactory

    @property
    def path(self) -> str:
        """How the kind materializes: through its bulk constructor, or folding `plus`."""
        return "bulk" if self.kind.adapter.bulk_builder().is_some() else "fold"

    def describe(self) -> str:
        return (
            f"{self.group}.{self.name} {self.kind.name}/{self.path}"
            f" n={self.size} depth={self.depth}"
        )


@dataclass(slots=True, frozen=True)
class Timing:
    """`REPEATS` totals, each one for `calls` consecutive calls of the case."""

    case: Case
    calls: int
    totals: tuple[float, ...]


CASES: list[Case] = []


def register(
    group: str,
    *,
    kinds: Iterable[pp.CollectorDescriptor] = (pp.VECTOR,),
    depths: Iterable[int] = (0,),
    sizes: Iterable[int] = SIZES,
) -> Callable[[CaseFactory], CaseFactory]:
    """Register the decorated factory for every combination of **kinds**, **sizes** and **depths**.

    The factory runs once per case, outside of the timed section.
    """
    grid = tuple(itertools.product(kinds, sizes, depths))

    def decorator(factory: CaseFactory) -> CaseFactory:
        CASES.extend(
            Case(group, factory.__name__, kind, size, depth, factory)
            for kind, size, depth in grid
        )
        return factory

    return decorator


def measure(item: Case) -> Timing:
    """Calibrate the number of calls with `Timer.autorange`, then time `REPEATS` runs."""
    timer = timeit.Timer(item.factory(item.kind, item.size, item.depth))
    calls, _ = timer.autorange()
    return Timing(item, calls, tuple(timer.repeat(repeat=REPEATS, number=calls)))


def measure_all(cases: pp.LazyCollection[Case]) -> pp.LazyCollection[Timing]:
    CONSOLE.print(f"Timing {cases.size()} cases, {REPEATS} runs each", style="bold white")
    progress = track(
        cases, total=cases.size(), description="[cyan]Timing...", console=CONSOLE
    )
    return pp.LazyCollection.from_iter(progress).map(measure).materialize()
