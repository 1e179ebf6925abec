"""Benchmark helper for boundary traversal latency."""
from __future__ import annotations

import argparse
import json
import statistics
from dataclasses import dataclass
from time import perf_counter
from typing import Callable, Iterable, Sequence

from nodeboundary.boundary import Boundary
from nodeboundary.boundary_range import BoundaryRange
from nodeboundary.flags import Side
from nodeboundary.tree.nodes import Element, Text


@dataclass(slots=True)
class BenchmarkResult:
    label: str
    nodes: int
    steps: int
    runs_ms: list[float]

    @property
    def median_ms(self) -> float:
        return statistics.median(self.runs_ms)

    @property
    def per_step_us(self) -> float:
        return (self.median_ms * 1000) / self.steps if self.steps else 0.0


def build_tree(depth: int, fanout: int) -> Element:
    """Return a complete tree with ``fanout`` children per element and text leaves at the bottom."""

    def _build(level: int, label: str) -> Element:
        element = Element(f"n{level}")
        if level == depth:
            element.append(Text(label))
            return element
        for index in range(fanout):
            element.append(_build(level + 1, f"{label}.{index}"))
        return element

    return _build(0, "0")


def _walk_boundaries(root: Element) -> int:
    boundary = Boundary(root, Side.BEFORE_OPEN)
    steps = 0
    while not boundary.is_null():
        boundary.next()
        steps += 1
    return steps


def _walk_nodes(root: Element) -> int:
    return sum(1 for _ in Boundary(root, Side.AFTER_OPEN).next_nodes())


def _compare_siblings(root: Element) -> int:
    children = root.child_nodes
    selection = BoundaryRange().select_node(children[0])
    steps = 0
    for child in children:
        other = BoundaryRange().select_node_contents(child)
        selection.intersects(other)
        selection.extend(other)
        steps += 1
    return steps


_SUITES: dict[str, Callable[[Element], int]] = {
    "next": _walk_boundaries,
    "next_nodes": _walk_nodes,
    "range_ops": _compare_siblings,
}


def run_benchmarks(
    suites: Iterable[str],
    *,
    depth: int,
    fanout: int,
    repeat: int,
) -> list[BenchmarkResult]:
    root = build_tree(depth, fanout)
    node_count = sum(1 for _ in root.iter_descendants()) + 1
    results: list[BenchmarkResult] = []
    for label in suites:
        runner = _SUITES[label]
        runs: list[float] = []
        steps = 0
        for _ in range(repeat):
            start = perf_counter()
            steps = runner(root)
            runs.append((perf_counter() - start) * 1000)
        results.append(BenchmarkResult(label=label, nodes=node_count, steps=steps, runs_ms=runs))
    return results


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Measure Boundary traversal latency on generated trees.")
    parser.add_argument("--depth", type=int, default=5, help="Depth of the generated tree.")
    parser.add_argument("--fanout", type=int, default=6, help="Children per element.")
    parser.add_argument("--repeat", type=int, default=5, help="Runs per suite.")
    parser.add_argument(
        "--suite",
        action="append",
        choices=sorted(_SUITES),
        help="Suite to run; can be supplied multiple times. Defaults to all suites.",
    )
    parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON results.")
    args = parser.parse_args(argv)

    results = run_benchmarks(
        args.suite or list(_SUITES),
        depth=max(1, args.depth),
        fanout=max(1, args.fanout),
        repeat=max(1, args.repeat),
    )

    if args.json:
        payload = [
            {
                "suite": result.label,
                "nodes": result.nodes,
                "steps": result.steps,
                "median_ms": result.median_ms,
                "per_step_us": result.per_step_us,
                "runs_ms": result.runs_ms,
            }
            for result in results
        ]
        print(json.dumps(payload, indent=2))
        return

    max_label = max(len(result.label) for result in results)
    header = f"{'Suite':<{max_label}}  {'Nodes':>8}  {'Steps':>8}  {'Median (ms)':>11}  {'Per step (us)':>13}"
    print(header)
    print("-" * len(header))
    for result in results:
        print(
            f"{result.label:<{max_label}}  "
            f"{result.nodes:>8,}  "
            f"{result.steps:>8,}  "
            f"{result.median_ms:>11.2f}  "
            f"{result.per_step_us:>13.3f}"
        )

    runtimes = [run for result in results for run in result.runs_ms]
    print()
    print(
        "Traversal runtime stats → min: "
        f"{min(runtimes):.2f} ms · median: {statistics.median(runtimes):.2f} ms · max: {max(runtimes):.2f} ms"
    )


if __name__ == "__main__":
    main()
