#!/usr/bin/env python3
"""Quick perf benchmark for parsing and evaluating dice expressions."""

from __future__ import annotations

import argparse
import cProfile
import io
import pstats
import statistics
import time

from tqdm import tqdm

from dicepy.errors import DiceRollerError
from dicepy.pipeline import EvaluationContext, Registry, create_registry

DEFAULT_EXPRESSIONS = (
    "1d20 + 5",
    "4d6kh3",
    "8d6!",
    "10d10>7",
    "3d6r<2 + 1d4[fire]",
    "{1d6, 1d8, 1d10}kh2",
    "4dF + 2",
    "floor(2d6 / 2) + max(1d4, 2)",
    "[[2d8]] + $[[0]]",
    "5d6>4e",
)


def _run_once(
    registry: Registry,
    expressions: list[str],
    *,
    iterations: int,
    seed: int,
    label: str,
    show_progress: bool,
) -> tuple[float, int, int]:
    start = time.perf_counter()
    total_warnings = 0
    total_errors = 0
    steps = range(iterations)
    iterator = tqdm(steps, desc=label, unit="iter") if show_progress else steps
    for step in iterator:
        for expression in expressions:
            context = EvaluationContext.create(options=registry.options, seed=seed + step)
            try:
                result = registry.process_expression(expression, context)
            except DiceRollerError:
                total_errors += 1
                continue
            total_warnings += len(result.warnings)
    duration = time.perf_counter() - start
    return duration, total_warnings, total_errors


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark dice expression throughput")
    parser.add_argument(
        "expressions",
        nargs="*",
        help="Expressions to evaluate (default: a built-in mix of dice features)",
    )
    parser.add_argument("--iterations", type=int, default=1000, help="Evaluations of each expression per run")
    parser.add_argument("--runs", type=int, default=5, help="Measured runs")
    parser.add_argument("--warmups", type=int, default=1, help="Warmup runs")
    parser.add_argument("--seed", type=int, default=0, help="Base RNG seed")
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars (useful for pure timing)",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Run cProfile and print top hotspots",
    )
    parser.add_argument(
        "--profile-top",
        type=int,
        default=30,
        help="Number of cProfile rows to print (default: 30)",
    )
    parser.add_argument(
        "--profile-sort",
        type=str,
        default="tottime",
        help="cProfile sort key (default: tottime, common: cumulative)",
    )
    args = parser.parse_args()

    expressions: list[str] = args.expressions or list(DEFAULT_EXPRESSIONS)
    iterations = max(args.iterations, 1)
    show_progress = not args.no_progress
    registry = create_registry()

    def _benchmark() -> tuple[list[float], int, int]:
        for warmup_idx in range(max(args.warmups, 0)):
            _run_once(
                registry,
                expressions,
                iterations=iterations,
                seed=args.seed,
                label=f"warmup {warmup_idx + 1}/{max(args.warmups, 0)}",
                show_progress=show_progress,
            )

        timings: list[float] = []
        warnings_count = 0
        errors_count = 0
        for run_idx in range(max(args.runs, 1)):
            duration, warnings_count, errors_count = _run_once(
                registry,
                expressions,
                iterations=iterations,
                seed=args.seed,
                label=f"run {run_idx + 1}/{max(args.runs, 1)}",
                show_progress=show_progress,
            )
            timings.append(duration)
        return timings, warnings_count, errors_count

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        timings, warnings_count, errors_count = _benchmark()
        profiler.disable()
        stream = io.StringIO()
        stats = pstats.Stats(profiler, stream=stream)
        stats.sort_stats(args.profile_sort).print_stats(max(args.profile_top, 1))
        print("\n[cProfile top functions]")
        print(stream.getvalue())
    else:
        timings, warnings_count, errors_count = _benchmark()

    evaluations = iterations * len(expressions)
    mean = statistics.mean(timings)

    print(f"Expressions: {len(expressions)}")
    print(f"Evaluations per run: {evaluations}")
    print(f"Warnings: {warnings_count}")
    print(f"Errors: {errors_count}")
    print(f"Runs: {len(timings)} (warmups={max(args.warmups, 0)})")
    print(f"Best:   {min(timings):.4f}s")
    print(f"Median: {statistics.median(timings):.4f}s")
    print(f"Mean:   {mean:.4f}s")
    print(f"Worst:  {max(timings):.4f}s")
    print(f"Evaluations/s (mean): {evaluations / mean:.1f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
