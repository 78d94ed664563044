"""Workload benchmarks for the page pool, written out as CSV."""

from __future__ import annotations

import argparse
import csv
import math
import random
import time
from dataclasses import dataclass
from typing import Optional, Sequence, TextIO

from memspool.memory_manager import MemoryManager, Strategy

CSV_HEADER = "workload,strategy,op_count,total_time_ms,avg_alloc_time_ns,final_fragmentation"
POOL_BYTES = 16 * 1024 * 1024
WORKLOADS = (
    ("Variable Size Stress", Strategy.BEST_FIT),
    ("Variable Size Stress", Strategy.FIRST_FIT),
    ("Small Object Stress", Strategy.BEST_FIT),
    ("Small Object Stress", Strategy.FIRST_FIT),
)


@dataclass(frozen=True)
class BenchmarkResult:
    """Measurements from one workload run."""

    workload_name: str
    strategy: Strategy
    op_count: int
    total_time_ms: float
    avg_alloc_time_ns: float
    final_fragmentation: float


def _timed_alloc(manager: MemoryManager, size: int, held: list[int], times: list[int]) -> None:
    start = time.perf_counter_ns()
    address = manager.alloc(size)
    elapsed = time.perf_counter_ns() - start
    if address is not None:
        times.append(elapsed)
        held.append(address)


def _free_random(manager: MemoryManager, held: list[int]) -> None:
    if held:
        manager.free(held.pop(random.randrange(len(held))))


def run_workload(name: str, strategy: Strategy, ops: int, out: TextIO) -> BenchmarkResult:
    """Run a named workload, append its CSV row to ``out`` and return the result."""
    print(f"Running workload: {name} with strategy: {strategy.name}")
    manager = MemoryManager(POOL_BYTES, strategy)
    held: list[int] = []
    times: list[int] = []

    start = time.perf_counter()
    if name == "Variable Size Stress":
        for i in range(ops):
            _timed_alloc(manager, random.randint(1, 8192), held, times)
            if i % 10 == 0:
                _free_random(manager, held)
    elif name == "Small Object Stress":
        for i in range(ops):
            _timed_alloc(manager, random.randint(16, 515), held, times)
            if i > ops // 2:
                _free_random(manager, held)
    for address in held:
        manager.free(address)
    total_ms = (time.perf_counter() - start) * 1000.0

    avg_ns = sum(times) / len(times) if times else math.nan
    result = BenchmarkResult(name, strategy, ops, total_ms, avg_ns, manager.fragmentation())
    print(f"Recording: {result.workload_name} avg_ns={result.avg_alloc_time_ns:g}")

    csv.writer(out, lineterminator="\n").writerow([
        result.workload_name,
        result.strategy.name,
        result.op_count,
        f"{result.total_time_ms:g}",
        f"{result.avg_alloc_time_ns:g}",
        f"{result.final_fragmentation:g}",
    ])
    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Benchmark the page pool allocator.")
    parser.add_argument("--ops", type=int, default=50000, help="operations per workload")
    parser.add_argument("--output", default="benchmark_results.csv", help="CSV file to write")
    args = parser.parse_args(argv)

    with open(args.output, "w", newline="") as out:
        out.write(CSV_HEADER + "\n")
        for name, strategy in WORKLOADS:
            run_workload(name, strategy, args.ops, out)

    print(f"\n Benchmark complete. Results saved to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())