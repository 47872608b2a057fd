"""
Console rendering of benchmark results (JSON and human-readable).
"""

import json
from typing import Optional, Sequence

from persistence.record import BenchmarkResult
from configuration import BANNER_WIDTH, MICROSECONDS_PER_MILLISECOND


def banner(title: str) -> str:
    rule = "━" * BANNER_WIDTH
    return f"{rule}\n{title}\n{rule}"


def _ms(value_us: Optional[int]) -> str:
    if value_us is None:
        return "n/a"
    return f"{value_us / MICROSECONDS_PER_MILLISECOND:.2f} ms"


def _us(value_us: Optional[int]) -> str:
    if value_us is None:
        return "n/a"
    return f"{value_us} μs ({_ms(value_us)})"


def render_json(result: BenchmarkResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


def render_human(result: BenchmarkResult) -> str:
    backend = result.backend
    lines = [
        f"Mode:              {result.mode}",
        f"Concurrency:       {result.concurrency}",
        f"Duration:          {result.duration_seconds}s (elapsed {result.elapsed_seconds:.2f}s)",
        f"Successful Ops:    {result.ok_ops}",
        f"Failed Ops:        {result.err_ops}",
        f"QPS:               {result.qps:.2f}",
        f"Latency P50:       {_us(result.latency_us_p50)}",
        f"Latency P95:       {_us(result.latency_us_p95)}",
        f"Latency P99:       {_us(result.latency_us_p99)}",
        f"Latency Mean:      {_us(result.latency_us_mean)}",
        f"Backend:           {backend.service}://{backend.endpoint}/{backend.bucket}",
    ]
    return "\n".join(lines)


def render_one_line(label: str, result: BenchmarkResult) -> str:
    return (
        f"{label} - QPS: {result.qps:.2f}, P50: {_ms(result.latency_us_p50)}, "
        f"P95: {_ms(result.latency_us_p95)}, P99: {_ms(result.latency_us_p99)}"
    )


def render_combined_summary(results: Sequence[BenchmarkResult]) -> str:
    """Side-by-side summary for composite modes (one block per phase)."""
    lines = []
    for result in results:
        label = result.mode.split("_")[0].upper()
        lines.extend([
            f"{label} Operations:",
            f"  QPS:               {result.qps:.2f}",
            f"  Latency P50:       {_ms(result.latency_us_p50)}",
            f"  Latency P95:       {_ms(result.latency_us_p95)}",
            f"  Latency P99:       {_ms(result.latency_us_p99)}",
            f"  Successful Ops:    {result.ok_ops}",
        ])
    return "\n".join(lines)


def print_report(report) -> None:
    """Print every result of a report to stdout."""
    for result in report.results:
        print()
        print(banner(f"📊 Results: {result.mode} (JSON)"))
        print(render_json(result))
        print()
        print(banner(f"📊 Results: {result.mode} (Human-readable)"))
        print(render_human(result))

    if report.summary:
        print()
        print(banner("📊 Combined Results Summary"))
        print(report.summary)
