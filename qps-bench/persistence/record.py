"""
Result records produced once per benchmark phase.
"""

from typing import Any, Dict, List, Optional


class BackendInfo:
    """Identity of the storage backend a run was measured against."""

    def __init__(self, service: str, endpoint: str, region: str, bucket: str):
        self.service = service
        self.endpoint = endpoint
        self.region = region
        self.bucket = bucket

    def to_dict(self) -> Dict[str, str]:
        return {
            "service": self.service,
            "endpoint": self.endpoint,
            "region": self.region,
            "bucket": self.bucket,
        }


class BenchmarkResult:
    """Outcome of one timed phase. Latencies are in microseconds and are
    None when no operation succeeded."""

    def __init__(
        self,
        mode: str,
        concurrency: int,
        duration_seconds: float,
        ok_ops: int,
        err_ops: int,
        latency_us_p50: Optional[int],
        latency_us_p95: Optional[int],
        latency_us_p99: Optional[int],
        latency_us_mean: Optional[int],
        backend: BackendInfo,
        elapsed_seconds: float = None,
    ):
        self.mode = mode
        self.concurrency = concurrency
        self.duration_seconds = duration_seconds
        self.ok_ops = ok_ops
        self.err_ops = err_ops
        self.qps = ok_ops / duration_seconds if duration_seconds > 0 else 0.0
        self.latency_us_p50 = latency_us_p50
        self.latency_us_p95 = latency_us_p95
        self.latency_us_p99 = latency_us_p99
        self.latency_us_mean = latency_us_mean
        self.backend = backend
        self.elapsed_seconds = elapsed_seconds if elapsed_seconds is not None else duration_seconds

    @classmethod
    def from_outcome(cls, mode: str, concurrency: int, duration_seconds: float,
                     outcome, backend: BackendInfo) -> "BenchmarkResult":
        """Build a result from a finished WorkloadOutcome."""
        stats = outcome.histogram.summary()
        return cls(
            mode=mode,
            concurrency=concurrency,
            duration_seconds=duration_seconds,
            ok_ops=outcome.ok_ops,
            err_ops=outcome.err_ops,
            latency_us_p50=stats["p50"],
            latency_us_p95=stats["p95"],
            latency_us_p99=stats["p99"],
            latency_us_mean=stats["mean"],
            backend=backend,
            elapsed_seconds=outcome.elapsed_seconds,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "concurrency": self.concurrency,
            "duration_seconds": self.duration_seconds,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "ok_ops": self.ok_ops,
            "err_ops": self.err_ops,
            "qps": self.qps,
            "latency_us_p50": self.latency_us_p50,
            "latency_us_p95": self.latency_us_p95,
            "latency_us_p99": self.latency_us_p99,
            "latency_us_mean": self.latency_us_mean,
            "backend": self.backend.to_dict(),
        }

    def to_row(self) -> Dict[str, Any]:
        """Flat representation for tabular persistence."""
        row = self.to_dict()
        backend = row.pop("backend")
        for field, value in backend.items():
            row[f"backend_{field}"] = value
        return row


class BenchmarkReport:
    """All results of one mode run, plus the combined summary for composite modes."""

    def __init__(self, mode: str, results: List[BenchmarkResult], summary: str = ""):
        self.mode = mode
        self.results = results
        self.summary = summary
        self.cleaned_up = 0
