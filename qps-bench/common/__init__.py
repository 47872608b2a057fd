"""
Common utilities for the QPS benchmark.
"""

from .histogram import LatencyHistogram
from .workload_driver import WorkloadDriver, WorkloadOutcome
from .workload_state import WorkloadState

__all__ = ['LatencyHistogram', 'WorkloadDriver', 'WorkloadOutcome', 'WorkloadState']
