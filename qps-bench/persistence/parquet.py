"""
Parquet persistence for benchmark results.
"""

import os
import logging
from typing import List, Optional
from datetime import datetime

import pandas as pd

from persistence.record import BenchmarkResult

logger = logging.getLogger(__name__)


class ParquetPersistence:
    """Parquet file persistence for benchmark results.

    Results are kept in memory, one row per timed phase, and written out
    together at the end of a run.

    Attributes:
        output_dir: Directory where Parquet files will be saved
        results: Results accumulated during the run
    """

    def __init__(self, output_dir: str = "results"):
        """Initialize Parquet persistence.

        Args:
            output_dir: Directory for saving Parquet files (default: 'results')
        """
        self.output_dir: str = output_dir
        self.results: List[BenchmarkResult] = []

    def store_result(self, result: BenchmarkResult) -> None:
        self.results.append(result)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([result.to_row() for result in self.results])

    def save_to_file(self, filename_prefix: str = "qps_bench") -> Optional[str]:
        """Save all results to a Parquet file.

        Args:
            filename_prefix: Prefix for the generated filename (default: 'qps_bench')

        Returns:
            Path to the saved file, or None if no results to save
        """
        if not self.results:
            return None

        os.makedirs(self.output_dir, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{filename_prefix}_{timestamp}.parquet"
        filepath = os.path.join(self.output_dir, filename)

        logger.info(f"Saving {len(self.results)} results to {filepath}")
        self.to_dataframe().to_parquet(filepath, index=False)

        return filepath
