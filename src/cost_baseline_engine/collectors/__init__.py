"""Cost series readers for the Cost Baseline Engine."""

from cost_baseline_engine.collectors.base import (
    CostObservation,
    CostSeriesReader,
    aggregate_observations,
)
from cost_baseline_engine.collectors.aws_cost_explorer import CostExplorerSeriesReader

__all__ = [
    "CostObservation",
    "CostSeriesReader",
    "CostExplorerSeriesReader",
    "aggregate_observations",
]
