"""Baseline calculators and the run orchestration for the Cost Baseline Engine."""

from cost_baseline_engine.analysis.anomaly_thresholds import AnomalyThresholdCalculator
from cost_baseline_engine.analysis.engine import BaselineEngine, RunResult
from cost_baseline_engine.analysis.rolling_average import RollingAverageCalculator
from cost_baseline_engine.analysis.seasonal import SeasonalPatternAnalyzer
from cost_baseline_engine.analysis.series import (
    DailyCostPoint,
    DailySeries,
    ServiceSeries,
    build_daily_series,
    build_service_series,
)
from cost_baseline_engine.analysis.service_baseline import ServiceBaselineCalculator

__all__ = [
    "BaselineEngine",
    "RunResult",
    "RollingAverageCalculator",
    "SeasonalPatternAnalyzer",
    "ServiceBaselineCalculator",
    "AnomalyThresholdCalculator",
    "DailyCostPoint",
    "DailySeries",
    "ServiceSeries",
    "build_daily_series",
    "build_service_series",
]
