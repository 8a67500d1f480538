"""Configuration management for the Cost Baseline Engine."""

from cost_baseline_engine.config.schema import (
    AnomalyThresholdConfig,
    AWSConfig,
    BaselineConfig,
    Config,
    CostSourceConfig,
    DataQualityConfig,
    LoggingConfig,
    RollingAverageConfig,
    SeasonalConfig,
    ServiceBaselineConfig,
    StorageConfig,
)
from cost_baseline_engine.config.loader import get_cached_config, load_config

__all__ = [
    "Config",
    "AWSConfig",
    "CostSourceConfig",
    "StorageConfig",
    "LoggingConfig",
    "BaselineConfig",
    "DataQualityConfig",
    "RollingAverageConfig",
    "SeasonalConfig",
    "ServiceBaselineConfig",
    "AnomalyThresholdConfig",
    "load_config",
    "get_cached_config",
]
