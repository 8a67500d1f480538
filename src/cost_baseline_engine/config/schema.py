"""Pydantic configuration schema for the Cost Baseline Engine."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class AWSConfig(BaseModel):
    """AWS account configuration."""

    region: str = "us-east-1"


class CostSourceConfig(BaseModel):
    """Cost Explorer data source configuration."""

    # Empty list means "discover linked accounts from Cost Explorer"
    subscription_ids: list[str] = Field(default_factory=list)
    metric: Literal["UnblendedCost", "AmortizedCost", "NetUnblendedCost", "BlendedCost"] = (
        "UnblendedCost"
    )
    # Cost allocation tag that marks platform-managed resources
    platform_tag_key: str = "platform-managed"
    platform_tag_values: list[str] = Field(default_factory=lambda: ["true", "yes", "1"])


class StorageConfig(BaseModel):
    """Baseline record storage configuration."""

    table_name: str = "cost-baselines"
    retention_days: int | None = Field(default=400, ge=1)  # None disables TTL


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = True


class DataQualityConfig(BaseModel):
    """Observation counts behind the High/Medium/Low data quality labels."""

    high_min_points: int = Field(default=30, ge=1)
    medium_min_points: int = Field(default=14, ge=1)

    @model_validator(mode="after")
    def _check_order(self) -> "DataQualityConfig":
        if self.medium_min_points > self.high_min_points:
            raise ValueError("medium_min_points cannot exceed high_min_points")
        return self


class RollingAverageConfig(BaseModel):
    """Rolling average calculator settings."""

    enabled: bool = True
    lookback_days: int = Field(default=60, ge=1, le=365)
    trend_min_points: int = Field(default=14, ge=14)
    trend_threshold_percent: float = Field(default=5.0, ge=0)
    confidence_multiplier: float = Field(default=1.96, ge=0)  # 95% normal interval


class SeasonalConfig(BaseModel):
    """Seasonal pattern analyzer settings."""

    enabled: bool = True
    lookback_days: int = Field(default=90, ge=7, le=365)
    strong_variance_ratio: float = Field(default=0.10, ge=0)
    moderate_variance_ratio: float = Field(default=0.05, ge=0)


class ServiceBaselineConfig(BaseModel):
    """Service baseline calculator settings."""

    enabled: bool = True
    lookback_days: int = Field(default=60, ge=1, le=365)
    min_data_points: int = Field(default=7, ge=1)
    band_multiplier: float = Field(default=2.0, ge=0)
    high_predictability_ratio: float = Field(default=0.1, ge=0)
    medium_predictability_ratio: float = Field(default=0.3, ge=0)


class AnomalyThresholdConfig(BaseModel):
    """Anomaly threshold calculator settings."""

    enabled: bool = True
    lookback_days: int = Field(default=30, ge=2, le=365)
    sigma_multiplier: float = Field(default=2.0, ge=0)
    recent_points: int = Field(default=7, ge=1)
    min_change_points: int = Field(default=2, ge=2)
    sensitivity_level: Literal["Medium"] = "Medium"


class BaselineConfig(BaseModel):
    """Baseline engine configuration."""

    lookback_days: int = Field(default=90, ge=1, le=365)  # Window read from the source
    data_quality: DataQualityConfig = Field(default_factory=DataQualityConfig)
    rolling_average: RollingAverageConfig = Field(default_factory=RollingAverageConfig)
    seasonal: SeasonalConfig = Field(default_factory=SeasonalConfig)
    service: ServiceBaselineConfig = Field(default_factory=ServiceBaselineConfig)
    anomaly: AnomalyThresholdConfig = Field(default_factory=AnomalyThresholdConfig)

    @property
    def read_window_days(self) -> int:
        """Days to read so every enabled calculator has its full sub-window."""
        windows = [self.lookback_days]
        for calculator in (self.rolling_average, self.seasonal, self.service, self.anomaly):
            if calculator.enabled:
                windows.append(calculator.lookback_days)
        return max(windows)


class Config(BaseModel):
    """Root configuration for the Cost Baseline Engine."""

    project_name: str = "cost-baseline-engine"
    environment: Literal["dev", "staging", "prod"] = "dev"

    aws: AWSConfig = Field(default_factory=AWSConfig)
    source: CostSourceConfig = Field(default_factory=CostSourceConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    baselines: BaselineConfig = Field(default_factory=BaselineConfig)
