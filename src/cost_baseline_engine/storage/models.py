"""Baseline record models and their DynamoDB item format."""

from datetime import date
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

DataQualityLabel = Literal["High", "Medium", "Low"]
TrendDirection = Literal["Increasing", "Decreasing", "Stable"]
PatternStrength = Literal["Strong", "Moderate", "Weak"]
Predictability = Literal["High", "Medium", "Low"]
GrowthPattern = Literal[
    "Rapid Growth", "Steady Growth", "Stable", "Declining", "Rapid Decline"
]


class BucketProfile(BaseModel):
    """Cost statistics for one seasonal bucket (a weekday or a week of month)."""

    model_config = ConfigDict(frozen=True)

    bucket: int
    label: str
    avg_cost: float
    std_dev: float
    observations: int


class BaselineRecordBase(BaseModel):
    """
    Fields shared by every baseline record.

    DynamoDB Key Structure:
    - PK: BASELINE#{subscription_id}
    - SK: {baseline_type}#{calculation_date}[#{record_suffix}]

    Writing the same record twice overwrites the same item, so repeated runs
    for a date are idempotent.
    """

    model_config = ConfigDict(frozen=True)

    subscription_id: str = Field(min_length=1)
    calculation_date: date
    period: str
    data_points: int = Field(ge=0)
    data_quality: DataQualityLabel

    @property
    def record_suffix(self) -> str | None:
        """Extra sort key component for types with several records per day."""
        return None

    @property
    def pk(self) -> str:
        """Generate partition key."""
        return f"BASELINE#{self.subscription_id}"

    @property
    def sk(self) -> str:
        """Generate sort key."""
        sk = f"{self.baseline_type}#{self.calculation_date.isoformat()}"
        if self.record_suffix:
            sk += f"#{self.record_suffix}"
        return sk

    def to_dynamodb_item(self, ttl: int | None = None) -> dict:
        """Convert to DynamoDB item format (floats as strings)."""
        item: dict[str, Any] = {"PK": self.pk, "SK": self.sk}
        for name, value in self.model_dump(mode="json").items():
            if isinstance(value, float):
                item[name] = str(value)
            elif isinstance(value, list):
                item[name] = [_stringify_floats(v) for v in value]
            else:
                item[name] = value
        if ttl:
            item["ttl"] = ttl
        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict) -> "BaselineRecordBase":
        """
        Create from DynamoDB item.

        Called on a variant, the item must carry that variant's baseline_type.
        Called on the base class, the variant is chosen from baseline_type.
        """
        if cls is BaselineRecordBase:
            return parse_baseline_record(item)
        return cls.model_validate(_record_fields(item))


def _record_fields(item: dict) -> dict:
    return {k: v for k, v in item.items() if k not in ("PK", "SK", "ttl")}


def _stringify_floats(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: str(v) if isinstance(v, float) else v for k, v in value.items()}
    return value


class RollingAverageBaseline(BaselineRecordBase):
    """Moving averages, spread and trend of daily total cost."""

    baseline_type: Literal["RollingAverage"] = "RollingAverage"

    avg_7_day: float = 0.0
    avg_30_day: float = 0.0
    avg_60_day: float = 0.0
    avg_platform_7_day: float = 0.0
    avg_platform_30_day: float = 0.0
    avg_standard_7_day: float = 0.0
    avg_standard_30_day: float = 0.0
    standard_deviation: float = 0.0
    coefficient_of_variation: float = 0.0
    growth_trend_percent: float = 0.0
    trend_direction: TrendDirection = "Stable"
    upper_confidence_interval: float = 0.0
    lower_confidence_interval: float = 0.0


class SeasonalBaseline(BaselineRecordBase):
    """Day-of-week and week-of-month cost profile."""

    baseline_type: Literal["Seasonal"] = "Seasonal"

    overall_mean: float = 0.0
    day_of_week_profile: list[BucketProfile] = Field(default_factory=list)
    week_of_month_profile: list[BucketProfile] = Field(default_factory=list)
    peak_day: int | None = None
    peak_day_name: str | None = None
    peak_day_cost: float = 0.0
    low_day: int | None = None
    low_day_name: str | None = None
    low_day_cost: float = 0.0
    peak_week: int | None = None
    peak_week_cost: float = 0.0
    low_week: int | None = None
    low_week_cost: float = 0.0
    seasonal_variance: float = 0.0
    seasonality_index: float = 0.0
    pattern_strength: PatternStrength = "Weak"


class ServiceBaseline(BaselineRecordBase):
    """Statistical baseline for one service within a subscription."""

    baseline_type: Literal["Service"] = "Service"

    service_name: str
    is_platform_managed: bool = False
    avg_daily_cost: float = 0.0
    min_daily_cost: float = 0.0
    max_daily_cost: float = 0.0
    std_dev_daily_cost: float = 0.0
    total_cost: float = 0.0
    expected_min_cost: float = 0.0
    expected_max_cost: float = 0.0
    volatility_ratio: float = 0.0
    predictability: Predictability = "High"
    growth_rate: float = 0.0
    growth_pattern: GrowthPattern = "Stable"

    @property
    def record_suffix(self) -> str | None:
        partition = "platform" if self.is_platform_managed else "standard"
        return f"{self.service_name}#{partition}"


class AnomalyBaseline(BaselineRecordBase):
    """Day-over-day and week-over-week change thresholds."""

    baseline_type: Literal["Anomaly"] = "Anomaly"

    day_change_avg: float = 0.0
    day_change_std_dev: float = 0.0
    day_upper_threshold: float = 0.0
    day_lower_threshold: float = 0.0
    week_change_avg: float = 0.0
    week_change_std_dev: float = 0.0
    week_upper_threshold: float = 0.0
    week_lower_threshold: float = 0.0
    recent_anomaly_count: int = 0
    recent_anomaly_rate: float = 0.0
    sensitivity_level: Literal["Medium"] = "Medium"


BaselineRecord = Annotated[
    Union[RollingAverageBaseline, SeasonalBaseline, ServiceBaseline, AnomalyBaseline],
    Field(discriminator="baseline_type"),
]

_record_adapter: TypeAdapter[BaselineRecord] = TypeAdapter(BaselineRecord)


def parse_baseline_record(data: dict) -> BaselineRecord:
    """
    Build the right record variant from a dict or a DynamoDB item.

    Pydantic coerces the string-encoded numbers back to floats.
    """
    return _record_adapter.validate_python(_record_fields(data))
