"""Per-service cost baselines."""

from datetime import date

from cost_baseline_engine.analysis.series import ServiceSeries
from cost_baseline_engine.analysis.statistics import (
    data_quality,
    mean,
    percent_change,
    population_std,
    safe_divide,
)
from cost_baseline_engine.config.schema import DataQualityConfig, ServiceBaselineConfig
from cost_baseline_engine.storage.models import GrowthPattern, Predictability, ServiceBaseline


class ServiceBaselineCalculator:
    """
    Calculate volatility, expected range and growth for each service.

    Services with fewer than ``min_data_points`` days are skipped and produce
    no record at all; consumers treat a missing record as "not enough data".
    """

    def __init__(
        self,
        config: ServiceBaselineConfig | None = None,
        quality: DataQualityConfig | None = None,
    ):
        self.config = config or ServiceBaselineConfig()
        self.quality = quality or DataQualityConfig()

    def calculate(self, series: ServiceSeries, calculation_date: date) -> ServiceBaseline | None:
        """
        Calculate the baseline for one (subscription, service, partition) key.

        Returns:
            ServiceBaseline, or None if the series is below the minimum length.
        """
        costs = series.costs
        n = len(costs)
        if n < self.config.min_data_points:
            return None

        avg = mean(costs)
        std = population_std(costs)
        volatility = safe_divide(std, avg)
        band = self.config.band_multiplier * std
        growth = self._growth_rate(costs)

        return ServiceBaseline(
            subscription_id=series.subscription_id,
            calculation_date=calculation_date,
            period=f"Last {self.config.lookback_days} days",
            data_points=n,
            data_quality=data_quality(
                n, self.quality.high_min_points, self.quality.medium_min_points
            ),
            service_name=series.service_name,
            is_platform_managed=series.is_platform_managed,
            avg_daily_cost=avg,
            min_daily_cost=min(costs),
            max_daily_cost=max(costs),
            std_dev_daily_cost=std,
            total_cost=sum(costs),
            expected_min_cost=avg - band,
            expected_max_cost=avg + band,
            volatility_ratio=volatility,
            predictability=self._predictability(volatility),
            growth_rate=growth,
            growth_pattern=self._growth_pattern(growth),
        )

    def calculate_all(
        self, series_by_key: dict[tuple[str, str, bool], ServiceSeries], calculation_date: date
    ) -> list[ServiceBaseline]:
        """Calculate baselines for every key that meets the minimum data threshold."""
        records = []
        for series in series_by_key.values():
            record = self.calculate(series, calculation_date)
            if record is not None:
                records.append(record)
        return records

    @staticmethod
    def _growth_rate(costs: list[float]) -> float:
        """Percent change of the last 7 points against the 7 points before them."""
        previous = costs[-14:-7]
        if not previous:
            return 0.0
        return percent_change(mean(costs[-7:]), mean(previous))

    def _predictability(self, volatility: float) -> Predictability:
        if volatility < self.config.high_predictability_ratio:
            return "High"
        if volatility < self.config.medium_predictability_ratio:
            return "Medium"
        return "Low"

    @staticmethod
    def _growth_pattern(growth: float) -> GrowthPattern:
        if growth > 10:
            return "Rapid Growth"
        if growth > 2:
            return "Steady Growth"
        if growth >= -2:
            return "Stable"
        if growth > -10:
            return "Declining"
        return "Rapid Decline"
