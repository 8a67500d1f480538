"""Rolling average baselines for daily subscription cost."""

from datetime import date

from cost_baseline_engine.analysis.series import DailySeries
from cost_baseline_engine.analysis.statistics import (
    data_quality,
    mean,
    percent_change,
    population_std,
    safe_divide,
    tail_mean,
)
from cost_baseline_engine.config.schema import DataQualityConfig, RollingAverageConfig
from cost_baseline_engine.storage.models import RollingAverageBaseline, TrendDirection


class RollingAverageCalculator:
    """
    Calculate 7/30/60-day moving averages with spread and trend.

    Short series never fail: averages fall back to all available points, and
    the growth trend is 0 until there are two full weeks of data.
    """

    def __init__(
        self,
        config: RollingAverageConfig | None = None,
        quality: DataQualityConfig | None = None,
    ):
        self.config = config or RollingAverageConfig()
        self.quality = quality or DataQualityConfig()

    def calculate(self, series: DailySeries, calculation_date: date) -> RollingAverageBaseline:
        """
        Calculate the rolling average baseline for one subscription.

        Args:
            series: Daily totals for the subscription, already sub-windowed.
            calculation_date: Date stamped on the record.

        Returns:
            One record; all numeric fields are 0 for an empty series.
        """
        totals = series.totals
        n = len(totals)

        avg_30_day = tail_mean(totals, 30)
        std = population_std(totals)
        growth = self._growth_trend(totals)
        margin = self.config.confidence_multiplier * std

        return RollingAverageBaseline(
            subscription_id=series.subscription_id,
            calculation_date=calculation_date,
            period=f"Last {self.config.lookback_days} days",
            data_points=n,
            data_quality=data_quality(
                n, self.quality.high_min_points, self.quality.medium_min_points
            ),
            avg_7_day=tail_mean(totals, 7),
            avg_30_day=avg_30_day,
            avg_60_day=tail_mean(totals, 60),
            avg_platform_7_day=tail_mean(series.platform_costs, 7),
            avg_platform_30_day=tail_mean(series.platform_costs, 30),
            avg_standard_7_day=tail_mean(series.standard_costs, 7),
            avg_standard_30_day=tail_mean(series.standard_costs, 30),
            standard_deviation=std,
            coefficient_of_variation=safe_divide(std, avg_30_day) * 100,
            growth_trend_percent=growth,
            trend_direction=self._trend_direction(growth),
            upper_confidence_interval=avg_30_day + margin,
            lower_confidence_interval=avg_30_day - margin,
        )

    def _growth_trend(self, totals: list[float]) -> float:
        """Percent change of the last 7 points over the 7 points before them."""
        if len(totals) < self.config.trend_min_points:
            return 0.0

        n = len(totals)
        recent = mean(totals[n - 7 :])
        previous = mean(totals[n - 14 : n - 7])
        return percent_change(recent, previous)

    def _trend_direction(self, growth: float) -> TrendDirection:
        threshold = self.config.trend_threshold_percent
        if growth > threshold:
            return "Increasing"
        if growth < -threshold:
            return "Decreasing"
        return "Stable"
