"""Anomaly thresholds on day-over-day and week-over-week cost changes."""

from datetime import date

from cost_baseline_engine.analysis.series import DailySeries
from cost_baseline_engine.analysis.statistics import data_quality, mean, population_std
from cost_baseline_engine.config.schema import AnomalyThresholdConfig, DataQualityConfig
from cost_baseline_engine.storage.models import AnomalyBaseline


def percent_changes(costs: list[float], lag: int) -> list[float]:
    """
    Percent change of each point against the point ``lag`` positions earlier.

    Points whose predecessor is missing or zero are skipped, not zero-filled.
    """
    return [
        (costs[i] - costs[i - lag]) / costs[i - lag] * 100
        for i in range(lag, len(costs))
        if costs[i - lag] > 0
    ]


class AnomalyThresholdCalculator:
    """
    Derive mean ± kσ bounds on percent cost change.

    The same construction is used for day-over-day (lag 1) and
    week-over-week (lag 7) changes. The recent anomaly count looks back over
    the last ``recent_points`` valid day-over-day changes.
    """

    def __init__(
        self,
        config: AnomalyThresholdConfig | None = None,
        quality: DataQualityConfig | None = None,
    ):
        self.config = config or AnomalyThresholdConfig()
        self.quality = quality or DataQualityConfig()

    def calculate(self, series: DailySeries, calculation_date: date) -> AnomalyBaseline:
        """Calculate anomaly thresholds for one subscription."""
        costs = series.totals
        record_fields = {
            "subscription_id": series.subscription_id,
            "calculation_date": calculation_date,
            "period": f"Last {self.config.lookback_days} days",
            "data_points": len(costs),
            "sensitivity_level": self.config.sensitivity_level,
        }

        day_changes = percent_changes(costs, 1)
        if len(day_changes) < self.config.min_change_points:
            return AnomalyBaseline(data_quality="Low", **record_fields)

        day_avg, day_std, day_lower, day_upper = self._bounds(day_changes)

        week_changes = percent_changes(costs, 7)
        week_avg = week_std = week_lower = week_upper = 0.0
        if len(week_changes) >= self.config.min_change_points:
            week_avg, week_std, week_lower, week_upper = self._bounds(week_changes)

        recent = day_changes[-self.config.recent_points :]
        anomalies = sum(1 for change in recent if change < day_lower or change > day_upper)

        return AnomalyBaseline(
            data_quality=data_quality(
                len(costs), self.quality.high_min_points, self.quality.medium_min_points
            ),
            day_change_avg=day_avg,
            day_change_std_dev=day_std,
            day_upper_threshold=day_upper,
            day_lower_threshold=day_lower,
            week_change_avg=week_avg,
            week_change_std_dev=week_std,
            week_upper_threshold=week_upper,
            week_lower_threshold=week_lower,
            recent_anomaly_count=anomalies,
            recent_anomaly_rate=anomalies / len(recent) * 100,
            **record_fields,
        )

    def _bounds(self, changes: list[float]) -> tuple[float, float, float, float]:
        """Return (avg, std, lower, upper) for a list of percent changes."""
        avg = mean(changes)
        std = population_std(changes)
        margin = self.config.sigma_multiplier * std
        return avg, std, avg - margin, avg + margin
