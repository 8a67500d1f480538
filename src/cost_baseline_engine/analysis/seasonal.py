"""Day-of-week and week-of-month seasonal cost profiles."""

from datetime import date

from cost_baseline_engine.analysis.series import DailySeries
from cost_baseline_engine.analysis.statistics import (
    data_quality,
    mean,
    population_std,
    safe_divide,
)
from cost_baseline_engine.config.schema import DataQualityConfig, SeasonalConfig
from cost_baseline_engine.storage.models import (
    BucketProfile,
    PatternStrength,
    SeasonalBaseline,
)

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def day_of_week(day: date) -> int:
    """Day-of-week bucket, 0 = Sunday through 6 = Saturday."""
    return day.isoweekday() % 7


def week_of_month(day: date) -> int:
    """
    Week bucket 1-4 derived from the ISO week number.

    This is ``iso_week % 4 + 1``, not the calendar week of the month: weeks
    drift across month boundaries and a 5th calendar week folds into bucket 1.
    Downstream reports rely on these exact buckets.
    """
    return day.isocalendar()[1] % 4 + 1


def _profile(buckets: dict[int, list[float]], label_for) -> list[BucketProfile]:
    return [
        BucketProfile(
            bucket=bucket,
            label=label_for(bucket),
            avg_cost=mean(costs),
            std_dev=population_std(costs),
            observations=len(costs),
        )
        for bucket, costs in sorted(buckets.items())
        if costs
    ]


def _peak_and_low(
    profile: list[BucketProfile],
) -> tuple[BucketProfile | None, BucketProfile | None]:
    """Highest and lowest mean buckets; ties go to the lowest bucket index."""
    peak = low = None
    for entry in profile:  # profile is sorted by bucket
        if peak is None or entry.avg_cost > peak.avg_cost:
            peak = entry
        if low is None or entry.avg_cost < low.avg_cost:
            low = entry
    return peak, low


class SeasonalPatternAnalyzer:
    """Decompose a daily cost window into weekday and week-of-month patterns."""

    def __init__(
        self,
        config: SeasonalConfig | None = None,
        quality: DataQualityConfig | None = None,
    ):
        self.config = config or SeasonalConfig()
        self.quality = quality or DataQualityConfig()

    def analyze(self, series: DailySeries, calculation_date: date) -> SeasonalBaseline:
        """
        Build the seasonal profile for one subscription.

        Buckets without observations are left out of the profiles and never
        selected as peak or low.
        """
        by_day: dict[int, list[float]] = {}
        by_week: dict[int, list[float]] = {}
        for point in series.points:
            by_day.setdefault(day_of_week(point.date), []).append(point.total_cost)
            by_week.setdefault(week_of_month(point.date), []).append(point.total_cost)

        day_profile = _profile(by_day, lambda b: DAY_NAMES[b])
        week_profile = _profile(by_week, lambda b: f"Week {b}")

        overall_mean = mean(series.totals)
        peak_day, low_day = _peak_and_low(day_profile)
        peak_week, low_week = _peak_and_low(week_profile)

        seasonal_variance = mean([(p.avg_cost - overall_mean) ** 2 for p in day_profile])
        peak_day_cost = peak_day.avg_cost if peak_day else 0.0
        low_day_cost = low_day.avg_cost if low_day else 0.0

        return SeasonalBaseline(
            subscription_id=series.subscription_id,
            calculation_date=calculation_date,
            period=f"Last {self.config.lookback_days} days",
            data_points=len(series),
            data_quality=data_quality(
                len(series), self.quality.high_min_points, self.quality.medium_min_points
            ),
            overall_mean=overall_mean,
            day_of_week_profile=day_profile,
            week_of_month_profile=week_profile,
            peak_day=peak_day.bucket if peak_day else None,
            peak_day_name=peak_day.label if peak_day else None,
            peak_day_cost=peak_day_cost,
            low_day=low_day.bucket if low_day else None,
            low_day_name=low_day.label if low_day else None,
            low_day_cost=low_day_cost,
            peak_week=peak_week.bucket if peak_week else None,
            peak_week_cost=peak_week.avg_cost if peak_week else 0.0,
            low_week=low_week.bucket if low_week else None,
            low_week_cost=low_week.avg_cost if low_week else 0.0,
            seasonal_variance=seasonal_variance,
            seasonality_index=safe_divide(peak_day_cost - low_day_cost, overall_mean) * 100,
            pattern_strength=self._pattern_strength(seasonal_variance, overall_mean),
        )

    def _pattern_strength(self, variance: float, overall_mean: float) -> PatternStrength:
        if variance > self.config.strong_variance_ratio * overall_mean:
            return "Strong"
        if variance > self.config.moderate_variance_ratio * overall_mean:
            return "Moderate"
        return "Weak"
