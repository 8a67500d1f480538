"""Orchestration of a baseline run: read once, compute, then write."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta

import structlog

from cost_baseline_engine.analysis.anomaly_thresholds import AnomalyThresholdCalculator
from cost_baseline_engine.analysis.rolling_average import RollingAverageCalculator
from cost_baseline_engine.analysis.seasonal import SeasonalPatternAnalyzer
from cost_baseline_engine.analysis.series import build_daily_series, build_service_series
from cost_baseline_engine.analysis.service_baseline import ServiceBaselineCalculator
from cost_baseline_engine.collectors.base import CostObservation, CostSeriesReader
from cost_baseline_engine.config.schema import BaselineConfig
from cost_baseline_engine.exceptions import BaselineWriteError, UpstreamUnavailableError
from cost_baseline_engine.storage.base import BaselineWriter
from cost_baseline_engine.storage.models import BaselineRecord

logger = structlog.get_logger(__name__)


@dataclass
class RunResult:
    """Outcome of one baseline run."""

    calculation_date: date
    records: list[BaselineRecord] = field(default_factory=list)
    succeeded: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)  # subscription -> reason
    records_written: int = 0

    @property
    def records_by_type(self) -> dict[str, int]:
        return dict(Counter(r.baseline_type for r in self.records))

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def to_dict(self) -> dict:
        """Summary suitable for a Lambda response body."""
        return {
            "calculation_date": self.calculation_date.isoformat(),
            "subscriptions_succeeded": len(self.succeeded),
            "subscriptions_failed": len(self.failures),
            "failures": dict(self.failures),
            "records_computed": len(self.records),
            "records_written": self.records_written,
            "records_by_type": self.records_by_type,
        }


class BaselineEngine:
    """
    Compute all baseline types for a set of subscriptions.

    A run has three phases:
    1. Read - one fetch per subscription for the widest enabled window
    2. Compute - pure calculations over the in-memory series
    3. Write - one batch of records per subscription

    A failure while reading or writing one subscription is recorded in the
    RunResult and never stops the other subscriptions.
    """

    def __init__(
        self,
        reader: CostSeriesReader,
        writer: BaselineWriter | None,
        config: BaselineConfig | None = None,
    ):
        """
        Initialize the engine.

        Args:
            reader: Source of daily cost observations.
            writer: Sink for baseline records. None means compute only.
            config: Baseline configuration. Defaults are used if None.
        """
        self.reader = reader
        self.writer = writer
        self.config = config or BaselineConfig()

        quality = self.config.data_quality
        self.rolling_average = RollingAverageCalculator(self.config.rolling_average, quality)
        self.seasonal = SeasonalPatternAnalyzer(self.config.seasonal, quality)
        self.service = ServiceBaselineCalculator(self.config.service, quality)
        self.anomaly = AnomalyThresholdCalculator(self.config.anomaly, quality)

    def run(
        self,
        subscription_ids: list[str] | None = None,
        as_of: date | None = None,
        dry_run: bool = False,
    ) -> RunResult:
        """
        Run the baseline calculation.

        Args:
            subscription_ids: Subscriptions to process. None asks the reader to discover them.
            as_of: Calculation date; the window ends the day before. Defaults to today.
            dry_run: Compute records but do not write them.

        Returns:
            RunResult with computed records and per-subscription failures.
        """
        as_of = as_of or date.today()
        result = RunResult(calculation_date=as_of)
        window_days = self.config.read_window_days

        if subscription_ids is None:
            subscription_ids = self.reader.discover_subscription_ids(window_days)
            logger.info("subscriptions_discovered", count=len(subscription_ids))

        # Read phase
        observations_by_subscription: dict[str, list[CostObservation]] = {}
        for subscription_id in subscription_ids:
            try:
                observations = self.reader.fetch_daily_costs(
                    [subscription_id], window_days, end_date=as_of
                )
            except UpstreamUnavailableError as e:
                logger.warning(
                    "subscription_read_failed", subscription_id=subscription_id, error=e.reason
                )
                result.failures[subscription_id] = e.reason
                continue

            if not observations:
                logger.warning("subscription_has_no_data", subscription_id=subscription_id)
                result.failures[subscription_id] = "No cost data in window"
                continue

            observations_by_subscription[subscription_id] = observations

        # Compute phase
        records_by_subscription: dict[str, list[BaselineRecord]] = {}
        for subscription_id, observations in observations_by_subscription.items():
            records = self.compute_baselines(observations, as_of)
            records_by_subscription[subscription_id] = records
            logger.info(
                "baselines_computed",
                subscription_id=subscription_id,
                observations=len(observations),
                records=len(records),
            )

        # Write phase
        for subscription_id, records in records_by_subscription.items():
            if not dry_run and self.writer is not None:
                try:
                    result.records_written += self.writer.write_baselines(records)
                except BaselineWriteError as e:
                    logger.error(
                        "subscription_write_failed",
                        subscription_id=subscription_id,
                        error=e.reason,
                    )
                    result.failures[subscription_id] = e.reason
                    continue
            result.records.extend(records)
            result.succeeded.append(subscription_id)

        logger.info("baseline_run_complete", **result.to_dict())
        return result

    def compute_baselines(
        self, observations: list[CostObservation], as_of: date
    ) -> list[BaselineRecord]:
        """
        Compute every enabled baseline type from a set of observations.

        Pure function of its inputs: no I/O, no wall-clock reads.
        """
        records: list[BaselineRecord] = []
        daily_series = build_daily_series(observations)

        for series in daily_series.values():
            if self.config.rolling_average.enabled:
                window = series.since(
                    self._window_start(as_of, self.config.rolling_average.lookback_days)
                )
                records.append(self.rolling_average.calculate(window, as_of))

            if self.config.seasonal.enabled:
                window = series.since(
                    self._window_start(as_of, self.config.seasonal.lookback_days)
                )
                records.append(self.seasonal.analyze(window, as_of))

            if self.config.anomaly.enabled:
                window = series.since(
                    self._window_start(as_of, self.config.anomaly.lookback_days)
                )
                records.append(self.anomaly.calculate(window, as_of))

        if self.config.service.enabled:
            start = self._window_start(as_of, self.config.service.lookback_days)
            service_series = {
                key: series.since(start)
                for key, series in build_service_series(observations).items()
            }
            records.extend(self.service.calculate_all(service_series, as_of))

        return records

    @staticmethod
    def _window_start(as_of: date, lookback_days: int) -> date:
        return as_of - timedelta(days=lookback_days)
