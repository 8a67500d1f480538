"""Base classes for cost series readers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class CostObservation:
    """Aggregated cost for one subscription, service and day."""

    date: date
    subscription_id: str
    service_name: str
    cost: float
    is_platform_managed: bool = False

    def __post_init__(self) -> None:
        if not self.subscription_id:
            raise ValueError("subscription_id must not be empty")
        if self.cost < 0:
            raise ValueError(f"cost must be non-negative, got {self.cost}")

    @property
    def key(self) -> tuple[date, str, str, bool]:
        """Uniqueness key for pre-aggregation."""
        return (self.date, self.subscription_id, self.service_name, self.is_platform_managed)


def aggregate_observations(observations: list[CostObservation]) -> list[CostObservation]:
    """
    Sum observations sharing the same key.

    Returns one observation per (date, subscription, service, partition),
    sorted by date then subscription then service.
    """
    totals: dict[tuple[date, str, str, bool], float] = {}
    for obs in observations:
        totals[obs.key] = totals.get(obs.key, 0.0) + obs.cost

    return [
        CostObservation(
            date=key[0],
            subscription_id=key[1],
            service_name=key[2],
            is_platform_managed=key[3],
            cost=cost,
        )
        for key, cost in sorted(totals.items(), key=lambda item: item[0])
    ]


class CostSeriesReader(ABC):
    """Abstract base class for daily cost sources."""

    @abstractmethod
    def fetch_daily_costs(
        self,
        subscription_ids: list[str],
        window_days: int,
        end_date: date | None = None,
    ) -> list[CostObservation]:
        """
        Fetch daily cost observations for a bounded window.

        Args:
            subscription_ids: Subscriptions to read.
            window_days: Number of days before end_date to include.
            end_date: Exclusive end of the window. Defaults to today.

        Returns:
            At most one observation per key. An empty list is not an error.

        Raises:
            UpstreamUnavailableError: If the source could not be queried.
        """
        pass

    @abstractmethod
    def discover_subscription_ids(self, window_days: int) -> list[str]:
        """Return the subscriptions that have cost data in the window."""
        pass

    @property
    @abstractmethod
    def reader_name(self) -> str:
        """Return the name of this reader."""
        pass
