"""Daily cost series built from raw cost observations."""

from dataclasses import dataclass, field
from datetime import date

from cost_baseline_engine.collectors.base import CostObservation


@dataclass(frozen=True)
class DailyCostPoint:
    """Total cost for one subscription and day, split by partition."""

    date: date
    total_cost: float
    platform_cost: float = 0.0
    standard_cost: float = 0.0


@dataclass(frozen=True)
class DailySeries:
    """
    Daily cost points for a subscription, sorted ascending by date.

    Missing days are absent rather than zero-filled.
    """

    subscription_id: str
    points: tuple[DailyCostPoint, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def totals(self) -> list[float]:
        return [p.total_cost for p in self.points]

    @property
    def platform_costs(self) -> list[float]:
        return [p.platform_cost for p in self.points]

    @property
    def standard_costs(self) -> list[float]:
        return [p.standard_cost for p in self.points]

    def since(self, start: date) -> "DailySeries":
        """Sub-window of points on or after ``start``."""
        return DailySeries(
            subscription_id=self.subscription_id,
            points=tuple(p for p in self.points if p.date >= start),
        )


@dataclass(frozen=True)
class ServiceSeries:
    """Daily cost points for one (subscription, service, partition) key."""

    subscription_id: str
    service_name: str
    is_platform_managed: bool
    points: tuple[tuple[date, float], ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def costs(self) -> list[float]:
        return [cost for _, cost in self.points]

    def since(self, start: date) -> "ServiceSeries":
        """Sub-window of points on or after ``start``."""
        return ServiceSeries(
            subscription_id=self.subscription_id,
            service_name=self.service_name,
            is_platform_managed=self.is_platform_managed,
            points=tuple(p for p in self.points if p[0] >= start),
        )


def build_daily_series(observations: list[CostObservation]) -> dict[str, DailySeries]:
    """
    Group observations into one DailySeries per subscription.

    Service costs are summed into daily totals and the platform/standard
    partition sub-totals.
    """
    by_subscription: dict[str, dict[date, list[float]]] = {}
    for obs in observations:
        days = by_subscription.setdefault(obs.subscription_id, {})
        # [total, platform, standard]
        bucket = days.setdefault(obs.date, [0.0, 0.0, 0.0])
        bucket[0] += obs.cost
        if obs.is_platform_managed:
            bucket[1] += obs.cost
        else:
            bucket[2] += obs.cost

    return {
        subscription_id: DailySeries(
            subscription_id=subscription_id,
            points=tuple(
                DailyCostPoint(
                    date=day,
                    total_cost=costs[0],
                    platform_cost=costs[1],
                    standard_cost=costs[2],
                )
                for day, costs in sorted(days.items())
            ),
        )
        for subscription_id, days in sorted(by_subscription.items())
    }


def build_service_series(
    observations: list[CostObservation],
) -> dict[tuple[str, str, bool], ServiceSeries]:
    """Group observations into one ServiceSeries per (subscription, service, partition)."""
    by_key: dict[tuple[str, str, bool], dict[date, float]] = {}
    for obs in observations:
        key = (obs.subscription_id, obs.service_name, obs.is_platform_managed)
        days = by_key.setdefault(key, {})
        days[obs.date] = days.get(obs.date, 0.0) + obs.cost

    return {
        key: ServiceSeries(
            subscription_id=key[0],
            service_name=key[1],
            is_platform_managed=key[2],
            points=tuple(sorted(days.items())),
        )
        for key, days in sorted(by_key.items())
    }
