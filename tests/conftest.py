"""Pytest configuration and fixtures."""

from datetime import date, timedelta

import pytest

from cost_baseline_engine.analysis.series import DailyCostPoint, DailySeries, ServiceSeries
from cost_baseline_engine.collectors.base import CostObservation


CALCULATION_DATE = date(2024, 6, 1)


def _make_daily_series(
    costs: list[float],
    subscription_id: str = "sub-A",
    end_date: date = CALCULATION_DATE,
    platform_share: float = 0.0,
) -> DailySeries:
    """Build a contiguous daily series ending the day before end_date."""
    start = end_date - timedelta(days=len(costs))
    return DailySeries(
        subscription_id=subscription_id,
        points=tuple(
            DailyCostPoint(
                date=start + timedelta(days=i),
                total_cost=cost,
                platform_cost=cost * platform_share,
                standard_cost=cost * (1 - platform_share),
            )
            for i, cost in enumerate(costs)
        ),
    )


def _make_service_series(
    costs: list[float],
    service_name: str = "Amazon EC2",
    subscription_id: str = "sub-A",
    is_platform_managed: bool = False,
    end_date: date = CALCULATION_DATE,
) -> ServiceSeries:
    """Build a contiguous service series ending the day before end_date."""
    start = end_date - timedelta(days=len(costs))
    return ServiceSeries(
        subscription_id=subscription_id,
        service_name=service_name,
        is_platform_managed=is_platform_managed,
        points=tuple((start + timedelta(days=i), cost) for i, cost in enumerate(costs)),
    )


def _make_observations(
    cost_by_service: dict[str, float],
    days: int,
    subscription_id: str = "sub-A",
    end_date: date = CALCULATION_DATE,
    platform_services: set[str] | None = None,
) -> list[CostObservation]:
    """Constant daily costs per service for the last ``days`` days."""
    platform_services = platform_services or set()
    observations = []
    for offset in range(days, 0, -1):
        day = end_date - timedelta(days=offset)
        for service, cost in cost_by_service.items():
            observations.append(
                CostObservation(
                    date=day,
                    subscription_id=subscription_id,
                    service_name=service,
                    cost=cost,
                    is_platform_managed=service in platform_services,
                )
            )
    return observations


@pytest.fixture
def make_daily_series():
    """Factory for contiguous daily series."""
    return _make_daily_series


@pytest.fixture
def make_service_series():
    """Factory for contiguous service series."""
    return _make_service_series


@pytest.fixture
def make_observations():
    """Factory for constant per-service observations."""
    return _make_observations


@pytest.fixture
def calculation_date():
    """Fixed calculation date so tests don't depend on the wall clock."""
    return CALCULATION_DATE


@pytest.fixture
def sample_cost_by_service():
    """Sample daily cost breakdown by service."""
    return {
        "Amazon EC2": 45.50,
        "Amazon RDS": 32.20,
        "AWS Lambda": 12.30,
        "Amazon WorkSpaces": 20.00,
    }


@pytest.fixture
def sample_config_dict():
    """Sample configuration dictionary."""
    return {
        "project_name": "test-baselines",
        "environment": "dev",
        "aws": {
            "region": "us-east-1",
        },
        "source": {
            "subscription_ids": ["111111111111", "222222222222"],
            "platform_tag_key": "avd",
        },
        "storage": {
            "table_name": "test-baselines",
            "retention_days": 30,
        },
        "baselines": {
            "lookback_days": 90,
            "rolling_average": {"lookback_days": 60},
            "anomaly": {"sigma_multiplier": 2.5},
            "service": {"min_data_points": 10},
        },
    }
