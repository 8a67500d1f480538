"""AWS Cost Explorer cost series reader.

Cost Explorer API charges $0.01 per request, so each subscription is read
with a single paginated query covering the whole lookback window.
"""

from __future__ import annotations

from datetime import date, timedelta

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from cost_baseline_engine.collectors.base import (
    CostObservation,
    CostSeriesReader,
    aggregate_observations,
)
from cost_baseline_engine.exceptions import UpstreamUnavailableError

logger = structlog.get_logger(__name__)

UNKNOWN_SERVICE = "Unknown"


class CostExplorerSeriesReader(CostSeriesReader):
    """
    Read daily cost per service from AWS Cost Explorer.

    Each linked account is treated as a subscription. Costs are grouped by
    SERVICE and by a cost allocation tag; resources whose tag value is in
    ``platform_tag_values`` form the platform-managed partition.
    """

    reader_name = "cost_explorer"

    def __init__(
        self,
        region: str = "us-east-1",
        metric: str = "UnblendedCost",
        platform_tag_key: str = "platform-managed",
        platform_tag_values: list[str] | None = None,
        ce_client: boto3.client | None = None,
    ):
        """
        Initialize the Cost Explorer reader.

        Args:
            region: AWS region for the Cost Explorer API.
            metric: Cost metric to read (UnblendedCost, AmortizedCost, ...).
            platform_tag_key: Tag key marking platform-managed resources.
            platform_tag_values: Tag values (case-insensitive) that count as platform-managed.
            ce_client: Optional boto3 Cost Explorer client.
        """
        self.region = region
        self.metric = metric
        self.platform_tag_key = platform_tag_key
        self.platform_tag_values = {
            v.lower() for v in (platform_tag_values or ["true", "yes", "1"])
        }
        self._ce_client = ce_client

    @property
    def ce_client(self) -> boto3.client:
        """Get or create Cost Explorer client."""
        if self._ce_client is None:
            self._ce_client = boto3.client("ce", region_name=self.region)
        return self._ce_client

    def fetch_daily_costs(
        self,
        subscription_ids: list[str],
        window_days: int,
        end_date: date | None = None,
    ) -> list[CostObservation]:
        """
        Fetch daily costs per service for each subscription.

        Args:
            subscription_ids: Linked account IDs to read.
            window_days: Days before end_date to include.
            end_date: Exclusive end date. Defaults to today.

        Returns:
            Aggregated observations, one per (date, subscription, service, partition).
        """
        if end_date is None:
            end_date = date.today()
        start_date = end_date - timedelta(days=window_days)

        observations: list[CostObservation] = []
        for subscription_id in subscription_ids:
            observations.extend(self._fetch_subscription(subscription_id, start_date, end_date))

        return aggregate_observations(observations)

    def _fetch_subscription(
        self, subscription_id: str, start_date: date, end_date: date
    ) -> list[CostObservation]:
        """Query one linked account, following NextPageToken."""
        request = {
            "TimePeriod": {
                "Start": start_date.isoformat(),
                "End": end_date.isoformat(),
            },
            "Granularity": "DAILY",
            "Metrics": [self.metric],
            "Filter": {
                "Dimensions": {"Key": "LINKED_ACCOUNT", "Values": [subscription_id]}
            },
            "GroupBy": [
                {"Type": "DIMENSION", "Key": "SERVICE"},
                {"Type": "TAG", "Key": self.platform_tag_key},
            ],
        }

        observations: list[CostObservation] = []
        pages = 0
        try:
            while True:
                response = self.ce_client.get_cost_and_usage(**request)
                pages += 1
                observations.extend(self._parse_results(subscription_id, response))

                next_token = response.get("NextPageToken")
                if not next_token:
                    break
                request["NextPageToken"] = next_token
        except (ClientError, BotoCoreError) as e:
            logger.warning(
                "cost_explorer_query_failed",
                subscription_id=subscription_id,
                error=str(e),
            )
            raise UpstreamUnavailableError(subscription_id, str(e)) from e

        logger.info(
            "cost_explorer_query_complete",
            subscription_id=subscription_id,
            pages=pages,
            observations=len(observations),
        )
        return observations

    def _parse_results(self, subscription_id: str, response: dict) -> list[CostObservation]:
        observations = []
        for result in response.get("ResultsByTime", []):
            cost_date = date.fromisoformat(result["TimePeriod"]["Start"])
            for group in result.get("Groups", []):
                keys = group.get("Keys", [])
                service_name = keys[0] if keys and keys[0] else UNKNOWN_SERVICE
                tag_key = keys[1] if len(keys) > 1 else ""

                amount = float(group["Metrics"][self.metric]["Amount"])
                # Credits and refunds can produce negative amounts; zero-cost days are kept
                if amount < 0:
                    continue

                observations.append(
                    CostObservation(
                        date=cost_date,
                        subscription_id=subscription_id,
                        service_name=service_name,
                        cost=amount,
                        is_platform_managed=self._is_platform_tag(tag_key),
                    )
                )
        return observations

    def _is_platform_tag(self, tag_key: str) -> bool:
        """
        Interpret a TAG group key.

        Cost Explorer returns tag groups as ``"<key>$<value>"``; untagged
        resources come back as ``"<key>$"``.
        """
        _, _, value = tag_key.partition("$")
        return value.lower() in self.platform_tag_values

    def discover_subscription_ids(self, window_days: int) -> list[str]:
        """List linked accounts with cost data in the window."""
        end_date = date.today()
        start_date = end_date - timedelta(days=window_days)
        request = {
            "TimePeriod": {
                "Start": start_date.isoformat(),
                "End": end_date.isoformat(),
            },
            "Dimension": "LINKED_ACCOUNT",
            "Context": "COST_AND_USAGE",
        }

        account_ids: list[str] = []
        try:
            while True:
                response = self.ce_client.get_dimension_values(**request)
                account_ids.extend(v["Value"] for v in response.get("DimensionValues", []))
                next_token = response.get("NextPageToken")
                if not next_token:
                    break
                request["NextPageToken"] = next_token
        except (ClientError, BotoCoreError) as e:
            raise UpstreamUnavailableError("*", str(e)) from e

        return sorted(set(account_ids))
