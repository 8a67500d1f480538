"""DynamoDB storage for baseline records."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource

import boto3
import structlog
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from cost_baseline_engine.exceptions import BaselineWriteError
from cost_baseline_engine.storage.base import BaselineWriter
from cost_baseline_engine.storage.models import BaselineRecord, parse_baseline_record

logger = structlog.get_logger(__name__)


class DynamoDBBaselineWriter(BaselineWriter):
    """DynamoDB storage client for baseline records."""

    def __init__(
        self,
        table_name: str,
        retention_days: int | None = None,
        dynamodb_resource: DynamoDBServiceResource | None = None,
    ):
        """
        Initialize DynamoDB storage.

        Args:
            table_name: Name of the DynamoDB table.
            retention_days: Days until records expire via TTL. None disables TTL.
            dynamodb_resource: Optional boto3 DynamoDB resource. If None, creates one.
        """
        self.dynamodb = dynamodb_resource or boto3.resource("dynamodb")
        self.table = self.dynamodb.Table(table_name)
        self.table_name = table_name
        self.retention_days = retention_days

    def _ttl(self) -> int | None:
        if not self.retention_days:
            return None
        return int((datetime.now(UTC) + timedelta(days=self.retention_days)).timestamp())

    # =========================================================================
    # Writes
    # =========================================================================

    def write_baseline(self, record: BaselineRecord) -> None:
        """Store a baseline record, replacing any item with the same key."""
        try:
            self.table.put_item(Item=record.to_dynamodb_item(ttl=self._ttl()))
        except (ClientError, BotoCoreError) as e:
            raise BaselineWriteError(record.subscription_id, str(e)) from e

    def write_baselines(self, records: Iterable[BaselineRecord]) -> int:
        """
        Store multiple records in a batch.

        Returns:
            Number of records written.
        """
        records = list(records)
        if not records:
            return 0

        ttl = self._ttl()
        try:
            with self.table.batch_writer(overwrite_by_pkeys=["PK", "SK"]) as batch:
                for record in records:
                    batch.put_item(Item=record.to_dynamodb_item(ttl=ttl))
        except (ClientError, BotoCoreError) as e:
            raise BaselineWriteError(records[0].subscription_id, str(e)) from e

        logger.debug("baselines_written", table=self.table_name, count=len(records))
        return len(records)

    # =========================================================================
    # Reads
    # =========================================================================

    def get_baselines(
        self,
        subscription_id: str,
        baseline_type: str | None = None,
        calculation_date: date | None = None,
    ) -> list[BaselineRecord]:
        """
        Get stored baselines for a subscription.

        Args:
            subscription_id: Subscription to read.
            baseline_type: Optional type filter (RollingAverage, Seasonal, Service, Anomaly).
            calculation_date: Optional date filter. Without baseline_type it is applied
                after the query, since the date is not a sort key prefix.

        Returns:
            List of baseline records, ordered by sort key.
        """
        condition = Key("PK").eq(f"BASELINE#{subscription_id}")
        if baseline_type and calculation_date:
            condition = condition & Key("SK").begins_with(
                f"{baseline_type}#{calculation_date.isoformat()}"
            )
        elif baseline_type:
            condition = condition & Key("SK").begins_with(f"{baseline_type}#")

        query_kwargs: dict = {"KeyConditionExpression": condition}
        response = self.table.query(**query_kwargs)
        items = list(response.get("Items", []))

        while "LastEvaluatedKey" in response:
            query_kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
            response = self.table.query(**query_kwargs)
            items.extend(response.get("Items", []))

        records = [parse_baseline_record(item) for item in items]
        if calculation_date and not baseline_type:
            records = [r for r in records if r.calculation_date == calculation_date]
        return records
