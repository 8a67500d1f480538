"""Tests for baseline record models and writers."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from cost_baseline_engine.exceptions import BaselineWriteError
from cost_baseline_engine.storage.dynamodb import DynamoDBBaselineWriter
from cost_baseline_engine.storage.memory import InMemoryBaselineWriter
from cost_baseline_engine.storage.models import (
    AnomalyBaseline,
    BaselineRecordBase,
    BucketProfile,
    RollingAverageBaseline,
    SeasonalBaseline,
    ServiceBaseline,
    parse_baseline_record,
)

CALC_DATE = date(2024, 6, 1)


def create_rolling(subscription_id: str = "sub-A", **overrides) -> RollingAverageBaseline:
    fields = {
        "subscription_id": subscription_id,
        "calculation_date": CALC_DATE,
        "period": "Last 60 days",
        "data_points": 60,
        "data_quality": "High",
        "avg_7_day": 101.5,
        "avg_30_day": 100.0,
        "standard_deviation": 4.25,
    }
    fields.update(overrides)
    return RollingAverageBaseline(**fields)


def create_service(service_name: str = "Amazon EC2", platform: bool = False) -> ServiceBaseline:
    return ServiceBaseline(
        subscription_id="sub-A",
        calculation_date=CALC_DATE,
        period="Last 60 days",
        data_points=20,
        data_quality="Medium",
        service_name=service_name,
        is_platform_managed=platform,
        avg_daily_cost=12.5,
        volatility_ratio=0.2,
        predictability="Medium",
    )


class TestBaselineRecords:
    """Tests for the baseline record models."""

    def test_keys(self):
        """Test partition and sort keys."""
        record = create_rolling()
        assert record.pk == "BASELINE#sub-A"
        assert record.sk == "RollingAverage#2024-06-01"

    def test_service_keys_include_service_and_partition(self):
        assert create_service().sk == "Service#2024-06-01#Amazon EC2#standard"
        assert create_service(platform=True).sk == "Service#2024-06-01#Amazon EC2#platform"

    def test_to_dynamodb_item(self):
        """Test that floats are stored as strings and keys are added."""
        item = create_rolling().to_dynamodb_item(ttl=1700000000)

        assert item["PK"] == "BASELINE#sub-A"
        assert item["SK"] == "RollingAverage#2024-06-01"
        assert item["baseline_type"] == "RollingAverage"
        assert item["calculation_date"] == "2024-06-01"
        assert item["avg_7_day"] == "101.5"
        assert item["data_points"] == 60
        assert item["ttl"] == 1700000000
        assert not any(isinstance(v, float) for v in item.values())

    def test_nested_profiles_serialized(self):
        record = SeasonalBaseline(
            subscription_id="sub-A",
            calculation_date=CALC_DATE,
            period="Last 90 days",
            data_points=90,
            data_quality="High",
            day_of_week_profile=[
                BucketProfile(bucket=0, label="Sunday", avg_cost=10.5, std_dev=1.0, observations=13)
            ],
        )
        item = record.to_dynamodb_item()

        assert item["day_of_week_profile"][0]["avg_cost"] == "10.5"
        assert item["day_of_week_profile"][0]["observations"] == 13
        assert "ttl" not in item

    @pytest.mark.parametrize(
        "record",
        [
            create_rolling(),
            create_service(),
            AnomalyBaseline(
                subscription_id="sub-A",
                calculation_date=CALC_DATE,
                period="Last 30 days",
                data_points=30,
                data_quality="High",
                day_upper_threshold=12.5,
                recent_anomaly_count=2,
            ),
        ],
    )
    def test_parse_dynamodb_item(self, record):
        """Test that stored items come back as the right variant."""
        item = record.to_dynamodb_item(ttl=123)
        # DynamoDB returns numbers as Decimal
        item = {k: Decimal(v) if isinstance(v, int) and not isinstance(v, bool) else v for k, v in item.items()}

        parsed = parse_baseline_record(item)

        assert type(parsed) is type(record)
        assert parsed == record

    def test_from_dynamodb_item_on_variant(self):
        """Test that a variant rebuilds itself from its stored item."""
        record = create_service(platform=True)

        restored = ServiceBaseline.from_dynamodb_item(record.to_dynamodb_item(ttl=123))

        assert restored == record

    def test_from_dynamodb_item_on_base_picks_variant(self):
        item = create_rolling().to_dynamodb_item()

        restored = BaselineRecordBase.from_dynamodb_item(item)

        assert isinstance(restored, RollingAverageBaseline)
        assert restored.avg_7_day == 101.5

    def test_from_dynamodb_item_rejects_other_variant(self):
        with pytest.raises(ValueError):
            ServiceBaseline.from_dynamodb_item(create_rolling().to_dynamodb_item())

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            parse_baseline_record({"baseline_type": "Forecast", "subscription_id": "sub-A"})

    def test_records_are_immutable(self):
        record = create_rolling()
        with pytest.raises(ValueError):
            record.avg_7_day = 0.0


class TestInMemoryBaselineWriter:
    """Tests for InMemoryBaselineWriter."""

    def test_duplicate_writes_overwrite(self):
        """Test that writing the same record twice keeps one copy."""
        writer = InMemoryBaselineWriter()
        writer.write_baseline(create_rolling())
        writer.write_baseline(create_rolling(avg_7_day=99.0))

        assert len(writer) == 1
        assert writer.write_count == 2
        assert writer.get_baselines("sub-A")[0].avg_7_day == 99.0

    def test_filters(self):
        writer = InMemoryBaselineWriter()
        count = writer.write_baselines(
            [create_rolling(), create_service("Amazon EC2"), create_service("Amazon S3")]
        )

        assert count == 3
        assert len(writer.get_baselines("sub-A", baseline_type="Service")) == 2
        assert len(writer.get_baselines("sub-A", calculation_date=date(2024, 5, 1))) == 0
        assert writer.get_baselines("sub-B") == []


class TestDynamoDBBaselineWriter:
    """Tests for DynamoDBBaselineWriter."""

    @pytest.fixture
    def table(self):
        return MagicMock()

    @pytest.fixture
    def writer(self, table):
        resource = MagicMock()
        resource.Table.return_value = table
        return DynamoDBBaselineWriter("baselines", retention_days=30, dynamodb_resource=resource)

    def test_write_baseline(self, writer, table):
        writer.write_baseline(create_rolling())

        item = table.put_item.call_args.kwargs["Item"]
        assert item["PK"] == "BASELINE#sub-A"
        assert item["ttl"] > 0

    def test_write_baselines_uses_batch_writer(self, writer, table):
        batch = table.batch_writer.return_value.__enter__.return_value

        written = writer.write_baselines([create_rolling(), create_service()])

        assert written == 2
        assert batch.put_item.call_count == 2
        table.batch_writer.assert_called_once_with(overwrite_by_pkeys=["PK", "SK"])

    def test_write_baselines_empty(self, writer, table):
        assert writer.write_baselines([]) == 0
        table.batch_writer.assert_not_called()

    def test_client_error_wrapped(self, writer, table):
        """Test that DynamoDB errors surface as BaselineWriteError."""
        table.put_item.side_effect = ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}},
            "PutItem",
        )

        with pytest.raises(BaselineWriteError) as exc_info:
            writer.write_baseline(create_rolling())
        assert exc_info.value.subscription_id == "sub-A"

    def test_no_ttl_when_retention_disabled(self, table):
        resource = MagicMock()
        resource.Table.return_value = table
        writer = DynamoDBBaselineWriter("baselines", retention_days=None, dynamodb_resource=resource)

        writer.write_baseline(create_rolling())

        assert "ttl" not in table.put_item.call_args.kwargs["Item"]

    def test_get_baselines_paginates(self, writer, table):
        """Test that queries follow LastEvaluatedKey."""
        first = create_rolling().to_dynamodb_item()
        second = create_service().to_dynamodb_item()
        table.query.side_effect = [
            {"Items": [first], "LastEvaluatedKey": {"PK": first["PK"], "SK": first["SK"]}},
            {"Items": [second]},
        ]

        records = writer.get_baselines("sub-A")

        assert [r.baseline_type for r in records] == ["RollingAverage", "Service"]
        assert table.query.call_count == 2
        assert "ExclusiveStartKey" in table.query.call_args.kwargs

    def test_get_baselines_date_without_type(self, writer, table):
        """Test that a date filter without a type matches the in-memory writer."""
        current = create_rolling().to_dynamodb_item()
        older = create_rolling().model_copy(update={"calculation_date": date(2024, 5, 1)})
        table.query.return_value = {"Items": [older.to_dynamodb_item(), current]}
        memory = InMemoryBaselineWriter()
        memory.write_baselines([older, create_rolling()])

        records = writer.get_baselines("sub-A", calculation_date=CALC_DATE)

        assert [r.calculation_date for r in records] == [CALC_DATE]
        assert records == memory.get_baselines("sub-A", calculation_date=CALC_DATE)
