"""Storage layer for baseline records."""

from cost_baseline_engine.storage.models import (
    AnomalyBaseline,
    BaselineRecord,
    BucketProfile,
    RollingAverageBaseline,
    SeasonalBaseline,
    ServiceBaseline,
    parse_baseline_record,
)
from cost_baseline_engine.storage.base import BaselineWriter
from cost_baseline_engine.storage.memory import InMemoryBaselineWriter
from cost_baseline_engine.storage.dynamodb import DynamoDBBaselineWriter

__all__ = [
    "BaselineRecord",
    "RollingAverageBaseline",
    "SeasonalBaseline",
    "ServiceBaseline",
    "AnomalyBaseline",
    "BucketProfile",
    "parse_baseline_record",
    "BaselineWriter",
    "InMemoryBaselineWriter",
    "DynamoDBBaselineWriter",
]
