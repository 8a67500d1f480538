"""
Baseline Runner Lambda Handler.

This Lambda is triggered by EventBridge on a schedule to:
1. Read daily costs per subscription from AWS Cost Explorer
2. Compute rolling, seasonal, service and anomaly baselines
3. Store the baseline records in DynamoDB
"""

import os
from datetime import date
from typing import Any

import structlog

from cost_baseline_engine.analysis.engine import BaselineEngine
from cost_baseline_engine.collectors.aws_cost_explorer import CostExplorerSeriesReader
from cost_baseline_engine.config import load_config
from cost_baseline_engine.config.schema import Config
from cost_baseline_engine.exceptions import BaselineEngineError
from cost_baseline_engine.logging import setup_logging
from cost_baseline_engine.storage.dynamodb import DynamoDBBaselineWriter

logger = structlog.get_logger(__name__)


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Lambda handler for the baseline run.

    Environment variables:
    - BASELINE_TABLE_NAME: DynamoDB table name (overrides storage.table_name)
    - CONFIG_ENV: Environment (dev, staging, prod)

    Event parameters:
    - subscription_ids: list[str] - Subscriptions to process (default: config, then discovery)
    - as_of: str - Calculation date in YYYY-MM-DD format (default: today)
    - dry_run: bool - Compute baselines but don't store them

    Returns:
        statusCode 200 when every subscription succeeded, 207 when some failed,
        400 when as_of is not a YYYY-MM-DD date, 500 when the run could not start.
    """
    config = load_config()
    setup_logging(config.logging)

    dry_run = bool(event.get("dry_run", False))

    # Parse the calculation date
    try:
        as_of = date.fromisoformat(event["as_of"]) if event.get("as_of") else date.today()
    except (TypeError, ValueError) as e:
        logger.warning("invalid_as_of", as_of=event.get("as_of"), error=str(e))
        return {"statusCode": 400, "body": {"error": f"Invalid as_of: {e}", "dry_run": dry_run}}

    subscription_ids = event.get("subscription_ids") or config.source.subscription_ids or None

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        run_date=as_of.isoformat(), environment=config.environment
    )
    logger.info("baseline_run_started", dry_run=dry_run, subscriptions=subscription_ids)

    engine = build_engine(config)

    try:
        result = engine.run(subscription_ids=subscription_ids, as_of=as_of, dry_run=dry_run)
    except BaselineEngineError as e:
        logger.exception("baseline_run_failed")
        return {"statusCode": 500, "body": {"error": str(e), "dry_run": dry_run}}

    body = result.to_dict()
    body["dry_run"] = dry_run
    return {"statusCode": 207 if result.has_failures else 200, "body": body}


def build_engine(config: Config) -> BaselineEngine:
    """Wire the Cost Explorer reader and DynamoDB writer into an engine."""
    table_name = os.environ.get("BASELINE_TABLE_NAME", config.storage.table_name)

    reader = CostExplorerSeriesReader(
        region=config.aws.region,
        metric=config.source.metric,
        platform_tag_key=config.source.platform_tag_key,
        platform_tag_values=config.source.platform_tag_values,
    )
    writer = DynamoDBBaselineWriter(
        table_name=table_name,
        retention_days=config.storage.retention_days,
    )
    return BaselineEngine(reader=reader, writer=writer, config=config.baselines)
