"""In-memory baseline writer for tests and dry runs."""

from datetime import date

from cost_baseline_engine.storage.base import BaselineWriter
from cost_baseline_engine.storage.models import BaselineRecord


class InMemoryBaselineWriter(BaselineWriter):
    """Keeps records keyed by (pk, sk); a repeated write replaces the earlier one."""

    def __init__(self) -> None:
        self._records: dict[tuple[str, str], BaselineRecord] = {}
        self.write_count = 0

    def write_baseline(self, record: BaselineRecord) -> None:
        self._records[(record.pk, record.sk)] = record
        self.write_count += 1

    def get_baselines(
        self,
        subscription_id: str,
        baseline_type: str | None = None,
        calculation_date: date | None = None,
    ) -> list[BaselineRecord]:
        """Return stored records for a subscription, sorted by sort key."""
        return [
            record
            for (pk, sk), record in sorted(self._records.items())
            if record.subscription_id == subscription_id
            and (baseline_type is None or record.baseline_type == baseline_type)
            and (calculation_date is None or record.calculation_date == calculation_date)
        ]

    def __len__(self) -> int:
        return len(self._records)
