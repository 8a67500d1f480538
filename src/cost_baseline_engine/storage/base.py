"""Base class for baseline record sinks."""

from abc import ABC, abstractmethod
from typing import Iterable

from cost_baseline_engine.storage.models import BaselineRecord


class BaselineWriter(ABC):
    """
    Destination for computed baseline records.

    At-least-once delivery is acceptable: records are self-describing, so a
    duplicate write is detectable (and, for keyed stores, an overwrite).
    """

    @abstractmethod
    def write_baseline(self, record: BaselineRecord) -> None:
        """Persist one baseline record."""
        pass

    def write_baselines(self, records: Iterable[BaselineRecord]) -> int:
        """Persist several records. Returns the number written."""
        count = 0
        for record in records:
            self.write_baseline(record)
            count += 1
        return count
