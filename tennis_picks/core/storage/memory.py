"""
In-memory pair repository - Default storage implementation.

Records are stored under their own (low_id, high_id), so a record written
with a stale orientation stays addressable by its stale key until the repair
pass re-keys it.
"""
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from tennis_picks.h2h.records import PairRecord

logger = logging.getLogger(__name__)


class InMemoryPairRepository:
    """Dictionary-backed PairRepository."""

    def __init__(self):
        self._records: Dict[Tuple[int, int], "PairRecord"] = {}

    def get(self, key: Tuple[int, int]) -> Optional["PairRecord"]:
        return self._records.get(key)

    def put(self, record: "PairRecord") -> None:
        self._records[record.key] = record

    def delete(self, key: Tuple[int, int]) -> None:
        if self._records.pop(key, None) is not None:
            logger.debug(f"Deleted pair record {key}")

    def list_records(self) -> List["PairRecord"]:
        return [self._records[key] for key in sorted(self._records)]

    def __len__(self) -> int:
        return len(self._records)
