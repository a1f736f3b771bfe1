"""
Protocol definitions for storage abstractions.

These protocols define the interfaces that concrete implementations must follow.
Using Protocol allows duck typing while still providing type checking support.
"""
from typing import Protocol, Optional, List, Tuple, runtime_checkable, TYPE_CHECKING

if TYPE_CHECKING:
    from tennis_picks.h2h.records import PairRecord


@runtime_checkable
class PairRepository(Protocol):
    """
    Storage abstraction for head-to-head records.

    Implementations:
    - InMemoryPairRepository (default): dict keyed by (low_id, high_id)
    - Future: document store adapter owned by the persistence layer
    """

    def get(self, key: Tuple[int, int]) -> Optional["PairRecord"]:
        """
        Load the record stored under a key.

        Args:
            key: (low_id, high_id) tuple

        Returns:
            PairRecord or None
        """
        ...

    def put(self, record: "PairRecord") -> None:
        """
        Store a record under its own (low_id, high_id).

        Args:
            record: Record to save
        """
        ...

    def delete(self, key: Tuple[int, int]) -> None:
        """Remove the record stored under a key, if any."""
        ...

    def list_records(self) -> List["PairRecord"]:
        """All stored records, ordered by key."""
        ...
