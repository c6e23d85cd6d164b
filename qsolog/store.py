import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from qsolog.adif.record import AdifRecord

logger = logging.getLogger(__name__)


@dataclass
class LogStore:
    """
    The log currently loaded. Records are owned here and handed out by reference, so
    edits and verification results show up everywhere a record is held.

    generation goes up every time the log is replaced, which lets anything iterating
    an older log notice that it's stale.
    """

    _records: list[AdifRecord] = field(default_factory=list)
    generation: int = 0

    def replace(self, records: Iterable[AdifRecord]) -> None:
        self._records = list(records)
        self.generation += 1
        logger.debug(
            f"Log replaced with {len(self._records)} records, "
            f"generation {self.generation}"
        )

    def all_records(self) -> list[AdifRecord]:
        """
        The records in load order. The list is new, the records in it are not.
        """
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AdifRecord]:
        return iter(self.all_records())
