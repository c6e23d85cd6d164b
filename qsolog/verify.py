"""
Checking every QSO's callsign against a lookup service.

Lookups go out one at a time, in log order. A run stops touching records as soon as
it's been superseded, either by a newer run or by the log being replaced.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from qsolog.adif.record import AdifRecord
from qsolog.enums import Validity
from qsolog.qrz import CallsignLookup
from qsolog.store import LogStore

logger = logging.getLogger(__name__)


@dataclass
class VerificationSummary:
    valid: int = 0
    invalid: int = 0
    unknown: int = 0

    # Records without a call, never looked up
    skipped: int = 0

    superseded: bool = False

    def count(self, validity: Validity) -> None:
        if validity == Validity.VALID:
            self.valid += 1
        elif validity == Validity.INVALID:
            self.invalid += 1
        else:
            self.unknown += 1


class VerificationWorkflow:
    def __init__(self, store: LogStore, lookup: CallsignLookup) -> None:
        self.store = store
        self.lookup = lookup
        self._run = 0

    def supersede(self) -> None:
        """
        Make any run in progress stale
        """
        self._run += 1

    async def run(
        self,
        session: str,
        on_update: Optional[Callable[[AdifRecord], None]] = None,
    ) -> VerificationSummary:
        """
        Look up every record's call and store the result on the record. on_update is
        called after each result is written, so anything showing the log can redraw.
        """
        self.supersede()
        run = self._run
        generation = self.store.generation
        summary = VerificationSummary()

        def stale() -> bool:
            return run != self._run or generation != self.store.generation

        for record in self.store.all_records():
            if stale():
                break

            call = record.call.strip()
            if not call:
                summary.skipped += 1
                continue

            result = await self.lookup.lookup(session, call)

            # The log may have changed while we were waiting
            if stale():
                break

            record.validity = result
            summary.count(result)
            if on_update is not None:
                on_update(record)

        if stale():
            logger.debug(f"Verification run {run} superseded")
            summary.superseded = True

        logger.debug(
            f"Verification run {run}: {summary.valid} valid, {summary.invalid} "
            f"invalid, {summary.unknown} unknown, {summary.skipped} skipped"
        )
        return summary
