"""
The application's state for one sitting: the loaded log, how it's being viewed, and
the lookup service login.
"""

import asyncio
import logging
from typing import Callable, Optional

from qsolog.adif.codec import AdifHeader, parse, serialize, split_header
from qsolog.adif.record import AdifRecord
from qsolog.constants import EXPORT_FILENAME
from qsolog.enums import LoginState
from qsolog.qrz import AuthError, CallsignLookup
from qsolog.query import LogView
from qsolog.store import LogStore
from qsolog.verify import VerificationSummary, VerificationWorkflow

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, lookup: CallsignLookup) -> None:
        self.store = LogStore()
        self.view = LogView(self.store)
        self.workflow = VerificationWorkflow(self.store, lookup)
        self.lookup = lookup

        self.header: Optional[AdifHeader] = None
        self.token: Optional[str] = None
        self.login_state = LoginState.IDLE
        self.login_error = ""

        # The most recently started verification run
        self.verification: Optional["asyncio.Task[VerificationSummary]"] = None

        # Called with each record as its verification result comes in
        self.listeners: list[Callable[[AdifRecord], None]] = []

    def load_text(self, text: str) -> list[AdifRecord]:
        """
        Replace the log with the records parsed from text. If we're logged in, a
        verification run is started for the new log.
        """
        header, body = split_header(text)
        records = parse(body)
        self.header = header
        self.store.replace(records)
        logger.info(f"Loaded {len(records)} records")

        if self.token is not None:
            self.start_verification()
        return records

    async def login(self, username: str, password: str) -> bool:
        """
        Log in to the lookup service, replacing any previous session. On success a
        verification run of the current log is started.

        Returns:
            Whether the login worked. login_error has the reason if not.
        """
        self.token = None
        self.login_state = LoginState.LOGGING_IN
        self.login_error = ""

        try:
            token = await self.lookup.login(username, password)
        except AuthError as e:
            logger.warning(f"Login failed: {e}")
            self.login_state = LoginState.FAILED
            self.login_error = str(e)
            return False

        self.token = token
        self.login_state = LoginState.SUCCESS
        self.start_verification()
        return True

    def start_verification(self) -> "asyncio.Task[VerificationSummary]":
        """
        Kick off a verification run in the background, superseding any earlier one
        """
        if self.token is None:
            raise RuntimeError("Not logged in")

        self.workflow.supersede()
        self.verification = asyncio.create_task(
            self.workflow.run(self.token, on_update=self._notify)
        )
        self.verification.add_done_callback(_log_failure)
        return self.verification

    def _notify(self, record: AdifRecord) -> None:
        for listener in self.listeners:
            listener(record)

    def export(self) -> tuple[str, str]:
        """
        Returns:
            The log as ADI text, and a filename to save it under
        """
        header = None
        if self.header is not None:
            header = AdifHeader(
                version=self.header.version,
                comment=self.header.comment,
                other=self.header.other,
            )
        return serialize(self.store.all_records(), header), EXPORT_FILENAME


def _log_failure(task: "asyncio.Task[VerificationSummary]") -> None:
    """
    Log the exception a finished verification run raised, whether or not anything
    still awaits it
    """
    if task.cancelled():
        return
    e = task.exception()
    if e is not None:
        logger.error(f"Verification run failed: {e!r}")
