"""
Stand-ins for the QRZ lookup service
"""

import asyncio
from typing import Optional

from qsolog.enums import Validity
from qsolog.qrz import AuthError


class FakeLookup:
    def __init__(
        self,
        results: Optional[dict[str, Validity]] = None,
        delays: Optional[dict[str, float]] = None,
        password: str = "hunter2",
    ) -> None:
        self.results = results or {}
        self.delays = delays or {}
        self.password = password

        # (session, call) for every lookup, in the order they were made
        self.lookups: list[tuple[str, str]] = []
        self.logins = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def login(self, username: str, password: str) -> str:
        self.logins += 1
        await asyncio.sleep(0)
        if password != self.password:
            raise AuthError("Username/password incorrect")
        return f"key-{self.logins}"

    async def lookup(self, session: str, callsign: str) -> Validity:
        self.lookups.append((session, callsign))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(callsign, 0))
        finally:
            self.in_flight -= 1
        return self.results.get(callsign, Validity.VALID)


class GatedLookup(FakeLookup):
    """
    Lookups block until the test releases them
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.gate = asyncio.Event()
        self.waiting = asyncio.Event()

    async def lookup(self, session: str, callsign: str) -> Validity:
        self.lookups.append((session, callsign))
        self.waiting.set()
        await self.gate.wait()
        return self.results.get(callsign, Validity.VALID)
