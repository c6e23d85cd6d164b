"""
Callsign lookups against the QRZ.com XML data service.

Docs: https://www.qrz.com/XML/current_spec.html
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol
from xml.parsers.expat import ExpatError

import aiohttp
import xmltodict

from qsolog.constants import PROGRAM_ID, QRZ_TIMEOUT_S, QRZ_XML_URL
from qsolog.enums import Validity
from qsolog.version import VERSION

logger = logging.getLogger(__name__)


class AuthError(RuntimeError):
    """
    Logging in to the lookup service failed
    """


class CallsignLookup(Protocol):
    async def login(self, username: str, password: str) -> str:
        """
        Log in and return a session key. Raises AuthError if that didn't work.
        """
        ...

    async def lookup(self, session: str, callsign: str) -> Validity:
        """
        Check a callsign. Never raises; anything that isn't a clear answer is
        Validity.UNKNOWN.
        """
        ...


def _database(xml: str) -> dict[str, Any]:
    """
    Parse a reply and return what's inside <QRZDatabase>. Raises ExpatError on junk.
    """
    db = xmltodict.parse(xml).get("QRZDatabase")
    return db if isinstance(db, dict) else {}


def parse_session_key(xml: str) -> str:
    """
    Pull the session key out of a login reply
    """
    try:
        session = _database(xml).get("Session")
    except ExpatError as e:
        raise AuthError(f"Unreadable reply from QRZ: {e}")

    if not isinstance(session, dict):
        session = {}

    key = session.get("Key")
    if key:
        return key
    raise AuthError(f"QRZ login failed: {session.get('Error') or 'no session key'}")


def parse_lookup(xml: str) -> Validity:
    """
    Turn a callsign lookup reply into a Validity. A <Callsign> with a <call> in it is a
    match, an <Error> without one is a miss, anything else we can't tell.
    """
    try:
        db = _database(xml)
    except ExpatError:
        logger.warning(f"Unparseable lookup reply: {xml[:100]!r}")
        return Validity.UNKNOWN

    callsign = db.get("Callsign") or {}
    session = db.get("Session") or {}
    if isinstance(callsign, dict) and callsign.get("call"):
        return Validity.VALID
    elif isinstance(session, dict) and session.get("Error"):
        logger.debug(f"Lookup error: {session['Error']}")
        return Validity.INVALID

    logger.warning(f"Unrecognized lookup reply: {xml[:100]!r}")
    return Validity.UNKNOWN


@dataclass
class QrzClient:
    url: str = QRZ_XML_URL
    timeout_s: float = QRZ_TIMEOUT_S
    agent: str = f"{PROGRAM_ID}-{VERSION}"

    async def _fetch(self, params: dict[str, str]) -> str:
        """
        GET the XML endpoint with the given query parameters and return the body
        """
        timeout = aiohttp.ClientTimeout(total=self.timeout_s)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(self.url, params=params) as response:
                response.raise_for_status()
                return await response.text()

    async def login(self, username: str, password: str) -> str:
        params = {"username": username, "password": password, "agent": self.agent}
        try:
            xml = await self._fetch(params)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AuthError(f"Unable to reach QRZ: {e}")

        key = parse_session_key(xml)
        logger.debug(f"Logged in to QRZ as {username}")
        return key

    async def lookup(self, session: str, callsign: str) -> Validity:
        try:
            xml = await self._fetch({"s": session, "callsign": callsign})
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Lookup of {callsign} failed: {e}")
            return Validity.UNKNOWN

        result = parse_lookup(xml)
        logger.debug(f"{callsign}: {result.name}")
        return result
