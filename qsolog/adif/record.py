import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Callable, Optional, TypeVar, Union

from qsolog.adif.util import make_field, parse_date, parse_time
from qsolog.enums import KnownField, Validity

logger = logging.getLogger(__name__)

T = TypeVar("T")

_KNOWN_NAMES = {f.value for f in KnownField}


@dataclass
class AdifRecord:
    # Raw fields, as a dict. Order is kept for writing the record back out.
    fields: dict[str, str] = field(default_factory=dict)

    # Result of looking up the callsign, never written out
    validity: Validity = Validity.UNKNOWN

    def __str__(self) -> str:
        buf = ""
        for k, v in self.fields.items():
            buf += make_field(k, v)
        buf += "<EOR>"
        return buf

    def __getitem__(self, key: Union[str, KnownField]) -> str:
        return self.fields[_name(key)]

    def __setitem__(self, key: Union[str, KnownField], value: str) -> None:
        self.fields[_name(key)] = value

    def __contains__(self, key: Union[str, KnownField]) -> bool:
        return _name(key) in self.fields

    def get(self, key: Union[str, KnownField], default: str = "") -> str:
        """
        Value of a field, or the default (empty string) if the record doesn't have it
        """
        return self.fields.get(_name(key), default)

    @property
    def call(self) -> str:
        return self.get(KnownField.CALL)

    @property
    def band(self) -> str:
        return self.get(KnownField.BAND)

    @property
    def mode(self) -> str:
        return self.get(KnownField.MODE)

    @property
    def extra(self) -> dict[str, str]:
        """
        Every field that isn't one of the well-known KnownField ones
        """
        return {k: v for k, v in self.fields.items() if k not in _KNOWN_NAMES}

    def _maybe_parse(self, field_name: str, parse: Callable[[str], T]) -> Optional[T]:
        f = self.fields.get(field_name)
        if not f:
            return None

        try:
            return parse(f.strip())
        except ValueError:
            logger.debug(f"Unparseable {field_name} {f!r} in {self}")
            return None

    # Accessor methods which parse fields into Python-native types, e.g. dates and times
    @property
    def qso_date(self) -> Optional[date]:
        return self._maybe_parse(KnownField.QSO_DATE.value, parse_date)

    @property
    def time_on(self) -> Optional[time]:
        return self._maybe_parse(KnownField.TIME_ON.value, parse_time)

    @property
    def datetime(self) -> Optional[datetime]:
        """
        Returns a datetime based on the qso_date and the time_on. Returns None if either
        of those are None.
        """
        d = self.qso_date
        t = self.time_on
        if d is None or t is None:
            return None

        return datetime(
            d.year, d.month, d.day, t.hour, t.minute, t.second, t.microsecond
        )


def _name(key: Union[str, KnownField]) -> str:
    if isinstance(key, KnownField):
        return key.value
    return key
