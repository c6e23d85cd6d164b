"""
Filtering and sorting over the loaded log. Nothing here mutates the log; views are
lists of references to the store's records and get rebuilt from scratch on every call.
"""

import locale
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from qsolog.adif.record import AdifRecord
from qsolog.enums import KnownField
from qsolog.store import LogStore

logger = logging.getLogger(__name__)

# Fields the keyword search looks in
KEYWORD_FIELDS = (
    KnownField.CALL,
    KnownField.BAND,
    KnownField.MODE,
    KnownField.QSO_DATE,
)


def filter_records(
    records: Iterable[AdifRecord], keyword: str = "", band: str = "", mode: str = ""
) -> list[AdifRecord]:
    """
    Keep the records matching all of the given criteria. An empty criterion matches
    everything.

    Args:
        keyword: Case-insensitive substring of the call, band, mode or qso_date
        band: Exact band, e.g. "20m"
        mode: Exact mode, e.g. "FT8"

    Whitespace around a record's band and mode is ignored when comparing.
    """
    keyword = keyword.lower()
    result = []
    for record in records:
        if keyword and not any(
            keyword in record.get(f).lower() for f in KEYWORD_FIELDS
        ):
            continue
        if band and record.band.strip() != band:
            continue
        if mode and record.mode.strip() != mode:
            continue
        result.append(record)
    return result


def sort_records(
    records: Iterable[AdifRecord],
    field_name: Union[str, KnownField],
    ascending: bool = True,
) -> list[AdifRecord]:
    """
    Sort by a field's trimmed string value using the current locale's collation.
    Missing fields sort as empty strings. Records with equal values keep their
    relative order in both directions.

    The collation locale has to be set with locale.setlocale(locale.LC_COLLATE, ...)
    first, otherwise Python compares code points.
    """
    return sorted(
        records,
        key=lambda r: locale.strxfrm(r.get(field_name).strip()),
        reverse=not ascending,
    )


def distinct_values(
    records: Iterable[AdifRecord], field_name: Union[str, KnownField]
) -> list[str]:
    """
    Non-empty values of a field, trimmed, in the order they first show up. Handy for
    offering band/mode choices.
    """
    seen: dict[str, None] = {}
    for record in records:
        value = record.get(field_name).strip()
        if value:
            seen.setdefault(value, None)
    return list(seen)


@dataclass
class FilterCriteria:
    keyword: str = ""
    band: str = ""
    mode: str = ""


class LogView:
    """
    The filtered and sorted projection of a LogStore, as shown to the user.
    """

    def __init__(self, store: LogStore) -> None:
        self.store = store
        self.criteria: Optional[FilterCriteria] = None
        self.sort_field: Optional[str] = None
        self.sort_ascending = True

    def set_filter(self, keyword: str = "", band: str = "", mode: str = "") -> None:
        self.criteria = FilterCriteria(keyword, band, mode)

    def clear_filter(self) -> None:
        self.criteria = None

    def sort_by(self, field_name: Union[str, KnownField]) -> None:
        """
        Sort by the given field. Picking the field we're already sorted by flips the
        direction, picking a new one starts out ascending.
        """
        if isinstance(field_name, KnownField):
            field_name = field_name.value

        if field_name == self.sort_field:
            self.sort_ascending = not self.sort_ascending
        else:
            self.sort_field = field_name
            self.sort_ascending = True
        logger.debug(
            f"Sorting by {self.sort_field} "
            f"{'ascending' if self.sort_ascending else 'descending'}"
        )

    def records(self) -> list[AdifRecord]:
        """
        Compute the view from the store's current contents
        """
        records: Sequence[AdifRecord] = self.store.all_records()
        if self.criteria is not None:
            records = filter_records(
                records,
                keyword=self.criteria.keyword,
                band=self.criteria.band,
                mode=self.criteria.mode,
            )
        if self.sort_field is not None:
            records = sort_records(records, self.sort_field, self.sort_ascending)
        return list(records)

    def bands(self) -> list[str]:
        return distinct_values(self.store.all_records(), KnownField.BAND)

    def modes(self) -> list[str]:
        return distinct_values(self.store.all_records(), KnownField.MODE)
