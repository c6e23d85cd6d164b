"""
Reading and writing ADI text.

Reference: https://www.adif.org/adif
Description of the file format: http://www.adif.org/312/ADIF_312.htm#ADI_File_Format

The reader is deliberately permissive: it never fails, anything that doesn't look like
a field is skipped, and a field's value is everything up to the next '<' regardless of
the length it declares.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from io import StringIO
from typing import Iterable, Optional

from qsolog.adif.record import AdifRecord
from qsolog.adif.util import EOH_RE, EOR_RE, find_fields, make_field
from qsolog.constants import PROGRAM_ID
from qsolog.version import VERSION

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d %H%M%S"


@dataclass
class AdifHeader:
    version: str = "3.1.2"
    created: Optional[datetime] = None
    program_id: str = PROGRAM_ID
    program_version: str = VERSION

    # Any text before the first specifier in the header
    comment: str = ""

    # Header fields we don't know about, e.g. userdef
    other: dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str) -> "AdifHeader":
        """
        Parse the header from the text preceding <eoh>
        """
        header = cls(comment=text.split("<", 1)[0].strip())
        for name, value in find_fields(text).items():
            value = value.strip()
            if name == "adif_ver":
                header.version = value
            elif name == "created_timestamp":
                try:
                    header.created = datetime.strptime(value, TIMESTAMP_FORMAT)
                except ValueError:
                    logger.debug(f"Ignoring bad created_timestamp {value!r}")
            elif name == "programid":
                header.program_id = value
            elif name == "programversion":
                header.program_version = value
            else:
                header.other[name] = value
        return header

    def __str__(self) -> str:
        s = StringIO()
        s.write(f"{self.comment}\n")
        if self.version:
            s.write(make_field("adif_ver", self.version) + "\n")

        created = self.created or datetime.now()
        s.write(make_field("created_timestamp", created.strftime(TIMESTAMP_FORMAT)))
        s.write("\n")

        if self.program_id:
            s.write(make_field("programid", self.program_id) + "\n")
        if self.program_version:
            s.write(make_field("programversion", self.program_version) + "\n")
        for k, v in self.other.items():
            s.write(make_field(k, v) + "\n")
        s.write("<EOH>\n")
        return s.getvalue()


def parse(text: str) -> list[AdifRecord]:
    """
    Parse ADI text into records. Each <eor>-terminated chunk with at least one field
    becomes a record; anything after the last <eor> is ignored. Never raises, the
    worst case is an empty list.
    """
    records = []
    for segment in EOR_RE.split(text)[:-1]:
        fields = find_fields(segment)
        if not fields:
            continue
        records.append(AdifRecord(fields=fields))

    logger.debug(f"Parsed {len(records)} records")
    return records


def split_header(text: str) -> tuple[Optional[AdifHeader], str]:
    """
    Split off the header, if the text has one, returning it along with the rest of the
    text
    """
    parts = EOH_RE.split(text, maxsplit=1)
    if len(parts) == 1:
        return None, text
    return AdifHeader.parse(parts[0]), parts[1]


def serialize(
    records: Iterable[AdifRecord], header: Optional[AdifHeader] = None
) -> str:
    """
    Write records out as ADI text, one record per line. Validity is not written.
    """
    s = StringIO()
    if header is not None:
        s.write(str(header))
    for record in records:
        s.write(str(record) + "\n")
    return s.getvalue()
