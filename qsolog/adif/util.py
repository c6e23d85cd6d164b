"""
ADIF utility functions
"""

import re
from datetime import date, datetime, time

# <name:length> or <name:length:type> followed by its value. The declared length is
# captured but the value always runs up to the next '<'.
FIELD_RE = re.compile(r"<([^:<>]+):(\d+)[^<>]*>([^<]*)")

EOR_RE = re.compile(r"<eor>", re.IGNORECASE)
EOH_RE = re.compile(r"<eoh>", re.IGNORECASE)


def parse_date(date_str: str) -> date:
    """
    Parse an ADIF date - YYYYMMDD
    """
    return datetime.strptime(date_str, "%Y%m%d").date()


def parse_time(time_str: str) -> time:
    """
    Parse an ADIF time - HHMM or HHMMSS
    """
    if len(time_str) == 4:
        return datetime.strptime(time_str, "%H%M").time()
    else:
        return datetime.strptime(time_str, "%H%M%S").time()


def make_field(name: str, value: str) -> str:
    """
    Return an ADIF field/value, like "<adif_ver:5>value"
    """
    return f"<{name}:{len(value)}>{value}"


def find_fields(text: str) -> dict[str, str]:
    """
    Collect every well-formed field in the text into a dict keyed by the lowercased
    field name. Later fields with the same name win. Anything that doesn't look like a
    field is skipped.

    Values are kept exactly as written, including any whitespace before the next
    field.
    """
    fields: dict[str, str] = {}
    for match in FIELD_RE.finditer(text):
        fields[match.group(1).lower()] = match.group(3)
    return fields
