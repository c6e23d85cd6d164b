import logging
from typing import Union

from qsolog.adif.record import AdifRecord
from qsolog.enums import KnownField

logger = logging.getLogger(__name__)


def set_field(
    record: AdifRecord, field_name: Union[str, KnownField], new_value: str
) -> bool:
    """
    Set a single field on a record, in place. The value is stripped of surrounding
    whitespace; an empty result is stored as-is rather than removing the field. Any
    field name is allowed, so custom fields can be added this way.

    The record's validity is left alone, even when the call changes.

    Returns:
        False if the field already had this value, True otherwise
    """
    if isinstance(field_name, KnownField):
        field_name = field_name.value

    value = new_value.strip()
    if field_name in record and record[field_name] == value:
        logger.debug(f"{field_name} already {value!r}, nothing to do")
        return False

    record[field_name] = value
    logger.debug(f"Set {field_name} to {value!r}")
    return True
