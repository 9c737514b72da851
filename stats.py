"""
Decoder for the statistics export payload

The export is semicolon-separated text without a header row, one call per
row, with the columns listed in STATS_FIELDS. The first column holds the
call's recording ids as a bracketed list, e.g. ``[id1,id2]``.
"""

import csv
import io
import re
from typing import List, Union

from config import logger
from errors import MalformedRecordError
from models import CallRecord

STATS_FIELDS = (
    "records",
    "start",
    "finish",
    "answer",
    "from_extension",
    "from_number",
    "to_extension",
    "to_number",
    "disconnect_reason",
    "line_number",
    "location",
    "entry_id",
)

(
    FIELD_RECORDS,
    FIELD_START,
    FIELD_FINISH,
    FIELD_ANSWER,
    FIELD_FROM_EXTENSION,
    FIELD_FROM_NUMBER,
    FIELD_TO_EXTENSION,
    FIELD_TO_NUMBER,
    FIELD_DISCONNECT_REASON,
    FIELD_LINE_NUMBER,
    FIELD_LOCATION,
    FIELD_ENTRY_ID,
) = range(len(STATS_FIELDS))

DELIMITER = ";"

_INTEGER = re.compile(r"-?[0-9]+")
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


def stats_fields_param():
    """Value of the ``fields`` parameter of a statistics request"""
    return ",".join(STATS_FIELDS)


def parse_records_list(value: str, row=None) -> List[str]:
    """
    Parse the bracketed recording list of a statistics row

    Grammar: ``'[' (token (',' token)*)? ']'``. Tokens are returned verbatim.
    An empty field means the call has no recordings.

    Args:
        value (str): Raw field text, e.g. ``[1,2,3]``
        row (int): Row number for error messages

    Returns:
        list: Tokens in order, e.g. ``["1", "2", "3"]``

    Raises:
        MalformedRecordError: If the brackets are missing
    """
    if value == "":
        return []
    if len(value) < 2 or not (value.startswith("[") and value.endswith("]")):
        raise MalformedRecordError(f"records field is not a bracketed list: {value!r}", row)

    inner = value[1:-1]
    if inner == "":
        return []
    return inner.split(",")


def _parse_int(value, name, row, lenient, allow_empty=False, signed=False):
    if value == "" and allow_empty:
        return 0
    if _INTEGER.fullmatch(value) and (signed or not value.startswith("-")):
        number = int(value)
        if INT64_MIN <= number <= INT64_MAX:
            return number
    if lenient:
        logger.warning(f"Row {row}: invalid {name} value {value!r}, using 0")
        return 0
    raise MalformedRecordError(f"invalid {name} value: {value!r}", row)


def decode_row(line: List[str], row=None, lenient_numbers=False) -> CallRecord:
    """
    Decode one split statistics row

    Args:
        line (list): Field values in STATS_FIELDS order
        row (int): Row number for error messages
        lenient_numbers (bool): Turn unparsable numbers into 0 instead of failing

    Returns:
        CallRecord: The decoded call

    Raises:
        MalformedRecordError: If the row is short or a field is invalid
    """
    if len(line) < len(STATS_FIELDS):
        raise MalformedRecordError(
            f"expected {len(STATS_FIELDS)} fields, got {len(line)}", row
        )

    return CallRecord(
        records=parse_records_list(line[FIELD_RECORDS], row),
        start=_parse_int(line[FIELD_START], "start", row, lenient_numbers),
        finish=_parse_int(line[FIELD_FINISH], "finish", row, lenient_numbers),
        answer=_parse_int(line[FIELD_ANSWER], "answer", row, lenient_numbers, allow_empty=True),
        from_extension=line[FIELD_FROM_EXTENSION],
        from_number=line[FIELD_FROM_NUMBER],
        to_extension=line[FIELD_TO_EXTENSION],
        to_number=line[FIELD_TO_NUMBER],
        disconnect_reason=_parse_int(
            line[FIELD_DISCONNECT_REASON], "disconnect_reason", row, lenient_numbers, signed=True
        ),
        line_number=line[FIELD_LINE_NUMBER],
        location=line[FIELD_LOCATION],
        entry_id=line[FIELD_ENTRY_ID],
    )


def decode_stats(body: Union[bytes, str], lenient_numbers=False) -> List[CallRecord]:
    """
    Decode a statistics export into call records

    Args:
        body (bytes|str): Raw response body of the result request
        lenient_numbers (bool): Legacy mode, unparsable numbers become 0

    Returns:
        list: CallRecord objects in the order the provider sent them

    Raises:
        MalformedRecordError: On the first row that cannot be decoded
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedRecordError(f"statistics body is not valid UTF-8: {e}") from e

    reader = csv.reader(io.StringIO(body, newline=""), delimiter=DELIMITER, strict=True)
    calls = []
    try:
        for line in reader:
            if not line or line == [""]:
                continue
            if len(line) > len(STATS_FIELDS):
                logger.debug(f"Row {reader.line_num}: ignoring {len(line) - len(STATS_FIELDS)} extra fields")
            calls.append(decode_row(line, reader.line_num, lenient_numbers))
    except csv.Error as e:
        raise MalformedRecordError(f"error reading CSV: {e}", reader.line_num) from e

    logger.debug(f"Decoded {len(calls)} call records")
    return calls
