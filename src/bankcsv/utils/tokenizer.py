"""CSV tokenizing utilities.

The tokenizer is a two-state machine (UNQUOTED, QUOTED) that walks the
text one character at a time, so quoted delimiters, doubled quotes and
line breaks inside quoted fields never split a field.
"""

from enum import Enum
from typing import Optional

from bankcsv.domain.errors import EmptyFileError, NoDataError, UnreadableFileError

DELIMITERS = (",", ";", "\t")
QUOTE = '"'


class _State(Enum):
    UNQUOTED = 0
    QUOTED = 1


def decode_bytes(data: bytes | str) -> str:
    """Decode uploaded file content to text.

    Args:
        data: Raw file bytes (str is passed through)

    Returns:
        Decoded text with any UTF-8 byte order mark removed

    Raises:
        UnreadableFileError: If the bytes are not valid UTF-8
    """
    if isinstance(data, str):
        return data.lstrip("\ufeff")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise UnreadableFileError(f"File is not valid UTF-8 text: {e}") from e


def detect_delimiter(line: str) -> str:
    """Pick the delimiter occurring most often outside quotes in a line.

    Ties and lines without any candidate fall back to a comma.
    """
    best = ","
    best_count = 0
    for delimiter in DELIMITERS:
        count = 0
        in_quotes = False
        for char in line:
            if char == QUOTE:
                in_quotes = not in_quotes
            elif char == delimiter and not in_quotes:
                count += 1
        if count > best_count:
            best, best_count = delimiter, count
    return best


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line
    return ""


def split_records(text: str, delimiter: str = ",") -> list[list[str]]:
    """Split CSV text into records of raw string fields.

    Blank lines are dropped. A quote only opens a quoted section at the
    start of a field; elsewhere it is kept literally.
    """
    records: list[list[str]] = []
    record: list[str] = []
    field: list[str] = []
    state = _State.UNQUOTED
    field_started = False

    def end_field() -> None:
        nonlocal field, field_started
        record.append("".join(field))
        field = []
        field_started = False

    def end_record() -> None:
        nonlocal record
        end_field()
        if any(value.strip() for value in record) or len(record) > 1:
            records.append(record)
        record = []

    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if state is _State.QUOTED:
            if char == QUOTE:
                if i + 1 < length and text[i + 1] == QUOTE:
                    field.append(QUOTE)
                    i += 1
                else:
                    state = _State.UNQUOTED
            else:
                field.append(char)
        elif char == delimiter:
            end_field()
        elif char in "\r\n":
            if char == "\r" and i + 1 < length and text[i + 1] == "\n":
                i += 1
            end_record()
        elif char == QUOTE and not field_started:
            state = _State.QUOTED
            field_started = True
        else:
            field.append(char)
            field_started = True
        i += 1

    # An unterminated quote swallows the rest of the file into one field.
    if field or record or field_started:
        end_record()
    return records


def tokenize(text: str, delimiter: Optional[str] = None) -> tuple[list[str], list[list[str]]]:
    """Tokenize CSV text into a header and data rows.

    Args:
        text: Full CSV file content
        delimiter: Field delimiter; detected from the header line if None

    Returns:
        Tuple of (headers, rows) where headers are trimmed

    Raises:
        EmptyFileError: If the text contains no header row
        NoDataError: If the text has a header but no data rows
    """
    text = text.lstrip("\ufeff")
    if not text.strip():
        raise EmptyFileError("File is empty")

    if delimiter is None:
        delimiter = detect_delimiter(_first_line(text))

    records = split_records(text, delimiter)
    if not records:
        raise EmptyFileError("No header row found in CSV")

    headers = [h.strip() for h in records[0]]
    if not any(headers):
        raise EmptyFileError("No columns detected in CSV")

    rows = records[1:]
    if not rows:
        raise NoDataError("No data rows found in CSV")
    return headers, rows


def row_to_dict(headers: list[str], row: list[str]) -> dict[str, str]:
    """Pair a row with the header, padding missing trailing fields with ''."""
    return {
        header: (row[idx].strip() if idx < len(row) else "")
        for idx, header in enumerate(headers)
    }
