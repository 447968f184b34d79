"""Reader and writer helpers for sectioned CSV text.

A sectioned CSV document is a sequence of ``[NAME]`` header lines, each
followed by the rows of that section. Key-value sections hold ``key,value``
rows; tabular sections hold a header row followed by one row per record.

Fields are quoted only when they contain a delimiter, a quote or a line
break. A quoted field may span several physical lines.
"""

import csv
import io
import logging

from ledgerwell.domain.errors import BackupFormatError

logger = logging.getLogger(__name__)

DELIMITER = ","

# Both line break characters must force quoting, so the writer terminator
# holds both and is stripped from the output.
_WRITER_TERMINATOR = "\r\n"


def join_fields(values) -> str:
    """Encode a row of field values without a line terminator.

    None encodes as an empty field.
    """
    buffer = io.StringIO()
    writer = csv.writer(
        buffer, delimiter=DELIMITER, quoting=csv.QUOTE_MINIMAL, lineterminator=_WRITER_TERMINATOR
    )
    writer.writerow(values)
    return buffer.getvalue()[: -len(_WRITER_TERMINATOR)]


def escape_field(value) -> str:
    """Encode a single field value.

    Args:
        value: Field value; None encodes as an empty field

    Returns:
        The value, quoted with internal quotes doubled if it contains a
        delimiter, quote or line break
    """
    if value is None or value == "":
        # csv writes a lone empty field as "" to tell it from an empty row
        return ""
    return join_fields([value])


def read_records(text: str) -> list[list[str]]:
    """Split text into records of decoded field values.

    A line break inside a quoted field belongs to the field.

    Raises:
        BackupFormatError: If a quoted field is never closed or is followed
            by stray characters
    """
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=DELIMITER, strict=True)
    try:
        return list(reader)
    except csv.Error as e:
        raise BackupFormatError(f"Malformed CSV near line {reader.line_num}: {e}") from e


def _section_name(record: list[str]):
    if len(record) != 1:
        return None
    stripped = record[0].strip()
    if len(stripped) > 2 and stripped.startswith("[") and stripped.endswith("]"):
        return stripped[1:-1].strip()
    return None


def _is_blank(record: list[str]) -> bool:
    return not record or (len(record) == 1 and not record[0].strip())


def split_sections(text: str) -> dict[str, list[list[str]]]:
    """Group records under the most recently seen section header.

    Blank lines are skipped and records before the first header are discarded.

    Returns:
        Mapping of section name to its records, in order of appearance
    """
    sections: dict[str, list[list[str]]] = {}
    current = None
    discarded = 0
    for record in read_records(text):
        if _is_blank(record):
            continue
        name = _section_name(record)
        if name is not None:
            current = name
            sections.setdefault(current, [])
        elif current is None:
            discarded += 1
        else:
            sections[current].append(record)
    if discarded:
        logger.debug("Discarded %d records before first section header", discarded)
    return sections


def parse_key_value_section(records: list[list[str]]) -> dict[str, str]:
    """Parse ``key,value`` records into a dictionary.

    Records without a value or with an empty key are ignored. A later
    duplicate key overrides an earlier one.
    """
    result = {}
    for fields in records:
        if len(fields) < 2:
            continue
        key = fields[0].strip()
        if not key:
            continue
        # An unquoted value may itself contain the delimiter
        result[key] = DELIMITER.join(fields[1:])
    return result


def parse_table_section(records: list[list[str]]) -> list[dict[str, str]]:
    """Parse a header record plus data records into one dictionary per row.

    Short rows are back-filled with empty strings; extra fields beyond the
    header count are dropped.
    """
    if not records:
        return []

    headers = [header.strip() for header in records[0]]
    return [
        {header: values[index] if index < len(values) else "" for index, header in enumerate(headers)}
        for values in records[1:]
    ]
