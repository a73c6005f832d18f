"""Record construction and identifier generation.

This module turns raw lines into typed records with stable ids.
Ids are the source name plus the zero-padded line number.
"""

from __future__ import annotations

import secrets

from core.constants import (
    RECORD_ID_PAD_WIDTH,
    RECORD_ID_SEPARATOR,
    SOURCE_TOKEN_ALPHABET,
    SOURCE_TOKEN_LENGTH,
    TEXT_ENCODING,
)
from core.types import RecordContext


def zero_pad(number: int, width: int = RECORD_ID_PAD_WIDTH) -> str:
    """Left-pad a number's decimal form with zeros up to ``width``.

    Numbers wider than ``width`` are returned unpadded and untruncated.
    """
    return str(number).rjust(width, "0")


def build_record_id(source_name: str, line_number: int) -> str:
    """Build the stable record id for one line.

    Args:
        source_name: Resolved source name.
        line_number: One-based line number.

    Returns:
        Id such as ``data.txt-000000000042``. Ids sort in line order
        only while line numbers stay below ``10**12``.
    """
    return f"{source_name}{RECORD_ID_SEPARATOR}{zero_pad(line_number)}"


def build_record(source_name: str, line_number: int, raw_line: bytes) -> RecordContext:
    """Build a record from one raw line.

    Args:
        source_name: Resolved source name.
        line_number: One-based line number.
        raw_line: Line bytes without the delimiter.

    Returns:
        Record context handed to the line transform.
    """
    return RecordContext(
        text=raw_line.decode(TEXT_ENCODING, errors="replace"),
        filename=source_name,
        line_number=line_number,
        record_id=build_record_id(source_name, line_number),
    )


def generate_source_token(length: int = SOURCE_TOKEN_LENGTH) -> str:
    """Generate a random alphanumeric source name for unnamed stdin input."""
    return "".join(secrets.choice(SOURCE_TOKEN_ALPHABET) for _ in range(length))
