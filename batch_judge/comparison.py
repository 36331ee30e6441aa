"""Whitespace-trimmed comparison of program output."""

TRIM_BYTES = b" \t\r\n"


def trim(data: bytes) -> bytes:
    """Strip spaces, tabs, carriage returns and line feeds from both ends."""
    return data.strip(TRIM_BYTES)


def outputs_match(actual: bytes, expected: bytes) -> bool:
    """Return whether two outputs are byte-equal once trimmed.

    Inner whitespace, line endings and numeric formatting must match exactly.
    """
    return trim(actual) == trim(expected)
