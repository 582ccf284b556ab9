"""Parsing of stored interval values into seconds.

Moving and elapsed times reach us in several textual encodings depending on
how the row was written: Postgres interval text (``"01:02:03"``), ISO 8601
fragments (``"PT90S"``), or plain ``"<N> seconds"`` / ``"<N>s"`` strings.

Two parsers live here and they are not interchangeable:

- ``parse_interval_to_seconds`` is the tolerant parser used for progress and
  goal math.
- ``parse_duration_to_seconds`` strips every non-digit character and is only
  safe for values already in ``"<N>s"`` form. It is used for display
  formatting; it would read ``"00:10:00"`` as 1000 seconds.
"""

import math
import re
from typing import Any, Optional

_ISO_PREFIX_RE = re.compile(r"^P(T.*)?", re.IGNORECASE)
_ISO_SECONDS_RE = re.compile(r"(\d+(?:\.\d+)?)S", re.IGNORECASE)
_CLOCK_PART_RE = re.compile(r"^\d+(?:\.\d+)?$")
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_NON_DIGIT_RE = re.compile(r"\D")


def _clock_part(value: str) -> Optional[float]:
    """Parse one ``HH``/``MM``/``SS`` component; an empty component counts as zero."""
    text = value.strip()
    if not text:
        return 0.0
    if not _CLOCK_PART_RE.match(text):
        return None
    return float(text)


def parse_interval_to_seconds(value: Any) -> float:
    """
    Convert an interval value into a whole number of seconds.

    Numbers are returned unchanged (they are already seconds). Strings are
    tried as ``HH:MM:SS``, then as an ISO 8601 duration, then as the first
    decimal number found anywhere in the text. Anything else yields 0.

    Only the seconds group of an ISO duration is read, so ``"PT1H30M"``
    falls through to the generic scan and parses as 1. Stored totals depend
    on this, so it is kept as is.

    Args:
        value: Raw interval value (None, number or string)

    Returns:
        Seconds as an int for string input, the input itself for numbers
    """
    if value is None or isinstance(value, bool):
        return 0

    if isinstance(value, (int, float)):
        return value

    if not isinstance(value, str):
        return 0

    trimmed = value.strip()

    # Postgres interval text, e.g. "01:05:30"
    if ":" in trimmed:
        parts = [_clock_part(part) for part in trimmed.split(":")]
        if len(parts) == 3 and all(part is not None for part in parts):
            hours, minutes, seconds = parts
            return int(hours * 3600 + minutes * 60 + seconds)

    # ISO 8601 duration, e.g. "PT300S"
    if _ISO_PREFIX_RE.match(trimmed) and "S" in trimmed.upper():
        match = _ISO_SECONDS_RE.search(trimmed)
        if match:
            return int(float(match.group(1)))

    # "600 seconds", "600s" or any other text with a leading number
    match = _NUMBER_RE.search(trimmed)
    if match:
        number = float(match.group(0))
        return int(number) if math.isfinite(number) else 0

    return 0


def parse_duration_to_seconds(value: Any) -> int:
    """Read a ``"<N>s"`` style value by keeping only its digits."""
    if not value or not isinstance(value, str):
        return 0

    digits = _NON_DIGIT_RE.sub("", value)
    if not digits:
        return 0

    return int(digits)
