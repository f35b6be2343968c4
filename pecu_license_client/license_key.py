import re
from typing import Any, Tuple

GROUP_SIZE = 4
SEPARATOR = "-"
LICENSE_PREFIX = "PECU"

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
_LICENSE_PATTERN = re.compile(LICENSE_PREFIX + r"(?:-[A-Z0-9]{4}){4}")

def _clean(raw: str) -> str:
    return _NON_ALNUM.sub("", raw).upper()

def _group(cleaned: str) -> str:
    if len(cleaned) <= GROUP_SIZE:
        return cleaned
    return SEPARATOR.join(
        cleaned[i:i + GROUP_SIZE] for i in range(0, len(cleaned), GROUP_SIZE)
    )

def normalize(raw: str) -> str:
    """
    Normalize user input into a canonical license key.

    Strips everything but ASCII letters and digits, uppercases the rest and
    groups it in blocks of four joined by dashes. Keys of four characters or
    fewer are returned ungrouped. Normalizing a canonical key returns it
    unchanged.
    """
    return _group(_clean(raw or ""))

def is_valid_format(key: Any) -> bool:
    """
    Check that a key has the PECU-XXXX-XXXX-XXXX-XXXX shape.
    """
    if not isinstance(key, str):
        return False
    return _LICENSE_PATTERN.fullmatch(key.upper()) is not None

def reformat_input(value: str, cursor: int) -> Tuple[str, int]:
    """
    Reformat an input field in place and work out where the cursor goes.

    The cursor stays right after the same typed character it followed
    before reformatting, so separators inserted ahead of it push it forward
    and stripped characters ahead of it pull it back.

    Returns:
        Tuple of (formatted value, new cursor offset)
    """
    value = value or ""
    cursor = max(0, min(cursor, len(value)))
    formatted = normalize(value)

    kept_before_cursor = len(_clean(value[:cursor]))
    if kept_before_cursor == 0:
        return formatted, 0

    new_cursor = kept_before_cursor
    if len(formatted) > GROUP_SIZE:
        # One separator precedes every completed group the cursor has passed
        new_cursor += (kept_before_cursor - 1) // GROUP_SIZE

    return formatted, min(new_cursor, len(formatted))

def mask_key(key: str) -> str:
    """Hide everything but the first block of a key for log output."""
    if not key:
        return ""
    head, _, rest = key.partition(SEPARATOR)
    if not rest:
        return "*" * len(head)
    return head + SEPARATOR + re.sub(r"[A-Z0-9]", "*", rest)
