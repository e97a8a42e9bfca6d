"""
Turn raw text from the input widgets into engine inputs.

Tokens may be separated by whitespace, commas, or both.
"""

import re
from typing import List, Union

from errors import InvalidConfiguration

_SEPARATORS = re.compile(r"[\s,]+")


def _tokens(raw: str) -> List[str]:
    if raw is None:
        return []
    return [t for t in _SEPARATORS.split(str(raw).strip()) if t]


def parse_reference_string(raw: str) -> List[Union[int, str]]:
    """
    Split a reference string into page ids.

    Integer tokens become ints, anything else is kept as a symbolic page
    name, so "7 0 A 0" gives [7, 0, "A", 0].

    Raises:
        InvalidConfiguration: If the string holds no tokens
    """
    tokens = _tokens(raw)
    if not tokens:
        raise InvalidConfiguration("Enter a valid reference string (space separated).")

    pages = []
    for token in tokens:
        try:
            pages.append(int(token))
        except ValueError:
            pages.append(token)
    return pages


def parse_sizes(raw: str, label: str = "sizes") -> List[int]:
    """
    Parse a list of non-negative integer sizes (hole or segment sizes).

    Raises:
        InvalidConfiguration: On empty input, a non-integer or a negative token
    """
    tokens = _tokens(raw)
    if not tokens:
        raise InvalidConfiguration(f"Enter {label} (space separated).")

    sizes = []
    for token in tokens:
        try:
            size = int(token)
        except ValueError:
            raise InvalidConfiguration(f"Invalid {label} value: {token!r}") from None
        if size < 0:
            raise InvalidConfiguration(f"Invalid {label} value: {token!r}")
        sizes.append(size)
    return sizes


def parse_positive_int(value, label: str = "value") -> int:
    """Accept an int or numeric string greater than zero."""
    if isinstance(value, bool):
        raise InvalidConfiguration(f"Enter a valid {label}.")
    try:
        number = int(str(value).strip())
    except ValueError:
        raise InvalidConfiguration(f"Enter a valid {label}.") from None
    if number <= 0:
        raise InvalidConfiguration(f"Enter a valid {label}.")
    return number
