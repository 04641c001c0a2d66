"""
Duration strings.
Parses and formats durations such as "168h", "1h30m" or "500ms".
"""

import re

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,  # U+00B5 micro sign
    "μs": 1e-6,  # U+03BC greek mu
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r'(\d*\.?\d*)([a-zµμ]+)')


def parse_duration(value: str) -> float:
    """
    Parse a duration string into seconds.

    A duration is an optional sign followed by one or more number/unit
    pairs, e.g. "300ms", "-1.5h" or "2h45m". Valid units are
    "ns", "us" (or "µs"), "ms", "s", "m", "h". A bare "0" is accepted.

    Raises:
        ValueError: if the string is not a valid duration
    """
    text = value.strip()
    if not text:
        raise ValueError("empty duration")

    sign = 1.0
    if text[0] in "+-":
        if text[0] == "-":
            sign = -1.0
        text = text[1:]

    if text == "0":
        return 0.0

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if not match or match.end() == pos:
            raise ValueError(f"invalid duration {value!r}")
        number, unit = match.groups()
        if number in ("", "."):
            raise ValueError(f"missing number in duration {value!r}")
        if unit not in _UNITS:
            raise ValueError(f"unknown unit {unit!r} in duration {value!r}")
        total += float(number) * _UNITS[unit]
        pos = match.end()

    return sign * total


def format_duration(seconds: float) -> str:
    """Format seconds the way parse_duration reads them back ("1h30m0s", "500ms")."""
    if seconds == 0:
        return "0s"

    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)

    if seconds < 1:
        for unit, scale in (("ms", 1e-3), ("us", 1e-6), ("ns", 1e-9)):
            if seconds >= scale:
                return f"{sign}{_trim(seconds / scale)}{unit}"
        return f"{sign}{_trim(seconds / 1e-9)}ns"

    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{sign}{int(hours)}h{int(minutes)}m{_trim(secs)}s"
    if minutes:
        return f"{sign}{int(minutes)}m{_trim(secs)}s"
    return f"{sign}{_trim(secs)}s"


def _trim(number: float) -> str:
    """Drop float noise and trailing zeros: 1.50000001 -> "1.5", 2.0 -> "2"."""
    text = f"{number:.9f}".rstrip("0").rstrip(".")
    return text or "0"
