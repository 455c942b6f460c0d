"""Duration Rendering — minutes <-> human-readable duration strings.

Invariants:
    - format_duration is deterministic: same minutes -> same string
    - parse_duration(format_duration(n)) == n for every n >= 0
    - Zero-valued parts are omitted; 0 renders as "0m"

Design Decisions:
    - 24h days (calendar time, not working days): the stored value is raw elapsed minutes
"""

import re

from tasktrack.core.domain_types import Minutes

_UNITS = (("d", 24 * 60), ("h", 60), ("m", 1))
_PART = re.compile(r"(\d+)([dhm])")


def format_duration(minutes: int) -> str:
    """Render minutes as e.g. '1d 2h 5m'."""
    if minutes < 0:
        raise ValueError("duration cannot be negative")
    parts = []
    remaining = minutes
    for suffix, size in _UNITS:
        amount, remaining = divmod(remaining, size)
        if amount:
            parts.append(f"{amount}{suffix}")
    return " ".join(parts) or "0m"


def parse_duration(text: str) -> Minutes:
    """Inverse of format_duration. Raises ValueError on malformed input."""
    tokens = text.split()
    if not tokens:
        raise ValueError("empty duration")
    sizes = dict(_UNITS)
    total = 0
    for token in tokens:
        match = _PART.fullmatch(token)
        if not match:
            raise ValueError(f"malformed duration part: {token!r}")
        total += int(match.group(1)) * sizes[match.group(2)]
    return Minutes(total)
