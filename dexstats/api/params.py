"""Query-string parsing for the stats endpoints.

Everything here raises ValidationError (-> 400) so handlers never see a
malformed value.
"""
from datetime import datetime, timezone
from typing import List, Optional
from dexstats.errors import ValidationError
from dexstats.utils.address import ZERO_ADDRESS, is_hex_address, to_address

DURATIONS = {"": 0, "1d": 1, "7d": 7, "30d": 30}
# last second datetime can hold
MAX_TIMESTAMP = int(datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc).timestamp())


def parse_address(value: Optional[str], name: str) -> str:
    """Empty means unset and comes back as the zero address."""
    if not value:
        return ZERO_ADDRESS
    if not is_hex_address(value):
        raise ValidationError(f"Invalid {name} address")
    return to_address(value)


def parse_addresses(values: Optional[List[str]], name: str) -> List[str]:
    return [parse_address(v, name) for v in values or [] if v]


def parse_int(value: Optional[str], name: str, default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Invalid {name}: {value!r} is not an integer")


def parse_timestamp(value: Optional[str], name: str) -> int:
    """Unix seconds; 0 (or empty) leaves that end of the window open."""
    ts = parse_int(value, name)
    if not 0 <= ts <= MAX_TIMESTAMP:
        raise ValidationError(f"Invalid {name}: {ts} is not a unix timestamp in seconds")
    return ts


def parse_duration(value: Optional[str]) -> int:
    """Window length in days; 0 for the whole history."""
    value = value or ""
    if value not in DURATIONS:
        accepted = ", ".join(f'"{d}"' for d in DURATIONS)
        raise ValidationError(f"duration must be one of {{{accepted}}}")
    return DURATIONS[value]
