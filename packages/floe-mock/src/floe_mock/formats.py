"""Format registry for string schemas.

Maps a JSON Schema `format` name to the provider method that produces a
matching value. Unknown formats are not errors: callers fall back to the
generic string strategy.
"""

from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType

from floe_mock.provider import ValueProvider

FormatStrategy = Callable[[ValueProvider], str]

FORMATS: MappingProxyType[str, FormatStrategy] = MappingProxyType({
    "email": ValueProvider.email,
    "idn-email": ValueProvider.email,
    "uuid": ValueProvider.uuid,
    "ip": ValueProvider.ipv4,
    "ipv4": ValueProvider.ipv4,
    "ipv6": ValueProvider.ipv6,
    "date": ValueProvider.date,
    "date-time": ValueProvider.date_time,
    "time": ValueProvider.time,
    "uri": ValueProvider.uri,
    "url": ValueProvider.uri,
    "uri-reference": ValueProvider.uri,
    "hostname": ValueProvider.hostname,
    "idn-hostname": ValueProvider.hostname,
    "byte": ValueProvider.byte,
    "password": ValueProvider.password,
})


def get_format_strategy(name: str | None) -> FormatStrategy | None:
    """Look up the strategy for a format name.

    Args:
        name: Format name from the schema (may be None)

    Returns:
        Strategy callable, or None when the format is absent or unknown
    """
    if name is None:
        return None
    return FORMATS.get(name)


def list_formats() -> list[str]:
    """Return registered format names, sorted."""
    return sorted(FORMATS)
