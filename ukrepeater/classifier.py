"""
Query classification
Routes a normalized query to a lookup kind by its two character prefix
"""

from typing import Dict, Mapping, Optional

from .errors import TooShortError, UnknownPrefixError
from .models import LookupKind, LookupRequest

# UK callsign regions for repeaters, and the Maidenhead squares covering the UK
DEFAULT_PREFIX_KINDS: Dict[str, LookupKind] = {
    'gb': LookupKind.BY_NAME,
    'mb': LookupKind.BY_NAME,
    'jo': LookupKind.BY_LOCATOR,
    'io': LookupKind.BY_LOCATOR,
}

REFRESH_PREFIX_KINDS: Dict[str, LookupKind] = {
    're': LookupKind.REFRESH,
}

PREFIX_LENGTH = 2


def build_prefix_table(refresh_command: bool = False) -> Dict[str, LookupKind]:
    """Build the prefix table, optionally with the explicit refresh prefix"""
    table = dict(DEFAULT_PREFIX_KINDS)
    if refresh_command:
        table.update(REFRESH_PREFIX_KINDS)
    return table


def classify(query: str, prefix_table: Optional[Mapping[str, LookupKind]] = None) -> LookupRequest:
    """Classify a query into a lookup request.

    Args:
        query: The query with the trigger word removed.
        prefix_table: Prefix to kind mapping; defaults to DEFAULT_PREFIX_KINDS.

    Returns:
        LookupRequest: The lowercased query, its prefix and lookup kind.

    Raises:
        TooShortError: If the query is shorter than the prefix.
        UnknownPrefixError: If the prefix is not in the table.
    """
    if prefix_table is None:
        prefix_table = DEFAULT_PREFIX_KINDS

    if len(query) < PREFIX_LENGTH:
        raise TooShortError(query)

    query = query.lower()
    prefix = query[:PREFIX_LENGTH]
    kind = prefix_table.get(prefix)
    if kind is None:
        raise UnknownPrefixError(prefix, query)
    return LookupRequest(query=query, prefix=prefix, kind=kind)
