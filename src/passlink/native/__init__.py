"""Native messaging protocol: framing, matching and request dispatch."""

from .api import API, parse_message
from .framing import read_message, write_message
from .matching import query_entries, query_host

__all__ = [
    'API',
    'parse_message',
    'read_message',
    'write_message',
    'query_entries',
    'query_host',
]
