"""Entry name matching for ``query`` and ``queryHost`` messages."""
from __future__ import annotations

import logging
from typing import Iterable, List
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def query_entries(names: Iterable[str], query: str) -> List[str]:
    """Return the sorted names containing query (case-sensitive, full path)."""
    return sorted({name for name in names if query in name})


def normalize_host(host: str) -> str:
    """Reduce an origin, URL or bare hostname to a lowercase hostname.

    A host that cannot be parsed (e.g. an unbalanced IPv6 bracket) yields ``""``.
    """
    host = (host or "").strip()
    try:
        if "://" in host:
            host = urlparse(host).hostname or ""
        elif "/" in host or ":" in host:
            host = urlparse("//" + host).hostname or ""
    except ValueError as e:
        logger.debug("Ignoring unparsable host: %s", e)
        return ""
    return host.rstrip(".").lower()


def _segment_matches(name: str, host: str) -> bool:
    return any(segment.lower() == host for segment in name.split("/"))


def parent_domains(host: str) -> List[str]:
    """List host followed by each parent domain with at least two labels.

    ``find.example.com`` -> ``["find.example.com", "example.com"]``.
    A single label host is only searched as-is.
    """
    candidates = [host]
    while host.count(".") > 1:
        host = host.split(".", 1)[1]
        candidates.append(host)
    return candidates


def query_host(names: Iterable[str], host: str) -> List[str]:
    """Return the entries whose path holds the most specific matching domain.

    A path segment must equal the host, or one of its parent domains, in
    full. Suffixes that cut through a label never match, so a stored
    ``evilexample.com`` is not returned for ``login.example.com``. The
    search stops at the first domain level with any match.
    """
    host = normalize_host(host)
    if not host:
        return []
    names = list(names)
    for candidate in parent_domains(host):
        matches = {name for name in names if _segment_matches(name, candidate)}
        if matches:
            return sorted(matches)
    return []
