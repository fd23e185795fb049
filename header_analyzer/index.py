"""Lookup structures over a list of tokenized headers."""
from typing import Dict, List

from .errors import InvalidArgumentError
from .tokenizer import HeaderRecord


def header_identity(header_name: str) -> str:
    """Convert a header name to its identity: lower case with dashes as underscores.

    `Content-Type`, `content_type` and `CONTENT-TYPE` all share one identity.
    """
    if not isinstance(header_name, str):
        raise InvalidArgumentError('header name is required and must be a string')
    return header_name.lower().replace('-', '_')


def chronological(headers_as_received: List[HeaderRecord]) -> List[HeaderRecord]:
    """Return the headers oldest first (bottom of the source to the top)."""
    return list(reversed(headers_as_received))


def group_by_identity(headers: List[HeaderRecord]) -> Dict[str, List[HeaderRecord]]:
    """Group chronologically ordered headers by identity, keeping their order."""
    groups: Dict[str, List[HeaderRecord]] = {}
    for header in headers:
        groups.setdefault(header_identity(header.name), []).append(header)
    return groups


def matching_prefix(headers: List[HeaderRecord], prefix: str) -> List[HeaderRecord]:
    """Return the headers whose identity starts with the identity of `prefix`.

    An empty prefix matches nothing.
    """
    if not prefix:
        return []
    prefix_id = header_identity(prefix)
    return [h for h in headers if header_identity(h.name).startswith(prefix_id)]
