"""Parse raw email headers (or a full message source) into a HeaderSet.

This is the entry point of the analyzer: tokenize, index, pick canonical
values and decode the security headers. Nothing here depends on how the
result is presented.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .canonical import CanonicalHeader, Canonicalizer, Direction, coerce_direction
from .decoders import (
    decode_authentication_results,
    decode_forefront_antispam_report,
    decode_microsoft_antispam,
    decode_original_authentication_results,
)
from .errors import InvalidArgumentError
from .index import chronological, group_by_identity, header_identity, matching_prefix
from .tokenizer import HeaderRecord, sanitise_header_value, tokenize

logger = logging.getLogger(__name__)

# canonical header name -> decoder for its value
SECURITY_DECODERS = [
    ('Authentication-Results', decode_authentication_results),
    ('Authentication-Results-Original', decode_original_authentication_results),
    ('X-Forefront-Antispam-Report', decode_forefront_antispam_report),
    ('X-Microsoft-Antispam', decode_microsoft_antispam),
]


@dataclass
class HeaderSet:
    """All the headers of one email plus everything derived from them.

    `headers` is chronological (oldest first, i.e. bottom of the source to the
    top); `headers_as_received` is in source order.
    """
    direction: Direction
    headers_as_received: List[HeaderRecord] = field(default_factory=list)
    headers: List[HeaderRecord] = field(default_factory=list)
    by_identity: Dict[str, List[HeaderRecord]] = field(default_factory=dict)
    custom_prefix: str = ''
    headers_matching_custom_prefix: List[HeaderRecord] = field(default_factory=list)
    canonical_by_identity: Dict[str, CanonicalHeader] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    security_report: dict = field(default_factory=dict)

    def find(self, name: str) -> List[HeaderRecord]:
        """All instances of a header, oldest first."""
        return list(self.by_identity.get(header_identity(name), []))

    def canonical(self, name: str) -> Optional[CanonicalHeader]:
        return self.canonical_by_identity.get(header_identity(name))

    def to_dict(self) -> dict:
        def records(lst):
            return [{'name': h.name, 'value': h.value} for h in lst]

        return {
            'direction': self.direction.value,
            'headers_as_received': records(self.headers_as_received),
            'headers': records(self.headers),
            'by_identity': {k: records(v) for k, v in self.by_identity.items()},
            'custom_prefix': self.custom_prefix,
            'headers_matching_custom_prefix': records(self.headers_matching_custom_prefix),
            'canonical_by_identity': {k: v.to_dict() for k, v in self.canonical_by_identity.items()},
            'warnings': list(self.warnings),
            'security_report': self.security_report,
        }


def build_security_report(canonical_by_identity: Dict[str, CanonicalHeader]) -> dict:
    """Decode the canonical security headers and merge the fragments."""
    report = {}
    for name, decoder in SECURITY_DECODERS:
        canonical = canonical_by_identity.get(header_identity(name))
        if canonical is None or not canonical.value:
            continue
        report.update(decoder(sanitise_header_value(canonical.value)))
    return report


def parse_header_source(source: str, direction, custom_prefix: str = '') -> HeaderSet:
    """Parse the headers or the entire raw source of an email into a HeaderSet.

    `direction` is 'inbound' to treat the mail from the receiver's point of
    view or 'outbound' for the sender's; it decides which instance of a
    repeated security header is used. Raises InvalidArgumentError on bad
    arguments; problems with the headers themselves are reported in
    `warnings` instead.
    """
    if not isinstance(source, str):
        raise InvalidArgumentError('must pass a string to parse')
    direction = coerce_direction(direction)
    if not isinstance(custom_prefix, str):
        raise InvalidArgumentError('if passed, the custom header prefix must be a string')

    ans = HeaderSet(direction=direction, custom_prefix=custom_prefix)
    ans.headers_as_received = tokenize(source)
    ans.headers = chronological(ans.headers_as_received)
    ans.by_identity = group_by_identity(ans.headers)
    ans.headers_matching_custom_prefix = matching_prefix(ans.headers, custom_prefix)

    canonicalizer = Canonicalizer(ans.by_identity)
    ans.canonical_by_identity = canonicalizer.canonicalize(direction)
    ans.warnings = canonicalizer.warnings

    ans.security_report = build_security_report(ans.canonical_by_identity)

    logger.info('parsed %d headers (%s), %d warnings', len(ans.headers), direction.value, len(ans.warnings))
    return ans


build_header_set = parse_header_source
