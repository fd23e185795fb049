"""Select the canonical value for each header the analyzer cares about.

Some headers must appear exactly once (From, Subject, ...), some at most once
(Reply-To, ...), and some are stamped by every relay a message passes through
(Authentication-Results, ...). For the last group one instance is chosen
according to the direction the mail is considered to be travelling in:

* inbound: the oldest instance, i.e. the one nearest the bottom of the source
* outbound: the newest instance, i.e. the one nearest the top of the source
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .errors import InvalidArgumentError
from .index import header_identity
from .tokenizer import HeaderRecord

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    INBOUND = 'inbound'
    OUTBOUND = 'outbound'


def coerce_direction(value) -> Direction:
    """Return the Direction for `value`, raising InvalidArgumentError if it isn't one."""
    if not isinstance(value, str) or value not in (Direction.INBOUND.value, Direction.OUTBOUND.value):
        raise InvalidArgumentError("must pass a parse direction of 'inbound' or 'outbound'")
    return Direction(value)


@dataclass
class CanonicalHeader:
    name: str
    value: str = ''
    values: Optional[List[str]] = None
    error: Optional[str] = None
    is_missing: bool = False

    def to_dict(self) -> dict:
        ans = {'name': self.name, 'value': self.value}
        if self.values is not None:
            ans['values'] = list(self.values)
        if self.error is not None:
            ans['error'] = self.error
        if self.is_missing:
            ans['is_missing'] = True
        return ans


# Rules applied in this order; the order is also the order warnings are reported in.
REQUIRE_EXACTLY_ONE = 'require_exactly_one'
OPTIONAL_SINGLE = 'optional_single'
TAKE_ONE = 'take_one'

CANONICAL_FIELDS = [
    ('From', REQUIRE_EXACTLY_ONE),
    ('Subject', REQUIRE_EXACTLY_ONE),
    ('Date', REQUIRE_EXACTLY_ONE),
    ('Reply-To', OPTIONAL_SINGLE),
    ('Return-Path', OPTIONAL_SINGLE),
    ('To', REQUIRE_EXACTLY_ONE),
    ('Delivered-To', OPTIONAL_SINGLE),
    ('Message-ID', REQUIRE_EXACTLY_ONE),
    ('X-MS-Exchange-Organization-Network-Message-Id', TAKE_ONE),
    ('Authentication-Results', TAKE_ONE),
    ('Authentication-Results-Original', TAKE_ONE),
    ('X-Forefront-Antispam-Report', TAKE_ONE),
    ('X-Microsoft-Antispam', TAKE_ONE),
]


@dataclass
class Canonicalizer:
    """Build canonical headers from headers grouped by identity (oldest first).

    Warnings produced along the way are collected in `warnings`.
    """
    by_identity: Dict[str, List[HeaderRecord]]
    warnings: List[str] = field(default_factory=list)

    def find(self, name: str) -> List[HeaderRecord]:
        return self.by_identity.get(header_identity(name), [])

    def _single(self, name: str, required: bool) -> CanonicalHeader:
        found = self.find(name)
        ans = CanonicalHeader(name=name)
        if len(found) == 1:
            ans.value = found[0].value
        elif len(found) > 1:
            ans.values = [h.value for h in found]
            ans.error = f'{len(found)} {name} headers found, only one allowed'
            self.warnings.append(ans.error)
        elif required:
            ans.is_missing = True
            ans.error = f'no {name} header found'
            self.warnings.append(f'missing {name} header')
        return ans

    def require_exactly_one(self, name: str) -> CanonicalHeader:
        return self._single(name, required=True)

    def optional_single(self, name: str) -> CanonicalHeader:
        return self._single(name, required=False)

    def take_one(self, name: str, direction) -> CanonicalHeader:
        """Pick the operative instance of a header that may legitimately repeat."""
        direction = coerce_direction(direction)
        found = self.find(name)
        ans = CanonicalHeader(name=name)
        if not found:
            return ans
        if len(found) > 1:
            ans.values = [h.value for h in found]
            logger.debug('%d %s headers found, taking the %s one', len(found), name,
                         'newest' if direction is Direction.OUTBOUND else 'oldest')
        if direction is Direction.OUTBOUND:
            ans.value = found[-1].value
        else:
            ans.value = found[0].value
        return ans

    def canonicalize(self, direction) -> Dict[str, CanonicalHeader]:
        """Apply every rule in CANONICAL_FIELDS and return the results by identity."""
        ans = {}
        for name, rule in CANONICAL_FIELDS:
            if rule == TAKE_ONE:
                ans[header_identity(name)] = self.take_one(name, direction)
            else:
                ans[header_identity(name)] = getattr(self, rule)(name)
        return ans
