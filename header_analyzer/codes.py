"""Static lookup tables for the codes found in Microsoft anti-spam headers.

Lookups never fail: an unmapped code is returned as-is so it can still be
displayed.
"""
import logging
import re
from typing import Optional

from .index import header_identity

logger = logging.getLogger(__name__)

# Codes used in the `CAT` field of the `X-Forefront-Antispam-Report` header.
MAIL_CATEGORISATION_CODES = {
    'BULK': 'bulk mail',
    'DIMP': 'domain impersonation',
    'GIMP': 'mailbox intelligence-derived assumed impersonation',
    'HPHSH': 'high-confidence phishing',
    'HPHISH': 'high-confidence phishing',
    'HSPM': 'high confidence spam',
    'MALW': 'malware',
    'PHSH': 'phishing',
    'SPM': 'spam',
    'SPOOF': 'spoofing',
    'UIMP': 'user impersonation',
    'AMP': 'anti-malware',
    'SAP': 'safe attachments',
    'OSPM': 'out-bound spam',
}

# Codes used in the `SFV` field of the `X-Forefront-Antispam-Report` header.
SPAM_FILTER_ACTION_CODES = {
    'BLK': 'marked as bulk mail',
    'NSPM': 'marked as not spam',
    'SFE': "scan skipped because sender on recipient's safe senders list",
    'SKA': 'scan skipped due to allow-list',
    'SKB': 'scan skipped due to block-list',
    'SKI': 'scan skipped because internal email',
    'SKN': 'scan skipped because marked as not-spam by mail rule',
    'SKQ': 'message released from quarantine',
    'SKS': 'scan skipped because already marked as spam by mail rule',
    'SPM': 'marked as spam',
}

# Two-digit suffixes of compauth reason codes starting with 0 (failures).
COMPAUTH_FAILURE_REASONS = {
    '00': 'explicit failure - sending domain published DMARC/DKIM/SPF records',
    '01': 'implicit failure - sending domain published no DMARC/DKIM/SPF records, or non-enforcing records',
    '02': 'enforced failure - mail rule in place to enforce DMARC/DKIM/SPF even if the records are non-enforcing',
    '10': 'exempted failure - the message failed DMARC but the domain is on the allow-list',
}

# Leading digit of compauth reason codes other than 0.
COMPAUTH_REASON_CATEGORIES = {
    '1': 'explicit pass',
    '7': 'explicit pass',
    '2': 'implicit pass',
    '3': 'not checked',
    '4': 'skipped',
    '9': 'skipped',
    '6': 'exempted failure - the message failed compauth, but the domain is on the allow-list',
}

# Header names by display category, used to highlight headers in listings.
ADDRESSING_HEADERS = [
    'Date',
    'Subject',
    'To',
    'From',
    'Reply-To',
    'Return-Path',
    'Delivered-To',
    'Message-ID',
    'X-MS-Exchange-Organization-Network-Message-Id',
]

ROUTING_HEADERS = [
    'Received',
]

SECURITY_HEADERS = [
    'Authentication-Results',
    'X-Forefront-Antispam-Report',
    'X-Microsoft-Antispam',
    'Received-SPF',
    'DKIM-Signature',
    'Authentication-Results-Original',
]

_ADDRESSING_IDS = frozenset(header_identity(h) for h in ADDRESSING_HEADERS)
_ROUTING_IDS = frozenset(header_identity(h) for h in ROUTING_HEADERS)
_SECURITY_IDS = frozenset(header_identity(h) for h in SECURITY_HEADERS)


def describe_category(code: str) -> str:
    """Meaning of a `CAT` code, or the code itself if unknown."""
    if code not in MAIL_CATEGORISATION_CODES:
        logger.debug('unmapped mail categorisation code: %r', code)
    return MAIL_CATEGORISATION_CODES.get(code, code)


def describe_spam_filter_action(code: str) -> str:
    """Meaning of an `SFV` code, or the code itself if unknown."""
    if code not in SPAM_FILTER_ACTION_CODES:
        logger.debug('unmapped spam filter action code: %r', code)
    return SPAM_FILTER_ACTION_CODES.get(code, code)


def compound_auth_reason(code) -> str:
    """Convert a three-digit compauth reason code (str or int) into a meaning."""
    code = str(code)
    match = re.match(r'^(\d)(\d\d)$', code)
    if not match:
        return f'INVALID CODE: {code}'
    leading, trailing = match.groups()
    if leading == '0':
        return COMPAUTH_FAILURE_REASONS.get(trailing, 'generic failure')
    if leading in COMPAUTH_REASON_CATEGORIES:
        return COMPAUTH_REASON_CATEGORIES[leading]
    return f'UNKNOWN CODE: {code}'


def _as_score(score) -> int:
    try:
        return int(score)
    except (TypeError, ValueError):
        return -2


def scl_meaning(score=-2) -> str:
    """Describe a Spam Confidence Level. -2 means no score was supplied."""
    score = _as_score(score)
    if score == -1:
        return 'not scored'
    if score in (0, 1):
        return 'not spam'
    if score in (5, 6):
        return 'spam'
    if score == 9:
        return 'high-confidence spam'
    return 'UNKNOWN'


def bcl_meaning(score=-2) -> str:
    """Describe a Bulk Complaint Level. -2 means no score was supplied."""
    score = _as_score(score)
    if score == 0:
        return 'not from bulk mail sender'
    if 1 <= score <= 3:
        return 'few user complaints'
    if 4 <= score <= 7:
        return 'some user complaints'
    if 8 <= score <= 9:
        return 'many user complaints'
    return 'UNKNOWN'


def header_category(name: str, custom_prefix: str = '') -> Optional[str]:
    """Return the display category of a header name.

    One of 'security', 'routing', 'addressing', 'custom' (checked in that
    order) or None.
    """
    hid = header_identity(name)
    if hid in _SECURITY_IDS:
        return 'security'
    if hid in _ROUTING_IDS:
        return 'routing'
    if hid in _ADDRESSING_IDS:
        return 'addressing'
    if custom_prefix and hid.startswith(header_identity(custom_prefix)):
        return 'custom'
    return None
