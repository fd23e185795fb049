"""Decoders for the security headers stamped by Microsoft mail systems.

Each decoder takes a single header value and returns a flat dict fragment.
An empty value gives an empty dict; otherwise the fragment carries a
`*_header_specified` flag so a missing header can be told apart from one
whose results are merely unknown. The syntax of these headers is not
contractually stable, so the decoders never raise on malformed content:
anything they don't understand is logged at debug level and skipped.
"""
import logging
import re
from enum import Enum

from .codes import describe_category, describe_spam_filter_action, compound_auth_reason
from .errors import InvalidArgumentError
from .tokenizer import sanitise_header_value

logger = logging.getLogger(__name__)

NO_DETAILS = 'no additional info'


class AuthResult(str, Enum):
    """Outcome of an SPF/DKIM/DMARC/compauth check as reported by the mail system."""
    NONE = 'none'
    PASS = 'pass'
    NEUTRAL = 'neutral'
    FAIL = 'fail'
    SOFTFAIL = 'softfail'
    TEMPERROR = 'temperror'
    PERMERROR = 'permerror'
    POLICY = 'policy'
    BESTGUESSPASS = 'bestguesspass'
    UNKNOWN = 'unknown'

    @classmethod
    def from_token(cls, token: str) -> 'AuthResult':
        try:
            return cls(token.lower())
        except ValueError:
            logger.debug('unrecognised authentication result: %r', token)
            return cls.UNKNOWN


class SpoofingType(str, Enum):
    NONE = 'none'
    USER = 'user'
    DOMAIN = 'domain'


class IpReputation(str, Enum):
    NONE = 'none'
    ALLOW_LISTED = 'allow-listed'
    NOT_LISTED = 'not on any reputation lists'


SPOOFING_TYPES = {
    '9.19': SpoofingType.USER,
    '9.20': SpoofingType.DOMAIN,
}

IP_REPUTATIONS = {
    'CAL': IpReputation.ALLOW_LISTED,
    'NLI': IpReputation.NOT_LISTED,
}

PART_SPLIT_RE = re.compile(r';[ ]?')
AUTH_PART_RE = re.compile(r'^(\w+)=(\w+)[ ]?(.*)$')
REASON_RE = re.compile(r'\breason=(\d{3})\b')
ACTION_RE = re.compile(r'\baction=(\w+)\b')
ORIGINAL_AUTH_RE = re.compile(r'(?:^|[\s;])auth=(\w+)')
FOREFRONT_FIELD_RE = re.compile(r'^(\w+):(.*)$')
BCL_RE = re.compile(r'BCL:(\d+)')


def _prepare(value, header_name: str) -> str:
    """Sanitise a header value and strip a leading `Header-Name:` if present."""
    if not isinstance(value, str):
        raise InvalidArgumentError('must pass a string')
    value = sanitise_header_value(value)
    prefix = re.compile(r'^' + re.escape(header_name) + r':[ ]?', re.IGNORECASE)
    return prefix.sub('', value, count=1).strip()


def _strip_wrapping_parens(text: str) -> str:
    """Remove one layer of parentheses if they wrap the whole of text."""
    text = text.strip()
    if len(text) < 2 or text[0] != '(' or text[-1] != ')':
        return text
    depth = 0
    for i, ch in enumerate(text):
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth == 0 and i != len(text) - 1:
                # the opening bracket closes before the end, so it doesn't wrap everything
                return text
    return text[1:-1].strip()


def decode_authentication_results(value: str) -> dict:
    """Decode an `Authentication-Results` header value.

    Handles the `compauth`, `dmarc`, `dkim` and `spf` parts; other parts
    (e.g. the authserv-id) are skipped.
    """
    header_val = _prepare(value, 'Authentication-Results')
    if not header_val:
        return {}

    ans = {
        'compound_authentication': {
            'result': AuthResult.UNKNOWN,
            'reason_code': '000',
            'reason_meaning': 'UNKNOWN',
            'details': NO_DETAILS,
        },
        'dkim': {'result': AuthResult.UNKNOWN, 'details': NO_DETAILS},
        'dmarc': {'result': AuthResult.UNKNOWN, 'action': 'unknown', 'details': NO_DETAILS},
        'spf': {'result': AuthResult.UNKNOWN, 'details': NO_DETAILS},
        'authentication_results_header_specified': True,
    }

    for part in PART_SPLIT_RE.split(header_val):
        part = part.strip()
        if not part:
            continue
        match = AUTH_PART_RE.match(part)
        if not match:
            logger.debug('failed to parse authentication results part: %r', part)
            continue
        part_name, outcome, details = match.groups()
        part_name = part_name.lower()

        if part_name == 'compauth':
            entry = ans['compound_authentication']
            entry['result'] = AuthResult.from_token(outcome)
            entry['details'] = part
            reason = REASON_RE.search(details)
            if reason:
                entry['reason_code'] = reason.group(1)
                entry['reason_meaning'] = compound_auth_reason(reason.group(1))
            else:
                logger.debug('failed to parse compound authentication reason: %r', part)
        elif part_name == 'dmarc':
            entry = ans['dmarc']
            entry['result'] = AuthResult.from_token(outcome)
            entry['details'] = part
            action = ACTION_RE.search(details)
            if action:
                entry['action'] = action.group(1)
            else:
                logger.debug('failed to parse dmarc action: %r', part)
        elif part_name in ('dkim', 'spf'):
            entry = ans[part_name]
            entry['result'] = AuthResult.from_token(outcome)
            details = _strip_wrapping_parens(details)
            if details:
                entry['details'] = details
        else:
            logger.debug('unexpected authentication results part %r: %r', part_name, part)

    return ans


def decode_original_authentication_results(value: str) -> dict:
    """Decode an `Authentication-Results-Original` header value.

    Only the `auth=` outcome is extracted; it is the result from before the
    message was released from quarantine.
    """
    header_val = _prepare(value, 'Authentication-Results-Original')
    if not header_val:
        return {}

    ans = {
        'original_authentication': {'result': AuthResult.UNKNOWN, 'details': header_val},
        'authentication_results_original_header_specified': True,
    }
    match = ORIGINAL_AUTH_RE.search(header_val)
    if match:
        ans['original_authentication']['result'] = AuthResult.from_token(match.group(1))
    else:
        logger.debug('no auth= result in original authentication results: %r', header_val)
    return ans


def _parse_int(raw, default: int) -> int:
    try:
        return int(raw.strip())
    except (AttributeError, ValueError):
        return default


def decode_forefront_antispam_report(value: str) -> dict:
    """Decode an `X-Forefront-Antispam-Report` header value.

    The value is a list of `KEY:value` fields separated by semicolons.
    """
    header_val = _prepare(value, 'X-Forefront-Antispam-Report')
    if not header_val:
        return {}

    fields = {}
    for part in PART_SPLIT_RE.split(header_val):
        if not part:
            continue
        match = FOREFRONT_FIELD_RE.match(part)
        if match:
            fields[match.group(1)] = match.group(2)
        else:
            logger.debug('failed to parse forefront field: %r', part)

    cat = fields.get('CAT')
    sfv = fields.get('SFV')
    return {
        'message_categorisation': describe_category(cat) if cat else 'unknown',
        'message_categorisation_code': cat or '',
        'sender': {
            'country_code': fields.get('CTRY') or 'UNKNOWN',
            'smtp_helo_string': fields.get('H', ''),
            'ip': fields.get('CIP', ''),
            'ip_reputation': IP_REPUTATIONS.get(fields.get('IPV'), IpReputation.NONE),
            'ip_reverse_dns': fields.get('PTR', ''),
        },
        'spam_score': _parse_int(fields.get('SCL'), -1),
        'spam_filter_action': describe_spam_filter_action(sfv) if sfv else 'none',
        'spam_filter_action_code': sfv or '',
        'spoofing_detected': SPOOFING_TYPES.get(fields.get('SFTY'), SpoofingType.NONE),
        'flagged_due_to_user_complaints': fields.get('SRV') == 'BULK',
        'released_from_quarantine': sfv == 'SKQ',
        'forefront_antispam_report_header_specified': True,
    }


def decode_microsoft_antispam(value: str) -> dict:
    """Decode an `X-Microsoft-Antispam` header value, extracting the BCL."""
    header_val = _prepare(value, 'X-Microsoft-Antispam')
    if not header_val:
        return {}

    match = BCL_RE.search(header_val)
    if not match:
        logger.debug('no BCL found in microsoft antispam header: %r', header_val)
    return {
        'bulk_mail_score': int(match.group(1)) if match else -1,
        'microsoft_antispam_header_specified': True,
    }
