"""Split raw header text into header records.

Handles folded (multi-line) headers and stops at the first blank line, so the
full source of a message can be pasted in and only the headers are read.
"""
import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

HEADER_NAME_RE = re.compile(r'^[-a-zA-Z0-9]+$')
HEADER_LINE_RE = re.compile(r'^([-\w]+):[ ]?(.*)$')
VALID_HEADER_RE = re.compile(r'^[-\w]+:')


@dataclass(frozen=True)
class HeaderRecord:
    """A single header: the name as written in the source and its unfolded value."""
    name: str
    value: str


def is_header_name(val) -> bool:
    """Return True if val is a string made only of letters, digits and dashes."""
    if not isinstance(val, str):
        return False
    return bool(HEADER_NAME_RE.match(val))


def is_valid_header_line(val) -> bool:
    """Return True if val is a single-line string starting with `Name:`."""
    if not isinstance(val, str):
        return False
    if not VALID_HEADER_RE.match(val):
        return False
    return len(re.split(r'\r\n|\r|\n', val)) == 1


def sanitise_header_value(value: str) -> str:
    """Trim a header value and collapse all whitespace runs to a single space."""
    if not isinstance(value, str):
        raise InvalidArgumentError('header value must be a string')
    return re.sub(r'\s+', ' ', value.strip())


def _normalise_line_endings(source: str) -> str:
    return source.replace('\r\n', '\n').replace('\r', '\n')


def tokenize(source: str) -> List[HeaderRecord]:
    """Return the headers in `source` in the order they appear.

    A line starting with whitespace continues the previous header. The first
    blank line ends the headers. Lines that can't be parsed are logged and
    skipped.
    """
    if not isinstance(source, str):
        raise InvalidArgumentError('must pass a string to tokenize')

    lines = _normalise_line_endings(source).strip().split('\n')
    while lines and not lines[0].strip():
        lines.pop(0)

    records = []
    # name/value of the header being assembled; None while scanning for a header start
    pending_name: Optional[str] = None
    pending_value = ''

    for line in lines:
        if not line.strip():
            # end of headers, start of body
            break

        if not line[0].isspace():
            if pending_name is not None:
                records.append(HeaderRecord(pending_name, pending_value))
            pending_name = None
            pending_value = ''

            match = HEADER_LINE_RE.match(line)
            if not match:
                logger.warning('failed to parse header line: %r', line)
                continue
            if not is_header_name(match.group(1)):
                logger.warning('skipping invalid header name: %r', match.group(1))
                continue
            pending_name = match.group(1)
            pending_value = match.group(2)
        else:
            if pending_name is None:
                logger.debug('ignoring continuation line with no header: %r', line)
                continue
            text = line.strip()
            pending_value = f'{pending_value} {text}' if pending_value else text

    if pending_name is not None:
        records.append(HeaderRecord(pending_name, pending_value))

    logger.debug('tokenized %d headers', len(records))
    return records
