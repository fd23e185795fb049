"""Summaries of a parsed HeaderSet for display.

Builds plain dicts/lists that a front end (the CLI in main.py) can render
without knowing anything about how headers are parsed.
"""
from email.utils import parseaddr
from typing import List

from .codes import bcl_meaning, header_category, scl_meaning
from .decoders import AuthResult, SpoofingType
from .parser import HeaderSet

BASICS_FIELDS = [
    ('Subject', 'Subject'),
    ('Date', 'Date'),
    ('From', 'From'),
    ('Reply To', 'Reply-To'),
    ('Return Path', 'Return-Path'),
    ('To', 'To'),
    ('Delivered To', 'Delivered-To'),
    ('Message ID', 'Message-ID'),
    ('Network Message ID', 'X-MS-Exchange-Organization-Network-Message-Id'),
]

FAILED_RESULTS = (AuthResult.FAIL, AuthResult.SOFTFAIL, AuthResult.PERMERROR)


def _address(value: str) -> str:
    return parseaddr(value)[1].lower()


def basics(header_set: HeaderSet) -> List[dict]:
    """One row per addressing field; optional fields only when present."""
    rows = []
    for label, name in BASICS_FIELDS:
        canonical = header_set.canonical(name)
        if canonical is None:
            continue
        if not canonical.value and not canonical.error:
            # optional header that isn't there
            continue
        rows.append({
            'label': label,
            'value': canonical.value,
            'values': canonical.values or [],
            'missing': canonical.is_missing,
            'error': canonical.error,
        })
    return rows


def security_summary(header_set: HeaderSet) -> List[dict]:
    """Rows summarising the decoded security headers that were present."""
    report = header_set.security_report
    rows = []
    if report.get('authentication_results_header_specified'):
        compauth = report['compound_authentication']
        rows.append({'label': 'Compound Authentication', 'result': compauth['result'],
                     'meaning': compauth['reason_meaning']})
        rows.append({'label': 'SPF', 'result': report['spf']['result'], 'meaning': report['spf']['details']})
        rows.append({'label': 'DKIM', 'result': report['dkim']['result'], 'meaning': report['dkim']['details']})
        rows.append({'label': 'DMARC', 'result': report['dmarc']['result'],
                     'meaning': f"action={report['dmarc']['action']}"})
    if report.get('authentication_results_original_header_specified'):
        rows.append({'label': 'Original Authentication', 'result': report['original_authentication']['result'],
                     'meaning': 'result before release from quarantine'})
    if report.get('forefront_antispam_report_header_specified'):
        rows.append({'label': 'Spam Confidence Level', 'result': report['spam_score'],
                     'meaning': scl_meaning(report['spam_score'])})
        rows.append({'label': 'Category', 'result': report['message_categorisation_code'] or 'unknown',
                     'meaning': report['message_categorisation']})
        rows.append({'label': 'Spam Filter Action', 'result': report['spam_filter_action_code'] or 'none',
                     'meaning': report['spam_filter_action']})
    if report.get('microsoft_antispam_header_specified'):
        rows.append({'label': 'Bulk Complaint Level', 'result': report['bulk_mail_score'],
                     'meaning': bcl_meaning(report['bulk_mail_score'])})
    return rows


def triage_notes(header_set: HeaderSet) -> List[str]:
    """Human-readable observations worth a second look."""
    notes = []
    report = header_set.security_report

    from_header = header_set.canonical('From')
    reply_to = header_set.canonical('Reply-To')
    if from_header and reply_to and from_header.value and reply_to.value:
        if _address(from_header.value) != _address(reply_to.value):
            notes.append(f'Reply-To ({reply_to.value}) differs from From ({from_header.value}).')

    if report.get('authentication_results_header_specified'):
        for key, label in (('compound_authentication', 'Compound authentication'),
                           ('spf', 'SPF'), ('dkim', 'DKIM'), ('dmarc', 'DMARC')):
            result = report[key]['result']
            if result in FAILED_RESULTS:
                notes.append(f'{label} result: {result.value}.')

    if report.get('forefront_antispam_report_header_specified'):
        if report['released_from_quarantine']:
            notes.append('Message was released from quarantine.')
        if report['flagged_due_to_user_complaints']:
            notes.append('Message was flagged due to user complaints.')
        if report['spoofing_detected'] is not SpoofingType.NONE:
            notes.append(f"Spoofing detected ({report['spoofing_detected'].value}).")

    return notes


def categorised_headers(header_set: HeaderSet) -> List[dict]:
    """Every header as received, tagged with its display category."""
    return [
        {'name': h.name, 'value': h.value, 'category': header_category(h.name, header_set.custom_prefix)}
        for h in header_set.headers_as_received
    ]


def analyze_header_set(header_set: HeaderSet) -> dict:
    """Return the full display summary for a parsed HeaderSet."""
    return {
        'basics': basics(header_set),
        'security': security_summary(header_set),
        'notes': triage_notes(header_set),
        'headers': categorised_headers(header_set),
        'custom_headers': [{'name': h.name, 'value': h.value}
                           for h in header_set.headers_matching_custom_prefix],
        'warnings': list(header_set.warnings),
    }
