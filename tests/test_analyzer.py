from pathlib import Path

from header_analyzer import analyze_header_set, parse_header_source

SAMPLES = Path(__file__).resolve().parent.parent / 'sample_headers'


def test_analyze_phishing_sample():
    text = (SAMPLES / 'phishing_sample.txt').read_text(encoding='utf-8')
    summary = analyze_header_set(parse_header_source(text, 'inbound'))

    # the sample has no To header
    assert summary['warnings'] == ['missing To header']
    to_row = next(r for r in summary['basics'] if r['label'] == 'To')
    assert to_row['missing']

    labels = {r['label']: r for r in summary['security']}
    assert labels['SPF']['result'] == 'softfail'
    assert labels['Spam Confidence Level']['meaning'] == 'high-confidence spam'
    assert labels['Bulk Complaint Level']['meaning'] == 'many user complaints'
    assert labels['Original Authentication']['result'] == 'fail'
    assert labels['Category']['meaning'] == 'phishing'

    notes = summary['notes']
    assert any(n.startswith('Reply-To') for n in notes)
    assert 'SPF result: softfail.' in notes
    assert 'Message was released from quarantine.' in notes
    assert 'Message was flagged due to user complaints.' in notes
    assert 'Spoofing detected (user).' in notes


def test_basics_skip_absent_optional_headers():
    hs = parse_header_source('From: a@example.com\nTo: b@example.com\nSubject: s\nDate: d\nMessage-ID: <m>',
                             'inbound')
    summary = analyze_header_set(hs)
    assert [r['label'] for r in summary['basics']] == ['Subject', 'Date', 'From', 'To', 'Message ID']
    assert summary['security'] == []
    assert summary['notes'] == []


def test_reply_to_same_address_is_not_noted():
    hs = parse_header_source('From: Alice <alice@example.com>\nReply-To: ALICE@example.com', 'inbound')
    assert not any(n.startswith('Reply-To') for n in analyze_header_set(hs)['notes'])


def test_duplicate_rows_carry_values():
    hs = parse_header_source('Subject: a\nSubject: b', 'inbound')
    row = next(r for r in analyze_header_set(hs)['basics'] if r['label'] == 'Subject')
    assert row['values'] == ['b', 'a']
    assert row['error'] == '2 Subject headers found, only one allowed'


def test_header_categories_and_custom_headers():
    hs = parse_header_source('Received: hop\nX-Acme-Id: 1\nFrom: f\nX-Other: 2\nDKIM-Signature: sig',
                             'inbound', 'X-Acme')
    summary = analyze_header_set(hs)
    assert [h['category'] for h in summary['headers']] == ['routing', 'custom', 'addressing', None, 'security']
    assert summary['custom_headers'] == [{'name': 'X-Acme-Id', 'value': '1'}]
