from header_analyzer.codes import (
    bcl_meaning,
    compound_auth_reason,
    describe_category,
    describe_spam_filter_action,
    header_category,
    scl_meaning,
)


def test_scl_meaning():
    assert scl_meaning(-1) == 'not scored'
    assert scl_meaning(0) == 'not spam'
    assert scl_meaning(1) == 'not spam'
    assert scl_meaning(5) == 'spam'
    assert scl_meaning(6) == 'spam'
    assert scl_meaning(9) == 'high-confidence spam'
    assert scl_meaning(42) == 'UNKNOWN'
    assert scl_meaning(3) == 'UNKNOWN'
    assert scl_meaning() == 'UNKNOWN'
    assert scl_meaning('9') == 'high-confidence spam'
    assert scl_meaning('junk') == 'UNKNOWN'


def test_bcl_meaning():
    assert bcl_meaning(0) == 'not from bulk mail sender'
    assert [bcl_meaning(n) for n in (1, 3)] == ['few user complaints'] * 2
    assert [bcl_meaning(n) for n in (4, 7)] == ['some user complaints'] * 2
    assert [bcl_meaning(n) for n in (8, 9)] == ['many user complaints'] * 2
    assert bcl_meaning(10) == 'UNKNOWN'
    assert bcl_meaning(-1) == 'UNKNOWN'
    assert bcl_meaning() == 'UNKNOWN'


def test_compound_auth_reason():
    assert compound_auth_reason('000').startswith('explicit failure')
    assert compound_auth_reason('001').startswith('implicit failure')
    assert compound_auth_reason('002').startswith('enforced failure')
    assert compound_auth_reason('010').startswith('exempted failure')
    assert compound_auth_reason('005') == 'generic failure'
    assert compound_auth_reason(100) == 'explicit pass'
    assert compound_auth_reason('701') == 'explicit pass'
    assert compound_auth_reason('202') == 'implicit pass'
    assert compound_auth_reason('301') == 'not checked'
    assert compound_auth_reason('451') == 'skipped'
    assert compound_auth_reason('905') == 'skipped'
    assert compound_auth_reason('601').startswith('exempted failure')
    assert compound_auth_reason('501') == 'UNKNOWN CODE: 501'
    assert compound_auth_reason('12') == 'INVALID CODE: 12'


def test_code_lookups_fall_back_to_code():
    assert describe_category('HPHISH') == 'high-confidence phishing'
    assert describe_category('XYZ') == 'XYZ'
    assert describe_spam_filter_action('SKB') == 'scan skipped due to block-list'
    assert describe_spam_filter_action('SKI') == 'scan skipped because internal email'
    assert describe_spam_filter_action('???') == '???'


def test_header_category_precedence():
    assert header_category('Authentication-Results') == 'security'
    assert header_category('dkim_signature') == 'security'
    assert header_category('RECEIVED') == 'routing'
    assert header_category('Reply-To') == 'addressing'
    assert header_category('X-Acme-Id', 'x-acme') == 'custom'
    assert header_category('X-Acme-Id') is None
    # a built-in category wins over the custom prefix
    assert header_category('X-Microsoft-Antispam', 'X-') == 'security'
