from header_analyzer.index import chronological, group_by_identity, header_identity, matching_prefix
from header_analyzer.tokenizer import HeaderRecord


def test_identity_normalisation():
    assert header_identity('Content-Type') == 'content_type'
    assert header_identity('Content-Type') == header_identity('content_type') == header_identity('CONTENT-TYPE')


def test_chronological_reverses_source_order():
    received = [HeaderRecord('A', 'top'), HeaderRecord('B', 'bottom')]
    assert chronological(received) == [HeaderRecord('B', 'bottom'), HeaderRecord('A', 'top')]
    # the input list is left alone
    assert received[0].value == 'top'


def test_group_by_identity_keeps_order_and_merges_spellings():
    headers = [HeaderRecord('received', 'old'), HeaderRecord('Received', 'new'), HeaderRecord('From', 'f')]
    groups = group_by_identity(headers)
    assert [h.value for h in groups['received']] == ['old', 'new']
    assert groups['from'] == [HeaderRecord('From', 'f')]


def test_matching_prefix():
    headers = [HeaderRecord('X-Acme-One', '1'), HeaderRecord('x-acme-two', '2'), HeaderRecord('X-Other', '3')]
    assert [h.value for h in matching_prefix(headers, 'x_ACME')] == ['1', '2']
    assert matching_prefix(headers, '') == []
