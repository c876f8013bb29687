import pytest

from awsassume.exceptions import UsageError, ValidationError
from awsassume.utils import (
    parse_duration,
    parse_arn,
    resource_type,
    is_iam_resource,
    yamlfmt,
)


@pytest.mark.parametrize('value, seconds', [
    ('1h', 3600),
    ('1h30m', 5400),
    ('90m', 5400),
    ('900s', 900),
    ('1.5h', 5400),
    ('2h0m30s', 7230),
    ('3600', 3600),
    (7200, 7200),
    ('1500ms', 1),
])
def test_parse_duration(value, seconds):
    assert parse_duration(value) == seconds


@pytest.mark.parametrize('value', [
    '', 'h', '1x', '1h30', 'one hour', '0', '0s', '-1h', '500ms', True,
    '\u00b2', '\u0663', '\u0663s',
])
def test_parse_duration_rejects(value):
    with pytest.raises(UsageError):
        parse_duration(value)


def test_parse_arn():
    arn = parse_arn('arn:aws:iam::111122223333:role/path/Dev')
    assert arn.partition == 'aws'
    assert arn.service == 'iam'
    assert arn.region == ''
    assert arn.account_id == '111122223333'
    assert arn.resource == 'role/path/Dev'
    assert resource_type(arn) == 'role'


def test_parse_arn_keeps_colons_in_resource():
    arn = parse_arn('arn:aws:logs:us-east-1:111122223333:log-group:my:group')
    assert arn.resource == 'log-group:my:group'
    assert resource_type(arn) == 'log-group'


@pytest.mark.parametrize('value', [
    'Dev',
    'arn:aws:iam::111122223333',
    'nra:aws:iam::111122223333:role/Dev',
    'arn::iam::111122223333:role/Dev',
    'arn:aws:::111122223333:role/Dev',
    'arn:aws:iam::111122223333:',
])
def test_parse_arn_rejects(value):
    with pytest.raises(ValidationError):
        parse_arn(value)


@pytest.mark.parametrize('value, rtype, expected', [
    ('arn:aws:iam::111122223333:role/Dev', 'role', True),
    ('arn:aws-cn:iam::111122223333:role/Dev', 'role', True),
    ('arn:aws:iam::111122223333:user/Dev', 'role', False),
    ('arn:aws:s3::111122223333:role/Dev', 'role', False),
    ('arn:aws:iam::111122223333:mfa/dev-token', 'mfa', True),
    ('arn:aws:iam::111122223333:role/dev-token', 'mfa', False),
    ('arn:aws:sts::111122223333:mfa/dev-token', 'mfa', False),
])
def test_is_iam_resource_needs_service_and_resource_type(value, rtype, expected):
    assert is_iam_resource(parse_arn(value), rtype) is expected


def test_yamlfmt():
    assert yamlfmt({'b': 1, 'a': 'x'}) == 'a: x\nb: 1\n'


def test_parse_arn_returns_sections_after_prefix():
    assert parse_arn('arn:aws:iam::111122223333:mfa/dev-token') == (
            'aws', 'iam', '', '111122223333', 'mfa/dev-token')
