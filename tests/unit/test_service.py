"""Unit tests for the core shorten/lengthen operations in service.py.

Test coverage includes:

1. validate_long_url()
   - Missing, undecodable, unparseable and non-HTTP URLs are rejected in that order.
   - Double-encoded URLs are decoded once more.

2. shorten()
   - Generated short codes are derived from the decoded URL and overwrite silently.
   - Custom short codes are checked for collisions before their format.
   - Store read failures during the collision check count as "unclaimed".
   - Store write failures propagate.

3. lengthen()
   - Returns the stored URL, propagates store errors.
"""

from unittest.mock import MagicMock

import pytest

from urlywurly import service
from urlywurly.models import ShortURLModel
from urlywurly.dao.exceptions import DataStoreError, ShortURLNotFoundError
from urlywurly.exceptions import (
    MissingURLError,
    URLDecodeError,
    URIParseError,
    UnsupportedSchemeError,
    CustomCodeTakenError,
    InvalidCustomCodeError,
)
from urlywurly.utils.shortener import generate_shortcode
from urlywurly.utils.tracing import LoggingTracer


# -------------------------------
# 1. validate_long_url()
# -------------------------------


@pytest.mark.parametrize(
    'long_url, expected',
    [
        ('https://example.com/page', 'https://example.com/page'),
        ('http%3A%2F%2Fexample.com%2Fpage%3Fq%3D1', 'http://example.com/page?q=1'),
        ('  https://example.com/padded  ', 'https://example.com/padded'),
        ('HTTPS://Example.com', 'HTTPS://Example.com'),
        ('https://a.example:99999/', 'https://a.example:99999/'),
        ('https://a.example/?q=%25zz', 'https://a.example/?q=%zz'),
        ('https://example.com/%ff', 'https://example.com/\udcff'),
    ],
)
def test_validate_long_url(long_url, expected):
    assert service.validate_long_url(long_url) == expected


@pytest.mark.parametrize(
    'long_url, error',
    [
        (None, MissingURLError),
        ('', MissingURLError),
        ('https://example.com/100%', URLDecodeError),
        ('https://example.com/%zz', URLDecodeError),
        ('https://example.com/%00', URIParseError),
        ('%3A%2F%2Fexample.com', URIParseError),
        ('http://[::1/page', URIParseError),
        ('https://a.example/%25zz', URIParseError),
        ('https://a.example/%25', URIParseError),
        ('https://a%20b.example/', URIParseError),
        ('https://a.example/page%23%25zz', URIParseError),
        ('ftp://example.com/file', UnsupportedSchemeError),
        ('example.com', UnsupportedSchemeError),
        ('not-a-url', UnsupportedSchemeError),
        ('file:///etc/passwd', UnsupportedSchemeError),
        ('   ', UnsupportedSchemeError),
    ],
)
def test_validate_long_url_rejects(long_url, error):
    with pytest.raises(error):
        service.validate_long_url(long_url)


def test_validation_errors_carry_client_messages():
    with pytest.raises(MissingURLError, match='no url to shorten provided!'):
        service.validate_long_url('')
    with pytest.raises(UnsupportedSchemeError, match='provided input is not a HTTP/HTTPS URL!'):
        service.validate_long_url('mailto:someone@example.com')


# -------------------------------
# 2. shorten()
# -------------------------------


def test_shorten_generates_shortcode(memory_dao, settings):
    short_url = service.shorten('https%3A%2F%2Fexample.com%2Fpage', dao=memory_dao, settings=settings)

    shortcode = generate_shortcode('https://example.com/page')
    assert short_url == f'https://urly.test/{shortcode}'
    assert memory_dao.links == {shortcode: 'https://example.com/page'}


def test_shorten_generated_shortcode_is_deterministic(memory_dao, settings):
    first = service.shorten('https://example.com/page', dao=memory_dao, settings=settings)
    second = service.shorten('https://example.com/page', dao=memory_dao, settings=settings)

    assert first == second
    assert len(memory_dao.links) == 1


def test_shorten_generated_shortcode_overwrites(memory_dao, settings):
    shortcode = generate_shortcode('https://example.com/page')
    memory_dao.write(ShortURLModel(target='https://other.example', shortcode=shortcode))

    service.shorten('https://example.com/page', dao=memory_dao, settings=settings)

    assert memory_dao.links[shortcode] == 'https://example.com/page'


def test_shorten_with_custom_code(memory_dao, settings):
    short_url = service.shorten('https://a.example', 'my-link1', dao=memory_dao, settings=settings)

    assert short_url == 'https://urly.test/my-link1'
    assert service.lengthen('my-link1', dao=memory_dao) == 'https://a.example'


def test_shorten_with_taken_custom_code(memory_dao, settings):
    memory_dao.write(ShortURLModel(target='https://a.example', shortcode='my-link1'))

    with pytest.raises(CustomCodeTakenError, match='Custom name already registered to another URL!'):
        service.shorten('https://b.example', 'my-link1', dao=memory_dao, settings=settings)

    assert memory_dao.links['my-link1'] == 'https://a.example'


def test_shorten_collision_check_runs_before_format_check(memory_dao, settings):
    memory_dao.write(ShortURLModel(target='https://a.example', shortcode='abc'))

    with pytest.raises(CustomCodeTakenError):
        service.shorten('https://b.example', 'abc', dao=memory_dao, settings=settings)


@pytest.mark.parametrize('custom_code', ['', 'abc', 'abcde', 'has space', 'bad.dots', 'émigré-1', 'abcdef\n'])
def test_shorten_with_invalid_custom_code(memory_dao, settings, custom_code):
    with pytest.raises(InvalidCustomCodeError):
        service.shorten('https://a.example', custom_code, dao=memory_dao, settings=settings)

    assert memory_dao.links == {}


@pytest.mark.parametrize('custom_code', ['abcdef', 'my_link-1', '------', 'A1b2C3d4'])
def test_shorten_with_valid_custom_code(memory_dao, settings, custom_code):
    assert service.shorten('https://a.example', custom_code, dao=memory_dao, settings=settings) == f'https://urly.test/{custom_code}'


def test_shorten_empty_stored_target_counts_as_unclaimed(memory_dao, settings):
    memory_dao.write(ShortURLModel(target='', shortcode='my-link1'))

    service.shorten('https://a.example', 'my-link1', dao=memory_dao, settings=settings)

    assert memory_dao.links['my-link1'] == 'https://a.example'


def test_shorten_read_failure_counts_as_unclaimed(settings):
    dao = MagicMock()
    dao.read.side_effect = DataStoreError('unreachable')

    service.shorten('https://a.example', 'my-link1', dao=dao, settings=settings)

    dao.write.assert_called_once_with(ShortURLModel(target='https://a.example', shortcode='my-link1'))


def test_shorten_validates_url_before_custom_code(settings):
    dao = MagicMock()

    with pytest.raises(UnsupportedSchemeError):
        service.shorten('ftp://a.example', 'abc', dao=dao, settings=settings)

    dao.read.assert_not_called()
    dao.write.assert_not_called()


def test_shorten_write_failure_propagates(settings):
    dao = MagicMock()
    dao.write.side_effect = DataStoreError('unreachable')

    with pytest.raises(DataStoreError):
        service.shorten('https://a.example', dao=dao, settings=settings)


def test_shorten_pattern_compile_failure_skips_format_check(memory_dao, settings, monkeypatch):
    monkeypatch.setattr(service, 'custom_code_pattern', lambda: None)

    assert service.shorten('https://a.example', 'abc', dao=memory_dao, settings=settings) == 'https://urly.test/abc'


def test_shorten_traces_spans(memory_dao, settings):
    tracer = MagicMock(wraps=LoggingTracer())

    service.shorten('https://a.example', 'my-link1', dao=memory_dao, settings=settings, tracer=tracer)

    spans = [c.args[0] for c in tracer.span.call_args_list]
    assert spans == ['shorten', 'store.read', 'store.write']


# -------------------------------
# 3. lengthen()
# -------------------------------


def test_lengthen(memory_dao):
    memory_dao.write(ShortURLModel(target='https://example.com/page', shortcode='yfzne'))

    assert service.lengthen('yfzne', dao=memory_dao) == 'https://example.com/page'


def test_lengthen_not_found(memory_dao):
    with pytest.raises(ShortURLNotFoundError):
        service.lengthen('nope12', dao=memory_dao)


def test_lengthen_store_failure():
    dao = MagicMock()
    dao.read.side_effect = DataStoreError('unreachable')

    with pytest.raises(DataStoreError):
        service.lengthen('yfzne', dao=dao)
