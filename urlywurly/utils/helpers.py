"""Helper utilities for request handling.

Functions:
    get_short_url(shortcode: str, domain: str) -> str
        Get string representation of short URL for a given shortcode
    query_parameter(event: LambdaEvent, name: str) -> str | None
        Read the first value of a query string parameter from a proxy event
    query_unescape(value: str) -> str
        Decode a query-escaped string, rejecting malformed escapes
    parse_uri(value: str) -> SplitResult
        Parse a URI, rejecting malformed input
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(func: Callable) -> Callable
        Decorator: Turn unhandled handler exceptions into HTTP 500 responses

Example:
    >>> from urlywurly.utils.helpers import get_short_url, query_unescape
    >>> get_short_url('yfzne', 'urly.example')
    'https://urly.example/yfzne'
    >>> query_unescape('https%3A%2F%2Fexample.com%2Fa+b')
    'https://example.com/a b'
"""

import os
import string
import re
import json
import logging
import functools
import urllib.parse
from collections.abc import Callable

from urlywurly.types import LambdaEvent, LambdaResponse
from urlywurly.constants import Message, UNKNOWN_INTERNAL_SERVER_ERROR
from urlywurly.exceptions import MissingEnvironmentVariableError
from urlywurly.utils.runtime import running_locally


logger = logging.getLogger(__name__)

# '%' not followed by two hex digits
_BAD_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')
_CONTROL_CHARACTER = re.compile(r'[\x00-\x1f\x7f]')
_SCHEME = re.compile(r'([A-Za-z][A-Za-z0-9+.-]*):')
_PORT = re.compile(r':[0-9]*')

_HOST_CHARACTERS = frozenset(string.ascii_letters + string.digits + "-._~!$&'()*+,;=:[]<>\"%")
_USERINFO_CHARACTERS = frozenset(string.ascii_letters + string.digits + "-._:~!$&'()*+,;=%@")


def get_short_url(shortcode: str, domain: str) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        domain (str): public host name of the service

    Returns:
        str: short url string representation
    """
    return f'https://{domain}/{shortcode}'


def query_parameter(event: LambdaEvent, name: str) -> str | None:
    """Return the first value of a query string parameter

    API Gateway keeps the last value of a repeated parameter in
    `queryStringParameters` and all of them in `multiValueQueryStringParameters`.
    The first value wins whenever the multi-value map is available.

    Args:
        event (LambdaEvent): API Gateway proxy event
        name (str): parameter name

    Returns:
        str | None: parameter value, None if the parameter is absent
    """
    values = (event.get('multiValueQueryStringParameters') or {}).get(name)
    if values:
        return values[0]
    return (event.get('queryStringParameters') or {}).get(name)


def query_unescape(value: str) -> str:
    """Decode a query-escaped string, '+' becomes a space.

    Decoded bytes that are not valid UTF-8 are kept as lone surrogates
    (`surrogateescape`), so `value.encode('utf-8', 'surrogateescape')`
    gives back the exact decoded bytes.

    Raises:
        ValueError: If a '%' isn't followed by two hex digits.
    """
    check_escapes(value)
    return urllib.parse.unquote_plus(value, errors='surrogateescape')


def check_escapes(value: str) -> None:
    """Raise ValueError if a '%' in `value` isn't followed by two hex digits."""
    if match := _BAD_ESCAPE.search(value):
        raise ValueError(f'Invalid URL escape {value[match.start():match.start() + 3]!r}.')


def _check_userinfo(userinfo: str) -> None:
    if invalid := set(userinfo) - _USERINFO_CHARACTERS:
        raise ValueError(f'Invalid character {min(invalid)!r} in URI userinfo.')
    check_escapes(userinfo)


def _check_host(host: str) -> None:
    if host.startswith('['):
        end = host.find(']')
        if end < 0:
            raise ValueError("Missing ']' in host.")
        port = host[end + 1:]
    else:
        port = host[host.rfind(':'):] if ':' in host else ''

    if port and not _PORT.fullmatch(port):
        raise ValueError(f'Invalid port {port!r} after host.')

    for match in re.finditer('%', host):
        escape = host[match.start():match.start() + 3]
        check_escapes(escape)
        # only non-ASCII bytes (and '%' itself) may be escaped in a host name
        if int(escape[1:], 16) < 0x80 and escape != '%25':
            raise ValueError(f'Invalid URL escape {escape!r} in host name.')

    for character in host:
        if character < '\x80' and character not in _HOST_CHARACTERS:
            raise ValueError(f'Invalid character {character!r} in host name.')


def parse_uri(value: str) -> urllib.parse.SplitResult:
    """Parse a URI into its components.

    Validation is as strict as a generic URI parser and no stricter:
        - the part before the fragment must not contain control characters
        - a ':' can't start the URI, nor appear in the first segment of a
          relative path
        - path, fragment, host and userinfo must be correctly %-escaped
          (the query is left alone)
        - host names only contain unreserved and sub-delimiter characters,
          a port is digits only (its range isn't checked), an IPv6 literal
          is closed with ']'
        - the remainder of an absolute URI without '/' after the scheme
          (e.g. 'mailto:someone@example.com') is taken as is

    Returns:
        SplitResult: components, with the scheme lowercased

    Raises:
        ValueError: If the URI is malformed.
    """
    rest, _, fragment = value.partition('#')
    if _CONTROL_CHARACTER.search(rest):
        raise ValueError('Invalid control character in URI.')
    if rest.startswith(':'):
        raise ValueError('Missing protocol scheme.')
    check_escapes(fragment)

    scheme = ''
    if match := _SCHEME.match(rest):
        scheme = match.group(1).lower()
        rest = rest[match.end():]
    rest, _, query = rest.partition('?')

    if not rest.startswith('/'):
        if scheme:
            return urllib.parse.SplitResult(scheme, '', rest, query, fragment)
        if ':' in rest.partition('/')[0]:
            raise ValueError('First path segment in URI cannot contain colon.')

    netloc = ''
    if rest.startswith('//') and (scheme or not rest.startswith('///')):
        netloc, slash, path = rest[2:].partition('/')
        rest = slash + path
        userinfo, at, host = netloc.rpartition('@')
        if at:
            _check_userinfo(userinfo)
        _check_host(host)

    check_escapes(rest)
    return urllib.parse.SplitResult(scheme, netloc, rest, query, fragment)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('DOMAIN', 'BUCKET')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'DOMAIN', 'BUCKET'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(func: Callable[..., LambdaResponse]) -> Callable[..., LambdaResponse]:
    """Decorator: respond with HTTP 500 when a request handler raises.

    Wraps lambda entry points `(event, context)` as well as the proxy event
    handlers the HTTP server calls `(event, **dependencies)`.

    When running locally the exception is re-raised so it surfaces in the console.
    """

    @functools.wraps(func)
    def wrapper(event: LambdaEvent, *args, **kwargs) -> LambdaResponse:
        try:
            return func(event, *args, **kwargs)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in request handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            return {
                'statusCode': 500,
                'headers': {
                    'Access-Control-Allow-Origin': '*',
                    'Content-Type': 'application/json',
                },
                'body': json.dumps(
                    {
                        'message': Message.INTERNAL_SERVER_ERROR,
                        'error_code': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
