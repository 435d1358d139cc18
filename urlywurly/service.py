"""Core URL shortening operations.

Functions:
    shorten(long_url, custom_code, *, dao, settings, tracer) -> str
        Validate a long URL, resolve its short code and persist the mapping.
        Returns the public short URL.
    lengthen(shortcode, *, dao, tracer) -> str
        Return the long URL stored under a short code.

Both operations are synchronous and stateless: the store adapter, the settings
and the tracer are passed in by the caller.

Example:
    >>> from urlywurly.dao.memory import ShortURLMemoryDAO
    >>> from urlywurly.utils.config import Settings
    >>> dao = ShortURLMemoryDAO()
    >>> settings = Settings(domain='urly.example')
    >>> shorten('https%3A%2F%2Fexample.com%2Fpage', None, dao=dao, settings=settings)
    'https://urly.example/...'
    >>> shorten('https://a.example', 'my-link1', dao=dao, settings=settings)
    'https://urly.example/my-link1'
    >>> lengthen('my-link1', dao=dao)
    'https://a.example'
"""

import re
import logging
import functools

from urlywurly.constants import CUSTOM_CODE_PATTERN
from urlywurly.models import ShortURLModel
from urlywurly.dao.base import ShortURLBaseDAO
from urlywurly.dao.exceptions import DAOError
from urlywurly.exceptions import (
    MissingURLError,
    URLDecodeError,
    URIParseError,
    UnsupportedSchemeError,
    CustomCodeTakenError,
    InvalidCustomCodeError,
)
from urlywurly.utils.config import Settings
from urlywurly.utils.helpers import get_short_url, query_unescape, parse_uri
from urlywurly.utils.shortener import generate_shortcode
from urlywurly.utils.tracing import Tracer, NullTracer


logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({'http', 'https'})

_NULL_TRACER = NullTracer()


@functools.cache
def custom_code_pattern() -> re.Pattern | None:
    """Compile the custom short code pattern, None if it doesn't compile."""
    try:
        return re.compile(CUSTOM_CODE_PATTERN, re.ASCII)
    except re.error:
        logger.exception('Unable to compile custom code pattern.', extra={'pattern': CUSTOM_CODE_PATTERN})
        return None


def validate_long_url(long_url: str | None) -> str:
    """Decode and validate a query-escaped long URL

    Args:
        long_url (str | None): long URL as received in the query string

    Returns:
        str: decoded long URL

    Raises:
        MissingURLError: If the URL is missing or empty.
        URLDecodeError: If the URL isn't correctly query-escaped.
        URIParseError: If the decoded URL isn't a well-formed URI.
        UnsupportedSchemeError: If the URI scheme is neither http nor https.
    """
    if not long_url:
        raise MissingURLError()

    try:
        decoded = query_unescape(long_url.strip())
    except ValueError as e:
        raise URLDecodeError() from e

    try:
        uri = parse_uri(decoded)
    except ValueError as e:
        raise URIParseError() from e

    if uri.scheme not in ALLOWED_SCHEMES:
        raise UnsupportedSchemeError()

    return decoded


def check_custom_code(custom_code: str, *, dao: ShortURLBaseDAO, tracer: Tracer = _NULL_TRACER) -> None:
    """Reject a custom short code that is already claimed or malformed

    The store lookup runs before the pattern check. A failed lookup of any
    kind counts as "unclaimed".

    Raises:
        CustomCodeTakenError: If the code already maps to a non-empty URL.
        InvalidCustomCodeError: If the code doesn't match the custom code pattern.
    """
    pattern = custom_code_pattern()

    try:
        with tracer.span('store.read', shortcode=custom_code):
            existing = dao.read(custom_code).target
    except DAOError:
        existing = ''

    if existing:
        raise CustomCodeTakenError()

    if pattern is not None and pattern.fullmatch(custom_code) is None:
        raise InvalidCustomCodeError()


def shorten(
    long_url: str | None,
    custom_code: str | None = None,
    *,
    dao: ShortURLBaseDAO,
    settings: Settings,
    tracer: Tracer = _NULL_TRACER,
) -> str:
    """Shorten a long URL

    This function follows this procedure:
    - Step 1: Decode and validate the long URL
    - Step 2: Check the custom code (if any) for collisions, then for its format
    - Step 3: Generate a short code (if no custom code)
    - Step 4: Write the mapping, overwriting any existing one
    - Step 5: Return the public short URL

    Args:
        long_url (str | None):
            Query-escaped long URL.
        custom_code (str | None):
            User-chosen short code, None to generate one.
        dao (ShortURLBaseDAO):
            Mapping store.
        settings (Settings):
            Application settings (public domain).
        tracer (Tracer):
            Observability hooks, no-op by default.

    Returns:
        str: public short URL, e.g. 'https://urly.example/yfzne'

    Raises:
        ValidationError: If the long URL or the custom code is rejected.
        DataStoreError: If the mapping can't be written.
    """
    with tracer.span('shorten', custom=custom_code is not None):
        # 1- Decode and validate the long URL
        target = validate_long_url(long_url)

        # 2- Check custom code, or 3- derive one from the URL
        if custom_code is not None:
            check_custom_code(custom_code, dao=dao, tracer=tracer)
            shortcode = custom_code
        else:
            with tracer.span('generate_shortcode'):
                shortcode = generate_shortcode(target)

        # 4- Write mapping (generated codes are not checked for collisions)
        with tracer.span('store.write', shortcode=shortcode):
            dao.write(ShortURLModel(target=target, shortcode=shortcode))

        logger.info('Shortened URL.', extra={'shortcode': shortcode, 'custom': custom_code is not None})

    # 5- Build public short URL
    return get_short_url(shortcode, settings.domain)


def lengthen(shortcode: str, *, dao: ShortURLBaseDAO, tracer: Tracer = _NULL_TRACER) -> str:
    """Return the long URL stored under a short code

    The stored URL is trusted as validated at shorten time.

    Raises:
        ShortURLNotFoundError: If the short code isn't mapped.
        DataStoreError: If the store can't be read.
    """
    with tracer.span('lengthen', shortcode=shortcode):
        with tracer.span('store.read', shortcode=shortcode):
            short_url = dao.read(shortcode)
    return short_url.target
