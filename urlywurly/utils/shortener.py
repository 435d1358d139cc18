"""Shortcode generation utility

This module derives short, deterministic, URL-safe codes from the content of
a long URL.

Functions:
    b58encode(data):
        Encode raw bytes with the Bitcoin Base58 alphabet.
    generate_shortcode(long_url):
        Generate a short code suitable for use as a URL slug.

Example:
    >>> from urlywurly.utils import generate_shortcode
    >>> generate_shortcode('123456789')
    'yfzne'
"""

import zlib


ALPHABET = '123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz'
BASE = len(ALPHABET)  # Base58: no 0, O, I or l to avoid visually ambiguous codes


def b58encode(data: bytes) -> str:
    """Encode bytes as a Base58 string (Bitcoin alphabet, no padding).

    Every leading zero byte is encoded as one leading '1' character,
    the rest of the input is treated as a big-endian integer.

    Args:
        data (bytes):
            Raw bytes to encode.

    Returns:
        str: Base58 representation of `data`.

    Example:
        >>> b58encode(b'hello world')
        'StV1DL6CwTryKyV'
        >>> b58encode(b'\\x00\\x00')
        '11'
    """
    zeros = len(data) - len(data.lstrip(b'\x00'))
    number = int.from_bytes(data, 'big')

    digits = []
    while number:
        number, remainder = divmod(number, BASE)
        digits.append(ALPHABET[remainder])

    return ALPHABET[0] * zeros + ''.join(reversed(digits))


def generate_shortcode(long_url: str) -> str:
    """Generate a short, deterministic code from a long URL.

    The code is the Base58 encoding of the CRC-32 (IEEE) checksum of the
    URL's bytes (UTF-8, lone surrogates from `surrogateescape` decoding map
    back to the raw bytes), serialized as 4 little-endian bytes. Output is
    typically 5 or 6 characters long.

    Args:
        long_url (str):
            The long URL to derive a code from.

    Returns:
        str: Base58 short code.

    Raises:
        TypeError: If `long_url` is not a string.

    NOTE:
        - CRC-32 is not collision free: expect birthday collisions around
          2^16 distinct URLs. Generated codes are never checked against
          the store, a colliding URL overwrites the previous mapping.
    """
    if not isinstance(long_url, str):
        raise TypeError(f'Long URL must be of type string (given type: {type(long_url)}).')

    checksum = zlib.crc32(long_url.encode('utf-8', 'surrogateescape'))
    return b58encode(checksum.to_bytes(4, 'little'))
