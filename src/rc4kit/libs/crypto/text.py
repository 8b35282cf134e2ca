"""
Text boundary for the RC4 engine.

The engine only deals in bytes. This module decides how typed text and keys
become bytes, and how ciphertext bytes are rendered for display or copying.

Supported text encodings:

- ``utf-8``: UTF-8 on the way in and out (default).
- ``latin-1``: one byte per character; characters above U+00FF are rejected.
- ``legacy``: UTF-16 code units XORed with one keystream byte each, which
  reproduces the output of the original browser demo byte for byte. The
  result is text, so it can only be used with the ``raw`` output format.

Supported ciphertext formats: ``hex``, ``base64`` and ``raw`` (one character
per byte, code points U+0000..U+00FF).
"""

from __future__ import annotations

__all__ = [
    "ENCODINGS",
    "OUTPUT_FORMATS",
    "decode_text",
    "decrypt_text",
    "encode_text",
    "encrypt_text",
    "format_ciphertext",
    "parse_ciphertext",
]

import base64
import binascii

from .errors import (
    CiphertextFormatError,
    InvalidKey,
    TextDecodeError,
    TextEncodeError,
)
from .rc4 import generate_keystream, key_schedule, transform

ENCODINGS = ("utf-8", "latin-1", "legacy")
OUTPUT_FORMATS = ("hex", "base64", "raw")


def _check_encoding(encoding: str) -> None:
    if encoding not in ENCODINGS:
        raise ValueError(f"Unknown text encoding: {encoding!r}")


def _check_format(output_format: str) -> None:
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format: {output_format!r}")


def _code_units(text: str) -> list[int]:
    """Split text into UTF-16 code units, as JavaScript's ``charCodeAt`` does."""
    raw = text.encode("utf-16-le", errors="surrogatepass")
    return [raw[k] | (raw[k + 1] << 8) for k in range(0, len(raw), 2)]


def _from_code_units(units: list[int]) -> str:
    raw = b"".join(u.to_bytes(2, "little") for u in units)
    return raw.decode("utf-16-le", errors="surrogatepass")


def encode_text(text: str, encoding: str = "utf-8") -> bytes:
    """Encode ``text`` to bytes under a byte-oriented encoding.

    Args:
        text: Text to encode.
        encoding: ``utf-8`` or ``latin-1``.

    Returns:
        The encoded bytes.

    Raises:
        TextEncodeError: If ``text`` cannot be represented.
        ValueError: If ``encoding`` is unknown or is ``legacy``.
    """
    _check_encoding(encoding)
    if encoding == "legacy":
        raise ValueError("The legacy encoding works on code units, not bytes")

    try:
        return text.encode(encoding)
    except UnicodeEncodeError as e:
        raise TextEncodeError(
            f"Character at position {e.start} cannot be encoded as {encoding}"
        ) from None


def decode_text(data: bytes, encoding: str = "utf-8") -> str:
    """Decode bytes produced by a decryption back to text.

    Raises:
        TextDecodeError: If ``data`` is not valid under ``encoding``.
        ValueError: If ``encoding`` is unknown or is ``legacy``.
    """
    _check_encoding(encoding)
    if encoding == "legacy":
        raise ValueError("The legacy encoding works on code units, not bytes")

    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        raise TextDecodeError(
            f"Decrypted data is not valid {encoding} (wrong key?)"
        ) from e


def format_ciphertext(data: bytes, output_format: str = "hex") -> str:
    """Render ciphertext bytes as text.

    Args:
        data: Ciphertext bytes.
        output_format: ``hex``, ``base64`` or ``raw``.

    Returns:
        The rendered ciphertext.
    """
    _check_format(output_format)
    if output_format == "hex":
        return data.hex()
    if output_format == "base64":
        return base64.b64encode(data).decode("ascii")
    return data.decode("latin-1")


def parse_ciphertext(text: str, output_format: str = "hex") -> bytes:
    """Parse ciphertext text produced by :func:`format_ciphertext`.

    Hex input may contain whitespace and upper-case digits.

    Raises:
        CiphertextFormatError: If ``text`` is malformed for ``output_format``.
        ValueError: If ``output_format`` is unknown.
    """
    _check_format(output_format)
    if output_format == "hex":
        try:
            return bytes.fromhex("".join(text.split()))
        except ValueError as e:
            raise CiphertextFormatError(f"Invalid hex ciphertext: {e}") from e

    if output_format == "base64":
        try:
            return base64.b64decode(text.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise CiphertextFormatError(f"Invalid base64 ciphertext: {e}") from e

    try:
        return text.encode("latin-1")
    except UnicodeEncodeError as e:
        raise CiphertextFormatError(
            f"Raw ciphertext has a character above U+00FF at position {e.start}"
        ) from None


def _key_bytes(key: str, encoding: str, max_key_length: int | None) -> bytes:
    if not key:
        raise InvalidKey("Key must not be empty")

    if encoding == "legacy":
        kbytes = bytes(u & 0xFF for u in _code_units(key))
    else:
        kbytes = encode_text(key, encoding)

    if max_key_length is not None and len(kbytes) > max_key_length:
        raise InvalidKey(
            f"Key is {len(kbytes)} bytes, longer than the limit of {max_key_length}"
        )
    return kbytes


def _legacy_transform(key: bytes, text: str, drop: int) -> str:
    units = _code_units(text)
    ks = generate_keystream(key_schedule(key), len(units), drop=drop)
    return _from_code_units([u ^ k for u, k in zip(units, ks)])


def encrypt_text(
    key: str,
    plaintext: str,
    *,
    encoding: str = "utf-8",
    output_format: str = "hex",
    drop: int = 0,
    max_key_length: int | None = None,
) -> str:
    """Encrypt text with a text key and render the ciphertext.

    Args:
        key: Key text (must not be empty).
        plaintext: Text to encrypt.
        encoding: How key and plaintext become bytes (see module docs).
        output_format: How the ciphertext is rendered.
        drop: Number of leading keystream bytes to discard.
        max_key_length: Optional ceiling on the encoded key length.

    Returns:
        Ciphertext rendered in ``output_format``.

    Raises:
        InvalidKey: If the key is empty or exceeds ``max_key_length``.
        TextEncodeError: If the text cannot be encoded.
        ValueError: If ``encoding`` or ``output_format`` is unknown, or
            ``legacy`` is combined with a format other than ``raw``.
    """
    _check_encoding(encoding)
    _check_format(output_format)
    kbytes = _key_bytes(key, encoding, max_key_length)

    if encoding == "legacy":
        if output_format != "raw":
            raise ValueError("The legacy encoding requires the raw output format")
        return _legacy_transform(kbytes, plaintext, drop)

    data = transform(kbytes, encode_text(plaintext, encoding), drop=drop)
    return format_ciphertext(data, output_format)


def decrypt_text(
    key: str,
    ciphertext: str,
    *,
    encoding: str = "utf-8",
    output_format: str = "hex",
    drop: int = 0,
    max_key_length: int | None = None,
) -> str:
    """Parse rendered ciphertext and decrypt it back to text.

    Arguments mirror :func:`encrypt_text`.

    Raises:
        InvalidKey: If the key is empty or exceeds ``max_key_length``.
        CiphertextFormatError: If ``ciphertext`` is malformed.
        TextDecodeError: If the decrypted bytes are not valid text.
    """
    _check_encoding(encoding)
    _check_format(output_format)
    kbytes = _key_bytes(key, encoding, max_key_length)

    if encoding == "legacy":
        if output_format != "raw":
            raise ValueError("The legacy encoding requires the raw output format")
        return _legacy_transform(kbytes, ciphertext, drop)

    data = transform(kbytes, parse_ciphertext(ciphertext, output_format), drop=drop)
    return decode_text(data, encoding)
