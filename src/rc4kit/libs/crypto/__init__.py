"""
RC4 stream cipher and the text boundary around it.
"""

__all__ = [
    "RC4",
    "RC4Error",
    "InvalidKey",
    "TextEncodeError",
    "TextDecodeError",
    "CiphertextFormatError",
    "decrypt",
    "decrypt_text",
    "encrypt",
    "encrypt_text",
    "generate_keystream",
    "key_schedule",
    "transform",
]

from .errors import (
    CiphertextFormatError,
    InvalidKey,
    RC4Error,
    TextDecodeError,
    TextEncodeError,
)
from .rc4 import (
    RC4,
    decrypt,
    encrypt,
    generate_keystream,
    key_schedule,
    transform,
)
from .text import decrypt_text, encrypt_text
