class RC4Error(ValueError):
    """Base class for errors raised by rc4kit."""


class InvalidKey(RC4Error):
    """The key is empty, or longer than a configured ceiling."""


class TextEncodeError(RC4Error):
    """Text cannot be represented under the selected encoding."""


class TextDecodeError(RC4Error):
    """Decrypted bytes are not valid text under the selected encoding."""


class CiphertextFormatError(RC4Error):
    """Ciphertext text does not match the selected output format."""
