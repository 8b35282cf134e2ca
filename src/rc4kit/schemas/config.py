"""
Defines structured configuration models using dataclasses.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CipherConfig:
    """Configuration for text encryption and decryption.

    Attributes:
        text_encoding: How keys and text become bytes
            ("utf-8", "latin-1" or "legacy").
        output_format: How ciphertext is rendered ("hex", "base64" or "raw").
        drop: Number of leading keystream bytes to discard.
        max_key_length: Optional ceiling on the encoded key length in bytes.
    """

    text_encoding: str = "utf-8"
    output_format: str = "hex"
    drop: int = 0
    max_key_length: int | None = None
