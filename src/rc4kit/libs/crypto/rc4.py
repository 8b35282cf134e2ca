from __future__ import annotations

from collections.abc import Iterator, Sequence
from itertools import islice

from .errors import InvalidKey

KeyLike = bytes | bytearray | memoryview | Sequence[int]


def key_schedule(key: KeyLike) -> list[int]:
    """Perform the RC4 Key-Scheduling Algorithm (KSA).

    Args:
        key: RC4 key bytes (must not be empty). Keys longer than 256 bytes
            are accepted; only ``key[i % len(key)]`` is consulted.

    Returns:
        The scheduled permutation of ``0..255``.

    Raises:
        InvalidKey: If ``key`` is empty.
    """
    klen = len(key)
    if not klen:
        raise InvalidKey("Key must not be empty")

    S = list(range(256))
    j = 0
    for i in range(256):
        j = (j + S[i] + key[i % klen]) & 0xFF
        S[i], S[j] = S[j], S[i]
    return S


def _prga(S: list[int]) -> Iterator[int]:
    """Yield keystream bytes forever, mutating ``S`` in place."""
    i = 0
    j = 0
    while True:
        i = (i + 1) & 0xFF
        j = (j + S[i]) & 0xFF
        S[i], S[j] = S[j], S[i]
        yield S[(S[i] + S[j]) & 0xFF]


def generate_keystream(S: Sequence[int], length: int, drop: int = 0) -> bytes:
    """Run the RC4 Pseudo-Random Generation Algorithm (PRGA).

    The generator works on a private copy of ``S``, so a schedule returned
    by :func:`key_schedule` is left untouched.

    Args:
        S: Permutation produced by :func:`key_schedule`.
        length: Number of keystream bytes to return.
        drop: Number of leading keystream bytes to discard first.

    Returns:
        Exactly ``length`` keystream bytes.

    Raises:
        ValueError: If ``length`` or ``drop`` is negative.
    """
    if length < 0:
        raise ValueError("length must be non-negative")
    if drop < 0:
        raise ValueError("drop must be non-negative")
    if not length:
        return b""

    stream = _prga(list(S))
    return bytes(islice(stream, drop, drop + length))


def transform(key: KeyLike, data: bytes, *, drop: int = 0) -> bytes:
    """XOR ``data`` with the RC4 keystream derived from ``key``.

    Encryption and decryption are the same operation.

    Args:
        key: RC4 key bytes (must not be empty).
        data: Input bytes, either plaintext or ciphertext.
        drop: Number of leading keystream bytes to discard (RC4-drop[n]).

    Returns:
        Output bytes, the same length as ``data``.

    Raises:
        InvalidKey: If ``key`` is empty.
    """
    S = key_schedule(key)
    ks = generate_keystream(S, len(data), drop=drop)
    return bytes(b ^ k for b, k in zip(data, ks))


def encrypt(key: KeyLike, plaintext: bytes, *, drop: int = 0) -> bytes:
    return transform(key, plaintext, drop=drop)


def decrypt(key: KeyLike, ciphertext: bytes, *, drop: int = 0) -> bytes:
    return transform(key, ciphertext, drop=drop)


class RC4:
    """Minimal RC4 cipher bound to a key.

    Every call re-runs the key schedule, so no stream position is carried
    from one call to the next.
    """

    def __init__(self, key: KeyLike, drop: int = 0) -> None:
        """
        Args:
            key: RC4 key bytes (must not be empty).
            drop: Number of leading keystream bytes to discard.
        """
        if not key:
            raise InvalidKey("Key must not be empty")
        if drop < 0:
            raise ValueError("drop must be non-negative")

        self._key = bytes(key)
        self._drop = drop

    @property
    def drop(self) -> int:
        return self._drop

    def encrypt(self, data: bytes) -> bytes:
        return transform(self._key, data, drop=self._drop)

    def decrypt(self, data: bytes) -> bytes:
        return transform(self._key, data, drop=self._drop)

    def keystream(self, length: int) -> bytes:
        """Return the first ``length`` keystream bytes (after ``drop``)."""
        return generate_keystream(key_schedule(self._key), length, drop=self._drop)
