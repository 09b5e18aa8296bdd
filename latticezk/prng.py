"""Random byte sources: the operating system and a seeded AES-256 counter stream."""

from __future__ import annotations

import os

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

KEY_BYTES = 32
BLOCK_BYTES = 16
_COUNTER_MASK = 0xFFFFFFFF


def random_bytes(n: int) -> bytes:
    """Return ``n`` bytes from the operating system's secure generator."""
    if n < 0:
        raise ValueError("byte count must be non-negative")
    return os.urandom(n)


class FastRandom:
    """Deterministic byte stream from AES-256 in counter mode.

    The counter block holds a 32-bit little-endian counter in its first four
    bytes; the other twelve bytes stay zero. Each 16-byte block consumes one
    counter value, and a trailing partial block discards its unused bytes.
    Without a seed, a fresh key is drawn from the operating system on first use.
    """

    def __init__(self, seed: bytes | None = None) -> None:
        self._encryptor = None
        self._counter = 0
        if seed is not None:
            self.seed(seed)

    def seed(self, key: bytes) -> None:
        """Key the stream with up to 32 bytes (zero padded) and reset the counter."""
        key = bytes(key)
        if len(key) > KEY_BYTES:
            raise ValueError(f"seed must be at most {KEY_BYTES} bytes")
        key = key.ljust(KEY_BYTES, b"\x00")
        cipher = Cipher(algorithms.AES(key), modes.ECB())
        self._encryptor = cipher.encryptor()
        self._counter = 0

    def reseed(self) -> None:
        """Forget the key; the next request draws a fresh one from the OS."""
        self._encryptor = None

    def _blocks(self, count: int) -> bytes:
        start = self._counter
        plaintext = b"".join(
            ((start + i) & _COUNTER_MASK).to_bytes(4, "little") + bytes(12)
            for i in range(count)
        )
        self._counter = (start + count) & _COUNTER_MASK
        return self._encryptor.update(plaintext)

    def random_bytes(self, n: int) -> bytes:
        """Return the next ``n`` bytes of the stream."""
        if n < 0:
            raise ValueError("byte count must be non-negative")
        if self._encryptor is None:
            self.seed(random_bytes(KEY_BYTES))
        count = -(-n // BLOCK_BYTES)
        if count == 0:
            return b""
        return self._blocks(count)[:n]

    def randbelow(self, bound: int) -> int:
        """Return a uniform integer in ``[0, bound)`` by rejection sampling."""
        if bound <= 0:
            raise ValueError("bound must be positive")
        bits = (bound - 1).bit_length()
        if bits == 0:
            return 0
        nbytes = (bits + 7) // 8
        excess = nbytes * 8 - bits
        while True:
            value = int.from_bytes(self.random_bytes(nbytes), "little") >> excess
            if value < bound:
                return value