"""Modular arithmetic on coefficients below a word-sized modulus.

These are the scalar building blocks behind polynomial arithmetic. All
results are fully reduced into ``[0, p)``. The Shoup variants use a
precomputed quotient ``yprime = floor(y * 2**bits / p)``, where ``bits`` is
the width of the machine word that holds a coefficient (16, 32 or 64).
"""

from __future__ import annotations

__all__ = [
    "addmod",
    "submod",
    "mulmod",
    "muladd",
    "compute_shoup",
    "mulmod_shoup",
    "muladd_shoup",
]


def _check_modulus(p: int) -> None:
    if p <= 0:
        raise ValueError("modulus must be positive")


def _check_reduced(p: int, *values: int) -> None:
    _check_modulus(p)
    for value in values:
        if not 0 <= value < p:
            raise ValueError(f"value {value} is not reduced modulo {p}")


def _check_word(p: int, bits: int) -> None:
    if bits <= 0:
        raise ValueError("word size must be positive")
    if p >= 1 << bits:
        raise ValueError(f"modulus {p} does not fit in {bits} bits")


def addmod(x: int, y: int, p: int) -> int:
    """Return ``(x + y) mod p`` for reduced ``x`` and ``y``."""
    _check_reduced(p, x, y)
    z = x + y
    return z - p if z >= p else z


def submod(x: int, y: int, p: int) -> int:
    """Return ``(x - y) mod p`` for reduced ``x`` and ``y``."""
    _check_reduced(p, x, y)
    return addmod(x, p - y if y else 0, p)


def mulmod(x: int, y: int, p: int) -> int:
    """Return ``x * y mod p`` for reduced ``x`` and ``y``."""
    _check_reduced(p, x, y)
    return x * y % p


def muladd(rop: int, x: int, y: int, p: int) -> int:
    """Return ``(x * y + rop) mod p`` for reduced ``x`` and ``y``."""
    _check_reduced(p, x, y)
    if rop < 0:
        raise ValueError("accumulator must be non-negative")
    return (x * y + rop) % p


def compute_shoup(y: int, p: int, bits: int) -> int:
    """Return the Shoup quotient ``floor(y * 2**bits / p)`` for reduced ``y``."""
    _check_reduced(p, y)
    _check_word(p, bits)
    return (y << bits) // p


def _shoup_product(x: int, y: int, yprime: int, p: int, bits: int) -> int:
    q = (x * yprime) >> bits
    res = x * y - q * p
    if not 0 <= res < 2 * p:
        raise ValueError("Shoup quotient does not match the multiplier")
    return res - p if res >= p else res


def mulmod_shoup(x: int, y: int, yprime: int, p: int, bits: int) -> int:
    """Return ``x * y mod p`` using the precomputed ``yprime`` of ``y``."""
    _check_reduced(p, x, y)
    _check_word(p, bits)
    return _shoup_product(x, y, yprime, p, bits)


def muladd_shoup(rop: int, x: int, y: int, yprime: int, p: int, bits: int) -> int:
    """Return ``(rop + x * y) mod p`` using the precomputed ``yprime`` of ``y``."""
    _check_reduced(p, rop, x, y)
    _check_word(p, bits)
    total = rop + _shoup_product(x, y, yprime, p, bits)
    return total - p if total >= p else total