"""Polynomial rings with NTT, BGV encryption and BDLOP commitments over lattices."""

__version__ = "0.1.0"
__all__ = ["bdlop", "bench", "bgv", "modarith", "prng", "ring"]