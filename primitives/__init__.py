"""Primitives - native field, curve and hash building blocks."""

from primitives.babyjub import (
    BABYJUB,
    BASE8,
    CurveParams,
    Point,
    is_on_curve,
    mul_base,
    scalar_mul,
)
from primitives.field import BN254_PRIME, FF, TWO_128, ff_from_decimal, ff_to_decimal
from primitives.poseidon import (
    poseidon_decrypt,
    poseidon_encrypt,
    poseidon_ex,
    poseidon_hash,
    poseidon_perm,
)

__all__ = [
    # Field
    "FF",
    "BN254_PRIME",
    "TWO_128",
    "ff_from_decimal",
    "ff_to_decimal",
    # Curve
    "BABYJUB",
    "BASE8",
    "CurveParams",
    "Point",
    "is_on_curve",
    "mul_base",
    "scalar_mul",
    # Poseidon
    "poseidon_perm",
    "poseidon_ex",
    "poseidon_hash",
    "poseidon_encrypt",
    "poseidon_decrypt",
]
