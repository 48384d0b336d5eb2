"""BN254 scalar field GF(r).

Uses galois library for all field arithmetic. FF is the field type every
witness value, curve coordinate and Poseidon state element lives in.

The Baby Jubjub curve is defined over this field, so curve coordinates and
circuit variables share one representation.
"""

import galois
from typing import Union

# --- Field Construction ---

BN254_PRIME = 21888242871839275222246405745257275088548364400416034343698204186575808495617

# 5 generates the multiplicative group; passing it skips factoring r - 1
FF = galois.GF(BN254_PRIME, primitive_element=5, verify=False)
"""Scalar field of BN254 - the native field of the circuits."""

# Nonces of hybrid ciphertexts must fit in 128 bits; the message length is
# packed above them.
TWO_128 = 1 << 128

FIELD_BITS = BN254_PRIME.bit_length()


# --- Conversions ---

def ff_from_decimal(value: Union[str, int]) -> FF:
    """Parse a base-10 decimal string (or int) into a canonical field element.

    Raises:
        ValueError: If the value is not a decimal integer in [0, r).
    """
    if isinstance(value, bool):
        raise ValueError(f"expected a decimal field element, got {value!r}")
    if isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            raise ValueError(f"not a base-10 decimal string: {value!r}")
        as_int = int(text, 10)
    elif isinstance(value, int):
        as_int = value
    else:
        raise ValueError(f"expected a decimal field element, got {type(value).__name__}")

    if not 0 <= as_int < BN254_PRIME:
        raise ValueError(f"value {as_int} is outside the scalar field")
    return FF(as_int)


def ff_to_decimal(value: FF) -> str:
    """Render a field element as a base-10 decimal string."""
    return str(int(value))
