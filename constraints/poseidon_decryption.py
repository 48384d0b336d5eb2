"""In-circuit Poseidon hybrid decryption.

Sponge-style authenticated decryption over the width-4 permutation:

1. Pad the message length L to L' (next multiple of 3)
2. state_0 = perm([0, k0, k1, nonce + L * 2^128]), with nonce < 2^128
3. block i: plaintext = ciphertext[3i..3i+2] - state_i[1..3]
            state_{i+1} = perm([state_i[0], ciphertext[3i..3i+2]])
4. Padding slots of the plaintext must be zero
5. ciphertext[L'] (the tag) must equal state_{L'/3}[1]
"""

from typing import List, Sequence

from constraints.base import ConstraintContext
from primitives.field import FF, TWO_128
from protocol.errors import MalformedInput

WIDTH = 4


def poseidon_ex(ctx: ConstraintContext, inputs: Sequence[FF], initial_state: FF, n_outs: int) -> List[FF]:
    return ctx.permutation([initial_state, *inputs])[:n_outs]


def poseidon_decrypt(
    ctx: ConstraintContext,
    decrypted_length: int,
    encryption_key: Sequence[FF],
    nonce: FF,
    ciphertext: Sequence[FF],
    label: str = "poseidon decrypt",
) -> List[FF]:
    """Decrypt ciphertext and assert its authentication tag.

    Returns the first `decrypted_length` plaintext elements. Tampering with
    the key, nonce or any ciphertext element breaks the tag assertion.
    """
    length = decrypted_length
    padded_length = length + (-length) % 3
    if len(ciphertext) != padded_length + 1:
        raise MalformedInput(
            f"{label}: ciphertext has {len(ciphertext)} elements, expected {padded_length + 1}"
        )

    ctx.assert_is_less_or_equal(nonce, FF(TWO_128 - 1), f"{label}: nonce < 2^128")

    n_blocks = padded_length // 3
    out: List[FF] = []
    state = poseidon_ex(
        ctx,
        [encryption_key[0], encryption_key[1], nonce + FF(length) * FF(TWO_128)],
        FF(0),
        WIDTH,
    )

    for i in range(n_blocks):
        block = list(ciphertext[i * 3:i * 3 + 3])
        for j in range(3):
            out.append(block[j] - state[j + 1])
        state = poseidon_ex(ctx, block, state[0], WIDTH)

    for i in range(length, padded_length):
        ctx.assert_is_equal(out[i], FF(0), f"{label}: padding[{i}] is zero")

    ctx.assert_is_equal(ciphertext[padded_length], state[1], f"{label}: authentication tag")

    return out[:length]


def poseidon_decrypt_single(
    ctx: ConstraintContext,
    encryption_key: Sequence[FF],
    nonce: FF,
    ciphertext: Sequence[FF],
    label: str = "poseidon decrypt",
) -> List[FF]:
    """Decryption of a one-element message (4-element ciphertext)."""
    return poseidon_decrypt(ctx, 1, encryption_key, nonce, ciphertext, label)
