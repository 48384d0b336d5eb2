"""Poseidon permutation and hash over the BN254 scalar field.

Parameters follow the Poseidon reference instantiation used by circomlib:
x^5 S-box, 8 full rounds, partial rounds from N_ROUNDS_P, with round
constants and the Cauchy MDS matrix drawn from the Grain LFSR seeded with
(field, sbox, n, t, R_F, R_P).

Round structure for each of the R_F + R_P rounds:
    state += C[round]
    state = state^5           (full rounds: all cells, partial: cell 0)
    state = MDS @ state

The first R_F/2 rounds are full, then R_P partial, then R_F/2 full.

Hybrid (sponge) encryption built on the width-4 permutation:
    state = perm([0, k0, k1, nonce + len * 2^128])
    for each 3-element message block:
        state[1..3] += block; release state[1..3]; state = perm(state)
    release state[1] as the authentication tag
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Sequence

import numpy as np

from primitives.field import BN254_PRIME, FF, FIELD_BITS, TWO_128

N_ROUNDS_F = 8
N_ROUNDS_P = [56, 57, 56, 60, 60, 63, 64, 63, 60, 66, 60, 65, 70, 60, 64, 68]

# Grain LFSR taps over an 80-bit register, index 0 is the oldest bit
_GRAIN_TAPS = (62, 51, 38, 23, 13, 0)
_GRAIN_BITS = 80
_GRAIN_MASK = (1 << _GRAIN_BITS) - 1


# --- Parameter Generation ---

class _Grain:
    """Grain LFSR in self-shrinking mode, as in the Poseidon reference scripts."""

    def __init__(self, field: int, sbox: int, n: int, t: int, r_f: int, r_p: int):
        seed = "".join([
            format(field, "02b"),
            format(sbox, "04b"),
            format(n, "012b"),
            format(t, "012b"),
            format(r_f, "010b"),
            format(r_p, "010b"),
            "1" * 30,
        ])
        self._state = int(seed, 2)
        for _ in range(160):
            self._step()

    def _step(self) -> int:
        s = self._state
        new_bit = 0
        for tap in _GRAIN_TAPS:
            new_bit ^= (s >> (_GRAIN_BITS - 1 - tap)) & 1
        self._state = ((s << 1) | new_bit) & _GRAIN_MASK
        return new_bit

    def next_bit(self) -> int:
        bit = self._step()
        while bit == 0:
            self._step()
            bit = self._step()
        return self._step()

    def next_int(self, n_bits: int) -> int:
        value = 0
        for _ in range(n_bits):
            value = (value << 1) | self.next_bit()
        return value

    def next_field_element(self, n_bits: int) -> int:
        """Draw with rejection until the integer is below the modulus."""
        while True:
            value = self.next_int(n_bits)
            if value < BN254_PRIME:
                return value


@dataclass
class PoseidonParams:
    """Round constants and MDS matrix for one state width."""
    t: int
    n_rounds_f: int
    n_rounds_p: int
    round_constants: FF      # shape (R_F + R_P, t)
    mds: FF                  # shape (t, t)
    full_rounds: np.ndarray  # bool per round, True where every cell gets the S-box


@lru_cache(maxsize=None)
def get_params(t: int) -> PoseidonParams:
    """Generate (and cache) the parameters for state width t."""
    if not 2 <= t < len(N_ROUNDS_P) + 2:
        raise ValueError(f"unsupported Poseidon width {t}")
    r_p = N_ROUNDS_P[t - 2]
    grain = _Grain(field=1, sbox=0, n=FIELD_BITS, t=t, r_f=N_ROUNDS_F, r_p=r_p)

    n_rounds = N_ROUNDS_F + r_p
    constants = [grain.next_field_element(FIELD_BITS) for _ in range(n_rounds * t)]

    # Cauchy matrix 1 / (x_i + y_j) over 2t distinct draws
    while True:
        draws = [grain.next_int(FIELD_BITS) % BN254_PRIME for _ in range(2 * t)]
        if len(set(draws)) != len(draws):
            continue
        xs, ys = draws[:t], draws[t:]
        if any((x + y) % BN254_PRIME == 0 for x in xs for y in ys):
            continue
        break
    mds = [[pow(x + y, -1, BN254_PRIME) for y in ys] for x in xs]

    half_f = N_ROUNDS_F // 2
    full_rounds = np.zeros(n_rounds, dtype=bool)
    full_rounds[:half_f] = True
    full_rounds[half_f + r_p:] = True

    return PoseidonParams(
        t=t,
        n_rounds_f=N_ROUNDS_F,
        n_rounds_p=r_p,
        round_constants=FF([constants[r * t:(r + 1) * t] for r in range(n_rounds)]),
        mds=FF(mds),
        full_rounds=full_rounds,
    )


# --- Permutation ---

def poseidon_perm(state: Sequence[FF]) -> List[FF]:
    """Apply the full-width Poseidon permutation."""
    params = get_params(len(state))
    s = FF([int(v) for v in state])

    for r, full in enumerate(params.full_rounds):
        s = s + params.round_constants[r]
        if full:
            s = s ** 5
        else:
            s[0] = s[0] ** 5
        s = params.mds @ s

    return [s[i] for i in range(params.t)]


def poseidon_ex(inputs: Sequence[FF], initial_state: FF, n_outs: int) -> List[FF]:
    """First n_outs elements of perm([initial_state, *inputs])."""
    return poseidon_perm([initial_state, *inputs])[:n_outs]


def poseidon_hash(inputs: Sequence[FF]) -> FF:
    """Poseidon hash of 1..16 field elements."""
    return poseidon_ex(inputs, FF(0), 1)[0]


# --- Hybrid Encryption ---

def _initial_state(key: Sequence[FF], nonce: FF, length: int) -> List[FF]:
    if int(nonce) >= TWO_128:
        raise ValueError("nonce must be below 2^128")
    return [FF(0), key[0], key[1], nonce + FF(length) * FF(TWO_128)]


def poseidon_encrypt(message: Sequence[FF], key: Sequence[FF], nonce: FF) -> List[FF]:
    """Encrypt message under shared key (k0, k1); returns padded ciphertext + tag."""
    padded = list(message)
    while len(padded) % 3:
        padded.append(FF(0))

    state = _initial_state(key, nonce, len(message))
    ciphertext = []
    for i in range(0, len(padded), 3):
        state = poseidon_perm(state)
        for j in range(3):
            state[j + 1] = state[j + 1] + padded[i + j]
            ciphertext.append(state[j + 1])

    state = poseidon_perm(state)
    ciphertext.append(state[1])
    return ciphertext


def poseidon_decrypt(ciphertext: Sequence[FF], key: Sequence[FF], nonce: FF, length: int) -> List[FF]:
    """Decrypt and authenticate; raises ValueError on a bad tag or padding."""
    padded_length = length + (-length) % 3
    if len(ciphertext) != padded_length + 1:
        raise ValueError(f"ciphertext length {len(ciphertext)} does not match message length {length}")

    state = poseidon_perm(_initial_state(key, nonce, length))
    message = []
    for i in range(0, padded_length, 3):
        for j in range(3):
            message.append(ciphertext[i + j] - state[j + 1])
        state = poseidon_perm([state[0], *ciphertext[i:i + 3]])

    if any(m != 0 for m in message[length:]):
        raise ValueError("non-zero padding in decrypted message")
    if ciphertext[padded_length] != state[1]:
        raise ValueError("authentication tag mismatch")
    return message[:length]
