"""Client-side witness generation for the token circuits.

These helpers produce the ciphertexts, summaries and hashes a wallet puts
into a witness, and assemble fully populated circuit instances:

    circuit = build_transfer(sender_sk, balance, balance_ct, receiver_pk,
                             auditor_pk, value)
    inputs = circuit.witness().to_inputs()

Randomness comes from `secrets` unless a `rand_scalar` callable is given
(deterministic tests).
"""

import math
import secrets
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

from constraints.mint import MintCircuit
from constraints.registration import RegistrationCircuit
from constraints.transfer import TransferCircuit
from constraints.withdraw import WithdrawCircuit
from primitives import babyjub
from primitives.babyjub import BABYJUB, CurveParams, Point
from primitives.field import FF, TWO_128
from primitives.poseidon import poseidon_decrypt, poseidon_encrypt, poseidon_hash
from protocol.data import (
    Auditor,
    ElGamalCiphertext,
    MintNullifier,
    PoseidonCiphertext,
    Receiver,
    RegistrationSender,
    Sender,
    WithdrawSender,
)

Scalar = Union[int, FF]
RandScalar = Callable[[], int]


def random_scalar(params: CurveParams = BABYJUB) -> int:
    """Uniform scalar in [1, order - 1]."""
    return secrets.randbelow(params.order - 1) + 1


def random_nonce() -> FF:
    """Non-zero 128-bit nonce for hybrid encryption."""
    return FF(secrets.randbelow(TWO_128 - 1) + 1)


def _draw(rand_scalar: Optional[RandScalar], params: CurveParams) -> int:
    return rand_scalar() if rand_scalar is not None else random_scalar(params)


# --- Keys ---

def generate_keypair(rand_scalar: Optional[RandScalar] = None,
                     params: CurveParams = BABYJUB) -> Tuple[FF, Point]:
    sk = _draw(rand_scalar, params)
    return FF(sk), babyjub.mul_base(sk, params)


# --- ElGamal ---

def encrypt_point(public_key: Point, point: Point, random: Scalar,
                  params: CurveParams = BABYJUB) -> ElGamalCiphertext:
    c1 = babyjub.scalar_mul(params.encryption_base, random, params)
    c2 = babyjub.add(point, babyjub.scalar_mul(public_key, random, params), params)
    return ElGamalCiphertext(c1=c1, c2=c2)


def encrypt_message(public_key: Point, message: Scalar, random: Optional[Scalar] = None,
                    params: CurveParams = BABYJUB) -> Tuple[ElGamalCiphertext, FF]:
    """ElGamal encryption of message * G. Returns (ciphertext, randomness)."""
    if random is None or int(random) >= params.order:
        random = random_scalar(params)
    point = babyjub.mul_base(message, params)
    return encrypt_point(public_key, point, random, params), FF(int(random))


def decrypt_point(private_key: Scalar, ct: ElGamalCiphertext,
                  params: CurveParams = BABYJUB) -> Point:
    """C2 - sk * C1; the caller compares against value * G."""
    shared = babyjub.scalar_mul(ct.c1, private_key, params)
    return babyjub.sub(ct.c2, shared, params)


def decrypt_balance(private_key: Scalar, ct: ElGamalCiphertext, max_value: int,
                    params: CurveParams = BABYJUB) -> int:
    """Recover the integer behind an ElGamal balance ciphertext.

    Baby-step giant-step search for value in [0, max_value] with
    value * G = decrypt_point(private_key, ct). Wallet-side only; the
    circuits never take a discrete log.

    Raises:
        ValueError: If no value in range matches (wrong key or balance
            above max_value).
    """
    if max_value < 0:
        raise ValueError("max_value must be non-negative")
    target = decrypt_point(private_key, ct, params)
    step = math.isqrt(max_value) + 1

    # baby steps: j * G for j in [0, step)
    table = {}
    point = babyjub.identity()
    for j in range(step):
        table.setdefault(point.to_ints(), j)
        point = babyjub.add(point, params.generator, params)

    # giant steps: target - i * step * G
    giant = babyjub.neg(babyjub.mul_base(step, params))
    for i in range(step + 1):
        j = table.get(target.to_ints())
        if j is not None and i * step + j <= max_value:
            return i * step + j
        target = babyjub.add(target, giant, params)

    raise ValueError(f"balance not found in [0, {max_value}]")


# --- Poseidon Summaries ---

@dataclass
class PoseidonEncryption:
    pct: PoseidonCiphertext
    encryption_key: Point


def process_poseidon_encryption(inputs: Sequence[Scalar], public_key: Point,
                                rand_scalar: Optional[RandScalar] = None,
                                nonce: Optional[FF] = None,
                                params: CurveParams = BABYJUB) -> PoseidonEncryption:
    """Encrypt inputs for the holder of public_key.

    Shared key = random * pk, auth key = random * G; the recipient rebuilds
    the shared key as sk * auth key.
    """
    nonce = nonce if nonce is not None else random_nonce()
    random = _draw(rand_scalar, params)

    encryption_key = babyjub.scalar_mul(public_key, random, params)
    auth_key = babyjub.mul_base(random, params)
    ciphertext = poseidon_encrypt(
        [FF(int(v)) for v in inputs], [encryption_key.x, encryption_key.y], nonce
    )
    return PoseidonEncryption(
        pct=PoseidonCiphertext(ciphertext=ciphertext, auth_key=auth_key, nonce=nonce, random=FF(random)),
        encryption_key=encryption_key,
    )


def process_poseidon_decryption(ciphertext: Sequence[FF], auth_key: Point, nonce: FF,
                                private_key: Scalar, length: int,
                                params: CurveParams = BABYJUB) -> List[FF]:
    """Recipient-side decryption of a summary (raises ValueError if forged)."""
    shared = babyjub.scalar_mul(auth_key, private_key, params)
    return poseidon_decrypt(ciphertext, [shared.x, shared.y], nonce, length)


def decrypt_pct(private_key: Scalar, pct: PoseidonCiphertext, length: int = 1,
                params: CurveParams = BABYJUB) -> List[FF]:
    return process_poseidon_decryption(pct.ciphertext, pct.auth_key, pct.nonce, private_key, length, params)


# --- Hashes ---

def registration_hash(chain_id: Scalar, private_key: Scalar, address: Scalar) -> FF:
    return poseidon_hash([FF(int(chain_id)), FF(int(private_key)), FF(int(address))])


def nullifier_hash(chain_id: Scalar, auditor_ciphertext: Sequence[FF]) -> FF:
    return poseidon_hash([FF(int(chain_id)), *auditor_ciphertext])


# --- Circuit Builders ---

def build_registration(private_key: Scalar, chain_id: Scalar, address: Scalar,
                       params: CurveParams = BABYJUB) -> RegistrationCircuit:
    return RegistrationCircuit(sender=RegistrationSender(
        private_key=FF(int(private_key)),
        public_key=babyjub.mul_base(private_key, params),
        address=FF(int(address)),
        chain_id=FF(int(chain_id)),
        registration_hash=registration_hash(chain_id, private_key, address),
    ))


def _receiver(public_key: Point, value: Scalar, rand_scalar: Optional[RandScalar],
              params: CurveParams) -> Receiver:
    value_ct, value_random = encrypt_message(public_key, value, _draw(rand_scalar, params), params)
    summary = process_poseidon_encryption([value], public_key, rand_scalar, params=params)
    return Receiver(public_key=public_key, value_ct=value_ct, value_random=value_random, pct=summary.pct)


def _auditor(public_key: Point, value: Scalar, rand_scalar: Optional[RandScalar],
             params: CurveParams) -> Auditor:
    summary = process_poseidon_encryption([value], public_key, rand_scalar, params=params)
    return Auditor(public_key=public_key, pct=summary.pct)


def build_mint(receiver_pk: Point, auditor_pk: Point, value: Scalar, chain_id: Scalar,
               rand_scalar: Optional[RandScalar] = None,
               params: CurveParams = BABYJUB) -> MintCircuit:
    receiver = _receiver(receiver_pk, value, rand_scalar, params)
    auditor = _auditor(auditor_pk, value, rand_scalar, params)
    return MintCircuit(
        receiver=receiver,
        auditor=auditor,
        mint_nullifier=MintNullifier(
            chain_id=FF(int(chain_id)),
            nullifier_hash=nullifier_hash(chain_id, auditor.pct.ciphertext),
        ),
        value_to_mint=FF(int(value)),
    )


def build_transfer(sender_sk: Scalar, sender_balance: Scalar,
                   balance_ct: Optional[ElGamalCiphertext], receiver_pk: Point,
                   auditor_pk: Point, value: Scalar,
                   rand_scalar: Optional[RandScalar] = None,
                   params: CurveParams = BABYJUB) -> TransferCircuit:
    """Transfer witness; balance_ct defaults to a fresh encryption of the balance."""
    sender_pk = babyjub.mul_base(sender_sk, params)
    if balance_ct is None:
        balance_ct, _ = encrypt_message(sender_pk, sender_balance, _draw(rand_scalar, params), params)
    value_ct, _ = encrypt_message(sender_pk, value, _draw(rand_scalar, params), params)

    return TransferCircuit(
        sender=Sender(
            private_key=FF(int(sender_sk)),
            public_key=sender_pk,
            balance=FF(int(sender_balance)),
            balance_ct=balance_ct,
            value_ct=value_ct,
        ),
        receiver=_receiver(receiver_pk, value, rand_scalar, params),
        auditor=_auditor(auditor_pk, value, rand_scalar, params),
        value_to_transfer=FF(int(value)),
    )


def build_withdraw(sender_sk: Scalar, sender_balance: Scalar,
                   balance_ct: Optional[ElGamalCiphertext], auditor_pk: Point,
                   value: Scalar, rand_scalar: Optional[RandScalar] = None,
                   params: CurveParams = BABYJUB) -> WithdrawCircuit:
    sender_pk = babyjub.mul_base(sender_sk, params)
    if balance_ct is None:
        balance_ct, _ = encrypt_message(sender_pk, sender_balance, _draw(rand_scalar, params), params)

    return WithdrawCircuit(
        sender=WithdrawSender(
            private_key=FF(int(sender_sk)),
            public_key=sender_pk,
            balance=FF(int(sender_balance)),
            balance_ct=balance_ct,
        ),
        auditor=_auditor(auditor_pk, value, rand_scalar, params),
        value_to_burn=FF(int(value)),
    )
