"""Reusable checks shared by the Register, Mint, Transfer and Withdraw circuits.

Every scalar that feeds a scalar multiplication is first bounded by
0 <= x <= order - 1.
"""

from constraints.babyjub import BabyJubAdapter
from constraints.base import ConstraintContext
from constraints.poseidon_decryption import poseidon_decrypt_single
from primitives.babyjub import Point
from primitives.field import FF
from protocol.data import (
    Auditor,
    BalanceHolder,
    KeyHolder,
    MintNullifier,
    PoseidonCiphertext,
    Receiver,
    RegistrationSender,
    Sender,
)


def _assert_in_order(ctx: ConstraintContext, bj: BabyJubAdapter, value: FF, label: str) -> None:
    ctx.assert_is_less_or_equal(value, FF(bj.order - 1), f"{label} <= order - 1")


def check_public_key(ctx: ConstraintContext, bj: BabyJubAdapter, holder: KeyHolder,
                     role: str = "sender") -> None:
    """pk = sk * G."""
    _assert_in_order(ctx, bj, holder.private_key, f"{role}.private_key")
    generated = bj.mul_with_base_point(holder.private_key)
    bj.assert_point(generated, holder.public_key, f"{role} public key")


def check_balance(ctx: ConstraintContext, bj: BabyJubAdapter, sender: BalanceHolder) -> None:
    """Decrypting the balance ciphertext with sk gives balance * G."""
    _assert_in_order(ctx, bj, sender.balance, "sender.balance")
    decrypted = bj.el_gamal_decrypt(
        sender.balance_ct.c1, sender.balance_ct.c2, sender.private_key, "sender balance"
    )
    given = bj.mul_with_base_point(sender.balance)
    bj.assert_point(given, decrypted, "sender balance")


def check_positive_value(ctx: ConstraintContext, bj: BabyJubAdapter, sender: Sender, value: FF) -> None:
    """The sender's own value ciphertext decrypts to value * G."""
    _assert_in_order(ctx, bj, value, "value")
    expected = bj.mul_with_base_point(value)
    decrypted = bj.el_gamal_decrypt(
        sender.value_ct.c1, sender.value_ct.c2, sender.private_key, "sender value"
    )
    bj.assert_point(expected, decrypted, "sender value")


def check_value(ctx: ConstraintContext, bj: BabyJubAdapter, receiver: Receiver, value: FF) -> None:
    """Re-encrypting value * G under the receiver key reproduces the given ciphertext."""
    _assert_in_order(ctx, bj, value, "value")
    _assert_in_order(ctx, bj, receiver.value_random, "receiver.value_random")

    c1, c2 = bj.el_gamal_encrypt(
        receiver.public_key, bj.mul_with_base_point(value), receiver.value_random,
        "receiver value",
    )
    bj.assert_point(receiver.value_ct.c1, c1, "receiver value C1")
    bj.assert_point(receiver.value_ct.c2, c2, "receiver value C2")


def check_pct(ctx: ConstraintContext, bj: BabyJubAdapter, public_key: Point,
              pct: PoseidonCiphertext, value: FF, role: str) -> None:
    """auth_key = random * G, key = random * pk, and the PCT decrypts to value."""
    _assert_in_order(ctx, bj, pct.random, f"{role}.pct.random")

    auth_key = bj.mul_with_base_point(pct.random)
    bj.assert_point(auth_key, pct.auth_key, f"{role} pct auth key")

    encryption_key = bj.mul_with_scalar(public_key, pct.random, f"{role} pct key")
    decrypted = poseidon_decrypt_single(
        ctx, [encryption_key.x, encryption_key.y], pct.nonce, pct.ciphertext, f"{role} pct",
    )
    ctx.assert_is_equal(decrypted[0], value, f"{role} pct: plaintext equals value")


def check_pct_receiver(ctx: ConstraintContext, bj: BabyJubAdapter, receiver: Receiver, value: FF) -> None:
    check_pct(ctx, bj, receiver.public_key, receiver.pct, value, "receiver")


def check_pct_auditor(ctx: ConstraintContext, bj: BabyJubAdapter, auditor: Auditor, value: FF) -> None:
    check_pct(ctx, bj, auditor.public_key, auditor.pct, value, "auditor")


def check_registration_hash(ctx: ConstraintContext, sender: RegistrationSender) -> None:
    """registration_hash = H(chain_id, sk, address)."""
    state = ctx.permutation([FF(0), sender.chain_id, sender.private_key, sender.address])
    ctx.assert_is_equal(state[0], sender.registration_hash, "registration hash")


def check_nullifier_hash(ctx: ConstraintContext, auditor: Auditor, nullifier: MintNullifier) -> None:
    """nullifier_hash = H(chain_id, auditor ciphertext[0..3])."""
    state = ctx.permutation([FF(0), nullifier.chain_id, *auditor.pct.ciphertext])
    ctx.assert_is_equal(state[0], nullifier.nullifier_hash, "nullifier hash")
