"""Tests for the curve gadgets and the shared circuit checks."""

import dataclasses

import pytest

from constraints.babyjub import BabyJubAdapter
from constraints.base import WitnessConstraintContext
from constraints.components import (
    check_balance,
    check_nullifier_hash,
    check_pct_auditor,
    check_pct_receiver,
    check_positive_value,
    check_public_key,
    check_registration_hash,
    check_value,
)
from primitives.babyjub import BABYJUB, BASE8, Point, mul_base
from primitives.field import FF
from protocol.witness_generation import (
    build_mint,
    build_registration,
    build_transfer,
    encrypt_message,
    registration_hash,
)
from tests.conftest import ADDRESS, AUDITOR_SK, CHAIN_ID, RECEIVER_SK, SENDER_SK, make_rand


def _ctx():
    ctx = WitnessConstraintContext()
    return ctx, BabyJubAdapter(ctx)


@pytest.fixture
def transfer(receiver_pk, auditor_pk):
    return build_transfer(SENDER_SK, 100, None, receiver_pk, auditor_pk, 40, rand_scalar=make_rand())


class TestBabyJubAdapter:
    """Gadgets emit assertions rather than raising."""

    def test_order(self) -> None:
        _, bj = _ctx()
        assert bj.order == BABYJUB.order

    def test_assert_point_equal(self) -> None:
        ctx, bj = _ctx()
        bj.assert_point(mul_base(3), mul_base(3), "p")
        assert ctx.is_satisfied
        assert len(ctx.assertions) == 4

    def test_assert_point_off_curve(self) -> None:
        ctx, bj = _ctx()
        bj.assert_point(BASE8, Point(FF(1), FF(1)), "p")
        assert "p: given point on curve" in ctx.failures

    def test_el_gamal_encrypt_matches_native(self) -> None:
        ctx, bj = _ctx()
        pk = mul_base(RECEIVER_SK)
        expected, _ = encrypt_message(pk, 25, 77)
        c1, c2 = bj.el_gamal_encrypt(pk, mul_base(25), FF(77))
        assert (c1, c2) == (expected.c1, expected.c2)
        assert ctx.is_satisfied

    def test_el_gamal_decrypt(self) -> None:
        ctx, bj = _ctx()
        ct, _ = encrypt_message(mul_base(SENDER_SK), 25, 77)
        assert bj.el_gamal_decrypt(ct.c1, ct.c2, FF(SENDER_SK)) == mul_base(25)
        assert ctx.is_satisfied

    def test_mul_with_scalar_asserts_on_curve(self) -> None:
        ctx, bj = _ctx()
        bj.mul_with_scalar(mul_base(2), FF(5), "k")
        assert [a.label for a in ctx.assertions] == ["k: result on curve"]


class TestPublicKey:

    def test_valid(self) -> None:
        ctx, bj = _ctx()
        check_public_key(ctx, bj, build_registration(SENDER_SK, CHAIN_ID, ADDRESS).sender)
        assert ctx.is_satisfied

    @pytest.mark.parametrize("sk", [0, 1, SENDER_SK, 2**128 + 3, BABYJUB.order - 1])
    def test_valid_for_any_key(self, sk) -> None:
        ctx, bj = _ctx()
        check_public_key(ctx, bj, build_registration(sk, CHAIN_ID, ADDRESS).sender)
        assert ctx.is_satisfied

    def test_mismatched_key(self) -> None:
        sender = build_registration(SENDER_SK, CHAIN_ID, ADDRESS).sender
        sender.public_key = mul_base(SENDER_SK + 1)
        ctx, bj = _ctx()
        check_public_key(ctx, bj, sender)
        assert "sender public key: x" in ctx.failures

    def test_private_key_above_order(self) -> None:
        sender = build_registration(SENDER_SK, CHAIN_ID, ADDRESS).sender
        sender.private_key = FF(BABYJUB.order + SENDER_SK)
        ctx, bj = _ctx()
        check_public_key(ctx, bj, sender)
        assert "sender.private_key <= order - 1" in ctx.failures

    def test_role_in_labels(self) -> None:
        sender = build_registration(SENDER_SK, CHAIN_ID, ADDRESS).sender
        ctx, bj = _ctx()
        check_public_key(ctx, bj, sender, role="holder")
        assert ctx.assertions[0].label == "holder.private_key <= order - 1"


class TestBalanceAndValue:
    """ElGamal-backed checks on a generated transfer witness."""

    def test_balance(self, transfer) -> None:
        ctx, bj = _ctx()
        check_balance(ctx, bj, transfer.sender)
        assert ctx.is_satisfied

    def test_wrong_balance(self, transfer) -> None:
        transfer.sender.balance = FF(99)
        ctx, bj = _ctx()
        check_balance(ctx, bj, transfer.sender)
        assert "sender balance: x" in ctx.failures

    def test_positive_value(self, transfer) -> None:
        ctx, bj = _ctx()
        check_positive_value(ctx, bj, transfer.sender, transfer.value_to_transfer)
        assert ctx.is_satisfied

    def test_receiver_value(self, transfer) -> None:
        ctx, bj = _ctx()
        check_value(ctx, bj, transfer.receiver, transfer.value_to_transfer)
        assert ctx.is_satisfied

    def test_receiver_value_wrong_randomness(self, transfer) -> None:
        transfer.receiver.value_random = transfer.receiver.value_random + FF(1)
        ctx, bj = _ctx()
        check_value(ctx, bj, transfer.receiver, transfer.value_to_transfer)
        assert "receiver value C1: x" in ctx.failures


class TestSummaries:
    """Poseidon summaries for receiver and auditor."""

    def test_receiver_and_auditor(self, transfer) -> None:
        ctx, bj = _ctx()
        check_pct_receiver(ctx, bj, transfer.receiver, transfer.value_to_transfer)
        check_pct_auditor(ctx, bj, transfer.auditor, transfer.value_to_transfer)
        assert ctx.is_satisfied

    def test_auditor_value_mismatch(self, transfer) -> None:
        ctx, bj = _ctx()
        check_pct_auditor(ctx, bj, transfer.auditor, FF(41))
        assert ctx.failures == ["auditor pct: plaintext equals value"]

    def test_auditor_wrong_random(self, transfer) -> None:
        pct = dataclasses.replace(transfer.auditor.pct, random=transfer.auditor.pct.random + FF(1))
        auditor = dataclasses.replace(transfer.auditor, pct=pct)
        ctx, bj = _ctx()
        check_pct_auditor(ctx, bj, auditor, transfer.value_to_transfer)
        assert "auditor pct auth key: x" in ctx.failures
        assert "auditor pct: authentication tag" in ctx.failures

    def test_summary_for_wrong_recipient(self, transfer) -> None:
        # receiver summary checked against the auditor key
        receiver = dataclasses.replace(transfer.receiver, public_key=mul_base(AUDITOR_SK))
        ctx, bj = _ctx()
        check_pct_receiver(ctx, bj, receiver, transfer.value_to_transfer)
        assert "receiver pct: authentication tag" in ctx.failures


class TestHashes:

    def test_registration_hash(self) -> None:
        sender = build_registration(SENDER_SK, CHAIN_ID, ADDRESS).sender
        assert sender.registration_hash == registration_hash(CHAIN_ID, SENDER_SK, ADDRESS)
        ctx = WitnessConstraintContext()
        check_registration_hash(ctx, sender)
        assert ctx.is_satisfied

    def test_registration_hash_other_chain(self) -> None:
        sender = build_registration(SENDER_SK, CHAIN_ID, ADDRESS).sender
        sender.chain_id = FF(CHAIN_ID + 1)
        ctx = WitnessConstraintContext()
        check_registration_hash(ctx, sender)
        assert ctx.failures == ["registration hash"]

    def test_nullifier_hash(self, receiver_pk, auditor_pk) -> None:
        mint = build_mint(receiver_pk, auditor_pk, 10, CHAIN_ID, rand_scalar=make_rand())
        ctx = WitnessConstraintContext()
        check_nullifier_hash(ctx, mint.auditor, mint.mint_nullifier)
        assert ctx.is_satisfied

    def test_nullifier_hash_bound_to_ciphertext(self, receiver_pk, auditor_pk) -> None:
        mint = build_mint(receiver_pk, auditor_pk, 10, CHAIN_ID, rand_scalar=make_rand())
        mint.auditor.pct.ciphertext[3] = mint.auditor.pct.ciphertext[3] + FF(1)
        ctx = WitnessConstraintContext()
        check_nullifier_hash(ctx, mint.auditor, mint.mint_nullifier)
        assert ctx.failures == ["nullifier hash"]
