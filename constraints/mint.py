"""Mint: credit an encrypted amount to a receiver under auditor oversight."""

from dataclasses import dataclass

from constraints.babyjub import BabyJubAdapter
from constraints.base import Circuit, ConstraintContext
from constraints.components import (
    check_nullifier_hash,
    check_pct_auditor,
    check_pct_receiver,
    check_value,
)
from primitives.babyjub import CurveParams
from primitives.field import FF
from protocol.data import Auditor, MintNullifier, Receiver, secret, unset


@dataclass
class MintCircuit(Circuit):
    operation = "MINT"

    receiver: Receiver = unset()
    auditor: Auditor = unset()
    mint_nullifier: MintNullifier = unset()
    value_to_mint: FF = secret()

    def define(self, ctx: ConstraintContext, params: CurveParams) -> None:
        bj = BabyJubAdapter(ctx, params)

        # receiver's encrypted value is the mint amount
        check_value(ctx, bj, self.receiver, self.value_to_mint)

        # nullifier is bound to the auditor ciphertext
        check_nullifier_hash(ctx, self.auditor, self.mint_nullifier)

        # summaries for receiver and auditor carry the mint amount
        check_pct_receiver(ctx, bj, self.receiver, self.value_to_mint)
        check_pct_auditor(ctx, bj, self.auditor, self.value_to_mint)
