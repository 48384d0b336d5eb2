"""Transfer: move an encrypted amount from a sender to a receiver."""

from dataclasses import dataclass

from constraints.babyjub import BabyJubAdapter
from constraints.base import Circuit, ConstraintContext
from constraints.components import (
    check_balance,
    check_pct_auditor,
    check_pct_receiver,
    check_positive_value,
    check_public_key,
    check_value,
)
from primitives.babyjub import CurveParams
from primitives.field import FF
from protocol.data import Auditor, Receiver, Sender, secret, unset


@dataclass
class TransferCircuit(Circuit):
    operation = "TRANSFER"

    sender: Sender = unset()
    receiver: Receiver = unset()
    auditor: Auditor = unset()
    value_to_transfer: FF = secret()

    def define(self, ctx: ConstraintContext, params: CurveParams) -> None:
        bj = BabyJubAdapter(ctx, params)

        ctx.assert_is_less_or_equal(
            self.value_to_transfer, self.sender.balance, "transfer value <= sender balance"
        )

        check_public_key(ctx, bj, self.sender)
        check_balance(ctx, bj, self.sender)

        # sender's own ciphertext of the amount (subtracted from its balance)
        check_positive_value(ctx, bj, self.sender, self.value_to_transfer)

        check_value(ctx, bj, self.receiver, self.value_to_transfer)
        check_pct_receiver(ctx, bj, self.receiver, self.value_to_transfer)
        check_pct_auditor(ctx, bj, self.auditor, self.value_to_transfer)
