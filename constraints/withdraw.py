"""Withdraw: burn a public amount from an encrypted balance."""

from dataclasses import dataclass

from constraints.babyjub import BabyJubAdapter
from constraints.base import Circuit, ConstraintContext
from constraints.components import check_balance, check_pct_auditor, check_public_key
from primitives.babyjub import CurveParams
from primitives.field import FF
from protocol.data import Auditor, WithdrawSender, public, unset


@dataclass
class WithdrawCircuit(Circuit):
    """The burn amount is public so the token side can release it."""
    operation = "WITHDRAW"

    sender: WithdrawSender = unset()
    auditor: Auditor = unset()
    value_to_burn: FF = public()

    def define(self, ctx: ConstraintContext, params: CurveParams) -> None:
        bj = BabyJubAdapter(ctx, params)

        ctx.assert_is_less_or_equal(
            self.value_to_burn, self.sender.balance, "burn value <= sender balance"
        )

        check_public_key(ctx, bj, self.sender)
        check_balance(ctx, bj, self.sender)
        check_pct_auditor(ctx, bj, self.auditor, self.value_to_burn)
