"""Register: bind an identity key pair to a chain and an address."""

from dataclasses import dataclass

from constraints.babyjub import BabyJubAdapter
from constraints.base import Circuit, ConstraintContext
from constraints.components import check_public_key, check_registration_hash
from primitives.babyjub import CurveParams
from protocol.data import RegistrationSender, unset


@dataclass
class RegistrationCircuit(Circuit):
    """Public inputs: address, chain id, registration hash.
    Private inputs: private key, public key.
    """
    operation = "REGISTER"

    sender: RegistrationSender = unset()

    def define(self, ctx: ConstraintContext, params: CurveParams) -> None:
        bj = BabyJubAdapter(ctx, params)

        # sender's public key is well-formed
        check_public_key(ctx, bj, self.sender)

        # registration hash commits to (chain id, private key, address)
        check_registration_hash(ctx, self.sender)
