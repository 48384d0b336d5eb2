"""Circuit definitions.

Each operation of the token protocol has one Circuit: a dataclass of inputs
whose `define` emits the fixed, ordered conjunction of checks that must hold
for the claimed state transition to be valid.

The CIRCUIT_REGISTRY maps operation names to circuit classes.
"""

from enum import Enum

from .base import (
    Assertion,
    Circuit,
    ConstraintContext,
    WitnessConstraintContext,
)
from .mint import MintCircuit
from .registration import RegistrationCircuit
from .transfer import TransferCircuit
from .withdraw import WithdrawCircuit


class Operation(str, Enum):
    REGISTER = "REGISTER"
    MINT = "MINT"
    TRANSFER = "TRANSFER"
    WITHDRAW = "WITHDRAW"


CIRCUIT_REGISTRY: dict[Operation, type[Circuit]] = {
    Operation.REGISTER: RegistrationCircuit,
    Operation.MINT: MintCircuit,
    Operation.TRANSFER: TransferCircuit,
    Operation.WITHDRAW: WithdrawCircuit,
}


def get_circuit(operation: str) -> type[Circuit]:
    """Get the circuit class for an operation name.

    Args:
        operation: One of REGISTER, MINT, TRANSFER, WITHDRAW

    Raises:
        KeyError: If the operation is unknown
    """
    try:
        return CIRCUIT_REGISTRY[Operation(operation)]
    except ValueError:
        raise KeyError(
            f"No circuit for operation '{operation}'. "
            f"Available: {[op.value for op in CIRCUIT_REGISTRY]}"
        ) from None


__all__ = [
    "Assertion",
    "Circuit",
    "ConstraintContext",
    "WitnessConstraintContext",
    "Operation",
    "RegistrationCircuit",
    "MintCircuit",
    "TransferCircuit",
    "WithdrawCircuit",
    "CIRCUIT_REGISTRY",
    "get_circuit",
]
