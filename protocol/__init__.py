"""Protocol - witness data model, I/O formats and proof orchestration.

protocol.prover and protocol.witness_generation depend on the circuit
definitions and are imported directly rather than re-exported here.
"""

from protocol.data import (
    Auditor,
    ElGamalCiphertext,
    MintNullifier,
    PoseidonCiphertext,
    Receiver,
    RegistrationSender,
    Sender,
    Visibility,
    WithdrawSender,
)
from protocol.errors import (
    BackendFailure,
    ErrorKind,
    MalformedInput,
    ProtocolError,
    UnsatisfiableWitness,
)
from protocol.proof import Groth16Proof, proof_from_bytes, proof_to_json
from protocol.witness import Witness, parse_inputs

__all__ = [
    # Data model
    "Auditor",
    "ElGamalCiphertext",
    "MintNullifier",
    "PoseidonCiphertext",
    "Receiver",
    "RegistrationSender",
    "Sender",
    "Visibility",
    "WithdrawSender",
    # Errors
    "BackendFailure",
    "ErrorKind",
    "MalformedInput",
    "ProtocolError",
    "UnsatisfiableWitness",
    # I/O
    "Groth16Proof",
    "proof_from_bytes",
    "proof_to_json",
    "Witness",
    "parse_inputs",
]
