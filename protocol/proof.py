"""Groth16 proof data structure and serialization.

JSON layout written for the contract side:
    {"proof": [a0, a1, b00, b01, b10, b11, c0, c1]}

Raw layout read from a backend: eight 32-byte big-endian coordinates in the
same order.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from protocol.errors import MalformedInput

FP_SIZE = 4 * 8  # bytes per base-field coordinate
N_PROOF_ELEMENTS = 8


@dataclass
class Groth16Proof:
    """Two G1 points (a, c) and one G2 point (b) as integer coordinates."""
    a: list[int] = field(default_factory=lambda: [0, 0])
    b: list[list[int]] = field(default_factory=lambda: [[0, 0], [0, 0]])
    c: list[int] = field(default_factory=lambda: [0, 0])

    def flat(self) -> list[int]:
        return [self.a[0], self.a[1],
                self.b[0][0], self.b[0][1], self.b[1][0], self.b[1][1],
                self.c[0], self.c[1]]

    @classmethod
    def from_flat(cls, values: list[int]) -> "Groth16Proof":
        if len(values) != N_PROOF_ELEMENTS:
            raise MalformedInput(f"proof needs {N_PROOF_ELEMENTS} elements, got {len(values)}")
        return cls(
            a=[values[0], values[1]],
            b=[[values[2], values[3]], [values[4], values[5]]],
            c=[values[6], values[7]],
        )


def proof_from_bytes(data: bytes) -> Groth16Proof:
    """Read a proof from its raw big-endian encoding (extra trailing bytes ignored)."""
    if len(data) < FP_SIZE * N_PROOF_ELEMENTS:
        raise MalformedInput(
            f"raw proof needs at least {FP_SIZE * N_PROOF_ELEMENTS} bytes, got {len(data)}"
        )
    values = [
        int.from_bytes(data[FP_SIZE * i:FP_SIZE * (i + 1)], "big")
        for i in range(N_PROOF_ELEMENTS)
    ]
    return Groth16Proof.from_flat(values)


def proof_to_json(proof: Groth16Proof) -> dict[str, Any]:
    """Convert proof to JSON-serializable dictionary of decimal strings."""
    return {"proof": [str(v) for v in proof.flat()]}


def proof_from_json(data: dict[str, Any]) -> Groth16Proof:
    if not isinstance(data, dict) or "proof" not in data:
        raise MalformedInput("proof JSON must contain a 'proof' list")
    try:
        values = [int(v) for v in data["proof"]]
    except (TypeError, ValueError) as exc:
        raise MalformedInput(f"proof elements must be decimal strings: {exc}") from exc
    return Groth16Proof.from_flat(values)


def write_proof(path: str, proof: Groth16Proof) -> None:
    with open(path, "w") as f:
        json.dump(proof_to_json(proof), f)


def load_proof_from_json(path: str) -> Groth16Proof:
    with open(path) as f:
        return proof_from_json(json.load(f))
