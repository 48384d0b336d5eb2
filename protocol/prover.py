"""Proof construction for the token circuits.

The proving system itself (constraint-system compilation, Groth16 setup,
proving and verification) is an external backend implementing
ProvingBackend. This module sequences one proof-construction call:

    1. Select the circuit for the operation
    2. Parse the witness and check its arity against the circuit layout
    3. Evaluate every assertion against the witness
    4. Load or compile the circuit and keys
    5. Ask the backend for a proof

A witness that fails step 3 never reaches the backend; the failure is a
definitive negative result and is not retried.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from constraints import Circuit, get_circuit
from primitives.babyjub import BABYJUB, CurveParams
from protocol.errors import BackendFailure, MalformedInput, UnsatisfiableWitness
from protocol.proof import Groth16Proof
from protocol.witness import Witness, parse_inputs

logger = logging.getLogger(__name__)


@dataclass
class ProverConfig:
    """Run parameters for one proof construction.

    Attributes:
        output: Path the proof JSON is written to (by the caller)
        cs_path: Compiled constraint system of an existing circuit
        pk_path: Proving key of an existing circuit
        is_new: Compile the circuit and run setup instead of loading
        extract: Export constraint system and keys after proving
    """
    output: Optional[str] = None
    cs_path: Optional[str] = None
    pk_path: Optional[str] = None
    is_new: bool = False
    extract: bool = False


class ProvingBackend(ABC):
    """External proving system over the BN254 scalar field."""

    @abstractmethod
    def compile(self, circuit_cls: type[Circuit]) -> Any:
        """Compile the circuit's assertions into a constraint system."""
        pass

    @abstractmethod
    def setup(self, cs: Any) -> Tuple[Any, Any]:
        """Return (proving key, verifying key) for a constraint system."""
        pass

    @abstractmethod
    def load(self, cs_path: str, pk_path: str) -> Tuple[Any, Any]:
        """Return (constraint system, proving key) read from disk."""
        pass

    @abstractmethod
    def prove(self, cs: Any, pk: Any, witness: Witness) -> Groth16Proof:
        pass

    @abstractmethod
    def verify(self, vk: Any, proof: Groth16Proof, public_inputs: list) -> bool:
        pass

    @abstractmethod
    def export(self, cs: Any, pk: Any, vk: Optional[Any], name: str) -> None:
        """Persist constraint system and keys under the given base name.

        vk is None when the circuit was loaded from disk rather than set up
        in this run; only the constraint system and proving key are known then.
        """
        pass


def _call_backend(stage: str, fn, *args):
    try:
        return fn(*args)
    except BackendFailure:
        raise
    except Exception as exc:
        raise BackendFailure(str(exc), stage=stage) from exc


def load_circuit(backend: ProvingBackend, circuit_cls: type[Circuit],
                 config: ProverConfig) -> Tuple[Any, Any, Any]:
    """Compile and set up a new circuit, or load an existing one.

    Returns (cs, pk, vk); vk is None when loading from disk.
    """
    if config.is_new:
        cs = _call_backend("compile", backend.compile, circuit_cls)
        pk, vk = _call_backend("setup", backend.setup, cs)
        return cs, pk, vk

    if not config.cs_path or not config.pk_path:
        raise MalformedInput("constraint system and proving key paths are required for an existing circuit")
    cs, pk = _call_backend("load", backend.load, config.cs_path, config.pk_path)
    return cs, pk, None


def build_circuit(operation: str, inputs: Union[str, bytes, Dict[str, Any], Witness]) -> Circuit:
    """Select the circuit and assign the witness to it (no evaluation)."""
    try:
        circuit_cls = get_circuit(operation)
    except KeyError as exc:
        raise MalformedInput(str(exc.args[0])) from exc
    witness = inputs if isinstance(inputs, Witness) else parse_inputs(inputs)
    return circuit_cls.from_witness(witness)


def check_witness(circuit: Circuit, params: CurveParams = BABYJUB) -> None:
    """Raise UnsatisfiableWitness unless every assertion of the circuit holds."""
    ctx = circuit.check(params)
    if not ctx.is_satisfied:
        raise UnsatisfiableWitness(circuit.operation, ctx.failures)
    logger.debug("%s witness satisfies %d assertions", circuit.operation, len(ctx.assertions))


def prove(
    operation: str,
    inputs: Union[str, bytes, Dict[str, Any], Witness],
    backend: ProvingBackend,
    config: Optional[ProverConfig] = None,
    params: CurveParams = BABYJUB,
) -> Groth16Proof:
    """Construct a proof for one operation.

    Raises:
        MalformedInput: Bad operation, JSON, values or arity
        UnsatisfiableWitness: The witness fails at least one assertion
        BackendFailure: Compilation, setup, loading or proving failed
    """
    config = config or ProverConfig()
    circuit = build_circuit(operation, inputs)
    check_witness(circuit, params)

    cs, pk, vk = load_circuit(backend, type(circuit), config)
    proof = _call_backend("prove", backend.prove, cs, pk, circuit.witness())

    if config.extract:
        _call_backend("export", backend.export, cs, pk, vk, circuit.operation)
    return proof
