"""Tests for proof construction against a recording backend."""

import pytest

from constraints import RegistrationCircuit
from primitives.field import FF
from protocol.errors import BackendFailure, ErrorKind, MalformedInput, UnsatisfiableWitness
from protocol.proof import Groth16Proof
from protocol.prover import (
    ProverConfig,
    ProvingBackend,
    build_circuit,
    check_witness,
    load_circuit,
    prove,
)
from protocol.witness import Witness
from protocol.witness_generation import build_registration
from tests.conftest import ADDRESS, CHAIN_ID, SENDER_SK

PROOF = Groth16Proof.from_flat([1, 2, 3, 4, 5, 6, 7, 8])


class RecordingBackend(ProvingBackend):
    """Backend double that records calls and can fail at one stage."""

    def __init__(self, fail_at=None, error=None):
        self.calls = []
        self.fail_at = fail_at
        self.error = error or RuntimeError("backend exploded")

    def _enter(self, stage):
        self.calls.append(stage)
        if stage == self.fail_at:
            raise self.error

    def compile(self, circuit_cls):
        self._enter("compile")
        return f"cs:{circuit_cls.operation}"

    def setup(self, cs):
        self._enter("setup")
        return "pk", "vk"

    def load(self, cs_path, pk_path):
        self._enter("load")
        return cs_path, pk_path

    def prove(self, cs, pk, witness):
        self._enter("prove")
        self.witness = witness
        return PROOF

    def verify(self, vk, proof, public_inputs):
        self._enter("verify")
        return True

    def export(self, cs, pk, vk, name):
        self._enter("export")
        self.exported = (cs, pk, vk, name)


@pytest.fixture
def inputs():
    return build_registration(SENDER_SK, CHAIN_ID, ADDRESS).witness().to_inputs()


@pytest.fixture
def bad_inputs(inputs):
    # registration hash is the last public input
    inputs["publicInputs"][-1] = str(int(inputs["publicInputs"][-1]) + 1)
    return inputs


NEW = ProverConfig(is_new=True)


class TestBuildCircuit:

    def test_selects_and_assigns(self, inputs) -> None:
        circuit = build_circuit("REGISTER", inputs)
        assert isinstance(circuit, RegistrationCircuit)
        assert circuit.sender.private_key == FF(SENDER_SK)

    def test_accepts_witness(self, inputs) -> None:
        witness = build_registration(SENDER_SK, CHAIN_ID, ADDRESS).witness()
        assert isinstance(build_circuit("REGISTER", witness), RegistrationCircuit)

    def test_unknown_operation(self, inputs) -> None:
        with pytest.raises(MalformedInput):
            build_circuit("BURN", inputs)

    def test_arity_mismatch(self, inputs) -> None:
        with pytest.raises(MalformedInput):
            build_circuit("TRANSFER", inputs)


class TestCheckWitness:

    def test_unsatisfied(self, bad_inputs) -> None:
        with pytest.raises(UnsatisfiableWitness) as info:
            check_witness(build_circuit("REGISTER", bad_inputs))
        assert info.value.operation == "REGISTER"
        assert info.value.failures == ["registration hash"]
        assert info.value.kind is ErrorKind.UNSATISFIABLE_WITNESS


class TestLoadCircuit:

    def test_new_circuit(self) -> None:
        backend = RecordingBackend()
        assert load_circuit(backend, RegistrationCircuit, NEW) == ("cs:REGISTER", "pk", "vk")
        assert backend.calls == ["compile", "setup"]

    def test_existing_circuit(self) -> None:
        backend = RecordingBackend()
        config = ProverConfig(cs_path="register.cs", pk_path="register.pk")
        assert load_circuit(backend, RegistrationCircuit, config) == ("register.cs", "register.pk", None)
        assert backend.calls == ["load"]

    def test_existing_circuit_needs_paths(self) -> None:
        backend = RecordingBackend()
        with pytest.raises(MalformedInput):
            load_circuit(backend, RegistrationCircuit, ProverConfig(cs_path="register.cs"))
        assert backend.calls == []


class TestProve:
    """End-to-end sequencing of one proof construction."""

    def test_success(self, inputs) -> None:
        backend = RecordingBackend()
        assert prove("REGISTER", inputs, backend, NEW) == PROOF
        assert backend.calls == ["compile", "setup", "prove"]
        assert backend.witness == Witness(
            public=[FF(int(v)) for v in inputs["publicInputs"]],
            private=[FF(int(v)) for v in inputs["privateInputs"]],
        )

    def test_extract_exports_keys(self, inputs) -> None:
        backend = RecordingBackend()
        prove("REGISTER", inputs, backend, ProverConfig(is_new=True, extract=True))
        assert backend.calls[-1] == "export"
        assert backend.exported == ("cs:REGISTER", "pk", "vk", "REGISTER")

    def test_unsatisfied_never_reaches_backend(self, bad_inputs) -> None:
        backend = RecordingBackend()
        with pytest.raises(UnsatisfiableWitness):
            prove("REGISTER", bad_inputs, backend, NEW)
        assert backend.calls == []

    def test_malformed_never_reaches_backend(self) -> None:
        backend = RecordingBackend()
        with pytest.raises(MalformedInput):
            prove("REGISTER", "{", backend, NEW)
        assert backend.calls == []

    @pytest.mark.parametrize("stage", ["compile", "setup", "prove"])
    def test_backend_errors_wrapped(self, inputs, stage) -> None:
        backend = RecordingBackend(fail_at=stage)
        with pytest.raises(BackendFailure) as info:
            prove("REGISTER", inputs, backend, NEW)
        assert info.value.stage == stage
        assert isinstance(info.value.__cause__, RuntimeError)
        assert "backend exploded" in str(info.value)

    def test_backend_failure_passes_through(self, inputs) -> None:
        error = BackendFailure("out of memory", stage="setup")
        backend = RecordingBackend(fail_at="setup", error=error)
        with pytest.raises(BackendFailure) as info:
            prove("REGISTER", inputs, backend, NEW)
        assert info.value is error

    def test_load_error_wrapped(self, inputs) -> None:
        backend = RecordingBackend(fail_at="load", error=FileNotFoundError("register.cs"))
        config = ProverConfig(cs_path="register.cs", pk_path="register.pk")
        with pytest.raises(BackendFailure) as info:
            prove("REGISTER", inputs, backend, config)
        assert info.value.stage == "load"

    def test_extract_existing_circuit_has_no_verifying_key(self, inputs) -> None:
        backend = RecordingBackend()
        config = ProverConfig(cs_path="register.cs", pk_path="register.pk", extract=True)
        prove("REGISTER", inputs, backend, config)
        assert backend.calls == ["load", "prove", "export"]
        assert backend.exported == ("register.cs", "register.pk", None, "REGISTER")
