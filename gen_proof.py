"""Command-line proof generation for the token circuits.

Input structure (--input, stringified JSON):
    {
        "publicInputs":  [...],
        "privateInputs": [...]
    }

Usage:
    python gen_proof.py --operation TRANSFER --input '{...}' --check
    python gen_proof.py --operation REGISTER --input '{...}' --output proof.json \\
        --backend my_backend:Groth16Backend --new --extract

The proving backend is loaded from a `module:Class` path and must implement
protocol.prover.ProvingBackend. With --check only the witness is evaluated.
"""

import argparse
import importlib
import sys
from typing import List, Optional

from constraints import Operation
from protocol.errors import BackendFailure, MalformedInput, UnsatisfiableWitness
from protocol.proof import write_proof
from protocol.prover import ProverConfig, ProvingBackend, build_circuit, check_witness, prove

EXIT_OK = 0
EXIT_UNSATISFIABLE = 1
EXIT_MALFORMED = 2
EXIT_BACKEND = 3
EXIT_OUTPUT = 4


def load_backend(path: str) -> ProvingBackend:
    """Instantiate a backend from 'package.module:ClassName'."""
    module_name, _, class_name = path.partition(":")
    if not module_name or not class_name:
        raise MalformedInput(f"backend must be given as module:Class, got '{path}'")
    try:
        backend_cls = getattr(importlib.import_module(module_name), class_name)
        return backend_cls()
    except Exception as exc:
        raise BackendFailure(f"cannot load backend '{path}': {exc}", stage="load") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate token circuit proofs")
    parser.add_argument("--operation", required=True, choices=[op.value for op in Operation],
                        help="Circuit name")
    parser.add_argument("--input", required=True, help="Stringified JSON input")
    parser.add_argument("--output", default="output.json", help="Proof output file")
    parser.add_argument("--cs", dest="cs_path", help="Path to the compiled constraint system")
    parser.add_argument("--pk", dest="pk_path", help="Path to the proving key")
    parser.add_argument("--new", dest="is_new", action="store_true", help="Compile and set up a new circuit")
    parser.add_argument("--extract", action="store_true", help="Export constraint system and keys")
    parser.add_argument("--backend", help="Proving backend as module:Class")
    parser.add_argument("--check", action="store_true", help="Only check that the witness satisfies the circuit")
    return parser


def run(args: argparse.Namespace) -> int:
    if args.check:
        circuit = build_circuit(args.operation, args.input)
        check_witness(circuit)
        print(f"{args.operation}: witness satisfies all assertions")
        return EXIT_OK

    if not args.backend:
        raise MalformedInput("--backend is required unless --check is given")

    config = ProverConfig(
        output=args.output,
        cs_path=args.cs_path,
        pk_path=args.pk_path,
        is_new=args.is_new,
        extract=args.extract,
    )
    proof = prove(args.operation, args.input, load_backend(args.backend), config)
    write_proof(config.output, proof)
    print(f"{args.operation}: proof written to {config.output}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except UnsatisfiableWitness as exc:
        print(f"ERROR: witness does not satisfy {exc.operation}")
        for label in exc.failures:
            print(f"  failed: {label}")
        return EXIT_UNSATISFIABLE
    except MalformedInput as exc:
        print(f"ERROR: malformed input: {exc}")
        return EXIT_MALFORMED
    except BackendFailure as exc:
        print(f"ERROR: backend failure: {exc}")
        return EXIT_BACKEND
    except OSError as exc:
        print(f"ERROR: cannot write proof: {exc}")
        return EXIT_OUTPUT


if __name__ == "__main__":
    sys.exit(main())
