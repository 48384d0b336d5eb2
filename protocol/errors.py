"""Error taxonomy for proof construction."""

from enum import Enum
from typing import List, Optional


class ErrorKind(Enum):
    UNSATISFIABLE_WITNESS = "unsatisfiable_witness"
    MALFORMED_INPUT = "malformed_input"
    BACKEND_FAILURE = "backend_failure"


class ProtocolError(Exception):
    """Base class; `kind` classifies the failure."""
    kind: ErrorKind


class UnsatisfiableWitness(ProtocolError):
    """The claimed state transition fails at least one circuit assertion."""
    kind = ErrorKind.UNSATISFIABLE_WITNESS

    def __init__(self, operation: str, failures: List[str]):
        self.operation = operation
        self.failures = list(failures)
        super().__init__(
            f"witness does not satisfy {operation}: {', '.join(self.failures)}"
        )


class MalformedInput(ProtocolError):
    """Witness input rejected before any assertion is evaluated."""
    kind = ErrorKind.MALFORMED_INPUT


class BackendFailure(ProtocolError):
    """Compilation, key setup or proof generation failed in the backend."""
    kind = ErrorKind.BACKEND_FAILURE

    def __init__(self, message: str, stage: Optional[str] = None):
        self.stage = stage
        super().__init__(f"{stage}: {message}" if stage else message)
