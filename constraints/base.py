"""Base classes for circuit constraint evaluation.

ConstraintContext is the capability set a proving backend must supply to the
circuits: equality and ordering assertions over field elements, Baby Jubjub
curve operations and the Poseidon permutation. Field arithmetic between
witness values uses the FF operators directly, so the same circuit code runs
against any context that hands back FF-compatible values.

WitnessConstraintContext evaluates every assertion against a concrete witness
and records the outcome. It never stops at the first failure: all assertions
of a circuit are evaluated and the witness is satisfying only if every one of
them holds.

Example:
    def define(self, ctx: ConstraintContext, params: CurveParams):
        ctx.assert_is_less_or_equal(self.value, self.sender.balance, 'value <= balance')
        ...

    ctx = WitnessConstraintContext()
    circuit.define(ctx, BABYJUB)
    assert ctx.is_satisfied
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, List, Sequence

from primitives import babyjub
from primitives.babyjub import BABYJUB, CurveParams, DegeneratePointError, Point
from primitives.field import FF
from primitives.poseidon import poseidon_perm
from protocol.data import build, flatten, layout
from protocol.errors import MalformedInput
from protocol.witness import Witness

logger = logging.getLogger(__name__)


@dataclass
class Assertion:
    """Outcome of a single recorded assertion."""
    label: str
    holds: bool


class ConstraintContext(ABC):
    """Backend contract used by the circuits."""

    @abstractmethod
    def assert_is_equal(self, a: FF, b: FF, label: str) -> None:
        """Assert a == b in the scalar field."""
        pass

    @abstractmethod
    def assert_is_less_or_equal(self, a: FF, b: FF, label: str) -> None:
        """Assert a <= b as canonical integers in [0, r), no wraparound."""
        pass

    @abstractmethod
    def add(self, p: Point, q: Point, params: CurveParams) -> Point:
        pass

    @abstractmethod
    def neg(self, p: Point, params: CurveParams) -> Point:
        pass

    @abstractmethod
    def scalar_mul(self, p: Point, scalar: FF, params: CurveParams) -> Point:
        pass

    @abstractmethod
    def assert_is_on_curve(self, p: Point, params: CurveParams, label: str) -> None:
        pass

    @abstractmethod
    def permutation(self, state: Sequence[FF]) -> List[FF]:
        """Full-width Poseidon permutation of the given state."""
        pass


class WitnessConstraintContext(ConstraintContext):
    """Evaluates assertions against concrete witness values.

    Assertions are appended in evaluation order and never removed. A curve
    operation that degenerates (only possible on off-curve inputs) is
    recorded as a failed assertion and yields an off-curve point so that
    downstream checks fail as well.
    """

    def __init__(self):
        self._assertions: List[Assertion] = []

    @property
    def assertions(self) -> List[Assertion]:
        return list(self._assertions)

    @property
    def failures(self) -> List[str]:
        return [a.label for a in self._assertions if not a.holds]

    @property
    def is_satisfied(self) -> bool:
        return all(a.holds for a in self._assertions)

    def _record(self, label: str, holds: bool) -> None:
        self._assertions.append(Assertion(label, bool(holds)))
        if not holds:
            logger.debug("assertion failed: %s", label)

    def assert_is_equal(self, a: FF, b: FF, label: str) -> None:
        self._record(label, FF(int(a)) == FF(int(b)))

    def assert_is_less_or_equal(self, a: FF, b: FF, label: str) -> None:
        self._record(label, int(a) <= int(b))

    def add(self, p: Point, q: Point, params: CurveParams) -> Point:
        try:
            return babyjub.add(p, q, params)
        except DegeneratePointError:
            self._record("degenerate point addition", False)
            return Point(FF(0), FF(0))

    def neg(self, p: Point, params: CurveParams) -> Point:
        return babyjub.neg(p)

    def scalar_mul(self, p: Point, scalar: FF, params: CurveParams) -> Point:
        try:
            return babyjub.scalar_mul(p, scalar, params)
        except DegeneratePointError:
            self._record("degenerate scalar multiplication", False)
            return Point(FF(0), FF(0))

    def assert_is_on_curve(self, p: Point, params: CurveParams, label: str) -> None:
        self._record(label, babyjub.is_on_curve(p, params))

    def permutation(self, state: Sequence[FF]) -> List[FF]:
        return poseidon_perm(state)


class Circuit(ABC):
    """One statement of the protocol. Subclasses are dataclasses whose fields
    (with visibility metadata) are the circuit inputs.

    The same `define` runs against any ConstraintContext: the witness
    evaluator here, or an external backend that turns the assertions into a
    constraint system.
    """

    operation: ClassVar[str] = ""

    @abstractmethod
    def define(self, ctx: ConstraintContext, params: CurveParams) -> None:
        """Emit every assertion of the statement, in order."""
        pass

    @classmethod
    def n_public(cls) -> int:
        return len(layout(cls)[0])

    @classmethod
    def n_private(cls) -> int:
        return len(layout(cls)[1])

    @classmethod
    def from_witness(cls, witness: Witness) -> "Circuit":
        """Assign a parsed witness to the circuit fields.

        Raises:
            MalformedInput: If the public or private arity does not match.
        """
        expected_pub, expected_priv = cls.n_public(), cls.n_private()
        if len(witness.public) != expected_pub or len(witness.private) != expected_priv:
            raise MalformedInput(
                f"{cls.operation or cls.__name__} expects {expected_pub} public and "
                f"{expected_priv} private inputs, got {len(witness.public)} and "
                f"{len(witness.private)}"
            )
        return build(cls, iter(witness.public), iter(witness.private))

    def witness(self) -> Witness:
        public_values, private_values = flatten(self)
        return Witness(public=public_values, private=private_values)

    def check(self, params: CurveParams = BABYJUB) -> WitnessConstraintContext:
        """Evaluate the statement against this circuit's own values."""
        ctx = WitnessConstraintContext()
        self.define(ctx, params)
        logger.debug(
            "%s: %d assertions, %d failed",
            self.operation, len(ctx.assertions), len(ctx.failures),
        )
        return ctx
