"""Baby Jubjub twisted Edwards curve over the BN254 scalar field.

Native (out-of-circuit) point arithmetic used by the witness evaluation
context and by witness generation. Curve equation:

    a*x^2 + y^2 = 1 + d*x^2*y^2

Scalar multiplication runs in projective coordinates (X:Y:Z) with the
unified addition law from add-2008-bbjlp, which is complete on this curve
(a is a square, d is not), so doubling is just addition with itself.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from primitives.field import FF


class DegeneratePointError(ValueError):
    """Projective result has Z = 0; only reachable from off-curve inputs."""


@dataclass
class Point:
    """Affine curve point with field-element coordinates."""
    x: FF
    y: FF

    @classmethod
    def from_ints(cls, x: int, y: int) -> "Point":
        return cls(FF(x), FF(y))

    def to_ints(self) -> Tuple[int, int]:
        return int(self.x), int(self.y)


@dataclass(frozen=True)
class CurveParams:
    """Immutable curve configuration passed to every curve consumer.

    Attributes:
        a, d: Twisted Edwards coefficients
        order: Prime order of the subgroup generated by `generator`
        generator: G, used for key derivation and value encoding
        encryption_base: G2, the ElGamal randomness base (C1 = r * G2)
    """
    a: FF
    d: FF
    order: int
    generator: Point
    encryption_base: Point


BASE8 = Point.from_ints(
    5299619240641551281634865583518297030282874472190772894086521144482721001553,
    16950150798460657717958625567821834550301663161624707787222815936182638968203,
)

BABYJUB = CurveParams(
    a=FF(168700),
    d=FF(168696),
    order=2736030358979909402780800718157159386076813972158567259200215660948447373041,
    generator=BASE8,
    encryption_base=BASE8,
)


def identity() -> Point:
    return Point(FF(0), FF(1))


def is_on_curve(p: Point, params: CurveParams = BABYJUB) -> bool:
    x2 = p.x * p.x
    y2 = p.y * p.y
    return bool(params.a * x2 + y2 == FF(1) + params.d * x2 * y2)


def neg(p: Point) -> Point:
    return Point(-p.x, p.y)


# --- Projective Arithmetic ---

Projective = Tuple[FF, FF, FF]


def _projective_add(p: Projective, q: Projective, params: CurveParams) -> Projective:
    x1, y1, z1 = p
    x2, y2, z2 = q
    a = z1 * z2
    b = a * a
    c = x1 * x2
    d = y1 * y2
    e = params.d * c * d
    f = b - e
    g = b + e
    x3 = a * f * ((x1 + y1) * (x2 + y2) - c - d)
    y3 = a * g * (d - params.a * c)
    z3 = f * g
    return x3, y3, z3


def _to_affine(p: Projective) -> Point:
    x, y, z = p
    if z == 0:
        raise DegeneratePointError("projective point has Z = 0")
    z_inv = z ** -1
    return Point(x * z_inv, y * z_inv)


def add(p: Point, q: Point, params: CurveParams = BABYJUB) -> Point:
    one = FF(1)
    return _to_affine(_projective_add((p.x, p.y, one), (q.x, q.y, one), params))


def scalar_mul(p: Point, scalar: Union[int, FF], params: CurveParams = BABYJUB) -> Point:
    """Compute scalar * p by MSB-first double-and-add.

    The scalar is used as an integer (not reduced mod the subgroup order),
    matching in-circuit bit decomposition of a field element.
    """
    k = int(scalar)
    if k < 0:
        raise ValueError("scalar must be non-negative")

    acc: Projective = (FF(0), FF(1), FF(1))
    base: Projective = (p.x, p.y, FF(1))
    for bit in bin(k)[2:] if k else "":
        acc = _projective_add(acc, acc, params)
        if bit == "1":
            acc = _projective_add(acc, base, params)
    return _to_affine(acc)


def mul_base(scalar: Union[int, FF], params: CurveParams = BABYJUB) -> Point:
    """scalar * G. Derives public keys and encodes integers as points."""
    return scalar_mul(params.generator, scalar, params)


def sub(p: Point, q: Point, params: CurveParams = BABYJUB) -> Point:
    return add(p, neg(q), params)
