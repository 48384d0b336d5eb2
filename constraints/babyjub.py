"""Baby Jubjub gadgets: key derivation, point equality and ElGamal.

All operations go through the ConstraintContext, so they emit assertions
instead of raising. Value equality is always a point equality against an
independently computed value * G; no discrete log is ever taken.
"""

from typing import Tuple

from constraints.base import ConstraintContext
from primitives.babyjub import BABYJUB, CurveParams, Point
from primitives.field import FF


class BabyJubAdapter:
    """Curve operations bound to one context and one curve configuration."""

    def __init__(self, ctx: ConstraintContext, params: CurveParams = BABYJUB):
        self.ctx = ctx
        self.params = params

    @property
    def order(self) -> int:
        return self.params.order

    def mul_with_base_point(self, scalar: FF) -> Point:
        """scalar * G, e.g. public key from private key or value encoding."""
        return self.ctx.scalar_mul(self.params.generator, scalar, self.params)

    def mul_with_scalar(self, p: Point, scalar: FF, label: str = "scalar mul") -> Point:
        result = self.ctx.scalar_mul(p, scalar, self.params)
        self.ctx.assert_is_on_curve(result, self.params, f"{label}: result on curve")
        return result

    def assert_point(self, p1: Point, p2: Point, label: str) -> None:
        """Both points on the curve and coordinate-wise equal."""
        self.ctx.assert_is_on_curve(p1, self.params, f"{label}: computed point on curve")
        self.ctx.assert_is_on_curve(p2, self.params, f"{label}: given point on curve")
        self.ctx.assert_is_equal(p1.x, p2.x, f"{label}: x")
        self.ctx.assert_is_equal(p1.y, p2.y, f"{label}: y")

    def el_gamal_encrypt(self, public_key: Point, message: Point, random: FF,
                         label: str = "el gamal encrypt") -> Tuple[Point, Point]:
        """C1 = random * G2, C2 = random * pk + message."""
        c1 = self.ctx.scalar_mul(self.params.encryption_base, random, self.params)
        shared = self.ctx.scalar_mul(public_key, random, self.params)
        c2 = self.ctx.add(shared, message, self.params)
        self.ctx.assert_is_on_curve(shared, self.params, f"{label}: random * pk on curve")
        return c1, c2

    def el_gamal_decrypt(self, c1: Point, c2: Point, private_key: FF,
                         label: str = "el gamal decrypt") -> Point:
        """C2 - private_key * C1."""
        c1x = self.ctx.scalar_mul(c1, private_key, self.params)
        c1x_inverse = self.ctx.neg(c1x, self.params)
        decrypted = self.ctx.add(c1x_inverse, c2, self.params)

        self.ctx.assert_is_on_curve(c1x, self.params, f"{label}: sk * C1 on curve")
        self.ctx.assert_is_on_curve(decrypted, self.params, f"{label}: plaintext on curve")
        self.ctx.assert_is_on_curve(c1x_inverse, self.params, f"{label}: -(sk * C1) on curve")
        return decrypted
