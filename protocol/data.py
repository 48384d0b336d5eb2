"""Witness data structures for the circuits.

Each dataclass mirrors one group of circuit inputs. Visibility is declared
on the field that holds a value through dataclass metadata:

    public_key: Point = public()
    balance: FF = secret()

A leaf (field element) takes the visibility of its nearest enclosing
declaration and is secret when nothing declares it. Fixed-size arrays declare
their length with `length=`.

The schema walker flattens a circuit into two ordered slot lists, public and
private, in declaration order (depth first). That order is the witness input
order: public values first, then private values.
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional, Protocol, Tuple

from primitives.babyjub import Point
from primitives.field import FF


class Visibility(Enum):
    PUBLIC = "public"
    SECRET = "secret"


def public(length: Optional[int] = None) -> Any:
    return field(metadata={"visibility": Visibility.PUBLIC, "length": length})


def secret(length: Optional[int] = None) -> Any:
    return field(metadata={"visibility": Visibility.SECRET, "length": length})


def unset() -> Any:
    return field(metadata={"visibility": None, "length": None})


# --- Data Structures ---

@dataclass
class ElGamalCiphertext:
    """(C1, C2) = (r * G2, r * pk + m)."""
    c1: Point = unset()
    c2: Point = unset()


@dataclass
class PoseidonCiphertext:
    """Hybrid summary (PCT) readable by its recipient.

    Attributes:
        ciphertext: Three encrypted slots followed by the authentication tag
        auth_key: random * G, lets the recipient rebuild the shared key
        nonce: Below 2^128
        random: Encryption randomness, shared key = random * recipient pk
    """
    ciphertext: List[FF] = public(length=4)
    auth_key: Point = public()
    nonce: FF = public()
    random: FF = secret()


@dataclass
class Sender:
    private_key: FF = secret()
    public_key: Point = public()
    balance: FF = secret()
    balance_ct: ElGamalCiphertext = public()
    value_ct: ElGamalCiphertext = public()


@dataclass
class WithdrawSender:
    private_key: FF = secret()
    public_key: Point = public()
    balance: FF = secret()
    balance_ct: ElGamalCiphertext = public()


@dataclass
class RegistrationSender:
    private_key: FF = secret()
    public_key: Point = secret()
    address: FF = public()
    chain_id: FF = public()
    registration_hash: FF = public()


@dataclass
class Receiver:
    public_key: Point = public()
    value_ct: ElGamalCiphertext = public()
    value_random: FF = secret()
    pct: PoseidonCiphertext = unset()


@dataclass
class Auditor:
    public_key: Point = public()
    pct: PoseidonCiphertext = unset()


@dataclass
class MintNullifier:
    chain_id: FF = public()
    nullifier_hash: FF = public()


# --- Capabilities ---

class KeyHolder(Protocol):
    """Anything that carries a private key and its claimed public key."""
    private_key: FF
    public_key: Point


class BalanceHolder(KeyHolder, Protocol):
    """A key holder that also claims an encrypted balance."""
    balance: FF
    balance_ct: ElGamalCiphertext


# --- Schema Walking ---

Path = Tuple[Any, ...]  # attribute names and array indices


def _walk(cls: type, inherited: Optional[Visibility], prefix: Path) -> Iterator[Tuple[Path, Visibility]]:
    for f in dataclasses.fields(cls):
        declared = f.metadata.get("visibility")
        visibility = declared if declared is not None else inherited
        path = prefix + (f.name,)
        length = f.metadata.get("length")

        if dataclasses.is_dataclass(f.type):
            yield from _walk(f.type, visibility, path)
        elif length is not None:
            for i in range(length):
                yield path + (i,), visibility or Visibility.SECRET
        else:
            yield path, visibility or Visibility.SECRET


def schema(cls: type) -> List[Tuple[Path, Visibility]]:
    """All leaf slots of a dataclass in declaration order with visibility."""
    return list(_walk(cls, None, ()))


def layout(cls: type) -> Tuple[List[Path], List[Path]]:
    """(public slots, private slots), each in declaration order."""
    slots = schema(cls)
    public_slots = [p for p, v in slots if v is Visibility.PUBLIC]
    private_slots = [p for p, v in slots if v is Visibility.SECRET]
    return public_slots, private_slots


def slot_name(path: Path) -> str:
    """Dotted display name, e.g. 'receiver.pct.ciphertext[2]'."""
    out = ""
    for part in path:
        out += f"[{part}]" if isinstance(part, int) else (f".{part}" if out else part)
    return out


def build(cls: type, public_values: Iterator[FF], private_values: Iterator[FF],
          inherited: Optional[Visibility] = None) -> Any:
    """Instantiate cls, drawing each leaf from the iterator of its visibility."""
    kwargs = {}
    for f in dataclasses.fields(cls):
        declared = f.metadata.get("visibility")
        visibility = declared if declared is not None else inherited
        source = public_values if visibility is Visibility.PUBLIC else private_values
        length = f.metadata.get("length")

        if dataclasses.is_dataclass(f.type):
            kwargs[f.name] = build(f.type, public_values, private_values, visibility)
        elif length is not None:
            kwargs[f.name] = [next(source) for _ in range(length)]
        else:
            kwargs[f.name] = next(source)
    return cls(**kwargs)


def resolve(obj: Any, path: Path) -> FF:
    """Fetch the leaf value at path."""
    for part in path:
        obj = obj[part] if isinstance(part, int) else getattr(obj, part)
    return obj


def flatten(obj: Any) -> Tuple[List[FF], List[FF]]:
    """(public values, private values) of a populated instance."""
    public_slots, private_slots = layout(type(obj))
    return ([resolve(obj, p) for p in public_slots],
            [resolve(obj, p) for p in private_slots])
