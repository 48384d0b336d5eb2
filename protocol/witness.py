"""Witness input parsing and serialization.

Input format (JSON):
    {
        "publicInputs":  ["<decimal>", ...],
        "privateInputs": ["<decimal>", ...]
    }

Values are base-10 decimal strings of canonical scalar-field elements. The
order must follow the circuit's public slots then private slots, see
protocol.data.layout.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from primitives.field import FF, ff_from_decimal, ff_to_decimal
from protocol.errors import MalformedInput

PUBLIC_KEY = "publicInputs"
PRIVATE_KEY = "privateInputs"


@dataclass
class Witness:
    """Full assignment: public values followed by private values."""
    public: List[FF] = field(default_factory=list)
    private: List[FF] = field(default_factory=list)

    def values(self) -> List[FF]:
        """Flat ordered assignment, public first."""
        return self.public + self.private

    def to_inputs(self) -> Dict[str, List[str]]:
        return {
            PUBLIC_KEY: [ff_to_decimal(v) for v in self.public],
            PRIVATE_KEY: [ff_to_decimal(v) for v in self.private],
        }


def _parse_list(data: Dict[str, Any], key: str) -> List[FF]:
    if key not in data:
        raise MalformedInput(f"missing '{key}'")
    raw = data[key]
    if not isinstance(raw, list):
        raise MalformedInput(f"'{key}' must be a list, got {type(raw).__name__}")
    values = []
    for i, item in enumerate(raw):
        try:
            values.append(ff_from_decimal(item))
        except ValueError as exc:
            raise MalformedInput(f"{key}[{i}]: {exc}") from exc
    return values


def parse_inputs(raw: Union[str, bytes, Dict[str, Any]]) -> Witness:
    """Parse a JSON witness into field elements.

    Raises:
        MalformedInput: Bad JSON, missing lists, or values outside the field.
    """
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedInput(f"invalid JSON input: {exc}") from exc
    else:
        data = raw

    if not isinstance(data, dict):
        raise MalformedInput("witness input must be a JSON object")

    return Witness(
        public=_parse_list(data, PUBLIC_KEY),
        private=_parse_list(data, PRIVATE_KEY),
    )
