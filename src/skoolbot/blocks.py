"""Block tree definitions consumed by the Skoolbot generator."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

# ── Block kinds ──────────────────────────────────────────────────


class MathBlock(Enum):
    """Block types handled by the math emitters."""

    NUMBER = "math_number"
    ARITHMETIC = "math_arithmetic"
    SINGLE = "math_single"
    ROUND = "math_round"
    TRIG = "math_trig"
    CONSTANT = "math_constant"
    NUMBER_PROPERTY = "math_number_property"
    ON_LIST = "math_on_list"
    MODULO = "math_modulo"
    CONSTRAIN = "math_constrain"
    RANDOM_INT = "math_random_int"
    RANDOM_FLOAT = "math_random_float"
    ATAN2 = "math_atan2"
    CHANGE = "math_change"


# ── Blocks ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Block:
    """One block: its type tag, field values, and connected children.

    ``inputs`` maps a slot name to the block plugged into it, or ``None``
    when the slot exists but is empty. ``next`` is the statement block
    attached below this one.
    """

    type: str
    id: str = ""
    fields: Mapping[str, str] = field(default_factory=dict)
    inputs: Mapping[str, Block | None] = field(default_factory=dict)
    next: Block | None = None
    comment: str | None = None
    enabled: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        object.__setattr__(self, "inputs", MappingProxyType(dict(self.inputs)))

    def field_value(self, name: str) -> str | None:
        return self.fields.get(name)

    def input_block(self, name: str) -> Block | None:
        return self.inputs.get(name)

    def walk(self) -> Iterator[Block]:
        """Yield this block, its inputs (depth-first), then the next chain."""
        yield self
        for child in self.inputs.values():
            if child is not None:
                yield from child.walk()
        if self.next is not None:
            yield from self.next.walk()


@dataclass(frozen=True)
class Workspace:
    """Top-level blocks plus the variables declared alongside them."""

    blocks: tuple[Block, ...] = ()
    variables: tuple[str, ...] = ()

    def all_blocks(self) -> Iterator[Block]:
        for block in self.blocks:
            yield from block.walk()

    def variable_names(self) -> list[str]:
        """Declared variables, then any VAR field not already declared."""
        names: list[str] = list(self.variables)
        seen = {n.lower() for n in names}
        for block in self.all_blocks():
            var = block.field_value("VAR")
            if var is not None and var.lower() not in seen:
                seen.add(var.lower())
                names.append(var)
        return names
