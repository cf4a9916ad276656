"""Shared block builders for the skoolbot test suite."""

from __future__ import annotations

from skoolbot.blocks import Block
from skoolbot.code import Code, Expression, Order
from skoolbot.generator import Generator


def lists_create_with(block: Block, gen: Generator) -> Expression:
    """Minimal list-literal emitter standing in for the lists generator."""
    elements = [
        gen.value_to_code(block, f"ADD{i}", Order.NONE) or "nil"
        for i in range(len(block.inputs))
    ]
    return Expression("{" + ", ".join(elements) + "}", Order.HIGH)


def variables_get(block: Block, gen: Generator) -> Expression:
    """Minimal variable-read emitter standing in for the variables generator."""
    return Expression(gen.variable_name(block.fields["VAR"]), Order.ATOMIC)


def make_generator() -> Generator:
    """A generator with the sibling emitters the math tests lean on."""
    gen = Generator()
    gen.register("lists_create_with", lists_create_with)
    gen.register("variables_get", variables_get)
    gen.init()
    return gen


def emit(block: Block, gen: Generator | None = None) -> Code:
    """Emit one block in a fresh (or the given) pass."""
    return (gen or make_generator()).block_to_code(block)


# ── Builders ─────────────────────────────────────────────────────


def num(value: float | str) -> Block:
    return Block("math_number", fields={"NUM": str(value)})


def var(name: str) -> Block:
    return Block("variables_get", fields={"VAR": name})


def items(*values: float | Block) -> Block:
    children = [v if isinstance(v, Block) else num(v) for v in values]
    return Block(
        "lists_create_with",
        inputs={f"ADD{i}": child for i, child in enumerate(children)},
    )


def arith(op: str, a: Block | None = None, b: Block | None = None) -> Block:
    return Block("math_arithmetic", fields={"OP": op}, inputs={"A": a, "B": b})


def single(op: str, x: Block | None = None, block_type: str = "math_single") -> Block:
    return Block(block_type, fields={"OP": op}, inputs={"NUM": x})


def on_list(op: str, lst: Block | None = None, block_id: str = "") -> Block:
    return Block("math_on_list", id=block_id, fields={"OP": op}, inputs={"LIST": lst})


def number_property(prop: str, x: Block | None, divisor: Block | None = None) -> Block:
    inputs = {"NUMBER_TO_CHECK": x}
    if prop == "DIVISIBLE_BY":
        inputs["DIVISOR"] = divisor
    return Block("math_number_property", fields={"PROPERTY": prop}, inputs=inputs)


def change(name: str, delta: Block | None = None) -> Block:
    return Block("math_change", fields={"VAR": name}, inputs={"DELTA": delta})
