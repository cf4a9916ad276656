"""Operator precedence and the values every block emitter produces."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class Order(IntEnum):
    """Skoolbot operator precedence. Lower values bind tighter."""

    ATOMIC = 0  # literals, identifiers
    HIGH = 1  # function calls, tables[]
    EXPONENTIATION = 2  # ^
    UNARY = 3  # not # - ~
    MULTIPLICATIVE = 4  # * / %
    ADDITIVE = 5  # + -
    CONCATENATION = 6  # ..
    RELATIONAL = 7  # < > <= >= ~= ==
    AND = 8  # and
    OR = 9  # or
    NONE = 99


# Equal-precedence nesting that does not need parentheses.
_FLAT_ORDERS = frozenset({
    Order.ATOMIC,
    Order.HIGH,
    Order.MULTIPLICATIVE,
    Order.ADDITIVE,
    Order.NONE,
})


def tighter(order: Order) -> Order:
    """Return the next level that binds tighter than *order*."""
    if order <= Order.ATOMIC:
        return Order.ATOMIC
    if order == Order.NONE:
        return Order.OR
    return Order(order - 1)


def needs_parens(outer: Order, inner: Order) -> bool:
    """Whether an *inner* expression must be wrapped to sit in an *outer* slot."""
    if inner > outer:
        return True
    if inner == outer:
        return outer not in _FLAT_ORDERS
    return False


@dataclass(frozen=True)
class Expression:
    """An expression and the precedence of its outermost operator."""

    text: str
    order: Order

    def wrapped(self, outer: Order) -> str:
        if needs_parens(outer, self.order):
            return f"({self.text})"
        return self.text


@dataclass(frozen=True)
class Statement:
    """One or more lines of code, each terminated by a newline."""

    lines: tuple[str, ...]

    @property
    def text(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)


Code = Union[Expression, Statement]

EMPTY_STATEMENT = Statement(())
