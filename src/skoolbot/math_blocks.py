"""Emit Skoolbot code for math blocks.

Each emitter takes a block and the running ``Generator`` and returns an
``Expression`` (text plus precedence) or, for ``math_change``, a
``Statement``. Operands are fetched through ``Generator.value_to_code``,
which parenthesizes a child when it binds looser than the order asked for.
Anything that is not a one-liner goes through ``Generator.provide_function``
so each helper is defined once per pass.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, TypeVar

from skoolbot.blocks import Block, MathBlock
from skoolbot.code import Code, Expression, Order, Statement, tighter
from skoolbot.errors import UnrecognizedTag
from skoolbot.helper_registry import FUNCTION_NAME_PLACEHOLDER as _NAME

if TYPE_CHECKING:
    from skoolbot.generator import Generator

_T = TypeVar("_T")


def _lookup(table: Mapping[str, _T], block: Block, field_name: str) -> _T:
    """Fetch the table entry for a field value, or fail loudly."""
    value = block.field_value(field_name)
    if value is None or value not in table:
        raise UnrecognizedTag(field_name, value, block_id=block.id, block_type=block.type)
    return table[value]


def _format_number(value: float) -> str:
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


# ── Literals and arithmetic ──────────────────────────────────────


# Decimal literals only: no "1_000", "nan" or "inf" spellings.
_NUMBER_RE = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def math_number(block: Block, gen: Generator) -> Expression:
    text = block.field_value("NUM")
    if text is None or not _NUMBER_RE.fullmatch(text.strip()):
        raise UnrecognizedTag("NUM", text, block_id=block.id, block_type=block.type)
    value = float(text)
    if math.isinf(value):
        if value < 0:
            return Expression("-math.huge", Order.UNARY)
        return Expression("math.huge", Order.HIGH)
    # A negative literal must be wrapped when negated again: -(-5).
    order = Order.UNARY if value < 0 else Order.ATOMIC
    return Expression(_format_number(value), order)


ARITHMETIC_OPERATORS: dict[str, tuple[str, Order]] = {
    "ADD": (" + ", Order.ADDITIVE),
    "MINUS": (" - ", Order.ADDITIVE),
    "MULTIPLY": (" * ", Order.MULTIPLICATIVE),
    "DIVIDE": (" / ", Order.MULTIPLICATIVE),
    "POWER": (" ^ ", Order.EXPONENTIATION),
}

# Right operand must keep its parentheses: a - (b - c), a / (b * c).
_NON_ASSOCIATIVE = frozenset({"MINUS", "DIVIDE"})


def _is_multiply(block: Block | None) -> bool:
    return (
        block is not None
        and block.type == MathBlock.ARITHMETIC.value
        and block.field_value("OP") == "MULTIPLY"
    )


def math_arithmetic(block: Block, gen: Generator) -> Expression:
    operator, order = _lookup(ARITHMETIC_OPERATORS, block, "OP")
    op = block.field_value("OP")
    right_order = order
    if op in _NON_ASSOCIATIVE:
        right_order = tighter(order)
    elif op == "MULTIPLY" and not _is_multiply(block.input_block("B")):
        # a * b * c stays flat, but a * (b % c) and a * (b / c) do not.
        right_order = tighter(order)
    argument0 = gen.value_to_code(block, "A", order) or "0"
    argument1 = gen.value_to_code(block, "B", right_order) or "0"
    return Expression(argument0 + operator + argument1, order)


def math_modulo(block: Block, gen: Generator) -> Expression:
    argument0 = gen.value_to_code(block, "DIVIDEND", Order.MULTIPLICATIVE) or "0"
    argument1 = gen.value_to_code(block, "DIVISOR", tighter(Order.MULTIPLICATIVE)) or "0"
    return Expression(f"{argument0} % {argument1}", Order.MULTIPLICATIVE)


# ── Single-operand functions ─────────────────────────────────────

# ROUND rounds half up; the block does not specify a direction.
SINGLE_FUNCTIONS: dict[str, str] = {
    "ABS": "math.abs({})",
    "ROOT": "math.sqrt({})",
    "LN": "math.log({})",
    "LOG10": "math.log({}, 10)",
    "EXP": "math.exp({})",
    "ROUND": "math.floor({} + .5)",
    "ROUNDUP": "math.ceil({})",
    "ROUNDDOWN": "math.floor({})",
    "SIN": "math.sin(math.rad({}))",
    "COS": "math.cos(math.rad({}))",
    "TAN": "math.tan(math.rad({}))",
    "ASIN": "math.deg(math.asin({}))",
    "ACOS": "math.deg(math.acos({}))",
    "ATAN": "math.deg(math.atan({}))",
}


def math_single(block: Block, gen: Generator) -> Expression:
    """Negation, powers of ten, roots, logs, rounding and trigonometry."""
    operator = block.field_value("OP")
    if operator == "NEG":
        arg = gen.value_to_code(block, "NUM", Order.UNARY) or "0"
        return Expression("-" + arg, Order.UNARY)
    if operator == "POW10":
        arg = gen.value_to_code(block, "NUM", Order.EXPONENTIATION) or "0"
        return Expression("10 ^ " + arg, Order.EXPONENTIATION)
    template = _lookup(SINGLE_FUNCTIONS, block, "OP")
    arg_order = Order.ADDITIVE if operator == "ROUND" else Order.NONE
    arg = gen.value_to_code(block, "NUM", arg_order) or "0"
    return Expression(template.format(arg), Order.HIGH)


# ── Constants ────────────────────────────────────────────────────

CONSTANTS: dict[str, Expression] = {
    "PI": Expression("math.pi", Order.HIGH),
    "E": Expression("math.exp(1)", Order.HIGH),
    "GOLDEN_RATIO": Expression("(1 + math.sqrt(5)) / 2", Order.MULTIPLICATIVE),
    "SQRT2": Expression("math.sqrt(2)", Order.HIGH),
    "SQRT1_2": Expression("math.sqrt(1 / 2)", Order.HIGH),
    "INFINITY": Expression("math.huge", Order.HIGH),
}


def math_constant(block: Block, gen: Generator) -> Expression:
    return _lookup(CONSTANTS, block, "CONSTANT")


# ── Number properties ────────────────────────────────────────────

PROPERTY_TESTS: dict[str, str] = {
    "EVEN": "{} % 2 == 0",
    "ODD": "{} % 2 == 1",
    "WHOLE": "{} % 1 == 0",
    "POSITIVE": "{} > 0",
    "NEGATIVE": "{} < 0",
}


def _provide_is_prime(gen: Generator) -> str:
    return gen.provide_function("math_isPrime", [
        f"function {_NAME}(n)",
        "  -- https://en.wikipedia.org/wiki/Primality_test#Naive_methods",
        "  if n == 2 or n == 3 then",
        "    return true",
        "  end",
        "  -- False if n is NaN, negative, is 1, or not whole.",
        "  -- And false if n is divisible by 2 or 3.",
        "  if not(n > 1) or n % 1 ~= 0 or n % 2 == 0 or n % 3 == 0 then",
        "    return false",
        "  end",
        "  -- Check all the numbers of form 6k +/- 1, up to sqrt(n).",
        "  for x = 6, math.sqrt(n) + 1.5, 6 do",
        "    if n % (x - 1) == 0 or n % (x + 1) == 0 then",
        "      return false",
        "    end",
        "  end",
        "  return true",
        "end",
    ])


def math_number_property(block: Block, gen: Generator) -> Expression:
    """Even, odd, prime, whole, positive, negative, or divisible by."""
    prop = block.field_value("PROPERTY")
    if prop == "PRIME":
        number = gen.value_to_code(block, "NUMBER_TO_CHECK", Order.MULTIPLICATIVE) or "0"
        return Expression(f"{_provide_is_prime(gen)}({number})", Order.HIGH)
    if prop == "DIVISIBLE_BY":
        divisor = gen.value_to_code(block, "DIVISOR", tighter(Order.MULTIPLICATIVE))
        # Only a literal 0 (or nothing) is caught here; a divisor that
        # evaluates to 0 at run time still fails there.
        if not divisor or divisor == "0":
            return Expression("nil", Order.ATOMIC)
        number = gen.value_to_code(block, "NUMBER_TO_CHECK", Order.MULTIPLICATIVE) or "0"
        return Expression(f"{number} % {divisor} == 0", Order.RELATIONAL)
    template = _lookup(PROPERTY_TESTS, block, "PROPERTY")
    number = gen.value_to_code(block, "NUMBER_TO_CHECK", Order.MULTIPLICATIVE) or "0"
    return Expression(template.format(number), Order.RELATIONAL)


# ── List statistics ──────────────────────────────────────────────


def _provide_sum(gen: Generator) -> str:
    return gen.provide_function("math_sum", [
        f"function {_NAME}(t)",
        "  local result = 0",
        "  for _, v in ipairs(t) do",
        "    result = result + v",
        "  end",
        "  return result",
        "end",
    ])


def _provide_min(gen: Generator) -> str:
    return gen.provide_function("math_min", [
        f"function {_NAME}(t)",
        "  if #t == 0 then",
        "    return 0",
        "  end",
        "  local result = math.huge",
        "  for _, v in ipairs(t) do",
        "    if v < result then",
        "      result = v",
        "    end",
        "  end",
        "  return result",
        "end",
    ])


def _provide_max(gen: Generator) -> str:
    return gen.provide_function("math_max", [
        f"function {_NAME}(t)",
        "  if #t == 0 then",
        "    return 0",
        "  end",
        "  local result = -math.huge",
        "  for _, v in ipairs(t) do",
        "    if v > result then",
        "      result = v",
        "    end",
        "  end",
        "  return result",
        "end",
    ])


def _provide_average(gen: Generator) -> str:
    sum_name = _provide_sum(gen)
    return gen.provide_function("math_average", [
        f"function {_NAME}(t)",
        "  if #t == 0 then",
        "    return 0",
        "  end",
        f"  return {sum_name}(t) / #t",
        "end",
    ])


def _provide_median(gen: Generator) -> str:
    # Non-numbers are skipped.
    return gen.provide_function("math_median", [
        f"function {_NAME}(t)",
        "  -- Source: http://lua-users.org/wiki/SimpleStats",
        "  local temp = {}",
        "  for _, v in ipairs(t) do",
        '    if type(v) == "number" then',
        "      table.insert(temp, v)",
        "    end",
        "  end",
        "  if #temp == 0 then",
        "    return 0",
        "  end",
        "  table.sort(temp)",
        "  if #temp % 2 == 0 then",
        "    return (temp[#temp / 2] + temp[(#temp / 2) + 1]) / 2",
        "  else",
        "    return temp[math.ceil(#temp / 2)]",
        "  end",
        "end",
    ])


def _provide_modes(gen: Generator) -> str:
    # A list can have several modes, so the result is always a table.
    return gen.provide_function("math_modes", [
        f"function {_NAME}(t)",
        "  -- Source: http://lua-users.org/wiki/SimpleStats",
        "  local counts = {}",
        "  for _, v in ipairs(t) do",
        '    if type(v) == "number" then',
        "      if counts[v] == nil then",
        "        counts[v] = 1",
        "      else",
        "        counts[v] = counts[v] + 1",
        "      end",
        "    end",
        "  end",
        "  local biggestCount = 0",
        "  for _, v in pairs(counts) do",
        "    if v > biggestCount then",
        "      biggestCount = v",
        "    end",
        "  end",
        "  local temp = {}",
        "  for k, v in pairs(counts) do",
        "    if v == biggestCount then",
        "      table.insert(temp, k)",
        "    end",
        "  end",
        "  return temp",
        "end",
    ])


def _provide_standard_deviation(gen: Generator) -> str:
    # Sample deviation: one element or fewer gives NaN.
    sum_name = _provide_sum(gen)
    return gen.provide_function("math_standard_deviation", [
        f"function {_NAME}(t)",
        "  local m",
        "  local vm",
        "  local total = 0",
        "  local count = 0",
        "  local result",
        f"  m = #t == 0 and 0 or {sum_name}(t) / #t",
        "  for _, v in ipairs(t) do",
        '    if type(v) == "number" then',
        "      vm = v - m",
        "      total = total + (vm * vm)",
        "      count = count + 1",
        "    end",
        "  end",
        "  result = math.sqrt(total / (count - 1))",
        "  return result",
        "end",
    ])


def _provide_random_item(gen: Generator) -> str:
    return gen.provide_function("math_random_list", [
        f"function {_NAME}(t)",
        "  if #t == 0 then",
        "    return nil",
        "  end",
        "  return t[math.random(#t)]",
        "end",
    ])


LIST_FUNCTIONS: dict[str, Callable[[Generator], str]] = {
    "SUM": _provide_sum,
    "MIN": _provide_min,
    "MAX": _provide_max,
    "AVERAGE": _provide_average,
    "MEDIAN": _provide_median,
    "MODE": _provide_modes,
    "STD_DEV": _provide_standard_deviation,
    "RANDOM": _provide_random_item,
}


def math_on_list(block: Block, gen: Generator) -> Expression:
    provide = _lookup(LIST_FUNCTIONS, block, "OP")
    items = gen.value_to_code(block, "LIST", Order.NONE) or "{}"
    return Expression(f"{provide(gen)}({items})", Order.HIGH)


# ── Ranges and randomness ────────────────────────────────────────


def math_constrain(block: Block, gen: Generator) -> Expression:
    value = gen.value_to_code(block, "VALUE", Order.NONE) or "0"
    low = gen.value_to_code(block, "LOW", Order.NONE) or "-math.huge"
    high = gen.value_to_code(block, "HIGH", Order.NONE) or "math.huge"
    return Expression(f"math.min(math.max({value}, {low}), {high})", Order.HIGH)


def math_random_int(block: Block, gen: Generator) -> Expression:
    low = gen.value_to_code(block, "FROM", Order.NONE) or "0"
    high = gen.value_to_code(block, "TO", Order.NONE) or "0"
    return Expression(f"math.random({low}, {high})", Order.HIGH)


def math_random_float(block: Block, gen: Generator) -> Expression:
    return Expression("math.random()", Order.HIGH)


def math_atan2(block: Block, gen: Generator) -> Expression:
    """Angle of the point (X, Y) in degrees, -180 to 180."""
    x = gen.value_to_code(block, "X", Order.NONE) or "0"
    y = gen.value_to_code(block, "Y", Order.NONE) or "0"
    return Expression(f"math.deg(math.atan2({y}, {x}))", Order.HIGH)


# ── Statements ───────────────────────────────────────────────────


def math_change(block: Block, gen: Generator) -> Statement:
    """Add to a variable in place."""
    delta = gen.value_to_code(block, "DELTA", Order.ADDITIVE) or "0"
    var = block.field_value("VAR")
    if not var:
        raise UnrecognizedTag("VAR", var, block_id=block.id, block_type=block.type)
    name = gen.variable_name(var)
    return Statement((f"{name} = {name} + {delta}",))


MATH_EMITTERS: dict[MathBlock, Callable[[Block, Generator], Code]] = {
    MathBlock.NUMBER: math_number,
    MathBlock.ARITHMETIC: math_arithmetic,
    MathBlock.SINGLE: math_single,
    MathBlock.ROUND: math_single,
    MathBlock.TRIG: math_single,
    MathBlock.CONSTANT: math_constant,
    MathBlock.NUMBER_PROPERTY: math_number_property,
    MathBlock.ON_LIST: math_on_list,
    MathBlock.MODULO: math_modulo,
    MathBlock.CONSTRAIN: math_constrain,
    MathBlock.RANDOM_INT: math_random_int,
    MathBlock.RANDOM_FLOAT: math_random_float,
    MathBlock.ATAN2: math_atan2,
    MathBlock.CHANGE: math_change,
}
