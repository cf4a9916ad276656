"""Tests for the generation pass driver."""

from __future__ import annotations

import pytest

from skoolbot.blocks import Block, Workspace
from skoolbot.code import Expression, Order
from skoolbot.config import GeneratorConfig, SkoolbotConfig
from skoolbot.errors import SlotError, UnrecognizedTag
from skoolbot.generator import Generator
from tests.helpers import arith, change, items, make_generator, num, on_list, single, var


def _run(*blocks: Block, variables: tuple[str, ...] = (), gen: Generator | None = None) -> str:
    gen = gen or make_generator()
    return gen.workspace_to_code(Workspace(blocks=blocks, variables=variables))


class TestTopLevel:
    def test_naked_expression(self):
        assert _run(arith("ADD", num(3), num(4))) == "local _ = 3 + 4\n"

    def test_statement(self):
        assert _run(change("x", num(1))) == "x = x + 1\n"

    def test_statement_chain(self):
        block = Block(
            "math_change",
            fields={"VAR": "x"},
            inputs={"DELTA": num(1)},
            next=change("y", num(2)),
        )
        assert _run(block) == "x = x + 1\ny = y + 2\n"

    def test_stacks_separated_by_blank_line(self):
        assert _run(change("x", num(1)), change("y", num(2))) == "x = x + 1\n\ny = y + 2\n"

    def test_empty_workspace(self):
        assert _run() == ""

    def test_custom_naked_prefix(self):
        config = SkoolbotConfig(generator=GeneratorConfig(naked_value_prefix="_ = "))
        gen = Generator(config)
        assert gen.workspace_to_code(Workspace(blocks=(num(1),))) == "_ = 1\n"


class TestHelpers:
    def test_helper_emitted_once_before_code(self):
        code = _run(on_list("MEDIAN", items(1, 2, 3)), on_list("MEDIAN", items(4, 5, 6)))
        assert code.startswith("function math_median(t)\n")
        assert code.count("function math_median(t)") == 1
        assert code.endswith(
            "end\n\n\nlocal _ = math_median({1, 2, 3})\n\nlocal _ = math_median({4, 5, 6})\n"
        )

    def test_helpers_in_request_order(self):
        code = _run(on_list("AVERAGE", items(1)), on_list("MAX", items(2)))
        assert code.index("function math_sum(t)") < code.index("function math_average(t)")
        assert code.index("function math_average(t)") < code.index("function math_max(t)")

    def test_helper_avoids_user_variable(self):
        code = _run(on_list("SUM", items(1)), variables=("math_sum",))
        assert "function math_sum2(t)" in code
        assert "local _ = math_sum2({1})" in code

    def test_helper_avoids_variable_used_by_block(self):
        code = _run(on_list("MIN", items(1)), change("math_min", num(1)))
        assert "function math_min2(t)" in code
        assert "math_min = math_min + 1" in code

    def test_passes_are_independent(self):
        gen = make_generator()
        first = _run(on_list("SUM", items(1)), gen=gen)
        second = _run(on_list("SUM", items(1)), gen=gen)
        assert first == second
        assert second.count("function math_sum(t)") == 1


class TestBlocks:
    def test_disabled_block_skipped(self):
        block = Block(
            "math_change",
            fields={"VAR": "x"},
            inputs={"DELTA": num(1)},
            enabled=False,
            next=change("y", num(2)),
        )
        assert _run(block) == "y = y + 2\n"

    def test_disabled_child_counts_as_empty(self):
        disabled = Block("math_number", fields={"NUM": "9"}, enabled=False)
        assert _run(arith("ADD", disabled, num(4))) == "local _ = 0 + 4\n"

    def test_comment_lines(self):
        block = Block(
            "math_change",
            fields={"VAR": "x"},
            inputs={"DELTA": num(1)},
            comment="bump\nthe score",
        )
        assert _run(block) == "-- bump\n-- the score\nx = x + 1\n"

    def test_comments_can_be_disabled(self):
        gen = Generator(SkoolbotConfig(generator=GeneratorConfig(comments=False)))
        block = Block("math_random_float", comment="dice")
        assert gen.workspace_to_code(Workspace(blocks=(block,))) == "local _ = math.random()\n"

    def test_expression_to_code(self):
        gen = make_generator()
        assert gen.expression_to_code(single("NEG", var("a"))) == Expression("-a", Order.UNARY)

    def test_register_replaces_emitter(self):
        gen = make_generator()
        gen.register("math_random_float", lambda block, g: Expression("rnd()", Order.HIGH))
        assert gen.handles("math_random_float")
        assert _run(Block("math_random_float"), gen=gen) == "local _ = rnd()\n"


class TestErrors:
    def test_unknown_block_type(self):
        with pytest.raises(UnrecognizedTag) as exc:
            _run(Block("math_cube", id="b7"))
        assert exc.value.field == "type"
        assert exc.value.value == "math_cube"
        assert exc.value.block_id == "b7"

    def test_unknown_tag_deep_in_tree_aborts_pass(self):
        bad = Block("math_constant", id="c1", fields={"CONSTANT": "TAU"})
        with pytest.raises(UnrecognizedTag) as exc:
            _run(on_list("SUM", items(1)), arith("ADD", num(1), bad))
        assert exc.value.block_id == "c1"

    def test_statement_in_value_slot(self):
        with pytest.raises(SlotError) as exc:
            _run(arith("ADD", change("x", num(1)), num(2)))
        assert exc.value.slot == "A"
        assert exc.value.child_type == "math_change"

    def test_expression_to_code_rejects_statement(self):
        with pytest.raises(SlotError):
            make_generator().expression_to_code(change("x"))
