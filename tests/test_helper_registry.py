"""Tests for the per-pass helper registry."""

from __future__ import annotations

from skoolbot.helper_registry import FUNCTION_NAME_PLACEHOLDER, HelperRegistry
from skoolbot.names import NameDB, NameKind

_P = FUNCTION_NAME_PLACEHOLDER


def _template(tag: str) -> list[str]:
    return [f"function {_P}(t)", f"  return {tag}", "end"]


class TestProvide:
    def test_same_name_same_identifier(self):
        reg = HelperRegistry()
        first = reg.provide("math_sum", _template("1"))
        second = reg.provide("math_sum", _template("1"))
        assert first == second == "math_sum"
        assert len(reg) == 1

    def test_second_request_keeps_first_body(self):
        reg = HelperRegistry()
        reg.provide("math_sum", _template("first"))
        reg.provide("math_sum", _template("second"))
        (body,) = reg.definitions()
        assert "first" in body
        assert "second" not in body

    def test_placeholder_replaced_everywhere(self):
        reg = HelperRegistry()
        name = reg.provide("fact", [f"function {_P}(n)", f"  return n * {_P}(n - 1)", "end"])
        (body,) = reg.definitions()
        assert _P not in body
        assert body == f"function {name}(n)\n  return n * {name}(n - 1)\nend"

    def test_distinct_names(self):
        reg = HelperRegistry()
        assert reg.provide("math_min", _template("a")) == "math_min"
        assert reg.provide("math_max", _template("b")) == "math_max"
        assert len(reg) == 2

    def test_avoids_reserved_words(self):
        reg = HelperRegistry()
        assert reg.provide("math", _template("1")) == "math2"

    def test_avoids_names_already_in_use(self):
        names = NameDB()
        names.get_name("math_sum", NameKind.VARIABLE)
        reg = HelperRegistry(names)
        assert reg.provide("math_sum", _template("1")) == "math_sum2"

    def test_nested_request_registered_first(self):
        reg = HelperRegistry()

        def provide_average() -> str:
            inner = reg.provide("math_sum", _template("sum"))
            return reg.provide("math_average", _template(f"{inner}(t) / #t"))

        provide_average()
        provide_average()
        sum_body, average_body = reg.definitions()
        assert sum_body.startswith("function math_sum(t)")
        assert "return math_sum(t) / #t" in average_body
        assert len(reg) == 2

    def test_identifier_lookup(self):
        reg = HelperRegistry()
        assert reg.identifier("math_sum") is None
        reg.provide("math_sum", _template("1"))
        assert reg.identifier("math_sum") == "math_sum"
        assert "math_sum" in reg
        assert "math_min" not in reg


class TestReset:
    def test_reset_forgets_helpers(self):
        reg = HelperRegistry()
        reg.provide("math_sum", _template("1"))
        reg.reset(NameDB())
        assert len(reg) == 0
        assert list(reg.definitions()) == []
        assert reg.provide("math_sum", _template("1")) == "math_sum"

    def test_independent_registries(self):
        a = HelperRegistry()
        b = HelperRegistry()
        a.provide("math_sum", _template("1"))
        assert "math_sum" not in b
        assert b.provide("math_sum", _template("1")) == "math_sum"
