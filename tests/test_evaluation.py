"""Tests for evaluating lowered terms."""

import pytest

from bricks.rendering import render_expression
from bricks.runtime import Env, Thunk, eval_term, eval_text, force_deep, value_to_expression
from bricks.runtime.types import (
    BuiltinVal,
    Closure,
    DictKeyMismatch,
    DictLookupFailure,
    DictVal,
    InfiniteRecursion,
    NotAFunction,
    StrVal,
    TypeMismatch,
    UnboundVariable,
)
from bricks.term import (
    FN_COMP,
    FN_DICT_DISALLOW_EXTRA_KEYS,
    FN_DICT_LOOKUP,
    FN_DICT_MERGE_PREFER_LEFT,
    FN_ID,
    FN_STRING_APPEND,
    TermBuiltin,
    TermData,
    TermDict,
    TermVar,
    apply_term,
    key_set_term,
    lambda_term,
    term_string,
)


def run(text: str):
    return force_deep(eval_text(text))


class TestBasics:
    def test_string(self) -> None:
        assert run('"hi"') == "hi"

    def test_interpolation(self) -> None:
        assert run('let name = "world"; in "hello ${name}!"') == "hello world!"

    def test_list_and_dict(self) -> None:
        assert run('{ b = [ "x" "y" ]; a = { c = "z"; }; }') == {"a": {"c": "z"}, "b": ["x", "y"]}

    def test_lookup(self) -> None:
        assert run('{ a = { b = "deep"; }; }.a.b') == "deep"
        assert run('{ "a b" = "q"; }."a b"') == "q"

    def test_application(self) -> None:
        assert run('(a: b: a) "first" "second"') == "first"

    def test_lexical_scope(self) -> None:
        assert run('let x = "outer"; f = y: x; in let x = "inner"; in f "arg"') == "outer"


class TestLetAndRec:
    def test_mutual_recursion(self) -> None:
        assert run('let a = "${b}!"; b = "b"; in a') == "b!"

    def test_inherit_from(self) -> None:
        assert run('let d = { a = "1"; }; inherit (d) a; in a') == "1"

    def test_inherit_into_dict(self) -> None:
        assert run('let a = "1"; in { inherit a; }') == {"a": "1"}

    def test_rec_dict(self) -> None:
        assert run('rec { a = "x"; b = "${a}y"; }') == {"a": "x", "b": "xy"}

    def test_plain_dict_is_not_recursive(self) -> None:
        with pytest.raises(UnboundVariable):
            run('{ a = "x"; b = a; }.b')

    def test_infinite_recursion(self) -> None:
        with pytest.raises(InfiniteRecursion):
            run("let x = x; in x")


class TestLaziness:
    def test_unused_binding(self) -> None:
        assert run('let loop = loop; in "fine"') == "fine"

    def test_unused_dict_value(self) -> None:
        assert run('let loop = loop; in ({ a, ... }: a) { a = "ok"; b = loop; }') == "ok"

    def test_unused_argument(self) -> None:
        assert run('(x: "const") missing') == "const"


class TestDictPatterns:
    def test_default_fills_in(self) -> None:
        assert run('({ a, b ? "B" }: [ a b ]) { a = "A"; }') == ["A", "B"]

    def test_argument_beats_default(self) -> None:
        assert run('({ b ? "B" }: b) { b = "given"; }') == "given"

    def test_extra_key_fails(self) -> None:
        with pytest.raises(DictKeyMismatch):
            run('({ a, b ? "B" }: a) { a = "A"; c = "C"; }')

    def test_extra_key_fails_before_body(self) -> None:
        with pytest.raises(DictKeyMismatch):
            run('({ a }: missing) { a = "A"; c = "C"; }')

    def test_ellipsis_allows_extra_keys(self) -> None:
        assert run('({ a, ... }: a) { a = "A"; c = "C"; }') == "A"

    def test_missing_key_fails(self) -> None:
        with pytest.raises(DictKeyMismatch):
            run('({ a, b }: a) { a = "A"; }')

    def test_non_dict_argument(self) -> None:
        with pytest.raises(TypeMismatch):
            run('({ a }: a) "string"')

    def test_both(self) -> None:
        assert run('(args@{ a, ... }: [ a args.b ]) { a = "1"; b = "2"; }') == ["1", "2"]

    def test_defaults_see_enclosing_scope(self) -> None:
        assert run('let d = "D"; in ({ x ? d }: x) { }') == "D"


class TestErrors:
    def test_unbound(self) -> None:
        with pytest.raises(UnboundVariable):
            run("x")

    def test_missing_key(self) -> None:
        with pytest.raises(DictLookupFailure):
            run('{ a = "1"; }.b')

    def test_not_a_function(self) -> None:
        with pytest.raises(NotAFunction):
            run('"a" "b"')

    def test_append_non_string(self) -> None:
        with pytest.raises(TypeMismatch):
            run('"a${[ ]}"')

    def test_lookup_in_non_dict(self) -> None:
        with pytest.raises(TypeMismatch):
            run('[ ].a')


class TestBuiltins:
    def test_id(self) -> None:
        assert eval_term(apply_term(FN_ID, term_string("x"))) == StrVal("x")

    def test_comp(self) -> None:
        f = lambda_term("s", apply_term(FN_STRING_APPEND, TermVar("s"), term_string("!")))
        g = lambda_term("s", apply_term(FN_STRING_APPEND, term_string("<"), TermVar("s")))
        assert eval_term(apply_term(FN_COMP, f, g, term_string("x"))) == StrVal("<x!")

    def test_partial_application(self) -> None:
        value = eval_term(apply_term(FN_STRING_APPEND, term_string("a")))
        assert isinstance(value, BuiltinVal)
        assert value.name == "string'append"
        assert len(value.args) == 1

    def test_merge_prefers_left(self) -> None:
        term = apply_term(FN_DICT_MERGE_PREFER_LEFT,
                          TermDict({"a": term_string("left")}),
                          TermDict({"a": term_string("right"), "b": term_string("only right")}))
        assert force_deep(eval_term(term)) == {"a": "left", "b": "only right"}

    def test_disallow_extra_keys(self) -> None:
        d = TermDict({"a": term_string("1")})
        assert force_deep(eval_term(apply_term(FN_DICT_DISALLOW_EXTRA_KEYS, key_set_term(["a", "b"]), d))) == {"a": "1"}
        with pytest.raises(DictKeyMismatch):
            eval_term(apply_term(FN_DICT_DISALLOW_EXTRA_KEYS, key_set_term(["b"]), d))

    def test_lookup(self) -> None:
        d = TermDict({"a": term_string("1")})
        assert eval_term(apply_term(FN_DICT_LOOKUP, d, term_string("a"))) == StrVal("1")

    def test_unknown_builtin(self) -> None:
        with pytest.raises(UnboundVariable):
            eval_term(TermBuiltin("nope"))

    def test_unknown_data(self) -> None:
        with pytest.raises(TypeMismatch):
            eval_term(TermData("number", 1))


class TestEnvironment:
    def test_initial_bindings(self) -> None:
        env = Env.initial().bind_name("x", Thunk.ready(StrVal("bound")))
        assert eval_term(TermVar("x"), env) == StrVal("bound")

    def test_bind_does_not_mutate(self) -> None:
        env = Env.initial()
        env.bind_name("x", Thunk.ready(StrVal("bound")))
        assert not env.contains("x")

    def test_eval_text_with_env(self) -> None:
        env = Env.initial().bind_all({"name": Thunk.ready(StrVal("env"))})
        assert force_deep(eval_text('"from ${name}"', env)) == "from env"


class TestResults:
    def test_value_to_expression(self) -> None:
        value = eval_text('{ b = "2"; a = [ "1" ]; }')
        assert render_expression(value_to_expression(value)) == '{ a = [ "1" ]; b = "2"; }'

    def test_function_results(self) -> None:
        value = eval_text("x: x")
        assert isinstance(value, Closure)
        assert force_deep(value) is value
        with pytest.raises(TypeMismatch):
            value_to_expression(value)

    def test_force_deep_dict(self) -> None:
        value = eval_text('{ a = "1"; }')
        assert isinstance(value, DictVal)
        assert force_deep(value) == {"a": "1"}
