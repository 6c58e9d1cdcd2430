from typing import Any, Optional

from ..syntax import ast
from ..term import (
    Term, TermVar, TermLambda, TermApply, TermData, TermList, TermDict, TermLetRec, TermBuiltin,
    PatternSimple, PatternDict, TYPE_STRING, show_term,
)
from ..lowering import expression_to_term
from ..parsing import parse_expression
from .types import (
    Value, StrVal, ListVal, DictVal, Closure, BuiltinVal, Env, Thunk,
    UnboundVariable, DictKeyMismatch, NotAFunction, TypeMismatch,
)
from ..prelude import primitives, eval_primitive

DEBUG_EVAL = False

def log(msg: str):
    if DEBUG_EVAL:
        print(f"[EVAL] {msg}")

def delay(term: Term, env: Env) -> Thunk:
    return Thunk(lambda: eval_term(term, env), show_term(term) if DEBUG_EVAL else "")

# ======================================
# Evaluation
# ======================================

def eval_term(term: Term, env: Optional[Env] = None) -> Value:
    """Evaluate a term to weak head normal form. List items, dict values and
    function arguments stay unevaluated until something forces them."""
    if env is None: env = Env.initial()
    if isinstance(term, TermVar):
        thunk = env.lookup(term.name)
        if thunk is None: raise UnboundVariable(f"unbound variable: {term.name}")
        return thunk.force()
    if isinstance(term, TermData):
        if term.type_name == TYPE_STRING: return StrVal(term.value)
        raise TypeMismatch(f"unknown data type: {term.type_name}")
    if isinstance(term, TermList): return ListVal([delay(t, env) for t in term.items])
    if isinstance(term, TermDict): return DictVal({k: delay(v, env) for k, v in term.entries})
    if isinstance(term, TermLambda): return Closure(term.pattern, term.body, env)
    if isinstance(term, TermBuiltin):
        if term.name not in primitives: raise UnboundVariable(f"unknown builtin: {term.name}")
        return BuiltinVal(term.name)
    if isinstance(term, TermLetRec):
        log(f"letrec {[k for k, _ in term.bindings]}")
        rec_env = env.bind_all({})
        for name, t in term.bindings:
            rec_env.values[name] = delay(t, rec_env)
        return eval_term(term.body, rec_env)
    if isinstance(term, TermApply):
        log(f"eval_apply: {show_term(term)}")
        return apply_value(eval_term(term.f, env), delay(term.arg, env))
    raise TypeError(f"not a term: {term!r}")

def apply_value(f: Value, arg: Thunk) -> Value:
    if isinstance(f, Closure):
        return eval_term(f.body, bind_pattern(f.pattern, arg, f.env))
    if isinstance(f, BuiltinVal):
        args = f.args + (arg,)
        arity = primitives[f.name].arity
        if len(args) < arity: return BuiltinVal(f.name, args)
        log(f"  builtin {f.name}")
        return eval_primitive(f.name, list(args), apply_value)
    raise NotAFunction(f"cannot apply {describe(f)} as a function")

def bind_pattern(pattern, arg: Thunk, env: Env) -> Env:
    if isinstance(pattern, PatternSimple): return env.bind_name(pattern.name, arg)
    if isinstance(pattern, PatternDict):
        d = arg.force()
        if not isinstance(d, DictVal): raise DictKeyMismatch(f"expected a dict argument, got {describe(d)}")
        missing = pattern.names - set(d.entries)
        if missing: raise DictKeyMismatch(f"missing keys: {', '.join(sorted(missing))}")
        extra = set(d.entries) - pattern.names
        if extra and not pattern.ellipsis: raise DictKeyMismatch(f"unexpected keys: {', '.join(sorted(extra))}")
        return env.bind_all({n: d.entries[n] for n in pattern.names})
    raise TypeError(f"not a pattern: {pattern!r}")

def describe(val: Value) -> str:
    if isinstance(val, StrVal): return "a string"
    if isinstance(val, ListVal): return "a list"
    if isinstance(val, DictVal): return "a dict"
    if isinstance(val, (Closure, BuiltinVal)): return "a function"
    return str(val)

# ======================================
# Results
# ======================================

def force_deep(val: Value) -> Any:
    """Evaluate everything inside a value and convert it to plain Python
    data: ``str``, ``list``, and ``dict``. Functions are returned as they are."""
    if isinstance(val, StrVal): return val.text
    if isinstance(val, ListVal): return [force_deep(t.force()) for t in val.items]
    if isinstance(val, DictVal): return {k: force_deep(t.force()) for k, t in sorted(val.entries.items())}
    return val

def value_to_expression(val: Value) -> ast.Expr:
    if isinstance(val, StrVal): return ast.string(val.text)
    if isinstance(val, ListVal): return ast.ListExpr([value_to_expression(t.force()) for t in val.items])
    if isinstance(val, DictVal):
        return ast.DictExpr(False, [ast.DictBindingEq(ast.string(k), value_to_expression(t.force()))
                                    for k, t in sorted(val.entries.items())])
    raise TypeMismatch(f"cannot convert {describe(val)} to an expression")

def eval_expression(expr: ast.Expr, env: Optional[Env] = None) -> Value:
    return eval_term(expression_to_term(expr), env)

def eval_text(text: str, env: Optional[Env] = None) -> Value:
    return eval_expression(parse_expression(text), env)
