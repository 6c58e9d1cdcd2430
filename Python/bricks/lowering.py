"""
Conversion from Expression (the AST produced by the parser) to Term (the
augmented lambda calculus used for evaluation).
"""
from typing import List, Tuple, Set

from .strings import StrDynamic, StrLiteral, StrAntiquote, StrPart, normalize, to_static
from .syntax.ast import (
    Expr, Var, Str, ListExpr, DictExpr, Dot, Lambda, Apply, Let,
    DictBindingEq, DictBindingInherit, LetBindingEq, LetBindingInherit, Inherit,
    ParamName, ParamDictPattern, ParamBoth, DictPattern,
)
from .term import (
    Term, TermVar, TermLambda, TermList, TermDict, TermLetRec, PatternDict,
    FN_ID, FN_COMP, FN_STRING_APPEND, FN_DICT_LOOKUP,
    FN_DICT_MERGE_PREFER_LEFT, FN_DICT_DISALLOW_EXTRA_KEYS,
    apply_term, lambda_term, term_string, key_set_term, show_term,
)

DEBUG_LOWER = False

def log(msg: str):
    if DEBUG_LOWER:
        print(f"[LOWER] {msg}")

# ======================================
# Errors
# ======================================

class LoweringError(Exception): pass

class UnsupportedLowering(LoweringError):
    """An expression shape with no Term counterpart."""
    def __init__(self, kind: str, detail: str = ""):
        super().__init__(f"cannot lower {kind}" + (f": {detail}" if detail else ""))
        self.kind = kind

class DuplicateBinding(LoweringError): pass

# Binds the argument of the defaults-merging stage of a dict pattern lambda.
# A quote is never part of a Bricks variable name, so no capture can happen.
MERGE_ARG = "'arg"

# ======================================
# Expressions
# ======================================

def expression_to_term(expr: Expr) -> Term:
    if isinstance(expr, Var): return var_to_term(expr)
    if isinstance(expr, Str): return str_to_term(expr.string)
    if isinstance(expr, ListExpr): return list_to_term(expr)
    if isinstance(expr, DictExpr): return dict_to_term(expr)
    if isinstance(expr, Dot): return dot_to_term(expr)
    if isinstance(expr, Lambda): return lambda_to_term(expr)
    if isinstance(expr, Apply): return apply_to_term(expr)
    if isinstance(expr, Let): return let_to_term(expr)
    raise TypeError(f"not an expression: {expr!r}")

lower = expression_to_term

def var_to_term(x: Var) -> Term:
    return TermVar(x.name.text)

def apply_to_term(x: Apply) -> Term:
    return apply_term(expression_to_term(x.f), expression_to_term(x.arg))

def str_to_term(s: StrDynamic) -> Term:
    """Strings with more than one part become nested ``string'append``s,
    associated to the right: ``a b c`` is ``append a (append b c)``."""
    terms = [str_part_to_term(p) for p in s.parts]
    if not terms: return term_string("")
    acc = terms[-1]
    for t in reversed(terms[:-1]):
        acc = apply_term(FN_STRING_APPEND, t, acc)
    return acc

def str_part_to_term(part: StrPart) -> Term:
    if isinstance(part, StrLiteral): return term_string(part.text)
    if isinstance(part, StrAntiquote): return expression_to_term(part.expression)
    raise TypeError(f"not a string part: {part!r}")

def list_to_term(x: ListExpr) -> Term:
    return TermList(tuple(expression_to_term(i) for i in x.items))

def dot_to_term(x: Dot) -> Term:
    return apply_term(FN_DICT_LOOKUP, expression_to_term(x.dict), expression_to_term(x.key))

# ======================================
# Dicts & Let
# ======================================

def dict_to_term(x: DictExpr) -> Term:
    """A plain dict becomes a Term dict. A ``rec`` dict becomes a ``letrec``
    of its bindings whose body is a dict referring to each of them."""
    seen: Set[str] = set()
    recursive: List[Tuple[str, Term]] = []
    from_scope: List[str] = []
    for b in x.bindings:
        if isinstance(b, DictBindingEq):
            key = dict_key_text(b.key)
            _claim(seen, key, "dict")
            recursive.append((key, expression_to_term(b.value)))
        elif isinstance(b, DictBindingInherit):
            for name, term in inherit_to_terms(b.inherit, seen, "dict"):
                if term is None: from_scope.append(name)
                else: recursive.append((name, term))
        else:
            raise TypeError(f"not a dict binding: {b!r}")
    if not x.rec:
        entries = recursive + [(name, TermVar(name)) for name in from_scope]
        return TermDict(tuple(entries))
    keys = [k for k, _ in recursive] + from_scope
    log(f"rec dict {sorted(keys)}")
    return TermLetRec(tuple(recursive), TermDict(tuple((k, TermVar(k)) for k in keys)))

def dict_key_text(key: Expr) -> str:
    if isinstance(key, Str):
        static = to_static(normalize(key.string))
        if static is not None: return static.text
        raise UnsupportedLowering("dict key", "string with antiquotation")
    raise UnsupportedLowering("dict key", f"{type(key).__name__} expression")

def let_to_term(x: Let) -> Term:
    """Names inherited without a source are left out of the ``letrec``; they
    already resolve to the enclosing scope."""
    seen: Set[str] = set()
    bindings: List[Tuple[str, Term]] = []
    for b in x.bindings:
        if isinstance(b, LetBindingEq):
            _claim(seen, b.name.text, "let")
            bindings.append((b.name.text, expression_to_term(b.value)))
        elif isinstance(b, LetBindingInherit):
            bindings.extend((n, t) for n, t in inherit_to_terms(b.inherit, seen, "let") if t is not None)
        else:
            raise TypeError(f"not a let binding: {b!r}")
    return TermLetRec(tuple(bindings), expression_to_term(x.body))

def inherit_to_terms(x: Inherit, seen: Set[str], where: str):
    """Pairs of name and term. The term is ``None`` for a name taken from the
    enclosing scope."""
    source = None if x.source is None else expression_to_term(x.source)
    out = []
    for n in x.names:
        _claim(seen, n.text, where)
        out.append((n.text, None if source is None else apply_term(FN_DICT_LOOKUP, source, term_string(n.text))))
    return out

def _claim(seen: Set[str], name: str, where: str):
    if name in seen: raise DuplicateBinding(f"{name!r} is bound more than once in {where}")
    seen.add(name)

# ======================================
# Lambdas
# ======================================

def lambda_to_term(x: Lambda) -> Term:
    body = expression_to_term(x.body)
    p = x.param
    if isinstance(p, ParamName): return lambda_term(p.name.text, body)
    if isinstance(p, ParamDictPattern): return dict_pattern_lambda(p.pattern, body)
    # The name binds the whole argument, and the pattern lambda nested inside
    # destructures the same argument.
    if isinstance(p, ParamBoth): return lambda_term(p.name.text, apply_term(dict_pattern_lambda(p.pattern, body), TermVar(p.name.text)))
    raise TypeError(f"not a parameter: {p!r}")

def dict_pattern_lambda(dp: DictPattern, body: Term) -> Term:
    """``f . g . h``, where

    1. ``h`` fails if the argument has keys outside the pattern (skipped with
       an ellipsis),
    2. ``g`` fills in default values for missing keys,
    3. ``f`` binds the pattern's names and evaluates the body.
    """
    names = dp.names
    h = FN_ID if dp.ellipsis else apply_term(FN_DICT_DISALLOW_EXTRA_KEYS, key_set_term(names))
    g = lambda_term(MERGE_ARG, apply_term(FN_DICT_MERGE_PREFER_LEFT, TermVar(MERGE_ARG), dict_pattern_defaults(dp)))
    f = TermLambda(PatternDict(frozenset(names), dp.ellipsis), body)
    term = apply_term(FN_COMP, apply_term(FN_COMP, f, g), h)
    log(f"dict pattern {names} -> {show_term(term)}")
    return term

def dict_pattern_defaults(dp: DictPattern) -> TermDict:
    return TermDict(tuple((i.name.text, expression_to_term(i.default)) for i in dp.items if i.default is not None))
