from enum import Enum
from typing import Callable, Iterable

from .unquoted import UnquotedString, is_bare_identifier_name
from .strings import StrStatic, StrDynamic, StrLiteral, StrAntiquote, to_static
from .syntax.ast import (
    Expr, Var, Str, ListExpr, DictExpr, Dot, Lambda, Apply, Let,
    DictBinding, DictBindingEq, DictBindingInherit,
    LetBinding, LetBindingEq, LetBindingInherit, Inherit,
    Param, ParamName, ParamDictPattern, ParamBoth, DictPattern, DictPatternItem,
)

# ======================================
# Render Context
# ======================================

class RenderContext(Enum):
    """The syntactic position an expression is rendered in. Some kinds of
    expression need parentheses only in some positions."""
    NORMAL = "normal"
    LIST_ITEM = "list-item"
    DOT_LEFT = "dot-left"
    APPLY_LEFT = "apply-left"
    APPLY_RIGHT = "apply-right"

# Which expression kinds are parenthesized in which context.
PARENTHESIZED = {
    Lambda: {RenderContext.LIST_ITEM, RenderContext.DOT_LEFT, RenderContext.APPLY_LEFT},
    Let: {RenderContext.LIST_ITEM, RenderContext.DOT_LEFT, RenderContext.APPLY_LEFT, RenderContext.APPLY_RIGHT},
    Apply: {RenderContext.LIST_ITEM, RenderContext.DOT_LEFT, RenderContext.APPLY_RIGHT},
}

def needs_parens(expr: Expr, context: RenderContext) -> bool:
    if context in PARENTHESIZED.get(type(expr), ()): return True
    # A lambda body extends as far right as possible, so `(f x: y) z` keeps its parens.
    return context == RenderContext.APPLY_LEFT and isinstance(expr, Apply) and _ends_with_lambda(expr)

def _ends_with_lambda(expr: Apply) -> bool:
    return isinstance(expr.arg, Lambda)

# ======================================
# Strings
# ======================================

def str_escape(text: str) -> str:
    """Insert escape sequences for a double-quoted string. The backslash goes
    first so the backslashes added by later rules stay as they are."""
    return (text.replace("\\", "\\\\")
                .replace('"', '\\"')
                .replace("${", "\\${")
                .replace("\n", "\\n")
                .replace("\r", "\\r")
                .replace("\t", "\\t"))

def render_unquoted(s: UnquotedString) -> str:
    return s.text

def render_static_quoted(s: StrStatic) -> str:
    return '"' + str_escape(s.text) + '"'

def render_static_unquoted_if_possible(s: StrStatic) -> str:
    return s.text if is_bare_identifier_name(s.text) else render_static_quoted(s)

def render_dynamic_quoted(s: StrDynamic) -> str:
    out = []
    for part in s.parts:
        if isinstance(part, StrLiteral): out.append(str_escape(part.text))
        elif isinstance(part, StrAntiquote): out.append("${" + render_expression(part.expression) + "}")
        else: raise TypeError(f"not a string part: {part!r}")
    return '"' + "".join(out) + '"'

def render_dynamic_unquoted_if_possible(s: StrDynamic) -> str:
    static = to_static(s)
    if static is not None: return render_static_unquoted_if_possible(static)
    return render_dynamic_quoted(s)

# ======================================
# Expressions
# ======================================

def render_expression(expr: Expr, context: RenderContext = RenderContext.NORMAL) -> str:
    """Render an expression as Bricks source text that parses back to the
    same expression."""
    text = _render(expr)
    return "(" + text + ")" if needs_parens(expr, context) else text

render = render_expression

def render_in_parens(expr: Expr) -> str:
    return "(" + render_expression(expr) + ")"

def _render(expr: Expr) -> str:
    if isinstance(expr, Var): return render_unquoted(expr.name)
    if isinstance(expr, Str): return render_dynamic_quoted(expr.string)
    if isinstance(expr, ListExpr): return render_list(expr)
    if isinstance(expr, DictExpr): return render_dict(expr)
    if isinstance(expr, Dot): return render_dot(expr)
    if isinstance(expr, Lambda): return render_lambda(expr)
    if isinstance(expr, Apply): return render_apply(expr)
    if isinstance(expr, Let): return render_let(expr)
    raise TypeError(f"not an expression: {expr!r}")

def render_dict_key(expr: Expr) -> str:
    if isinstance(expr, Str): return render_dynamic_unquoted_if_possible(expr.string)
    return "${" + render_expression(expr) + "}"

def render_list(x: ListExpr) -> str:
    return "[ " + "".join(render_expression(i, RenderContext.LIST_ITEM) + " " for i in x.items) + "]"

def render_dict(x: DictExpr) -> str:
    prefix = "rec " if x.rec else ""
    return prefix + "{ " + _terminated(x.bindings, render_dict_binding) + "}"

def render_dict_binding(b: DictBinding) -> str:
    """A binding within a dict, without the trailing semicolon."""
    if isinstance(b, DictBindingEq): return render_dict_key(b.key) + " = " + render_expression(b.value)
    if isinstance(b, DictBindingInherit): return render_inherit(b.inherit)
    raise TypeError(f"not a dict binding: {b!r}")

def render_dot(x: Dot) -> str:
    return render_expression(x.dict, RenderContext.DOT_LEFT) + "." + render_dict_key(x.key)

def render_lambda(x: Lambda) -> str:
    return render_param(x.param) + ": " + render_expression(x.body)

def render_param(p: Param) -> str:
    """Everything in a lambda before the ``:``."""
    if isinstance(p, ParamName): return render_unquoted(p.name)
    if isinstance(p, ParamDictPattern): return render_dict_pattern(p.pattern)
    if isinstance(p, ParamBoth): return render_unquoted(p.name) + "@" + render_dict_pattern(p.pattern)
    raise TypeError(f"not a parameter: {p!r}")

def render_dict_pattern(dp: DictPattern) -> str:
    xs = [render_dict_pattern_item(i) for i in dp.items]
    if dp.ellipsis: xs.append("...")
    if not xs: return "{ }"
    return "{ " + ", ".join(xs) + " }"

def render_dict_pattern_item(item: DictPatternItem) -> str:
    if item.default is None: return render_unquoted(item.name)
    return render_unquoted(item.name) + " ? " + render_expression(item.default)

def render_apply(x: Apply) -> str:
    return render_expression(x.f, RenderContext.APPLY_LEFT) + " " + render_expression(x.arg, RenderContext.APPLY_RIGHT)

def render_let(x: Let) -> str:
    return "let " + _terminated(x.bindings, render_let_binding) + "in " + render_expression(x.body)

def render_let_binding(b: LetBinding) -> str:
    if isinstance(b, LetBindingEq): return render_static_unquoted_if_possible(b.name) + " = " + render_expression(b.value)
    if isinstance(b, LetBindingInherit): return render_inherit(b.inherit)
    raise TypeError(f"not a let binding: {b!r}")

def render_inherit(x: Inherit) -> str:
    s = "inherit"
    if x.source is not None: s += " (" + render_expression(x.source) + ")"
    return s + "".join(" " + render_static_unquoted_if_possible(n) for n in x.names)

def _terminated(xs: Iterable, f: Callable) -> str:
    return "".join(f(x) + "; " for x in xs)
