import json
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from ..unquoted import UnquotedString
from ..strings import StrStatic, StrDynamic, StrPart, StrLiteral, StrAntiquote

# ======================================
# AST Nodes
# ======================================

class Expr: pass

Name = Union[str, UnquotedString]

def _unquoted(x: Name) -> UnquotedString:
    return x if isinstance(x, UnquotedString) else UnquotedString(x)

def _static(x: Union[str, StrStatic]) -> StrStatic:
    return x if isinstance(x, StrStatic) else StrStatic(x)

def _set(obj, field: str, value):
    object.__setattr__(obj, field, value)

@dataclass(frozen=True)
class Var(Expr):
    """A variable, such as ``x``."""
    name: UnquotedString
    def __post_init__(self): _set(self, "name", _unquoted(self.name))
    def __repr__(self): return f"Var({self.name.text!r})"

@dataclass(frozen=True)
class Str(Expr):
    """A string, in either the ``"..."`` or the ``''...''`` form. Either may
    contain antiquotation, as in ``"Hello, my name is ${name}!"``."""
    string: StrDynamic
    def __post_init__(self):
        if not isinstance(self.string, StrDynamic): _set(self, "string", StrDynamic(tuple(self.string)))
    def __repr__(self): return f"Str({list(self.string.parts)!r})"

@dataclass(frozen=True)
class ListExpr(Expr):
    """An ordered collection of expressions, such as ``[ a b c ]``."""
    items: Tuple[Expr, ...] = ()
    def __post_init__(self): _set(self, "items", tuple(self.items))
    def __repr__(self): return f"ListExpr({list(self.items)!r})"

@dataclass(frozen=True)
class DictExpr(Expr):
    """A dict literal such as ``{ a = "one"; }``. With ``rec`` the bindings may
    refer to each other. The left-hand side of a binding may be a quoted
    string, or any expression using the ``${...}`` form."""
    rec: bool = False
    bindings: Tuple['DictBinding', ...] = ()
    def __post_init__(self): _set(self, "bindings", tuple(self.bindings))
    def __repr__(self): return f"DictExpr({self.rec}, {list(self.bindings)!r})"

@dataclass(frozen=True)
class Dot(Expr):
    """A lookup such as ``person.name``."""
    dict: Expr
    key: Expr
    def __repr__(self): return f"Dot({self.dict!r}, {self.key!r})"

@dataclass(frozen=True)
class Lambda(Expr):
    """A function ``x: y``. Every function has a single parameter; multiple
    parameters are curried, as in ``a: b: [ a b ]``."""
    param: 'Param'
    body: Expr
    def __repr__(self): return f"Lambda({self.param!r}, {self.body!r})"

@dataclass(frozen=True)
class Apply(Expr):
    """Function application, ``f x``."""
    f: Expr
    arg: Expr
    def __repr__(self): return f"Apply({self.f!r}, {self.arg!r})"

@dataclass(frozen=True)
class Let(Expr):
    """A ``let``-``in`` expression. The bindings may refer to each other."""
    bindings: Tuple['LetBinding', ...]
    body: Expr
    def __post_init__(self): _set(self, "bindings", tuple(self.bindings))
    def __repr__(self): return f"Let({list(self.bindings)!r}, {self.body!r})"

# ======================================
# Bindings
# ======================================

@dataclass(frozen=True)
class Inherit:
    """``inherit a b;`` or ``inherit (x) a b;``."""
    source: Optional[Expr]
    names: Tuple[StrStatic, ...]
    def __post_init__(self): _set(self, "names", tuple(_static(n) for n in self.names))

class DictBinding: pass

@dataclass(frozen=True)
class DictBindingEq(DictBinding):
    key: Expr
    value: Expr

@dataclass(frozen=True)
class DictBindingInherit(DictBinding):
    inherit: Inherit

class LetBinding: pass

@dataclass(frozen=True)
class LetBindingEq(LetBinding):
    name: StrStatic
    value: Expr
    def __post_init__(self): _set(self, "name", _static(self.name))

@dataclass(frozen=True)
class LetBindingInherit(LetBinding):
    inherit: Inherit

# ======================================
# Function Parameters
# ======================================

class DuplicatePatternName(ValueError): pass

@dataclass(frozen=True)
class DictPatternItem:
    """One key to pull out of the dict, with the value to use if the key is
    absent."""
    name: UnquotedString
    default: Optional[Expr] = None
    def __post_init__(self): _set(self, "name", _unquoted(self.name))

@dataclass(frozen=True)
class DictPattern:
    items: Tuple[DictPatternItem, ...] = ()
    ellipsis: bool = False

    def __post_init__(self):
        items = tuple(i if isinstance(i, DictPatternItem) else DictPatternItem(i) for i in self.items)
        seen = set()
        for item in items:
            if item.name.text in seen: raise DuplicatePatternName(f"duplicate name in dict pattern: {item.name.text}")
            seen.add(item.name.text)
        _set(self, "items", items)

    @property
    def names(self) -> List[str]:
        return [i.name.text for i in self.items]

class Param: pass

@dataclass(frozen=True)
class ParamName(Param):
    name: UnquotedString
    def __post_init__(self): _set(self, "name", _unquoted(self.name))

@dataclass(frozen=True)
class ParamDictPattern(Param):
    pattern: DictPattern

@dataclass(frozen=True)
class ParamBoth(Param):
    """``name@{ ... }``: the name binds the whole argument and the pattern
    destructures it."""
    name: UnquotedString
    pattern: DictPattern
    def __post_init__(self): _set(self, "name", _unquoted(self.name))

# ======================================
# Helpers
# ======================================

def apply_args(f: Expr, args: Iterable[Expr]) -> Expr:
    for arg in args: f = Apply(f, arg)
    return f

def apply_dots(d: Expr, keys: Iterable[Expr]) -> Expr:
    for key in keys: d = Dot(d, key)
    return d

def string(text: str) -> Str:
    return Str(StrDynamic((StrLiteral(text),)))

# ======================================
# Debug Dump
# ======================================

def show_expression(expr: Expr) -> str:
    """A compact structural dump for tests and the REPL, e.g.
    ``apply (var "f") (str ["x"])``. This is not Bricks syntax."""
    if isinstance(expr, Var): return f"var {_quote(expr.name.text)}"
    if isinstance(expr, Str): return f"str {_show_list(expr.string.parts, _show_part)}"
    if isinstance(expr, ListExpr): return f"list {_show_list(expr.items, show_expression)}"
    if isinstance(expr, DictExpr):
        kind = "rec'dict" if expr.rec else "dict"
        return f"{kind} {_show_list(expr.bindings, _show_binding)}"
    if isinstance(expr, Dot): return f"dot {_paren(expr.dict)} {_paren(expr.key)}"
    if isinstance(expr, Lambda): return f"lambda {_show_param(expr.param)} {_paren(expr.body)}"
    if isinstance(expr, Apply): return f"apply {_paren(expr.f)} {_paren(expr.arg)}"
    if isinstance(expr, Let): return f"let'in {_show_list(expr.bindings, _show_binding)} {_paren(expr.body)}"
    raise TypeError(f"not an expression: {expr!r}")

def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)

def _paren(expr: Expr) -> str:
    return f"({show_expression(expr)})"

def _show_list(xs, f) -> str:
    return "[" + ", ".join(f(x) for x in xs) + "]"

def _show_part(part: StrPart) -> str:
    if isinstance(part, StrLiteral): return _quote(part.text)
    if isinstance(part, StrAntiquote): return f"antiquote {_paren(part.expression)}"
    raise TypeError(f"not a string part: {part!r}")

def _show_binding(b) -> str:
    if isinstance(b, DictBindingEq): return f"binding {_paren(b.key)} {_paren(b.value)}"
    if isinstance(b, LetBindingEq): return f"binding (str {_quote(b.name.text)}) {_paren(b.value)}"
    if isinstance(b, (DictBindingInherit, LetBindingInherit)): return _show_inherit(b.inherit)
    raise TypeError(f"not a binding: {b!r}")

def _show_inherit(x: Inherit) -> str:
    names = _show_list(x.names, lambda n: _quote(n.text))
    if x.source is None: return f"inherit {names}"
    return f"inherit'from {_paren(x.source)} {names}"

def _show_param(p: Param) -> str:
    if isinstance(p, ParamName): return f"(param {_quote(p.name.text)})"
    if isinstance(p, ParamDictPattern): return f"({_show_pattern(p.pattern)})"
    if isinstance(p, ParamBoth): return f"(param {_quote(p.name.text)} <> {_show_pattern(p.pattern)})"
    raise TypeError(f"not a parameter: {p!r}")

def _show_pattern(dp: DictPattern) -> str:
    items = _show_list(dp.items, _show_pattern_item)
    return f"pattern {items}" + (" <> ellipsis" if dp.ellipsis else "")

def _show_pattern_item(item: DictPatternItem) -> str:
    s = f"param {_quote(item.name.text)}"
    if item.default is not None: s += f" & def {_paren(item.default)}"
    return s
