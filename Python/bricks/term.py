"""
Term: an augmented lambda calculus used for evaluation. Lowering turns an
Expression into a Term (see :mod:`bricks.lowering`).
"""
import json
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Mapping, Tuple

# ======================================
# Terms
# ======================================

class Term: pass

@dataclass(frozen=True)
class TermVar(Term):
    name: str
    def __repr__(self): return f"TermVar({self.name!r})"

class TermPattern: pass

@dataclass(frozen=True)
class PatternSimple(TermPattern):
    """Binds the whole argument to one name."""
    name: str

@dataclass(frozen=True)
class PatternDict(TermPattern):
    """Binds each name to the value of the same key in a dict argument. The
    argument must have exactly these keys, or at least these keys with
    ``ellipsis``."""
    names: FrozenSet[str]
    ellipsis: bool = False
    def __post_init__(self): object.__setattr__(self, "names", frozenset(self.names))

@dataclass(frozen=True)
class TermLambda(Term):
    pattern: TermPattern
    body: Term
    def __repr__(self): return f"TermLambda({self.pattern!r}, {self.body!r})"

@dataclass(frozen=True)
class TermApply(Term):
    f: Term
    arg: Term
    def __repr__(self): return f"TermApply({self.f!r}, {self.arg!r})"

@dataclass(frozen=True)
class TermData(Term):
    """Primitive data, tagged with the name of its type."""
    type_name: str
    value: Any
    def __repr__(self): return f"TermData({self.type_name!r}, {self.value!r})"

@dataclass(frozen=True)
class TermList(Term):
    items: Tuple[Term, ...] = ()
    def __post_init__(self): object.__setattr__(self, "items", tuple(self.items))
    def __repr__(self): return f"TermList({list(self.items)!r})"

@dataclass(frozen=True)
class TermDict(Term):
    """A dict whose keys are already reduced to text."""
    entries: Tuple[Tuple[str, Term], ...] = ()

    def __post_init__(self):
        entries = self.entries.items() if isinstance(self.entries, Mapping) else self.entries
        object.__setattr__(self, "entries", tuple(sorted(entries, key=lambda kv: kv[0])))

    @property
    def keys(self) -> FrozenSet[str]: return frozenset(k for k, _ in self.entries)

    def __repr__(self): return f"TermDict({dict(self.entries)!r})"

@dataclass(frozen=True)
class TermLetRec(Term):
    """Mutually recursive bindings, visible to each other and to the body."""
    bindings: Tuple[Tuple[str, Term], ...]
    body: Term

    def __post_init__(self):
        bindings = self.bindings.items() if isinstance(self.bindings, Mapping) else self.bindings
        object.__setattr__(self, "bindings", tuple(sorted(bindings, key=lambda kv: kv[0])))

    def __repr__(self): return f"TermLetRec({dict(self.bindings)!r}, {self.body!r})"

@dataclass(frozen=True)
class TermBuiltin(Term):
    """A builtin function, which the evaluator interprets by name."""
    name: str
    def __repr__(self): return f"TermBuiltin({self.name!r})"

# ======================================
# Data & Builtin Functions
# ======================================

TYPE_STRING = "string"

def term_string(text: str) -> TermData:
    return TermData(TYPE_STRING, text)

FN_ID = TermBuiltin("id")
FN_COMP = TermBuiltin("comp")
FN_STRING_APPEND = TermBuiltin("string'append")
FN_DICT_LOOKUP = TermBuiltin("dict'lookup")
FN_DICT_MERGE_PREFER_LEFT = TermBuiltin("dict'merge'preferLeft")
FN_DICT_DISALLOW_EXTRA_KEYS = TermBuiltin("dict'disallowExtraKeys")

# name -> number of arguments
builtin_arities = {
    "id": 1,
    "comp": 3,
    "string'append": 2,
    "dict'lookup": 2,
    "dict'merge'preferLeft": 2,
    "dict'disallowExtraKeys": 2,
}

def apply_term(f: Term, *args: Term) -> Term:
    for arg in args: f = TermApply(f, arg)
    return f

def lambda_term(name: str, body: Term) -> TermLambda:
    return TermLambda(PatternSimple(name), body)

def key_set_term(names: Iterable[str]) -> TermList:
    """A set of dict keys, as accepted by ``dict'disallowExtraKeys``."""
    return TermList(tuple(term_string(n) for n in sorted(set(names))))

# ======================================
# Debug Dump
# ======================================

def show_term(term: Term) -> str:
    if isinstance(term, TermVar): return term.name
    if isinstance(term, TermBuiltin): return f"<{term.name}>"
    if isinstance(term, TermData):
        if term.type_name == TYPE_STRING: return json.dumps(term.value, ensure_ascii=False)
        return f"<{term.type_name} {term.value!r}>"
    if isinstance(term, TermApply): return f"({show_term(term.f)} {show_term(term.arg)})"
    if isinstance(term, TermLambda): return f"(\\{show_pattern(term.pattern)} -> {show_term(term.body)})"
    if isinstance(term, TermList): return "[" + ", ".join(show_term(t) for t in term.items) + "]"
    if isinstance(term, TermDict): return "{" + ", ".join(f"{k}: {show_term(v)}" for k, v in term.entries) + "}"
    if isinstance(term, TermLetRec):
        bs = "; ".join(f"{k} = {show_term(v)}" for k, v in term.bindings)
        return f"(letrec {{{bs}}} in {show_term(term.body)})"
    return str(term)

def show_pattern(pattern: TermPattern) -> str:
    if isinstance(pattern, PatternSimple): return pattern.name
    if isinstance(pattern, PatternDict):
        names = sorted(pattern.names) + (["..."] if pattern.ellipsis else [])
        return "{" + ", ".join(names) + "}"
    return str(pattern)
