"""
There are three types of strings in the AST: unquoted, static, and dynamic.

Variables fall under the umbrella of "string" too, because the language
conflates the two ideas. In

    let x = { a = 1; }; in let inherit (x) a; in { inherit a; }

``a`` looks like a variable, but with ``"a b"`` in its place it looks like a
string, and the two ASTs are identical apart from the name.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union, TYPE_CHECKING

from .unquoted import UnquotedString

if TYPE_CHECKING:
    from .syntax.ast import Expr

# ======================================
# Static Strings
# ======================================

@dataclass(frozen=True)
class StrStatic:
    """A fixed string value, which may not contain antiquotation."""
    text: str

    def __add__(self, other: 'StrStatic') -> 'StrStatic':
        return StrStatic(self.text + other.text)

    @staticmethod
    def empty() -> 'StrStatic':
        return StrStatic("")

    def __str__(self): return self.text
    def __repr__(self): return f"StrStatic({self.text!r})"

# ======================================
# Dynamic Strings
# ======================================

class StrPart: pass

@dataclass(frozen=True)
class StrLiteral(StrPart):
    text: str

    @property
    def static(self) -> StrStatic: return StrStatic(self.text)

    def __repr__(self): return f"StrLiteral({self.text!r})"

@dataclass(frozen=True)
class StrAntiquote(StrPart):
    expression: 'Expr'
    def __repr__(self): return f"StrAntiquote({self.expression!r})"

@dataclass(frozen=True)
class StrDynamic:
    """A quoted string expression, which may be a simple string like
    ``"hello"`` or contain antiquotation like ``"Hello, my name is ${name}!"``.
    """
    parts: Tuple[StrPart, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "parts", tuple(self.parts))

    def __add__(self, other: 'StrDynamic') -> 'StrDynamic':
        return StrDynamic(self.parts + other.parts)

    def __iter__(self): return iter(self.parts)
    def __len__(self): return len(self.parts)

    @staticmethod
    def empty() -> 'StrDynamic':
        return StrDynamic(())

    @staticmethod
    def from_list(parts: Iterable[StrPart]) -> 'StrDynamic':
        return StrDynamic(tuple(parts))

    @staticmethod
    def singleton(part: StrPart) -> 'StrDynamic':
        return StrDynamic((part,))

    def normalize(self) -> 'StrDynamic': return normalize(self)
    def to_static(self) -> Optional[StrStatic]: return to_static(self)

    def __repr__(self): return f"StrDynamic({list(self.parts)!r})"

def normalize(s: StrDynamic) -> StrDynamic:
    """Combine consecutive pieces of literal text.

    >>> normalize(StrDynamic([StrLiteral("a"), StrLiteral("b"), StrLiteral("c")]))
    StrDynamic([StrLiteral('abc')])
    """
    parts: List[StrPart] = []
    run: List[str] = []
    for part in s.parts:
        if isinstance(part, StrLiteral):
            run.append(part.text)
            continue
        if run:
            parts.append(StrLiteral("".join(run))); run = []
        parts.append(part)
    if run: parts.append(StrLiteral("".join(run)))
    return StrDynamic(tuple(parts))

def to_static(s: StrDynamic) -> Optional[StrStatic]:
    """The text of a string with no antiquotation, or ``None`` if it has
    any. Only the empty string and single-literal strings qualify."""
    if not s.parts: return StrStatic("")
    if len(s.parts) == 1 and isinstance(s.parts[0], StrLiteral):
        return s.parts[0].static
    return None

# ======================================
# Conversions
# ======================================

def static_to_dynamic(s: StrStatic) -> StrDynamic:
    return StrDynamic.singleton(StrLiteral(s.text))

def unquoted_to_static(s: UnquotedString) -> StrStatic:
    return StrStatic(s.text)

def unquoted_to_dynamic(s: UnquotedString) -> StrDynamic:
    return static_to_dynamic(unquoted_to_static(s))

def str_dynamic(*parts: Union[str, 'Expr']) -> StrDynamic:
    """Build a dynamic string from plain text and expressions, where each
    expression becomes an antiquote."""
    return StrDynamic(tuple(StrLiteral(p) if isinstance(p, str) else StrAntiquote(p) for p in parts))
