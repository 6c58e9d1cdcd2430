from typing import Callable, List, Optional, TypeVar

from .lexing import TokenizerConfig, Keyword, Ident, build_tokenizers, longest
from .unquoted import is_bare_identifier_name
from .strings import StrStatic, StrDynamic, StrPart, StrLiteral, StrAntiquote, normalize, to_static
from .syntax.ast import (
    Expr, Var, Str, ListExpr, DictExpr, Dot, Lambda, Apply, Let,
    DictBinding, DictBindingEq, DictBindingInherit, LetBinding, LetBindingEq, LetBindingInherit,
    Inherit, Param, ParamName, ParamDictPattern, ParamBoth,
    DictPattern, DictPatternItem, DuplicatePatternName, string,
)

T = TypeVar('T')

class ParseError(Exception):
    def __init__(self, message: str, pos: int):
        super().__init__(message)
        self.message = message
        self.pos = pos

# Escape sequences in double-quoted strings; any other "\c" stands for "c"
ESCAPES = {"n": "\n", "r": "\r", "t": "\t"}

# ======================================
# Parser
# ======================================

class Parser:
    """Recursive descent over the source text. Alternatives are tried in
    order, rewinding the position when one fails."""

    def __init__(self, text: str, config: Optional[TokenizerConfig] = None, debug: bool = False):
        self.text = text
        self.pos = 0
        self.config = config or TokenizerConfig.default()
        self.tokenizers = build_tokenizers(self.config)
        self.debug = debug
        self.furthest: Optional[ParseError] = None

    def log(self, msg: str):
        if self.debug:
            print(f"[PARSE] {msg}")

    def run(self) -> Expr:
        try:
            expr = self.expression()
            self.skip_ws()
            if self.pos != len(self.text): self.fail("expected end of input")
            return expr
        except ParseError as e:
            raise self.furthest or e

    # --- Errors & backtracking ---

    def fail(self, message: str):
        line = self.text.count("\n", 0, self.pos) + 1
        col = self.pos - (self.text.rfind("\n", 0, self.pos) + 1) + 1
        err = ParseError(f"{message} at line {line}, column {col}", self.pos)
        if self.furthest is None or err.pos >= self.furthest.pos:
            self.furthest = err
        raise err

    def attempt(self, p: Callable[[], T]) -> Optional[T]:
        start = self.pos
        try:
            return p()
        except ParseError as e:
            self.log(f"{p.__name__} failed at {start}: {e.message}")
            self.pos = start
            return None

    # --- Tokens ---

    def skip_ws(self):
        m = longest(self.tokenizers["ws"], self.text, self.pos)
        if m: self.pos = m[1]

    def peek_delim(self, d: str) -> bool:
        self.skip_ws()
        m = longest(self.tokenizers["delim"], self.text, self.pos)
        return m is not None and m[0].lexeme == d

    def delim(self, d: str):
        if not self.peek_delim(d): self.fail(f"expected {d!r}")
        self.pos += len(d)

    def peek_keyword(self, k: str) -> bool:
        self.skip_ws()
        m = longest(self.tokenizers["ident"], self.text, self.pos)
        return m is not None and isinstance(m[0], Keyword) and m[0].lexeme == k

    def keyword(self, k: str):
        if not self.peek_keyword(k): self.fail(f"expected {k!r}")
        self.pos += len(k)

    def ident(self) -> str:
        self.skip_ws()
        m = longest(self.tokenizers["ident"], self.text, self.pos)
        if m is None: self.fail("expected identifier")
        tok, end = m
        if not isinstance(tok, Ident) or not is_bare_identifier_name(tok.lexeme):
            self.fail(f"unexpected keyword {tok.lexeme!r}")
        self.pos = end
        return tok.lexeme

    def peek_string(self) -> bool:
        self.skip_ws()
        return self.text.startswith('"', self.pos) or self.text.startswith("''", self.pos)

    # --- Expressions ---

    def expression(self) -> Expr:
        lam = self.attempt(self.lambda_)
        if lam is not None: return lam
        if self.peek_keyword("let"): return self.let()
        return self.apply()

    def lambda_(self) -> Lambda:
        param = self.param()
        self.delim(":")
        return Lambda(param, self.expression())

    def apply(self) -> Expr:
        f = self.dotted()
        while True:
            # A lambda extends as far right as possible, so it can only be the last argument.
            lam = self.attempt(self.lambda_)
            if lam is not None: return Apply(f, lam)
            arg = self.attempt(self.dotted)
            if arg is None: return f
            f = Apply(f, arg)

    def dotted(self) -> Expr:
        e = self.primary()
        while self.peek_delim("."):
            start = self.pos
            self.pos += 1
            key = self.attempt(self.key)
            if key is None:
                self.pos = start
                break
            e = Dot(e, key)
        return e

    def primary(self) -> Expr:
        if self.peek_string(): return Str(self.string())
        if self.peek_delim("["): return self.list_()
        if self.peek_delim("("):
            self.pos += 1
            e = self.expression()
            self.delim(")")
            return e
        if self.peek_keyword("rec"):
            self.keyword("rec")
            return self.dict_(rec=True)
        if self.peek_delim("{"): return self.dict_(rec=False)
        return Var(self.ident())

    def list_(self) -> ListExpr:
        self.delim("[")
        items: List[Expr] = []
        while not self.peek_delim("]"):
            items.append(self.dotted())
        self.delim("]")
        return ListExpr(items)

    def dict_(self, rec: bool) -> DictExpr:
        self.delim("{")
        bindings: List[DictBinding] = []
        while not self.peek_delim("}"):
            if self.peek_keyword("inherit"):
                bindings.append(DictBindingInherit(self.inherit()))
            else:
                key = self.key()
                self.delim("=")
                bindings.append(DictBindingEq(key, self.expression()))
            self.delim(";")
        self.delim("}")
        return DictExpr(rec, bindings)

    def key(self) -> Expr:
        """A dict key, after a ``.`` or on the left of ``=``."""
        if self.peek_string(): return Str(self.string())
        if self.peek_delim("${"):
            self.pos += 2
            e = self.expression()
            self.delim("}")
            return e
        return string(self.ident())

    def let(self) -> Let:
        self.keyword("let")
        bindings: List[LetBinding] = []
        while not self.peek_keyword("in"):
            if self.peek_keyword("inherit"):
                bindings.append(LetBindingInherit(self.inherit()))
            else:
                name = self.static_name()
                self.delim("=")
                bindings.append(LetBindingEq(name, self.expression()))
            self.delim(";")
        self.keyword("in")
        return Let(bindings, self.expression())

    def inherit(self) -> Inherit:
        self.keyword("inherit")
        source = None
        if self.peek_delim("("):
            self.pos += 1
            source = self.expression()
            self.delim(")")
        names: List[StrStatic] = []
        while not self.peek_delim(";"):
            names.append(self.static_name())
        return Inherit(source, names)

    def static_name(self) -> StrStatic:
        if self.peek_string():
            start = self.pos
            static = to_static(self.string())
            if static is None:
                self.pos = start
                self.fail("expected a name without antiquotation")
            return static
        return StrStatic(self.ident())

    # --- Lambda parameters ---

    def param(self) -> Param:
        if self.peek_delim("{"): return ParamDictPattern(self.pattern())
        name = self.ident()
        if self.peek_delim("@"):
            self.pos += 1
            return ParamBoth(name, self.pattern())
        return ParamName(name)

    def pattern(self) -> DictPattern:
        start = self.pos
        self.delim("{")
        items: List[DictPatternItem] = []
        ellipsis = False
        if not self.peek_delim("}"):
            while True:
                if self.peek_delim("..."):
                    self.pos += 3
                    ellipsis = True
                    break
                name = self.ident()
                default = None
                if self.peek_delim("?"):
                    self.pos += 1
                    default = self.expression()
                items.append(DictPatternItem(name, default))
                if not self.peek_delim(","): break
                self.pos += 1
        self.delim("}")
        try:
            return DictPattern(items, ellipsis)
        except DuplicatePatternName as e:
            self.pos = start
            self.fail(str(e))

    # --- Strings ---

    def string(self) -> StrDynamic:
        self.skip_ws()
        if self.text.startswith('"', self.pos): parts = self.normal_string()
        elif self.text.startswith("''", self.pos): parts = strip_indentation(self.indented_string())
        else: self.fail("expected string")
        return clean_string(parts)

    def normal_string(self) -> List[StrPart]:
        self.pos += 1
        parts: List[StrPart] = []
        buf: List[str] = []
        while True:
            if self.pos >= len(self.text): self.fail("unterminated string")
            c = self.text[self.pos]
            if c == '"':
                self.pos += 1
                break
            if c == "\\":
                if self.pos + 1 >= len(self.text): self.fail("unterminated string")
                if self.text.startswith("${", self.pos + 1):
                    buf.append("${")
                    self.pos += 3
                else:
                    n = self.text[self.pos + 1]
                    buf.append(ESCAPES.get(n, n))
                    self.pos += 2
            elif self.text.startswith("${", self.pos):
                parts.append(StrLiteral("".join(buf))); buf = []
                parts.append(self.antiquote())
            else:
                buf.append(c)
                self.pos += 1
        parts.append(StrLiteral("".join(buf)))
        return parts

    def indented_string(self) -> List[StrPart]:
        self.pos += 2
        parts: List[StrPart] = []
        buf: List[str] = []
        while True:
            if self.pos >= len(self.text): self.fail("unterminated indented string")
            if self.text.startswith("''", self.pos):
                self.pos += 2
                break
            if self.text.startswith("${", self.pos):
                parts.append(StrLiteral("".join(buf))); buf = []
                parts.append(self.antiquote())
            else:
                buf.append(self.text[self.pos])
                self.pos += 1
        parts.append(StrLiteral("".join(buf)))
        return parts

    def antiquote(self) -> StrAntiquote:
        self.pos += 2
        e = self.expression()
        self.delim("}")
        return StrAntiquote(e)

# ======================================
# String Cleanup
# ======================================

def clean_string(parts: List[StrPart]) -> StrDynamic:
    """Drop empty literals and merge adjacent ones."""
    return normalize(StrDynamic(tuple(p for p in parts if not (isinstance(p, StrLiteral) and p.text == ""))))

def _blank(line: List[StrPart]) -> bool:
    return all(isinstance(p, StrLiteral) and p.text.strip(" \t") == "" for p in line)

def _indent(line: List[StrPart]) -> int:
    if not line or not isinstance(line[0], StrLiteral): return 0
    text = line[0].text
    return len(text) - len(text.lstrip(" "))

def strip_indentation(parts: List[StrPart]) -> List[StrPart]:
    """Remove the indentation of an indented string.

    A blank first line and a whitespace-only last line are dropped, then as
    many leading spaces as the least indented nonblank line has are removed
    from every line.
    """
    lines: List[List[StrPart]] = [[]]
    for part in parts:
        if isinstance(part, StrLiteral):
            for i, chunk in enumerate(part.text.split("\n")):
                if i > 0: lines.append([])
                if chunk: lines[-1].append(StrLiteral(chunk))
        else:
            lines[-1].append(part)

    if len(lines) > 1 and _blank(lines[0]): lines = lines[1:]
    if len(lines) > 1 and _blank(lines[-1]): lines = lines[:-1]

    n = min((_indent(line) for line in lines if not _blank(line)), default=0)
    out: List[StrPart] = []
    for i, line in enumerate(lines):
        if i > 0: out.append(StrLiteral("\n"))
        k = min(n, _indent(line))
        if k: line = [StrLiteral(line[0].text[k:])] + line[1:]
        out.extend(line)
    return out

# ======================================
# Entry Point
# ======================================

def parse_expression(text: str, config: Optional[TokenizerConfig] = None, debug: bool = False) -> Expr:
    return Parser(text, config, debug).run()
