from typing import List, Tuple, Callable, Iterable, FrozenSet, Dict
import re

from .unquoted import keywords as bricks_keywords, is_bare_identifier_char

# ======================================
# Token Definition
# ======================================

class Token:
    def __init__(self, s: str):
        self.s = s

    @property
    def lexeme(self) -> str:
        return self.s

    def __repr__(self):
        return f"{self.__class__.__name__}({self.s})"

    def __eq__(self, other):
        return isinstance(other, self.__class__) and self.s == other.s

class Ident(Token): pass
class Keyword(Token): pass
class WS(Token): pass
class Delim(Token): pass

# ======================================
# Tokenizer Types and Constructors
# ======================================

# Tokenizer: (input_str, pos) -> List[Tuple[Token, next_pos]], longest match first
Tokenizer = Callable[[str, int], List[Tuple[Token, int]]]

def lex_regex_longest(pattern: str, converter: Callable[[str], Token]) -> Tokenizer:
    regex = re.compile(pattern)

    def tokenizer(input_str: str, pos: int) -> List[Tuple[Token, int]]:
        # match checks from pos only
        m = regex.match(input_str, pos)
        if m and m.group(0):
            sub = m.group(0)
            return [(converter(sub), pos + len(sub))]
        return []

    return tokenizer

def lex_while(accept: Callable[[str], bool], converter: Callable[[str], Token]) -> Tokenizer:
    def tokenizer(input_str: str, pos: int) -> List[Tuple[Token, int]]:
        end = pos
        while end < len(input_str) and accept(input_str[end]):
            end += 1
        if end == pos: return []
        return [(converter(input_str[pos:end]), end)]
    return tokenizer

def lex_delim(delimiters: Iterable[str]) -> Tokenizer:
    # "..." has to win over ".", and "${" over "$"
    ordered = sorted(delimiters, key=len, reverse=True)

    def tokenizer(input_str: str, pos: int) -> List[Tuple[Token, int]]:
        matches = []
        for d in ordered:
            if input_str.startswith(d, pos):
                matches.append((Delim(d), pos + len(d)))
        return matches
    return tokenizer

# ======================================
# Tokenizer Config
# ======================================

class TokenizerConfig:
    def __init__(self, keywords: Iterable[str], delimiters: Iterable[str]):
        self.keywords: FrozenSet[str] = frozenset(keywords)
        self.delimiters: FrozenSet[str] = frozenset(delimiters)

    @staticmethod
    def default() -> 'TokenizerConfig':
        return TokenizerConfig(
            keywords=bricks_keywords,
            delimiters={"(", ")", "{", "}", "[", "]", "${", "=", ";", ":", ",", "?", "@", ".", "..."},
        )

# Whitespace and "#" line comments
WS_REGEX = r"(?:[ \t\r\n]|#[^\n]*)+"

def build_tokenizers(config: TokenizerConfig) -> Dict[str, Tokenizer]:
    def ident_or_keyword(s: str) -> Token:
        return Keyword(s) if s in config.keywords else Ident(s)

    return {
        "ws": lex_regex_longest(WS_REGEX, WS),
        "ident": lex_while(is_bare_identifier_char, ident_or_keyword),
        "delim": lex_delim(config.delimiters),
    }

def longest(tokenizer: Tokenizer, input_str: str, pos: int):
    """The longest match of a tokenizer at ``pos``, or ``None``."""
    matches = tokenizer(input_str, pos)
    if not matches: return None
    return max(matches, key=lambda m: m[1])

# ======================================
# Token Dump
# ======================================

def lex_tokens(input_str: str, config: TokenizerConfig = None) -> List[Token]:
    """Split source text into tokens for display. String literals are not
    tokens; use the parser for real input."""
    tokenizers = build_tokenizers(config or TokenizerConfig.default())
    pos = 0
    tokens: List[Token] = []
    while pos < len(input_str):
        found = None
        for name in ("ws", "ident", "delim"):
            found = longest(tokenizers[name], input_str, pos)
            if found: break
        if found is None:
            found = (Delim(input_str[pos]), pos + 1)
        tok, pos = found
        tokens.append(tok)
    return tokens

def show_tokens(tokens: List[Token]) -> str:
    res = []
    for t in tokens:
        if isinstance(t, WS):
            res.append(" ")
        else:
            res.append(t.lexeme)
    return "".join(res)
