from dataclasses import dataclass
from typing import FrozenSet, Optional

# ======================================
# Keywords
# ======================================

keywords: FrozenSet[str] = frozenset({"rec", "let", "in", "inherit"})

# ======================================
# Unquoted Strings
# ======================================

class InvalidUnquotedString(ValueError):
    def __init__(self, text: str, reason: str):
        super().__init__(f"{text!r} cannot be unquoted: {reason}")
        self.text = text
        self.reason = reason

def is_bare_identifier_char(c: str) -> bool:
    """Letters, ``-``, and ``_``."""
    return c.isalpha() or c == "-" or c == "_"

def is_bare_identifier_name(text: str) -> bool:
    """Whether a string can be rendered without quoting it.

    A name is a bare identifier if all of these hold:

    - it is nonempty
    - every character satisfies :func:`is_bare_identifier_char`
    - it is not a keyword
    """
    return _invalid_reason(text) is None

def _invalid_reason(text: str) -> Optional[str]:
    if text == "": return "empty"
    for c in text:
        if not is_bare_identifier_char(c): return f"illegal character {c!r}"
    if text in keywords: return "reserved keyword"
    return None

@dataclass(frozen=True)
class UnquotedString:
    """A string that can appear in the source without quotes, such as a
    variable name. Build one with :func:`make_unquoted`."""
    text: str

    def __post_init__(self):
        reason = _invalid_reason(self.text)
        if reason is not None: raise InvalidUnquotedString(self.text, reason)

    def __str__(self): return self.text
    def __repr__(self): return f"UnquotedString({self.text!r})"

def make_unquoted(text: str) -> UnquotedString:
    return UnquotedString(text)
