from typing import List

from ..runtime.types import Value, Thunk, StrVal, TypeMismatch

def force_str(t: Thunk, what: str) -> str:
    v = t.force()
    if not isinstance(v, StrVal): raise TypeMismatch(f"{what}: expected a string, got {v}")
    return v.text

def string_append(args: List[Thunk], apply) -> Value:
    a, b = args
    return StrVal(force_str(a, "string'append") + force_str(b, "string'append"))

bindings = {
    "string'append": string_append,
}
