from typing import List, Set

from ..runtime.types import Value, Thunk, DictVal, ListVal, TypeMismatch, DictKeyMismatch, DictLookupFailure
from .strings import force_str

def force_dict(t: Thunk, what: str) -> DictVal:
    v = t.force()
    if not isinstance(v, DictVal): raise TypeMismatch(f"{what}: expected a dict, got {v}")
    return v

def force_key_set(t: Thunk, what: str) -> Set[str]:
    v = t.force()
    if not isinstance(v, ListVal): raise TypeMismatch(f"{what}: expected a list of keys, got {v}")
    return {force_str(i, what) for i in v.items}

def dict_lookup(args: List[Thunk], apply) -> Value:
    d, k = force_dict(args[0], "dict'lookup"), force_str(args[1], "dict'lookup")
    if k not in d.entries: raise DictLookupFailure(f"key not found: {k}")
    return d.entries[k].force()

def dict_merge_prefer_left(args: List[Thunk], apply) -> Value:
    """All keys of both dicts. Where both have a key, the left one's value wins."""
    a, b = force_dict(args[0], "dict'merge'preferLeft"), force_dict(args[1], "dict'merge'preferLeft")
    entries = dict(b.entries)
    entries.update(a.entries)
    return DictVal(entries)

def dict_disallow_extra_keys(args: List[Thunk], apply) -> Value:
    """The dict unchanged, provided it has no keys outside the given list."""
    allowed = force_key_set(args[0], "dict'disallowExtraKeys")
    d = force_dict(args[1], "dict'disallowExtraKeys")
    extra = set(d.entries) - allowed
    if extra: raise DictKeyMismatch(f"unexpected keys: {', '.join(sorted(extra))}")
    return d

bindings = {
    "dict'lookup": dict_lookup,
    "dict'merge'preferLeft": dict_merge_prefer_left,
    "dict'disallowExtraKeys": dict_disallow_extra_keys,
}
