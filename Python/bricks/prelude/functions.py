from typing import List

from ..runtime.types import Value, Thunk

def builtin_id(args: List[Thunk], apply) -> Value:
    return args[0].force()

def builtin_comp(args: List[Thunk], apply) -> Value:
    """``comp f g x = f (g x)``"""
    f, g, x = args
    return apply(f.force(), Thunk(lambda: apply(g.force(), x), "comp"))

bindings = {
    "id": builtin_id,
    "comp": builtin_comp,
}
