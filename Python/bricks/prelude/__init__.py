from typing import Callable, Dict, List, NamedTuple

from ..term import builtin_arities
from ..runtime.types import Value, Thunk
from . import functions, strings, dicts

class Primitive(NamedTuple):
    arity: int
    run: Callable

# Merge all implementations
implementations = {}
implementations.update(functions.bindings)
implementations.update(strings.bindings)
implementations.update(dicts.bindings)

primitives: Dict[str, Primitive] = {name: Primitive(builtin_arities[name], run) for name, run in implementations.items()}

# apply: (function value, argument thunk) -> value
Apply = Callable[[Value, Thunk], Value]

def eval_primitive(name: str, args: List[Thunk], apply: Apply) -> Value:
    if name not in primitives: raise RuntimeError(f"Unknown primitive: {name}")
    return primitives[name].run(args, apply)
