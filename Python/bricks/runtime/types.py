from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, List, Tuple

from ..term import Term, TermPattern

# ======================================
# Errors
# ======================================

class EvaluationError(Exception): pass
class UnboundVariable(EvaluationError): pass
class DictKeyMismatch(EvaluationError): pass
class DictLookupFailure(EvaluationError): pass
class NotAFunction(EvaluationError): pass
class TypeMismatch(EvaluationError): pass
class InfiniteRecursion(EvaluationError): pass

# ======================================
# Thunks
# ======================================

class Thunk:
    """A delayed value, computed at most once."""
    def __init__(self, compute: Optional[Callable[[], 'Value']], label: str = ""):
        self.compute = compute
        self.label = label
        self.value: Optional['Value'] = None
        self.forcing = False

    @staticmethod
    def ready(value: 'Value') -> 'Thunk':
        t = Thunk(None)
        t.value = value
        return t

    def force(self) -> 'Value':
        if self.value is None:
            if self.forcing: raise InfiniteRecursion(f"infinite recursion while evaluating {self.label or 'a value'}")
            self.forcing = True
            try:
                self.value = self.compute()
            finally:
                self.forcing = False
            self.compute = None
        return self.value

    def __repr__(self):
        return f"Thunk({self.value!r})" if self.value is not None else f"Thunk(<{self.label}>)"

# ======================================
# Values & Environment
# ======================================

class Value: pass

@dataclass
class StrVal(Value):
    text: str
    def __str__(self): return self.text

@dataclass
class ListVal(Value):
    items: List[Thunk]
    def __str__(self): return f"<list of {len(self.items)}>"

@dataclass
class DictVal(Value):
    entries: Dict[str, Thunk]
    def __str__(self): return "<dict {" + ", ".join(sorted(self.entries)) + "}>"

@dataclass
class Closure(Value):
    pattern: TermPattern; body: Term; env: 'Env'
    def __str__(self): return "<lambda>"

@dataclass
class BuiltinVal(Value):
    """A builtin function with the arguments applied to it so far."""
    name: str
    args: Tuple[Thunk, ...] = field(default_factory=tuple)
    def __str__(self): return f"<{self.name}>"

class Env:
    def __init__(self, values: Optional[Dict[str, Thunk]] = None):
        self.values = values if values is not None else {}

    def lookup(self, name: str) -> Optional[Thunk]: return self.values.get(name)

    def bind_name(self, name: str, val: Thunk) -> 'Env':
        nv = self.values.copy(); nv[name] = val
        return Env(nv)

    def bind_all(self, bindings: Dict[str, Thunk]) -> 'Env':
        nv = self.values.copy(); nv.update(bindings)
        return Env(nv)

    def contains(self, name: str) -> bool: return name in self.values

    @staticmethod
    def initial() -> 'Env':
        return Env({})
