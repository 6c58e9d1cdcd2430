from .types import Value, Env, Thunk, EvaluationError
from .evaluator import eval_term, eval_expression, eval_text, force_deep, value_to_expression

__all__ = ["Value", "Env", "Thunk", "EvaluationError",
           "eval_term", "eval_expression", "eval_text", "force_deep", "value_to_expression"]
