from .unquoted import UnquotedString, InvalidUnquotedString, make_unquoted, is_bare_identifier_name, keywords
from .strings import StrStatic, StrDynamic, StrLiteral, StrAntiquote, normalize, to_static, str_dynamic
from .syntax.ast import Expr, Var, Str, ListExpr, DictExpr, Dot, Lambda, Apply, Let, show_expression
from .rendering import RenderContext, render_expression, str_escape
from .term import Term, show_term
from .lowering import expression_to_term, LoweringError
from .lexing import TokenizerConfig
from .parsing import parse_expression, ParseError
# runtime loads the prelude
from .runtime import eval_term, eval_expression, eval_text, force_deep, value_to_expression, EvaluationError

__all__ = [
    "UnquotedString", "InvalidUnquotedString", "make_unquoted", "is_bare_identifier_name", "keywords",
    "StrStatic", "StrDynamic", "StrLiteral", "StrAntiquote", "normalize", "to_static", "str_dynamic",
    "Expr", "Var", "Str", "ListExpr", "DictExpr", "Dot", "Lambda", "Apply", "Let", "show_expression",
    "RenderContext", "render_expression", "str_escape",
    "Term", "show_term",
    "expression_to_term", "LoweringError",
    "TokenizerConfig",
    "parse_expression", "ParseError",
    "eval_term", "eval_expression", "eval_text", "force_deep", "value_to_expression", "EvaluationError",
]
