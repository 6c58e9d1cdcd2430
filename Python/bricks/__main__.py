import sys
import os
import time
from typing import List, Optional

from . import lexing, parsing, lowering, rendering
from .syntax import ast
from .term import show_term
from .runtime import evaluator as runtime_evaluator
from .runtime.types import EvaluationError

OPTIONS = ["render", "show", "term", "eval", "tokens", "debug"]

def print_usage():
    print("Usage: python -m bricks <input-file> [options...]")
    print("Options:")
    print("  render   print the expression as Bricks source (default)")
    print("  show     print the expression's structure")
    print("  term     print the lowered term")
    print("  eval     evaluate and print the result")
    print("  tokens   print the tokens of the input")
    print("  debug    trace parsing, lowering and evaluation")

def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) < 1:
        print_usage()
        return 1

    input_path = os.path.abspath(args[0])
    options = set(args[1:])
    unknown = options - set(OPTIONS)
    if unknown:
        print(f"Unknown options: {' '.join(sorted(unknown))}")
        print_usage()
        return 1

    use_debug = "debug" in options
    use_show = "show" in options
    use_term = "term" in options
    use_eval = "eval" in options
    use_tokens = "tokens" in options
    use_render = "render" in options or not (use_show or use_term or use_eval or use_tokens)

    if use_debug:
        lowering.DEBUG_LOWER = True
        runtime_evaluator.DEBUG_EVAL = True
        print("=== Bricks ===")
        print(f"Input: {input_path}")
        print(f"Options: {' '.join(o for o in OPTIONS if o in options)}")
        print()

    try:
        with open(input_path, 'r', encoding='utf-8') as f:
            input_str = f.read()
    except OSError as e:
        print(f"Failed to read file: {input_path}")
        print(f"Error: {e}")
        return 1

    config = lexing.TokenizerConfig.default()
    start = time.time() * 1000

    if use_tokens:
        tokens = lexing.lex_tokens(input_str, config)
        print("== Tokens ==")
        print(" ".join(repr(t) for t in tokens if not isinstance(t, lexing.WS)))

    # 1. Parsing
    try:
        expr = parsing.parse_expression(input_str, config, debug=use_debug)
    except parsing.ParseError as e:
        print(f"Parse error: {e}")
        return 1
    if use_debug: print(f"  Parsed in {int(time.time() * 1000 - start)}ms")

    if use_render: print(rendering.render_expression(expr))
    if use_show: print(ast.show_expression(expr))
    if not (use_term or use_eval): return 0

    # 2. Lowering
    try:
        term = lowering.expression_to_term(expr)
    except lowering.LoweringError as e:
        print(f"Lowering error: {e}")
        return 1
    if use_term: print(show_term(term))

    # 3. Evaluation
    if use_eval:
        eval_start = time.time() * 1000
        try:
            value = runtime_evaluator.eval_term(term)
            result = runtime_evaluator.value_to_expression(value)
        except (EvaluationError, RecursionError) as e:
            print(f"Evaluation error: {e}")
            if use_debug:
                import traceback
                traceback.print_exc()
            return 1
        print(f"Result: {rendering.render_expression(result)}")
        if use_debug: print(f"  Time: {int(time.time() * 1000 - eval_start)}ms")

    if use_debug:
        print()
        print(f"Total time: {int(time.time() * 1000 - start)}ms")
    return 0

if __name__ == "__main__":
    sys.exit(main())
