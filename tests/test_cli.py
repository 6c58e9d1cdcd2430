"""Tests for the command line entry point."""

from pathlib import Path

import pytest

from bricks import lowering
from bricks.__main__ import main
from bricks.runtime import evaluator


@pytest.fixture(autouse=True)
def reset_debug_flags():
    yield
    lowering.DEBUG_LOWER = False
    evaluator.DEBUG_EVAL = False


class TestOptions:
    def test_render_is_default(self, write_source, capsys) -> None:
        assert main([write_source("f   x  # comment\n")]) == 0
        assert capsys.readouterr().out == "f x\n"

    def test_show(self, write_source, capsys) -> None:
        assert main([write_source("f x"), "show"]) == 0
        assert capsys.readouterr().out == 'apply (var "f") (var "x")\n'

    def test_term(self, write_source, capsys) -> None:
        assert main([write_source("x: x"), "term"]) == 0
        assert capsys.readouterr().out == "(\\x -> x)\n"

    def test_eval(self, write_source, capsys) -> None:
        assert main([write_source('{ a = "1"; }'), "eval"]) == 0
        assert capsys.readouterr().out == 'Result: { a = "1"; }\n'

    def test_tokens(self, write_source, capsys) -> None:
        assert main([write_source("a.b"), "tokens"]) == 0
        assert "Ident(a) Delim(.) Ident(b)" in capsys.readouterr().out

    def test_debug_traces(self, write_source, capsys) -> None:
        assert main([write_source('({ a }: a) { a = "x"; }'), "eval", "debug"]) == 0
        out = capsys.readouterr().out
        assert "[EVAL]" in out
        assert "[LOWER]" in out
        assert 'Result: "x"' in out

    def test_usage(self, capsys) -> None:
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().out

    def test_unknown_option(self, write_source, capsys) -> None:
        assert main([write_source("x"), "bogus"]) == 1
        assert "Unknown options: bogus" in capsys.readouterr().out


class TestErrors:
    def test_missing_file(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "absent.bricks")]) == 1
        assert "Failed to read file" in capsys.readouterr().out

    def test_parse_error(self, write_source, capsys) -> None:
        assert main([write_source("{ a = ; }")]) == 1
        assert capsys.readouterr().out.startswith("Parse error: ")

    def test_lowering_error(self, write_source, capsys) -> None:
        assert main([write_source("{ ${k} = x; }"), "term"]) == 1
        assert capsys.readouterr().out.startswith("Lowering error: ")

    def test_evaluation_error(self, write_source, capsys) -> None:
        assert main([write_source("{ }.a"), "eval"]) == 1
        assert capsys.readouterr().out.startswith("Evaluation error: ")


class TestSamples:
    def test_samples_evaluate(self, samples_dir: Path, capsys) -> None:
        samples = sorted(samples_dir.glob("*.bricks"))
        assert samples
        for sample in samples:
            assert main([str(sample), "eval"]) == 0, sample.name
            assert capsys.readouterr().out.startswith("Result: ")

    def test_patterns_sample(self, samples_dir: Path, capsys) -> None:
        assert main([str(samples_dir / "patterns.bricks"), "eval"]) == 0
        assert capsys.readouterr().out == (
            'Result: { a = "Hello, Alice"; b = "Hi, Bob"; c = [ "Carol" "more" ]; }\n'
        )
