from typing import Any

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from lbasic.lbasic_lexer import tokenize
from lbasic.lbasic_result import (
    Accept,
    Failure,
    ParseContext,
    SyntaxErrorResult,
)
from lbasic.lbasic_validator import LineValidator, validate, validate_line


def program(*lines: str) -> list[str]:
    return list(lines) + ["$$"]


def error(line: int, message: str) -> SyntaxErrorResult:
    return SyntaxErrorResult(line, message)


# Scenarios


@pytest.mark.parametrize(
    "lines,expected",
    [
        (["x=1", "$$"], Accept()),
        (["write 1+", "$$"], error(1, "invalid expression")),
        (["loop: while true", "endwhile", "$$"], Accept()),
        (["endwhile", "$$"], error(1, "endwhile without open while")),
        (["x=1"], error(2, "missing sentinel marker")),
        (["if (a=b)", "$$"], Accept()),
    ],
)
def test_scenarios(lines: list[str], expected: Any) -> None:
    assert validate(lines) == expected


def test_scenario_output_text() -> None:
    assert str(validate(["x=1", "$$"])) == "Accept"
    assert (
        str(validate(["write 1+", "$$"]))
        == "Syntax error on line 1: invalid expression"
    )


# Statements


@pytest.mark.parametrize(
    "line",
    [
        "x = 1",
        "x = -5",
        "x = a - -5",
        "x = +3 * y",
        "total = a + b * c / 2 - 1",
        "x = ((a+1))",
        "x = (a + (b * (c - 1))) / 2",
        "x = (a)+(b)",
        "if true",
        "if false",
        "if a < b",
        "if a + 1 >= (b * 2)",
        "if a <> b",
        "if (a=b)",
        "if (a + 1 <= b)",
        "if (a) + 1 = b",
        "if ((a)) > b",
        "if -1 < x",
        "read x",
        "write x",
        "write (a+b)*c",
        "goto loop",
        "gosub sub1",
        "return",
        "break",
        "end",
        "x = 1; y = 2",
        "read x; write x; end",
        "top: x = 1; goto top",
        "  x=1  ",
    ],
)
def test_valid_lines(line: str) -> None:
    assert validate(program(line)) == Accept()


@pytest.mark.parametrize(
    "line,message",
    [
        # statements
        ("x", "invalid statement"),
        ("x 1", "invalid statement"),
        ("1 = x", "invalid statement"),
        ("", "invalid statement"),
        ("   ", "invalid statement"),
        ("print x", "invalid statement"),
        ("return x", "invalid statement"),
        ("break 1", "invalid statement"),
        ("end end", "invalid statement"),
        ("read", "invalid statement"),
        ("read 5", "invalid statement"),
        ("read x y", "invalid statement"),
        ("goto", "invalid statement"),
        ("gosub 10", "invalid statement"),
        ("x = 1;", "invalid statement"),
        ("x = 1;;", "invalid statement"),
        ("loop:", "invalid statement"),
        ("true", "invalid statement"),
        # labels
        ("while: x = 1", "invalid label"),
        ("1: x = 1", "invalid label"),
        ("a b: x = 1", "invalid label"),
        ("a: b: x = 1", "invalid label"),
        ("x = 1; y: z = 2", "invalid label"),
        # expressions
        ("write", "invalid expression"),
        ("write 1+", "invalid expression"),
        ("x =", "invalid expression"),
        ("x = *1", "invalid expression"),
        ("x = -a", "invalid expression"),
        ("x = - 5", "invalid expression"),
        ("x = a - - 5", "invalid expression"),
        ("write (+ 1)", "invalid expression"),
        ("if - 1 < x", "invalid expression"),
        ("if (- 1 = x)", "invalid expression"),
        ("x = true", "invalid expression"),
        ("x = ()", "invalid expression"),
        ("x = 1 $ 2", "invalid expression tail"),
        ("x = a b", "invalid expression tail"),
        ("x = (a b)", "invalid expression tail"),
        ("x = a < b", "invalid expression tail"),
        ("write x y", "invalid expression tail"),
        ("x = (a+1", "unbalanced parenthesis"),
        ("x = ((a)", "unbalanced parenthesis"),
        ("x = a)", "unbalanced parenthesis"),
        ("write (a+1))", "unbalanced parenthesis"),
        # booleans
        ("if", "invalid boolean"),
        ("while", "invalid boolean"),
        ("if <", "invalid boolean"),
        ("if goto", "invalid boolean"),
        ("if a", "invalid boolean operator"),
        ("if a + b", "invalid boolean operator"),
        ("if a * b ; x = 1", "invalid boolean operator"),
        ("if (a)", "invalid boolean operator"),
        ("if a <", "invalid expression"),
        ("if a < b c", "invalid expression tail"),
        ("if true x", "invalid expression tail"),
        ("if (a=b", "unbalanced parenthesis"),
        ("if (a=b) = c", "invalid expression tail"),
        ("if (true)", "invalid expression"),
    ],
)
def test_invalid_lines(line: str, message: str) -> None:
    assert validate(program(line)) == error(1, message)


# While pairing


def test_nested_while_blocks_pair() -> None:
    lines = program("while a < 1", "while b < 2", "endwhile", "endwhile")
    assert validate(lines) == Accept()


def test_extra_endwhile_after_nested_blocks() -> None:
    lines = program("while true", "while true", "endwhile", "endwhile", "endwhile")
    assert validate(lines) == error(5, "endwhile without open while")


def test_while_and_endwhile_on_one_line() -> None:
    assert validate(program("while true; x = x + 1; endwhile")) == Accept()


def test_endwhile_before_while_on_same_line() -> None:
    assert validate(program("endwhile; while true")) == error(
        1, "endwhile without open while"
    )


def test_endwhile_with_trailing_token() -> None:
    assert validate(program("while true", "endwhile x")) == error(
        2, "invalid statement"
    )


def test_unclosed_while_accepted_by_default() -> None:
    assert validate(program("while true", "x = 1")) == Accept()


def test_unclosed_while_rejected_in_strict_mode() -> None:
    lines = program("while true", "x = 1")
    assert validate(lines, strict=True) == error(
        3, "while without matching endwhile"
    )


def test_strict_mode_accepts_closed_blocks() -> None:
    lines = program("while true", "while false", "endwhile", "endwhile")
    assert validate(lines, strict=True) == Accept()


# Program level


def test_sentinel_is_trimmed() -> None:
    assert validate(["x = 1", "   $$\t"]) == Accept()


def test_sentinel_with_other_text_is_not_sentinel() -> None:
    assert validate(["x = 1", "$$ x"]) == error(2, "invalid statement")


def test_lines_after_sentinel_are_not_examined() -> None:
    seen: list[int] = []
    result = validate(
        ["x = 1", "$$", "this is not valid"],
        trace=lambda n, text: seen.append(n),
    )
    assert result == Accept()
    assert seen == [1, 2]


def test_empty_program_missing_sentinel() -> None:
    assert validate([]) == error(1, "missing sentinel marker")


def test_sentinel_only_program() -> None:
    assert validate(["$$"]) == Accept()


def test_first_error_wins() -> None:
    lines = program("x = 1", "x =", "endwhile", "y")
    assert validate(lines) == error(2, "invalid expression")


def test_error_beats_missing_sentinel() -> None:
    assert validate(["x = 1", "goto"]) == error(2, "invalid statement")


def test_lines_with_newlines() -> None:
    assert validate(["x = 1\n", "$$\n"]) == Accept()


def test_accepts_any_iterable() -> None:
    assert validate(iter(["x = 1", "$$"])) == Accept()


def test_long_program_does_not_recurse_per_line() -> None:
    lines = ["x = x + 1"] * 5000 + ["$$"]
    assert validate(lines) == Accept()


def test_deeply_nested_parentheses() -> None:
    depth = 50
    line = "x = " + "(" * depth + "a+1" + ")" * depth
    assert validate(program(line)) == Accept()
    assert validate(program(line[:-1])) == error(1, "unbalanced parenthesis")


# Line validator units


def test_validate_line_returns_next_context() -> None:
    ctx = ParseContext(line=3, while_depth=0)
    assert validate_line("while true", ctx) == ParseContext(line=3, while_depth=1)


def test_validate_line_error_carries_context_line() -> None:
    assert validate_line("x =", ParseContext(line=9)) == error(9, "invalid expression")


def test_expression_cursor_stops_before_terminator() -> None:
    validator = LineValidator(tokenize("a + (b) ; x"))
    assert validator.expr(0) == 5
    assert validator.type_at(5) == "SEMI"


def test_expression_failure_value() -> None:
    validator = LineValidator(tokenize("+"))
    assert validator.expr(0) == Failure("invalid expression")


@pytest.mark.parametrize(
    "line,expected",
    [("-5", True), ("+12", True), ("- 5", False), ("-a", False), ("*5", False), ("-", False)],
)
def test_signed_number_requires_touching_sign(line: str, expected: bool) -> None:
    assert LineValidator(tokenize(line)).signed_number(0) is expected


def test_at_past_end_is_eol() -> None:
    validator = LineValidator(tokenize("x"))
    assert validator.at(10).type == "EOL"


# Properties

identifiers = st.from_regex(r"[a-z][a-z0-9]{0,5}", fullmatch=True).filter(
    lambda s: s
    not in {
        "if",
        "while",
        "endwhile",
        "read",
        "write",
        "goto",
        "gosub",
        "return",
        "break",
        "end",
        "true",
        "false",
    }
)
numbers = st.integers(min_value=-999, max_value=999).map(str)


@composite
def expressions(draw: Any, depth: int = 3) -> str:
    operand = draw(st.one_of(identifiers, numbers))
    if depth > 0 and draw(st.booleans()):
        operand = "(" + draw(expressions(depth=depth - 1)) + ")"
    if depth > 0 and draw(st.booleans()):
        op = draw(st.sampled_from(["+", "-", "*", "/"]))
        return f"{operand} {op} {draw(expressions(depth=depth - 1))}"
    return operand


@composite
def statements(draw: Any) -> str:
    kind = draw(st.sampled_from(["assign", "if", "read", "write", "goto", "bare"]))
    if kind == "assign":
        return f"{draw(identifiers)} = {draw(expressions())}"
    if kind == "if":
        op = draw(st.sampled_from(["<", ">", "<=", ">=", "<>", "="]))
        return f"if {draw(expressions())} {op} {draw(expressions())}"
    if kind == "read":
        return f"read {draw(identifiers)}"
    if kind == "write":
        return f"write {draw(expressions())}"
    if kind == "goto":
        return f"{draw(st.sampled_from(['goto', 'gosub']))} {draw(identifiers)}"
    return draw(st.sampled_from(["return", "break", "end"]))


@composite
def valid_lines(draw: Any) -> str:
    line = "; ".join(draw(st.lists(statements(), min_size=1, max_size=3)))
    if draw(st.booleans()):
        line = f"{draw(identifiers)}: {line}"
    return line


@settings(max_examples=200)  # type: ignore[misc]
@given(st.lists(valid_lines(), max_size=10))  # type: ignore[misc]
def test_valid_programs_accept(lines: list[str]) -> None:
    assert validate(lines + ["$$"]) == Accept()


@given(st.lists(valid_lines(), max_size=10))  # type: ignore[misc]
def test_missing_sentinel_is_error(lines: list[str]) -> None:
    result = validate(lines)
    assert result == error(len(lines) + 1, "missing sentinel marker")


@given(  # type: ignore[misc]
    st.lists(valid_lines(), max_size=8),
    st.sampled_from(["x =", "write 1+", "endwhile", "goto", "(a+1", "a: b:"]),
    st.lists(valid_lines(), max_size=4),
)
def test_error_line_is_first_failing_line(
    before: list[str], bad: str, after: list[str]
) -> None:
    result = validate(before + [bad] + after + ["$$"])
    assert isinstance(result, SyntaxErrorResult)
    assert result.line == len(before) + 1


@given(st.lists(st.text(max_size=20), max_size=10))  # type: ignore[misc]
def test_validation_is_idempotent(lines: list[str]) -> None:
    assert validate(lines) == validate(lines)


@given(st.lists(st.text(max_size=30), max_size=10))  # type: ignore[misc]
def test_never_raises_on_arbitrary_text(lines: list[str]) -> None:
    result = validate(lines + ["$$"])
    assert isinstance(result, (Accept, SyntaxErrorResult))
    if isinstance(result, SyntaxErrorResult):
        assert 1 <= result.line <= len(lines) + 1
