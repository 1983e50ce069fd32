"""
LBASIC syntax validator.

Predictive (LL(1)) recursive-descent validation of LBASIC programs. Each source
line is tokenized once and walked left to right by the descent functions of
`LineValidator`, which mirror the productions of `lbasic_grammar.LINE_GRAMMAR`
and choose between alternatives by looking at one token only.

Validation Model
----------------
- Descent functions take a cursor into the line's immutable token tuple and
  return the cursor after what they consumed, or a `Failure`.
- The first Failure anywhere aborts the line and, with it, the whole program.
- Per-line state (line number, open `while` depth) is an immutable
  `ParseContext` passed in and returned; nothing is kept between calls.
- Arithmetic expressions are flat: every operator is followed by a full
  expression, with no precedence.

Entry Points
------------
- `validate(lines)`: validate a whole program up to the `$$` sentinel line.
- `validate_line(text, ctx)`: validate a single line in a given context.

Returns
-------
Accept | SyntaxErrorResult
    `Accept()` for a valid program, otherwise the line number and message of
    the first syntax error.
"""

from collections.abc import Callable, Iterable

from lbasic.lbasic_constants import ERROR_MESSAGES, SENTINEL
from lbasic.lbasic_grammar import (
    ARITH_OPS,
    EXPR_START,
    FOLLOW,
    RELATIONAL_OPS,
)
from lbasic.lbasic_lexer import Token, is_number, split_label, tokenize
from lbasic.lbasic_result import (
    Accept,
    Failure,
    ParseContext,
    Step,
    SyntaxErrorResult,
    ValidationResult,
)

# Tokens that may legally follow a complete statement: `;` or end of line
STATEMENT_END = FOLLOW["stmt"]

StatementStep = tuple[int, ParseContext] | Failure


class LineValidator:
    """
    Validates the token sequence of one LBASIC line.

    Attributes
    ----------
    tokens : tuple[Token, ...]
        The line's tokens, ending with an EOL token. Never modified.

    Methods
    -------
    line(ctx) -> ParseContext | Failure
        line -> label stmt linetail
    statement(pos, ctx) -> tuple[int, ParseContext] | Failure
        One of the eleven statement forms.
    expr(pos) -> int | Failure
        expr -> operand etail
    boolean(pos) -> int | Failure
        boolean -> true | false | expr relop expr | ( expr relop expr )
    """

    def __init__(self, tokens: tuple[Token, ...]) -> None:
        self.tokens = tokens

    def at(self, pos: int) -> Token:
        # Past the end, keep answering with the trailing EOL token
        return self.tokens[pos] if pos < len(self.tokens) else self.tokens[-1]

    def type_at(self, pos: int) -> str:
        return self.at(pos).type

    # Expressions

    def expr(self, pos: int) -> Step:
        end = self.operand(pos)
        if isinstance(end, Failure):
            return end
        return self.etail(end)

    def operand(self, pos: int) -> Step:
        tok = self.at(pos)
        if tok.kind in ("identifier", "number"):
            return pos + 1
        if self.signed_number(pos):
            return pos + 2
        if tok.type == "LPAREN":
            inner = self.expr(pos + 1)
            if isinstance(inner, Failure):
                return inner
            return self.close_paren(inner)
        return Failure(ERROR_MESSAGES["expression"])

    def signed_number(self, pos: int) -> bool:
        """A sign token touching the digits after it, as in `-5` but not `- 5`."""
        sign, digits = self.at(pos), self.at(pos + 1)
        return sign.col + len(sign.value) == digits.col and is_number(
            sign.value + digits.value
        )

    def etail(self, pos: int) -> Step:
        if self.type_at(pos) in ARITH_OPS:
            return self.expr(pos + 1)
        return pos

    def close_paren(self, pos: int) -> Step:
        tok = self.type_at(pos)
        if tok == "RPAREN":
            return pos + 1
        if tok == "EOL":
            return Failure(ERROR_MESSAGES["paren"])
        return Failure(ERROR_MESSAGES["expression_tail"])

    # Booleans

    def boolean(self, pos: int) -> Step:
        tok = self.type_at(pos)
        if tok == "LITERAL":
            return pos + 1
        if tok == "LPAREN":
            return self.paren_boolean(pos + 1)
        if tok not in EXPR_START:
            return Failure(ERROR_MESSAGES["boolean"])
        left = self.expr(pos)
        if isinstance(left, Failure):
            return left
        return self.comparison(left)

    def paren_boolean(self, pos: int) -> Step:
        """After `(`: either `expr relop expr )` or `expr ) etail relop expr`."""
        inner = self.expr(pos)
        if isinstance(inner, Failure):
            return inner
        if self.type_at(inner) in RELATIONAL_OPS:
            right = self.expr(inner + 1)
            if isinstance(right, Failure):
                return right
            return self.close_paren(right)
        closed = self.close_paren(inner)
        if isinstance(closed, Failure):
            return closed
        left = self.etail(closed)
        if isinstance(left, Failure):
            return left
        return self.comparison(left)

    def comparison(self, pos: int) -> Step:
        if self.type_at(pos) not in RELATIONAL_OPS:
            return Failure(ERROR_MESSAGES["boolean_operator"])
        return self.expr(pos + 1)

    # Statements

    def statement(self, pos: int, ctx: ParseContext) -> StatementStep:
        match self.type_at(pos):
            case "IDENT":
                if self.type_at(pos + 1) != "EQUALS":
                    return Failure(ERROR_MESSAGES["statement"])
                return self.end_of_expression(self.expr(pos + 2), ctx)
            case "IF":
                return self.end_of_expression(self.boolean(pos + 1), ctx)
            case "WHILE":
                return self.end_of_expression(self.boolean(pos + 1), ctx.open_while())
            case "ENDWHILE":
                if ctx.while_depth == 0:
                    return Failure(ERROR_MESSAGES["endwhile"])
                return self.end_of_statement(pos + 1, ctx.close_while())
            case "READ" | "GOTO" | "GOSUB":
                if self.type_at(pos + 1) != "IDENT":
                    return Failure(ERROR_MESSAGES["statement"])
                return self.end_of_statement(pos + 2, ctx)
            case "WRITE":
                return self.end_of_expression(self.expr(pos + 1), ctx)
            case "RETURN" | "BREAK" | "END":
                return self.end_of_statement(pos + 1, ctx)
            case _:
                return Failure(ERROR_MESSAGES["statement"])

    def end_of_statement(self, pos: int, ctx: ParseContext) -> StatementStep:
        if self.type_at(pos) in STATEMENT_END:
            return pos, ctx
        return Failure(ERROR_MESSAGES["statement"])

    def end_of_expression(self, step: Step, ctx: ParseContext) -> StatementStep:
        if isinstance(step, Failure):
            return step
        tok = self.type_at(step)
        if tok in STATEMENT_END:
            return step, ctx
        if tok == "RPAREN":
            return Failure(ERROR_MESSAGES["paren"])
        return Failure(ERROR_MESSAGES["expression_tail"])

    # Lines

    def line(self, ctx: ParseContext) -> ParseContext | Failure:
        start = split_label(self.tokens)
        if start is None:
            return Failure(ERROR_MESSAGES["label"])
        step = self.statement(start, ctx)
        while not isinstance(step, Failure):
            pos, ctx = step
            if self.type_at(pos) != "SEMI":
                return ctx
            step = self.statement(pos + 1, ctx)
        return step


def validate_line(text: str, ctx: ParseContext) -> ParseContext | SyntaxErrorResult:
    """Validate one line; returns the context for the next line or the error."""
    outcome = LineValidator(tokenize(text, ctx.line)).line(ctx)
    if isinstance(outcome, Failure):
        return SyntaxErrorResult(ctx.line, outcome.message)
    return outcome


def validate(
    lines: Iterable[str],
    *,
    strict: bool = False,
    trace: Callable[[int, str], None] | None = None,
) -> ValidationResult:
    """
    Validate an LBASIC program given as a sequence of lines.

    Lines are checked in order until one that is exactly `$$` once trimmed;
    lines after it are never examined.

    Args:
        lines: The program's source lines, without or with trailing newlines.
        strict: If True, reaching `$$` while a `while` block is still open is an error.
        trace: Optional callback invoked with (line_number, text) for every line examined.

    Returns:
        Accept | SyntaxErrorResult: Acceptance, or the first syntax error.
    """
    ctx = ParseContext()
    for text in lines:
        ctx = ctx.next_line()
        if trace is not None:
            trace(ctx.line, text)
        if text.strip() == SENTINEL:
            if strict and ctx.while_depth > 0:
                return SyntaxErrorResult(ctx.line, ERROR_MESSAGES["unclosed_while"])
            return Accept()
        outcome = validate_line(text, ctx)
        if isinstance(outcome, SyntaxErrorResult):
            return outcome
        ctx = outcome
    return SyntaxErrorResult(ctx.line + 1, ERROR_MESSAGES["sentinel"])


__all__ = ["LineValidator", "validate", "validate_line"]
