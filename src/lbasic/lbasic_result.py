"""
Result and context types shared by the LBASIC validators.

Classes:
    Accept:
        The program is syntactically valid. Renders as ``Accept``.
    SyntaxErrorResult:
        The first syntax error found, with its 1-based line number and message.
        Renders as ``Syntax error on line <N>: <message>``.
    Failure:
        Internal failure value returned by descent functions in place of a
        cursor. It carries only the message; the line validator attaches the
        line number when it turns a Failure into a SyntaxErrorResult.
    ParseContext:
        Immutable per-line state threaded through the validators: the current
        line number and how many `while` blocks are open.

Validators never raise for syntax errors. Every descent function returns either
the next cursor (an ``int``) or a ``Failure``, and callers return the first
Failure they see unchanged.
"""

from typing import Any, NamedTuple


class Accept:
    """The unconditional acceptance result."""

    def __repr__(self) -> str:
        return "Accept()"

    def __str__(self) -> str:
        return "Accept"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Accept)

    def __hash__(self) -> int:
        return hash("Accept")

    def __bool__(self) -> bool:
        return True


class SyntaxErrorResult:
    """The first syntax error of a program.

    Attributes:
        line (int): 1-based line number of the line being validated.
        message (str): One of the messages in `ERROR_MESSAGES`.
    """

    def __init__(self, line: int, message: str) -> None:
        self.line = line
        self.message = message

    def __repr__(self) -> str:
        return f"SyntaxErrorResult(line={self.line}, message={self.message!r})"

    def __str__(self) -> str:
        return f"Syntax error on line {self.line}: {self.message}"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, SyntaxErrorResult)
            and self.line == other.line
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((self.line, self.message))

    def __bool__(self) -> bool:
        return False


ValidationResult = Accept | SyntaxErrorResult


class Failure:
    """A failed descent step."""

    __slots__ = ("message",)

    def __init__(self, message: str) -> None:
        self.message = message

    def __repr__(self) -> str:
        return f"Failure({self.message!r})"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Failure) and self.message == other.message

    def __hash__(self) -> int:
        return hash(self.message)


Step = int | Failure
"""Either the cursor after a successful descent step or the Failure that stopped it."""


class ParseContext(NamedTuple):
    line: int = 0
    while_depth: int = 0

    def next_line(self) -> "ParseContext":
        return self._replace(line=self.line + 1)

    def open_while(self) -> "ParseContext":
        return self._replace(while_depth=self.while_depth + 1)

    def close_while(self) -> "ParseContext":
        return self._replace(while_depth=self.while_depth - 1)


__all__ = [
    "Accept",
    "Failure",
    "ParseContext",
    "Step",
    "SyntaxErrorResult",
    "ValidationResult",
]
