"""
Lexical analyzer for LBASIC source lines.

This module turns one raw source line into an immutable tuple of tagged tokens:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Discards whitespace and splits on parenthesis boundaries
    - Longest-match recognition of operators (`<=`, `>=`, `<>` before `<`, `>`, `=`)
    - Recognizes:
        * Identifiers and keywords (case-sensitive, lowercase keywords)
        * Unsigned integer literals
        * Boolean literals `true` / `false`
        * Arithmetic and relational operators, punctuation `( ) ; :`
    - Never raises: an unknown character becomes a one-character ERROR token and
      is rejected by whichever validator tries to consume it.

Example:
    >>> tokenize("x = a+1")
    (Token(IDENT, x), Token(EQUALS, =), Token(IDENT, a), Token(PLUS, +), Token(NUMBER, 1), Token(EOL, ))

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
    - split_label
    - is_identifier, is_number, is_digit
"""

import re
from typing import Any

from lbasic.lbasic_constants import (
    KEYWORD_TOKENS,
    LITERAL_TOKENS,
    OPERATOR_TOKENS,
    PUNCTUATION_TOKENS,
    SYMBOL_CHARS,
    token_hashmap,
)

_IDENTIFIER_RE = re.compile(r"[A-Za-z][A-Za-z0-9]*")
_NUMBER_RE = re.compile(r"[+-]?[0-9]+")


def is_identifier(text: str) -> bool:
    """One letter followed by zero or more letters or digits."""
    return _IDENTIFIER_RE.fullmatch(text) is not None


def is_number(text: str) -> bool:
    """Optional leading sign followed by one or more digits."""
    return _NUMBER_RE.fullmatch(text) is not None


def is_digit(text: str) -> bool:
    return len(text) == 1 and "0" <= text <= "9"


def _is_word_char(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            IndexError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise IndexError(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token of an LBASIC line.

    Tokens are immutable once produced.

    Attributes:
        type (str): The canonical token type (e.g. 'IDENT', 'NUMBER', 'WHILE', 'EOL').
        value (str): The raw lexeme.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    __slots__ = ("type", "value", "line", "col")

    type: str
    value: str
    line: int
    col: int

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "col", col)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable; cannot set {name!r}")

    @property
    def kind(self) -> str:
        """The token's category: identifier, number, keyword, operator,
        punctuation, error or eol."""
        if self.type == "IDENT":
            return "identifier"
        if self.type == "NUMBER":
            return "number"
        if self.type in KEYWORD_TOKENS or self.type in LITERAL_TOKENS:
            return "keyword"
        if self.type in OPERATOR_TOKENS:
            return "operator"
        if self.type in PUNCTUATION_TOKENS:
            return "punctuation"
        if self.type == "EOL":
            return "eol"
        return "error"

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))


class Lexer:
    """Lexical analyzer for a single LBASIC line.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek().isspace():
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest operator or punctuation lexeme.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        max_token = None
        match_len = 0
        candidate = ""

        for i in range(2):  # longest symbol lexeme is two characters
            ch = self.stream.peek(i)
            if ch == "" or ch not in SYMBOL_CHARS:
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate
                match_len = i + 1

        if max_token:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns an EOL token once the line is exhausted.
        """
        self.skip_whitespace()

        line, col = self.stream.line, self.stream.column
        if self.stream.end_of_file():
            return Token("EOL", "", line, col)

        ch = self.peek()

        # 1. Identifier or keyword
        if is_identifier(ch):
            ident = ""
            while not self.stream.end_of_file() and _is_word_char(self.peek()):
                ident += self.advance()
            if ident in token_hashmap:
                return Token(token_hashmap[ident], ident, line, col)
            return Token("IDENT", ident, line, col)

        # 2. Unsigned integer; signs are operators until the validator pairs them
        if is_digit(ch):
            num = ""
            while not self.stream.end_of_file() and is_digit(self.peek()):
                num += self.advance()
            return Token("NUMBER", num, line, col)

        # 3. Operators and punctuation
        token = self.match_operator()
        if token:
            return token

        # 4. Unknown character
        return Token("ERROR", self.advance(), line, col)


def tokenize(text: str, line: int = 1) -> tuple[Token, ...]:
    """Tokenize one source line into an immutable tuple ending with an EOL token."""
    lexer = Lexer(CharacterStream(text, 0, line, 1))
    tokens = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type == "EOL":
            break
    return tuple(tokens)


def split_label(tokens: tuple[Token, ...]) -> int | None:
    """Locate the statement that follows an optional `id:` label.

    Returns:
        int | None: 2 when the line opens with a valid label, 0 when the line
        has no colon at all, and None when a colon appears anywhere else.
    """
    colons = [i for i, tok in enumerate(tokens) if tok.type == "COLON"]
    if not colons:
        return 0
    if colons == [1] and tokens[0].type == "IDENT":
        return 2
    return None


__all__ = [
    "CharacterStream",
    "Lexer",
    "Token",
    "is_digit",
    "is_identifier",
    "is_number",
    "split_label",
    "token_hashmap",
    "tokenize",
]
