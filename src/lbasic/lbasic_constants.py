"""
Token tables and shared constants for the LBASIC syntax checker.

Every lexeme the lexer can produce is mapped to a canonical token type in
`token_hashmap`. The token types are grouped into categories so that a token's
kind (keyword, operator, punctuation, ...) is fixed when it is produced rather
than re-derived by whoever consumes it.

Exports:
    - token_hashmap: lexeme -> canonical token type
    - KEYWORD_TOKENS, LITERAL_TOKENS, OPERATOR_TOKENS, PUNCTUATION_TOKENS
    - SENTINEL: the end-of-program marker line
    - ERROR_MESSAGES: user-facing text for every syntax error kind
"""

SENTINEL = "$$"

token_hashmap: dict[str, str] = {
    # Keywords
    "if": "IF",
    "while": "WHILE",
    "endwhile": "ENDWHILE",
    "read": "READ",
    "write": "WRITE",
    "goto": "GOTO",
    "gosub": "GOSUB",
    "return": "RETURN",
    "break": "BREAK",
    "end": "END",
    # Boolean literals
    "true": "LITERAL",
    "false": "LITERAL",
    # Arithmetic operators
    "+": "PLUS",
    "-": "SUB",
    "*": "MULT",
    "/": "DIV",
    # Relational operators ("=" is also the assignment symbol)
    "<": "LT",
    ">": "GT",
    "<=": "LE",
    ">=": "GE",
    "<>": "NE",
    "=": "EQUALS",
    # Punctuation
    "(": "LPAREN",
    ")": "RPAREN",
    ";": "SEMI",
    ":": "COLON",
}

KEYWORD_TOKENS: frozenset[str] = frozenset(
    {
        "IF",
        "WHILE",
        "ENDWHILE",
        "READ",
        "WRITE",
        "GOTO",
        "GOSUB",
        "RETURN",
        "BREAK",
        "END",
    }
)

LITERAL_TOKENS: frozenset[str] = frozenset({"LITERAL"})

OPERATOR_TOKENS: frozenset[str] = frozenset(
    {"PLUS", "SUB", "MULT", "DIV", "LT", "GT", "LE", "GE", "NE", "EQUALS"}
)

PUNCTUATION_TOKENS: frozenset[str] = frozenset({"LPAREN", "RPAREN", "SEMI", "COLON"})

# Characters that may start an operator or punctuation lexeme
SYMBOL_CHARS = frozenset(k[0] for k in token_hashmap if not k[0].isalpha())

ERROR_MESSAGES: dict[str, str] = {
    "label": "invalid label",
    "statement": "invalid statement",
    "expression": "invalid expression",
    "expression_tail": "invalid expression tail",
    "boolean": "invalid boolean",
    "boolean_operator": "invalid boolean operator",
    "endwhile": "endwhile without open while",
    "paren": "unbalanced parenthesis",
    "sentinel": "missing sentinel marker",
    "unclosed_while": "while without matching endwhile",
}

__all__ = [
    "ERROR_MESSAGES",
    "KEYWORD_TOKENS",
    "LITERAL_TOKENS",
    "OPERATOR_TOKENS",
    "PUNCTUATION_TOKENS",
    "SENTINEL",
    "SYMBOL_CHARS",
    "token_hashmap",
]
